"""
Image uploads for avatars and company logos, stored on the local filesystem.
"""
import os
import shutil
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile, status

ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif"}


def image_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else ""


def save_image(file: UploadFile, upload_dir: str, folder: str, owner_id: int) -> str:
    """
    Store an uploaded image under ``upload_dir/folder`` and return its file name.

    Raises:
        HTTPException: 400 if the extension is not an allowed image type
    """
    extension = image_extension(file.filename)
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Extensión del fichero inválida. Tipos permitidos: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}"
        )

    target_dir = Path(upload_dir) / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = f"{owner_id}-{uuid.uuid4().hex}.{extension}"
    with open(target_dir / filename, "wb") as out:
        shutil.copyfileobj(file.file, out)
    return filename


def resolve_image(upload_dir: str, folder: str, filename: str) -> Path:
    """
    Path of a stored image.

    Raises:
        HTTPException: 404 if the file does not exist
    """
    # Only plain file names are served
    if os.path.basename(filename) != filename:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No existe la imagen")

    path = Path(upload_dir) / folder / filename
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No existe la imagen")
    return path
