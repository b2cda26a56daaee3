"""
social_service package

This package contains the backend of the social platform.
It includes:

- FastAPI application factory (`main.py`)
- SQLAlchemy models and the storage handle (`models.py`, `db.py`)
- Follow relation store and relationship resolver (`follow_store.py`, `follow_service.py`)
- Authentication, JWT logic and account flows (`auth.py`, `accounts.py`)
- Pydantic schemas (`schemas.py`) and settings (`config.py`)
"""
