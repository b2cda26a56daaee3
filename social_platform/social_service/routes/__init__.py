from . import company
from . import follow
from . import health
from . import publication
from . import user

__all__ = [
    "company",
    "follow",
    "health",
    "publication",
    "user",
]
