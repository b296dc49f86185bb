# Export all admission models for easy imports
from .base import Base
from .cutoff import CutoffRow

__all__ = [
    "Base",
    "CutoffRow",
]
