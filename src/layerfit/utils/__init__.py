"""Common utility functions and helpers for the layerfit package."""

from layerfit.utils.file import ensure_directory_exists
from layerfit.utils.formatting import format_percentage, format_size

__all__ = [
    "ensure_directory_exists",
    "format_percentage",
    "format_size",
]
