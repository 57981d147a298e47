"""Resize the active layer of a layered document to a bounding box in pixels."""

__version__ = "0.1.0"
