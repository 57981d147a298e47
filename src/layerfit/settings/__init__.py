"""Application settings management.

This package provides:
- UserSettings: User-configurable defaults loaded from a YAML config file
"""

from layerfit.settings.user import UserSettings

__all__ = ["UserSettings"]
