"""Host package - the editor, its documents, preferences and prompts."""

from layerfit.host.document import AnchorPosition, LayeredDocument, PixelLayer, ResampleMethod
from layerfit.host.editor import Editor
from layerfit.host.units import Preferences, RulerUnits, UnitValue, ruler_units

__all__ = [
    "AnchorPosition",
    "Editor",
    "LayeredDocument",
    "PixelLayer",
    "Preferences",
    "ResampleMethod",
    "RulerUnits",
    "UnitValue",
    "ruler_units",
]
