"""Pillow-backed layered document.

A document is a fixed-size canvas holding a stack of RGBA layers. Each layer
keeps only its own pixels plus an offset on the canvas, so a layer can be
larger than the canvas or hang partly off it. Documents are stored as a YAML
manifest (see ``layerfit.host.manifest``) with one PNG per layer.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Final

from PIL import Image

from layerfit.errors import BackgroundLayerError, EmptyLayerError
from layerfit.host.manifest import DocumentManifest, LayerEntry
from layerfit.host.units import Preferences, RulerUnits, UnitValue
from layerfit.scaling import round_half_up, scaled_size
from layerfit.utils.file import ensure_directory_exists

logger: Final = logging.getLogger(__name__)

_ROWS: Final = {"top": 0.0, "middle": 0.5, "bottom": 1.0}
_COLUMNS: Final = {"left": 0.0, "center": 0.5, "right": 1.0}


class AnchorPosition(Enum):
    """Point of the layer bounds that stays fixed during a resize."""

    TOPLEFT = "topleft"
    TOPCENTER = "topcenter"
    TOPRIGHT = "topright"
    MIDDLELEFT = "middleleft"
    MIDDLECENTER = "middlecenter"
    MIDDLERIGHT = "middleright"
    BOTTOMLEFT = "bottomleft"
    BOTTOMCENTER = "bottomcenter"
    BOTTOMRIGHT = "bottomright"

    @property
    def factors(self) -> tuple[float, float]:
        """Horizontal and vertical position of the anchor within the bounds (0-1)."""
        for row, vertical in _ROWS.items():
            if self.value.startswith(row):
                return (_COLUMNS[self.value[len(row) :]], vertical)
        raise AssertionError(f"unmapped anchor {self.value}")  # pragma: no cover


class ResampleMethod(Enum):
    """Interpolation used when layer pixels are resampled."""

    NEAREST = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    LANCZOS = "lanczos"

    @property
    def pil_filter(self) -> Image.Resampling:
        return {
            ResampleMethod.NEAREST: Image.Resampling.NEAREST,
            ResampleMethod.BILINEAR: Image.Resampling.BILINEAR,
            ResampleMethod.BICUBIC: Image.Resampling.BICUBIC,
            ResampleMethod.LANCZOS: Image.Resampling.LANCZOS,
        }[self]


class PixelLayer:
    """A single raster layer.

    Attributes:
        name: Layer name, unique within its document
        image: RGBA pixels of the layer
        x: Canvas offset of the image's left edge (px, may be negative)
        y: Canvas offset of the image's top edge (px, may be negative)
        is_background: Locked bottom layer that cannot be transformed
        visible: Whether the layer takes part in the composite
        file: File name used when the document is saved
    """

    def __init__(
        self,
        name: str,
        image: Image.Image,
        x: int = 0,
        y: int = 0,
        is_background: bool = False,
        visible: bool = True,
        file: str | None = None,
    ) -> None:
        self.name = name
        self.image = image if image.mode == "RGBA" else image.convert("RGBA")
        self.x = x
        self.y = y
        self.is_background = is_background
        self.visible = visible
        self.file = file
        self.document: LayeredDocument | None = None

    def _content_box(self) -> tuple[int, int, int, int] | None:
        return self.image.getchannel("A").getbbox()

    @property
    def pixel_bounds(self) -> tuple[int, int, int, int]:
        """Canvas box (left, top, right, bottom) of the non-transparent pixels.

        An empty layer collapses to a zero-size box at its offset.
        """
        box = self._content_box()
        if box is None:
            return (self.x, self.y, self.x, self.y)
        left, top, right, bottom = box
        return (self.x + left, self.y + top, self.x + right, self.y + bottom)

    @property
    def bounds(self) -> tuple[UnitValue, UnitValue, UnitValue, UnitValue]:
        """Layer bounds in the editor's current ruler units."""
        left, top, right, bottom = self.pixel_bounds
        if self.document is None:
            units, resolution = RulerUnits.PIXELS, 72.0
            ref_width = ref_height = None
        else:
            units = self.document.preferences.ruler_units
            resolution = self.document.resolution
            ref_width, ref_height = float(self.document.width), float(self.document.height)

        return (
            UnitValue.from_pixels(left, units, resolution, ref_width),
            UnitValue.from_pixels(top, units, resolution, ref_height),
            UnitValue.from_pixels(right, units, resolution, ref_width),
            UnitValue.from_pixels(bottom, units, resolution, ref_height),
        )

    @property
    def size(self) -> tuple[int, int]:
        """Width and height of the layer content in pixels."""
        left, top, right, bottom = self.pixel_bounds
        return (right - left, bottom - top)

    def resize(
        self,
        width_percent: float,
        height_percent: float,
        anchor: AnchorPosition = AnchorPosition.MIDDLECENTER,
        resample: ResampleMethod = ResampleMethod.BICUBIC,
    ) -> None:
        """Scale the layer content by percentages around ``anchor``.

        Args:
            width_percent: New width as a percentage of the current width
            height_percent: New height as a percentage of the current height
            anchor: Point of the current bounds that keeps its position
            resample: Interpolation filter

        Raises:
            ValueError: If either percentage is not positive
            BackgroundLayerError: If this is the background layer
            EmptyLayerError: If the layer has no visible pixels
        """
        if width_percent <= 0 or height_percent <= 0:
            raise ValueError(
                f"Resize percentages must be positive (got {width_percent}, {height_percent})"
            )
        if self.is_background:
            raise BackgroundLayerError(self.name)

        box = self._content_box()
        if box is None:
            raise EmptyLayerError(self.name)

        content = self.image.crop(box)
        old_width, old_height = content.size
        new_width, new_height = scaled_size(old_width, old_height, width_percent, height_percent)

        horizontal, vertical = anchor.factors
        anchor_x = self.x + box[0] + horizontal * old_width
        anchor_y = self.y + box[1] + vertical * old_height

        self.image = content.resize((new_width, new_height), resample.pil_filter)
        self.x = round_half_up(anchor_x - horizontal * new_width)
        self.y = round_half_up(anchor_y - vertical * new_height)

        logger.debug(
            "Layer '%s' %dx%d -> %dx%d at (%d, %d)",
            self.name,
            old_width,
            old_height,
            new_width,
            new_height,
            self.x,
            self.y,
        )

    def __repr__(self) -> str:
        return f"PixelLayer({self.name!r}, bounds={self.pixel_bounds}, background={self.is_background})"


def _file_stem(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "_", name).strip("_").lower() or "layer"


class LayeredDocument:
    """A canvas with an ordered stack of layers (bottom to top).

    The most recently added layer becomes the active one, as it does when a
    layer is created in an editor.
    """

    def __init__(
        self,
        name: str,
        width: int,
        height: int,
        resolution: float = 72.0,
        preferences: Preferences | None = None,
        path: Path | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive (got {width}x{height})")
        self.name = name
        self.width = width
        self.height = height
        self.resolution = resolution
        self.preferences = preferences or Preferences()
        self.path = path
        self.layers: list[PixelLayer] = []
        self._active_layer: PixelLayer | None = None

    def add_layer(self, layer: PixelLayer) -> PixelLayer:
        """Put ``layer`` on top of the stack and make it active."""
        if any(existing.name == layer.name for existing in self.layers):
            raise ValueError(f"Layer '{layer.name}' already exists in '{self.name}'")
        if layer.is_background and self.layers:
            raise ValueError("A background layer can only be the bottom layer")
        layer.document = self
        self.layers.append(layer)
        self._active_layer = layer
        return layer

    @property
    def active_layer(self) -> PixelLayer:
        if self._active_layer is None:
            raise LookupError(f"Document '{self.name}' has no layers")
        return self._active_layer

    @active_layer.setter
    def active_layer(self, layer: PixelLayer) -> None:
        if layer not in self.layers:
            raise ValueError(f"Layer '{layer.name}' does not belong to '{self.name}'")
        self._active_layer = layer

    @property
    def background_layer(self) -> PixelLayer | None:
        if self.layers and self.layers[0].is_background:
            return self.layers[0]
        return None

    def get_layer(self, name: str) -> PixelLayer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(name)

    def select_layer(self, name: str) -> PixelLayer:
        """Make the layer called ``name`` active and return it."""
        layer = self.get_layer(name)
        self._active_layer = layer
        return layer

    def flatten(self) -> Image.Image:
        """Composite the visible layers onto a transparent canvas."""
        canvas = Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))
        for layer in self.layers:
            if not layer.visible:
                continue
            overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
            # paste() clips at the canvas edges, negative offsets included
            overlay.paste(layer.image, (layer.x, layer.y))
            canvas = Image.alpha_composite(canvas, overlay)
        return canvas

    @classmethod
    def load(cls, path: Path, preferences: Preferences | None = None) -> LayeredDocument:
        """Open a document from its manifest.

        Raises:
            FileNotFoundError: If the manifest does not exist
            RuntimeError: If the manifest is invalid or a layer image is unreadable
        """
        manifest = DocumentManifest.load(path)
        document = cls(
            manifest.name,
            manifest.width,
            manifest.height,
            resolution=manifest.resolution,
            preferences=preferences,
            path=path,
        )
        for entry in manifest.layers:
            image_path = path.parent / entry.file
            try:
                with Image.open(image_path) as img:
                    image = img.convert("RGBA")
            except OSError as exc:
                raise RuntimeError(f"Unable to read layer image {image_path}: {exc}") from exc
            document.add_layer(
                PixelLayer(
                    entry.name,
                    image,
                    x=entry.x,
                    y=entry.y,
                    is_background=entry.background,
                    visible=entry.visible,
                    file=entry.file,
                )
            )

        if manifest.active_layer is not None:
            document.select_layer(manifest.active_layer)
        logger.debug("Opened '%s' with %d layer(s) from %s", document.name, len(document.layers), path)
        return document

    def save(self, path: Path | None = None) -> Path:
        """Write the manifest and every layer image.

        Args:
            path: Manifest path (default: the path the document was loaded from)

        Returns:
            The manifest path written
        """
        target = path or self.path
        if target is None:
            raise ValueError(f"Document '{self.name}' has no path to save to")
        ensure_directory_exists(target.parent)

        entries: list[LayerEntry] = []
        used: set[str] = set()
        for index, layer in enumerate(self.layers):
            file = layer.file or f"{_file_stem(layer.name)}.png"
            if file in used:
                file = f"{Path(file).stem}_{index}.png"
            used.add(file)
            layer.file = file

            layer_path = target.parent / file
            ensure_directory_exists(layer_path.parent)
            layer.image.save(layer_path, format="PNG")
            entries.append(
                LayerEntry(
                    name=layer.name,
                    file=file,
                    x=layer.x,
                    y=layer.y,
                    background=layer.is_background,
                    visible=layer.visible,
                )
            )

        DocumentManifest(
            name=self.name,
            width=self.width,
            height=self.height,
            resolution=self.resolution,
            active_layer=self._active_layer.name if self._active_layer else None,
            layers=entries,
        ).dump(target)
        self.path = target
        logger.debug("Saved '%s' to %s", self.name, target)
        return target
