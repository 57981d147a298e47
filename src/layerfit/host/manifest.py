"""YAML manifest describing a layered document on disk."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator


class LayerEntry(BaseModel):
    """One layer of the document, stored as a PNG next to the manifest."""

    name: str = Field(..., min_length=1, description="Layer name, unique within the document")
    file: str = Field(..., min_length=1, description="PNG path relative to the manifest")
    x: int = Field(0, description="Horizontal offset of the layer image on the canvas (px)")
    y: int = Field(0, description="Vertical offset of the layer image on the canvas (px)")
    background: bool = Field(False, description="Locked background layer")
    visible: bool = True


class DocumentManifest(BaseModel):
    """Schema for a document manifest.

    Layers are listed bottom to top. A background layer, if any, must come
    first and there can be only one.
    """

    name: str = Field(..., min_length=1)
    width: int = Field(..., gt=0, description="Canvas width in pixels")
    height: int = Field(..., gt=0, description="Canvas height in pixels")
    resolution: float = Field(72.0, gt=0, description="Pixels per inch")
    active_layer: str | None = Field(None, description="Name of the layer to select on open")
    layers: list[LayerEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_layers(self) -> DocumentManifest:
        names = [layer.name for layer in self.layers]
        if len(names) != len(set(names)):
            raise ValueError("layer names must be unique")
        backgrounds = [i for i, layer in enumerate(self.layers) if layer.background]
        if len(backgrounds) > 1:
            raise ValueError("only one background layer is allowed")
        if backgrounds and backgrounds[0] != 0:
            raise ValueError("the background layer must be the bottom (first) layer")
        if self.active_layer is not None and self.active_layer not in names:
            raise ValueError(f"active_layer '{self.active_layer}' is not one of the layers")
        return self

    @classmethod
    def load(cls, path: Path) -> DocumentManifest:
        """Load and validate a manifest file.

        Raises:
            FileNotFoundError: If the manifest does not exist
            RuntimeError: If the file cannot be parsed or is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Document manifest not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise RuntimeError(f"Unable to read document manifest: {exc}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise RuntimeError(f"Invalid document manifest:\n{err}") from err

    def dump(self, path: Path) -> None:
        """Write the manifest as YAML."""
        path.write_text(
            yaml.safe_dump(self.model_dump(), sort_keys=False),
            encoding="utf-8",
        )
