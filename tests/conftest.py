from collections.abc import Generator
from pathlib import Path

import pytest
from PIL import Image

from layerfit.host.document import LayeredDocument, PixelLayer
from layerfit.host.editor import Editor
from layerfit.host.units import Preferences, RulerUnits

RED = (255, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def solid(width: int, height: int, color: tuple[int, int, int, int] = RED) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep real config files and LAYERFIT_CONFIG out of the tests."""
    monkeypatch.delenv("LAYERFIT_CONFIG", raising=False)
    monkeypatch.setattr(
        "layerfit.settings.user.UserSettings.DEFAULT_CONFIG_PATHS",
        [tmp_path / "layerfit.yaml"],
    )
    yield


@pytest.fixture
def document() -> LayeredDocument:
    """400x300 canvas: white background plus a 200x100 'logo' at (50, 40), logo active."""
    doc = LayeredDocument("poster", 400, 300)
    doc.add_layer(PixelLayer("Background", solid(400, 300, WHITE), is_background=True))
    doc.add_layer(PixelLayer("logo", solid(200, 100), x=50, y=40))
    return doc


@pytest.fixture
def editor(document: LayeredDocument) -> Editor:
    editor = Editor(Preferences(ruler_units=RulerUnits.INCHES))
    editor.add_document(document)
    return editor


@pytest.fixture
def manifest_path(tmp_path: Path, document: LayeredDocument) -> Path:
    return document.save(tmp_path / "doc" / "poster.yaml")
