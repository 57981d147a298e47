# filepath: src/layerfit/controller.py
"""Core controller for resizing a layer to a pixel bounding box."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from layerfit.errors import BackgroundLayerError, EmptyLayerError, LayerFitError, NoLayerError
from layerfit.host.document import AnchorPosition, PixelLayer, ResampleMethod
from layerfit.host.editor import Editor
from layerfit.host.prompts import TyperPrompter
from layerfit.host.protocols import Prompter, ResizableLayer
from layerfit.host.units import Preferences, RulerUnits, ruler_units
from layerfit.inputs import RawDimension, RawFlag, ResizeRequest, collect_request
from layerfit.scaling import compute_scales
from layerfit.settings.user import UserSettings
from layerfit.utils.formatting import format_percentage, format_size

logger: Final = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResizeOutcome:
    """What a successful resize did to the layer."""

    layer_name: str
    old_size: tuple[float, float]
    new_size: tuple[float, float]
    width_percent: float
    height_percent: float

    def describe(self) -> str:
        return (
            f"Resized '{self.layer_name}' from {format_size(*self.old_size)} "
            f"to {format_size(*self.new_size)} "
            f"({format_percentage(self.width_percent)} x {format_percentage(self.height_percent)})"
        )


def _pixel_size(layer: ResizableLayer) -> tuple[float, float]:
    left, top, right, bottom = (value.as_pixels() for value in layer.bounds)
    return (right - left, bottom - top)


def resize_to_bounds(
    layer: ResizableLayer,
    request: ResizeRequest,
    preferences: Preferences,
    anchor: AnchorPosition = AnchorPosition.MIDDLECENTER,
    resample: ResampleMethod = ResampleMethod.BICUBIC,
) -> ResizeOutcome:
    """Resize ``layer`` so it fits the bounding box in ``request``.

    Bounds are read with the ruler units switched to pixels; the previous
    units are restored afterwards whatever happens. Sizes are converted to
    pixels from whatever units the layer reports in.

    Args:
        layer: Layer to resize
        request: Validated target box and constrain flag
        preferences: Editor preferences whose ruler units the layer reports in
        anchor: Point of the layer that keeps its position
        resample: Interpolation filter

    Returns:
        ResizeOutcome describing the change

    Raises:
        EmptyLayerError: If the layer has no measurable content
    """
    with ruler_units(preferences, RulerUnits.PIXELS):
        width, height = _pixel_size(layer)
        if width <= 0 or height <= 0:
            raise EmptyLayerError(layer.name)

        width_percent, height_percent = compute_scales(
            width, height, request.width, request.height, request.constrain
        )
        layer.resize(width_percent, height_percent, anchor, resample)
        new_width, new_height = _pixel_size(layer)

    outcome = ResizeOutcome(
        layer_name=layer.name,
        old_size=(width, height),
        new_size=(new_width, new_height),
        width_percent=width_percent,
        height_percent=height_percent,
    )
    logger.info("%s", outcome.describe())
    return outcome


class LayerResizer:
    """Resizes the editor's active layer to a pixel bounding box.

    The workflow:
    1. Make sure a document is open and its active layer is not the background
    2. Switch the ruler units to pixels for the rest of the run
    3. Collect width, height and constrain from prompts or defaults
    4. Compute the percentage scales and resize the layer
    5. Report any failure through the prompter and restore the ruler units
    """

    def __init__(
        self,
        editor: Editor,
        settings: UserSettings | None = None,
        prompter: Prompter | None = None,
        *,
        width: RawDimension = None,
        height: RawDimension = None,
        constrain: RawFlag | None = None,
        prompt_user: bool | None = None,
        anchor: AnchorPosition | None = None,
        resample: ResampleMethod | None = None,
        debug: bool = False,
    ):
        """Initialize the resizer.

        Args:
            editor: Editor holding the document to work on
            settings: Configured defaults (built-in defaults if None)
            prompter: Prompt/alert surface (terminal prompts if None)
            width: Target width overriding the configured default
            height: Target height overriding the configured default
            constrain: Constrain flag overriding the configured default
            prompt_user: Whether to prompt, overriding the configured default
            anchor: Resize anchor overriding the configured default
            resample: Resampling filter overriding the configured default
            debug: Enable debug logging
        """
        # Configure logging
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
        )

        self.editor = editor
        self.settings = settings or UserSettings()
        self.prompter: Prompter = prompter or TyperPrompter()
        self.defaults = self.settings.resize_defaults(
            width=width, height=height, constrain=constrain, prompt_user=prompt_user
        )
        self.anchor = anchor or self.settings.anchor
        self.resample = resample or self.settings.resample

    def _target_layer(self) -> PixelLayer:
        document = self.editor.active_document
        if not document.layers:
            raise NoLayerError(document.name)
        layer = document.active_layer
        if layer.is_background:
            raise BackgroundLayerError(layer.name)
        return layer

    def run(self) -> ResizeOutcome | None:
        """Resize the active layer.

        Returns:
            ResizeOutcome on success, None if the run was aborted. The reason
            for an abort has already been shown through the prompter.
        """
        try:
            layer = self._target_layer()
            with ruler_units(self.editor.preferences, RulerUnits.PIXELS):
                request = collect_request(self.defaults, self.prompter)
                return resize_to_bounds(
                    layer, request, self.editor.preferences, self.anchor, self.resample
                )
        except LayerFitError as err:
            logger.error("Resize aborted: %s", err.message)
            self.prompter.alert(err.user_message)
            return None
