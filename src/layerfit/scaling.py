"""Bounding-box scale computation.

The editor's resize primitive works in percentages of the current size, so a
pixel bounding box has to be turned into a pair of relative scale factors
first.
"""

from __future__ import annotations

import logging
import math
from typing import Final, Optional

logger: Final = logging.getLogger(__name__)


def compute_scales(
    current_width: float,
    current_height: float,
    target_width: Optional[float] = None,
    target_height: Optional[float] = None,
    constrain: bool = True,
) -> tuple[float, float]:
    """Calculate the percentage scale factors that fit a layer into a box.

    With ``constrain`` a single mutual scale is used for both axes: the scale
    of the only given target, or the smaller of the two so the result fits
    entirely inside the box. Without it each axis is scaled on its own and an
    axis with no target stays at 100%.

    Preconditions (checked by the caller): both current dimensions are
    positive and at least one positive target is given.

    Args:
        current_width: Current layer width in pixels
        current_height: Current layer height in pixels
        target_width: Target box width in pixels, or None
        target_height: Target box height in pixels, or None
        constrain: Keep the aspect ratio

    Returns:
        Tuple of (width_percent, height_percent)
    """
    # Multiply before dividing: 80 * 100 / 200 == 40.0 exactly
    scale_width = target_width * 100 / current_width if target_width else None
    scale_height = target_height * 100 / current_height if target_height else None

    if constrain:
        if scale_width is None or scale_height is None:
            scale = scale_height if scale_width is None else scale_width
        elif scale_width >= scale_height:
            scale = scale_height
        else:
            scale = scale_width
        width_percent = height_percent = 100.0 if scale is None else scale
    else:
        width_percent = 100.0 if scale_width is None else scale_width
        height_percent = 100.0 if scale_height is None else scale_height

    logger.debug(
        "Scales for %sx%s into %sx%s (constrain=%s): %.4f%% x %.4f%%",
        current_width,
        current_height,
        target_width,
        target_height,
        constrain,
        width_percent,
        height_percent,
    )
    return (width_percent, height_percent)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scaled_size(
    width: int, height: int, width_percent: float, height_percent: float
) -> tuple[int, int]:
    """Pixel size produced by scaling ``width`` x ``height`` by percentages.

    Halves round up and neither side drops below one pixel.
    """
    return (
        max(1, round_half_up(width * width_percent / 100)),
        max(1, round_half_up(height * height_percent / 100)),
    )
