"""Ruler units, unit conversion and the scoped ruler-units preference."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Final, Optional

logger: Final = logging.getLogger(__name__)


class RulerUnits(Enum):
    """Measurement units the editor reports positions and sizes in."""

    PIXELS = "pixels"
    INCHES = "inches"
    CM = "cm"
    MM = "mm"
    POINTS = "points"
    PICAS = "picas"
    PERCENT = "percent"

    @property
    def abbreviation(self) -> str:
        """Short suffix used when printing values."""
        return _ABBREVIATIONS[self]


_ABBREVIATIONS: Final = {
    RulerUnits.PIXELS: "px",
    RulerUnits.INCHES: "in",
    RulerUnits.CM: "cm",
    RulerUnits.MM: "mm",
    RulerUnits.POINTS: "pt",
    RulerUnits.PICAS: "pc",
    RulerUnits.PERCENT: "%",
}


class UnitConverter:
    """Conversions between pixels and the other ruler units.

    Physical units go through inches using the document resolution (pixels
    per inch). Percent is relative to a reference length in pixels, normally
    the document width or height.
    """

    PER_INCH: ClassVar[dict[RulerUnits, float]] = {
        RulerUnits.INCHES: 1.0,
        RulerUnits.CM: 2.54,
        RulerUnits.MM: 25.4,
        RulerUnits.POINTS: 72.0,
        RulerUnits.PICAS: 6.0,
    }

    @classmethod
    def from_pixels(
        cls,
        pixels: float,
        unit: RulerUnits,
        resolution: float = 72.0,
        reference: Optional[float] = None,
    ) -> float:
        """Convert a pixel length to ``unit``."""
        if unit is RulerUnits.PIXELS:
            return float(pixels)
        if unit is RulerUnits.PERCENT:
            if not reference:
                raise ValueError("Percent conversion needs a non-zero reference length")
            return pixels * 100 / reference
        return pixels / resolution * cls.PER_INCH[unit]

    @classmethod
    def to_pixels(
        cls,
        value: float,
        unit: RulerUnits,
        resolution: float = 72.0,
        reference: Optional[float] = None,
    ) -> float:
        """Convert a length in ``unit`` back to pixels."""
        if unit is RulerUnits.PIXELS:
            return float(value)
        if unit is RulerUnits.PERCENT:
            if not reference:
                raise ValueError("Percent conversion needs a non-zero reference length")
            return value * reference / 100
        return value / cls.PER_INCH[unit] * resolution


@dataclass(frozen=True)
class UnitValue:
    """A length expressed in a particular ruler unit.

    ``resolution`` and ``reference`` travel with the value so it can be
    converted without going back to the document.
    """

    value: float
    unit: RulerUnits
    resolution: float = 72.0
    reference: Optional[float] = None

    @classmethod
    def from_pixels(
        cls,
        pixels: float,
        unit: RulerUnits,
        resolution: float = 72.0,
        reference: Optional[float] = None,
    ) -> UnitValue:
        return cls(
            UnitConverter.from_pixels(pixels, unit, resolution, reference),
            unit,
            resolution,
            reference,
        )

    def as_pixels(self) -> float:
        return UnitConverter.to_pixels(self.value, self.unit, self.resolution, self.reference)

    def convert(self, unit: RulerUnits) -> UnitValue:
        """Return the same length expressed in ``unit``."""
        return UnitValue.from_pixels(self.as_pixels(), unit, self.resolution, self.reference)

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit.abbreviation}"


@dataclass
class Preferences:
    """Editor-wide preferences shared by every open document."""

    ruler_units: RulerUnits = RulerUnits.INCHES


@contextmanager
def ruler_units(preferences: Preferences, units: RulerUnits) -> Iterator[Preferences]:
    """Temporarily switch the editor's ruler units.

    The previous setting is put back on every exit path, including
    exceptions raised inside the block.
    """
    previous = preferences.ruler_units
    logger.debug("Ruler units %s -> %s", previous.value, units.value)
    preferences.ruler_units = units
    try:
        yield preferences
    finally:
        preferences.ruler_units = previous
        logger.debug("Ruler units restored to %s", previous.value)
