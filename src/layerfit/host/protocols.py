# src/layerfit/host/protocols.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

from layerfit.host.document import AnchorPosition, ResampleMethod
from layerfit.host.units import Preferences, RulerUnits, UnitValue


@runtime_checkable
class Prompter(Protocol):
    """Protocol defining the interface for user interaction.

    Implementations ask the user for a single value and show alerts. The
    controller never talks to a terminal or dialog directly, so the same
    workflow runs interactively, from scripts and under test.
    """

    def prompt(self, message: str, default: str = "") -> str | None:
        """Ask the user for a value.

        Args:
            message: Question shown to the user
            default: Value used when the user just confirms

        Returns:
            The entered text, or None if the user cancelled
        """
        ...

    def alert(self, message: str) -> None:
        """Show a message the user has to acknowledge."""
        ...


@runtime_checkable
class ResizableLayer(Protocol):
    """Protocol for the parts of a layer the resize workflow touches."""

    name: str
    is_background: bool

    @property
    def bounds(self) -> tuple[UnitValue, UnitValue, UnitValue, UnitValue]:
        """Left, top, right, bottom in the current ruler units."""
        ...

    def resize(
        self,
        width_percent: float,
        height_percent: float,
        anchor: AnchorPosition = AnchorPosition.MIDDLECENTER,
        resample: ResampleMethod = ResampleMethod.BICUBIC,
    ) -> None:
        """Scale the layer by percentages around ``anchor``."""
        ...


class MockPrompter:
    """Mock implementation of Prompter for testing.

    Answers come from ``responses`` in order; None simulates a cancelled
    prompt. Once the responses run out the prompt's default is returned.
    """

    def __init__(self, responses: list[str | None] | None = None):
        self.responses: list[str | None] = list(responses or [])
        self.prompt_calls: list[dict[str, str]] = []
        self.alerts: list[str] = []

    def prompt(self, message: str, default: str = "") -> str | None:
        """Record the prompt and return the next scripted answer."""
        self.prompt_calls.append({"message": message, "default": default})
        if self.responses:
            return self.responses.pop(0)
        return default

    def alert(self, message: str) -> None:
        """Record the alert instead of showing it."""
        self.alerts.append(message)

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.prompt_calls = []
        self.alerts = []


class MockLayer:
    """Mock implementation of ResizableLayer for testing.

    Reports a ``width`` x ``height`` box at ``(left, top)`` in whatever ruler
    units ``preferences`` currently holds, and applies resizes to that box.
    """

    def __init__(
        self,
        name: str = "Layer 1",
        width: float = 200,
        height: float = 100,
        left: float = 0,
        top: float = 0,
        is_background: bool = False,
        preferences: Preferences | None = None,
        resolution: float = 72.0,
        canvas_size: tuple[float, float] = (1000, 1000),
    ):
        self.name = name
        self.is_background = is_background
        self.preferences = preferences
        self.resolution = resolution
        self.canvas_size = canvas_size
        self.box = (left, top, left + width, top + height)
        self.resize_calls: list[dict[str, object]] = []

    @property
    def bounds(self) -> tuple[UnitValue, UnitValue, UnitValue, UnitValue]:
        """Mock bounds converted to the current ruler units."""
        units = self.preferences.ruler_units if self.preferences else RulerUnits.PIXELS
        ref_width, ref_height = self.canvas_size
        left, top, right, bottom = self.box
        return (
            UnitValue.from_pixels(left, units, self.resolution, ref_width),
            UnitValue.from_pixels(top, units, self.resolution, ref_height),
            UnitValue.from_pixels(right, units, self.resolution, ref_width),
            UnitValue.from_pixels(bottom, units, self.resolution, ref_height),
        )

    def resize(
        self,
        width_percent: float,
        height_percent: float,
        anchor: AnchorPosition = AnchorPosition.MIDDLECENTER,
        resample: ResampleMethod = ResampleMethod.BICUBIC,
    ) -> None:
        """Record the call and scale the mock box around its centre."""
        self.resize_calls.append(
            {
                "width_percent": width_percent,
                "height_percent": height_percent,
                "anchor": anchor,
                "resample": resample,
            }
        )
        left, top, right, bottom = self.box
        center_x, center_y = (left + right) / 2, (top + bottom) / 2
        half_width = (right - left) * width_percent / 200
        half_height = (bottom - top) * height_percent / 200
        self.box = (
            center_x - half_width,
            center_y - half_height,
            center_x + half_width,
            center_y + half_height,
        )

    def reset_call_history(self) -> None:
        """Reset the call history for testing."""
        self.resize_calls = []


class ErrorSimulatingLayer(MockLayer):
    """Layer mock that can simulate editor failures."""

    def __init__(self, fail_on_methods: list[str] | None = None, **kwargs: object):
        """Initialize with optional methods that should fail.

        Args:
            fail_on_methods: List of method names that should raise exceptions
            **kwargs: Passed on to MockLayer
        """
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.fail_on_methods = fail_on_methods or []

    def resize(
        self,
        width_percent: float,
        height_percent: float,
        anchor: AnchorPosition = AnchorPosition.MIDDLECENTER,
        resample: ResampleMethod = ResampleMethod.BICUBIC,
    ) -> None:
        """Either record the call or raise an exception based on configuration."""
        if "resize" in self.fail_on_methods:
            raise RuntimeError("Simulated editor failure")
        super().resize(width_percent, height_percent, anchor, resample)


def create_mock_prompter(responses: list[str | None] | None = None) -> MockPrompter:
    """Create and return a scripted prompter for testing."""
    return MockPrompter(responses)


def create_mock_layer(**kwargs: object) -> MockLayer:
    """Create and return a mock layer for testing."""
    return MockLayer(**kwargs)  # type: ignore[arg-type]


def create_error_simulating_layer(
    fail_on_methods: list[str] | None = None, **kwargs: object
) -> ErrorSimulatingLayer:
    """Create a layer that will fail on specified methods."""
    return ErrorSimulatingLayer(fail_on_methods, **kwargs)


def assert_resized_with(
    mock_layer: MockLayer,
    expected_width_percent: float,
    expected_height_percent: float,
    expected_anchor: AnchorPosition | None = None,
) -> bool:
    """Assert that the layer was resized with the expected percentages.

    Args:
        mock_layer: The mock layer instance
        expected_width_percent: Expected width percentage
        expected_height_percent: Expected height percentage
        expected_anchor: Expected anchor (None to skip the check)

    Returns:
        True if the assertion passes, raises AssertionError otherwise
    """
    assert len(mock_layer.resize_calls) > 0, "Layer was not resized"
    last_call = mock_layer.resize_calls[-1]
    assert abs(float(last_call["width_percent"]) - expected_width_percent) < 1e-9, (  # type: ignore[arg-type]
        f"Expected width {expected_width_percent}%, got {last_call['width_percent']}%"
    )
    assert abs(float(last_call["height_percent"]) - expected_height_percent) < 1e-9, (  # type: ignore[arg-type]
        f"Expected height {expected_height_percent}%, got {last_call['height_percent']}%"
    )
    if expected_anchor is not None:
        assert last_call["anchor"] == expected_anchor, (
            f"Expected anchor {expected_anchor}, got {last_call['anchor']}"
        )
    return True


def assert_alerted_with(mock_prompter: MockPrompter, expected_fragment: str) -> bool:
    """Assert that the last alert contains ``expected_fragment``.

    Args:
        mock_prompter: The mock prompter instance
        expected_fragment: Text the alert must contain

    Returns:
        True if the assertion passes, raises AssertionError otherwise
    """
    assert len(mock_prompter.alerts) > 0, "No alert was shown"
    last_alert = mock_prompter.alerts[-1]
    assert expected_fragment in last_alert, (
        f"Expected alert containing {expected_fragment!r}, got {last_alert!r}"
    )
    return True
