import logging

import pytest

from layerfit.controller import LayerResizer, ResizeOutcome, resize_to_bounds
from layerfit.errors import EmptyLayerError
from layerfit.host.document import AnchorPosition, LayeredDocument, ResampleMethod
from layerfit.host.editor import Editor
from layerfit.host.protocols import (
    MockPrompter,
    assert_alerted_with,
    assert_resized_with,
    create_error_simulating_layer,
    create_mock_layer,
)
from layerfit.host.units import Preferences, RulerUnits
from layerfit.inputs import ResizeRequest
from layerfit.settings.user import UserSettings


class TestResizeToBounds:
    def test_reads_bounds_in_pixels_and_restores_units(self) -> None:
        prefs = Preferences(ruler_units=RulerUnits.INCHES)
        layer = create_mock_layer(width=200, height=100, preferences=prefs)

        outcome = resize_to_bounds(layer, ResizeRequest(80, 80, True), prefs)

        assert_resized_with(layer, 40.0, 40.0, AnchorPosition.MIDDLECENTER)
        assert outcome.old_size == (200.0, 100.0)
        assert outcome.new_size == (80.0, 40.0)
        assert prefs.ruler_units is RulerUnits.INCHES

    def test_size_is_in_pixels_when_layer_reports_other_units(
        self, document: LayeredDocument
    ) -> None:
        # The document keeps its own preferences in inches, separate from the scoped ones
        document.preferences.ruler_units = RulerUnits.INCHES
        scoped = Preferences(ruler_units=RulerUnits.INCHES)
        logo = document.get_layer("logo")

        outcome = resize_to_bounds(logo, ResizeRequest(80, 80, True), scoped)

        assert (outcome.width_percent, outcome.height_percent) == pytest.approx((40.0, 40.0))
        assert outcome.old_size == pytest.approx((200.0, 100.0))
        assert outcome.new_size == pytest.approx((80.0, 40.0))
        assert logo.pixel_bounds == (110, 70, 190, 110)
        assert document.preferences.ruler_units is RulerUnits.INCHES
        assert scoped.ruler_units is RulerUnits.INCHES

    def test_passes_anchor_and_resample(self) -> None:
        prefs = Preferences()
        layer = create_mock_layer(preferences=prefs)

        resize_to_bounds(
            layer,
            ResizeRequest(100, None, True),
            prefs,
            anchor=AnchorPosition.BOTTOMLEFT,
            resample=ResampleMethod.LANCZOS,
        )

        assert layer.resize_calls[-1]["anchor"] is AnchorPosition.BOTTOMLEFT
        assert layer.resize_calls[-1]["resample"] is ResampleMethod.LANCZOS

    def test_unconstrained_partial_keeps_other_axis(self) -> None:
        prefs = Preferences()
        layer = create_mock_layer(width=200, height=100, preferences=prefs)

        outcome = resize_to_bounds(layer, ResizeRequest(None, 50, False), prefs)

        assert_resized_with(layer, 100.0, 50.0)
        assert outcome.new_size == (200.0, 50.0)

    def test_empty_layer_is_rejected(self) -> None:
        prefs = Preferences(ruler_units=RulerUnits.MM)
        layer = create_mock_layer(width=0, height=10, preferences=prefs)

        with pytest.raises(EmptyLayerError):
            resize_to_bounds(layer, ResizeRequest(80, 80, True), prefs)

        assert layer.resize_calls == []
        assert prefs.ruler_units is RulerUnits.MM

    def test_editor_failure_propagates_and_restores_units(self) -> None:
        prefs = Preferences(ruler_units=RulerUnits.POINTS)
        layer = create_error_simulating_layer(["resize"], preferences=prefs)

        with pytest.raises(RuntimeError, match="Simulated editor failure"):
            resize_to_bounds(layer, ResizeRequest(80, 80, True), prefs)

        assert prefs.ruler_units is RulerUnits.POINTS


def test_outcome_describe() -> None:
    outcome = ResizeOutcome("logo", (200.0, 100.0), (80.0, 40.0), 40.0, 40.0)
    assert outcome.describe() == "Resized 'logo' from 200x100 px to 80x40 px (40% x 40%)"


class TestLayerResizer:
    def test_defaults_fit_active_layer_into_80px_box(
        self, editor: Editor, document: LayeredDocument
    ) -> None:
        prompter = MockPrompter()

        outcome = LayerResizer(editor, prompter=prompter).run()

        assert outcome is not None
        assert (outcome.width_percent, outcome.height_percent) == (40.0, 40.0)
        assert document.get_layer("logo").pixel_bounds == (110, 70, 190, 110)
        assert prompter.prompt_calls == []
        assert prompter.alerts == []
        assert editor.preferences.ruler_units is RulerUnits.INCHES

    def test_explicit_values_override_settings(self, editor: Editor, document: LayeredDocument) -> None:
        settings = UserSettings(default_width=10, default_height=10, anchor=AnchorPosition.BOTTOMRIGHT)

        outcome = LayerResizer(
            editor,
            settings,
            MockPrompter(),
            width="100",
            height="",
            anchor=AnchorPosition.TOPLEFT,
        ).run()

        assert outcome is not None
        assert outcome.new_size == (100.0, 50.0)
        assert document.get_layer("logo").pixel_bounds == (50, 40, 150, 90)

    def test_settings_anchor_is_used(self, editor: Editor, document: LayeredDocument) -> None:
        settings = UserSettings(anchor=AnchorPosition.BOTTOMRIGHT)

        LayerResizer(editor, settings, MockPrompter()).run()

        assert document.get_layer("logo").pixel_bounds == (170, 100, 250, 140)

    def test_prompted_values(self, editor: Editor, document: LayeredDocument) -> None:
        prompter = MockPrompter(["100", "80", "false"])

        outcome = LayerResizer(editor, prompter=prompter, prompt_user=True).run()

        assert outcome is not None
        assert outcome.new_size == (100.0, 80.0)
        assert len(prompter.prompt_calls) == 3

    def test_prompting_from_settings(self, editor: Editor) -> None:
        prompter = MockPrompter(["none", "50"])

        outcome = LayerResizer(editor, UserSettings(prompt_user=True), prompter).run()

        assert outcome is not None
        assert outcome.new_size == (100.0, 50.0)

    def test_ruler_units_are_pixels_while_prompting(self, editor: Editor) -> None:
        seen: list[RulerUnits] = []

        class RecordingPrompter(MockPrompter):
            def prompt(self, message: str, default: str = "") -> str | None:
                seen.append(editor.preferences.ruler_units)
                return super().prompt(message, default)

        LayerResizer(editor, prompter=RecordingPrompter(), prompt_user=True).run()

        assert seen == [RulerUnits.PIXELS] * 3
        assert editor.preferences.ruler_units is RulerUnits.INCHES

    def test_no_document(self, caplog: pytest.LogCaptureFixture) -> None:
        prompter = MockPrompter()

        with caplog.at_level(logging.ERROR, logger="layerfit.controller"):
            outcome = LayerResizer(Editor(), prompter=prompter).run()

        assert outcome is None
        assert_alerted_with(prompter, "No document is open.")
        assert "Resize aborted" in caplog.text

    def test_document_without_layers(self) -> None:
        editor = Editor()
        editor.add_document(LayeredDocument("empty", 10, 10))
        prompter = MockPrompter()

        assert LayerResizer(editor, prompter=prompter, prompt_user=True).run() is None
        assert_alerted_with(prompter, "Document 'empty' has no layers.")
        assert prompter.prompt_calls == []

    def test_alerts_start_fresh_after_reset(self, editor: Editor, document: LayeredDocument) -> None:
        prompter = MockPrompter()
        document.select_layer("Background")
        LayerResizer(editor, prompter=prompter).run()
        assert len(prompter.alerts) == 1

        prompter.reset_call_history()
        document.select_layer("logo")

        assert LayerResizer(editor, prompter=prompter).run() is not None
        assert prompter.alerts == []

    def test_background_layer(self, editor: Editor, document: LayeredDocument) -> None:
        document.select_layer("Background")
        prompter = MockPrompter()

        assert LayerResizer(editor, prompter=prompter).run() is None
        assert_alerted_with(prompter, "background layer")
        assert document.get_layer("Background").size == (400, 300)
        assert prompter.prompt_calls == []

    def test_invalid_input_alerts_and_leaves_layer(
        self, editor: Editor, document: LayeredDocument
    ) -> None:
        prompter = MockPrompter(["abc"])

        assert LayerResizer(editor, prompter=prompter, prompt_user=True).run() is None
        assert_alerted_with(prompter, "WIDTH needs to be a positive number")
        assert document.get_layer("logo").pixel_bounds == (50, 40, 250, 140)
        assert editor.preferences.ruler_units is RulerUnits.INCHES

    def test_cancelled_prompt(self, editor: Editor) -> None:
        prompter = MockPrompter(["80", None])

        assert LayerResizer(editor, prompter=prompter, prompt_user=True).run() is None
        assert_alerted_with(prompter, "Entering HEIGHT was aborted")
        assert editor.preferences.ruler_units is RulerUnits.INCHES

    def test_constrain_hint_is_shown(self, editor: Editor) -> None:
        prompter = MockPrompter()

        LayerResizer(editor, prompter=prompter, constrain="maybe").run()

        assert_alerted_with(prompter, "case insensitive")

    def test_missing_dimensions(self, editor: Editor) -> None:
        prompter = MockPrompter()
        settings = UserSettings(default_width=None, default_height=None)

        assert LayerResizer(editor, settings, prompter).run() is None
        assert_alerted_with(prompter, "At least one of the values")
