"""Exception classes for layer resize operations.

Every failure the user can cause (no document, wrong layer, bad input,
aborted prompt) is a ``LayerFitError``. The controller catches them at a
single point and surfaces them as an alert instead of a traceback.
"""

from __future__ import annotations

from typing import Optional


class LayerFitError(Exception):
    """Base error for anything that aborts a resize run.

    Carries a short ``message`` and an optional ``hint`` telling the user how
    to recover. ``str(err)`` is the message alone.
    """

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the failure
            hint: Optional follow-up advice shown below the message
        """
        super().__init__(message)
        self.message: str = message
        self.hint: Optional[str] = hint

    @property
    def user_message(self) -> str:
        """Message and hint formatted for an alert dialog."""
        if self.hint:
            return f"{self.message}\n\n{self.hint}"
        return self.message


class NoDocumentError(LayerFitError):
    """Raised when the editor has no open document."""

    def __init__(self) -> None:
        super().__init__(
            "No document is open.",
            "Open or create a document and run the resize again.",
        )


class NoLayerError(LayerFitError):
    """Raised when the active document has no layers to resize."""

    def __init__(self, document_name: str) -> None:
        super().__init__(
            f"Document '{document_name}' has no layers.",
            "Add a layer to the document and run the resize again.",
        )
        self.document_name = document_name


class BackgroundLayerError(LayerFitError):
    """Raised when the active layer is the document background."""

    def __init__(self, layer_name: str = "Background") -> None:
        super().__init__(
            f"Layer '{layer_name}' is a background layer and cannot be resized.",
            "Select a regular (non-background) layer first.",
        )
        self.layer_name = layer_name


class EmptyLayerError(LayerFitError):
    """Raised when the active layer has no visible pixels to measure."""

    def __init__(self, layer_name: str) -> None:
        super().__init__(
            f"Layer '{layer_name}' is empty.",
            "Only layers with visible content have bounds to resize.",
        )
        self.layer_name = layer_name


class InvalidDimensionError(LayerFitError):
    """Raised when a width or height is not a positive whole number."""

    def __init__(self, axis: str, raw: object) -> None:
        """Initialize with the offending input.

        Args:
            axis: ``"width"`` or ``"height"``
            raw: The value as it was entered
        """
        super().__init__(
            f"{axis.upper()} needs to be a positive number of pixels or left EMPTY (got {raw!r}).",
        )
        self.axis = axis
        self.raw = raw


class MissingDimensionError(LayerFitError):
    """Raised when neither a width nor a height was supplied."""

    def __init__(self) -> None:
        super().__init__("At least one of the values (WIDTH or HEIGHT) is required.")


class InvalidConstrainError(LayerFitError):
    """Raised when the constrain flag is not ``true`` or ``false``."""

    def __init__(self, raw: object) -> None:
        super().__init__(
            f"CONSTRAIN PROPORTIONS needs to be either TRUE or FALSE (got {raw!r}).",
            "The value is case insensitive.",
        )
        self.raw = raw


class PromptAbortedError(LayerFitError):
    """Raised when the user cancels one of the input prompts."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Entering {field.upper()} was aborted - unable to proceed.")
        self.field = field
