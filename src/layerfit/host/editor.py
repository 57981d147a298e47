"""The editor application: open documents and global preferences."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from layerfit.errors import NoDocumentError
from layerfit.host.document import LayeredDocument
from layerfit.host.units import Preferences

logger: Final = logging.getLogger(__name__)


class Editor:
    """Holds the open documents and the preferences they share.

    Every document added to the editor reports its measurements through the
    editor's ``preferences``, so changing the ruler units here affects all of
    them.
    """

    def __init__(self, preferences: Preferences | None = None) -> None:
        self.preferences = preferences or Preferences()
        self.documents: list[LayeredDocument] = []
        self._active_document: LayeredDocument | None = None

    @property
    def active_document(self) -> LayeredDocument:
        """The document in front.

        Raises:
            NoDocumentError: If nothing is open
        """
        if self._active_document is None:
            raise NoDocumentError()
        return self._active_document

    @active_document.setter
    def active_document(self, document: LayeredDocument) -> None:
        if document not in self.documents:
            raise ValueError(f"Document '{document.name}' is not open")
        self._active_document = document

    def add_document(self, document: LayeredDocument) -> LayeredDocument:
        """Register an in-memory document and bring it to the front."""
        document.preferences = self.preferences
        self.documents.append(document)
        self._active_document = document
        return document

    def open(self, path: Path) -> LayeredDocument:
        """Load a document manifest and make it the active document."""
        document = LayeredDocument.load(path, preferences=self.preferences)
        logger.info("Opened %s", path)
        return self.add_document(document)

    def close(self, document: LayeredDocument | None = None) -> None:
        """Close ``document`` (default: the active one) without saving."""
        target = document or self.active_document
        self.documents.remove(target)
        if self._active_document is target:
            self._active_document = self.documents[-1] if self.documents else None
