"""Session state for the uploaded documents and the current selection."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from formfiller.errors import DocumentNotFoundError
from formfiller.models import FieldKind, FieldValue, UploadedDocument


@dataclass(frozen=True)
class AppState:
    """Immutable snapshot of every uploaded document and which one is selected.

    The selection is kept as a document id, so the selected document is always
    the entry stored in ``documents``.
    """

    documents: Tuple[UploadedDocument, ...] = ()
    selected_id: Optional[str] = None

    @property
    def selected(self) -> Optional[UploadedDocument]:
        """Return the selected document, if any."""

        if self.selected_id is None:
            return None
        return self.find(self.selected_id)

    def find(self, document_id: str) -> Optional[UploadedDocument]:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None

    def get(self, document_id: str) -> UploadedDocument:
        document = self.find(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Unknown document id: {document_id}")
        return document

    def add_document(self, document: UploadedDocument) -> "AppState":
        """Append ``document``; it becomes the selection when nothing is selected."""

        selected_id = self.selected_id if self.selected is not None else document.id
        return replace(self, documents=self.documents + (document,), selected_id=selected_id)

    def select(self, document_id: str) -> "AppState":
        self.get(document_id)
        return replace(self, selected_id=document_id)

    def set_field_value(self, document_id: str, field_id: str, value: FieldValue) -> "AppState":
        """Return a state where one field of one document carries ``value``.

        The document is replaced wholesale; all other documents and fields are
        shared with the current state.
        """

        updated = self.get(document_id).with_field_value(field_id, value)
        documents = tuple(updated if document.id == document_id else document for document in self.documents)
        return replace(self, documents=documents)


def completion_percentage(document: Optional[UploadedDocument]) -> int:
    """Return the share of required fields that are filled in, as a whole percentage.

    Checkboxes always count as complete. Returns 0 without a document or
    without required fields.
    """

    if document is None:
        return 0
    required = [field for field in document.fields if field.required]
    if not required:
        return 0
    complete = sum(
        1
        for field in required
        if field.kind == FieldKind.CHECKBOX or str(field.value).strip() != ""
    )
    # Half-up rounding, so 12.5 reads as 13.
    return math.floor(100 * complete / len(required) + 0.5)


__all__ = ["AppState", "completion_percentage"]
