"""Data models for PDF Form Filler."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

FieldValue = Union[str, bool]


class FieldKind(str, Enum):
    """Enumeration of the editable control kinds a form field can have."""

    TEXT = "text"
    MULTILINE_TEXT = "multiline-text"
    SINGLE_SELECT = "single-select"
    CHECKBOX = "checkbox"
    RADIO_GROUP = "radio-group"


TEXT_KINDS = frozenset({FieldKind.TEXT, FieldKind.MULTILINE_TEXT})
CHOICE_KINDS = frozenset({FieldKind.SINGLE_SELECT, FieldKind.RADIO_GROUP})


def default_value(kind: FieldKind) -> FieldValue:
    """Return the empty value for a field kind."""

    return False if kind == FieldKind.CHECKBOX else ""


@dataclass(frozen=True)
class FormField:
    """One editable field of an uploaded document."""

    id: str
    name: str
    kind: FieldKind
    label: str
    value: FieldValue = ""
    options: Tuple[str, ...] = ()
    required: bool = False
    placeholder: str = ""

    def with_value(self, value: FieldValue) -> "FormField":
        return replace(self, value=value)

    def reset(self) -> "FormField":
        return replace(self, value=default_value(self.kind))


@dataclass(frozen=True)
class PreviewHandle:
    """Regenerable reference the viewer uses to page through the original bytes."""

    page_count: int


@dataclass(frozen=True)
class UploadedDocument:
    """A PDF captured at upload time together with its editable field model.

    ``original_bytes`` is never changed after creation; every export re-reads it.
    Value edits produce a new document through :meth:`with_field_value`.
    """

    id: str
    name: str
    size: int
    original_bytes: bytes = field(repr=False)
    preview: PreviewHandle
    fields: Tuple[FormField, ...]
    detected: bool = True
    uploaded_at: datetime = field(default_factory=datetime.now)

    def get_field(self, field_id: str) -> Optional[FormField]:
        for item in self.fields:
            if item.id == field_id:
                return item
        return None

    def with_field_value(self, field_id: str, value: FieldValue) -> "UploadedDocument":
        """Return a copy of the document whose field ``field_id`` carries ``value``."""

        updated = tuple(item.with_value(value) if item.id == field_id else item for item in self.fields)
        return replace(self, fields=updated)


__all__ = [
    "CHOICE_KINDS",
    "FieldKind",
    "FieldValue",
    "FormField",
    "PreviewHandle",
    "TEXT_KINDS",
    "UploadedDocument",
    "default_value",
]
