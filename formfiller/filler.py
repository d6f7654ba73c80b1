"""Write edited values back into a PDF's AcroForm fields using pypdf.

Every export starts again from the untouched upload bytes. Fields are written
one by one so a field that cannot be resolved only drops its own value.
"""
from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pypdf import PdfReader, PdfWriter
from pypdf.generic import DictionaryObject, NameObject, TextStringObject

from .errors import ExportError, FieldResolutionError
from .models import TEXT_KINDS, FieldKind, FormField
from .parser import NativeField, _appearance_states, _qualified_name, _resolve, read_native_fields
from .utils import get_logger

logger = get_logger(__name__)

_COMPATIBLE_KINDS: Dict[FieldKind, frozenset] = {
    FieldKind.TEXT: TEXT_KINDS,
    FieldKind.MULTILINE_TEXT: TEXT_KINDS,
    FieldKind.CHECKBOX: frozenset({FieldKind.CHECKBOX}),
    FieldKind.RADIO_GROUP: frozenset({FieldKind.RADIO_GROUP}),
    FieldKind.SINGLE_SELECT: frozenset({FieldKind.SINGLE_SELECT}),
}
_BUTTON_KINDS = frozenset({FieldKind.CHECKBOX, FieldKind.RADIO_GROUP})


@dataclass(frozen=True)
class SkippedField:
    name: str
    reason: str


@dataclass(frozen=True)
class FillResult:
    data: bytes
    filled: Tuple[str, ...]
    skipped: Tuple[SkippedField, ...]


def _resolve_value(field: FormField, native: Optional[NativeField]) -> str:
    """Return the value pypdf should write for ``field``.

    Raises :class:`FieldResolutionError` when the named field is missing, has
    an incompatible kind, or does not offer the chosen option.
    """

    if native is None:
        raise FieldResolutionError(field.name, "no form field with this name")
    if native.kind not in _COMPATIBLE_KINDS[field.kind]:
        raise FieldResolutionError(
            field.name, f"expected a {field.kind.value} field, found {native.kind.value}"
        )
    if not native.pages:
        raise FieldResolutionError(field.name, "field has no widget on any page")

    if field.kind == FieldKind.CHECKBOX:
        return f"/{native.on_state}"

    value = str(field.value)
    if field.kind in {FieldKind.RADIO_GROUP, FieldKind.SINGLE_SELECT}:
        if value not in native.options:
            raise FieldResolutionError(
                field.name, f"'{value}' is not one of {list(native.options)}"
            )
        if field.kind == FieldKind.RADIO_GROUP:
            return f"/{value}"
    return value


def _widgets_named(writer: PdfWriter, native: NativeField) -> List[DictionaryObject]:
    widgets: List[DictionaryObject] = []
    for page_index in native.pages:
        for annotation in _resolve(writer.pages[page_index].get("/Annots")) or []:
            annotation = annotation.get_object()
            if annotation.get("/Subtype") == "/Widget" and _qualified_name(annotation) == native.name:
                widgets.append(annotation)
    return widgets


def _field_object(widget: DictionaryObject) -> DictionaryObject:
    # A widget without its own /T is a kid of the field that carries the name.
    if "/T" in widget or "/Parent" not in widget:
        return widget
    return widget["/Parent"].get_object()


def _write_field(writer: PdfWriter, native: NativeField, value: str) -> None:
    """Store ``value`` on the field object that owns ``native``'s widgets.

    ``/V`` is always set on the resolved field, and buttons also get ``/AS``
    on each widget. pypdf's page update skips kids that inherit ``/FT``.
    """

    widgets = _widgets_named(writer, native)
    if not widgets:
        raise FieldResolutionError(native.name, "no widget with this name in the output")

    target = _field_object(widgets[0])
    if native.kind in _BUTTON_KINDS:
        state = NameObject(value)
        target[NameObject("/V")] = state
        for widget in widgets:
            states = _appearance_states([widget])
            if states:
                widget[NameObject("/AS")] = state if value.lstrip("/") in states else NameObject("/Off")
        return

    # Text and choice fields also get a fresh appearance stream where pypdf finds them.
    for page_index in native.pages:
        writer.update_page_form_field_values(
            writer.pages[page_index],
            {native.name: value},
            auto_regenerate=False,
        )
    target[NameObject("/V")] = TextStringObject(value)


def fill_form(original_bytes: bytes, fields: Sequence[FormField]) -> FillResult:
    """Fill ``fields`` into a fresh copy of ``original_bytes``.

    Fields with an empty or ``False`` value are left untouched. The returned
    document keeps its form editable; nothing is flattened.
    """

    try:
        reader = PdfReader(BytesIO(original_bytes))
        writer = PdfWriter(clone_from=reader)
        native_by_name: Mapping[str, NativeField] = {item.name: item for item in read_native_fields(reader)}
    except Exception as exc:
        logger.error("Could not open PDF for filling: %s", exc)
        raise ExportError(f"Could not open PDF for filling: {exc}") from exc

    filled: List[str] = []
    skipped: List[SkippedField] = []
    for field in fields:
        if not field.value:
            continue
        native = native_by_name.get(field.name)
        try:
            value = _resolve_value(field, native)
            _write_field(writer, native, value)
        except Exception as exc:
            logger.warning("Could not fill field %s: %s", field.name, exc)
            reason = exc.reason if isinstance(exc, FieldResolutionError) else str(exc)
            skipped.append(SkippedField(name=field.name, reason=reason))
            continue
        logger.debug("Filled field '%s'", field.name)
        filled.append(field.name)

    try:
        if native_by_name:
            writer.set_need_appearances_writer(True)
        buffer = BytesIO()
        writer.write(buffer)
    except Exception as exc:
        logger.error("Could not serialize filled PDF: %s", exc)
        raise ExportError(f"Could not serialize filled PDF: {exc}") from exc

    data = buffer.getvalue()
    logger.info(
        "Filled %d field(s), skipped %d; output size %d bytes", len(filled), len(skipped), len(data)
    )
    return FillResult(data=data, filled=tuple(filled), skipped=tuple(skipped))


__all__ = ["FillResult", "SkippedField", "fill_form"]
