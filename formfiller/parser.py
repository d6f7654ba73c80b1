"""AcroForm field detection using pypdf.

Reads the interactive form of a PDF and turns every terminal field into an
editable :class:`~formfiller.models.FormField`. When a document carries no
form, or reading it fails, the demonstration field set is returned instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pypdf import PdfReader
from pypdf.generic import StreamObject

from .fallback import fallback_fields
from .models import CHOICE_KINDS, FieldKind, FormField, default_value
from .utils import get_logger, prettify_label

logger = get_logger(__name__)

# Field flag bits (PDF 32000-1, tables 226, 228 and 230), zero-based.
_FLAG_MULTILINE = 1 << 12
_FLAG_RADIO = 1 << 15
_FLAG_PUSHBUTTON = 1 << 16
_OFF_STATE = "Off"
_MAX_PARENT_DEPTH = 64


@dataclass(frozen=True)
class NativeField:
    """What the PDF itself declares for one terminal form field."""

    name: str
    kind: FieldKind
    options: Tuple[str, ...] = ()
    on_state: Optional[str] = None
    pages: Tuple[int, ...] = ()


@dataclass(frozen=True)
class DetectionResult:
    fields: Tuple[FormField, ...]
    detected: bool


def classify_field(field_type: Optional[str], flags: int = 0) -> FieldKind:
    """Map an AcroForm ``/FT`` value and ``/Ff`` flags onto a :class:`FieldKind`.

    Pushbuttons, signatures and unknown types fall back to ``TEXT``.
    """

    if field_type == "/Tx":
        return FieldKind.MULTILINE_TEXT if flags & _FLAG_MULTILINE else FieldKind.TEXT
    if field_type == "/Btn":
        if flags & _FLAG_RADIO:
            return FieldKind.RADIO_GROUP
        if flags & _FLAG_PUSHBUTTON:
            return FieldKind.TEXT
        return FieldKind.CHECKBOX
    if field_type == "/Ch":
        return FieldKind.SINGLE_SELECT
    return FieldKind.TEXT


def _resolve(obj: Any) -> Any:
    return obj.get_object() if hasattr(obj, "get_object") else obj


def _inherited(node: Any, key: str, default: Any = None) -> Any:
    """Look ``key`` up on a field dictionary, then on its ``/Parent`` chain."""

    depth = 0
    while node is not None and depth < _MAX_PARENT_DEPTH:
        if key in node:
            return _resolve(node[key])
        parent = node.get("/Parent")
        node = _resolve(parent) if parent is not None else None
        depth += 1
    return default


def _qualified_name(annotation: Any) -> Optional[str]:
    parts: List[str] = []
    node = annotation
    depth = 0
    while node is not None and depth < _MAX_PARENT_DEPTH:
        partial = node.get("/T")
        if partial:
            parts.append(str(partial))
        parent = node.get("/Parent")
        node = _resolve(parent) if parent is not None else None
        depth += 1
    return ".".join(reversed(parts)) if parts else None


def _is_terminal(raw: Any) -> bool:
    # Kids without their own /T are widgets of this field, not child fields.
    kids = raw.get("/Kids")
    if not kids:
        return True
    return not any("/T" in _resolve(kid) for kid in kids)


def _widgets(raw: Any) -> List[Any]:
    kids = raw.get("/Kids")
    if not kids:
        return [raw]
    return [_resolve(kid) for kid in kids]


def _appearance_states(widgets: Iterable[Any]) -> List[str]:
    """Return the distinct "on" appearance names of the given widgets, in order."""

    states: List[str] = []
    for widget in widgets:
        appearance = _resolve(widget.get("/AP"))
        if not appearance or "/N" not in appearance:
            continue
        normal = _resolve(appearance["/N"])
        if isinstance(normal, StreamObject):
            continue
        for state in normal:
            name = str(state).lstrip("/")
            if name != _OFF_STATE and name not in states:
                states.append(name)
    return states


def _choice_options(raw: Any) -> List[str]:
    options: List[str] = []
    for entry in _inherited(raw, "/Opt", []) or []:
        entry = _resolve(entry)
        if isinstance(entry, list) and entry:
            # [export value, display text] pairs; the export value is what /V holds.
            options.append(str(_resolve(entry[0])))
        else:
            options.append(str(entry))
    return options


def _pages_by_field(reader: PdfReader) -> Dict[str, List[int]]:
    pages: Dict[str, List[int]] = {}
    for index, page in enumerate(reader.pages):
        for annotation in _resolve(page.get("/Annots")) or []:
            name = _qualified_name(_resolve(annotation))
            if not name:
                continue
            hosting = pages.setdefault(name, [])
            if index not in hosting:
                hosting.append(index)
    return pages


def read_native_fields(reader: PdfReader) -> List[NativeField]:
    """Enumerate the terminal AcroForm fields of ``reader`` in document order."""

    raw_fields = reader.get_fields()
    if not raw_fields:
        return []

    pages = _pages_by_field(reader)
    native: List[NativeField] = []
    for name, field in raw_fields.items():
        reference = getattr(field, "indirect_reference", None)
        raw = reference.get_object() if reference is not None else field
        if not _is_terminal(raw):
            logger.debug("Skipping non-terminal field '%s'", name)
            continue

        flags = _inherited(raw, "/Ff", 0)
        kind = classify_field(_inherited(raw, "/FT"), int(flags) if isinstance(flags, int) else 0)

        options: Tuple[str, ...] = ()
        on_state: Optional[str] = None
        if kind == FieldKind.SINGLE_SELECT:
            options = tuple(_choice_options(raw))
        elif kind == FieldKind.RADIO_GROUP:
            options = tuple(_appearance_states(_widgets(raw)))
        elif kind == FieldKind.CHECKBOX:
            states = _appearance_states(_widgets(raw))
            on_state = states[0] if states else "Yes"

        native.append(
            NativeField(
                name=name,
                kind=kind,
                options=options,
                on_state=on_state,
                pages=tuple(pages.get(name, ())),
            )
        )
        logger.debug("Native field '%s' kind=%s options=%s", name, kind.value, options)
    return native


def _to_form_field(index: int, native: NativeField) -> FormField:
    return FormField(
        id=f"field_{index}",
        name=native.name,
        kind=native.kind,
        label=prettify_label(native.name),
        value=default_value(native.kind),
        options=native.options if native.kind in CHOICE_KINDS else (),
        required=False,
        placeholder=f"Enter {native.name}",
    )


def detect_fields(pdf_bytes: bytes) -> DetectionResult:
    """Build the editable field model for ``pdf_bytes``.

    Never raises: unreadable documents and documents without a form both
    yield the demonstration field set with ``detected=False``.
    """

    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        native = read_native_fields(reader)
    except Exception as exc:
        logger.warning("Could not detect form fields: %s", exc)
        native = []

    if not native:
        fields = fallback_fields()
        logger.info("No form fields detected; using %d demonstration fields", len(fields))
        return DetectionResult(fields=fields, detected=False)

    fields = tuple(_to_form_field(index, item) for index, item in enumerate(native))
    logger.info("Detected %d form fields: %s", len(fields), [item.name for item in fields])
    return DetectionResult(fields=fields, detected=True)


__all__ = ["DetectionResult", "NativeField", "classify_field", "detect_fields", "read_native_fields"]
