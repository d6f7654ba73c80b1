"""Shared fixtures: small AcroForm PDFs built with PyMuPDF and pypdf."""

from io import BytesIO

import fitz
import pytest
from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    FloatObject,
    NameObject,
    NumberObject,
    StreamObject,
    TextStringObject,
)

from formfiller.models import FieldKind, FormField, PreviewHandle, UploadedDocument

RADIO_STATES = ("Email", "Phone", "Mail")


def _add_widget(page, field_type, name, rect, **attributes):
    widget = fitz.Widget()
    widget.field_type = field_type
    widget.field_name = name
    widget.rect = fitz.Rect(*rect)
    for key, value in attributes.items():
        setattr(widget, key, value)
    page.add_widget(widget)


def _to_bytes(document) -> bytes:
    try:
        return document.tobytes()
    finally:
        document.close()


@pytest.fixture
def contract_pdf() -> bytes:
    """A one page form with a text field and a checkbox."""
    document = fitz.open()
    page = document.new_page()
    _add_widget(page, fitz.PDF_WIDGET_TYPE_TEXT, "clientName", (72, 72, 300, 92), field_value="")
    _add_widget(page, fitz.PDF_WIDGET_TYPE_CHECKBOX, "agree", (72, 110, 90, 128), field_value=False)
    return _to_bytes(document)


@pytest.fixture
def mixed_form_pdf() -> bytes:
    """Text, multiline text, dropdown and checkbox fields, in that order."""
    document = fitz.open()
    page = document.new_page()
    _add_widget(page, fitz.PDF_WIDGET_TYPE_TEXT, "fullName", (72, 72, 300, 92), field_value="")
    _add_widget(
        page,
        fitz.PDF_WIDGET_TYPE_TEXT,
        "notes",
        (72, 110, 300, 170),
        field_value="",
        field_flags=fitz.PDF_TX_FIELD_IS_MULTILINE,
    )
    _add_widget(
        page,
        fitz.PDF_WIDGET_TYPE_COMBOBOX,
        "favoriteColor",
        (72, 190, 300, 210),
        choice_values=["Red", "Green", "Blue"],
        field_value="Red",
    )
    _add_widget(page, fitz.PDF_WIDGET_TYPE_CHECKBOX, "subscribe", (72, 230, 90, 248), field_value=False)
    return _to_bytes(document)


@pytest.fixture
def two_page_form_pdf() -> bytes:
    document = fitz.open()
    first = document.new_page()
    _add_widget(first, fitz.PDF_WIDGET_TYPE_TEXT, "firstPage", (72, 72, 300, 92), field_value="")
    second = document.new_page()
    _add_widget(second, fitz.PDF_WIDGET_TYPE_TEXT, "secondPage", (72, 72, 300, 92), field_value="")
    return _to_bytes(document)


@pytest.fixture
def plain_pdf() -> bytes:
    """Two pages of text and no form at all."""
    document = fitz.open()
    for number in (1, 2):
        page = document.new_page()
        page.insert_text((72, 72), f"Plain page {number}")
    return _to_bytes(document)


def _rect(left, bottom, right, top) -> ArrayObject:
    return ArrayObject([FloatObject(left), FloatObject(bottom), FloatObject(right), FloatObject(top)])


def _state_stream() -> StreamObject:
    stream = StreamObject()
    stream[NameObject("/Type")] = NameObject("/XObject")
    stream[NameObject("/Subtype")] = NameObject("/Form")
    stream[NameObject("/BBox")] = _rect(0, 0, 18, 18)
    return stream


def _write_form(writer, page, fields, annotations) -> bytes:
    page[NameObject("/Annots")] = ArrayObject(annotations)
    writer._root_object[NameObject("/AcroForm")] = DictionaryObject({NameObject("/Fields"): ArrayObject(fields)})
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def nested_form_pdf() -> bytes:
    """A text field ``addr`` whose kids ``street`` and ``city`` inherit ``/FT``."""
    writer = PdfWriter()
    page = writer.add_blank_page(612, 792)
    parent = DictionaryObject({NameObject("/FT"): NameObject("/Tx"), NameObject("/T"): TextStringObject("addr")})
    parent_ref = writer._add_object(parent)
    kids = []
    for index, name in enumerate(("street", "city")):
        kid = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/T"): TextStringObject(name),
                NameObject("/Parent"): parent_ref,
                NameObject("/Rect"): _rect(72, 700 - 30 * index, 300, 718 - 30 * index),
            }
        )
        kids.append(writer._add_object(kid))
    parent[NameObject("/Kids")] = ArrayObject(kids)
    return _write_form(writer, page, [parent_ref], kids)


@pytest.fixture
def radio_form_pdf() -> bytes:
    """A radio group ``contactMethod`` with one distinct on-state per button."""
    writer = PdfWriter()
    page = writer.add_blank_page(612, 792)
    parent = DictionaryObject(
        {
            NameObject("/FT"): NameObject("/Btn"),
            NameObject("/T"): TextStringObject("contactMethod"),
            NameObject("/Ff"): NumberObject(1 << 15),
            NameObject("/V"): NameObject("/Off"),
        }
    )
    parent_ref = writer._add_object(parent)
    kids = []
    for index, state in enumerate(RADIO_STATES):
        normal = DictionaryObject(
            {
                NameObject(f"/{state}"): writer._add_object(_state_stream()),
                NameObject("/Off"): writer._add_object(_state_stream()),
            }
        )
        kid = DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Widget"),
                NameObject("/Parent"): parent_ref,
                NameObject("/Rect"): _rect(72, 700 - 30 * index, 90, 718 - 30 * index),
                NameObject("/AS"): NameObject("/Off"),
                NameObject("/AP"): DictionaryObject({NameObject("/N"): normal}),
            }
        )
        kids.append(writer._add_object(kid))
    parent[NameObject("/Kids")] = ArrayObject(kids)
    return _write_form(writer, page, [parent_ref], kids)


@pytest.fixture
def corrupt_pdf() -> bytes:
    return b"%PDF-1.7\nthis is not really a pdf"


def text_values(pdf_bytes: bytes) -> dict:
    """Return ``{name: value}`` for the text fields of ``pdf_bytes``."""
    return PdfReader(BytesIO(pdf_bytes)).get_form_text_fields()


def field_values(pdf_bytes: bytes) -> dict:
    """Return ``{name: str(/V)}`` for every field of ``pdf_bytes``."""
    fields = PdfReader(BytesIO(pdf_bytes)).get_fields() or {}
    return {name: str(field.get("/V", "")) for name, field in fields.items()}


def appearance_state(pdf_bytes: bytes, name: str) -> str:
    """Return the ``/AS`` entry of the widget named ``name``."""
    reader = PdfReader(BytesIO(pdf_bytes))
    for page in reader.pages:
        for annotation in page.get("/Annots") or []:
            annotation = annotation.get_object()
            if annotation.get("/T") == name:
                return str(annotation.get("/AS", ""))
    raise AssertionError(f"no widget named {name}")


def widget_states(pdf_bytes: bytes, page_index: int = 0) -> list:
    """Return the ``/AS`` entry of every widget on one page, in order."""
    page = PdfReader(BytesIO(pdf_bytes)).pages[page_index]
    return [str(annotation.get_object().get("/AS", "")) for annotation in page.get("/Annots") or []]


def make_document(fields, name="sample.pdf", data=b"%PDF-1.4") -> UploadedDocument:
    return UploadedDocument(
        id=name,
        name=name,
        size=len(data),
        original_bytes=data,
        preview=PreviewHandle(page_count=1),
        fields=tuple(fields),
    )


def text_field(field_id: str, value: str = "", required: bool = False) -> FormField:
    return FormField(
        id=field_id,
        name=field_id,
        kind=FieldKind.TEXT,
        label=field_id,
        value=value,
        required=required,
    )
