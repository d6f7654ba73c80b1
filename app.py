"""Streamlit UI for the PDF Form Filler."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import streamlit as st

from formfiller.config import load_settings
from formfiller.errors import ExportError, PreviewError, UnsupportedFileError
from formfiller.models import FieldKind, FieldValue, FormField, UploadedDocument
from formfiller.utils import format_size
from models.app_state import AppState, completion_percentage
from services import (
    DocumentExporter,
    DocumentUploader,
    ExportResult,
    PDFViewer,
    UploadCandidate,
    clamp_page,
    preview_width,
)

SETTINGS = load_settings()

logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(levelname)s %(name)s: %(message)s",
)

VIEWER = PDFViewer()
UPLOADER = DocumentUploader(viewer=VIEWER)
EXPORTER = DocumentExporter()

_SELECT_PLACEHOLDER = "Select an option"

Notice = Tuple[str, str]


def _init_session_state() -> None:
    defaults = {
        "app_state": AppState(),
        "uploader_key": 0,
        "page_number": 1,
        "export_result": None,
        "export_source": None,
        "notices": [],
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _notify(kind: str, message: str) -> None:
    """Queue a transient notification; it survives the next ``st.rerun``."""

    st.session_state.notices.append((kind, message))


def _flush_notices() -> None:
    notices: List[Notice] = st.session_state.notices
    for kind, message in notices:
        icon = "✅" if kind == "success" else "⚠️"
        st.toast(message, icon=icon)
    st.session_state.notices = []


def _app_state() -> AppState:
    return st.session_state.app_state


def _clear_export() -> None:
    st.session_state.export_result = None
    st.session_state.export_source = None


def _handle_uploads(uploaded_files: Sequence) -> None:
    candidates = [UploadCandidate.from_uploaded_file(item) for item in uploaded_files]
    progress_bar = st.progress(0, text="Processing...")

    def _on_progress(percent: float) -> None:
        progress_bar.progress(int(percent), text=f"Processing... {percent:.0f}%")

    try:
        outcome = UPLOADER.ingest(_app_state(), candidates, on_progress=_on_progress)
    except UnsupportedFileError as exc:
        _notify("error", str(exc))
        return
    finally:
        progress_bar.empty()

    st.session_state.app_state = outcome.state
    for failure in outcome.failures:
        _notify("error", f"Failed to process {failure.name}. Please ensure it's a valid PDF.")
    if outcome.succeeded:
        _notify(
            "success",
            f"Successfully uploaded {outcome.succeeded} of {outcome.batch_size} PDF file(s).",
        )


def _select_document(document_id: str) -> None:
    st.session_state.app_state = _app_state().select(document_id)
    st.session_state.page_number = 1


def _render_sidebar() -> None:
    with st.sidebar:
        st.header("Files")
        uploaded_files = st.file_uploader(
            "Drag & drop PDF files here",
            type=["pdf"],
            accept_multiple_files=True,
            key=f"pdf_uploader_{st.session_state.uploader_key}",
        )
        if uploaded_files:
            _handle_uploads(uploaded_files)
            # A fresh key empties the uploader so the batch is processed once.
            st.session_state.uploader_key += 1
            st.rerun()

        st.divider()
        state = _app_state()
        for document in state.documents:
            is_selected = document.id == state.selected_id
            st.button(
                document.name,
                key=f"select_{document.id}",
                type="primary" if is_selected else "secondary",
                width="stretch",
                on_click=_select_document,
                args=(document.id,),
            )
            st.caption(format_size(document.size))


def _option_index(field: FormField) -> Optional[int]:
    if field.value in field.options:
        return list(field.options).index(field.value)
    return None


def field_label(field: FormField) -> str:
    """Widget label for ``field``; required fields of every kind carry ``*``."""

    return f"{field.label} *" if field.required else field.label


def _render_field(document: UploadedDocument, field: FormField) -> FieldValue:
    """Draw the widget for ``field`` and return the value it currently holds."""

    key = f"field_{document.id}_{field.id}"
    label = field_label(field)

    if field.kind == FieldKind.CHECKBOX:
        return st.checkbox(label, value=bool(field.value), key=key)
    if field.kind == FieldKind.MULTILINE_TEXT:
        return st.text_area(label, value=str(field.value), placeholder=field.placeholder, key=key)
    if field.kind == FieldKind.SINGLE_SELECT:
        selection = st.selectbox(
            label,
            options=list(field.options),
            index=_option_index(field),
            placeholder=_SELECT_PLACEHOLDER,
            key=key,
        )
        return selection or ""
    if field.kind == FieldKind.RADIO_GROUP:
        if not field.options:
            st.caption(f"{label}: no options available")
            return field.value
        selection = st.radio(label, options=list(field.options), index=_option_index(field), key=key)
        return selection or ""
    return st.text_input(label, value=str(field.value), placeholder=field.placeholder, key=key)


def _render_field_panel(document: UploadedDocument) -> None:
    st.subheader("Form Fields")
    if not document.detected:
        st.info("No fillable fields were found in this PDF; showing demonstration fields.")

    for field in document.fields:
        value = _render_field(document, field)
        if value != field.value:
            st.session_state.app_state = _app_state().set_field_value(document.id, field.id, value)
            _clear_export()


def _export(document: UploadedDocument) -> None:
    try:
        result = EXPORTER.export(document)
    except ExportError as exc:
        logging.error("Error filling PDF: %s", exc, exc_info=True)
        st.error("Failed to fill and download PDF. Please try again.")
        return
    st.session_state.export_result = result
    st.session_state.export_source = document
    st.success("Filled PDF is ready. Download below.")


def _render_header(document: UploadedDocument) -> None:
    percent = completion_percentage(document)
    st.caption(f"Progress: {percent}% complete")
    st.progress(percent)

    if st.button("Prepare Filled PDF", type="primary", key=f"export_{document.id}"):
        _export(document)

    result: Optional[ExportResult] = st.session_state.export_result
    if result is not None and st.session_state.export_source is document:
        st.download_button(
            label="Download Filled PDF",
            data=result.data,
            file_name=result.file_name,
            mime=result.mime,
        )


def _render_preview(document: UploadedDocument) -> None:
    st.subheader("PDF Preview")
    page_count = document.preview.page_count
    page_number = clamp_page(st.session_state.page_number, page_count)

    prev_col, info_col, next_col = st.columns([1, 2, 1])
    if prev_col.button("Previous", disabled=page_number <= 1, key="page_prev"):
        page_number = clamp_page(page_number - 1, page_count)
    if next_col.button("Next", disabled=page_number >= page_count, key="page_next"):
        page_number = clamp_page(page_number + 1, page_count)
    st.session_state.page_number = page_number
    info_col.markdown(f"Page {page_number} of {page_count}")

    width = preview_width(SETTINGS.viewport_width, SETTINGS.preview_max_width)
    try:
        rendered = VIEWER.render_page(document.original_bytes, page_number, width)
    except PreviewError as exc:
        logging.error("Error loading PDF: %s", exc)
        st.error("Failed to load PDF for preview.")
    else:
        st.image(rendered.image, width=rendered.width)
    st.caption(f"Form fields detected: {len(document.fields)}")


def main() -> None:
    st.set_page_config(page_title="PDF Form Filler", page_icon="📄", layout="wide")
    _init_session_state()
    _flush_notices()

    _render_sidebar()
    st.title("PDF Form Filler")

    document = _app_state().selected
    if document is None:
        st.info("Upload a PDF to get started. Drag and drop a PDF file or browse to select files.")
        return

    header = st.container()
    preview_col, fields_col = st.columns([2, 1])

    # Fields first, so the header and progress reflect this run's edits.
    with fields_col:
        _render_field_panel(document)
    document = _app_state().selected

    with header:
        _render_header(document)
    with preview_col:
        _render_preview(document)


if __name__ == "__main__":
    main()
