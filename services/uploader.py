"""Sequential ingestion of uploaded PDF files."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple

from formfiller.errors import UnsupportedFileError
from formfiller.models import UploadedDocument
from formfiller.parser import DetectionResult, detect_fields
from formfiller.utils import get_logger
from models.app_state import AppState

from .viewer import PDFViewer

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True)
class UploadCandidate:
    """One file picked by the user, before it is accepted."""

    name: str
    content_type: str
    data: bytes = field(repr=False)

    @classmethod
    def from_uploaded_file(cls, uploaded: Any) -> "UploadCandidate":
        """Build a candidate from a Streamlit ``UploadedFile``."""

        return cls(name=uploaded.name, content_type=uploaded.type or "", data=uploaded.getvalue())


@dataclass(frozen=True)
class FileFailure:
    name: str
    reason: str


@dataclass(frozen=True)
class UploadOutcome:
    """Result of one upload batch.

    ``batch_size`` counts the PDFs accepted into the batch; ``documents`` only
    those that loaded.
    """

    state: AppState
    documents: Tuple[UploadedDocument, ...]
    failures: Tuple[FileFailure, ...]
    batch_size: int

    @property
    def succeeded(self) -> int:
        return len(self.documents)


def _ignore_progress(_percent: float) -> None:
    return None


class DocumentUploader:
    """Turn picked files into :class:`UploadedDocument` entries of the session."""

    def __init__(
        self,
        viewer: Optional[PDFViewer] = None,
        detector: Callable[[bytes], DetectionResult] = detect_fields,
    ) -> None:
        self._viewer = viewer or PDFViewer()
        self._detect = detector

    def ingest(
        self,
        state: AppState,
        candidates: Sequence[UploadCandidate],
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadOutcome:
        """Load every PDF in ``candidates`` into ``state``, one after another.

        Raises :class:`UnsupportedFileError` when no candidate is a PDF. A file
        that fails to load is recorded in ``failures`` and the batch carries on.
        """

        pdfs = [candidate for candidate in candidates if candidate.content_type == PDF_MIME_TYPE]
        if not pdfs:
            logger.warning("Rejected upload of %d file(s): no PDF among them", len(candidates))
            raise UnsupportedFileError("Please upload PDF files only.")

        report = on_progress or _ignore_progress
        report(0.0)
        total = len(pdfs)
        loaded: List[UploadedDocument] = []
        failures: List[FileFailure] = []

        for index, candidate in enumerate(pdfs):
            try:
                document = self._load(candidate)
            except Exception as exc:
                logger.error("Error processing %s: %s", candidate.name, exc, exc_info=True)
                failures.append(FileFailure(name=candidate.name, reason=str(exc)))
            else:
                state = state.add_document(document)
                loaded.append(document)
            report((index + 1) / total * 100)

        report(0.0)
        logger.info("Upload batch finished: %d of %d PDF(s) loaded", len(loaded), total)
        return UploadOutcome(
            state=state,
            documents=tuple(loaded),
            failures=tuple(failures),
            batch_size=total,
        )

    def _load(self, candidate: UploadCandidate) -> UploadedDocument:
        data = bytes(candidate.data)
        preview = self._viewer.open_preview(data)
        detection = self._detect(data)
        if detection.detected:
            logger.info("Detected %d form fields in %s", len(detection.fields), candidate.name)
        else:
            logger.info("No form fields detected in %s, using demonstration fields", candidate.name)
        return UploadedDocument(
            id=uuid.uuid4().hex,
            name=candidate.name,
            size=len(data),
            original_bytes=data,
            preview=preview,
            fields=detection.fields,
            detected=detection.detected,
        )


__all__ = [
    "DocumentUploader",
    "FileFailure",
    "PDF_MIME_TYPE",
    "UploadCandidate",
    "UploadOutcome",
]
