"""Service-layer utilities for the PDF Form Filler project."""

from .exporter import DocumentExporter, ExportResult
from .uploader import DocumentUploader, FileFailure, UploadCandidate, UploadOutcome
from .viewer import PDFViewer, RenderedPage, clamp_page, preview_width

__all__ = [
	"DocumentExporter",
	"DocumentUploader",
	"ExportResult",
	"FileFailure",
	"PDFViewer",
	"RenderedPage",
	"UploadCandidate",
	"UploadOutcome",
	"clamp_page",
	"preview_width",
]
