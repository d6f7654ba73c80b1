"""Read-only page preview of the original upload using PyMuPDF."""

from __future__ import annotations

from dataclasses import dataclass, field

import fitz

from formfiller.errors import PreviewError
from formfiller.models import PreviewHandle
from formfiller.utils import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_WIDTH = 600
VIEWPORT_MARGIN = 100


@dataclass(frozen=True)
class RenderedPage:
    """A single page rasterised to PNG."""

    image: bytes = field(repr=False)
    page_number: int
    page_count: int
    width: int


def clamp_page(page_number: int, page_count: int) -> int:
    """Bound ``page_number`` to ``[1, page_count]``."""

    return max(1, min(page_number, max(page_count, 1)))


def preview_width(viewport_width: int, max_width: int = DEFAULT_MAX_WIDTH) -> int:
    """Width to render at: ``min(max_width, viewport_width - 100)``, at least 1."""

    return max(1, min(max_width, viewport_width - VIEWPORT_MARGIN))


class PDFViewer:
    """Render pages of the unfilled document; edits are never reflected here."""

    def open_preview(self, pdf_bytes: bytes) -> PreviewHandle:
        """Open ``pdf_bytes`` once to learn its page count."""

        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                page_count = document.page_count
        except Exception as exc:
            raise PreviewError(f"Could not open PDF for preview: {exc}") from exc
        if page_count < 1:
            raise PreviewError("PDF has no pages to preview")
        return PreviewHandle(page_count=page_count)

    def render_page(self, pdf_bytes: bytes, page_number: int, width: int) -> RenderedPage:
        """Render one page at ``width`` pixels with form widgets drawn and no text layer."""

        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                page_count = document.page_count
                if page_count < 1:
                    raise PreviewError("PDF has no pages to preview")
                number = clamp_page(page_number, page_count)
                page = document[number - 1]
                zoom = width / page.rect.width
                pixmap = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), annots=True)
                image = pixmap.tobytes("png")
                rendered_width = pixmap.width
        except PreviewError:
            raise
        except Exception as exc:
            logger.error("Failed to render page %d: %s", page_number, exc)
            raise PreviewError(f"Failed to render page {page_number}: {exc}") from exc

        logger.debug("Rendered page %d/%d at %dpx", number, page_count, rendered_width)
        return RenderedPage(image=image, page_number=number, page_count=page_count, width=rendered_width)


__all__ = ["PDFViewer", "RenderedPage", "clamp_page", "preview_width"]
