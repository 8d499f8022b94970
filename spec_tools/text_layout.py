"""
Positioned Text Layout

Turns PDF pages into positioned text fragments for table reconstruction.
PyMuPDF reports span baselines with a top-left origin; fragments use the
PDF convention instead (origin bottom-left, y increasing upward) so that
"top of page first" means "largest y first".
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import fitz  # PyMuPDF

from .errors import PdfExtractionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextFragment:
    """A single positioned run of text on a page."""
    text: str
    x: float
    y: float

    def __repr__(self):
        return f"TextFragment({self.text!r}, x={self.x:.1f}, y={self.y:.1f})"


def page_fragments(page) -> List[TextFragment]:
    """
    Read every non-blank text span on a PyMuPDF page.

    Args:
        page: fitz.Page

    Returns:
        Fragments in the order PyMuPDF reports them (no ordering guarantee)
    """
    height = page.rect.height
    fragments = []

    text_dict = page.get_text("dict")
    for block in text_dict.get("blocks", []):
        # Image blocks carry no "lines"
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                text = span.get("text", "")
                if not text.strip():
                    continue
                origin_x, origin_y = span["origin"]
                fragments.append(TextFragment(text=text, x=origin_x, y=height - origin_y))

    return fragments


class PdfTextDocument:
    """
    Page/fragment view over a PDF file.

    The extractors only rely on `page_count` and `get_page_fragments()`,
    so anything exposing those two members can stand in for a PDF.

    Usage:
        with PdfTextDocument.open("bid_tab.pdf") as document:
            for page_num in range(1, document.page_count + 1):
                fragments = document.get_page_fragments(page_num)
    """

    def __init__(self, doc: "fitz.Document", source: str = ""):
        self._doc = doc
        self.source = source

    @classmethod
    def open(cls, pdf_path: Union[str, Path]) -> "PdfTextDocument":
        """Open a PDF file, raising PdfExtractionError if it cannot be decoded."""
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise PdfExtractionError(f"File not found: {pdf_path}")

        try:
            doc = fitz.open(str(pdf_path))
        except Exception as e:
            raise PdfExtractionError(f"PDF loading error: {e}") from e

        if doc.page_count == 0:
            doc.close()
            raise PdfExtractionError(f"PDF has no pages: {pdf_path.name}")

        logger.debug(f"Opened {pdf_path.name}: {doc.page_count} pages")
        return cls(doc, source=str(pdf_path))

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def get_page_fragments(self, page_num: int) -> List[TextFragment]:
        """Fragments for a 1-based page number."""
        return page_fragments(self._doc[page_num - 1])

    def close(self):
        self._doc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
