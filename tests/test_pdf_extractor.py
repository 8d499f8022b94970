"""
Tests for PDF Item Extraction

Tests text layout reading and multi-page aggregation on generated PDFs.
"""

import pytest
import sys
from pathlib import Path

import fitz  # PyMuPDF

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spec_tools.errors import PdfExtractionError
from spec_tools.pdf_extractor import parse_pdf, extract_items_from_document
from spec_tools.spec_sets import get_spec_set
from spec_tools.table_extractor import TableExtractor
from spec_tools.text_layout import PdfTextDocument, TextFragment


class FakeDocument:
    """Document whose pages are canned fragment lists; None pages fail."""

    def __init__(self, pages):
        self.pages = pages

    @property
    def page_count(self):
        return len(self.pages)

    def get_page_fragments(self, page_num):
        page = self.pages[page_num - 1]
        if page is None:
            raise RuntimeError("damaged content stream")
        return page


def fragments(y, *texts):
    return [TextFragment(text, 50 + i * 100, y) for i, text in enumerate(texts)]


class TestTextLayout:
    """Tests for reading positioned fragments."""

    def test_fragments_use_bottom_left_origin(self, tmp_path):
        pdf_path = tmp_path / "one.pdf"
        doc = fitz.open()
        page = doc.new_page(width=612, height=792)
        page.insert_text((72, 100), "203-01", fontname="helv", fontsize=10)
        doc.save(str(pdf_path))
        doc.close()

        with PdfTextDocument.open(pdf_path) as document:
            assert document.page_count == 1
            frags = document.get_page_fragments(1)

        assert len(frags) == 1
        assert frags[0].text.strip() == "203-01"
        assert frags[0].x == pytest.approx(72, abs=0.5)
        assert frags[0].y == pytest.approx(692, abs=0.5)

    def test_missing_file(self, tmp_path):
        with pytest.raises(PdfExtractionError, match="File not found"):
            PdfTextDocument.open(tmp_path / "missing.pdf")

    def test_undecodable_file(self, tmp_path):
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"this is not a pdf")
        with pytest.raises(PdfExtractionError):
            PdfTextDocument.open(bad)


class TestMultiPageAggregation:
    """Tests for document-level extraction."""

    @pytest.fixture
    def extractor(self):
        return TableExtractor(get_spec_set("ladotd-2016").validator())

    def test_page_order_then_row_order(self, extractor):
        document = FakeDocument([
            fragments(700, "ITEM", "DESCRIPTION", "UNIT", "QUANTITY")
            + fragments(670, "203-01", "EXCAVATION", "CU YD", "10"),
            fragments(700, "204-01", "SEEDING", "LB", "5")
            + fragments(670, "201-01", "CLEARING", "LS", "1"),
        ])

        items = extract_items_from_document(document, extractor)

        assert [i.item_number for i in items] == ["203-01", "204-01", "201-01"]

    def test_failed_page_is_skipped(self, extractor, caplog):
        document = FakeDocument([
            fragments(700, "203-01", "EXCAVATION", "CU YD", "10"),
            None,
            fragments(700, "204-01", "SEEDING", "LB", "5"),
        ])

        items = extract_items_from_document(document, extractor)

        assert [i.item_number for i in items] == ["203-01", "204-01"]
        assert "Error extracting content from page 2" in caplog.text

    def test_empty_document_pages(self, extractor):
        assert extract_items_from_document(FakeDocument([[], []]), extractor) == []


class TestParsePdf:
    """End-to-end extraction from a generated bid tabulation."""

    def test_bid_tabulation(self, bid_pdf):
        items = parse_pdf(bid_pdf, get_spec_set("ladotd-2016"))

        assert [i.item_number for i in items] == [
            "201-01-00100", "203-01", "204-01", "701-01", "999-99"
        ]
        excavation = items[1]
        assert excavation.description == "GENERAL EXCAVATION"
        assert excavation.unit == "CU YD"
        assert excavation.quantity == "1,500"

    def test_other_grammar_finds_nothing(self, bid_pdf):
        """LA DOTD codes do not fit the TxDOT grammar."""
        assert parse_pdf(bid_pdf, get_spec_set("txdot-2024")) == []

    def test_require_unit_header(self, make_table_pdf):
        pdf_path = make_table_pdf("no_unit.pdf", [
            ["ITEM", "DESCRIPTION", "QUANTITY"],
            ["340", "HOT MIX", "20"],
        ])
        txdot = get_spec_set("txdot-2024")

        with_header = parse_pdf(pdf_path, txdot)
        assert [i.item_number for i in with_header] == ["340"]
        assert with_header[0].quantity == "20"

        # Header rejected, so columns are read positionally
        fallback = parse_pdf(pdf_path, txdot, require_unit=True)
        assert [i.item_number for i in fallback] == ["340"]
        assert fallback[0].unit == "20"
        assert fallback[0].quantity == ""
