"""
Tests for the Specification Report

Tests PDF layout helpers, report generation and the CSV/JSON exports.
"""

import csv
import json
import pytest
import sys
from pathlib import Path

import fitz  # PyMuPDF

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spec_tools.items import Item
from spec_tools.report import (
    CONTENT_WIDTH, SpecificationReport, generate_specifications_pdf,
    report_filename, truncate_text, wrap_text, write_items_csv, write_matches_json
)
from spec_tools.spec_matcher import CompiledSpecifications, SpecificationContext


@pytest.fixture(scope="module")
def context():
    return SpecificationContext("ladotd-2016")


@pytest.fixture
def items():
    return [
        Item("203-01", "GENERAL EXCAVATION", "1500", "CU YD"),
        Item("701-01", "RC PIPE 18 IN", "240", "LF"),
        Item("203-01", "EMBANKMENT", "900", "CU YD"),
        Item("999-99", "UNLISTED ITEM", "3", "EA"),
    ]


def pdf_text(path):
    with fitz.open(str(path)) as doc:
        return doc.page_count, "\n".join(page.get_text() for page in doc)


class TestLayoutHelpers:
    """Tests for text fitting."""

    def test_report_filename(self):
        assert report_filename("LA DOTD 2016") == "LA_DOTD_2016_Specifications.pdf"
        assert report_filename("TxDOT 2024") == "TxDOT_2024_Specifications.pdf"
        assert report_filename("LA  DOTD\t2016") == "LA_DOTD_2016_Specifications.pdf"

    def test_truncate_text(self):
        assert truncate_text("EXCAVATION", 15) == "EXCAVATION"
        assert truncate_text("CLEARING AND GRUBBING", 10) == "CLEARIN..."
        assert truncate_text(None, 10) == ""

    def test_wrap_text_fits_width(self):
        text = "This work consists of excavation, hauling, disposal and compaction. " * 10
        lines = wrap_text(text, CONTENT_WIDTH)

        assert len(lines) > 1
        for line in lines:
            assert fitz.get_text_length(line, fontname="helv", fontsize=10) <= CONTENT_WIDTH
        assert " ".join(lines).split() == text.split()

    def test_wrap_text_splits_long_words(self):
        lines = wrap_text("X" * 400, 100)
        assert "".join(lines) == "X" * 400
        assert all(fitz.get_text_length(line, fontname="helv", fontsize=10) <= 100 for line in lines)


class TestSpecificationPdf:
    """Tests for the rendered report."""

    def test_report_contents(self, tmp_path, context, items):
        compiled = context.compile(context.match_items(items))

        path = generate_specifications_pdf(items, compiled, "LA DOTD 2016", tmp_path)

        assert Path(path).name == "LA_DOTD_2016_Specifications.pdf"
        pages, text = pdf_text(path)
        # Title page, one page per main spec, supplementals
        assert pages >= 4
        assert "LA DOTD 2016 Technical Specifications" in text
        assert "Table of Contents" in text
        assert "1. 203: Excavation and Embankment" in text
        assert "2. 701: Culverts and Storm Drains" in text
        assert "S1. SUPP-203B: Embankment Material Requirements" in text
        assert "more items" not in text

    def test_metadata(self, tmp_path, context, items):
        compiled = context.compile(context.match_items(items))
        path = generate_specifications_pdf(items, compiled, "LA DOTD 2016", tmp_path)

        with fitz.open(path) as doc:
            assert doc.metadata["title"] == "LA DOTD 2016 Technical Specifications"
            assert doc.metadata["author"] == "Specification Manager"

    def test_table_overflow_note(self, tmp_path, context, items):
        compiled = context.compile(context.match_items(items))

        path = generate_specifications_pdf(items, compiled, "LA DOTD 2016", tmp_path, max_table_rows=2)

        _, text = pdf_text(path)
        assert "+ 2 more items (full list in table of contents)" in text

    def test_no_specifications_found(self, tmp_path):
        path = generate_specifications_pdf(
            [Item("999-99", "UNLISTED")], CompiledSpecifications(), "TxDOT 2024", tmp_path
        )

        pages, text = pdf_text(path)
        assert pages == 1
        assert "No specifications were found for the provided items." in text

    def test_long_table_continues_on_new_page(self, tmp_path):
        many = [Item(f"203-{i:02d}", "ROW") for i in range(60)]
        report = SpecificationReport("LA DOTD 2016", max_table_rows=60)

        report.build(many, CompiledSpecifications())

        assert report.page_count > 1


class TestExports:
    """Tests for CSV and JSON exports."""

    def test_items_csv(self, tmp_path, context, items):
        matches = context.match_items(items)

        path = write_items_csv(items, matches, tmp_path / "items.csv")

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 4
        assert rows[0]["Specification"] == "203 Excavation and Embankment"
        assert rows[0]["Supplementals"] == "SUPP-203B"
        assert rows[3]["Specification"] == "No specification found"
        assert rows[3]["Supplementals"] == ""

    def test_matches_json(self, tmp_path, context, items):
        matches = context.match_items(items)
        compiled = context.compile(matches)

        path = write_matches_json(items, matches, compiled, "ladotd-2016",
                                  tmp_path / "matches.json", source_file="bid.pdf")

        data = json.loads(Path(path).read_text(encoding="utf-8"))
        assert data["specSet"] == "ladotd-2016"
        assert data["source"] == "bid.pdf"
        assert data["summary"] == {
            "total_items": 4, "matched_items": 3, "main_specs": 2, "supplemental_specs": 2
        }
        assert data["items"][0]["itemNumber"] == "203-01"
        assert [s["section"] for s in data["specifications"]["mainSpecs"]] == ["203", "701"]
