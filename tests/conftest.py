"""Shared fixtures: generated bid-tabulation PDFs and flat tables."""

import sys
from pathlib import Path

import fitz  # PyMuPDF
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
ROW_PITCH = 24
COLUMN_X = [40, 120, 380, 480]
# Alternate fonts so every cell comes back as its own span
COLUMN_FONTS = ["helv", "tiro", "helv", "tiro"]


def write_table_page(doc, rows, top=100, title=None):
    """Add a page with one text row per entry, ROW_PITCH points apart."""
    page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
    if title:
        page.insert_text((COLUMN_X[0], top - 40), title, fontname="hebo", fontsize=12)
    for index, cells in enumerate(rows):
        y = top + index * ROW_PITCH
        for x, font, text in zip(COLUMN_X, COLUMN_FONTS, cells):
            if text:
                page.insert_text((x, y), text, fontname=font, fontsize=9)
    return page


@pytest.fixture
def make_table_pdf(tmp_path):
    """Factory: write a one-page PDF with the given rows and return its path."""
    def make(name, rows):
        pdf_path = tmp_path / name
        doc = fitz.open()
        write_table_page(doc, rows)
        doc.save(str(pdf_path))
        doc.close()
        return pdf_path
    return make


@pytest.fixture
def bid_pdf(tmp_path):
    """Two-page LA DOTD bid tabulation: header table, then a headerless continuation."""
    pdf_path = tmp_path / "bid_tab.pdf"
    doc = fitz.open()
    write_table_page(doc, [
        ["ITEM NO.", "DESCRIPTION", "UNIT", "QUANTITY"],
        ["201-01-00100", "CLEARING AND GRUBBING", "LS", "1"],
        ["203-01", "GENERAL EXCAVATION", "CU YD", "1,500"],
        ["SUBTOTAL", "", "", "2"],
        ["204-01", "TEMPORARY SEEDING", "LB", "60"],
    ], title="BID TABULATION")
    write_table_page(doc, [
        ["701-01", "RC PIPE 18 IN", "LF", "240"],
        ["999-99", "UNLISTED ITEM", "EA", "3"],
    ])
    doc.save(str(pdf_path))
    doc.close()
    return pdf_path


@pytest.fixture
def bid_csv(tmp_path):
    csv_path = tmp_path / "items.csv"
    csv_path.write_text(
        "Item Number,Description,Quantity,Unit\n"
        "203-01,Excavation,1500,CU YD\n"
        "502-01,Asphalt Concrete,800,TON\n"
        "999-99,Unlisted,3,EA\n"
        ",Blank item,1,LS\n",
        encoding="utf-8"
    )
    return csv_path
