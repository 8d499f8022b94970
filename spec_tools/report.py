"""
Specification Report

Renders the compiled specifications to a PDF with PyMuPDF:

    Title + generation date
    Items table (first N rows, overflow note)
    Technical Specifications / Table of Contents
    One page per main specification
    Supplemental specifications on a new page

Also writes CSV and JSON exports of the items and their matches.
"""

import csv
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import fitz  # PyMuPDF

from .items import Item
from .spec_matcher import NO_SPEC_FOUND, CompiledSpecifications, SpecificationMatch

logger = logging.getLogger(__name__)

# ============================================================================
# Page Layout (A4, measured in points; 1 mm = 72 / 25.4 pt)
# ============================================================================

MM = 72 / 25.4
PAGE_WIDTH = 210 * MM
PAGE_HEIGHT = 297 * MM
MARGIN = 20 * MM
LINE_HEIGHT = 7 * MM
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN

FONT_REGULAR = "helv"
FONT_BOLD = "hebo"

DEFAULT_MAX_TABLE_ROWS = 15

TABLE_HEADERS = ['Item Number', 'Description', 'Quantity', 'Unit']
TABLE_COLUMN_SHARES = [0.20, 0.50, 0.15, 0.15]
TABLE_TRUNCATE = [15, 50, 10, 10]

REPORT_AUTHOR = "Specification Manager"


def report_filename(display_name: str) -> str:
    """PDF filename for a set's display name: "LA DOTD 2016" -> "LA_DOTD_2016_Specifications.pdf"."""
    name = re.sub(r'\s+', '_', display_name)
    return f"{name}_Specifications.pdf"


def truncate_text(text, max_length: int) -> str:
    """Shorten text to max_length, ending in "..." when cut."""
    text = str(text or '')
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + '...'


def wrap_text(text: str, max_width: float, fontname: str = FONT_REGULAR, fontsize: float = 10) -> List[str]:
    """Greedy word wrap to a width in points."""
    lines = []
    for raw_line in text.splitlines() or ['']:
        current = ''
        for word in raw_line.split():
            candidate = f"{current} {word}" if current else word
            if fitz.get_text_length(candidate, fontname=fontname, fontsize=fontsize) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            # Hard-split words longer than a line
            while fitz.get_text_length(word, fontname=fontname, fontsize=fontsize) > max_width and len(word) > 1:
                cut = len(word)
                while cut > 1 and fitz.get_text_length(word[:cut], fontname=fontname, fontsize=fontsize) > max_width:
                    cut -= 1
                lines.append(word[:cut])
                word = word[cut:]
            current = word
        lines.append(current)
    return lines


class SpecificationReport:
    """
    Builds the specification report page by page, tracking the write cursor.

    Usage:
        report = SpecificationReport("LA DOTD 2016")
        report.build(items, compiled)
        report.save(output_dir / report_filename("LA DOTD 2016"))
    """

    def __init__(self, display_name: str, max_table_rows: int = DEFAULT_MAX_TABLE_ROWS,
                 generated_on: Optional[datetime] = None):
        self.display_name = display_name
        self.max_table_rows = max_table_rows
        self.generated_on = generated_on or datetime.now()
        self.doc = fitz.open()
        self.page = None
        self.y = MARGIN

    @property
    def title(self) -> str:
        return f"{self.display_name} Technical Specifications"

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    # ========================
    # Drawing primitives
    # ========================

    def new_page(self):
        self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self.y = MARGIN

    def _ensure_room(self, reserve: float = 0):
        if self.page is None or self.y > PAGE_HEIGHT - MARGIN - reserve:
            self.new_page()

    def _text(self, text: str, x: float = MARGIN, fontsize: float = 10, bold: bool = False):
        fontname = FONT_BOLD if bold else FONT_REGULAR
        self.page.insert_text(fitz.Point(x, self.y), text, fontname=fontname, fontsize=fontsize)

    def _centered(self, text: str, fontsize: float, bold: bool = False):
        fontname = FONT_BOLD if bold else FONT_REGULAR
        width = fitz.get_text_length(text, fontname=fontname, fontsize=fontsize)
        self._text(text, x=(PAGE_WIDTH - width) / 2, fontsize=fontsize, bold=bold)

    def _paragraphs(self, content: str):
        """Content split on blank lines, each paragraph wrapped to the page width."""
        for paragraph in content.split('\n\n'):
            self._ensure_room(LINE_HEIGHT)
            for line in wrap_text(paragraph, CONTENT_WIDTH):
                self._ensure_room()
                self._text(line)
                self.y += LINE_HEIGHT
            self.y += 3 * MM

    # ========================
    # Sections
    # ========================

    def _title_block(self):
        self._centered(self.title, fontsize=18, bold=True)
        self.y += 10 * MM
        self._centered(f"Generated on: {self.generated_on.strftime('%m/%d/%Y')}", fontsize=10)
        self.y += 15 * MM

    def _table_header(self):
        x = MARGIN
        for header, share in zip(TABLE_HEADERS, TABLE_COLUMN_SHARES):
            self._text(header, x=x, fontsize=12, bold=True)
            x += CONTENT_WIDTH * share
        self.y += LINE_HEIGHT
        rule_y = self.y - 4 * MM
        self.page.draw_line(fitz.Point(MARGIN, rule_y), fitz.Point(PAGE_WIDTH - MARGIN, rule_y), width=0.5)

    def items_table(self, items: Sequence[Item]):
        """Items table limited to max_table_rows rows, with an overflow note."""
        self._table_header()

        for item in items[:self.max_table_rows]:
            if self.y > PAGE_HEIGHT - MARGIN:
                self.new_page()
                self._table_header()

            cells = [item.item_number, item.description, item.quantity, item.unit]
            x = MARGIN
            for cell, share, limit in zip(cells, TABLE_COLUMN_SHARES, TABLE_TRUNCATE):
                self._text(truncate_text(cell, limit), x=x)
                x += CONTENT_WIDTH * share
            self.y += LINE_HEIGHT

        if len(items) > self.max_table_rows:
            self.y += 5 * MM
            self._text(f"+ {len(items) - self.max_table_rows} more items (full list in table of contents)")
            self.y += 5 * MM

    def table_of_contents(self, compiled: CompiledSpecifications):
        self._ensure_room(LINE_HEIGHT)
        self._text('Table of Contents', fontsize=12, bold=True)
        self.y += 8 * MM

        for index, spec in enumerate(compiled.main_specs, start=1):
            self._ensure_room()
            self._text(f"{index}. {spec.section}: {spec.title}")
            self.y += LINE_HEIGHT

        if compiled.supplemental_specs:
            self.y += 5 * MM
            self._ensure_room()
            self._text('Supplemental Specifications:', bold=True)
            self.y += 8 * MM
            for index, supp in enumerate(compiled.supplemental_specs, start=1):
                self._ensure_room()
                self._text(f"S{index}. {supp.code}: {supp.title}")
                self.y += LINE_HEIGHT

    def specification_sections(self, compiled: CompiledSpecifications):
        for index, spec in enumerate(compiled.main_specs, start=1):
            self.new_page()
            self._text(f"{index}. {spec.section}: {spec.title}", fontsize=14, bold=True)
            self.y += 10 * MM
            self._paragraphs(spec.content)

        if compiled.supplemental_specs:
            self.new_page()
            self._text('Supplemental Specifications', fontsize=14, bold=True)
            self.y += 10 * MM
            for index, supp in enumerate(compiled.supplemental_specs, start=1):
                self._ensure_room(LINE_HEIGHT)
                self._text(f"S{index}. {supp.code}: {supp.title}", fontsize=12, bold=True)
                self.y += 8 * MM
                self._paragraphs(supp.content)
                self.y += 7 * MM

    def build(self, items: Sequence[Item], compiled: CompiledSpecifications):
        """Lay out the whole report."""
        self.doc.set_metadata({
            "title": self.title,
            "subject": "Compiled technical specifications for project items",
            "author": REPORT_AUTHOR,
            "creator": REPORT_AUTHOR,
        })

        self.new_page()
        self._title_block()
        self.items_table(items)
        self.y += 15 * MM

        if compiled.main_specs:
            self._ensure_room(LINE_HEIGHT)
            self._text('Technical Specifications', fontsize=14, bold=True)
            self.y += 10 * MM
            self.table_of_contents(compiled)
            self.specification_sections(compiled)
        else:
            self._ensure_room()
            self._text('No specifications were found for the provided items.', fontsize=12)
            self.y += 10 * MM

    def save(self, output_path) -> str:
        self.doc.save(str(output_path))
        self.doc.close()
        return str(output_path)


def generate_specifications_pdf(
    items: Sequence[Item],
    compiled: CompiledSpecifications,
    display_name: str,
    output_dir,
    max_table_rows: int = DEFAULT_MAX_TABLE_ROWS
) -> str:
    """
    Render and save the specification report.

    Args:
        items: Standardized items (table section)
        compiled: Compiled specifications (TOC and sections)
        display_name: Specification set display name (title and filename)
        output_dir: Directory to write into
        max_table_rows: Items shown in the table before the overflow note

    Returns:
        Path to the saved PDF
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = output_dir / report_filename(display_name)

    report = SpecificationReport(display_name, max_table_rows=max_table_rows)
    report.build(items, compiled)
    pages = report.page_count
    report.save(pdf_path)

    logger.info(f"Specification report saved: {pdf_path} ({pages} pages)")
    return str(pdf_path)


# ============================================================================
# Exports
# ============================================================================

def write_items_csv(items: Sequence[Item], matches: Sequence[SpecificationMatch], csv_path) -> str:
    """Item table with the matched specification reference per row."""
    references: Dict[str, str] = {m.item_number: m.spec_reference for m in matches}

    fieldnames = ['Item Number', 'Description', 'Quantity', 'Unit', 'Specification', 'Supplementals']

    with open(csv_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()

        supplementals = {m.item_number: m.supplemental_refs for m in matches}
        for item in items:
            writer.writerow({
                'Item Number': item.item_number,
                'Description': item.description,
                'Quantity': item.quantity,
                'Unit': item.unit,
                'Specification': references.get(item.item_number, NO_SPEC_FOUND),
                'Supplementals': '; '.join(s.code for s in supplementals.get(item.item_number, [])),
            })

    return str(csv_path)


def write_matches_json(
    items: Sequence[Item],
    matches: Sequence[SpecificationMatch],
    compiled: CompiledSpecifications,
    spec_set_id: str,
    json_path,
    source_file: str = ""
) -> str:
    """Items, matches and compiled specifications as one JSON document."""
    report_data = {
        "source": source_file,
        "specSet": spec_set_id,
        "summary": {
            "total_items": len(items),
            "matched_items": sum(1 for m in matches if m.matched),
            "main_specs": len(compiled.main_specs),
            "supplemental_specs": len(compiled.supplemental_specs),
        },
        "items": [item.to_dict() for item in items],
        "matches": [m.to_dict() for m in matches],
        "specifications": compiled.to_dict(),
    }

    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(report_data, f, indent=2)

    return str(json_path)
