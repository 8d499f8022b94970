"""
Tests for PDF Table Reconstruction

Tests row clustering, header location, item-number validation and
row-to-item extraction on hand-built page layouts.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spec_tools.text_layout import TextFragment
from spec_tools.row_clusterer import (
    RowClusterConfig, estimate_row_tolerance, cluster_rows
)
from spec_tools.header_locator import (
    ColumnMap, UNKNOWN_COLUMN, is_header_row, map_columns, locate_header, row_text
)
from spec_tools.item_numbers import ItemNumberValidator, is_valid_item_number
from spec_tools.spec_sets import get_spec_set
from spec_tools.table_extractor import (
    TableExtractor, ExtractionState, DEFAULT_COLUMNS
)


def make_row(y, *texts, x0=50.0, step=100.0):
    """One row of fragments on a shared baseline."""
    return [TextFragment(text, x0 + i * step, y) for i, text in enumerate(texts)]


def flatten(*rows):
    return [frag for row in rows for frag in row]


@pytest.fixture
def la_validator():
    return get_spec_set("ladotd-2016").validator()


@pytest.fixture
def tx_validator():
    return get_spec_set("txdot-2024").validator()


class TestRowTolerance:
    """Tests for adaptive row tolerance estimation."""

    def test_no_values_uses_default(self):
        assert estimate_row_tolerance([]) == 3.0

    def test_single_baseline_uses_default(self):
        """Gaps at or below epsilon are ignored."""
        assert estimate_row_tolerance([700.0, 700.0, 700.05]) == 3.0

    def test_only_outlier_gaps_use_default_pitch(self):
        """Gaps of 20 units or more are section breaks, so the default pitch gets the slack."""
        assert estimate_row_tolerance([700.0, 676.0, 652.0, 628.0]) == pytest.approx(3.6)

    def test_most_common_gap_times_slack(self):
        # Gaps: 1, 13, 1, 13, 1, 13, 1 -> pitch 1 wins
        ys = [700, 699, 686, 685, 672, 671, 658, 657]
        # 1 * 1.2 is under the floor
        assert estimate_row_tolerance(ys) == 2.0

    def test_pitch_is_bucketed_to_half_units(self):
        # Gaps 2.9, 3.1, 2.8 all bucket to 3.0
        ys = [100.0, 102.9, 106.0, 108.8]
        assert estimate_row_tolerance(ys) == pytest.approx(3.6)

    def test_tie_goes_to_smaller_gap(self):
        # Gaps 4 and 8 once each
        ys = [100.0, 104.0, 112.0]
        assert estimate_row_tolerance(ys) == pytest.approx(4.8)

    def test_tunables_are_honored(self):
        config = RowClusterConfig(default_tolerance=5.0, outlier_ceiling=30.0, slack_factor=1.0)
        assert estimate_row_tolerance([], config) == 5.0
        assert estimate_row_tolerance([700.0, 676.0, 652.0], config) == 24.0


class TestClusterRows:
    """Tests for grouping fragments into rows."""

    def test_empty_page(self):
        assert cluster_rows([]) == []

    def test_rows_top_to_bottom_left_to_right(self):
        top = make_row(700, "203-01", "EXCAVATION", "CU YD", "1500")
        bottom = make_row(676, "204-01", "EROSION CONTROL", "LS", "1")
        # Shuffled input
        fragments = list(reversed(flatten(top, bottom)))

        rows = cluster_rows(fragments)

        assert [[f.text for f in row] for row in rows] == [
            ["203-01", "EXCAVATION", "CU YD", "1500"],
            ["204-01", "EROSION CONTROL", "LS", "1"],
        ]

    def test_baseline_jitter_stays_in_row(self):
        """A cell sitting a unit below its neighbours is the same row."""
        fragments = [
            TextFragment("203-01", 50, 700), TextFragment("EXCAVATION", 150, 699),
            TextFragment("204-01", 50, 686), TextFragment("EROSION", 150, 685),
            TextFragment("302-01", 50, 672), TextFragment("BASE", 150, 671),
        ]

        rows = cluster_rows(fragments)

        assert len(rows) == 3
        assert [f.text for f in rows[1]] == ["204-01", "EROSION"]

    def test_every_fragment_in_exactly_one_row(self):
        fragments = flatten(
            make_row(700, "a", "b", "c"),
            make_row(670, "d", "e"),
            make_row(640, "f"),
        )

        rows = cluster_rows(fragments)
        clustered = [f for row in rows for f in row]

        assert sorted(clustered, key=lambda f: (f.text)) == sorted(fragments, key=lambda f: f.text)
        assert all(row for row in rows)

    def test_explicit_tolerance_skips_estimate(self):
        fragments = flatten(make_row(700, "a", "b"), make_row(690, "c", "d"))
        assert len(cluster_rows(fragments, tolerance=15)) == 1
        assert len(cluster_rows(fragments, tolerance=5)) == 2

    def test_deterministic(self):
        fragments = flatten(make_row(700, "x", "y"), make_row(650, "z"))
        assert cluster_rows(fragments) == cluster_rows(list(reversed(fragments)))


class TestHeaderLocator:
    """Tests for header detection and column mapping."""

    def test_row_text(self):
        assert row_text(make_row(700, " Item No. ", "DESCRIPTION")) == "item no. description"

    def test_header_needs_item_description_and_quantity(self):
        assert is_header_row(make_row(700, "ITEM", "DESCRIPTION", "UNIT", "QUANTITY"))
        assert is_header_row(make_row(700, "Item No.", "Desc.", "Qty"))
        assert not is_header_row(make_row(700, "ITEM", "DESCRIPTION", "UNIT"))
        assert not is_header_row(make_row(700, "203-01", "EXCAVATION", "CU YD", "1500"))

    def test_unit_is_optional_unless_required(self):
        row = make_row(700, "ITEM", "DESCRIPTION", "QUANTITY")
        assert is_header_row(row)
        assert not is_header_row(row, require_unit=True)
        assert is_header_row(make_row(700, "ITEM", "DESCRIPTION", "UNIT", "QUANTITY"), require_unit=True)

    def test_map_columns(self):
        columns = map_columns(make_row(700, "PAY ITEM", "DESCRIPTION", "QUANTITY", "UNIT"))
        assert columns == ColumnMap(item_number=0, description=1, quantity=2, unit=3)

    def test_map_columns_first_match_wins(self):
        # "UNIT PRICE" comes after "UNIT", so unit stays at column 2
        columns = map_columns(make_row(700, "ITEM", "DESC", "UNIT", "QTY", "UNIT PRICE"))
        assert columns.unit == 2
        assert columns.quantity == 3

    def test_partial_header_leaves_unknown(self):
        columns = map_columns(make_row(700, "ITEM", "DESCRIPTION", "QUANTITY"))
        assert columns.unit == UNKNOWN_COLUMN
        assert columns.is_partial
        resolved = columns.resolve(DEFAULT_COLUMNS)
        assert resolved.unit == DEFAULT_COLUMNS.unit
        assert not resolved.is_partial

    def test_locate_first_header(self):
        rows = [
            make_row(760, "PROJECT", "H.001234"),
            make_row(730, "ITEM", "DESCRIPTION", "UNIT", "QUANTITY"),
            make_row(700, "203-01", "EXCAVATION", "CU YD", "1500"),
            make_row(670, "ITEM", "DESCRIPTION", "QUANTITY"),
        ]

        header = locate_header(rows)

        assert header is not None
        assert header.row_index == 1

    def test_no_header(self):
        assert locate_header([make_row(700, "203-01", "EXCAVATION")]) is None


class TestItemNumberValidator:
    """Tests for item-number grammars."""

    @pytest.mark.parametrize("token", ["203-01", "201-01-00100", "701-01-00", "203-01-0000"])
    def test_la_dotd_accepts(self, la_validator, token):
        assert la_validator(token)

    @pytest.mark.parametrize("token", ["", "203", "203-1", "20301", "203-01-001", "ITEM", "203-01 "])
    def test_la_dotd_rejects(self, la_validator, token):
        assert not la_validator(token)

    @pytest.mark.parametrize("token", ["100", "100.1", "340.123", "1000"])
    def test_txdot_accepts(self, tx_validator, token):
        assert tx_validator(token)

    @pytest.mark.parametrize("token", ["10", "100.", "100.1234", "10000", "203-01"])
    def test_txdot_rejects(self, tx_validator, token):
        assert not tx_validator(token)

    def test_whole_token_must_match(self):
        validator = ItemNumberValidator([r"\d{3}"])
        assert validator("123")
        assert not validator("1234")
        assert not validator("x123")

    def test_none_and_empty(self):
        assert not is_valid_item_number(None, ItemNumberValidator([r".*"]).patterns)
        assert not is_valid_item_number("", ItemNumberValidator([r".*"]).patterns)


class TestTableExtractor:
    """Tests for the per-page extraction state machine."""

    def test_header_table(self, la_validator):
        rows = [
            make_row(760, "ITEM", "DESCRIPTION", "QUANTITY", "UNIT"),
            make_row(730, "203-01", "EXCAVATION", "1500", "CU YD"),
            make_row(700, "204-01", "EROSION CONTROL", "1", "LS"),
        ]
        extractor = TableExtractor(la_validator)

        items = extractor.extract_rows(rows)

        assert extractor.state == ExtractionState.HEADER_FOUND
        assert [i.to_dict() for i in items] == [
            {"itemNumber": "203-01", "description": "EXCAVATION", "quantity": "1500", "unit": "CU YD"},
            {"itemNumber": "204-01", "description": "EROSION CONTROL", "quantity": "1", "unit": "LS"},
        ]

    def test_rows_above_header_are_ignored(self, la_validator):
        rows = [
            make_row(790, "202-01", "REMOVAL", "LS", "1"),
            make_row(760, "ITEM", "DESCRIPTION", "UNIT", "QUANTITY"),
            make_row(730, "203-01", "EXCAVATION", "CU YD", "1500"),
        ]

        items = TableExtractor(la_validator).extract_rows(rows)

        assert [i.item_number for i in items] == ["203-01"]

    def test_invalid_and_short_rows_skipped(self, la_validator):
        rows = [
            make_row(760, "ITEM", "DESCRIPTION", "UNIT", "QUANTITY"),
            make_row(730, "SUBTOTAL", "", "", "12,000"),
            make_row(700, "203-01"),
            make_row(670, "203-01", "EXCAVATION", "CU YD", "1500"),
        ]

        items = TableExtractor(la_validator).extract_rows(rows)

        assert len(items) == 1
        assert items[0].quantity == "1500"

    def test_no_header_uses_positional_columns(self, la_validator):
        rows = [
            make_row(730, "203-01", "EXCAVATION", "CU YD", "1500"),
            make_row(700, "Page 2 of 4", "continued"),
        ]
        extractor = TableExtractor(la_validator)

        items = extractor.extract_rows(rows)

        assert extractor.state == ExtractionState.NO_HEADER_FALLBACK
        assert items[0].to_dict() == {
            "itemNumber": "203-01", "description": "EXCAVATION", "quantity": "1500", "unit": "CU YD"
        }

    def test_missing_columns_read_as_empty(self, tx_validator):
        rows = [make_row(730, "340", "HOT MIX")]

        items = TableExtractor(tx_validator).extract_rows(rows)

        assert items[0].quantity == ""
        assert items[0].unit == ""

    def test_custom_default_columns(self, tx_validator):
        columns = ColumnMap(item_number=1, description=2, quantity=3, unit=4)
        rows = [make_row(730, "1", "464", "RC PIPE 24 IN", "420", "LF")]

        items = TableExtractor(tx_validator, default_columns=columns).extract_rows(rows)

        assert items[0].item_number == "464"
        assert items[0].unit == "LF"

    def test_cells_are_trimmed(self, la_validator):
        rows = [make_row(730, " 203-01 ", " EXCAVATION ", "CU YD", " 1500")]
        items = TableExtractor(la_validator).extract_rows(rows)
        assert items[0].item_number == "203-01"
        assert items[0].description == "EXCAVATION"

    def test_extract_page_is_repeatable(self, la_validator):
        fragments = flatten(
            make_row(760, "ITEM", "DESCRIPTION", "UNIT", "QUANTITY"),
            make_row(730, "203-01", "EXCAVATION", "CU YD", "1500"),
        )
        extractor = TableExtractor(la_validator)

        first = extractor.extract_page(fragments)
        second = extractor.extract_page(fragments)

        assert first == second
        assert len(first) == 1
