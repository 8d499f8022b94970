"""
Specification Sets

Each supported specification set pairs an item-number grammar with a rule
for resolving numbers that have no exact catalog entry. Sets are a small
closed registry keyed by id.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .errors import UnknownSpecSetError
from .item_numbers import ItemNumberValidator, compile_patterns
from .spec_catalog import SpecificationCatalog, SpecificationRecord

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Standard"


class SpecificationSet:
    """Base class: id, names, catalog folder, grammar, resolution rule."""

    id: str = ""
    name: str = ""
    display_name: str = DEFAULT_DISPLAY_NAME
    item_number_patterns: Tuple = ()

    @property
    def catalog_dir(self) -> str:
        """Folder name of this set's catalog under the catalog root."""
        return self.id

    def validator(self) -> ItemNumberValidator:
        return ItemNumberValidator(self.item_number_patterns)

    def resolve(self, token: str, catalog: SpecificationCatalog) -> Optional[SpecificationRecord]:
        """Find a catalog entry for a token with no exact match."""
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}({self.id!r})"


class LaDotdSpecSet(SpecificationSet):
    """LA DOTD hyphen-segmented codes (203-01, 201-01-00100)."""

    id = "ladotd-2016"
    name = "LA DOTD 2016 Standard Specifications"
    display_name = "LA DOTD 2016"
    item_number_patterns = compile_patterns([
        r"^\d{3}-\d{2}(-\d{5})?$",   # 203-01, 701-01-00100
        r"^\d{3}-\d{2}-\d{2}$",      # 203-01-00
        r"^\d{3}-\d{2}-\d{4}$",      # 203-01-0000
        r"^\d{3}-\d{2}$",            # 203-01
    ])

    def resolve(self, token, catalog):
        # Section is the first three digits
        if len(token) < 3:
            return None
        return catalog.find_by_prefix(token[:3])


class TxDotSpecSet(SpecificationSet):
    """TxDOT item numbers with optional decimal sub-items (100, 100.1, 1000)."""

    id = "txdot-2024"
    name = "TxDOT 2024 Standard Specifications"
    display_name = "TxDOT 2024"
    item_number_patterns = compile_patterns([
        r"^\d{3}$",
        r"^\d{3}\.\d{1,3}$",
        r"^\d{4}$",
    ])

    def resolve(self, token, catalog):
        return catalog.find_exact(token.split(".")[0])


SPEC_SETS: Dict[str, SpecificationSet] = {
    spec_set.id: spec_set for spec_set in (LaDotdSpecSet(), TxDotSpecSet())
}

DEFAULT_SPEC_SET = LaDotdSpecSet.id


def get_spec_set(spec_set_id: str) -> SpecificationSet:
    """Look up a registered set, raising UnknownSpecSetError if missing."""
    try:
        return SPEC_SETS[spec_set_id]
    except KeyError:
        raise UnknownSpecSetError(spec_set_id) from None


def available_spec_sets() -> List[Dict[str, str]]:
    """[{id, name}] for every registered set."""
    return [{"id": s.id, "name": s.name} for s in SPEC_SETS.values()]


def display_name(spec_set_id: str) -> str:
    """Short report name of a set; "Standard" for unknown ids."""
    spec_set = SPEC_SETS.get(spec_set_id)
    return spec_set.display_name if spec_set else DEFAULT_DISPLAY_NAME
