"""
Standardized bid items, the shape every input format is reduced to.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

# Placeholder item number that never reaches the matcher
UNKNOWN_ITEM_NUMBER = "Unknown"


@dataclass
class Item:
    """A standardized bid item. item_number is never empty."""
    item_number: str
    description: str = ""
    quantity: str = ""
    unit: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "itemNumber": self.item_number,
            "description": self.description,
            "quantity": self.quantity,
            "unit": self.unit,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Item":
        return cls(
            item_number=data.get("itemNumber", ""),
            description=data.get("description", ""),
            quantity=data.get("quantity", ""),
            unit=data.get("unit", ""),
        )


def clean_value(value) -> str:
    """Stringify and trim a cell value; None becomes ""."""
    if value is None:
        return ""
    return str(value).strip()


def standardize_items(candidates: Iterable) -> List[Item]:
    """
    Trim and stringify every field, dropping unusable item numbers.

    Accepts anything with item_number/description/quantity/unit attributes.
    Items whose number is empty or exactly "Unknown" are dropped.
    Generated placeholders such as "Unknown-3" are kept.
    """
    items = []
    for candidate in candidates:
        item = Item(
            item_number=clean_value(candidate.item_number),
            description=clean_value(candidate.description),
            quantity=clean_value(candidate.quantity),
            unit=clean_value(candidate.unit),
        )
        if not item.item_number or item.item_number == UNKNOWN_ITEM_NUMBER:
            continue
        items.append(item)
    return items
