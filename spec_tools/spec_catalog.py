"""
Specification Catalog

Static specification data for one specification set, loaded from two JSON
files:

    specifications.json    [{itemNumber, section, title, specContent}, ...]
    supplementalSpecs.json [{code, title, content}, ...]

The source is a directory on disk or an http(s) base URL.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from .errors import CatalogLoadError

logger = logging.getLogger(__name__)

SPECIFICATIONS_FILE = "specifications.json"
SUPPLEMENTALS_FILE = "supplementalSpecs.json"

DEFAULT_CATALOG_ROOT = Path(__file__).parent.parent / "references" / "specs"
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class SpecificationRecord:
    """One main specification entry."""
    item_number: str
    section: str
    title: str
    content: str = ""

    @property
    def reference(self) -> str:
        """Reference string used in match results ("<section> <title>")."""
        return f"{self.section} {self.title}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpecificationRecord":
        return cls(
            item_number=str(data.get("itemNumber", "")).strip(),
            section=str(data.get("section", "")),
            title=str(data.get("title", "")),
            content=str(data.get("specContent", "") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "itemNumber": self.item_number,
            "section": self.section,
            "title": self.title,
            "specContent": self.content,
        }


@dataclass(frozen=True)
class SupplementalSpecRecord:
    """A supplemental specification referenced by code from main spec text."""
    code: str
    title: str
    content: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SupplementalSpecRecord":
        return cls(
            code=str(data.get("code", "")),
            title=str(data.get("title", "")),
            content=str(data.get("content", "") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "title": self.title, "content": self.content}


@dataclass
class SpecificationCatalog:
    """Main and supplemental specifications for one set, in file order."""
    specifications: List[SpecificationRecord] = field(default_factory=list)
    supplementals: List[SupplementalSpecRecord] = field(default_factory=list)
    source: str = ""

    def find_exact(self, item_number: str) -> Optional[SpecificationRecord]:
        for spec in self.specifications:
            if spec.item_number == item_number:
                return spec
        return None

    def find_by_prefix(self, prefix: str) -> Optional[SpecificationRecord]:
        for spec in self.specifications:
            if spec.item_number.startswith(prefix):
                return spec
        return None

    def find_by_reference(self, reference: str) -> Optional[SpecificationRecord]:
        for spec in self.specifications:
            if spec.reference == reference:
                return spec
        return None

    def find_supplemental(self, code: str) -> Optional[SupplementalSpecRecord]:
        for supp in self.supplementals:
            if supp.code == code:
                return supp
        return None

    def __len__(self):
        return len(self.specifications)

    def __iter__(self):
        return iter(self.specifications)


# =============================================================================
# Loading
# =============================================================================

def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _join(source: str, name: str) -> str:
    if _is_url(source):
        return f"{source.rstrip('/')}/{name}"
    return str(Path(source) / name)


def load_json(location: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """
    Load a JSON document from a file path or URL.

    Raises:
        CatalogLoadError: file missing, non-2xx response, or invalid JSON
    """
    if _is_url(location):
        try:
            response = requests.get(location, timeout=timeout)
        except requests.RequestException as e:
            raise CatalogLoadError(f"Failed to load data from {location}: {e}") from e

        if not response.ok:
            raise CatalogLoadError(f"Failed to load data from {location}: {response.reason}")

        try:
            return response.json()
        except ValueError as e:
            raise CatalogLoadError(f"Failed to load data from {location}: {e}") from e

    try:
        with open(location, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Failed to load data from {location}: {e}") from e


def load_catalog(source: Union[str, Path], timeout: float = DEFAULT_TIMEOUT) -> SpecificationCatalog:
    """
    Load both catalog files for one specification set.

    Args:
        source: Directory or base URL holding specifications.json and supplementalSpecs.json
        timeout: HTTP timeout in seconds (URL sources only)

    Returns:
        SpecificationCatalog
    """
    source = str(source)
    logger.info(f"Loading specifications from {source}")

    raw_specs = load_json(_join(source, SPECIFICATIONS_FILE), timeout=timeout)
    raw_supps = load_json(_join(source, SUPPLEMENTALS_FILE), timeout=timeout)

    if not isinstance(raw_specs, list) or not isinstance(raw_supps, list):
        raise CatalogLoadError(f"Failed to load data from {source}: expected JSON arrays")
    if not all(isinstance(d, dict) for d in raw_specs + raw_supps):
        raise CatalogLoadError(f"Failed to load data from {source}: expected an object per record")

    catalog = SpecificationCatalog(
        specifications=[SpecificationRecord.from_dict(d) for d in raw_specs],
        supplementals=[SupplementalSpecRecord.from_dict(d) for d in raw_supps],
        source=source,
    )

    logger.info(f"Loaded {len(catalog.specifications)} specifications, "
                f"{len(catalog.supplementals)} supplementals")
    return catalog
