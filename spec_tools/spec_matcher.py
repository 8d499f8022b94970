"""
Specification Matcher

Maps bid item numbers to specification records of the active
specification set and compiles the matched specifications for the report.

Matching order for one item number:
1. Exact catalog item number
2. For each set pattern accepting the number, the set's resolution rule
   (LA DOTD: first entry sharing the 3-digit section; TxDOT: exact match
   on the number before the decimal point)
3. Otherwise the "No specification found" sentinel

State lives on a SpecificationContext rather than in module globals. The
context lock keeps a catalog load or set switch atomic with respect to
matching, so one context can be shared between callers.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .errors import CatalogLoadError
from .items import Item
from .spec_catalog import (
    DEFAULT_CATALOG_ROOT,
    DEFAULT_TIMEOUT,
    SpecificationCatalog,
    SupplementalSpecRecord,
    load_catalog,
)
from .spec_sets import (
    DEFAULT_SPEC_SET,
    SPEC_SETS,
    SpecificationSet,
    available_spec_sets,
    get_spec_set,
)

logger = logging.getLogger(__name__)

NO_SPEC_FOUND = "No specification found"

MISSING_SPEC_TITLE = "Unknown"
MISSING_SPEC_CONTENT = "Specification content not available"
MISSING_SUPPLEMENTAL_TITLE = "Unknown Supplemental Specification"
MISSING_SUPPLEMENTAL_CONTENT = "Supplemental specification content not available"


@dataclass
class SpecificationMatch:
    """Specification matched to one item number."""
    item_number: str
    spec_reference: str = NO_SPEC_FOUND
    spec_content: str = ""
    supplemental_refs: List[SupplementalSpecRecord] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.spec_reference != NO_SPEC_FOUND

    def to_dict(self) -> Dict:
        return {
            "itemNumber": self.item_number,
            "specReference": self.spec_reference,
            "specContent": self.spec_content,
            "supplementalRefs": [s.to_dict() for s in self.supplemental_refs],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "SpecificationMatch":
        return cls(
            item_number=data.get("itemNumber", ""),
            spec_reference=data.get("specReference", NO_SPEC_FOUND),
            spec_content=data.get("specContent", ""),
            supplemental_refs=[SupplementalSpecRecord.from_dict(s) for s in data.get("supplementalRefs", [])],
        )


@dataclass
class SpecSection:
    """Full text of one main specification, as rendered in the report."""
    section: str
    title: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"section": self.section, "title": self.title, "content": self.content}


@dataclass
class CompiledSpecifications:
    """Unique main and supplemental specifications for a set of matches."""
    main_specs: List[SpecSection] = field(default_factory=list)
    supplemental_specs: List[SupplementalSpecRecord] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "mainSpecs": [s.to_dict() for s in self.main_specs],
            "supplementalSpecs": [s.to_dict() for s in self.supplemental_specs],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "CompiledSpecifications":
        return cls(
            main_specs=[SpecSection(**s) for s in data.get("mainSpecs", [])],
            supplemental_specs=[SupplementalSpecRecord.from_dict(s) for s in data.get("supplementalSpecs", [])],
        )


class SpecificationContext:
    """
    Active specification set plus its loaded catalog.

    Usage:
        context = SpecificationContext("ladotd-2016")
        matches = context.match_items(items)
        compiled = context.compile(matches)
    """

    def __init__(
        self,
        spec_set_id: str = DEFAULT_SPEC_SET,
        catalog_root: Union[str, Path, None] = None,
        timeout: float = DEFAULT_TIMEOUT
    ):
        self._spec_set: SpecificationSet = get_spec_set(spec_set_id)
        self.catalog_root = str(catalog_root or DEFAULT_CATALOG_ROOT)
        self.timeout = timeout
        self._catalog: Optional[SpecificationCatalog] = None
        self._catalog_set_id: Optional[str] = None
        self._lock = threading.RLock()

    # ========================
    # Specification Set
    # ========================

    @property
    def current_spec_set(self) -> str:
        return self._spec_set.id

    @property
    def spec_set(self) -> SpecificationSet:
        return self._spec_set

    @property
    def is_loaded(self) -> bool:
        return self._catalog is not None and self._catalog_set_id == self._spec_set.id

    def available_spec_sets(self) -> List[Dict[str, str]]:
        return available_spec_sets()

    def set_spec_set(self, spec_set_id: str) -> bool:
        """
        Switch the active specification set.

        Returns:
            False if the set is unknown (active set unchanged), else True
        """
        if spec_set_id not in SPEC_SETS:
            logger.error(f'Specification set "{spec_set_id}" not found')
            return False

        with self._lock:
            if self._spec_set.id != spec_set_id:
                self._spec_set = SPEC_SETS[spec_set_id]
                # Force a reload before the next match
                self._catalog = None
                self._catalog_set_id = None
                logger.info(f"Specification set changed to {self._spec_set.name}")

        return True

    # ========================
    # Catalog
    # ========================

    def catalog_source(self, spec_set: Optional[SpecificationSet] = None) -> str:
        """Directory or URL holding a set's catalog files."""
        spec_set = spec_set or self._spec_set
        root = self.catalog_root
        if root.startswith(("http://", "https://")):
            return f"{root.rstrip('/')}/{spec_set.catalog_dir}/"
        return str(Path(root) / spec_set.catalog_dir)

    def load_catalog(self, spec_set_id: Optional[str] = None, force: bool = False) -> SpecificationCatalog:
        """
        Load the catalog of a set, replacing the cached one.

        Memoized per set: calling again for the loaded set returns the cache
        unless force is set. Passing a different set id switches to it.

        Raises:
            UnknownSpecSetError: spec_set_id is not registered
            CatalogLoadError: either catalog file cannot be loaded
        """
        with self._lock:
            if spec_set_id is not None and spec_set_id != self._spec_set.id:
                get_spec_set(spec_set_id)
                self.set_spec_set(spec_set_id)

            if self.is_loaded and not force:
                return self._catalog

            source = self.catalog_source()
            try:
                catalog = load_catalog(source, timeout=self.timeout)
            except CatalogLoadError as e:
                logger.error(f"Failed to initialize specification matcher: {e}")
                raise CatalogLoadError(f"Failed to load specification data from {source}") from e

            self._catalog = catalog
            self._catalog_set_id = self._spec_set.id
            return catalog

    def _ensure_catalog(self) -> SpecificationCatalog:
        if self.is_loaded:
            return self._catalog
        return self.load_catalog()

    # ========================
    # Matching
    # ========================

    def find_supplemental_specs(self, content: str) -> List[SupplementalSpecRecord]:
        """
        Supplementals whose code appears anywhere in the content.

        Plain substring test in catalog order; a short code can match inside
        a longer token.
        """
        if not content:
            return []
        catalog = self._ensure_catalog()
        return [supp for supp in catalog.supplementals if supp.code and supp.code in content]

    def match(self, item_number: str) -> SpecificationMatch:
        """Match one item number against the active set's catalog."""
        with self._lock:
            catalog = self._ensure_catalog()
            spec_set = self._spec_set
            token = str(item_number).strip()

            spec = catalog.find_exact(token)
            if spec is None:
                for pattern in spec_set.item_number_patterns:
                    if pattern.fullmatch(token):
                        spec = spec_set.resolve(token, catalog)
                        if spec is not None:
                            break

            if spec is None:
                logger.debug(f"No specification for {token!r}")
                return SpecificationMatch(item_number=item_number)

            return SpecificationMatch(
                item_number=item_number,
                spec_reference=spec.reference,
                spec_content=spec.content,
                supplemental_refs=self.find_supplemental_specs(spec.content),
            )

    def match_items(self, items: Iterable[Item]) -> List[SpecificationMatch]:
        """One match per item, in item order."""
        with self._lock:
            self._ensure_catalog()
            matches = [self.match(item.item_number) for item in items]

        matched = sum(1 for m in matches if m.matched)
        logger.info(f"Matched {matched}/{len(matches)} items to {self._spec_set.display_name} specifications")
        return matches

    def compile(self, matches: Iterable[SpecificationMatch]) -> CompiledSpecifications:
        """
        Collect the full text of every distinct matched specification.

        References and supplemental codes are deduplicated in first-seen
        order. A reference that no longer resolves gets placeholder text.
        """
        references: List[str] = []
        codes: List[str] = []
        for m in matches:
            if m.spec_reference == NO_SPEC_FOUND:
                continue
            if m.spec_reference not in references:
                references.append(m.spec_reference)
            for supp in m.supplemental_refs:
                if supp.code not in codes:
                    codes.append(supp.code)

        if not references and not codes:
            return CompiledSpecifications()

        with self._lock:
            catalog = self._ensure_catalog()

            main_specs = []
            for reference in references:
                spec = catalog.find_by_reference(reference)
                if spec is None:
                    logger.warning(f"Specification no longer in catalog: {reference}")
                    main_specs.append(SpecSection(reference, MISSING_SPEC_TITLE, MISSING_SPEC_CONTENT))
                else:
                    main_specs.append(SpecSection(spec.section, spec.title, spec.content))

            supplemental_specs = []
            for code in codes:
                supp = catalog.find_supplemental(code)
                if supp is None:
                    logger.warning(f"Supplemental specification not in catalog: {code}")
                    supp = SupplementalSpecRecord(code, MISSING_SUPPLEMENTAL_TITLE, MISSING_SUPPLEMENTAL_CONTENT)
                supplemental_specs.append(supp)

        return CompiledSpecifications(main_specs=main_specs, supplemental_specs=supplemental_specs)
