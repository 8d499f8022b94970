# Specification matching tools
from .errors import (
    SpecToolsError,
    FileReadError,
    PdfExtractionError,
    FlatTableError,
    CatalogLoadError,
    UnknownSpecSetError,
)
from .items import Item, standardize_items
from .inputs import load_items, is_supported_file, SUPPORTED_SUFFIXES
from .spec_sets import (
    SPEC_SETS,
    DEFAULT_SPEC_SET,
    get_spec_set,
    available_spec_sets,
    display_name,
)
from .spec_matcher import (
    SpecificationContext,
    SpecificationMatch,
    CompiledSpecifications,
    NO_SPEC_FOUND,
)
from .report import generate_specifications_pdf, report_filename
from .config import SpecAgentConfig, load_config

__all__ = [
    "SpecToolsError",
    "FileReadError",
    "PdfExtractionError",
    "FlatTableError",
    "CatalogLoadError",
    "UnknownSpecSetError",
    "Item",
    "standardize_items",
    "load_items",
    "is_supported_file",
    "SUPPORTED_SUFFIXES",
    "SPEC_SETS",
    "DEFAULT_SPEC_SET",
    "get_spec_set",
    "available_spec_sets",
    "display_name",
    "SpecificationContext",
    "SpecificationMatch",
    "CompiledSpecifications",
    "NO_SPEC_FOUND",
    "generate_specifications_pdf",
    "report_filename",
    "SpecAgentConfig",
    "load_config",
]
