"""
Exception types raised by the specification tools.

Operation-level failures (unreadable files, catalog fetches, unusable tables)
are raised to the caller. Page-level and row-level problems are logged and
skipped by the extractors and never surface here.
"""


class SpecToolsError(Exception):
    """Base class for all specification tool errors."""


class FileReadError(SpecToolsError):
    """Input file is missing, unreadable, or of an unsupported type."""


class PdfExtractionError(SpecToolsError):
    """PDF could not be opened or has no pages."""


class FlatTableError(SpecToolsError):
    """CSV/Excel table could not be standardized into items."""


class CatalogLoadError(SpecToolsError):
    """Specification catalog could not be fetched or decoded."""


class UnknownSpecSetError(SpecToolsError):
    """Requested specification set is not registered."""

    def __init__(self, spec_set_id: str):
        self.spec_set_id = spec_set_id
        super().__init__(f'Specification set "{spec_set_id}" not found')
