"""Exception types raised by the ingestion pipeline."""


class LexigraphError(Exception):
    """Base exception for lexigraph errors."""

    pass


class SourceFormatError(LexigraphError):
    """Raw entry is missing structure an adapter cannot do without."""

    pass


class IngestionError(LexigraphError):
    """An entry's transaction failed and was rolled back.

    The original exception is available as ``cause`` (and ``__cause__``).
    """

    def __init__(self, headword: str, cause: BaseException | None = None) -> None:
        self.headword = headword
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to ingest '{headword}'{detail}")
