"""
Error types raised by the News Report services.

None of these are fatal: the crawler absorbs FetchFailure into the crawl
outcome, and the console shell reports the others and returns to the menu.
"""


class NewsReportError(Exception):
    """Base class for all News Report errors."""


class FetchFailure(NewsReportError):
    """A single feed could not be downloaded or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class NoReportYet(NewsReportError):
    """No crawl has completed in this process."""


class PersistenceFailure(NewsReportError):
    """A report could not be written to disk."""


class ReportNotFound(NewsReportError):
    """The report file does not exist."""


class ReportLoadFailure(NewsReportError):
    """The report file exists but could not be decoded."""


class InvalidSelection(NewsReportError):
    """An article index was non-numeric or out of range."""
