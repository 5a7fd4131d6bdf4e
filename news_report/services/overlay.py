"""
Manual overlay sessions.

An overlay session copies the current report into a ManualReport and lets the
operator attach their own summary and opinion to individual articles. The
session owns the ManualReport until it is saved.
"""

import logging
from typing import Optional

from news_report.errors import InvalidSelection
from news_report.models import ManualReport, Report
from news_report.services.report_store import ReportStore

logger = logging.getLogger(__name__)


def begin_overlay(report: Report) -> ManualReport:
    """Builds a fresh ManualReport with empty overlay fields."""
    return ManualReport.from_report(report)


def parse_selection(raw: str, count: int) -> int:
    """
    Parses an operator's 1-based article choice out of `count` articles.

    Returns 0 when the operator wants to stop, otherwise a valid index.
    """
    text = raw.strip()
    try:
        index = int(text)
    except ValueError as e:
        raise InvalidSelection(f"Not a number: {text!r}") from e
    if index == 0:
        return 0
    if index < 1 or index > count:
        raise InvalidSelection(f"Index {index} out of range 1..{count}")
    return index


class OverlaySession:
    """Edits one ManualReport built from a Report."""

    def __init__(self, report: Report):
        self.manual_report = begin_overlay(report)

    @property
    def article_count(self) -> int:
        return len(self.manual_report.articles)

    def parse_selection(self, raw: str) -> int:
        return parse_selection(raw, self.article_count)

    def annotate(
        self,
        index: int,
        manual_summary: Optional[str],
        manual_opinion: Optional[str],
    ) -> None:
        """Replaces both overlay fields of the article at the 1-based index."""
        if index < 1 or index > self.article_count:
            raise InvalidSelection(
                f"Index {index} out of range 1..{self.article_count}"
            )
        articles = self.manual_report.articles
        articles[index - 1] = articles[index - 1].with_overlay(
            manual_summary, manual_opinion
        )
        logger.info("Updated article %d.", index)

    def save(self, store: ReportStore) -> None:
        """Persists the overlay. On failure the in-memory state is kept."""
        store.save(self.manual_report)
