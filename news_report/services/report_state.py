"""
Holder for the latest crawl report.

One CurrentReport is created empty at startup and handed to every command
that reads or replaces the report.
"""

import datetime
import logging
import threading
from typing import Optional

from news_report.errors import NoReportYet
from news_report.models import CrawlOutcome, Report

logger = logging.getLogger(__name__)


class CurrentReport:
    """Thread-safe slot for the most recent Report."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._report: Optional[Report] = None

    def publish(
        self, outcome: CrawlOutcome, timestamp: Optional[datetime.datetime] = None
    ) -> Report:
        """Stamps the outcome into a Report and replaces the current one."""
        report = Report(
            timestamp=timestamp or datetime.datetime.now().astimezone(),
            success_sources=list(outcome.success_sources),
            fail_sources=list(outcome.fail_sources),
            articles=list(outcome.articles),
        )
        with self._lock:
            self._report = report
        logger.info("Report published at %s.", report.timestamp.isoformat())
        return report

    def get(self) -> Report:
        with self._lock:
            report = self._report
        if report is None:
            raise NoReportYet("No crawl report yet. Run a crawl first.")
        return report
