"""
RSS feed parser implementation.

This module provides the RSSParser class for fetching and parsing RSS and
Atom feeds.
"""

from typing import Any, List
import logging

import requests
import feedparser  # type: ignore
from news_report.errors import FetchFailure
from news_report.models import Article
from news_report.parsers.base import FeedParser

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "NewsReportBot/1.0"


class RSSParser(FeedParser):
    """Parses standard RSS and Atom feeds, keeping the first few entries."""

    def __init__(
        self,
        timeout: float = 10,
        max_items: int = 5,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout = timeout
        self.max_items = max_items
        self.user_agent = user_agent

    def _entry_summary(self, entry: Any) -> str:
        """Returns the entry description, or its content when the description is empty."""
        summary = entry.summary if hasattr(entry, "summary") else ""
        if summary:
            return summary
        for content in getattr(entry, "content", None) or []:
            value = content.get("value") if hasattr(content, "get") else None
            if value:
                return value
        return ""

    def _to_article(self, source: str, entry: Any) -> Article:
        return Article(
            source=source,
            title=entry.title if hasattr(entry, "title") else "",
            url=entry.link if hasattr(entry, "link") else "",
            summary=self._entry_summary(entry),
        )

    def fetch(self, source: str, url: str) -> List[Article]:
        """Fetches and parses a single feed. Raises FetchFailure on any error."""
        try:
            resp = requests.get(
                url, timeout=self.timeout, headers={"User-Agent": self.user_agent}
            )
            resp.raise_for_status()
            feed_content = resp.content
        except requests.RequestException as req_err:
            logger.error("Network error fetching %s: %s", source, req_err)
            raise FetchFailure(source, str(req_err)) from req_err

        feed = feedparser.parse(feed_content)
        if feed.bozo and not feed.entries:
            reason = str(getattr(feed, "bozo_exception", "malformed feed"))
            logger.error("Error parsing %s: %s", source, reason)
            raise FetchFailure(source, reason)

        entries = feed.entries[: self.max_items]
        return [self._to_article(source, entry) for entry in entries]
