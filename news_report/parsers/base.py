"""
Base classes and interfaces for feed parsers.

This module defines the contract that all feed parsers must follow.
"""

from typing import Protocol, List
from news_report.models import Article


class FeedParser(Protocol):
    """
    Protocol for feed parsers.

    Classes implementing this protocol fetch and parse content from a given
    URL into a list of Article objects, raising FetchFailure when the feed
    cannot be retrieved or parsed. Implementations must not share mutable
    state between calls so the crawler can run them concurrently.
    """

    def fetch(self, source: str, url: str) -> List[Article]:
        """Fetches and parses a feed."""
