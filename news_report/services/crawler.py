"""
Crawl coordinator.

FeedCrawler fetches every configured feed concurrently and aggregates the
results into a CrawlOutcome. Results are consumed on the calling thread as
each fetch completes, so the outcome lists and progress counters are only
ever touched by one thread.
"""

import concurrent.futures
import datetime
import logging
import time
from typing import Callable, Dict, List, Optional

from news_report.errors import FetchFailure
from news_report.models import Article, CrawlOutcome
from news_report.parsers.base import FeedParser

logger = logging.getLogger(__name__)

ProgressSink = Callable[[int, int, datetime.timedelta], None]


def estimate_remaining(
    elapsed: float, completed: int, total: int
) -> datetime.timedelta:
    """Moving-average ETA: mean time per completed source times sources left."""
    if completed <= 0:
        return datetime.timedelta(0)
    average = elapsed / completed
    return datetime.timedelta(seconds=average * (total - completed))


class FeedCrawler:
    """Runs one fetch per source and waits for all of them."""

    def __init__(
        self,
        parser: FeedParser,
        progress: Optional[ProgressSink] = None,
        max_workers: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.parser = parser
        self.progress = progress
        self.max_workers = max_workers
        self.clock = clock

    def _pool_size(self, total: int) -> int:
        if self.max_workers is None:
            return total
        return max(1, min(self.max_workers, total))

    def crawl(self, sources: Dict[str, str]) -> CrawlOutcome:
        """Fetches all sources. Returns only after every fetch has finished."""
        outcome = CrawlOutcome()
        total = len(sources)
        if total == 0:
            logger.warning("No feed sources configured.")
            return outcome

        logger.info("--- Starting crawl of %d sources ---", total)
        start = self.clock()
        completed = 0

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self._pool_size(total)
        ) as executor:
            future_to_source = {
                executor.submit(self.parser.fetch, source, url): source
                for source, url in sources.items()
            }
            for future in concurrent.futures.as_completed(future_to_source):
                source = future_to_source[future]
                articles: Optional[List[Article]] = None
                try:
                    articles = future.result()
                except FetchFailure as exc:
                    logger.warning("Source %s failed: %s", source, exc.reason)
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    logger.error("%s generated an exception: %s", source, exc)

                if articles is None:
                    outcome.fail_sources.append(source)
                else:
                    outcome.success_sources.append(source)
                    outcome.articles.extend(articles)

                completed += 1
                if self.progress is not None:
                    eta = estimate_remaining(self.clock() - start, completed, total)
                    self.progress(completed, total, eta)

        logger.info(
            "Crawl finished: %d succeeded, %d failed, %d articles.",
            len(outcome.success_sources),
            len(outcome.fail_sources),
            len(outcome.articles),
        )
        return outcome
