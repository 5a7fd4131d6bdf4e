"""Unit tests for the crawl coordinator and report publishing."""

import datetime
import threading
import time
import unittest

from news_report.errors import FetchFailure, NoReportYet
from news_report.models import Article
from news_report.services.crawler import FeedCrawler, estimate_remaining
from news_report.services.report_state import CurrentReport


def articles_for(source, count):
    return [
        Article(source=source, title=f"{source} {i}", url=f"http://{source}/{i}", summary="s")
        for i in range(count)
    ]


class FakeParser:
    """Returns canned results; an Exception value is raised instead."""

    def __init__(self, results):
        self.results = results

    def fetch(self, source, url):
        result = self.results[source]
        if isinstance(result, Exception):
            raise result
        return result


class BarrierParser:
    """Blocks every fetch until `parties` fetches are running at once."""

    def __init__(self, parties):
        self.barrier = threading.Barrier(parties, timeout=5)

    def fetch(self, source, url):
        self.barrier.wait()
        return articles_for(source, 1)


class CountingParser:
    """Records the highest number of concurrent fetches."""

    def __init__(self):
        self.lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def fetch(self, source, url):
        with self.lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.02)
        with self.lock:
            self.active -= 1
        return []


class TestFeedCrawler(unittest.TestCase):
    def test_two_succeed_one_fails(self):
        parser = FakeParser(
            {
                "A": articles_for("A", 2),
                "B": articles_for("B", 5),
                "C": FetchFailure("C", "timed out"),
            }
        )
        sources = {"A": "http://a/rss", "B": "http://b/rss", "C": "http://c/rss"}

        outcome = FeedCrawler(parser).crawl(sources)

        self.assertEqual(sorted(outcome.success_sources), ["A", "B"])
        self.assertEqual(outcome.fail_sources, ["C"])
        self.assertEqual(len(outcome.articles), 7)

    def test_every_source_lands_in_exactly_one_list(self):
        parser = FakeParser(
            {
                "A": articles_for("A", 1),
                "B": RuntimeError("parser crashed"),
                "C": [],
                "D": FetchFailure("D", "404"),
            }
        )
        sources = {name: f"http://{name}/rss" for name in parser.results}

        outcome = FeedCrawler(parser).crawl(sources)

        success = set(outcome.success_sources)
        fail = set(outcome.fail_sources)
        self.assertFalse(success & fail)
        self.assertEqual(success | fail, set(sources))
        self.assertEqual(len(outcome.success_sources) + len(outcome.fail_sources), 4)
        self.assertEqual(fail, {"B", "D"})
        for article in outcome.articles:
            self.assertIn(article.source, success)

    def test_articles_keep_order_within_a_source(self):
        parser = FakeParser({"A": articles_for("A", 5), "B": articles_for("B", 3)})

        outcome = FeedCrawler(parser).crawl({"A": "a", "B": "b"})

        titles_a = [a.title for a in outcome.articles if a.source == "A"]
        self.assertEqual(titles_a, [f"A {i}" for i in range(5)])

    def test_progress_reports_moving_average_eta(self):
        ticks = iter([0.0, 10.0, 20.0, 30.0])
        calls = []
        parser = FakeParser({"A": [], "B": [], "C": []})
        crawler = FeedCrawler(
            parser,
            progress=lambda done, total, eta: calls.append((done, total, eta)),
            clock=lambda: next(ticks),
        )

        crawler.crawl({"A": "a", "B": "b", "C": "c"})

        self.assertEqual(
            calls,
            [
                (1, 3, datetime.timedelta(seconds=20)),
                (2, 3, datetime.timedelta(seconds=10)),
                (3, 3, datetime.timedelta(0)),
            ],
        )

    def test_empty_registry(self):
        calls = []
        crawler = FeedCrawler(FakeParser({}), progress=lambda *args: calls.append(args))

        outcome = crawler.crawl({})

        self.assertEqual(outcome.success_sources, [])
        self.assertEqual(outcome.fail_sources, [])
        self.assertEqual(outcome.articles, [])
        self.assertEqual(calls, [])

    def test_unbounded_fan_out_runs_all_sources_at_once(self):
        sources = {f"S{i}": f"http://s{i}/rss" for i in range(6)}

        outcome = FeedCrawler(BarrierParser(len(sources))).crawl(sources)

        self.assertEqual(len(outcome.success_sources), 6)
        self.assertEqual(outcome.fail_sources, [])

    def test_max_workers_caps_concurrency(self):
        parser = CountingParser()
        sources = {f"S{i}": f"http://s{i}/rss" for i in range(5)}

        FeedCrawler(parser, max_workers=2).crawl(sources)

        self.assertLessEqual(parser.peak, 2)

    def test_estimate_remaining(self):
        self.assertEqual(estimate_remaining(12.0, 3, 10), datetime.timedelta(seconds=28))
        self.assertEqual(estimate_remaining(5.0, 0, 10), datetime.timedelta(0))


class TestCurrentReport(unittest.TestCase):
    def test_get_before_publish_raises(self):
        state = CurrentReport()
        with self.assertRaises(NoReportYet):
            state.get()

    def test_publish_replaces_report(self):
        state = CurrentReport()
        parser = FakeParser({"A": articles_for("A", 2), "B": FetchFailure("B", "down")})
        outcome = FeedCrawler(parser).crawl({"A": "a", "B": "b"})
        stamp = datetime.datetime(2024, 5, 1, 8, 30, tzinfo=datetime.timezone.utc)

        first = state.publish(outcome, timestamp=stamp)
        second = state.publish(outcome)

        self.assertEqual(first.timestamp, stamp)
        self.assertEqual(first.success_sources, ["A"])
        self.assertEqual(first.fail_sources, ["B"])
        self.assertEqual(first.total_sources, 2)
        self.assertIs(state.get(), second)
        self.assertIsNotNone(second.timestamp.tzinfo)


if __name__ == "__main__":
    unittest.main()
