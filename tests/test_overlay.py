"""Unit tests for manual overlay sessions."""

import datetime
import unittest

from news_report.errors import InvalidSelection
from news_report.models import Article, ManualArticle, Report
from news_report.services.overlay import OverlaySession, begin_overlay, parse_selection


def sample_report(count=5):
    return Report(
        timestamp=datetime.datetime(2024, 5, 1, 9, 0, tzinfo=datetime.timezone.utc),
        success_sources=["Wired", "The Verge"],
        fail_sources=["Gizmodo"],
        articles=[
            Article(
                source="Wired" if i % 2 else "The Verge",
                title=f"Title {i}",
                url=f"http://example.com/{i}",
                summary=f"Summary {i}",
            )
            for i in range(1, count + 1)
        ],
    )


class TestBeginOverlay(unittest.TestCase):
    def test_copies_every_article_with_empty_overlay(self):
        report = sample_report()

        manual = begin_overlay(report)

        self.assertEqual(manual.timestamp, report.timestamp)
        self.assertEqual(manual.success_sources, report.success_sources)
        self.assertEqual(manual.fail_sources, report.fail_sources)
        self.assertEqual(len(manual.articles), 5)
        for original, copy in zip(report.articles, manual.articles):
            self.assertEqual(copy.title, original.title)
            self.assertEqual(copy.summary, original.summary)
            self.assertIsNone(copy.manual_summary)
            self.assertIsNone(copy.manual_opinion)

    def test_two_sessions_do_not_share_edits(self):
        report = sample_report()
        first = OverlaySession(report)
        first.annotate(1, "edited", "opinion")

        second = begin_overlay(report)

        self.assertEqual(second, begin_overlay(report))
        self.assertIsNone(second.articles[0].manual_summary)
        self.assertIsNot(second.success_sources, report.success_sources)


class TestOverlaySession(unittest.TestCase):
    def test_annotate_replaces_only_selected_article(self):
        session = OverlaySession(sample_report())

        session.annotate(2, "x", "")

        articles = session.manual_report.articles
        self.assertEqual(articles[1].manual_summary, "x")
        self.assertIsNone(articles[1].manual_opinion)
        for i in (0, 2, 3, 4):
            self.assertIsNone(articles[i].manual_summary)
            self.assertIsNone(articles[i].manual_opinion)

    def test_annotate_is_full_replace(self):
        session = OverlaySession(sample_report())
        session.annotate(3, "first summary", "first opinion")

        session.annotate(3, "second summary", None)

        article = session.manual_report.articles[2]
        self.assertEqual(article.manual_summary, "second summary")
        self.assertIsNone(article.manual_opinion)

    def test_annotate_out_of_range_mutates_nothing(self):
        session = OverlaySession(sample_report())
        before = list(session.manual_report.articles)

        with self.assertRaises(InvalidSelection):
            session.annotate(6, "x", "y")

        self.assertEqual(session.manual_report.articles, before)

    def test_parse_selection(self):
        session = OverlaySession(sample_report())

        self.assertEqual(session.parse_selection("0"), 0)
        self.assertEqual(session.parse_selection(" 5 \n"), 5)
        for raw in ("6", "-1", "abc", ""):
            with self.assertRaises(InvalidSelection):
                session.parse_selection(raw)

    def test_parse_selection_rejects_non_ascii_digits(self):
        for raw in ("\u00b2", "\u2460", "1.5"):
            with self.assertRaises(InvalidSelection):
                parse_selection(raw, 5)
        self.assertEqual(parse_selection("3", 5), 3)

    def test_with_overlay_treats_blank_as_unset(self):
        article = ManualArticle(source="s", title="t", url="u", summary="sum")

        updated = article.with_overlay("", "opinion")

        self.assertIsNone(updated.manual_summary)
        self.assertEqual(updated.manual_opinion, "opinion")
        self.assertIsNone(article.manual_opinion)


if __name__ == "__main__":
    unittest.main()
