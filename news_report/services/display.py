"""
Console rendering for crawl reports.

This module provides the ReportRenderer class which handles:
- Rendering crawl statistics and the latest articles of a Report
- Rendering single articles of a ManualReport with the operator's overlay
- Printing the crawl progress bar
"""

import datetime
import sys
from typing import List, Optional, Sequence, TextIO, Union

from news_report.models import Article, ManualArticle, ManualReport, Report

TRUNCATION_MARKER = "..."
DEFAULT_SUMMARY_LIMIT = 300
PROGRESS_BAR_WIDTH = 40


def truncate_summary(text: Optional[str], limit: int = DEFAULT_SUMMARY_LIMIT) -> str:
    """Keeps the first `limit` characters and appends a marker if anything was cut."""
    if not text:
        return ""
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def format_eta(eta: datetime.timedelta) -> str:
    seconds = max(0, int(eta.total_seconds()))
    return f"{seconds // 60:02d} phút {seconds % 60:02d} giây"


def print_progress_bar(
    completed: int,
    total: int,
    eta: datetime.timedelta,
    stream: Optional[TextIO] = None,
) -> None:
    """Progress sink for FeedCrawler; redraws one console line per call."""
    out = stream or sys.stdout
    ratio = completed / total if total else 1.0
    filled = int(ratio * PROGRESS_BAR_WIDTH)
    bar = "█" * filled + "░" * (PROGRESS_BAR_WIDTH - filled)
    out.write(
        f"\rHệ thống đang lấy tin, tiến độ: [{bar}] ETA: {format_eta(eta)} "
        f"{completed}/{total} ({ratio * 100:.1f}%) "
    )
    if completed >= total:
        out.write("\n")
    out.flush()


class ReportRenderer:
    """Renders reports as plain text blocks."""

    _LABELS = {
        "stats": "0. Thống kê quá trình crawl tin:",
        "success_count": "Số nguồn crawl thành công",
        "fail_count": "Số nguồn crawl thất bại",
        "success_list": "Danh sách nguồn crawl thành công",
        "fail_list": "Danh sách nguồn crawl thất bại",
        "latest": "1. Tin mới nhất:",
        "source": "Nguồn tin",
        "title": "Tiêu đề",
        "url": "URL",
        "summary": "Tóm tắt ngắn gọn",
        "manual_summary": "Tóm tắt ngắn gọn (thủ công)",
        "opinion": "Nhận định",
        "manual_opinion": "Nhận định (thủ công)",
        "no_opinion": "Chưa có nhận định thủ công.",
    }

    # Static commentary printed under every article of a raw report.
    _COMMENTARY = (
        "Đây là bài viết mới gần đây từ nguồn uy tín trong lĩnh vực công nghệ và khởi nghiệp.",
        "Phần tóm tắt cung cấp thông tin cơ bản và hữu ích để cập nhật xu hướng.",
        "Cần đọc kỹ bài đầy đủ để hiểu chi tiết và tác động.",
    )

    def __init__(self, summary_limit: int = DEFAULT_SUMMARY_LIMIT):
        self.summary_limit = summary_limit

    def _render_stats(self, report: Union[Report, ManualReport]) -> str:
        labels = self._LABELS
        return (
            f"{labels['stats']}\n"
            f"{labels['success_count']}: {len(report.success_sources)}\n"
            f"{labels['fail_count']}: {len(report.fail_sources)}\n"
            f"{labels['success_list']}: {', '.join(report.success_sources)}\n"
            f"{labels['fail_list']}: {', '.join(report.fail_sources)}\n"
        )

    def _render_article(self, number: int, article: Article) -> str:
        labels = self._LABELS
        lines = [
            f"{number}. {labels['source']}: {article.source}",
            f"   {labels['title']}: {article.title}",
            f"   {labels['url']}: {article.url}",
            f"   {labels['summary']}: "
            f"{truncate_summary(article.summary, self.summary_limit)}",
            f"   {labels['opinion']}:",
        ]
        lines.extend(f"   - {line}" for line in self._COMMENTARY)
        return "\n".join(lines) + "\n"

    def render_report(self, report: Report, total_sources: Optional[int] = None) -> str:
        """Renders statistics followed by one block per article."""
        total = report.total_sources if total_sources is None else total_sources
        blocks = [self._render_stats(report), self._LABELS["latest"]]
        for i, article in enumerate(report.articles, start=1):
            blocks.append(self._render_article(i, article))
        blocks.append(
            f"Đã crawl {total} *** đầu báo ***, vui lòng vào mục thống kê để xem chi tiết.\n"
        )
        return "\n".join(blocks)

    def render_title_list(self, articles: Sequence[Union[Article, ManualArticle]]) -> str:
        """Numbered list of titles used by the selection menus."""
        return "\n".join(f"{i}: {a.title}" for i, a in enumerate(articles, start=1))

    def render_manual_article(self, article: ManualArticle) -> str:
        """Renders one article, preferring the operator's summary and opinion."""
        labels = self._LABELS
        lines: List[str] = [
            f"{labels['source']}: {article.source}",
            f"{labels['title']}: {article.title}",
            f"{labels['url']}: {article.url}",
        ]
        if article.manual_summary:
            lines.append(
                f"{labels['manual_summary']}: "
                f"{truncate_summary(article.manual_summary, self.summary_limit)}"
            )
        else:
            lines.append(
                f"{labels['summary']}: "
                f"{truncate_summary(article.summary, self.summary_limit)}"
            )
        if article.manual_opinion:
            lines.append(f"{labels['manual_opinion']}:\n{article.manual_opinion}")
        else:
            lines.append(f"{labels['opinion']}: {labels['no_opinion']}")
        return "\n".join(lines) + "\n"
