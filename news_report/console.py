"""
News Report console.
This script crawls a fixed set of tech news feeds, shows the aggregated
report, lets an operator attach manual summaries and opinions to articles,
and saves the annotated report for later viewing.
"""

import json
import logging
import os
from typing import Any, Callable, Dict, Optional, cast

from news_report.errors import (
    InvalidSelection,
    NoReportYet,
    PersistenceFailure,
    ReportLoadFailure,
    ReportNotFound,
)
from news_report.models import ManualReport, Report
from news_report.parsers.rss import RSSParser
from news_report.services.crawler import FeedCrawler
from news_report.services.display import ReportRenderer, print_progress_bar
from news_report.services.overlay import OverlaySession, parse_selection
from news_report.services.report_state import CurrentReport
from news_report.services.report_store import ReportStore


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def load_config(config_filename: str = "config.json") -> Dict[str, Any]:
    """Loads configuration from a JSON file."""
    # Build absolute path relative to this script
    base_dir = os.path.dirname(os.path.abspath(__file__))
    config_path = os.path.join(base_dir, config_filename)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using empty config.", config_path)
        return {"feeds": {}}


CONFIG: Dict[str, Any] = load_config()
FEEDS: Dict[str, str] = cast(Dict[str, str], CONFIG.get("feeds", {}))
MAX_ARTICLES_PER_SOURCE: int = int(CONFIG.get("max_articles_per_source", 5))
SUMMARY_LIMIT: int = int(CONFIG.get("summary_limit", 300))
REQUEST_TIMEOUT: float = float(CONFIG.get("request_timeout", 10))
MAX_WORKERS: Optional[int] = CONFIG.get("max_workers")

# Env Vars
MANUAL_REPORT_FILE: str = os.environ.get(
    "NEWS_REPORT_MANUAL_FILE",
    CONFIG.get("manual_report_file", "report_manually_update.json"),
)
REPORT_FILE: str = os.environ.get(
    "NEWS_REPORT_FILE", CONFIG.get("report_file", "report_latest.json")
)

Output = Callable[[str], None]
Input = Callable[[str], str]

MENU = """Chọn mục:
1 - Bắt đầu crawl tin
2 - Trích xuất báo cáo tin đã crawl
3 - Cập nhật thủ công báo cáo
4 - Trích xuất báo cáo tổng (báo cáo thủ công mới nhất)
0 - Thoát"""

NO_REPORT_MESSAGE = "Chưa có báo cáo crawl tin nào. Vui lòng crawl tin trước."
INVALID_SELECTION_MESSAGE = "Số thứ tự không hợp lệ, vui lòng thử lại."


def build_crawler() -> FeedCrawler:
    """Creates a crawler wired to the configured parser settings."""
    parser = RSSParser(timeout=REQUEST_TIMEOUT, max_items=MAX_ARTICLES_PER_SOURCE)
    return FeedCrawler(parser, progress=print_progress_bar, max_workers=MAX_WORKERS)


def run_crawl(
    state: CurrentReport,
    crawler: FeedCrawler,
    sources: Optional[Dict[str, str]] = None,
    raw_store: Optional[ReportStore] = None,
    renderer: Optional[ReportRenderer] = None,
    output: Output = print,
) -> Report:
    """Crawls every source, publishes the report and prints it."""
    feeds = FEEDS if sources is None else sources
    output("Đang bắt đầu crawl tin...")
    outcome = crawler.crawl(feeds)
    report = state.publish(outcome)

    if raw_store is not None:
        try:
            raw_store.save(report)
        except PersistenceFailure as e:
            output(f"Lỗi khi lưu báo cáo crawl: {e}")

    renderer = renderer or ReportRenderer(SUMMARY_LIMIT)
    output(renderer.render_report(report, total_sources=len(feeds)))
    return report


def show_current_report(
    state: CurrentReport,
    renderer: Optional[ReportRenderer] = None,
    output: Output = print,
) -> bool:
    """Prints the latest report. Returns False when there is none yet."""
    try:
        report = state.get()
    except NoReportYet:
        output(NO_REPORT_MESSAGE)
        return False
    renderer = renderer or ReportRenderer(SUMMARY_LIMIT)
    output(renderer.render_report(report))
    return True


def read_multiline(prompt: str, input_fn: Input = input, output: Output = print) -> str:
    """Reads lines until a line containing only '--'."""
    output(prompt + " (Nhập -- rồi Enter để kết thúc):")
    lines = []
    while True:
        try:
            line = input_fn("")
        except EOFError:
            break
        line = line.rstrip("\r\n")
        if line == "--":
            break
        lines.append(line)
    return "\n".join(lines)


def start_manual_overlay(
    state: CurrentReport,
    store: ReportStore,
    renderer: Optional[ReportRenderer] = None,
    input_fn: Input = input,
    output: Output = print,
) -> Optional[ManualReport]:
    """Interactive editing of a fresh ManualReport, saved when the operator finishes."""
    try:
        report = state.get()
    except NoReportYet:
        output(NO_REPORT_MESSAGE)
        return None

    renderer = renderer or ReportRenderer(SUMMARY_LIMIT)
    session = OverlaySession(report)

    while True:
        output("\n=== Danh sách các tin đã crawl ===")
        output(renderer.render_title_list(session.manual_report.articles))
        try:
            choice = input_fn("Nhập số thứ tự tin muốn cập nhật (0 để thoát): ")
        except EOFError:
            break
        try:
            index = session.parse_selection(choice)
        except InvalidSelection:
            output(INVALID_SELECTION_MESSAGE)
            continue
        if index == 0:
            break

        article = session.manual_report.articles[index - 1]
        output(f"\nTiêu đề tin: {article.title}")
        try:
            summary = input_fn("Nhập Tóm tắt ngắn gọn (tiếng Việt): ").strip()
        except EOFError:
            break
        opinion = read_multiline("Nhập Nhận định (tiếng Việt)", input_fn, output)
        session.annotate(index, summary, opinion)
        output(f"Đã cập nhật tin thứ {index} thành công.")

    try:
        session.save(store)
    except PersistenceFailure as e:
        output(f"Lỗi khi lưu báo cáo thủ công: {e}")
    else:
        output(f"Đã lưu báo cáo cập nhật thủ công vào file: {store.path}")
    return session.manual_report


def show_manual_report(
    store: ReportStore,
    renderer: Optional[ReportRenderer] = None,
    input_fn: Input = input,
    output: Output = print,
) -> Optional[ManualReport]:
    """Loads the saved ManualReport and shows articles chosen by the operator."""
    try:
        manual_report = store.load(ManualReport)
    except ReportNotFound:
        output("Chưa có báo cáo cập nhật thủ công.")
        return None
    except ReportLoadFailure as e:
        output(f"Lỗi khi đọc báo cáo cập nhật thủ công: {e}")
        return None

    renderer = renderer or ReportRenderer(SUMMARY_LIMIT)
    count = len(manual_report.articles)
    while True:
        output("\n=== Báo cáo tổng đã cập nhật thủ công ===")
        output(renderer.render_title_list(manual_report.articles))
        try:
            choice = input_fn("Nhập số thứ tự muốn xem chi tiết (0 để thoát): ")
        except EOFError:
            break
        try:
            index = parse_selection(choice, count)
        except InvalidSelection:
            output(INVALID_SELECTION_MESSAGE)
            continue
        if index == 0:
            break
        output("\n" + renderer.render_manual_article(manual_report.articles[index - 1]))
    return manual_report


def main(input_fn: Input = input, output: Output = print) -> None:
    """Main execution entry point."""
    state = CurrentReport()
    crawler = build_crawler()
    manual_store = ReportStore(MANUAL_REPORT_FILE)
    raw_store = ReportStore(REPORT_FILE)
    renderer = ReportRenderer(SUMMARY_LIMIT)

    while True:
        output(MENU)
        try:
            choice = input_fn("Nhập lựa chọn: ").strip()
        except EOFError:
            choice = "0"

        if choice == "1":
            run_crawl(state, crawler, raw_store=raw_store, renderer=renderer, output=output)
        elif choice == "2":
            show_current_report(state, renderer=renderer, output=output)
        elif choice == "3":
            start_manual_overlay(
                state, manual_store, renderer=renderer, input_fn=input_fn, output=output
            )
        elif choice == "4":
            show_manual_report(
                manual_store, renderer=renderer, input_fn=input_fn, output=output
            )
        elif choice == "0":
            output("Thoát chương trình.")
            return
        else:
            output("Lựa chọn không hợp lệ, vui lòng thử lại.")
        output("")


if __name__ == "__main__":
    main()
