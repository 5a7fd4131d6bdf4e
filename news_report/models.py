"""
Data models for the News Report application.

Reports are encoded as JSON records with camelCase field names so the
manual report file stays readable by hand.
"""

import datetime
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Article:
    """One feed entry, normalized."""

    source: str
    title: str
    url: str
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "title": self.title,
            "url": self.url,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            source=str(data["source"]),
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            summary=str(data.get("summary") or ""),
        )


@dataclass
class CrawlOutcome:
    """Aggregated result of one crawl, before it is stamped into a Report."""

    success_sources: List[str] = field(default_factory=list)
    fail_sources: List[str] = field(default_factory=list)
    articles: List[Article] = field(default_factory=list)


_FRACTION = re.compile(r"\.(\d+)")


def _encode_timestamp(value: datetime.datetime) -> str:
    return value.isoformat()


def _decode_timestamp(value: Any) -> datetime.datetime:
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    # RFC 3339 allows "Z" and nanoseconds; fromisoformat wants +00:00 and 6 digits.
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.datetime.fromisoformat(text)


def _decode_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _decode_names(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    return [str(name) for name in value]


def _decode_articles(value: Any) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(a, dict) for a in value):
        raise ValueError("articles must be a list of objects")
    return value


@dataclass(frozen=True)
class Report:
    """Timestamped snapshot produced by one crawl run."""

    timestamp: datetime.datetime
    success_sources: List[str] = field(default_factory=list)
    fail_sources: List[str] = field(default_factory=list)
    articles: List[Article] = field(default_factory=list)

    @property
    def total_sources(self) -> int:
        return len(self.success_sources) + len(self.fail_sources)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": _encode_timestamp(self.timestamp),
            "successSources": list(self.success_sources),
            "failSources": list(self.fail_sources),
            "articles": [a.to_dict() for a in self.articles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Report":
        return cls(
            timestamp=_decode_timestamp(data["timestamp"]),
            success_sources=_decode_names(data.get("successSources"), "successSources"),
            fail_sources=_decode_names(data.get("failSources"), "failSources"),
            articles=[Article.from_dict(a) for a in _decode_articles(data.get("articles"))],
        )


@dataclass(frozen=True)
class ManualArticle:
    """An Article paired with the operator's own summary and opinion."""

    source: str
    title: str
    url: str
    summary: str
    manual_summary: Optional[str] = None
    manual_opinion: Optional[str] = None

    @classmethod
    def from_article(cls, article: Article) -> "ManualArticle":
        return cls(
            source=article.source,
            title=article.title,
            url=article.url,
            summary=article.summary,
        )

    def with_overlay(
        self, manual_summary: Optional[str], manual_opinion: Optional[str]
    ) -> "ManualArticle":
        """Returns a copy with both overlay fields replaced. Blank text means unset."""
        return replace(
            self,
            manual_summary=manual_summary or None,
            manual_opinion=manual_opinion or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "source": self.source,
            "title": self.title,
            "url": self.url,
            "summary": self.summary,
        }
        if self.manual_summary:
            data["manualSummary"] = self.manual_summary
        if self.manual_opinion:
            data["manualOpinion"] = self.manual_opinion
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManualArticle":
        return cls(
            source=str(data["source"]),
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            summary=str(data.get("summary") or ""),
            manual_summary=_decode_text(data.get("manualSummary", data.get("manual_summary"))),
            manual_opinion=_decode_text(data.get("manualOpinion", data.get("manual_opinion"))),
        )


@dataclass
class ManualReport:
    """A Report whose articles carry operator overlays. Edited in place."""

    timestamp: datetime.datetime
    success_sources: List[str] = field(default_factory=list)
    fail_sources: List[str] = field(default_factory=list)
    articles: List[ManualArticle] = field(default_factory=list)

    @classmethod
    def from_report(cls, report: Report) -> "ManualReport":
        return cls(
            timestamp=report.timestamp,
            success_sources=list(report.success_sources),
            fail_sources=list(report.fail_sources),
            articles=[ManualArticle.from_article(a) for a in report.articles],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": _encode_timestamp(self.timestamp),
            "successSources": list(self.success_sources),
            "failSources": list(self.fail_sources),
            "articles": [a.to_dict() for a in self.articles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManualReport":
        return cls(
            timestamp=_decode_timestamp(data["timestamp"]),
            success_sources=_decode_names(data.get("successSources"), "successSources"),
            fail_sources=_decode_names(data.get("failSources"), "failSources"),
            articles=[
                ManualArticle.from_dict(a) for a in _decode_articles(data.get("articles"))
            ],
        )
