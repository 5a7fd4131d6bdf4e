"""
JSON persistence for reports.

A ReportStore owns one file and replaces it wholesale on every save. It is
used both for the raw latest report and for the manually updated report.
"""

import json
import logging
import os
from typing import Type, TypeVar, Union

from news_report.errors import PersistenceFailure, ReportLoadFailure, ReportNotFound
from news_report.models import ManualReport, Report

logger = logging.getLogger(__name__)

T = TypeVar("T", Report, ManualReport)


class ReportStore:
    """Saves and loads one report file."""

    def __init__(self, path: str):
        self.path = path

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def save(self, report: Union[Report, ManualReport]) -> None:
        """Writes the report, replacing any previous file."""
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            logger.error("Failed to save report to %s: %s", self.path, e)
            raise PersistenceFailure(f"Could not write {self.path}: {e}") from e
        logger.info("Saved report to %s.", self.path)

    def load(self, record_type: Type[T] = ManualReport) -> T:  # type: ignore[assignment]
        """Reads the file back as record_type."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ReportNotFound(f"No report saved at {self.path}") from e
        except (OSError, ValueError) as e:
            logger.error("Failed to read report %s: %s", self.path, e)
            raise ReportLoadFailure(f"Could not read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ReportLoadFailure(f"{self.path} does not contain a report object")
        try:
            return record_type.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Malformed report %s: %s", self.path, e)
            raise ReportLoadFailure(f"Malformed report in {self.path}: {e}") from e
