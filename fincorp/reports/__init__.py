"""Report export package."""

from fincorp.reports.csv_report import REPORT_HEADERS, build_csv, suggest_filename

__all__ = ["REPORT_HEADERS", "build_csv", "suggest_filename"]
