"""Report export for finalized classifications."""

from .report import default_report_name, report_rows, status_label, write_json, write_xlsx

__all__ = ["default_report_name", "report_rows", "status_label", "write_json", "write_xlsx"]
