"""Report export formats."""

from .text_report import format_date, render_text_report, report_filename, write_text_report

__all__ = [
    'format_date',
    'render_text_report',
    'report_filename',
    'write_text_report',
]
