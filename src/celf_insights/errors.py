"""Errors raised by the assessment insights pipeline."""


class CelfInsightsError(Exception):
    """Base error for this package."""


class IngestionError(CelfInsightsError):
    """Raised when the assessment file cannot be read or parsed as a whole."""


class RuleTableError(CelfInsightsError):
    """Raised when the interpretation rule table cannot be loaded."""


class StudentNotFoundError(CelfInsightsError):
    """Raised when a student id is not present in the loaded data."""


class ExportError(CelfInsightsError):
    """Raised when a report cannot be written."""
