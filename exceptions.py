"""Project-wide custom exception types."""


class AnalyticsError(Exception):
    """Base class for feedback analytics errors."""


class SnapshotInputError(AnalyticsError, TypeError):
    """Raised when the snapshot collection itself is unusable (not a list of records)."""


class NothingToExportError(AnalyticsError):
    """Raised when an export is requested but no rows are visible."""

    def __init__(self, message='No data to export.'):
        super().__init__(message)


class UnknownChartError(AnalyticsError, KeyError):
    """Raised when a chart name has no registered configuration."""
