"""Custom exceptions for the airdrop analytics tool.

Row-level problems in the CSV are never raised; the parser reports them as
skipped rows. Exceptions are reserved for failures that leave nothing to
analyze (the source) and for bad input at the edges (config, CLI options).
"""


class AirdropAnalyticsError(Exception):
    """Base exception for all airdrop analytics errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DataSourceError(AirdropAnalyticsError):
    """Raised when a data source fails or returns unusable data."""

    def __init__(
        self,
        source: str,
        reason: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"[{source}] {reason}",
            {
                "source": source,
                "reason": reason,
                "endpoint": endpoint,
                "status_code": status_code,
            },
        )
        self.source = source
        self.reason = reason
        self.endpoint = endpoint
        self.status_code = status_code


class SourceUnavailableError(DataSourceError):
    """The allocation CSV could not be obtained as text.

    Covers network failures, timeouts, error statuses, unreadable files and
    non-UTF-8 content. This is terminal: no retry is attempted and no
    partial result exists.
    """


class ValidationError(AirdropAnalyticsError):
    """Raised when user-supplied input (page, range key, ...) is invalid."""

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(
            f"Invalid {field}={value!r}: {reason}",
            {"field": field, "value": value, "reason": reason},
        )
        self.field = field
        self.value = value
        self.reason = reason


class ConfigurationError(AirdropAnalyticsError):
    """Raised when a bucket scheme or other setting is invalid or missing."""

    def __init__(self, config_key: str, reason: str):
        super().__init__(f"Configuration error [{config_key}]: {reason}", {"config_key": config_key})
        self.config_key = config_key
        self.reason = reason
