"""Exception hierarchy for the hidden jobs engine."""


class HiddenJobsError(Exception):
    """Base class for all engine errors."""


class ValidationError(HiddenJobsError, ValueError):
    """A search request or filter value was rejected before any network call."""


class ProviderError(HiddenJobsError):
    """The external search provider failed (quota, HTTP error, network)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(HiddenJobsError):
    """A search item or page did not yield a valid job record."""


class StreamingTransportError(HiddenJobsError):
    """The streaming consumer disconnected or a write to it failed."""


class MissingCredentialsError(ProviderError):
    """Search provider credentials are not configured."""
