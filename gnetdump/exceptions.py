"""Exception hierarchy for network topology retrieval."""
from typing import Optional


class GnetDumpError(Exception):
    """Base exception for all gnetdump errors."""


class MalformedLocatorError(GnetDumpError, ValueError):
    """A subnetwork URI does not have the expected projects/regions/subnetworks shape."""


class InvalidCredentialsError(GnetDumpError):
    """The access token was rejected by the provider (malformed or expired)."""


class ProviderError(GnetDumpError):
    """A Google API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class OutputWriteError(GnetDumpError):
    """The output file could not be created or written."""
