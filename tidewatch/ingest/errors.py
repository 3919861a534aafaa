"""Error taxonomy for provider fetches."""


class FetchError(Exception):
    """Base class for provider fetch failures."""

    @property
    def user_message(self) -> str:
        return "data unavailable"


class NotAvailable(FetchError):
    """No usable API key, or every fetch path came back empty."""

    def __init__(self, message: str = "no tide data available", missing_credential: bool = False):
        super().__init__(message)
        self.missing_credential = missing_credential

    @property
    def user_message(self) -> str:
        if self.missing_credential:
            return "missing credential"
        return "no tide data available"


class HttpError(FetchError):
    """A completed HTTP exchange returned a non-success status."""

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        return f"service returned HTTP {self.status_code}"


class DecodeError(FetchError):
    """Response body did not parse into the expected shape."""

    @property
    def user_message(self) -> str:
        return "unexpected response format"


class TransportError(FetchError):
    """Connection-level failure after retries were exhausted."""

    @property
    def user_message(self) -> str:
        return "network unavailable"
