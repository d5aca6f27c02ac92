"""Error taxonomy for feed fetches."""

API_KEY_DISABLED_REASON = "Your API key has been disabled"
UNKNOWN_CODE_REASON = "Unknown error 1"
MISSING_CODE_REASON = "Unknown error 2"

ERROR_CODE_REASONS: dict[str, str] = {
    "apiKeyDisabled": API_KEY_DISABLED_REASON,
}


class FeedError(Exception):
    """Base class for every failure of a single fetch attempt."""


class TransportError(FeedError):
    """The provider could not be reached or answered with a bare HTTP error."""


class ParseError(FeedError):
    """The response body does not match the expected structure."""


class UrlError(FeedError):
    """The request URL could not be built."""


class FetchCancelled(FeedError):
    """The fetch was abandoned through its cancel flag."""


class ApiError(FeedError):
    """The provider answered with a non-success status."""

    def __init__(self, reason: str, code: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.code = code


def map_response_error(code: str | None) -> ApiError:
    """Translate a provider error code into an :class:`ApiError`."""
    if code is None:
        return ApiError(MISSING_CODE_REASON)
    return ApiError(ERROR_CODE_REASONS.get(code, UNKNOWN_CODE_REASON), code=code)
