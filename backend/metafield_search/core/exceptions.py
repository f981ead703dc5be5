"""
Custom exception hierarchy for the metafield reference search.

Exceptions are categorized as:
- RetryableError: Transient upstream failures; the caller may re-run the whole search
- NonRetryableError: Bad input, missing configuration or malformed upstream data

The core never retries on its own. Every exception carries a `kind`
(reported with failed search responses) and the HTTP `status_code`
the boundary answers with.
"""


class MetafieldSearchException(Exception):
    """Base exception for the metafield reference search."""
    kind = "internal"
    status_code = 500


# ============================================
# RETRYABLE ERRORS - Caller may retry the search
# ============================================
class RetryableError(MetafieldSearchException):
    """
    Base class for errors where a later retry might succeed:
    - Network failures and timeouts
    - Rate limits
    - Upstream 5xx responses
    """
    pass


class UpstreamError(RetryableError):
    """
    Transport failure or structured error payload from the catalog API.
    """
    kind = "upstream"
    status_code = 502

    def __init__(self, service: str, message: str, upstream_status: int = None):
        self.service = service
        self.upstream_status = upstream_status
        super().__init__(f"{service} API error: {message}")


class UpstreamTimeoutError(UpstreamError):
    """A single upstream call or the overall search deadline expired."""
    kind = "timeout"
    status_code = 504

    def __init__(self, service: str, message: str = "request timed out"):
        super().__init__(service, message)


class RateLimitError(UpstreamError):
    """
    Upstream rate limit exceeded.

    Carries the suggested delay; acting on it is left to the caller.
    """
    def __init__(self, service: str, retry_after: int = 2):
        self.retry_after = retry_after
        super().__init__(service, f"rate limited. Retry after {retry_after}s", upstream_status=429)


# ============================================
# NON-RETRYABLE ERRORS
# ============================================
class NonRetryableError(MetafieldSearchException):
    """
    Base class for errors where retrying won't help:
    - Validation failures
    - Missing configuration
    - Responses that do not match the expected shape
    """
    pass


class ValidationError(NonRetryableError):
    """Invalid input, e.g. an empty SKU token."""
    kind = "validation"
    status_code = 400


class ConfigurationError(NonRetryableError):
    """Boundary configuration (store domain, API token) missing."""
    kind = "configuration"
    status_code = 500


class DecodeError(NonRetryableError):
    """A whole response page could not be parsed into the expected shape."""
    kind = "decode"
    status_code = 502
