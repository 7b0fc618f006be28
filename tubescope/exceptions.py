class IntegrationError(Exception):
    """Raised when a call to the upstream API fails."""


class NotFoundError(IntegrationError):
    """Raised on HTTP 404."""


class RateLimitError(IntegrationError):
    """Raised when the upstream API rate limit is hit."""


class AuthenticationError(IntegrationError):
    """Raised on HTTP 401, or when a request that needs credentials has none."""


class UpstreamError(IntegrationError):
    """Raised on HTTP 500 and 503."""


class UnknownStatusError(IntegrationError):
    """Raised for any status outside the classified set."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"Unexpected upstream status {status_code}")


class DecodeError(IntegrationError):
    """Raised when a response body cannot be decoded."""


class TransportError(IntegrationError):
    """Raised on connection, DNS or TLS failure."""


class RequiredFieldMissingError(IntegrationError):
    """Raised when a response lacks the container an operation cannot do without."""


class InvalidInputError(ValueError):
    """Raised when a caller-supplied identifier is malformed."""


class ConfigurationError(ValueError):
    """Raised when the client is constructed with unusable settings."""
