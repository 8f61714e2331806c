"""Custom exceptions for gyazo."""

from enum import Enum


class ApiStatus(Enum):
    """Classification of a non-2xx response from the Gyazo API."""

    INVALID_REQUEST = "invalid request"
    UNAUTHENTICATED = "unauthenticated"
    PRO_REQUIRED = "Pro required"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not found"
    UNPROCESSABLE = "unprocessable content"
    RATE_LIMITED = "rate limited"
    UNEXPECTED = "unexpected"
    UNDOCUMENTED = "undocumented status code"

    @classmethod
    def from_code(cls, status_code: int) -> "ApiStatus":
        """Map an HTTP status code to its documented meaning."""
        return _STATUS_CODES.get(status_code, cls.UNDOCUMENTED)


_STATUS_CODES = {
    400: ApiStatus.INVALID_REQUEST,
    401: ApiStatus.UNAUTHENTICATED,
    402: ApiStatus.PRO_REQUIRED,
    403: ApiStatus.UNAUTHORIZED,
    404: ApiStatus.NOT_FOUND,
    422: ApiStatus.UNPROCESSABLE,
    429: ApiStatus.RATE_LIMITED,
    500: ApiStatus.UNEXPECTED,
}


class GyazoError(Exception):
    """Base exception for all gyazo errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingCredentialError(GyazoError):
    """Raised when an operation needs a credential that is not configured."""

    def __init__(self, credential: str, message: str) -> None:
        self.credential = credential
        super().__init__(message)


class TransportError(GyazoError):
    """Raised when the HTTP request itself fails (connection, TLS, ...)."""

    pass


class FilesystemError(GyazoError):
    """Raised when a local file operation fails."""

    pass


class UrlParseError(GyazoError):
    """Raised when a response body expected to be a URL is not one."""

    def __init__(self, message: str, text: str) -> None:
        self.text = text
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} ({self.text!r})"


class ApiError(GyazoError):
    """Raised when the Gyazo API responds with a non-2xx status."""

    def __init__(self, message: str, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.status = ApiStatus.from_code(status_code)
        self.text = text
        super().__init__(message)

    @property
    def reason(self) -> str:
        """Human-readable status classification."""
        if self.status is ApiStatus.UNDOCUMENTED:
            return f"{self.status.value}: {self.status_code}"
        return self.status.value

    def __str__(self) -> str:
        return f"{self.message}: {self.reason} ({self.text})"


class DecodeError(GyazoError):
    """Raised when a response body does not decode into the expected shape.

    Keeps the raw response text so a changed API payload can be inspected.
    """

    def __init__(self, message: str, text: str, type_name: str) -> None:
        self.text = text
        self.type_name = type_name
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} - type {self.type_name} ({self.text})"


class ProtocolError(GyazoError):
    """Raised when a 2xx response breaks an assumption about the API."""

    pass
