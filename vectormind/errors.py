"""Exception types for the VectorMind client.

Only TransportError and BackendStreamError ever reach the caller of an
exchange. MalformedFrame stays inside the frame interpreter.
"""


class ExchangeError(Exception):
    """Base class for failures of a request/response exchange.

    Attributes:
        message: Human readable description of the failure.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TransportError(ExchangeError):
    """Raised when the HTTP connection or response status fails.

    Attributes:
        status_code: HTTP status code, when the failure came from a response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class BackendStreamError(ExchangeError):
    """Raised when the backend sends an explicit error frame."""

    pass


class MalformedFrame(ExchangeError):
    """Raised when a frame payload cannot be decoded."""

    pass


class ApiError(TransportError):
    """Raised when a REST call returns a non-success status.

    Attributes:
        detail: Error detail reported by the server, if any.
    """

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.detail = detail
        message = f"HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, status_code=status_code)


class PDFValidationError(Exception):
    """Raised when a document fails the pre-upload PDF check."""

    pass
