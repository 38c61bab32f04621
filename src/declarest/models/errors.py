from typing import Optional


class DeclarestError(Exception):
    """Base class for every error raised by declarest."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(self.message)


class DeclarationError(DeclarestError):
    """Raised when an operation or one of its parameters is declared inconsistently."""


class OperationNotFoundError(DeclarationError, LookupError):
    def __init__(self, operation_id: str) -> None:
        self.operation_id = operation_id
        super().__init__(f"Operation '{operation_id}' is not registered.")


class MissingArgumentError(DeclarestError):
    """Raised in strict mode when a bound argument position has no value."""

    def __init__(self, operation_id: str, position: int) -> None:
        self.operation_id = operation_id
        self.position = position
        super().__init__(
            f"Operation '{operation_id}' expects an argument at position {position}."
        )


class SerializationError(DeclarestError):
    """Raised when a body or a composite argument cannot be JSON-encoded.

    Compilation is aborted, so no request reaches the transport.
    """


class ParseError(DeclarestError):
    """Raised when a response payload cannot be deserialized."""

    def __init__(self, message: str, payload: Optional[str] = None) -> None:
        self.payload = payload
        super().__init__(message)


class TransportError(DeclarestError):
    """Raised by the default transport when the request could not be completed."""


class HttpStatusError(TransportError):
    """Raised by the default transport for non-2xx responses."""

    def __init__(
        self,
        message: str,
        status_code: int,
        method: str,
        url: str,
        body: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.method = method
        self.url = url
        self.body = body
        super().__init__(message)

    def __str__(self) -> str:
        return (
            f"\n\t{self.message}"
            f"\n\tRequest URL: {self.url}"
            f"\n\tHTTP Method: {self.method}"
            f"\n\tStatus Code: {self.status_code}"
            f"\n\tResponse Content: {(self.body or '')[:200]}"
        )
