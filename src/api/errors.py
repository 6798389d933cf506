# src/api/errors.py

"""Error taxonomy raised by the catalog gateway."""


class GatewayError(Exception):
    """Base class for failures talking to the catalog backend."""


class NetworkError(GatewayError):
    """Transport failure, or a response body that could not be decoded."""


class RequestError(GatewayError):
    """The backend answered with a non-2xx status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class ValidationError(RequestError):
    """HTTP 400 carrying a ``{field: message}`` map."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        super().__init__("Validation failed", status=400)
        self.field_errors = field_errors
