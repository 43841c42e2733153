"""Domain errors raised by the services and rendered by the API layer."""


class DeliveryError(Exception):
    """Base class for errors reported to the caller as ``{error: message}``."""

    status_code: int = 400

    def __init__(self, message: str, meta: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.meta = meta


class ValidationFailed(DeliveryError):
    """A field is missing or malformed, or a quantity/amount is not positive."""


class Conflict(DeliveryError):
    """Unique key collision, or a delete blocked by live references."""


class InvalidReference(DeliveryError):
    """A foreign key points at a row that does not exist."""

    def __init__(self, field: str, value: int) -> None:
        super().__init__(
            f"Invalid {field}: no record with id {value}",
            meta={"field": field},
        )
        self.field = field


class ProductUnavailable(DeliveryError):
    """The resolved availability of a (route, product) pair is false."""


class NotFound(DeliveryError):
    status_code = 404


class Unauthorized(DeliveryError):
    status_code = 401
