"""
Custom exception classes for the Car Rental API.

Services raise these; the error handlers in ``app.errors`` translate them
into ``{"success": false, "message": ...}`` JSON responses using the
``status_code`` carried by each class.
"""


class RentalAppError(Exception):
    """Base class for every error that maps onto an HTTP status."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None) -> None:
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return str(self.message)


# ---------- request-level errors ----------
class InvalidInputError(RentalAppError):
    """Raised for missing or malformed fields, bad enum values and bad date ranges."""

    status_code = 400
    default_message = "Invalid input"


class NotFoundError(RentalAppError):
    """Raised when an id does not resolve to a stored document."""

    status_code = 404
    default_message = "Resource not found"


class CarNotFoundError(NotFoundError):
    default_message = "Car not found"


class RentalNotFoundError(NotFoundError):
    default_message = "Rental not found"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


class UnauthorizedError(RentalAppError):
    """Raised on role or ownership mismatch and on failed authentication."""

    status_code = 401
    default_message = "Not authorized to access this route"


class InvalidStateError(RentalAppError):
    """Raised when an operation is illegal for the current state of a document."""

    status_code = 400
    default_message = "Operation not allowed in the current state"


class CarUnavailableError(InvalidStateError):
    """Raised when a car cannot be booked."""

    default_message = "Car is not available for rental"


# ---------- persistence-layer errors ----------
class DuplicateKeyError(RentalAppError):
    """Raised by the store when a unique field value is already taken."""

    status_code = 400
    default_message = "Duplicate field value entered"

    def __init__(self, field: str = "", message=None) -> None:
        self.field = field
        super().__init__(message)


class SchemaValidationError(RentalAppError):
    """Raised when a document fails schema validation; ``message`` is a list."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors) -> None:
        self.errors = list(errors)
        super().__init__(self.errors)


class InvalidIdError(RentalAppError):
    """Raised when a lookup id is not a well-formed identifier."""

    status_code = 404

    def __init__(self, value) -> None:
        self.value = value
        super().__init__(f"Resource not found with id of {value}")
