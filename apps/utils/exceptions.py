# utils/exceptions.py

"""
Service-layer error taxonomy.

Every error carries a ``message`` that is safe to show to staff. Raw
database errors never cross the service boundary; they are logged and
replaced by PersistenceError.
"""


class ServiceError(Exception):
    """Base class for all service-layer errors."""

    default_message = "The request could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed or missing input, detected before touching the store."""

    default_message = "Please fill in all required fields."

    def __init__(self, message=None, field_errors=None):
        super().__init__(message)
        self.field_errors = field_errors or {}


class NotFoundError(ServiceError):
    """A referenced record does not exist."""

    default_message = "The requested record was not found."


class OverpaymentError(ServiceError):
    """Payment amount exceeds the remaining balance of a fee assessment."""

    default_message = "Payment amount cannot exceed the remaining balance."


class InsufficientStockError(ServiceError):
    """Requested quantity exceeds the supply's available stock."""

    default_message = "Requested quantity exceeds available stock."


class PersistenceError(ServiceError):
    """The store failed; the whole operation was rolled back."""

    default_message = "An error occurred while saving. No changes were made."
