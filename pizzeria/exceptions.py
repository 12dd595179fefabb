"""
Domain exceptions for the pizzeria API.

Every exception carries the HTTP status it maps to, so the handlers in
``pizzeria.main`` can turn any of them into the ``{"success": false,
"message": ...}`` envelope without knowing the concrete class.
"""


class PizzeriaException(Exception):
    """
    Base exception for all pizzeria errors.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, states, etc.)
    """

    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"


class ValidationError(PizzeriaException):
    """Missing or malformed input."""
    status_code = 400


class NotFoundError(PizzeriaException):
    """Referenced pizza, cart, item, address or order does not exist."""
    status_code = 404


class AuthenticationError(PizzeriaException):
    """Wrong credentials at login."""
    status_code = 401


class PermissionDeniedError(PizzeriaException):
    status_code = 403


class UnavailableError(PizzeriaException):
    """Something exists but is not valid for the current state."""
    status_code = 400


class InvalidSizeError(UnavailableError):

    def __init__(self, pizza_id: int, size: str):
        super().__init__(
            "Invalid size selected",
            details={'pizza_id': pizza_id, 'size': size}
        )


class InvalidDiscountCodeError(UnavailableError):

    def __init__(self, code: str):
        super().__init__(
            "Invalid discount code",
            details={'code': code}
        )


class MinimumOrderNotMetError(UnavailableError):

    def __init__(self, code: str, min_order: float, currency: str = "LKR"):
        super().__init__(
            f"Minimum order amount of {currency} {min_order:g} required for this discount",
            details={'code': code, 'min_order': min_order}
        )


class EmptyCartError(UnavailableError):

    def __init__(self, user_id: int):
        super().__init__(
            "Cart is empty",
            details={'user_id': user_id}
        )


class InvalidQuantityError(PizzeriaException):
    status_code = 400

    def __init__(self, quantity, max_quantity: int = 10):
        super().__init__(
            f"Quantity must be between 1 and {max_quantity}",
            details={'quantity': quantity}
        )


class InvalidTransitionError(PizzeriaException):
    """Illegal order status change."""
    status_code = 400


class AlreadyReviewedError(InvalidTransitionError):

    def __init__(self, order_id: int):
        super().__init__(
            "Order has already been reviewed",
            details={'order_id': order_id}
        )


class ServerError(PizzeriaException):
    status_code = 500
