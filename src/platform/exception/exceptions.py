class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class UnsupportedPaymentTypeError(DomainError):
    """Raised when a paid order is submitted with a payment type this flow cannot handle."""

    def __init__(self, payment_type: str | None) -> None:
        super().__init__(f'Unsupported payment type: {payment_type!r}', 400)
        self.payment_type = payment_type


class CommandDispatchError(CustomBaseError):
    """Raised when the command bus refuses to accept a command."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
