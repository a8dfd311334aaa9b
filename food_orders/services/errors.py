from __future__ import annotations


class OrderWorkflowError(Exception):
    """Base error for the order workflow; carries the HTTP status the router should answer with."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class FoodNotFoundError(OrderWorkflowError):
    status_code = 404

    def __init__(self, message: str = "Food item not found"):
        super().__init__(message)


class OrderNotFoundError(OrderWorkflowError):
    status_code = 404

    def __init__(self, message: str = "Order not found"):
        super().__init__(message)


class AddonLookupError(OrderWorkflowError):
    def __init__(self, message: str = "Failed to fetch addon details"):
        super().__init__(message)


class OrderPersistenceError(OrderWorkflowError):
    pass


class PaymentVerificationError(OrderWorkflowError):
    status_code = 400

    def __init__(self, message: str = "Payment verification failed"):
        super().__init__(message)


class PaymentGatewayError(OrderWorkflowError):
    status_code = 500

    def __init__(self, message: str = "Payment gateway unavailable"):
        super().__init__(message)
