"""Failure kinds raised by the payment service.

Each exception carries the HTTP status and message that the exception
handlers in ``midtrans_service.main`` turn into an ``{"error": ...}`` body.
"""
from typing import Any, Optional


class PaymentServiceError(Exception):
    status_code = 500
    message = "An unexpected error occurred."

    def __init__(self, message: Optional[Any] = None):
        self.detail = message if message is not None else self.message
        super().__init__(str(self.detail))


class InvalidNotificationError(PaymentServiceError):
    status_code = 400
    message = "Missing order_id in request"


class PaymentNotFoundError(PaymentServiceError):
    status_code = 404
    message = "Payment record not found"


class GatewayError(PaymentServiceError):
    """Midtrans could not be reached or answered with a non-success status."""

    message = "Transaction failed"

    def __init__(self, message: Optional[Any] = None, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body


class GatewayResponseError(GatewayError):
    """Midtrans answered, but the body is not what we expected."""

    message = "Invalid response from Midtrans."


class GatewayConfigError(PaymentServiceError):
    message = "Payment gateway is not configured"


class PaymentStoreError(PaymentServiceError):
    message = "Failed to persist payment"
