import logging
import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from midtrans_service.config import TERMINAL_STATUSES
from midtrans_service.errors import InvalidNotificationError, PaymentNotFoundError, PaymentStoreError
from midtrans_service.gateway import MidtransClient
from midtrans_service.models import Payment

logger = logging.getLogger(__name__)

ALREADY_PROCESSED = "Payment has already been processed"
SUCCESS = "success"


class PaymentRequest(BaseModel):
    price: int
    item_name: str
    customer_first_name: str
    customer_email: str


class MidtransNotification(BaseModel):
    # Midtrans sends many more fields; only order_id drives the handler
    model_config = ConfigDict(extra="allow")

    order_id: Optional[str] = None
    transaction_id: Optional[str] = None
    transaction_status: Optional[str] = None


def build_snap_payload(request: PaymentRequest, order_id: str, enabled_payments) -> Dict[str, Any]:
    return {
        "transaction_details": {
            "order_id": order_id,
            "gross_amount": request.price,
        },
        "item_details": [
            {
                "price": request.price,
                "quantity": 1,
                "name": request.item_name,
            }
        ],
        "customer_details": {
            "first_name": request.customer_first_name,
            "email": request.customer_email,
        },
        "enabled_payments": list(enabled_payments),
    }


def create_transaction(request: PaymentRequest, gateway: MidtransClient, db: Session) -> Dict[str, Any]:
    """Open a Snap checkout for ``request`` and store it as a pending payment.

    Returns the raw Snap response (``token`` and ``redirect_url``). Nothing is
    stored when the gateway call fails.
    """
    order_id = str(uuid.uuid4())
    payload = build_snap_payload(request, order_id, gateway.settings.enabled_payments)

    snap = gateway.create_snap_transaction(payload)

    payment = Payment(
        order_id=order_id,
        status="pending",
        price=request.price,
        customer_first_name=request.customer_first_name,
        customer_email=request.customer_email,
        item_name=request.item_name,
        checkout_link=snap.get("redirect_url"),
    )
    try:
        db.add(payment)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to store payment order_id=%s", order_id)
        raise PaymentStoreError() from exc

    logger.info("Payment created order_id=%s checkout_link=%s", order_id, payment.checkout_link)
    return snap


def handle_notification(notification: MidtransNotification, gateway: MidtransClient, db: Session) -> str:
    """Apply a Midtrans notification to the stored payment.

    The notification body is only trusted for its ``order_id``; the status
    itself is re-read from Midtrans. Payments already in ``settlement`` or
    ``capture`` are left alone.
    """
    logger.info("Received Midtrans notification: %s", notification.model_dump())

    if notification.transaction_id:
        logger.info("Transaction ID: %s", notification.transaction_id)

    if not notification.order_id:
        logger.error("Notification missing order_id: %s", notification.model_dump())
        raise InvalidNotificationError()

    status_data = gateway.get_transaction_status(notification.order_id)
    order_id = status_data["order_id"]
    transaction_status = status_data.get("transaction_status")

    try:
        payment = db.query(Payment).filter_by(order_id=order_id).first()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to load payment order_id=%s", order_id)
        raise PaymentStoreError() from exc

    if payment is None:
        logger.error("Payment record not found for order_id=%s", order_id)
        raise PaymentNotFoundError()

    if payment.status in TERMINAL_STATUSES:
        logger.info("Payment has already been processed order_id=%s status=%s", order_id, payment.status)
        return ALREADY_PROCESSED

    new_status = gateway.settings.status_map.get(transaction_status)
    if new_status is None:
        logger.warning(
            "Unhandled transaction status %r for order_id=%s", transaction_status, order_id
        )
        return SUCCESS

    try:
        # Compare-and-swap so a concurrent delivery cannot overwrite a terminal status
        updated = (
            db.query(Payment)
            .filter(Payment.order_id == order_id, Payment.status.notin_(TERMINAL_STATUSES))
            .update({Payment.status: new_status}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update payment order_id=%s", order_id)
        raise PaymentStoreError() from exc

    if not updated:
        logger.info("Payment reached a final status concurrently order_id=%s", order_id)
        return ALREADY_PROCESSED

    logger.info("Payment status updated order_id=%s new_status=%s", order_id, new_status)
    return SUCCESS
