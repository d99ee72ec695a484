from fastapi import APIRouter, Depends
from midtrans_service.config import get_settings
from midtrans_service.database import SessionLocal
from midtrans_service.gateway import MidtransClient
from midtrans_service.payments import (
    MidtransNotification,
    PaymentRequest,
    create_transaction,
    handle_notification,
)

router = APIRouter()


def get_gateway():
    client = MidtransClient(get_settings())
    try:
        yield client
    finally:
        client.close()


@router.post("/payments")
def create_payment_api(
    request: PaymentRequest,
    gateway: MidtransClient = Depends(get_gateway)
):
    db = SessionLocal()
    try:
        return create_transaction(request, gateway, db)
    finally:
        db.close()


@router.post("/webhooks/midtrans")
def midtrans_webhook(
    notification: MidtransNotification,
    gateway: MidtransClient = Depends(get_gateway)
):
    db = SessionLocal()
    try:
        return handle_notification(notification, gateway, db)
    finally:
        db.close()
