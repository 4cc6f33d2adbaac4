import hashlib
import hmac
from decimal import Decimal
from typing import Any, Dict, Optional
import httpx
from sqlalchemy.exc import SQLAlchemyError
from uuid6 import uuid7
from nextchapter.common.custom_exceptions import (
    AlreadyProcessed, BookstoreError, EmptyCart, GatewayError, InvalidSignature, InvalidTransition, NotFound,
    SchemaError, StorageError, ValidationFailed,
)
from nextchapter.common.logging_setup import get_logger
from nextchapter.common.utils import round_money
from nextchapter.config.settings import config_settings
from nextchapter.payments.repository import (
    clear_cart, complete_pending_payment, get_payment_status, insert_order_items, lock_cart_lines, mark_order_paid,
    missing_tables, order_exists_for_payment, place_pending_order, record_pending_payment,
)

logger = get_logger("nextchapter.payments")

PSP_API_BASE = config_settings.RZPAY_GATEWAY_URL
PSP_KEY_ID = config_settings.RZPAY_KEY
PSP_KEY_SECRET = config_settings.RZPAY_SECRET
PSP_CURRENCY = config_settings.RZPAY_CURRENCY


async def create_psp_order(amount_paise: int, currency: str, receipt: str, notes: Optional[dict] = None,
                           timeout: float = config_settings.RZPAY_TIMEOUT_SECONDS) -> dict:
    """
    Create razorpay order (server -> razorpay). Returns the provider order entity.
    amount_paise: integer minor units
    receipt: internal receipt id
    """
    url = f"{PSP_API_BASE}/orders"
    payload = {
        "amount": amount_paise,
        "currency": currency,
        "receipt": receipt,
        "notes": notes or {},
    }
    async with httpx.AsyncClient(timeout=timeout, auth=(PSP_KEY_ID, PSP_KEY_SECRET)) as client:
        resp = await client.post(url, json=payload, headers={"Content-Type": "application/json"})
        resp.raise_for_status()
        return resp.json()


def payment_signature(gateway_order_id: str, gateway_payment_id: str, secret: str = PSP_KEY_SECRET) -> str:
    body = f"{gateway_order_id}|{gateway_payment_id}".encode()
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_razorpay_signature(gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
    expected = payment_signature(gateway_order_id, gateway_payment_id)
    return hmac.compare_digest(expected, signature or "")


async def create_order(session, user_id: str, amount: Decimal, shipping_address: str) -> Dict[str, Any]:

    if amount is None or amount <= 0:
        raise ValidationFailed("Amount must be greater than zero")
    if not shipping_address or not shipping_address.strip():
        raise ValidationFailed("Shipping address is required")

    missing = await missing_tables(session)
    if missing:
        logger.error("payment.create.schema_missing", extra={"tables": missing})
        raise SchemaError(details={"missing_tables": missing})

    amount = round_money(amount)
    amount_paise = int(amount * 100)
    receipt = f"rcpt_{uuid7().hex[:24]}"

    try:
        psp_order = await create_psp_order(amount_paise=amount_paise, currency=PSP_CURRENCY, receipt=receipt,
                                           notes={"user_id": user_id})
    except httpx.HTTPStatusError as e:
        logger.error("payment.create.gateway_rejected", extra={"status": e.response.status_code, "user_id": user_id})
        raise GatewayError(details=e.response.text)
    except httpx.HTTPError as e:
        logger.error("payment.create.gateway_unavailable", extra={"error": str(e), "user_id": user_id})
        raise GatewayError(details=str(e))

    gateway_order_id = psp_order.get("id")
    if not gateway_order_id:
        raise GatewayError(details="gateway response missing order id")

    try:
        payment_id = await record_pending_payment(session, user_id, gateway_order_id, amount, PSP_CURRENCY)
        order_id = await place_pending_order(session, user_id, payment_id, shipping_address.strip(),
                                             config_settings.ESTIMATED_DELIVERY_DAYS)
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("payment.create.failed", extra={"user_id": user_id, "gateway_order_id": gateway_order_id},
                     exc_info=e)
        raise StorageError(details=str(e))

    logger.info("payment.create.success", extra={"user_id": user_id, "order_id": order_id,
                                                  "gateway_order_id": gateway_order_id})
    return {
        "orderId": gateway_order_id,
        "amount": psp_order.get("amount", amount_paise),
        "currency": psp_order.get("currency", PSP_CURRENCY),
    }


async def verify_payment(session, user_id: str, gateway_order_id: str, gateway_payment_id: str,
                         signature: str) -> Dict[str, Any]:

    if not verify_razorpay_signature(gateway_order_id, gateway_payment_id, signature):
        logger.warning("payment.verify.invalid_signature", extra={"user_id": user_id,
                                                                  "gateway_order_id": gateway_order_id})
        raise InvalidSignature()

    try:
        payment_id = await complete_pending_payment(session, user_id, gateway_order_id, gateway_payment_id)
        if payment_id is None:
            if await get_payment_status(session, user_id, gateway_order_id) is None:
                raise NotFound("Payment not found")
            raise AlreadyProcessed()

        order_id = await mark_order_paid(session, payment_id)
        if order_id is None:
            if not await order_exists_for_payment(session, payment_id):
                raise NotFound("Order not found")
            raise InvalidTransition("Order is no longer awaiting payment")

        cart_lines = await lock_cart_lines(session, user_id)
        if not cart_lines:
            raise EmptyCart()

        await insert_order_items(session, order_id, cart_lines)
        await clear_cart(session, user_id)
        await session.commit()

    except BookstoreError as e:
        await session.rollback()
        logger.info("payment.verify.rejected", extra={"user_id": user_id, "gateway_order_id": gateway_order_id,
                                                       "code": e.code})
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("payment.verify.failed", extra={"user_id": user_id, "gateway_order_id": gateway_order_id},
                     exc_info=e)
        raise StorageError(details=str(e))

    logger.info("payment.verify.success", extra={"user_id": user_id, "order_id": order_id,
                                                  "items": len(cart_lines)})
    return {"success": True, "orderId": order_id}
