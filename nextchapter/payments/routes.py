from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nextchapter.auth.dependencies import current_user_id
from nextchapter.common.utils import json_ok
from nextchapter.db.dependencies import get_session
from nextchapter.payments import services
from nextchapter.payments.models import CreateOrderInput, VerifyPaymentInput

payments_router=APIRouter()


@payments_router.post("/create-order")
async def create_payment_order(payload: CreateOrderInput, user_id: str = Depends(current_user_id),
                               session: AsyncSession = Depends(get_session)):
    resp = await services.create_order(session, user_id, payload.amount, payload.shipping_address)
    return json_ok(resp)


@payments_router.post("/verify")
async def verify_payment(payload: VerifyPaymentInput, user_id: str = Depends(current_user_id),
                         session: AsyncSession = Depends(get_session)):
    resp = await services.verify_payment(session, user_id, payload.gateway_order_id,
                                         payload.gateway_payment_id, payload.signature)
    return json_ok(resp)
