from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nextchapter.auth.dependencies import current_user_id
from nextchapter.common.utils import json_ok
from nextchapter.db.dependencies import get_session
from nextchapter.orders.models import UpdateTrackingInput
from nextchapter.orders.repository import list_user_orders
from nextchapter.orders.services import update_delivery_status

orders_router=APIRouter()


@orders_router.get("")
async def get_orders(user_id: str = Depends(current_user_id), session: AsyncSession = Depends(get_session)):
    return json_ok(await list_user_orders(session, user_id))


@orders_router.put("/update-tracking")
async def update_tracking(payload: UpdateTrackingInput, user_id: str = Depends(current_user_id),
                          session: AsyncSession = Depends(get_session)):
    order = await update_delivery_status(session, payload.order_id, payload.delivery_status,
                                         tracking_number=payload.tracking_number, user_id=user_id)
    return json_ok(order)
