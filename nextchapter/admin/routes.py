from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nextchapter.admin.models import UpdateUserStatusInput
from nextchapter.admin.repository import dashboard_metrics, get_user, list_users, user_order_history, user_to_dict
from nextchapter.auth.dependencies import require_admin
from nextchapter.common.custom_exceptions import NotFound
from nextchapter.common.logging_setup import get_logger
from nextchapter.common.utils import json_ok, now, round_money
from nextchapter.db.dependencies import get_session
from nextchapter.orders.models import UpdateOrderStatusInput
from nextchapter.orders.repository import list_completed_orders
from nextchapter.orders.services import update_delivery_status

logger = get_logger("nextchapter.admin")

admin_router=APIRouter(dependencies=[Depends(require_admin)])


@admin_router.get("/dashboard")
async def get_dashboard(session: AsyncSession = Depends(get_session)):
    return json_ok(await dashboard_metrics(session))


@admin_router.get("/orders")
async def get_orders(page: int = Query(1, ge=1), limit: int = Query(10, ge=1, le=100),
                     session: AsyncSession = Depends(get_session)):
    orders, total = await list_completed_orders(session, page, limit)
    return json_ok({"orders": orders, "total": total})


@admin_router.post("/orders/update-status")
async def update_order_status(payload: UpdateOrderStatusInput, admin_id: str = Depends(require_admin),
                              session: AsyncSession = Depends(get_session)):
    order = await update_delivery_status(session, payload.order_id, payload.new_status,
                                         tracking_number=payload.tracking_number)
    logger.info("admin.order_status_updated", extra={"admin_id": admin_id, "order_id": payload.order_id,
                                                     "to_status": payload.new_status})
    return json_ok({"success": True, "order": order})


@admin_router.get("/users")
async def get_users(limit: int = Query(100, ge=1, le=500), session: AsyncSession = Depends(get_session)):
    return json_ok({"users": await list_users(session, limit)})


@admin_router.get("/users/{user_id}")
async def get_user_profile(user_id: str, session: AsyncSession = Depends(get_session)):
    user = await get_user(session, user_id)
    if user is None:
        raise NotFound("User not found")
    orders = await user_order_history(session, user_id)
    total_spent = round_money(sum((o["total_spent"] for o in orders), round_money(0)))
    return json_ok({"userInfo": user_to_dict(user), "orders": orders, "totalSpent": total_spent})


@admin_router.post("/users/update-status")
async def update_user_status(payload: UpdateUserStatusInput, admin_id: str = Depends(require_admin),
                             session: AsyncSession = Depends(get_session)):
    user = await get_user(session, payload.user_id)
    if user is None:
        raise NotFound("User not found")

    user.is_disabled = payload.is_disabled
    user.updated_at = now()
    await session.commit()

    logger.info("admin.user_status_updated", extra={"admin_id": admin_id, "user_identifier": payload.user_id,
                                                    "is_disabled": payload.is_disabled})
    return json_ok({
        "message": f"User {'disabled' if payload.is_disabled else 'enabled'} successfully",
        "user": user_to_dict(user),
    })
