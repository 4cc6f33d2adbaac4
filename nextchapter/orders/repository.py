from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import desc, func, select
from nextchapter.common.utils import now
from nextchapter.schema.full_schema import Book, DeliveryStatus, OrderItem, OrderPaymentStatus, Orders


def order_to_dict(order: Orders) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "payment_id": order.payment_id,
        "payment_status": order.payment_status,
        "delivery_status": order.delivery_status,
        "shipping_address": order.shipping_address,
        "tracking_number": order.tracking_number,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "estimated_delivery_date": order.estimated_delivery_date,
        "delivered_date": order.delivered_date,
        "is_reviewed": order.is_reviewed,
    }


async def list_user_orders(session, user_id: str) -> List[Dict[str, Any]]:
    orders_stmt = (
        select(Orders)
        .where(Orders.user_id == user_id, Orders.payment_status == OrderPaymentStatus.COMPLETED.value)
        .order_by(desc(Orders.created_at), desc(Orders.id))
    )
    res = await session.execute(orders_stmt)
    orders = [order_to_dict(o) for o in res.scalars().all()]
    if not orders:
        return []

    by_id = {o["id"]: o for o in orders}
    for o in orders:
        for key in ("user_id", "payment_id", "updated_at"):
            o.pop(key)
        o["items"] = []

    items_stmt = (
        select(OrderItem.id, OrderItem.order_id, OrderItem.book_id, OrderItem.quantity, OrderItem.price_at_time,
               Book.title, Book.authors, Book.thumbnail)
        .join(Book, Book.id == OrderItem.book_id, isouter=True)
        .where(OrderItem.order_id.in_(list(by_id)))
        .order_by(OrderItem.id)
    )
    items = await session.execute(items_stmt)
    for it in items.all():
        by_id[it.order_id]["items"].append({
            "id": it.id,
            "book_id": it.book_id,
            "quantity": it.quantity,
            "price_at_time": it.price_at_time,
            "title": it.title,
            "authors": list(it.authors or []),
            "thumbnail": it.thumbnail,
        })
    return orders


async def get_order_for_update(session, order_id: int, user_id: Optional[str] = None) -> Optional[Orders]:
    stmt = select(Orders).where(Orders.id == order_id).with_for_update()
    if user_id is not None:
        stmt = stmt.where(Orders.user_id == user_id)
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def write_delivery_status(session, order: Orders, status: DeliveryStatus,
                                tracking_number: Optional[str] = None) -> Orders:
    ts = now()
    order.delivery_status = status.value
    order.updated_at = ts
    if status == DeliveryStatus.DELIVERED:
        order.delivered_date = ts
    elif status == DeliveryStatus.CANCELLED:
        order.payment_status = OrderPaymentStatus.REFUNDED.value
    if tracking_number is not None:
        order.tracking_number = tracking_number
    await session.flush()
    return order


async def list_completed_orders(session, page: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
    total_res = await session.execute(
        select(func.count(Orders.id)).where(Orders.payment_status == OrderPaymentStatus.COMPLETED.value)
    )
    total = int(total_res.scalar_one() or 0)

    total_amount = func.coalesce(func.sum(OrderItem.quantity * OrderItem.price_at_time), 0).label("total_amount")
    stmt = (
        select(Orders, total_amount)
        .join(OrderItem, OrderItem.order_id == Orders.id, isouter=True)
        .where(Orders.payment_status == OrderPaymentStatus.COMPLETED.value)
        .group_by(Orders.id)
        .order_by(desc(Orders.created_at), desc(Orders.id))
        .limit(limit)
        .offset((page - 1) * limit)
    )
    res = await session.execute(stmt)
    orders = []
    for order, amount in res.all():
        row = order_to_dict(order)
        row["total_amount"] = amount
        orders.append(row)
    return orders, total
