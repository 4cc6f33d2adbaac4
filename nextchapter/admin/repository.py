from typing import Any, Dict, List, Optional
from sqlalchemy import case, desc, func, select
from nextchapter.common.utils import now, round_money
from nextchapter.schema.full_schema import (
    Book, DeliveryStatus, OrderItem, OrderPaymentStatus, Orders, Payment, PaymentStatus, Users,
)


def _num(value) -> Any:
    return value if value is not None else 0


async def user_metrics(session) -> Dict[str, int]:
    stmt = select(
        func.count(Users.id),
        func.count(case((Users.is_disabled.is_(False), 1))),
        func.count(case((Users.is_disabled.is_(True), 1))),
    )
    total, active, blocked = (await session.execute(stmt)).one()
    return {"totalUsers": int(total), "activeUsers": int(active), "blockedUsers": int(blocked)}


async def payment_metrics(session) -> Dict[str, Any]:
    completed = Payment.status == PaymentStatus.COMPLETED.value
    totals = await session.execute(
        select(func.coalesce(func.sum(Payment.amount), 0), func.count(Payment.id)).where(completed)
    )
    revenue, count = totals.one()

    month_start = now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    monthly = await session.execute(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(completed, Payment.created_at >= month_start)
    )
    return {
        "totalRevenue": round_money(_num(revenue)),
        "totalPayments": int(count),
        "monthlyRevenue": round_money(_num(monthly.scalar_one())),
    }


async def order_metrics(session) -> Dict[str, int]:
    closed = (DeliveryStatus.DELIVERED.value, DeliveryStatus.CANCELLED.value)
    stmt = (
        select(
            func.count(Orders.id),
            func.count(case((Orders.delivery_status == DeliveryStatus.DELIVERED.value, 1))),
            func.count(case((Orders.delivery_status.notin_(closed), 1))),
            func.count(case((Orders.delivery_status == DeliveryStatus.CANCELLED.value, 1))),
        )
        .where(Orders.payment_status.in_((OrderPaymentStatus.COMPLETED.value, OrderPaymentStatus.REFUNDED.value)))
    )
    total, delivered, pending, cancelled = (await session.execute(stmt)).one()
    return {
        "totalOrders": int(total),
        "deliveredOrders": int(delivered),
        "pendingOrders": int(pending),
        "cancelledOrders": int(cancelled),
    }


async def book_metrics(session) -> Dict[str, int]:
    stmt = select(
        func.count(Book.id),
        func.coalesce(func.sum(Book.total_sold), 0),
        func.coalesce(func.sum(Book.stock), 0),
        func.count(case((Book.stock == 0, 1))),
        func.count(func.distinct(Book.category)),
    )
    total, sold, stock, out_of_stock, categories = (await session.execute(stmt)).one()
    return {
        "totalBooks": int(total),
        "totalSold": int(sold),
        "totalStock": int(stock),
        "outOfStock": int(out_of_stock),
        "totalCategories": int(categories),
    }


async def dashboard_metrics(session) -> Dict[str, Any]:
    metrics: Dict[str, Any] = {}
    metrics.update(await user_metrics(session))
    metrics.update(await payment_metrics(session))
    metrics.update(await order_metrics(session))
    metrics.update(await book_metrics(session))
    return metrics


def user_to_dict(user: Users) -> Dict[str, Any]:
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email or "",
        "role": user.role,
        "createdAt": user.created_at,
        "lastSeenAt": user.last_seen_at,
        "status": "blocked" if user.is_disabled else "active",
    }


async def list_users(session, limit: int = 100) -> List[Dict[str, Any]]:
    res = await session.execute(select(Users).order_by(desc(Users.created_at), Users.id).limit(limit))
    return [user_to_dict(u) for u in res.scalars().all()]


async def get_user(session, user_id: str) -> Optional[Users]:
    return await session.get(Users, user_id)


async def user_order_history(session, user_id: str) -> List[Dict[str, Any]]:
    orders_res = await session.execute(
        select(Orders).where(Orders.user_id == user_id).order_by(desc(Orders.created_at), desc(Orders.id))
    )
    orders = []
    by_id = {}
    for o in orders_res.scalars().all():
        row = {
            "order_id": o.id,
            "created_at": o.created_at,
            "delivered_date": o.delivered_date,
            "estimated_delivery_date": o.estimated_delivery_date,
            "payment_status": o.payment_status,
            "delivery_status": o.delivery_status,
            "tracking_number": o.tracking_number,
            "shipping_address": o.shipping_address,
            "total_spent": round_money(0),
            "items": [],
        }
        orders.append(row)
        by_id[o.id] = row
    if not orders:
        return []

    items_res = await session.execute(
        select(OrderItem.order_id, OrderItem.book_id, OrderItem.quantity, OrderItem.price_at_time, Book.title, Book.authors)
        .join(Book, Book.id == OrderItem.book_id, isouter=True)
        .where(OrderItem.order_id.in_(list(by_id)))
        .order_by(OrderItem.id)
    )
    for it in items_res.all():
        subtotal = round_money(it.price_at_time * it.quantity)
        row = by_id[it.order_id]
        row["items"].append({
            "book_id": it.book_id,
            "title": it.title,
            "authors": list(it.authors or []),
            "quantity": it.quantity,
            "price_at_time": it.price_at_time,
            "subtotal": subtotal,
        })
        row["total_spent"] = round_money(row["total_spent"] + subtotal)
    return orders
