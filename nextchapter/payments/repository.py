from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy import delete, insert, inspect, select, update
from nextchapter.common.utils import now, round_money
from nextchapter.schema.full_schema import (
    CORE_ORDER_TABLES, CartLine, DeliveryStatus, OrderItem, OrderPaymentStatus, Orders, Payment, PaymentStatus,
)


async def missing_tables(session, names: Sequence[str] = CORE_ORDER_TABLES) -> List[str]:
    conn = await session.connection()
    return await conn.run_sync(lambda sync_conn: [n for n in names if not inspect(sync_conn).has_table(n)])


async def record_pending_payment(session, user_id: str, gateway_order_id: str, amount: Decimal, currency: str) -> int:
    stmt = (
        insert(Payment)
        .values(
            user_id=user_id,
            gateway_order_id=gateway_order_id,
            amount=round_money(amount),
            currency=currency,
            status=PaymentStatus.PENDING.value,
            created_at=now(),
            updated_at=now(),
        )
        .returning(Payment.id)
    )
    res = await session.execute(stmt)
    return res.scalar_one()


async def place_pending_order(session, user_id: str, payment_id: int, shipping_address: str, delivery_days: int) -> int:
    ts = now()
    stmt = (
        insert(Orders)
        .values(
            user_id=user_id,
            payment_id=payment_id,
            payment_status=OrderPaymentStatus.PENDING.value,
            delivery_status=DeliveryStatus.ORDER_PLACED.value,
            shipping_address=shipping_address,
            created_at=ts,
            updated_at=ts,
            estimated_delivery_date=ts + timedelta(days=delivery_days),
            is_reviewed=False,
        )
        .returning(Orders.id)
    )
    res = await session.execute(stmt)
    return res.scalar_one()


# conditional update is the single point that decides which verify call wins
async def complete_pending_payment(session, user_id: str, gateway_order_id: str, gateway_payment_id: str) -> Optional[int]:
    stmt = (
        update(Payment)
        .where(
            Payment.gateway_order_id == gateway_order_id,
            Payment.user_id == user_id,
            Payment.status == PaymentStatus.PENDING.value,
        )
        .values(status=PaymentStatus.COMPLETED.value, gateway_payment_id=gateway_payment_id, updated_at=now())
        .returning(Payment.id)
    )
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def get_payment_status(session, user_id: str, gateway_order_id: str) -> Optional[str]:
    stmt = select(Payment.status).where(Payment.gateway_order_id == gateway_order_id, Payment.user_id == user_id)
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def mark_order_paid(session, payment_id: int) -> Optional[int]:
    # a cancelled order stays cancelled even if its payment arrives late
    stmt = (
        update(Orders)
        .where(
            Orders.payment_id == payment_id,
            Orders.payment_status == OrderPaymentStatus.PENDING.value,
            Orders.delivery_status != DeliveryStatus.CANCELLED.value,
        )
        .values(
            payment_status=OrderPaymentStatus.COMPLETED.value,
            delivery_status=DeliveryStatus.PROCESSING.value,
            updated_at=now(),
        )
        .returning(Orders.id)
    )
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def order_exists_for_payment(session, payment_id: int) -> bool:
    res = await session.execute(select(Orders.id).where(Orders.payment_id == payment_id))
    return res.scalar_one_or_none() is not None


async def lock_cart_lines(session, user_id: str) -> List[Dict[str, Any]]:
    stmt = (
        select(CartLine.book_id, CartLine.quantity, CartLine.original_price, CartLine.discount)
        .where(CartLine.user_id == user_id)
        .order_by(CartLine.id)
        .with_for_update()
    )
    res = await session.execute(stmt)
    return [dict(r._mapping) for r in res.all()]


def unit_price(original_price: Any, discount: Any) -> Decimal:
    pct = Decimal(int(discount or 0))
    return round_money(Decimal(str(original_price)) * (Decimal(1) - pct / Decimal(100)))


async def insert_order_items(session, order_id: int, cart_lines: List[Dict[str, Any]]):
    rows = [
        {
            "order_id": order_id,
            "book_id": line["book_id"],
            "quantity": int(line["quantity"]),
            "price_at_time": unit_price(line["original_price"], line["discount"]),
        }
        for line in cart_lines
    ]
    await session.execute(insert(OrderItem), rows)
    return rows


async def clear_cart(session, user_id: str):
    await session.execute(delete(CartLine).where(CartLine.user_id == user_id))
