from typing import Any, Dict, List, Optional
from sqlalchemy import func, insert, select, update
from nextchapter.common.utils import now, round_rating
from nextchapter.schema.full_schema import Book, OrderItem, Orders, Review


async def get_reviewable_item(session, user_id: str, order_id: int, book_id: int) -> Optional[Dict[str, Any]]:
    stmt = (
        select(OrderItem.id, Orders.delivery_status, Orders.is_reviewed)
        .join(Orders, Orders.id == OrderItem.order_id)
        .where(OrderItem.order_id == order_id, OrderItem.book_id == book_id, Orders.user_id == user_id)
        .with_for_update(of=Orders)
    )
    res = await session.execute(stmt)
    row = res.one_or_none()
    return dict(row._mapping) if row else None


async def review_exists(session, user_id: str, order_id: int, book_id: int) -> bool:
    stmt = select(Review.id).where(Review.order_id == order_id, Review.book_id == book_id, Review.user_id == user_id)
    res = await session.execute(stmt)
    return res.scalar_one_or_none() is not None


async def insert_review(session, user_id: str, order_id: int, book_id: int, rating: int) -> int:
    stmt = (
        insert(Review)
        .values(order_id=order_id, book_id=book_id, user_id=user_id, rating=rating, created_at=now())
        .returning(Review.id)
    )
    res = await session.execute(stmt)
    return res.scalar_one()


async def recompute_book_rating(session, book_id: int):
    agg = await session.execute(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.book_id == book_id)
    )
    avg_rating, count = agg.one()
    rating = round_rating(avg_rating) if avg_rating is not None else round_rating(0)
    await session.execute(
        update(Book).where(Book.id == book_id).values(rating=rating, rating_count=int(count or 0))
    )
    return rating, int(count or 0)


async def order_fully_reviewed(session, user_id: str, order_id: int) -> bool:
    total_res = await session.execute(
        select(func.count(func.distinct(OrderItem.book_id))).where(OrderItem.order_id == order_id)
    )
    reviewed_res = await session.execute(
        select(func.count(func.distinct(Review.book_id)))
        .join(OrderItem, (OrderItem.order_id == Review.order_id) & (OrderItem.book_id == Review.book_id))
        .where(Review.order_id == order_id, Review.user_id == user_id)
    )
    total = int(total_res.scalar_one() or 0)
    reviewed = int(reviewed_res.scalar_one() or 0)
    return total > 0 and total == reviewed


async def mark_order_reviewed(session, order_id: int):
    await session.execute(update(Orders).where(Orders.id == order_id).values(is_reviewed=True, updated_at=now()))


async def list_order_reviews(session, user_id: str, order_id: int) -> List[Dict[str, Any]]:
    stmt = (
        select(Review.book_id, Review.rating, Review.created_at)
        .join(Orders, Orders.id == Review.order_id)
        .where(Review.order_id == order_id, Orders.user_id == user_id)
        .order_by(Review.created_at, Review.id)
    )
    res = await session.execute(stmt)
    return [dict(r._mapping) for r in res.all()]
