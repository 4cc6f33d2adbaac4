from typing import Any, Dict, List
from sqlalchemy import delete, desc, exists, insert, select
from sqlalchemy.exc import IntegrityError
from nextchapter.books.repository import book_to_dict
from nextchapter.common.custom_exceptions import Conflict, NotFound
from nextchapter.common.utils import now
from nextchapter.schema.full_schema import Book, WishlistEntry


async def list_wishlist(session, user_id: str) -> List[Dict[str, Any]]:
    stmt = (
        select(Book)
        .join(WishlistEntry, WishlistEntry.book_id == Book.id)
        .where(WishlistEntry.user_id == user_id)
        .order_by(desc(WishlistEntry.created_at), desc(WishlistEntry.id))
    )
    res = await session.execute(stmt)
    return [book_to_dict(b) for b in res.scalars().all()]


async def in_wishlist(session, user_id: str, book_id: int) -> bool:
    stmt = select(exists().where(WishlistEntry.user_id == user_id, WishlistEntry.book_id == book_id))
    res = await session.execute(stmt)
    return bool(res.scalar())


async def add_to_wishlist(session, user_id: str, book_id: int) -> int:
    book_exists = await session.execute(select(Book.id).where(Book.id == book_id))
    if book_exists.scalar_one_or_none() is None:
        raise NotFound("Book not found")

    if await in_wishlist(session, user_id, book_id):
        raise Conflict("Book already in wishlist")
    stmt = (
        insert(WishlistEntry)
        .values(user_id=user_id, book_id=book_id, created_at=now())
        .returning(WishlistEntry.id)
    )
    try:
        res = await session.execute(stmt)
    except IntegrityError:
        await session.rollback()
        raise Conflict("Book already in wishlist")
    return res.scalar_one()


async def remove_from_wishlist(session, user_id: str, book_id: int):
    stmt = (
        delete(WishlistEntry)
        .where(WishlistEntry.user_id == user_id, WishlistEntry.book_id == book_id)
        .returning(WishlistEntry.id)
    )
    res = await session.execute(stmt)
    if res.scalar_one_or_none() is None:
        raise NotFound("Book not in wishlist")
