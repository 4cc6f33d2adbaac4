from typing import Any, Dict, List, Tuple
from sqlalchemy import delete, desc, insert, select, update
from sqlalchemy.exc import IntegrityError
from nextchapter.common.custom_exceptions import NotFound
from nextchapter.common.utils import now
from nextchapter.schema.full_schema import Book, CartLine

_CART_COLUMNS = (
    CartLine.book_id, CartLine.title, CartLine.authors, CartLine.thumbnail,
    CartLine.original_price, CartLine.discount, CartLine.quantity,
)


def _line_dict(row) -> Dict[str, Any]:
    return {
        "book_id": int(row.book_id),
        "title": row.title,
        "authors": list(row.authors or []),
        "thumbnail": row.thumbnail,
        "original_price": row.original_price,
        "discount": int(row.discount),
        "quantity": int(row.quantity),
    }


async def get_cart_lines(session, user_id: str) -> List[Dict[str, Any]]:
    stmt = (
        select(*_CART_COLUMNS)
        .where(CartLine.user_id == user_id)
        .order_by(desc(CartLine.created_at), desc(CartLine.id))
    )
    res = await session.execute(stmt)
    return [_line_dict(r) for r in res.all()]


async def get_book_snapshot(session, book_id: int) -> Dict[str, Any]:
    stmt = select(Book.id, Book.title, Book.authors, Book.thumbnail, Book.price, Book.discount).where(Book.id == book_id)
    res = await session.execute(stmt)
    row = res.one_or_none()
    if not row:
        raise NotFound("Book not found")
    return {
        "book_id": row.id,
        "title": row.title,
        "authors": list(row.authors or []),
        "thumbnail": row.thumbnail,
        "original_price": row.price,
        "discount": int(row.discount or 0),
    }


async def _increment_line(session, user_id: str, book_id: int, quantity: int):
    upd = (
        update(CartLine)
        .where(CartLine.user_id == user_id, CartLine.book_id == book_id)
        .values(quantity=CartLine.quantity + quantity)
        .returning(*_CART_COLUMNS)
    )
    res = await session.execute(upd)
    return res.one_or_none()


async def add_item_to_cart(session, user_id: str, book_id: int, quantity: int) -> Tuple[Dict[str, Any], bool]:
    """Insert a new cart line or bump the quantity of the existing one.

    The snapshot (title , price , discount ...) is only taken on first insert ,
    repeat adds keep the deal the user originally saw.
    """
    row = await _increment_line(session, user_id, book_id, quantity)
    if row:
        return _line_dict(row), False

    snapshot = await get_book_snapshot(session, book_id)
    ins = (
        insert(CartLine)
        .values(user_id=user_id, quantity=quantity, created_at=now(), **snapshot)
        .returning(*_CART_COLUMNS)
    )
    try:
        res = await session.execute(ins)
        return _line_dict(res.one()), True
    except IntegrityError:
        # concurrent add inserted the line first , nothing else was written in this transaction
        await session.rollback()
        row = await _increment_line(session, user_id, book_id, quantity)
        if not row:
            raise
        return _line_dict(row), False


async def update_cart_quantity(session, user_id: str, book_id: int, quantity: int) -> Dict[str, Any]:
    upd = (
        update(CartLine)
        .where(CartLine.user_id == user_id, CartLine.book_id == book_id)
        .values(quantity=quantity)
        .returning(*_CART_COLUMNS)
    )
    res = await session.execute(upd)
    row = res.one_or_none()
    if not row:
        raise NotFound("Item not found in cart")
    return _line_dict(row)


async def remove_cart_line(session, user_id: str, book_id: int) -> Dict[str, Any]:
    stmt = (
        delete(CartLine)
        .where(CartLine.user_id == user_id, CartLine.book_id == book_id)
        .returning(*_CART_COLUMNS)
    )
    res = await session.execute(stmt)
    row = res.one_or_none()
    if not row:
        raise NotFound("Item not found in cart")
    return _line_dict(row)
