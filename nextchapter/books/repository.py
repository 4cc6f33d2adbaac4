from typing import Any, Dict, List
from sqlalchemy import String, cast, desc, or_, select
from nextchapter.common.custom_exceptions import NotFound
from nextchapter.schema.full_schema import Book


def book_to_dict(book: Book) -> Dict[str, Any]:
    return {
        "id": book.id,
        "title": book.title,
        "authors": list(book.authors or []),
        "description": book.description,
        "thumbnail": book.thumbnail,
        "isbn": book.isbn,
        "price": book.price,
        "discount": book.discount,
        "stock": book.stock,
        "category": book.category,
        "total_sold": book.total_sold,
        "rating": book.rating,
        "rating_count": book.rating_count,
        "pages": book.pages,
        "created_at": book.created_at,
    }


def _like(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def _fetch_books(session, stmt) -> List[Dict[str, Any]]:
    res = await session.execute(stmt)
    return [book_to_dict(b) for b in res.scalars().all()]


async def search_books(session, query: str, limit: int):
    pattern = _like(query.strip())
    stmt = (
        select(Book)
        .where(or_(
            Book.title.ilike(pattern, escape="\\"),
            cast(Book.authors, String).ilike(pattern, escape="\\"),
            Book.category.ilike(pattern, escape="\\"),
        ))
        .order_by(desc(Book.rating_count), Book.id)
        .limit(limit)
    )
    return await _fetch_books(session, stmt)


async def best_sellers(session, limit: int):
    stmt = select(Book).order_by(desc(Book.total_sold), Book.id).limit(limit)
    return await _fetch_books(session, stmt)


async def top_rated(session, limit: int):
    stmt = select(Book).order_by(desc(Book.rating), desc(Book.rating_count), Book.id).limit(limit)
    return await _fetch_books(session, stmt)


async def new_arrivals(session, limit: int):
    stmt = select(Book).order_by(desc(Book.created_at), desc(Book.id)).limit(limit)
    return await _fetch_books(session, stmt)


async def books_by_category(session, category: str, limit: int):
    stmt = (
        select(Book)
        .where(Book.category.ilike(_like(category.strip()), escape="\\"))
        .order_by(desc(Book.total_sold), Book.id)
        .limit(limit)
    )
    return await _fetch_books(session, stmt)


async def get_book(session, book_id: int) -> Book:
    book = await session.get(Book, book_id)
    if book is None:
        raise NotFound("Book not found")
    return book
