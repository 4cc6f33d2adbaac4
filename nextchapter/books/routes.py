from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession
from nextchapter.books.repository import best_sellers, book_to_dict, books_by_category, get_book, new_arrivals, search_books, top_rated
from nextchapter.cache.cache_get_n_set import cache_get_or_set_book_listings
from nextchapter.cache.utils import make_params_key
from nextchapter.common.utils import json_ok
from nextchapter.config.settings import config_settings
from nextchapter.db.dependencies import get_session

books_router=APIRouter()

BOOK_LIST_TTL = config_settings.BOOK_LIST_TTL


async def _cached_listing(namespace: str, loader, **params):
    async def load():
        return jsonable_encoder(await loader())
    return await cache_get_or_set_book_listings(namespace, make_params_key(**params), BOOK_LIST_TTL, load)


# no query -> newest books , matches what the storefront shows on an empty search box
@books_router.get("")
async def list_books(
    q: Optional[str] = Query(None, max_length=200),
    limit: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_session)):

    if q and q.strip():
        books = await _cached_listing("books_search", lambda: search_books(session, q, limit), q=q.strip().lower(), limit=limit)
    else:
        books = await _cached_listing("books_new", lambda: new_arrivals(session, limit), limit=limit)
    return json_ok(books)


@books_router.get("/best-sellers")
async def get_best_sellers(limit: int = Query(20, ge=1, le=100), session: AsyncSession = Depends(get_session)):
    books = await _cached_listing("books_best", lambda: best_sellers(session, limit), limit=limit)
    return json_ok(books)


@books_router.get("/top-rated")
async def get_top_rated(limit: int = Query(20, ge=1, le=100), session: AsyncSession = Depends(get_session)):
    books = await _cached_listing("books_top", lambda: top_rated(session, limit), limit=limit)
    return json_ok(books)


@books_router.get("/new-arrivals")
async def get_new_arrivals(limit: int = Query(20, ge=1, le=100), session: AsyncSession = Depends(get_session)):
    books = await _cached_listing("books_new", lambda: new_arrivals(session, limit), limit=limit)
    return json_ok(books)


@books_router.get("/category/{category}")
async def get_books_by_category(category: str, limit: int = Query(20, ge=1, le=100),
                                session: AsyncSession = Depends(get_session)):
    books = await _cached_listing("books_category", lambda: books_by_category(session, category, limit),
                                  category=category.strip().lower(), limit=limit)
    return json_ok(books)


@books_router.get("/{book_id}")
async def get_book_details(book_id: int, session: AsyncSession = Depends(get_session)):
    book = await get_book(session, book_id)
    return json_ok(book_to_dict(book))
