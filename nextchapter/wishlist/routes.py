from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nextchapter.auth.dependencies import current_user_id
from nextchapter.common.utils import json_ok
from nextchapter.db.dependencies import get_session
from nextchapter.wishlist.models import WishlistItemInput
from nextchapter.wishlist.repository import add_to_wishlist, in_wishlist, list_wishlist, remove_from_wishlist

wishlist_router=APIRouter()


@wishlist_router.get("")
async def get_wishlist(user_id: str = Depends(current_user_id), session: AsyncSession = Depends(get_session)):
    return json_ok(await list_wishlist(session, user_id))


@wishlist_router.post("/add")
async def add_wishlist_item(payload: WishlistItemInput, user_id: str = Depends(current_user_id),
                            session: AsyncSession = Depends(get_session)):
    entry_id = await add_to_wishlist(session, user_id, payload.book_id)
    await session.commit()
    return json_ok({"success": True, "message": "Book added to wishlist", "id": entry_id},
                   status_code=status.HTTP_201_CREATED)


@wishlist_router.delete("/remove")
async def remove_wishlist_item(payload: WishlistItemInput, user_id: str = Depends(current_user_id),
                               session: AsyncSession = Depends(get_session)):
    await remove_from_wishlist(session, user_id, payload.book_id)
    await session.commit()
    return json_ok({"message": "Removed from wishlist", "book_id": payload.book_id})


@wishlist_router.get("/exists")
async def wishlist_contains(book_id: int = Query(..., gt=0), user_id: str = Depends(current_user_id),
                            session: AsyncSession = Depends(get_session)):
    return json_ok({"exists": await in_wishlist(session, user_id, book_id)})
