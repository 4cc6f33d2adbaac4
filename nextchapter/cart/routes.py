from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from nextchapter.auth.dependencies import current_user_id
from nextchapter.cart.models import CartItemInput, CartItemRemove, CartItemUpdate
from nextchapter.cart.repository import add_item_to_cart, get_cart_lines, remove_cart_line, update_cart_quantity
from nextchapter.common.logging_setup import get_logger
from nextchapter.common.utils import json_ok
from nextchapter.db.dependencies import get_session

logger = get_logger("nextchapter.cart")

carts_router=APIRouter()


@carts_router.get("")
async def get_cart(user_id: str = Depends(current_user_id), session: AsyncSession = Depends(get_session)):
    lines = await get_cart_lines(session, user_id)
    return json_ok(lines)


@carts_router.post("/add")
async def add_to_cart(payload: CartItemInput, user_id: str = Depends(current_user_id),
                      session: AsyncSession = Depends(get_session)):

    line, created = await add_item_to_cart(session, user_id, payload.book_id, payload.quantity)
    await session.commit()

    logger.info("cart.add", extra={"user_id": user_id, "book_id": payload.book_id, "new_line": created})
    return json_ok(line, status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


@carts_router.put("/update")
async def update_cart_item(payload: CartItemUpdate, user_id: str = Depends(current_user_id),
                           session: AsyncSession = Depends(get_session)):
    line = await update_cart_quantity(session, user_id, payload.book_id, payload.quantity)
    await session.commit()
    return json_ok(line)


@carts_router.delete("/remove")
async def remove_cart_item(payload: CartItemRemove, user_id: str = Depends(current_user_id),
                           session: AsyncSession = Depends(get_session)):
    line = await remove_cart_line(session, user_id, payload.book_id)
    await session.commit()
    return json_ok(line)
