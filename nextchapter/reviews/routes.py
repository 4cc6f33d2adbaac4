from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nextchapter.auth.dependencies import current_user_id
from nextchapter.common.custom_exceptions import ValidationFailed
from nextchapter.common.utils import json_ok
from nextchapter.db.dependencies import get_session
from nextchapter.reviews.models import ReviewInput
from nextchapter.reviews.repository import list_order_reviews
from nextchapter.reviews.services import submit_review

reviews_router=APIRouter()


@reviews_router.post("")
async def post_review(payload: ReviewInput, user_id: str = Depends(current_user_id),
                      session: AsyncSession = Depends(get_session)):
    resp = await submit_review(session, user_id, payload.order_id, payload.book_id, payload.rating)
    return json_ok(resp)


@reviews_router.get("")
async def get_reviews(order_id: Optional[int] = Query(None, alias="orderId"),
                      user_id: str = Depends(current_user_id),
                      session: AsyncSession = Depends(get_session)):
    if not order_id:
        raise ValidationFailed("Order ID is required")
    return json_ok(await list_order_reviews(session, user_id, order_id))
