from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from nextchapter.cache.cache_get_n_set import bump_catalog_version
from nextchapter.common.custom_exceptions import (
    BookstoreError, DuplicateReview, NotDeliverable, NotFound, StorageError, ValidationFailed,
)
from nextchapter.common.logging_setup import get_logger
from nextchapter.reviews.repository import (
    get_reviewable_item, insert_review, mark_order_reviewed, order_fully_reviewed, recompute_book_rating,
    review_exists,
)
from nextchapter.schema.full_schema import DeliveryStatus

logger = get_logger("nextchapter.reviews")

MIN_RATING = 1
MAX_RATING = 5


def validate_review_input(order_id: Optional[int], book_id: Optional[int], rating: Optional[int]):
    if not order_id or not book_id or rating is None or not (MIN_RATING <= rating <= MAX_RATING):
        raise ValidationFailed(details={"rating": f"must be an integer between {MIN_RATING} and {MAX_RATING}"})


async def submit_review(session, user_id: str, order_id: Optional[int], book_id: Optional[int],
                        rating: Optional[int]) -> Dict[str, Any]:

    validate_review_input(order_id, book_id, rating)

    try:
        item = await get_reviewable_item(session, user_id, order_id, book_id)
        if item is None:
            raise NotFound("Order item not found or unauthorized")
        if item["delivery_status"] != DeliveryStatus.DELIVERED.value:
            raise NotDeliverable()
        if await review_exists(session, user_id, order_id, book_id):
            raise DuplicateReview()

        await insert_review(session, user_id, order_id, book_id, rating)
        new_rating, rating_count = await recompute_book_rating(session, book_id)

        order_reviewed = await order_fully_reviewed(session, user_id, order_id)
        if order_reviewed and not item["is_reviewed"]:
            await mark_order_reviewed(session, order_id)

        await session.commit()

    except BookstoreError:
        await session.rollback()
        raise
    except IntegrityError:
        # lost a race against an identical submission
        await session.rollback()
        raise DuplicateReview()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("review.submit.failed", extra={"user_id": user_id, "order_id": order_id}, exc_info=e)
        raise StorageError(details=str(e))

    await bump_catalog_version()
    logger.info("review.submit.success", extra={
        "user_id": user_id, "order_id": order_id, "book_id": book_id,
        "book_rating": str(new_rating), "rating_count": rating_count, "order_reviewed": order_reviewed,
    })
    return {"message": "Review submitted successfully", "orderReviewed": order_reviewed}
