from typing import Any, Dict, Optional
from sqlalchemy.exc import SQLAlchemyError
from nextchapter.common.custom_exceptions import BookstoreError, NotFound, StorageError
from nextchapter.common.logging_setup import get_logger
from nextchapter.common.utils import now
from nextchapter.orders.repository import get_order_for_update, order_to_dict, write_delivery_status
from nextchapter.orders.utils import check_delivery_transition, parse_delivery_status

logger = get_logger("nextchapter.orders")


async def update_delivery_status(session, order_id: int, new_status: str,
                                 tracking_number: Optional[str] = None,
                                 user_id: Optional[str] = None) -> Dict[str, Any]:
    """Move an order along the delivery sequence.

    user_id scopes the lookup to the caller's own orders , admin callers pass None.
    """
    target = parse_delivery_status(new_status)
    try:
        order = await get_order_for_update(session, order_id, user_id=user_id)
        if order is None:
            raise NotFound("Order not found")

        previous = order.delivery_status
        if check_delivery_transition(previous, target):
            await write_delivery_status(session, order, target, tracking_number=tracking_number)
        else:
            # same status , only the tracking number (if any) is rewritten
            if tracking_number is not None:
                order.tracking_number = tracking_number
            order.updated_at = now()
            await session.flush()

        await session.commit()
    except BookstoreError:
        await session.rollback()
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("order.status_update.failed", extra={"order_id": order_id}, exc_info=e)
        raise StorageError(details=str(e))

    logger.info("order.status_update.success", extra={
        "order_id": order_id, "from_status": previous, "to_status": target.value, "by_owner": user_id is not None,
    })
    return order_to_dict(order)
