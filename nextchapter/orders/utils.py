from nextchapter.common.custom_exceptions import InvalidTransition, ValidationFailed
from nextchapter.schema.full_schema import DeliveryStatus

DELIVERY_SEQUENCE = (
    DeliveryStatus.ORDER_PLACED,
    DeliveryStatus.PROCESSING,
    DeliveryStatus.SHIPPED,
    DeliveryStatus.OUT_FOR_DELIVERY,
    DeliveryStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED})


def parse_delivery_status(value: str) -> DeliveryStatus:
    try:
        return DeliveryStatus(value)
    except ValueError:
        raise ValidationFailed("Invalid delivery status",
                               details={"allowed": [s.value for s in DeliveryStatus]})


def check_delivery_transition(current: str, target: DeliveryStatus) -> bool:
    """Raise InvalidTransition when moving current -> target is not allowed.

    Returns False for a same-status update so callers can treat it as a plain rewrite.
    """
    current = DeliveryStatus(current)
    if current == target:
        return False
    if current in TERMINAL_STATUSES:
        raise InvalidTransition(details={"from": current.value, "to": target.value})
    if target == DeliveryStatus.CANCELLED:
        return True
    if DELIVERY_SEQUENCE.index(target) < DELIVERY_SEQUENCE.index(current):
        raise InvalidTransition(details={"from": current.value, "to": target.value})
    return True
