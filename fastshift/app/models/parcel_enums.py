"""
Parcel status enumerations and the delivery transition table.
"""

import enum


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class DeliveryStatus(str, enum.Enum):
    """
    Parcel delivery status enumeration.

    Status flow:
        NOT_COLLECTED → RIDER_ASSIGNED → IN_TRANSIT → DELIVERED
                                                    → SERVICE_CENTER_DELIVERED
    A parcel never moves backwards.
    """
    NOT_COLLECTED = "not_collected"
    RIDER_ASSIGNED = "rider_assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    SERVICE_CENTER_DELIVERED = "service_center_delivered"


class CashoutStatus(str, enum.Enum):
    NOT_CASHED_OUT = "not_cashed_out"
    CASHED_OUT = "cashed_out"


DELIVERY_TRANSITIONS = {
    DeliveryStatus.NOT_COLLECTED: {DeliveryStatus.RIDER_ASSIGNED},
    DeliveryStatus.RIDER_ASSIGNED: {DeliveryStatus.IN_TRANSIT},
    DeliveryStatus.IN_TRANSIT: {DeliveryStatus.DELIVERED, DeliveryStatus.SERVICE_CENTER_DELIVERED},
    DeliveryStatus.DELIVERED: set(),
    DeliveryStatus.SERVICE_CENTER_DELIVERED: set(),
}

ACTIVE_TASK_STATUSES = (DeliveryStatus.RIDER_ASSIGNED, DeliveryStatus.IN_TRANSIT)
COMPLETED_STATUSES = (DeliveryStatus.DELIVERED, DeliveryStatus.SERVICE_CENTER_DELIVERED)


def can_transition(current: DeliveryStatus, target: DeliveryStatus) -> bool:
    """Return True if ``target`` is a legal next state from ``current``."""
    return target in DELIVERY_TRANSITIONS.get(current, set())
