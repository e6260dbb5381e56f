"""
Role and rider enumerations.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        USER: Default role for every signed-in customer
        ADMIN: Manages riders and user roles
        RIDER: Delivery agent, granted when a rider application is activated
    """
    USER = "user"
    ADMIN = "admin"
    RIDER = "rider"


class RiderStatus(str, enum.Enum):
    """
    Rider application status.

    Status flow:
        PENDING → ACTIVE | REJECTED
    """
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class RiderWorkStatus(str, enum.Enum):
    AVAILABLE = "available"
    IN_DELIVERY = "in_delivery"
