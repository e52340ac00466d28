from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Dashboard account role used for authorization."""

    OWNER = "owner"
    MANAGER = "manager"


class RegistrationStatus(str, Enum):
    """Approval workflow state of a dashboard account."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class OrderStatus(str, Enum):
    """Order lifecycle values, in display order. Any value may be set directly."""

    RECEIVED = "Received"
    IN_PROGRESS = "In Progress"
    READY = "Ready"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


COMPLETED_ORDER_STATUSES = frozenset({OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value})


class StaffRole(str, Enum):
    WASHER = "washer"
    IRONER = "ironer"
    MANAGER = "manager"
    DELIVERY = "delivery"
