"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Order lifecycle vocabulary. The order status is the only stored state; the
kitchen status is derived from it so the two can never disagree.
"""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class KitchenStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    ONLINE = "online"


TERMINAL = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

# Every allowed edge. Anything not listed is an invalid transition.
TRANSITIONS = {
    OrderStatus.PENDING_APPROVAL: {OrderStatus.APPROVED, OrderStatus.CANCELLED},
    OrderStatus.APPROVED: {OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

KITCHEN_FOR_ORDER = {
    OrderStatus.APPROVED: KitchenStatus.PENDING,
    OrderStatus.IN_PROGRESS: KitchenStatus.PREPARING,
    OrderStatus.READY: KitchenStatus.READY,
    OrderStatus.COMPLETED: KitchenStatus.COMPLETED,
}
ORDER_FOR_KITCHEN = {k: o for o, k in KITCHEN_FOR_ORDER.items()}

KITCHEN_SEQUENCE = [
    KitchenStatus.PENDING,
    KitchenStatus.PREPARING,
    KitchenStatus.READY,
    KitchenStatus.COMPLETED,
]

# Codes the kitchen board has historically sent
KITCHEN_ALIASES = {"received": KitchenStatus.PENDING}

STATUS_DISPLAY = {
    OrderStatus.PENDING_APPROVAL: "Awaiting approval",
    OrderStatus.APPROVED: "Approved",
    OrderStatus.IN_PROGRESS: "Being prepared",
    OrderStatus.READY: "Ready for pickup",
    OrderStatus.COMPLETED: "Completed",
    OrderStatus.CANCELLED: "Cancelled",
}

FEEDBACK_ELIGIBLE = {OrderStatus.READY, OrderStatus.COMPLETED}


def can_transition(current, target):
    return OrderStatus(target) in TRANSITIONS[OrderStatus(current)]


def kitchen_status_for(order_status):
    """Kitchen-side view of an order status, or None before approval / after cancellation."""
    return KITCHEN_FOR_ORDER.get(OrderStatus(order_status))


def parse_kitchen_status(code):
    if code is None:
        return None
    code = str(code).strip().lower()
    if code in KITCHEN_ALIASES:
        return KITCHEN_ALIASES[code]
    try:
        return KitchenStatus(code)
    except ValueError:
        return None


def next_kitchen_status(current):
    """The only kitchen status reachable from ``current``, or None at the end of the line."""
    idx = KITCHEN_SEQUENCE.index(KitchenStatus(current))
    if idx + 1 < len(KITCHEN_SEQUENCE):
        return KITCHEN_SEQUENCE[idx + 1]
    return None


def display(order_status):
    return STATUS_DISPLAY.get(OrderStatus(order_status), str(order_status))
