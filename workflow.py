"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Order workflow: placing orders, manager approval/rejection, kitchen
progress, cancellation and feedback. Every status change is one
conditional UPDATE (``WHERE status = <expected>``) so two operators can
never both act on the same precondition; the change is then announced on
the real-time hub.
"""

import logging
from contextlib import contextmanager
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from flask import current_app, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import (
    DuplicateError,
    InvalidTransitionError,
    NotEligibleError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from models import db, Feedback, KitchenLog, MenuItem, Order, OrderItem, utcnow
from realtime import KITCHEN, MANAGERS, OrderUpdate, order_room, session_room
from statuses import (
    FEEDBACK_ELIGIBLE,
    KITCHEN_SEQUENCE,
    ORDER_FOR_KITCHEN,
    TERMINAL,
    KitchenStatus,
    OrderStatus,
    PaymentMethod,
    can_transition,
    display,
    next_kitchen_status,
    parse_kitchen_status,
)

log = logging.getLogger(__name__)

CENT = Decimal("0.01")
RATING_FIELDS = {
    "foodQuality": "food_quality",
    "serviceSpeed": "service_speed",
    "accuracy": "accuracy",
    "valueForMoney": "value_for_money",
    "overallExperience": "overall_experience",
}


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(lines, tax_rate):
    """``lines`` is an iterable of (unit_price, quantity). Returns (subtotal, tax, total) as Decimals."""
    subtotal = money(sum((money(price) * qty for price, qty in lines), Decimal("0")))
    tax = money(subtotal * Decimal(str(tax_rate)))
    return subtotal, tax, subtotal + tax


def positive_int(value, name):
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a positive integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer")
    return value


def optional_text(value, name):
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(f"{name} must be a string")


def json_body():
    """The request's JSON object, or {} when the body is empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


@contextmanager
def storage(action):
    """Turn driver failures into StorageError without leaking query text."""
    try:
        yield
    except SQLAlchemyError:
        db.session.rollback()
        log.exception("storage failure while trying to %s", action)
        raise StorageError(f"Failed to {action}")


class OrderWorkflow:
    def __init__(self, hub, config=None):
        self.hub = hub
        self._config = config

    @property
    def config(self):
        return self._config if self._config is not None else current_app.config

    # ---------- helpers ----------
    def get_order(self, order_id) -> Order:
        with storage("load order"):
            order = db.session.get(Order, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    def _conditional_update(self, order_id, allowed_from, values, action):
        """UPDATE order SET values WHERE id = order_id AND status IN allowed_from.

        Leaves the change uncommitted so the caller can add rows to the
        same transaction. Raises NotFoundError / InvalidTransitionError
        when no row matched.
        """
        allowed = [OrderStatus(s).value for s in allowed_from]
        values = dict(values, updated_at=utcnow())
        with storage(action):
            count = (
                Order.query.filter(Order.id == order_id, Order.status.in_(allowed))
                .update(values, synchronize_session=False)
            )
        if count:
            return
        db.session.rollback()
        with storage("load order"):
            current = db.session.get(Order, order_id)
        if current is None:
            raise NotFoundError(f"Order {order_id} not found")
        raise InvalidTransitionError(f"Cannot {action}: order {order_id} is {current.status}")

    def _commit(self, action):
        with storage(action):
            db.session.commit()

    def _transition(self, order_id, source, target, action, extra_values=None, log_entry=None):
        target = OrderStatus(target)
        sources = [s for s in source if can_transition(s, target)]
        values = dict(extra_values or {}, status=target.value)
        self._conditional_update(order_id, sources, values, action)
        if log_entry is not None:
            db.session.add(KitchenLog(order_id=order_id, status=log_entry[0], notes=log_entry[1]))
        self._commit(action)
        order = self.get_order(order_id)
        log.info("order %s -> %s", order.order_number, order.status)
        return order

    def _announce(self, order, message, events=(), rooms=None):
        if rooms is None:
            rooms = [order_room(order.id), session_room(order.customer_session_id), KITCHEN, MANAGERS]
        update = OrderUpdate(
            orderId=order.id,
            orderNumber=order.order_number,
            status=order.status,
            kitchenStatus=order.kitchen_status,
            statusDisplay=display(order.status),
            message=message,
            timestamp=utcnow().isoformat(),
        )
        self.hub.publish("order-update", update.to_payload(), rooms)
        for event, payload, event_rooms in events:
            payload.setdefault("timestamp", update.timestamp)
            self.hub.publish(event, payload, event_rooms)

    # ---------- customer ----------
    def place(self, session_id, items, payment_method, table_number=None, instructions=None):
        if not session_id or not str(session_id).strip():
            raise ValidationError("customerSessionId is required")
        if payment_method not in {m.value for m in PaymentMethod}:
            raise ValidationError("Invalid payment method. Must be: cash, card, or online")
        if not isinstance(items, list) or not items:
            raise ValidationError("items must be a non-empty list")
        if table_number is not None:
            table_number = self._check_table(table_number)
        instructions = optional_text(instructions, "specialInstructions")

        lines = []
        for raw in items:
            if not isinstance(raw, dict):
                raise ValidationError("Each item must be an object")
            menu_item_id = raw.get("menuItemId", raw.get("menu_item_id"))
            if menu_item_id is None:
                raise ValidationError("Each item must have menuItemId")
            menu_item_id = positive_int(menu_item_id, "menuItemId")
            note = optional_text(raw.get("specialInstructions"), "specialInstructions")
            quantity = positive_int(raw.get("quantity"), "quantity")
            with storage("load menu item"):
                menu_item = db.session.get(MenuItem, menu_item_id)
            if menu_item is None:
                raise ValidationError(f"Menu item {menu_item_id} not found")
            if not menu_item.is_available:
                raise ValidationError(f'Menu item "{menu_item.name}" is not available')
            lines.append((menu_item, quantity, note))

        subtotal, tax, total = compute_totals(
            ((m.price, q) for m, q, _ in lines), self.config["TAX_RATE"]
        )
        with storage("create order"):
            order = Order(
                created_at=utcnow(),
                customer_session_id=str(session_id).strip(),
                payment_method=payment_method,
                table_number=table_number,
                special_instructions=instructions,
                subtotal=float(subtotal),
                tax=float(tax),
                total=float(total),
                status=OrderStatus.PENDING_APPROVAL.value,
            )
            db.session.add(order)
            db.session.flush()
            order.order_number = f"ORD-{order.created_at:%Y%m%d}-{order.id:04d}"
            for menu_item, quantity, note in lines:
                db.session.add(OrderItem(
                    order_id=order.id,
                    menu_item_id=menu_item.id,
                    name=menu_item.name,
                    price=menu_item.price,
                    quantity=quantity,
                    special_instructions=note,
                ))
            db.session.commit()
        log.info("order %s placed: %d line(s), total %s", order.order_number, len(lines), total)

        summary = {
            "orderId": order.id,
            "orderNumber": order.order_number,
            "total": order.total,
            "tableNumber": order.table_number,
        }
        self._announce(
            order,
            "Order received and awaiting manager approval",
            events=[
                ("new-order", summary, [MANAGERS]),
                ("pending-orders-updated", {"type": "ORDER_CREATED", "orderId": order.id}, [MANAGERS]),
            ],
            rooms=[session_room(order.customer_session_id), MANAGERS],
        )
        return order

    def _check_table(self, table_number):
        lo, hi = self.config["TABLE_NUMBER_MIN"], self.config["TABLE_NUMBER_MAX"]
        if isinstance(table_number, bool):
            raise ValidationError("tableNumber must be an integer")
        try:
            number = int(table_number)
        except (TypeError, ValueError):
            raise ValidationError("tableNumber must be an integer")
        if number != table_number and str(number) != str(table_number).strip():
            raise ValidationError("tableNumber must be an integer")
        if not lo <= number <= hi:
            raise ValidationError(f"Table number must be between {lo} and {hi}")
        return number

    def cancel(self, order_id, reason=None, session_id=None):
        reason = optional_text(reason, "reason") or "Cancelled"
        if session_id is not None:
            order = self.get_order(order_id)
            if order.customer_session_id != str(session_id):
                raise NotFoundError(f"Order {order_id} not found")
        now = utcnow()
        order = self._transition(
            order_id,
            [s for s in OrderStatus if s not in TERMINAL],
            OrderStatus.CANCELLED,
            "cancel order",
            extra_values={"cancellation_reason": reason, "cancelled_at": now},
        )
        message = f"Order {order.order_number} cancelled: {reason}"
        payload = {"orderId": order.id, "reason": reason, "message": message}
        self._announce(order, message, events=[
            ("order-cancelled", payload, [order_room(order.id), KITCHEN, MANAGERS]),
            ("pending-orders-updated", {"type": "ORDER_CANCELLED", "orderId": order.id}, [MANAGERS]),
        ])
        return order

    # ---------- manager ----------
    def approve(self, order_id, expected_minutes=None):
        if expected_minutes is None or expected_minutes == "":
            expected_minutes = self.config["DEFAULT_EXPECTED_MINUTES"]
        minutes = positive_int(expected_minutes, "expectedCompletion")
        now = utcnow()
        order = self._transition(
            order_id,
            [OrderStatus.PENDING_APPROVAL],
            OrderStatus.APPROVED,
            "approve order",
            extra_values={"approved_at": now, "expected_completion": now + timedelta(minutes=minutes)},
            log_entry=(KitchenStatus.PENDING.value, f"Approved; expected in {minutes} minutes"),
        )
        payload = {
            "orderId": order.id,
            "orderNumber": order.order_number,
            "status": order.status,
            "expectedCompletion": order.expected_completion.isoformat(),
        }
        self._announce(order, f"Order {order.order_number} approved", events=[
            ("order-approved", dict(payload, message="Your order has been approved and is being prepared!"), [order_room(order.id)]),
            ("order-approved", dict(payload, message=f"Order {order.order_number} approved by manager"), [KITCHEN, MANAGERS]),
            ("pending-orders-updated", {"type": "ORDER_APPROVED", "orderId": order.id}, [MANAGERS]),
        ])
        return order

    def reject(self, order_id, reason=None):
        reason = optional_text(reason, "reason") or "Rejected by manager"
        order = self._transition(
            order_id,
            [OrderStatus.PENDING_APPROVAL],
            OrderStatus.CANCELLED,
            "reject order",
            extra_values={"cancellation_reason": reason, "cancelled_at": utcnow()},
        )
        message = f"Order {order.order_number} rejected: {reason}"
        self._announce(order, message, events=[
            ("order-rejected", {"orderId": order.id, "reason": reason, "message": message},
             [order_room(order.id), KITCHEN, MANAGERS]),
            ("pending-orders-updated", {"type": "ORDER_REJECTED", "orderId": order.id}, [MANAGERS]),
        ])
        return order

    # ---------- kitchen ----------
    def advance_kitchen(self, order_id, code, expected_minutes=None, notes=None):
        target = parse_kitchen_status(code)
        if target is None:
            raise ValidationError(
                f"Invalid kitchen status {code!r}. Must be one of: "
                + ", ".join(k.value for k in KITCHEN_SEQUENCE)
            )
        notes = optional_text(notes, "notes")
        previous = [k for k in KITCHEN_SEQUENCE if next_kitchen_status(k) is target]
        if not previous:
            raise InvalidTransitionError("Orders enter the kitchen as pending; it is not a target status")
        source = ORDER_FOR_KITCHEN[previous[0]]
        target_status = ORDER_FOR_KITCHEN[target]

        now = utcnow()
        values = {}
        if target is KitchenStatus.READY:
            values["ready_at"] = now
        elif target is KitchenStatus.COMPLETED:
            values["completed_at"] = now
        if expected_minutes not in (None, ""):
            values["expected_completion"] = now + timedelta(minutes=positive_int(expected_minutes, "expected_completion"))

        order = self._transition(
            order_id,
            [source],
            target_status,
            f"move order to {target.value}",
            extra_values=values,
            log_entry=(target.value, notes or f"Status changed to {target.value}"),
        )
        events = []
        if target is KitchenStatus.READY:
            events.append(("order-ready", {
                "orderId": order.id,
                "orderNumber": order.order_number,
                "message": f"Order {order.order_number} is ready!",
            }, [order_room(order.id), session_room(order.customer_session_id)]))
        elif target is KitchenStatus.COMPLETED:
            events.append(("order-completed", {
                "orderId": order.id,
                "orderNumber": order.order_number,
                "message": "Thank you! Your order is complete.",
            }, [order_room(order.id), session_room(order.customer_session_id)]))
        if "expected_completion" in values:
            events.append(self._expected_time_event(order))
        self._announce(order, f"Order {order.order_number} is {display(order.status).lower()}", events=events)
        return order

    def set_expected_time(self, order_id, minutes):
        minutes = positive_int(minutes, "minutes")
        expected = utcnow() + timedelta(minutes=minutes)
        self._conditional_update(
            order_id,
            [OrderStatus.APPROVED, OrderStatus.IN_PROGRESS, OrderStatus.READY],
            {"expected_completion": expected},
            "update expected time",
        )
        db.session.add(KitchenLog(order_id=order_id, status="time_updated",
                                  notes=f"Expected completion set to {minutes} minutes from now"))
        self._commit("update expected time")
        order = self.get_order(order_id)
        event, payload, rooms = self._expected_time_event(order)
        self.hub.publish(event, payload, rooms)
        return order

    def _expected_time_event(self, order):
        return ("expected-time-updated", {
            "orderId": order.id,
            "expectedCompletion": order.expected_completion.isoformat() if order.expected_completion else None,
        }, [order_room(order.id), session_room(order.customer_session_id), KITCHEN])

    # ---------- feedback ----------
    def submit_feedback(self, order_id, ratings, comment=None):
        if order_id in (None, ""):
            raise ValidationError("orderId is required")
        order_id = positive_int(order_id, "orderId")
        comment = optional_text(comment, "comment")
        fallback = ratings.get("rating")
        scores = {}
        for key, column in RATING_FIELDS.items():
            value = ratings.get(key, fallback)
            if value is None:
                raise ValidationError(f"{key} is required")
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
                raise ValidationError(f"{key} must be an integer between 1 and 5")
            scores[column] = value

        order = self.get_order(order_id)
        if OrderStatus(order.status) not in FEEDBACK_ELIGIBLE:
            raise NotEligibleError(
                f"Feedback can be submitted once the order is ready or completed (order is {order.status})"
            )
        with storage("check feedback"):
            exists = Feedback.query.filter_by(order_id=order.id).first() is not None
        if exists:
            raise DuplicateError("Feedback already submitted for this order")

        average = money(Decimal(sum(scores.values())) / len(scores))
        feedback = Feedback(order_id=order.id, average_rating=float(average), comment=comment or None, **scores)
        try:
            db.session.add(feedback)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise DuplicateError("Feedback already submitted for this order")
        except SQLAlchemyError:
            db.session.rollback()
            log.exception("storage failure while saving feedback")
            raise StorageError("Failed to submit feedback")
        log.info("feedback for %s: %.2f", order.order_number, feedback.average_rating)
        self.hub.publish("feedback-submitted", {
            "orderId": order.id,
            "orderNumber": order.order_number,
            "averageRating": feedback.average_rating,
        }, [MANAGERS])
        return feedback


def get_workflow() -> OrderWorkflow:
    return current_app.extensions["workflow"]
