"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
SQLAlchemy models for managers, menu items, tables, orders, order items,
feedback and the kitchen log.
"""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import validates

from errors import ValidationError
from statuses import OrderStatus, PaymentMethod, display, kitchen_status_for

db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class Manager(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120))
    email = db.Column(db.String(120))
    role = db.Column(db.String(20), default="manager")

    def to_dict(self):
        return {"id": self.id, "username": self.username, "name": self.full_name, "email": self.email, "role": self.role}


class MenuItem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, default="")
    price = db.Column(db.Float, nullable=False)
    category = db.Column(db.String(80), default="General")
    image_url = db.Column(db.String(255))
    is_available = db.Column(db.Boolean, default=True)
    spice_level = db.Column(db.String(20))
    rating = db.Column(db.Float, default=0.0)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "price": self.price,
            "category": self.category,
            "image_url": self.image_url,
            "is_available": self.is_available,
            "spice_level": self.spice_level,
            "rating": self.rating,
        }


class Table(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    table_number = db.Column(db.Integer, unique=True, nullable=False)
    capacity = db.Column(db.Integer, default=4)
    is_available = db.Column(db.Boolean, default=True)

    def to_dict(self):
        return {"id": self.id, "table_number": self.table_number, "capacity": self.capacity, "is_available": self.is_available}


class Order(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(40), unique=True)
    customer_session_id = db.Column(db.String(120), nullable=False, index=True)
    payment_method = db.Column(db.String(20), nullable=False)
    table_number = db.Column(db.Integer, nullable=True)
    special_instructions = db.Column(db.Text)
    subtotal = db.Column(db.Float, nullable=False, default=0.0)
    tax = db.Column(db.Float, nullable=False, default=0.0)
    total = db.Column(db.Float, nullable=False, default=0.0)
    status = db.Column(db.String(30), nullable=False, default=OrderStatus.PENDING_APPROVAL.value, index=True)
    cancellation_reason = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)
    approved_at = db.Column(db.DateTime)
    expected_completion = db.Column(db.DateTime)
    ready_at = db.Column(db.DateTime)
    completed_at = db.Column(db.DateTime)
    cancelled_at = db.Column(db.DateTime)
    items = db.relationship("OrderItem", backref="order", cascade="all, delete-orphan", lazy=True)
    feedback = db.relationship("Feedback", backref="order", uselist=False, cascade="all, delete-orphan", lazy=True)

    @validates("payment_method")
    def _check_payment_method(self, key, value):
        if value not in {m.value for m in PaymentMethod}:
            raise ValidationError("Invalid payment method. Must be: cash, card, or online")
        if self.payment_method is not None and value != self.payment_method:
            raise ValidationError("Payment method cannot be changed once set")
        return value

    @property
    def kitchen_status(self):
        ks = kitchen_status_for(self.status)
        return ks.value if ks else None

    def to_dict(self, with_items=True):
        data = {
            "id": self.id,
            "orderNumber": self.order_number,
            "customerSessionId": self.customer_session_id,
            "tableNumber": self.table_number,
            "takeaway": self.table_number is None,
            "paymentMethod": self.payment_method,
            "specialInstructions": self.special_instructions,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "status": self.status,
            "statusDisplay": display(self.status),
            "kitchenStatus": self.kitchen_status,
            "cancellationReason": self.cancellation_reason,
            "createdAt": _iso(self.created_at),
            "approvedAt": _iso(self.approved_at),
            "expectedCompletion": _iso(self.expected_completion),
            "readyAt": _iso(self.ready_at),
            "completedAt": _iso(self.completed_at),
            "cancelledAt": _iso(self.cancelled_at),
        }
        if with_items:
            data["items"] = [i.to_dict() for i in self.items]
        return data


class OrderItem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("order.id"), nullable=False)
    menu_item_id = db.Column(db.Integer, db.ForeignKey("menu_item.id"), nullable=True)
    name = db.Column(db.String(120), nullable=False)
    price = db.Column(db.Float, nullable=False)
    quantity = db.Column(db.Integer, default=1)
    special_instructions = db.Column(db.Text)

    def to_dict(self):
        return {
            "id": self.id,
            "menu_item_id": self.menu_item_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "special_instructions": self.special_instructions,
        }


class Feedback(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("order.id"), unique=True, nullable=False)
    food_quality = db.Column(db.Integer, nullable=False)
    service_speed = db.Column(db.Integer, nullable=False)
    accuracy = db.Column(db.Integer, nullable=False)
    value_for_money = db.Column(db.Integer, nullable=False)
    overall_experience = db.Column(db.Integer, nullable=False)
    average_rating = db.Column(db.Float, nullable=False)
    comment = db.Column(db.Text)
    submitted_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "orderId": self.order_id,
            "foodQuality": self.food_quality,
            "serviceSpeed": self.service_speed,
            "accuracy": self.accuracy,
            "valueForMoney": self.value_for_money,
            "overallExperience": self.overall_experience,
            "averageRating": self.average_rating,
            "comment": self.comment,
            "submittedAt": _iso(self.submitted_at),
        }


class KitchenLog(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("order.id"), nullable=False, index=True)
    status = db.Column(db.String(30), nullable=False)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {"id": self.id, "order_id": self.order_id, "status": self.status, "notes": self.notes, "created_at": _iso(self.created_at)}
