"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Customer-facing routes: menu browsing, placing and tracking orders,
cancelling an order and leaving feedback.
"""

from flask import Blueprint, jsonify, request
from sqlalchemy import or_

from errors import NotFoundError, ValidationError
from models import db, MenuItem, Order
from workflow import get_workflow, json_body, storage

bp = Blueprint("customer_api", __name__)


# ----- MENU -----
@bp.get("/menu")
def list_menu():
    query = MenuItem.query
    if request.args.get("available", "true").lower() != "all":
        query = query.filter(MenuItem.is_available.is_(True))
    if request.args.get("category"):
        query = query.filter(MenuItem.category == request.args["category"])
    if request.args.get("search"):
        term = f"%{request.args['search']}%"
        query = query.filter(or_(MenuItem.name.ilike(term), MenuItem.description.ilike(term)))
    if request.args.get("id"):
        try:
            ids = [int(x) for x in request.args["id"].split(",") if x.strip()]
        except ValueError:
            raise ValidationError("id must be a comma separated list of integers")
        query = query.filter(MenuItem.id.in_(ids))
    with storage("load menu"):
        items = query.order_by(MenuItem.category, MenuItem.name).all()
    return jsonify([m.to_dict() for m in items])


@bp.get("/menu/categories")
def list_categories():
    with storage("load categories"):
        rows = db.session.query(MenuItem.category).distinct().order_by(MenuItem.category).all()
    return jsonify([r[0] for r in rows])


@bp.get("/menu/<int:item_id>")
def get_menu_item(item_id):
    item = db.session.get(MenuItem, item_id)
    if item is None:
        raise NotFoundError(f"Menu item {item_id} not found")
    return jsonify(item.to_dict())


# ----- ORDERS -----
@bp.post("/orders")
def create_order():
    data = json_body()
    order = get_workflow().place(
        session_id=data.get("customerSessionId"),
        items=data.get("items"),
        payment_method=data.get("paymentMethod"),
        table_number=data.get("tableNumber"),
        instructions=data.get("specialInstructions"),
    )
    return jsonify({
        "success": True,
        "data": order.to_dict(),
        "message": "Order created successfully and awaiting manager approval",
    }), 201


@bp.get("/orders/<int:order_id>")
def get_order(order_id):
    order = get_workflow().get_order(order_id)
    return jsonify({"success": True, "data": order.to_dict()})


@bp.get("/orders/session/<session_id>")
def session_orders(session_id):
    with storage("load session orders"):
        orders = (
            Order.query.filter_by(customer_session_id=session_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
    return jsonify({"success": True, "data": [o.to_dict() for o in orders]})


@bp.patch("/orders/<int:order_id>/cancel")
def cancel_order(order_id):
    data = json_body()
    session_id = data.get("customerSessionId")
    if not session_id:
        raise ValidationError("customerSessionId is required")
    order = get_workflow().cancel(order_id, data.get("reason") or "Cancelled by customer", session_id=session_id)
    return jsonify({"success": True, "data": order.to_dict(), "message": "Order cancelled"})


# ----- FEEDBACK -----
@bp.post("/feedback")
def submit_feedback():
    data = json_body()
    feedback = get_workflow().submit_feedback(data.get("orderId"), data, comment=data.get("comment"))
    return jsonify({"success": True, "data": feedback.to_dict(), "message": "Thank you for your feedback!"}), 201
