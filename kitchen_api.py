"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Kitchen display routes: the active board, status progression, expected
completion updates, per-order timeline and today's figures.
"""

from datetime import datetime, time

from flask import Blueprint, jsonify
from sqlalchemy import func

from auth import require_role
from models import db, KitchenLog, Order, OrderItem, utcnow
from statuses import ORDER_FOR_KITCHEN, KitchenStatus, OrderStatus
from workflow import get_workflow, json_body, storage

bp = Blueprint("kitchen_api", __name__)

BOARD_COLUMNS = [KitchenStatus.PENDING, KitchenStatus.PREPARING, KitchenStatus.READY]


@bp.before_request
@require_role("kitchen")
def _kitchen_only():
    return None


@bp.get("/orders/active")
def active_orders():
    statuses = [ORDER_FOR_KITCHEN[k].value for k in BOARD_COLUMNS]
    with storage("load kitchen orders"):
        orders = (
            Order.query.filter(Order.status.in_(statuses))
            .order_by(Order.approved_at.asc(), Order.id.asc())
            .all()
        )
    rows = [o.to_dict() for o in orders]
    grouped = {k.value: [r for r in rows if r["kitchenStatus"] == k.value] for k in BOARD_COLUMNS}
    return jsonify({"success": True, "orders": rows, "groupedOrders": grouped, "total": len(rows)})


@bp.put("/orders/<int:order_id>/status")
def update_status(order_id):
    data = json_body()
    code = data.get("status_code", data.get("status"))
    order = get_workflow().advance_kitchen(
        order_id,
        code,
        expected_minutes=data.get("expected_completion"),
        notes=data.get("notes"),
    )
    return jsonify({"success": True, "message": f"Order status updated to {order.kitchen_status}", "order": order.to_dict()})


@bp.put("/orders/<int:order_id>/expected-time")
def update_expected_time(order_id):
    data = json_body()
    order = get_workflow().set_expected_time(order_id, data.get("minutes"))
    return jsonify({"success": True, "message": "Expected time updated", "order": order.to_dict()})


@bp.get("/orders/<int:order_id>/timeline")
def timeline(order_id):
    get_workflow().get_order(order_id)
    with storage("load timeline"):
        entries = KitchenLog.query.filter_by(order_id=order_id).order_by(KitchenLog.created_at.desc(), KitchenLog.id.desc()).all()
    return jsonify({"success": True, "timeline": [e.to_dict() for e in entries]})


@bp.get("/statistics/today")
def today_statistics():
    today_start = datetime.combine(utcnow().date(), time.min)
    kitchen_statuses = [o.value for o in ORDER_FOR_KITCHEN.values()]
    with storage("load kitchen statistics"):
        orders = Order.query.filter(Order.created_at >= today_start, Order.status.in_(kitchen_statuses)).all()
        top = (
            db.session.query(OrderItem.name, func.sum(OrderItem.quantity))
            .join(Order, Order.id == OrderItem.order_id)
            .filter(Order.created_at >= today_start, Order.status.in_(kitchen_statuses))
            .group_by(OrderItem.name)
            .order_by(func.sum(OrderItem.quantity).desc())
            .limit(5)
            .all()
        )
    prep_minutes = [
        (o.ready_at - o.approved_at).total_seconds() / 60
        for o in orders
        if o.ready_at and o.approved_at
    ]
    return jsonify({
        "success": True,
        "statistics": {
            "daily": {
                "total_orders": len(orders),
                "completed": sum(1 for o in orders if o.status == OrderStatus.COMPLETED.value),
                "ready": sum(1 for o in orders if o.status == OrderStatus.READY.value),
                "avg_prep_time": round(sum(prep_minutes) / len(prep_minutes), 1) if prep_minutes else None,
            },
            "topItems": [{"name": name, "quantity": int(qty)} for name, qty in top],
        },
    })
