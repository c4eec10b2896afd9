"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Manager dashboard routes: order approval queue, menu management, tables,
statistics and feedback. Every route requires a manager token.
"""

from datetime import datetime, time

from flask import Blueprint, current_app, g, jsonify, request
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from errors import DuplicateError, NotFoundError, ValidationError
from models import db, Feedback, MenuItem, Order, OrderItem, Table, utcnow
from statuses import OrderStatus
from auth import require_role
from workflow import get_workflow, json_body, money, optional_text, positive_int, storage

bp = Blueprint("manager_api", __name__)


@bp.before_request
@require_role("manager")
def _manager_only():
    return None


# ---------- ORDERS ----------
@bp.get("/orders/pending")
def pending_orders():
    with storage("load pending orders"):
        orders = (
            Order.query.filter_by(status=OrderStatus.PENDING_APPROVAL.value)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
    return jsonify({"success": True, "count": len(orders), "orders": [o.to_dict() for o in orders]})


@bp.get("/orders/all")
def all_orders():
    query = Order.query
    status = request.args.get("status")
    if status:
        try:
            query = query.filter_by(status=OrderStatus(status).value)
        except ValueError:
            raise ValidationError(f"Unknown status {status!r}")
    with storage("load orders"):
        orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return jsonify({"success": True, "count": len(orders), "orders": [o.to_dict() for o in orders]})


@bp.route("/orders/<int:order_id>/approve", methods=["PUT", "PATCH"])
def approve_order(order_id):
    data = json_body()
    current_app.logger.info("approve order %s by %s", order_id, g.principal.get("username"))
    order = get_workflow().approve(order_id, data.get("expectedCompletion"))
    return jsonify({"success": True, "message": "Order approved successfully", "orderId": order.id, "data": order.to_dict()})


@bp.route("/orders/<int:order_id>/reject", methods=["PUT", "PATCH"])
def reject_order(order_id):
    data = json_body()
    current_app.logger.info("reject order %s by %s", order_id, g.principal.get("username"))
    order = get_workflow().reject(order_id, data.get("reason"))
    return jsonify({"success": True, "message": "Order rejected successfully", "orderId": order.id, "data": order.to_dict()})


@bp.put("/orders/<int:order_id>/cancel")
def cancel_order(order_id):
    data = json_body()
    order = get_workflow().cancel(order_id, data.get("reason") or "Cancelled by manager")
    return jsonify({"success": True, "message": "Order cancelled", "orderId": order.id, "data": order.to_dict()})


# ---------- MENU ----------
def _menu_fields(data, partial=False):
    fields = {}
    if "name" in data or not partial:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("name is required")
        fields["name"] = name
    if "price" in data or not partial:
        try:
            price = float(data.get("price"))
        except (TypeError, ValueError):
            raise ValidationError("price must be a number")
        if price <= 0:
            raise ValidationError("price must be greater than 0")
        fields["price"] = float(money(price))
    for key in ("description", "category", "image_url", "spice_level"):
        if key in data:
            fields[key] = optional_text(data[key], key)
    if "is_available" in data:
        fields["is_available"] = bool(data["is_available"])
    if "rating" in data:
        try:
            fields["rating"] = float(data["rating"])
        except (TypeError, ValueError):
            raise ValidationError("rating must be a number")
    return fields


def _menu_item_or_404(item_id):
    item = db.session.get(MenuItem, item_id)
    if item is None:
        raise NotFoundError(f"Menu item {item_id} not found")
    return item


@bp.get("/menu")
def list_menu():
    with storage("load menu"):
        items = MenuItem.query.order_by(MenuItem.category, MenuItem.name).all()
    return jsonify({"success": True, "items": [m.to_dict() for m in items]})


@bp.post("/menu")
def create_menu():
    fields = _menu_fields(json_body())
    fields.setdefault("category", "General")
    m = MenuItem(**fields)
    with storage("create menu item"):
        db.session.add(m)
        db.session.commit()
    current_app.logger.info("menu item %s created", m.id)
    return jsonify({"success": True, "item": m.to_dict()}), 201


@bp.put("/menu/<int:item_id>")
def update_menu(item_id):
    m = _menu_item_or_404(item_id)
    for key, value in _menu_fields(json_body(), partial=True).items():
        setattr(m, key, value)
    with storage("update menu item"):
        db.session.commit()
    return jsonify({"success": True, "item": m.to_dict()})


@bp.delete("/menu/<int:item_id>")
def delete_menu(item_id):
    m = _menu_item_or_404(item_id)
    with storage("delete menu item"):
        # order lines keep their name/price snapshot
        OrderItem.query.filter_by(menu_item_id=item_id).update({"menu_item_id": None}, synchronize_session=False)
        db.session.delete(m)
        db.session.commit()
    current_app.logger.info("menu item %s deleted", item_id)
    return jsonify({"success": True, "id": item_id})


# ---------- TABLES ----------
@bp.get("/tables")
def list_tables():
    with storage("load tables"):
        tables = Table.query.order_by(Table.table_number).all()
    return jsonify({"success": True, "count": len(tables), "tables": [t.to_dict() for t in tables]})


@bp.post("/tables")
def create_table():
    data = json_body()
    number = positive_int(data.get("table_number"), "table_number")
    lo, hi = current_app.config["TABLE_NUMBER_MIN"], current_app.config["TABLE_NUMBER_MAX"]
    if not lo <= number <= hi:
        raise ValidationError(f"Table number must be between {lo} and {hi}")
    capacity = positive_int(data.get("capacity", 4), "capacity")
    t = Table(table_number=number, capacity=capacity, is_available=bool(data.get("is_available", True)))
    with storage("create table"):
        try:
            db.session.add(t)
            db.session.commit()
        except IntegrityError:
            # unique table_number
            db.session.rollback()
            raise DuplicateError(f"Table {number} already exists")
    return jsonify({"success": True, "table": t.to_dict()}), 201


@bp.put("/tables/<int:table_number>/availability")
def set_table_availability(table_number):
    data = json_body()
    if "is_available" not in data:
        raise ValidationError("is_available is required")
    t = Table.query.filter_by(table_number=table_number).first()
    if t is None:
        raise NotFoundError(f"Table {table_number} not found")
    t.is_available = bool(data["is_available"])
    with storage("update table"):
        db.session.commit()
    return jsonify({"success": True, "table": t.to_dict(), "message": "Table availability updated"})


# ---------- STATISTICS ----------
@bp.get("/statistics")
def statistics():
    live = Order.status != OrderStatus.CANCELLED.value
    today_start = datetime.combine(utcnow().date(), time.min)
    with storage("load statistics"):
        total_orders, revenue = db.session.query(func.count(Order.id), func.coalesce(func.sum(Order.total), 0.0)).filter(live).one()
        today_orders, today_revenue = (
            db.session.query(func.count(Order.id), func.coalesce(func.sum(Order.total), 0.0))
            .filter(live, Order.created_at >= today_start)
            .one()
        )
        pending = Order.query.filter_by(status=OrderStatus.PENDING_APPROVAL.value).count()
        avg_rating = db.session.query(func.avg(Feedback.average_rating)).scalar()
        by_status = dict(db.session.query(Order.status, func.count(Order.id)).group_by(Order.status).all())
        top = (
            db.session.query(OrderItem.name, func.sum(OrderItem.quantity).label("count"))
            .join(Order, Order.id == OrderItem.order_id)
            .filter(live)
            .group_by(OrderItem.name)
            .order_by(func.sum(OrderItem.quantity).desc())
            .limit(5)
            .all()
        )
    return jsonify({
        "totalOrders": total_orders,
        "todayOrders": today_orders,
        "revenue": float(money(revenue)),
        "todayRevenue": float(money(today_revenue)),
        "averageOrderValue": float(money(revenue / total_orders)) if total_orders else 0.0,
        "averageRating": float(money(avg_rating)) if avg_rating is not None else 0.0,
        "pendingOrders": pending,
        "ordersByStatus": {s.value: by_status.get(s.value, 0) for s in OrderStatus},
        "topItems": [{"name": name, "count": int(count)} for name, count in top],
    })


# ---------- FEEDBACK ----------
@bp.get("/feedback")
def list_feedback():
    cfg = current_app.config
    page = positive_int(request.args.get("page", "1"), "page")
    limit = min(positive_int(request.args.get("limit", str(cfg["FEEDBACK_PAGE_SIZE"])), "limit"), cfg["FEEDBACK_PAGE_SIZE_MAX"])
    query = Feedback.query
    if request.args.get("minRating"):
        try:
            query = query.filter(Feedback.average_rating >= float(request.args["minRating"]))
        except ValueError:
            raise ValidationError("minRating must be a number")
    with storage("load feedback"):
        result = query.order_by(Feedback.submitted_at.desc(), Feedback.id.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )
        rows = []
        for f in result.items:
            row = f.to_dict()
            row.update({"orderNumber": f.order.order_number, "orderTotal": f.order.total, "paymentMethod": f.order.payment_method})
            rows.append(row)
    return jsonify({
        "success": True,
        "data": rows,
        "pagination": {
            "page": page,
            "limit": limit,
            "totalCount": result.total,
            "totalPages": result.pages,
            "hasNext": result.has_next,
            "hasPrev": result.has_prev,
        },
    })


@bp.get("/feedback/ratings")
def feedback_ratings():
    columns = {
        "foodQuality": Feedback.food_quality,
        "serviceSpeed": Feedback.service_speed,
        "accuracy": Feedback.accuracy,
        "valueForMoney": Feedback.value_for_money,
        "overallExperience": Feedback.overall_experience,
        "average": Feedback.average_rating,
    }
    with storage("load ratings"):
        row = db.session.query(func.count(Feedback.id), *[func.avg(c) for c in columns.values()]).one()
    count, averages = row[0], row[1:]
    return jsonify({
        "success": True,
        "totalFeedback": count,
        "ratings": {k: (float(money(v)) if v is not None else 0.0) for k, v in zip(columns, averages)},
    })
