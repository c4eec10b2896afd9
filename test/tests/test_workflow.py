"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong , David White Jr
Date: October 2025

Description:
Direct tests of the order workflow: totals, the status machine, feedback
eligibility and the approve/reject race.
"""

import threading
from decimal import Decimal

import pytest

from errors import DuplicateError, InvalidTransitionError, NotEligibleError, NotFoundError, ValidationError
from models import KitchenLog
from statuses import OrderStatus, kitchen_status_for, next_kitchen_status, parse_kitchen_status
from workflow import compute_totals

RATINGS = {k: 4 for k in ("foodQuality", "serviceSpeed", "accuracy", "valueForMoney", "overallExperience")}


def _place(workflow, qty=1, table=3):
    return workflow.place("sess", [{"menuItemId": 1, "quantity": qty}], "card", table_number=table)


def _to_ready(workflow, order_id):
    workflow.approve(order_id, 10)
    workflow.advance_kitchen(order_id, "preparing")
    return workflow.advance_kitchen(order_id, "ready")


@pytest.mark.parametrize("lines,rate,expected", [
    ([(12.99, 2)], 0.08, ("25.98", "2.08", "28.06")),
    ([(0.99, 3), (4.5, 1)], 0.08, ("7.47", "0.60", "8.07")),
    ([(10, 1)], 0.1, ("10.00", "1.00", "11.00")),
])
def test_compute_totals(lines, rate, expected):
    assert compute_totals(lines, rate) == tuple(Decimal(v) for v in expected)


def test_kitchen_status_is_derived():
    assert kitchen_status_for("pending_approval") is None
    assert kitchen_status_for("approved").value == "pending"
    assert kitchen_status_for("in_progress").value == "preparing"
    assert kitchen_status_for("cancelled") is None
    assert parse_kitchen_status("received").value == "pending"
    assert parse_kitchen_status("nope") is None
    assert next_kitchen_status("ready").value == "completed"
    assert next_kitchen_status("completed") is None


def test_place_uses_configured_tax_rate(app_factory):
    app = app_factory(TAX_RATE=0.1)
    with app.app_context():
        order = _place(app.extensions["workflow"], qty=2)
        assert (order.subtotal, order.tax, order.total) == (25.98, 2.6, 28.58)


def test_place_uses_configured_table_range(app_factory):
    app = app_factory(TABLE_NUMBER_MAX=30)
    with app.app_context():
        assert _place(app.extensions["workflow"], table=30).table_number == 30
        with pytest.raises(ValidationError):
            _place(app.extensions["workflow"], table=31)


def test_approve_then_reject_fails(workflow):
    order = _place(workflow)
    workflow.approve(order.id, 20)
    with pytest.raises(InvalidTransitionError):
        workflow.reject(order.id, "late")
    with pytest.raises(InvalidTransitionError):
        workflow.approve(order.id, 20)


def test_reject_then_approve_fails(workflow):
    order = _place(workflow)
    rejected = workflow.reject(order.id, None)
    assert rejected.status == "cancelled"
    assert rejected.cancellation_reason == "Rejected by manager"
    with pytest.raises(InvalidTransitionError):
        workflow.approve(order.id)
    with pytest.raises(InvalidTransitionError):
        workflow.reject(order.id, "again")


def test_unknown_order(workflow):
    with pytest.raises(NotFoundError):
        workflow.approve(12345)
    with pytest.raises(NotFoundError):
        workflow.advance_kitchen(12345, "preparing")


def test_approve_default_expected_minutes(workflow):
    order = workflow.approve(_place(workflow).id)
    assert (order.expected_completion - order.approved_at).total_seconds() == 25 * 60


@pytest.mark.parametrize("path", [["ready"], ["completed"], ["preparing", "preparing"], ["preparing", "ready", "preparing"], ["pending"]])
def test_kitchen_rejects_skips_and_backward_moves(workflow, path):
    order = _place(workflow)
    workflow.approve(order.id, 10)
    *ok, bad = path
    for step in ok:
        workflow.advance_kitchen(order.id, step)
    before = workflow.get_order(order.id).status
    with pytest.raises(InvalidTransitionError):
        workflow.advance_kitchen(order.id, bad)
    assert workflow.get_order(order.id).status == before


def test_kitchen_cannot_start_unapproved_order(workflow):
    order = _place(workflow)
    with pytest.raises(InvalidTransitionError):
        workflow.advance_kitchen(order.id, "preparing")


def test_kitchen_full_sequence_stamps_times(workflow):
    order = _place(workflow)
    ready = _to_ready(workflow, order.id)
    assert ready.status == "ready" and ready.kitchen_status == "ready"
    assert ready.ready_at is not None
    done = workflow.advance_kitchen(order.id, "completed", notes="picked up")
    assert done.status == "completed"
    assert done.completed_at is not None
    logs = KitchenLog.query.filter_by(order_id=order.id).count()
    assert logs == 4


def test_terminal_states_have_no_exits(workflow):
    order = _place(workflow)
    _to_ready(workflow, order.id)
    workflow.advance_kitchen(order.id, "completed")
    with pytest.raises(InvalidTransitionError):
        workflow.cancel(order.id, "too late")


def test_cancel_from_any_open_state(workflow):
    for steps in ([], ["approve"], ["approve", "preparing"], ["approve", "preparing", "ready"]):
        order = _place(workflow)
        for step in steps:
            if step == "approve":
                workflow.approve(order.id, 5)
            else:
                workflow.advance_kitchen(order.id, step)
        assert workflow.cancel(order.id, "kitchen closed").status == "cancelled"


@pytest.mark.parametrize("steps", [[], ["approve"], ["approve", "preparing"]])
def test_feedback_not_eligible_before_ready(workflow, steps):
    order = _place(workflow)
    for step in steps:
        if step == "approve":
            workflow.approve(order.id, 5)
        else:
            workflow.advance_kitchen(order.id, step)
    with pytest.raises(NotEligibleError):
        workflow.submit_feedback(order.id, RATINGS)


def test_feedback_once_per_order(workflow):
    order = _place(workflow)
    _to_ready(workflow, order.id)
    fb = workflow.submit_feedback(order.id, dict(RATINGS, foodQuality=5, serviceSpeed=3), comment="ok")
    assert fb.average_rating == 4.0
    with pytest.raises(DuplicateError):
        workflow.submit_feedback(order.id, RATINGS)


def test_feedback_on_cancelled_order_not_eligible(workflow):
    order = _place(workflow)
    workflow.reject(order.id, "no")
    with pytest.raises(NotEligibleError):
        workflow.submit_feedback(order.id, RATINGS)


@pytest.mark.parametrize("bad", [0, 6, "4", True, None])
def test_feedback_rating_bounds(workflow, bad):
    order = _place(workflow)
    _to_ready(workflow, order.id)
    with pytest.raises(ValidationError):
        workflow.submit_feedback(order.id, dict(RATINGS, accuracy=bad))


def test_payment_method_is_immutable(workflow):
    order = _place(workflow)
    with pytest.raises(ValidationError):
        order.payment_method = "cash"


def test_stale_operators_only_one_wins(workflow):
    order = _place(workflow)
    # both operators saw the order awaiting approval
    seen_a = workflow.get_order(order.id).status
    seen_b = workflow.get_order(order.id).status
    assert seen_a == seen_b == OrderStatus.PENDING_APPROVAL.value

    workflow.approve(order.id, 15)
    with pytest.raises(InvalidTransitionError):
        workflow.reject(order.id, "duplicate click")
    assert workflow.get_order(order.id).status == "approved"


def test_concurrent_approve_and_reject(app_factory, tmp_path):
    app = app_factory(SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'race.db'}")
    wf = app.extensions["workflow"]
    with app.app_context():
        order_id = _place(wf).id

    barrier = threading.Barrier(2)
    outcomes = {}

    def run(name, action):
        with app.app_context():
            barrier.wait()
            try:
                action()
                outcomes[name] = "ok"
            except InvalidTransitionError:
                outcomes[name] = "invalid"
            except Exception as exc:  # surfaced by the assertion below
                outcomes[name] = repr(exc)

    threads = [
        threading.Thread(target=run, args=("approve", lambda: wf.approve(order_id, 10))),
        threading.Thread(target=run, args=("reject", lambda: wf.reject(order_id, "race"))),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert sorted(outcomes.values()) == ["invalid", "ok"], outcomes
    with app.app_context():
        final = wf.get_order(order_id).status
    assert final == ("approved" if outcomes["approve"] == "ok" else "cancelled")
