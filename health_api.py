"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Health, readiness and liveness probes.
"""

import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import db, utcnow
from realtime import KITCHEN, MANAGERS, get_hub

bp = Blueprint("health_api", __name__)

STARTED = time.monotonic()


def _database_ok():
    try:
        db.session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("database health check failed")
        return False


def _uptime():
    return round(time.monotonic() - STARTED, 2)


@bp.get("/health")
def health():
    ok = _database_ok()
    return jsonify({
        "success": ok,
        "status": "ok" if ok else "unhealthy",
        "timestamp": utcnow().isoformat(),
        "services": {"server": "running", "database": "connected" if ok else "disconnected"},
        "uptime": _uptime(),
    }), 200 if ok else 503


@bp.get("/health/detailed")
def health_detailed():
    ok = _database_ok()
    hub = get_hub()
    checks = [
        {"service": "Database Connection", "status": "healthy" if ok else "failed"},
        {"service": "Server Uptime", "status": "healthy", "details": f"{_uptime()} seconds"},
        {"service": "Real-time Hub", "status": "healthy",
         "details": f"{hub.members(MANAGERS)} manager(s), {hub.members(KITCHEN)} kitchen client(s)"},
        {"service": "Environment", "status": "configured", "details": "testing" if current_app.testing else "live"},
    ]
    failed = [c for c in checks if c["status"] == "failed"]
    return jsonify({
        "success": True,
        "status": "unhealthy" if failed else "healthy",
        "timestamp": utcnow().isoformat(),
        "checks": checks,
        "summary": {"total_checks": len(checks), "failed": len(failed)},
    })


@bp.get("/health/readiness")
def readiness():
    if not _database_ok():
        return jsonify({"success": False, "status": "not ready", "message": "database not connected"}), 503
    return jsonify({"success": True, "status": "ready", "timestamp": utcnow().isoformat()})


@bp.get("/health/liveness")
def liveness():
    return jsonify({"success": True, "status": "alive", "uptime": _uptime()})
