"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Socket.IO hub. Clients join rooms (managers, kitchen, order_<id>,
session_<id>) and the order workflow publishes status changes to them.
Delivery is best effort: clients must refetch from the API after any event.
"""

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Optional

from flask import current_app, request
from flask_socketio import SocketIO, join_room, leave_room

log = logging.getLogger(__name__)

MANAGERS = "managers"
KITCHEN = "kitchen"


def order_room(order_id) -> str:
    return f"order_{order_id}"


def session_room(session_id) -> str:
    return f"session_{session_id}"


@dataclass
class OrderUpdate:
    orderId: int
    orderNumber: Optional[str]
    status: str
    kitchenStatus: Optional[str]
    statusDisplay: str
    message: str
    timestamp: str
    extra: dict = field(default_factory=dict)

    def to_payload(self):
        data = asdict(self)
        extra = data.pop("extra")
        data.update(extra)
        return data


class RealtimeHub:
    """Owns the SocketIO server and the room bookkeeping for one app."""

    def __init__(self, socketio: Optional[SocketIO] = None):
        self.socketio = socketio or SocketIO()
        self._members = defaultdict(set)  # room -> sids

    def init_app(self, app):
        self.socketio.init_app(
            app,
            async_mode=app.config.get("SOCKETIO_ASYNC_MODE"),
            cors_allowed_origins=app.config.get("CORS_ALLOWED_ORIGINS", "*"),
        )
        app.extensions["realtime"] = self
        self._register_handlers()

    # --------- rooms ---------
    def join(self, sid, room):
        join_room(room, sid=sid)
        self._members[room].add(sid)
        log.info("%s joined %s (%d in room)", sid, room, len(self._members[room]))

    def leave(self, sid, room):
        leave_room(room, sid=sid)
        self._members[room].discard(sid)
        log.info("%s left %s", sid, room)

    def drop(self, sid):
        for room in list(self._members):
            self._members[room].discard(sid)
            if not self._members[room]:
                del self._members[room]

    def members(self, room):
        return len(self._members.get(room, ()))

    # --------- delivery ---------
    def publish(self, event, payload, rooms):
        """Emit ``event`` once per room. Never raises."""
        for room in dict.fromkeys(rooms):
            try:
                self.socketio.emit(event, payload, to=room)
            except Exception:
                log.warning("broadcast of %s to %s failed", event, room, exc_info=True)

    def _register_handlers(self):
        sio = self.socketio

        @sio.on("connect")
        def _connect(auth=None):
            log.debug("client connected: %s", request.sid)

        @sio.on("disconnect")
        def _disconnect(*args):
            log.debug("client disconnected: %s", request.sid)
            self.drop(request.sid)

        @sio.on("join-manager")
        def _join_manager(*args):
            self.join(request.sid, MANAGERS)

        @sio.on("leave-manager")
        def _leave_manager(*args):
            self.leave(request.sid, MANAGERS)

        @sio.on("join-kitchen")
        def _join_kitchen(*args):
            self.join(request.sid, KITCHEN)

        @sio.on("leave-kitchen")
        def _leave_kitchen(*args):
            self.leave(request.sid, KITCHEN)

        @sio.on("join-customer")
        def _join_customer(data=None):
            data = data or {}
            if data.get("orderId"):
                self.join(request.sid, order_room(data["orderId"]))
            if data.get("sessionId"):
                self.join(request.sid, session_room(data["sessionId"]))

        # legacy single-argument variants
        @sio.on("join-order")
        def _join_order(order_id=None):
            if order_id:
                self.join(request.sid, order_room(order_id))

        @sio.on("join-session")
        def _join_session(session_id=None):
            if session_id:
                self.join(request.sid, session_room(session_id))


def get_hub() -> RealtimeHub:
    return current_app.extensions["realtime"]
