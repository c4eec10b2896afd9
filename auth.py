"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Manager / kitchen authentication. Login checks the stored password hash and
returns a signed, time-limited token; protected routes are wrapped with
``require_role``. When AUTH_DEV_FALLBACK is enabled a request that carries
no token runs as the named development principal instead of being refused.
"""

from functools import wraps

from flask import Blueprint, current_app, g, jsonify, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash

from errors import AuthError, ValidationError
from models import Manager
from workflow import json_body

bp = Blueprint("auth", __name__)

TOKEN_SALT = "srms-manager-token"


def _serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(manager):
    return _serializer().dumps({"id": manager.id, "username": manager.username, "role": manager.role})


def verify_token(token):
    try:
        return _serializer().loads(token, max_age=current_app.config["TOKEN_MAX_AGE"])
    except SignatureExpired:
        raise AuthError("Token has expired")
    except BadSignature:
        raise AuthError("Invalid token")


def _bearer_token():
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[7:].strip() or None
    return request.headers.get("X-Kitchen-Token") or None


def dev_principal():
    return {"id": None, "username": current_app.config["DEV_PRINCIPAL_NAME"], "role": "manager", "dev": True}


def current_principal():
    token = _bearer_token()
    if token is None:
        if current_app.config.get("AUTH_DEV_FALLBACK"):
            current_app.logger.warning("AUTH_DEV_FALLBACK: unauthenticated %s %s runs as %s",
                                       request.method, request.path, current_app.config["DEV_PRINCIPAL_NAME"])
            return dev_principal()
        raise AuthError("Missing authorization header")
    return verify_token(token)


def require_role(*roles):
    """Managers may use every protected route; other roles only those that name them."""
    allowed = set(roles) | {"manager"}

    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            principal = current_principal()
            if principal.get("role") not in allowed:
                raise AuthError("Not authorized for this resource")
            g.principal = principal
            return fn(*args, **kwargs)
        return wrapper
    return deco


# ---------- routes ----------
@bp.post("/manager/login")
def login():
    data = json_body()
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    if not username or not password:
        raise ValidationError("Username and password are required")
    manager = Manager.query.filter_by(username=username).first()
    if not manager or not check_password_hash(manager.password_hash, password):
        current_app.logger.info("failed login for %s", username)
        raise AuthError("Invalid credentials")
    return jsonify({"success": True, "message": "Login successful", "token": issue_token(manager), "manager": manager.to_dict()})


@bp.get("/verify")
@require_role("kitchen")
def verify():
    return jsonify({"success": True, "principal": g.principal})


@bp.post("/logout")
@require_role("kitchen")
def logout():
    # Tokens are stateless; the client discards its copy.
    return jsonify({"success": True, "message": "Logged out"})
