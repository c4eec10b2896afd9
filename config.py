"""
Project: Smart Restaurant Management System (SRMS)
School: UMGC – Software Development and Security
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: October 2025

Description:
Application configuration. Values come from the environment (optionally a
.env file) with development defaults.
"""

import os

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "sqlite:///" + os.path.join(BASE_DIR, "srms.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Ordering policy
    TAX_RATE = float(os.environ.get("TAX_RATE", "0.08"))
    TABLE_NUMBER_MIN = int(os.environ.get("TABLE_NUMBER_MIN", "1"))
    TABLE_NUMBER_MAX = int(os.environ.get("TABLE_NUMBER_MAX", "22"))
    DEFAULT_EXPECTED_MINUTES = int(os.environ.get("DEFAULT_EXPECTED_MINUTES", "25"))

    # Auth
    TOKEN_MAX_AGE = int(os.environ.get("TOKEN_MAX_AGE", str(24 * 60 * 60)))
    # Off unless explicitly enabled: a request without a token runs as DEV_PRINCIPAL_NAME.
    AUTH_DEV_FALLBACK = _env_bool("AUTH_DEV_FALLBACK", False)
    DEV_PRINCIPAL_NAME = os.environ.get("DEV_PRINCIPAL_NAME", "dev-manager")

    # Real-time
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "eventlet")
    CORS_ALLOWED_ORIGINS = os.environ.get("CORS_ALLOWED_ORIGINS", "*")

    FEEDBACK_PAGE_SIZE = 20
    FEEDBACK_PAGE_SIZE_MAX = 100

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "5013"))


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SECRET_KEY = "testing-secret"
    SOCKETIO_ASYNC_MODE = "threading"
    AUTH_DEV_FALLBACK = False
    LOG_LEVEL = "DEBUG"
