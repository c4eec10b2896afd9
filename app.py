"""
Project: Smart Restaurant Management System (SRMS)
School: University of Maryland Global Campus (UMGC)
Dept: Software Development and Security – Capstone Project
Authors: Beby Alexis, Kevin Wong, David White Jr
Date: September–October 2025

Description:
Main application entry point. Initializes Flask, database, and Socket.IO.
Registers blueprints and error handlers, and launches the app.
"""

import logging

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config, TestingConfig
from errors import SRMSError, StorageError
from models import db
from realtime import RealtimeHub
from workflow import OrderWorkflow

import auth
import customer_api
import health_api
import kitchen_api
import manager_api


def create_app(testing: bool = False, config=None):
    app = Flask(__name__)
    app.config.from_object(TestingConfig if testing else Config)
    if config:
        app.config.update(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)

    hub = RealtimeHub()
    hub.init_app(app)
    app.extensions["workflow"] = OrderWorkflow(hub)

    if app.config.get("AUTH_DEV_FALLBACK"):
        app.logger.warning("AUTH_DEV_FALLBACK is on: requests without a token run as %s",
                           app.config["DEV_PRINCIPAL_NAME"])

    app.register_blueprint(customer_api.bp, url_prefix="/api")
    app.register_blueprint(auth.bp, url_prefix="/api/auth")
    app.register_blueprint(manager_api.bp, url_prefix="/api/manager")
    app.register_blueprint(kitchen_api.bp, url_prefix="/api/kitchen")
    app.register_blueprint(health_api.bp)

    # --------- error handlers ---------
    @app.errorhandler(SRMSError)
    def handle_srms_error(e):
        if e.status_code >= 500:
            app.logger.error("%s: %s", e.error, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e):
        db.session.rollback()
        app.logger.exception("unhandled database error")
        return jsonify(StorageError().to_dict()), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"success": False, "error": e.name.lower().replace(" ", "_"), "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        app.logger.exception("unhandled error")
        return jsonify({"success": False, "error": "server_error", "message": "Internal server error"}), 500

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    app = create_app()
    # Runs with eventlet server automatically
    app.extensions["realtime"].socketio.run(app, host=app.config["HOST"], port=app.config["PORT"])
