import logging
import os
from datetime import datetime, timezone

from flask import Flask, jsonify
from flask.logging import default_handler
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from pymongo import MongoClient
from werkzeug.exceptions import HTTPException

from dailytask.errors import AppError


def _configure_logging(app):
    # Module loggers under "dailytask" share Flask's handler with app.logger
    package_logger = logging.getLogger("dailytask")
    if default_handler not in package_logger.handlers:
        package_logger.addHandler(default_handler)
    package_logger.setLevel(app.config["LOG_LEVEL"])


def _error_body(app, message, details=None):
    body = {"error": message}
    if details is not None and app.config.get("ENV") != "production":
        body["details"] = details
    return body


def create_app(config_overrides=None, mongo_client_factory=MongoClient, mailer=None):
    app = Flask(__name__)
    app.config.from_object("dailytask.config.Config")
    if config_overrides:
        app.config.update(config_overrides)
    app.json.sort_keys = False

    _configure_logging(app)

    # Core extensions
    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)
    JWTManager(app)

    # Storage connects lazily on first request that needs it
    from dailytask.utils.db import init_app as init_db

    init_db(app, client_factory=mongo_client_factory)

    from dailytask.utils.mailer import SmtpMailer

    app.extensions["mailer"] = mailer or SmtpMailer.from_config(app.config)

    # Register blueprints
    from dailytask.routes.auth_routes import auth_bp
    from dailytask.routes.task_routes import tasks_bp

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    @app.get("/api/health")
    def health():
        return jsonify(status="OK", timestamp=datetime.now(timezone.utc).isoformat()), 200

    @app.errorhandler(AppError)
    def app_error(exc):
        if exc.status_code >= 500:
            app.logger.error("%s: %s", type(exc).__name__, exc.details or exc.message)
        message = exc.message
        if exc.status_code >= 500 and app.config.get("ENV") == "production":
            message = "Server error"
        return jsonify(_error_body(app, message, exc.details)), exc.status_code

    @app.errorhandler(HTTPException)
    def http_error(exc):
        if exc.code == 404:
            return jsonify(error="Not Found"), 404
        return jsonify(error=exc.name), exc.code

    @app.errorhandler(Exception)
    def server_error(exc):
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify(_error_body(app, "Server error", str(exc))), 500

    return app


# Instantiate app for 'flask --app dailytask.app run' and gunicorn 'dailytask.app:app'
app = create_app()


if __name__ == "__main__":
    # Direct run support: python -m dailytask.app
    app.run(
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "1") == "1",
    )
