import logging
import os

import click
from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash

from extensions import db, migrate
from config import DevConfig, ProdConfig
from logging_setup import setup_logger
from clinic.errors import ClinicError, InternalError
from clinic.services.sessions import load_identity


logger = logging.getLogger("clinic.app")


def _default_config():
    if os.getenv("FLASK_ENV") == "production":
        return ProdConfig
    return DevConfig


def register_error_handlers(app: Flask):
    @app.errorhandler(ClinicError)
    def handle_clinic_error(e: ClinicError):
        if e.status_code >= 500:
            db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(e: SQLAlchemyError):
        # storage internals stay in the log, never in the response
        db.session.rollback()
        err = InternalError()
        logger.exception(
            f"[storage] {e.__class__.__name__}",
            extra={"method": request.method, "path": request.path, "status": err.status_code},
        )
        return jsonify(err.to_dict()), err.status_code


def register_commands(app: Flask):
    @app.cli.command("hash-password")
    @click.password_option()
    def hash_password_command(password):
        """Print a hash for ADMIN_PASSWORD_HASH."""
        method = app.config.get("PASSWORD_HASH_METHOD", "scrypt")
        click.echo(generate_password_hash(password, method=method))

    @app.cli.command("init-db")
    def init_db_command():
        """Create tables for a fresh database (prefer `flask db upgrade` in production)."""
        db.create_all()
        click.echo("Database tables created.")


def create_app(config_object=None) -> Flask:
    """Initialize Flask app with DB + configuration."""
    config_object = config_object or _default_config()
    app = Flask(__name__)
    app.config.from_object(config_object)

    setup_logger(
        log_dir=app.config.get("LOG_DIR", "logs"),
        to_file=app.config.get("LOG_TO_FILE", True),
    )

    db.init_app(app)
    migrate.init_app(app, db)

    app.before_request(load_identity)
    register_error_handlers(app)
    register_commands(app)

    # Import models so SQLAlchemy registers tables.
    with app.app_context():
        from clinic.models import Patient, Appointment, Prescription  # noqa: F401
        # Ensure tables exist (useful for SQLite/dev). For production, prefer migrations.
        db.create_all()

    # Register HTTP blueprints
    from clinic.routes.api import build_api_blueprint
    from clinic.routes.portal import portal_bp
    from clinic.routes.dashboard import dashboard_bp

    app.register_blueprint(build_api_blueprint())
    app.register_blueprint(portal_bp)
    app.register_blueprint(dashboard_bp)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    logger.info(f"[create_app] started with {getattr(config_object, '__name__', config_object)}")
    return app
