
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError
from .config import Config
from .errors import ValidationError, WriteError, PermissionDenied, OrderNotFound

db = SQLAlchemy()


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return "OK", 200

    db.init_app(app)

    # Ensure tables exist
    if app.config["STORAGE_BACKEND"] == "remote":
        with app.app_context():
            from . import models  # noqa
            try:
                db.create_all()
            except SQLAlchemyError:
                app.logger.warning("Could not create tables, store reads will degrade until the database is reachable", exc_info=True)

    from .storage import EXTENSION_KEY, make_store
    app.extensions[EXTENSION_KEY] = make_store(app.config)

    register_error_handlers(app)

    # Blueprints
    from .api.routes import api_bp
    from .ui.routes import ui_bp
    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(ui_bp, url_prefix="/ui")

    @app.route("/")
    def index():
        from flask import redirect, url_for
        return redirect(url_for("ui.state"))

    return app


def register_error_handlers(app):

    @app.errorhandler(ValidationError)
    def validation_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(PermissionDenied)
    def permission_denied(e):
        return jsonify({"error": str(e)}), 403

    @app.errorhandler(OrderNotFound)
    def order_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(WriteError)
    def write_error(e):
        app.logger.error("Write failed: %s", e)
        return jsonify({"error": str(e)}), 503
