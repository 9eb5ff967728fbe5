from flask import Flask, jsonify
from flask_migrate import Migrate
from .extensions import db, rq

migrate = Migrate()

def create_app(config_overrides=None):
    """Application factory shared by the API server and the worker."""
    app = Flask(__name__)
    app.config.from_object('config.Config')
    if config_overrides:
        app.config.update(config_overrides)

    db.init_app(app)
    migrate.init_app(app, db, directory='alembic')
    rq.init_app(app)

    # register models on the metadata
    from . import models  # noqa: F401

    from .api import bp as api_bp
    app.register_blueprint(api_bp, url_prefix="/api")

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"message": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"message": "Method not allowed"}), 405

    return app
