from uuid import uuid4

from flask import Flask, request, g, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from .models.config import config
from .models import db
from .logger import logger
from .routes.library import library_blueprint
from .routes.health import health_blueprint


cors = CORS()


def create_app(overrides: dict | None = None):
    logger.info("Creating app")
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = config.database_uri
    if overrides:
        app.config.update(overrides)
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {"pool_pre_ping": True})

    # Set up request ID tracking
    @app.before_request
    def before_request():
        g.request_id = request.headers.get("X-Request-Id", str(uuid4()))

    # Add request ID to response headers
    @app.after_request
    def after_request(response):
        if hasattr(g, 'request_id'):
            response.headers.set("X-Request-Id", g.request_id)
        return response

    db.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": config.app_url}},
                  methods=["GET", "PUT", "DELETE", "OPTIONS"])
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)  # type: ignore

    @app.errorhandler(404)
    def handle_404(e):
        logger.debug("404 Not Found", extra={
            "method": request.method,
            "url": request.url,
            "request_id": getattr(g, 'request_id', None)
        })
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code or 500
        logger.error("Unhandled exception occurred", exc_info=True, extra={
            "exception_type": type(e).__name__,
            "exception_message": str(e),
            "endpoint": request.endpoint,
            "method": request.method,
            "url": request.url,
            "request_id": getattr(g, 'request_id', None)
        })
        return jsonify({"error": str(e)}), 500

    app.register_blueprint(library_blueprint)
    app.register_blueprint(health_blueprint)

    with app.app_context():
        db.create_all()
    return app
