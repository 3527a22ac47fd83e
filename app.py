from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config
from routes import bird_bp, pages_bp

from models import db
from utils.log import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(test_config=None):
    app = Flask(__name__, static_folder=None)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    configure_logging(use_json=app.config["LOG_JSON"], level=app.config["LOG_LEVEL"])

    # Only trust X-Forwarded-For when deployed behind known proxies
    if app.config.get("TRUSTED_PROXIES"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=app.config["TRUSTED_PROXIES"])

    # Register routes
    app.register_blueprint(bird_bp)
    app.register_blueprint(pages_bp)

    # JSON collections and image directory
    collections = db.init_app(app)

    @app.after_request
    def add_api_cache_headers(resp):
        if request.path.startswith("/api"):
            resp.headers["Cache-Control"] = app.config["API_CACHE_CONTROL"]
        return resp

    @app.after_request
    def add_cors_headers(resp):
        origin = request.headers.get("Origin")
        if origin and origin.rstrip("/") in {o.rstrip("/") for o in app.config["CORS_ORIGINS"]}:
            resp.headers["Access-Control-Allow-Origin"] = origin
            resp.headers["Access-Control-Allow-Methods"] = app.config["CORS_METHODS"]
            resp.headers["Access-Control-Allow-Headers"] = app.config["CORS_HEADERS"]
            resp.headers["Access-Control-Allow-Credentials"] = "true"
            resp.headers.add("Vary", "Origin")
        return resp

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["Referrer-Policy"] = "no-referrer"
        return resp

    register_error_handlers(app)
    register_cli(app)

    count, _ = collections.birds.count()
    logger.info("app_started", birds=count, data_dir=app.config["DATA_DIR"])
    return app


def register_error_handlers(app):
    @app.errorhandler(RequestEntityTooLarge)
    def too_large(exc):
        limit = app.config.get("MAX_CONTENT_LENGTH") or 0
        return jsonify(error=f"Upload cannot exceed {limit // (1024 * 1024)}MB"), 413

    @app.errorhandler(HTTPException)
    def http_error(exc):
        if not request.path.startswith("/api"):
            return exc
        return jsonify(error=exc.name), exc.code

    @app.errorhandler(Exception)
    def unhandled(exc):
        logger.exception("unhandled_error", method=request.method, path=request.path)
        return jsonify(error="Internal server error"), 500

#-------------------------
import click


def register_cli(app):
    @app.cli.command("operations")
    @click.option("--limit", default=20, show_default=True, help="How many entries to show.")
    @click.option("--ip", default=None, help="Only show entries from this IP.")
    def operations(limit, ip):
        """Show recent entries of the operation log, newest first."""
        rows = db.operation_log.recent(limit=limit, ip=ip)
        if not rows:
            click.echo("No operations recorded")
            return
        for row in rows:
            click.echo(f"{row['timestamp']}  {row['ip']:<15}  {row['method']:<6} {row['path']}  {row['operation']}")

    @app.cli.command("prune-journals")
    def prune_journals():
        """Drop expired operation-log and rate-limit entries now."""
        logged = db.operation_log.prune()
        limited = db.rate_limiter.journal.prune()
        click.echo(f"Pruned {logged} log entries and {limited} rate-limit entries")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=app.config["PORT"])
