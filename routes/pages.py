from flask import Blueprint, current_app, send_from_directory

from models import db

pages_bp = Blueprint("pages", __name__)


@pages_bp.get("/")
def index():
    return send_from_directory(current_app.config["PUBLIC_DIR"], "index.html")


@pages_bp.get("/api/images/<path:filename>")
def image(filename):
    return send_from_directory(db.images.directory, filename)


@pages_bp.get("/<path:filename>")
def public_file(filename):
    # Front-end bundle: html, scripts, service worker
    return send_from_directory(current_app.config["PUBLIC_DIR"], filename)
