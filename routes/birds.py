from flask import Blueprint, request, jsonify, current_app, g

from models import db
from models.bird import BirdNotFound, BirdValidationError
from security.rate_limit import rate_limited_operation
from utils.images import file_size, has_upload
from utils.log import get_logger
from utils.params import parse_int, parse_page

bird_bp = Blueprint("birds", __name__, url_prefix="/api/birds")

logger = get_logger(__name__)


def _not_found():
    return jsonify(error="Bird not found"), 404


def _image_too_large(upload) -> bool:
    return file_size(upload) > current_app.config.get("MAX_IMAGE_BYTES", 1024 * 1024)


def _image_limit_message() -> str:
    limit = current_app.config.get("MAX_IMAGE_BYTES", 1024 * 1024)
    return f"Image size cannot exceed {limit // (1024 * 1024)}MB"


@bird_bp.get("")
def list_birds():
    page = parse_page(request.args.get("page"))
    search = request.args.get("search") or ""
    page_size = current_app.config.get("BIRDS_PAGE_SIZE", 48)

    birds, has_more = db.birds.list(page=page, page_size=page_size, search=search)
    return jsonify(birds=[b.to_dict() for b in birds], hasMore=has_more), 200


@bird_bp.get("/count")
def count_birds():
    count, distinct = db.birds.count()
    return jsonify(count=count, type=distinct), 200


@bird_bp.get("/<bird_id>")
def get_bird(bird_id):
    parsed = parse_int(bird_id)
    if parsed is None:
        return _not_found()
    try:
        bird = db.birds.get(parsed)
    except BirdNotFound:
        return _not_found()
    return jsonify(bird.to_dict()), 200


@bird_bp.post("")
@rate_limited_operation
def create_bird():
    name = request.form.get("name") or ""
    image = request.files.get("image")

    try:
        db.birds.validate_name(name)
    except BirdValidationError as exc:
        return jsonify(error=str(exc)), 400

    if has_upload(image) and _image_too_large(image):
        return jsonify(error=_image_limit_message()), 400

    filename = db.images.save(image) if has_upload(image) else None
    bird = db.birds.create(name, filename)

    logger.info("bird_created", bird_id=bird.id, image=filename)
    return jsonify(**bird.to_dict(), operation=g.operation_desc), 201


@bird_bp.put("/<bird_id>")
@rate_limited_operation
def update_bird(bird_id):
    parsed = parse_int(bird_id)
    if parsed is None:
        return _not_found()
    try:
        db.birds.get(parsed)
    except BirdNotFound:
        return _not_found()

    name = request.form.get("name") or None
    image = request.files.get("image")

    try:
        db.birds.validate_name(name, required=False)
    except BirdValidationError as exc:
        return jsonify(error=str(exc)), 400

    if has_upload(image) and _image_too_large(image):
        return jsonify(error=_image_limit_message()), 400

    filename = db.images.save(image) if has_upload(image) else None
    try:
        bird = db.birds.update(parsed, name=name, image_filename=filename)
    except BirdNotFound:
        # Deleted between the lookup and the update
        if filename:
            db.images.delete(filename)
        return _not_found()

    logger.info("bird_updated", bird_id=bird.id, name_changed=bool(name), image=filename)
    return jsonify(**bird.to_dict(), operation=g.operation_desc), 200


@bird_bp.delete("/<bird_id>")
@rate_limited_operation
def delete_bird(bird_id):
    parsed = parse_int(bird_id)
    if parsed is None:
        return _not_found()
    try:
        bird = db.birds.delete(parsed)
    except BirdNotFound:
        return _not_found()

    logger.info("bird_deleted", bird_id=bird.id, image=bird.image_url)
    return jsonify(message="Bird deleted successfully", operation=g.operation_desc), 200
