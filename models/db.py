"""Flask extension wiring the JSON-backed collections into an app.

Usage mirrors an ORM extension: ``db.init_app(app)`` once, then
``db.birds`` / ``db.operation_log`` / ``db.rate_limiter`` / ``db.images``
inside an app context.
"""

import os
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from models.bird_store import BirdStore
from models.operation_log import OperationLog
from models.rate_limit import OperationRateLimiter
from utils.images import ImageStore
from utils.log import log_error
from utils.storage import JsonFileStorage

EXTENSION_KEY = "json_db"


@dataclass
class Collections:
    birds: BirdStore
    operation_log: OperationLog
    rate_limiter: OperationRateLimiter
    images: ImageStore

    def reload(self) -> None:
        self.birds.reload()
        self.operation_log.journal.reload()
        self.rate_limiter.journal.reload()


class JsonDatabase:
    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app, *, clock=None, on_error=None) -> Collections:
        cfg = app.config
        on_error = on_error or log_error

        data_dir = cfg["DATA_DIR"]
        os.makedirs(data_dir, exist_ok=True)

        images = ImageStore(cfg.get("IMAGE_DIR") or os.path.join(cfg["PUBLIC_DIR"], "images"), on_error=on_error)
        images.ensure_dir()

        birds_file = JsonFileStorage(os.path.join(data_dir, cfg["BIRDS_FILE"]), indent=2)
        log_file = JsonFileStorage(os.path.join(data_dir, cfg["OPERATION_LOG_FILE"]))
        rate_file = JsonFileStorage(os.path.join(data_dir, cfg["RATE_LIMIT_FILE"]))
        for storage in (birds_file, log_file, rate_file):
            storage.ensure_exists()

        collections = Collections(
            birds=BirdStore(
                birds_file,
                images,
                name_max_length=cfg["BIRD_NAME_MAX_LENGTH"],
                on_error=on_error,
                clock=clock,
            ),
            operation_log=OperationLog.with_storage(
                log_file,
                retention=timedelta(days=cfg["OPERATION_LOG_RETENTION_DAYS"]),
                clock=clock,
                on_error=on_error,
            ),
            rate_limiter=OperationRateLimiter.with_storage(
                rate_file,
                window=timedelta(seconds=cfg["OPERATION_RATE_WINDOW_SECONDS"]),
                max_requests=cfg["OPERATION_RATE_MAX_REQUESTS"],
                clock=clock,
                on_error=on_error,
            ),
            images=images,
        )
        collections.reload()

        app.extensions[EXTENSION_KEY] = collections
        return collections

    @property
    def collections(self) -> Collections:
        return current_app.extensions[EXTENSION_KEY]

    @property
    def birds(self) -> BirdStore:
        return self.collections.birds

    @property
    def operation_log(self) -> OperationLog:
        return self.collections.operation_log

    @property
    def rate_limiter(self) -> OperationRateLimiter:
        return self.collections.rate_limiter

    @property
    def images(self) -> ImageStore:
        return self.collections.images


db = JsonDatabase()
