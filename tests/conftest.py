"""Shared fixtures.

- ``make_app`` builds an app against a temporary data/public directory,
  optionally pre-seeding the JSON files (to simulate earlier runs).
- ``clock`` is a controllable UTC clock for the core collections.
- ``errors`` records everything reported on the error side-channel.
"""

import io
import json
import os
import shutil
from datetime import datetime, timedelta, timezone

import pytest

from app import create_app
from config import Config
from utils.storage import MemoryStorage

PUBLIC_FILES = ("index.html", "sw.js", "html-to-png.js")


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **delta):
        self.now += timedelta(**delta)
        return self.now


class ErrorRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, event, error=None, **context):
        self.calls.append((event, error, context))

    @property
    def events(self):
        return [event for event, _, _ in self.calls]


class FakeImages:
    """Image sidecar stand-in that only records deletions."""

    def __init__(self):
        self.deleted = []

    def delete(self, filename):
        self.deleted.append(filename)
        return True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def errors():
    return ErrorRecorder()


@pytest.fixture
def fake_images():
    return FakeImages()


@pytest.fixture
def paths(tmp_path):
    public = tmp_path / "public"
    images = public / "images"
    data = tmp_path / "data"
    images.mkdir(parents=True)
    data.mkdir()
    # The bundled front-end, so static routes serve the files that ship
    for name in PUBLIC_FILES:
        shutil.copy(os.path.join(Config.PUBLIC_DIR, name), public / name)
    return {"public": public, "images": images, "data": data}


@pytest.fixture
def make_app(paths):
    def _make(birds=None, operations=None, rate_limits=None, **overrides):
        seeds = {
            "data.json": birds,
            "operation_log.json": operations,
            "ip_operations.json": rate_limits,
        }
        for filename, rows in seeds.items():
            if rows is not None:
                (paths["data"] / filename).write_text(json.dumps(rows), encoding="utf-8")

        config = {
            "TESTING": True,
            "DATA_DIR": str(paths["data"]),
            "PUBLIC_DIR": str(paths["public"]),
            "IMAGE_DIR": str(paths["images"]),
            "CORS_ORIGINS": ["http://localhost:3000"],
            "LOG_JSON": False,
        }
        config.update(overrides)
        return create_app(config)

    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def read_json(paths):
    def _read(filename):
        return json.loads((paths["data"] / filename).read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def png():
    def _png(size: int = 64) -> bytes:
        header = b"\x89PNG\r\n\x1a\n"
        return header + b"\x00" * max(size - len(header), 0)
    return _png


@pytest.fixture
def post_bird(client):
    def _post(name=None, image=None, ip="10.0.0.1", filename="bird.png", headers=None):
        data = {}
        if name is not None:
            data["name"] = name
        if image is not None:
            data["image"] = (io.BytesIO(image), filename)
        return client.post(
            "/api/birds",
            data=data,
            content_type="multipart/form-data",
            headers=headers or {},
            environ_base={"REMOTE_ADDR": ip},
        )
    return _post


class FailingStorage(MemoryStorage):
    def write_all(self, items):
        raise OSError("disk full")


@pytest.fixture
def failing_storage():
    return FailingStorage()
