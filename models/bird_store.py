"""In-memory bird catalog mirrored to a single JSON array.

Every mutation rewrites the whole collection. Write failures are reported
through ``on_error`` and do not undo the in-memory change, so memory and
disk can diverge until the next successful write.
"""

from __future__ import annotations

import threading
from dataclasses import replace

from models.bird import Bird, BirdNotFound, BirdValidationError
from utils.clock import epoch_millis, utcnow
from utils.log import log_error
from utils.params import parse_page

DEFAULT_PAGE_SIZE = 48
DEFAULT_NAME_MAX_LENGTH = 10


def name_length(name: str) -> int:
    """Length in UTF-16 code units, the way browsers count ``maxlength``."""
    return len(name.encode("utf-16-le", "surrogatepass")) // 2


class BirdStore:
    def __init__(
        self,
        storage,
        images=None,
        *,
        name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
        on_error=None,
        clock=None,
    ):
        self.storage = storage
        self.images = images
        self.name_max_length = name_max_length
        self.on_error = on_error or log_error
        self._clock = clock or utcnow
        self._lock = threading.Lock()
        self._birds: list[Bird] = []
        self._last_id = 0

    # ---------- loading ----------
    def reload(self) -> int:
        """Replace the in-memory list with what storage holds. Returns the count."""
        try:
            raw = self.storage.read_all()
        except (OSError, ValueError) as exc:
            self.on_error("birds_load_failed", exc, storage=repr(self.storage))
            raw = []

        birds = []
        for item in raw:
            try:
                birds.append(Bird.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                self.on_error("bird_record_skipped", exc, record=repr(item)[:200])

        with self._lock:
            self._birds = birds
            self._last_id = max((b.id for b in birds), default=0)
        return len(birds)

    # ---------- reads ----------
    def list(self, page=1, page_size: int = DEFAULT_PAGE_SIZE, search: str = "") -> tuple[list[Bird], bool]:
        page = parse_page(page)
        with self._lock:
            birds = list(self._birds)

        if search:
            needle = search.lower()
            birds = [b for b in birds if needle in b.name.lower()]

        start = (page - 1) * page_size
        end = start + page_size
        return birds[start:end], end < len(birds)

    def count(self) -> tuple[int, int]:
        """Returns (records, distinct names)."""
        with self._lock:
            return len(self._birds), len({b.name for b in self._birds})

    def get(self, bird_id: int) -> Bird:
        with self._lock:
            return self._birds[self._index_of(bird_id)]

    def all(self) -> list[Bird]:
        with self._lock:
            return list(self._birds)

    # ---------- validation ----------
    def validate_name(self, name, *, required: bool = True) -> None:
        if not name:
            if required:
                raise BirdValidationError("Name is required")
            return
        if not isinstance(name, str):
            raise BirdValidationError("Name must be a string")
        if name_length(name) > self.name_max_length:
            raise BirdValidationError(f"Name cannot exceed {self.name_max_length} characters")

    # ---------- mutations ----------
    def create(self, name: str, image_filename: str | None = None) -> Bird:
        self.validate_name(name)
        with self._lock:
            bird = Bird(id=self._next_id(), name=name, image_url=image_filename or None)
            self._birds.insert(0, bird)
            self._persist()
        return bird

    def update(self, bird_id: int, name: str | None = None, image_filename: str | None = None) -> Bird:
        """Replace the supplied fields only. Empty values leave a field untouched."""
        self.validate_name(name, required=False)
        old_image = None
        with self._lock:
            index = self._index_of(bird_id)
            current = self._birds[index]

            changes = {}
            if name:
                changes["name"] = name
            if image_filename:
                old_image = current.image_url
                changes["image_url"] = image_filename

            updated = replace(current, **changes)
            self._birds[index] = updated
            self._persist()

        if old_image and old_image != image_filename:
            self._discard_image(old_image)
        return updated

    def delete(self, bird_id: int) -> Bird:
        with self._lock:
            bird = self._birds.pop(self._index_of(bird_id))
            self._persist()

        if bird.image_url:
            self._discard_image(bird.image_url)
        return bird

    # ---------- internals (callers hold the lock) ----------
    def _index_of(self, bird_id) -> int:
        for index, bird in enumerate(self._birds):
            if bird.id == bird_id:
                return index
        raise BirdNotFound(bird_id)

    def _next_id(self) -> int:
        # Millisecond timestamps, bumped past the last issued id on collision
        candidate = epoch_millis(self._clock())
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def _persist(self) -> None:
        try:
            self.storage.write_all([b.to_dict() for b in self._birds])
        except (OSError, TypeError, ValueError) as exc:
            self.on_error("birds_persist_failed", exc, storage=repr(self.storage), records=len(self._birds))

    def _discard_image(self, filename: str) -> None:
        if self.images is not None:
            self.images.delete(filename)
