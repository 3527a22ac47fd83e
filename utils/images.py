import os
import re
import uuid

from werkzeug.utils import safe_join

from utils.log import log_error

_SAFE_EXT = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def file_size(upload) -> int:
    """Size in bytes of an uploaded ``FileStorage`` without consuming it."""
    stream = upload.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def has_upload(upload) -> bool:
    return upload is not None and bool(upload.filename)


class ImageStore:
    """Uploaded images in one directory, named ``<uuid4><original ext>``.

    Deleting is best-effort: failures go to ``on_error`` and never raise.
    """

    def __init__(self, directory: str, on_error=None):
        self.directory = directory
        self.on_error = on_error or log_error

    def ensure_dir(self) -> None:
        os.makedirs(self.directory, exist_ok=True)

    def generate_name(self, original: str | None) -> str:
        ext = os.path.splitext(original or "")[1]
        if not _SAFE_EXT.match(ext):
            ext = ""
        return f"{uuid.uuid4()}{ext.lower()}"

    def path_for(self, filename: str) -> str | None:
        return safe_join(self.directory, filename)

    def save(self, upload) -> str:
        filename = self.generate_name(upload.filename)
        upload.save(os.path.join(self.directory, filename))
        return filename

    def exists(self, filename: str) -> bool:
        path = self.path_for(filename)
        return path is not None and os.path.isfile(path)

    def delete(self, filename: str) -> bool:
        path = self.path_for(filename)
        if path is None:
            self.on_error("image_delete_failed", ValueError("unsafe image path"), filename=filename)
            return False
        try:
            os.remove(path)
        except OSError as exc:
            self.on_error("image_delete_failed", exc, filename=filename)
            return False
        return True
