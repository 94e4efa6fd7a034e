import contextlib
import os
import re
import shutil
import time
import uuid

import structlog
from flask import url_for
from werkzeug.security import safe_join

from ..common.retry import call_with_retry
from ..errors import StorageError

log = structlog.get_logger()

DEFAULT_CONTENT_TYPE = "application/octet-stream"
_EXT_RE = re.compile(r"[^a-z0-9]")


def build_object_path(user_id: str, prompt_id: str, filename: str | None, now: float | None = None) -> str:
    """Return `<user>/<prompt>/<ms>-<nonce>.<ext>` for a new upload.

    The millisecond timestamp keeps paths ordered; the random nonce keeps
    two uploads in the same millisecond apart.
    """
    ms = int((now if now is not None else time.time()) * 1000)
    ext = _EXT_RE.sub("", os.path.splitext(filename or "")[1].lower()) or "bin"
    return f"{user_id}/{prompt_id}/{ms}-{uuid.uuid4().hex[:8]}.{ext}"


class StorageService:
    """Filesystem-backed bucket store for prompt outputs."""

    def __init__(self, config):
        self.root = os.path.abspath(config.get("STORAGE_ROOT") or "storage")
        self.bucket = config.get("STORAGE_BUCKET") or "prompt_outputs"
        self.public_base = config.get("STORAGE_PUBLIC_URL")
        self.retries = config.get("UPSTREAM_RETRIES", 1)
        self.max_backoff = config.get("UPSTREAM_BACKOFF_MAX", 4)

    def path_for(self, object_path: str, bucket: str | None = None) -> str | None:
        """Absolute path of an object, or None if it escapes the bucket."""
        bucket_dir = safe_join(self.root, bucket or self.bucket)
        if bucket_dir is None:
            return None
        return safe_join(bucket_dir, object_path)

    def upload(self, object_path: str, stream) -> str:
        """Write `stream` under `object_path`; never overwrites an object."""
        dest = self.path_for(object_path)
        if dest is None:
            raise StorageError(f"Invalid object path: {object_path}")

        def _write():
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            if hasattr(stream, "seek"):
                stream.seek(0)
            try:
                with open(dest, "xb") as fh:
                    shutil.copyfileobj(stream, fh)
            except FileExistsError as e:
                raise StorageError(f"Object already exists: {object_path}") from e
            except OSError:
                # drop the partial object so a retry can recreate it
                with contextlib.suppress(OSError):
                    os.remove(dest)
                raise

        try:
            call_with_retry(
                _write,
                retries=self.retries,
                max_backoff=self.max_backoff,
                retry_on=(OSError,),
                name="storage.upload",
            )
        except OSError as e:
            log.error("storage.upload_failed", path=object_path, error=str(e))
            raise StorageError(str(e)) from e

        log.info("storage.uploaded", bucket=self.bucket, path=object_path)
        return object_path

    def public_url(self, object_path: str) -> str:
        if self.public_base:
            return f"{self.public_base.rstrip('/')}/{self.bucket}/{object_path}"
        return url_for("storage.serve_object", bucket=self.bucket, object_path=object_path, _external=True)
