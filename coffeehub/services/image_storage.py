import logging
import os
import shutil
import time
from typing import Optional
from werkzeug.utils import secure_filename
from coffeehub.errors import StoreError

logger = logging.getLogger(__name__)


class ImageStorage:
    """Product images kept as files under one directory."""

    def __init__(self, base_dir: str):
        self.base_dir = os.path.abspath(base_dir)

    def _ensure_dir(self):
        os.makedirs(self.base_dir, exist_ok=True)

    def owns(self, path: str) -> bool:
        if not path:
            return False
        full = os.path.abspath(path)
        return os.path.commonpath([full, self.base_dir]) == self.base_dir and full != self.base_dir

    def save(self, data: bytes, key: str) -> str:
        """Write ``data`` as ``<key>_<millis>.jpg`` and return its absolute path."""
        if not data:
            raise StoreError("Image is empty", store="images")
        name = secure_filename(key) or "image"
        path = os.path.join(self.base_dir, f"{name}_{int(time.time() * 1000)}.jpg")
        try:
            self._ensure_dir()
            with open(path, "wb") as fh:
                fh.write(data)
        except OSError as e:
            raise StoreError("Failed to save image", store="images") from e
        logger.info("Saved product image %s", path)
        return path

    def delete(self, path: str) -> bool:
        """Remove an image this storage wrote. Paths elsewhere are left alone."""
        if not self.owns(path) or not os.path.isfile(path):
            return False
        os.remove(path)
        return True

    def get(self, path: str) -> Optional[str]:
        if self.owns(path) and os.path.isfile(path):
            return os.path.abspath(path)
        return None

    def clear(self) -> bool:
        try:
            shutil.rmtree(self.base_dir, ignore_errors=True)
            self._ensure_dir()
        except OSError as e:
            logger.error("Failed to clear product images: %s", e)
            return False
        return True
