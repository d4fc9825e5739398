"""
tracker/client/cache.py
Client-local key/value storage used as the fallback copy of the activity
list. One JSON file per key inside the cache directory.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from tracker.config import load_json

logger = logging.getLogger(__name__)


class FallbackCache:
    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        """Stored value for `key`, or None when absent or unreadable."""
        return load_json(self._path(key))

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            os.unlink(tmp_name)
            raise
        logger.debug(f"Cached {key} at {path}")
