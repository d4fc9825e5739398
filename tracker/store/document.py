"""
tracker/store/document.py
File-based activity document. The whole list lives in one JSON array that is
read in full and replaced in full; there is no partial update.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List

from tracker.errors import IOFailure

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def strict_loads(raw):
    """json.loads that refuses NaN and Infinity, which other JSON parsers reject."""
    return json.loads(raw, parse_constant=_reject_constant)


class DocumentStore:
    def __init__(self, path: Path | str):
        self.path = Path(path)

    def ensure(self) -> None:
        """Create the backing file as an empty array if it does not exist yet."""
        if self.path.exists():
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # "x" refuses to clobber a file another initialiser wrote first
            with self.path.open("x", encoding="utf-8") as f:
                f.write("[]")
            logger.info(f"Initialised empty activity document at {self.path}")
        except FileExistsError:
            pass
        except OSError as exc:
            logger.error(f"Could not initialise {self.path}: {exc}")
            raise IOFailure(f"Could not initialise {self.path}") from exc

    def read(self) -> List[Any]:
        self.ensure()
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = strict_loads(raw)
        except (OSError, ValueError, RecursionError) as exc:
            logger.error(f"Error reading data file {self.path}: {exc}")
            raise IOFailure(f"Could not read {self.path}") from exc
        if not isinstance(data, list):
            logger.error(f"Data file {self.path} does not hold a JSON array")
            raise IOFailure(f"{self.path} does not hold a JSON array")
        logger.debug(f"Read {len(data)} activities from {self.path}")
        return data

    def replace(self, activities: List[Any]) -> None:
        try:
            payload = json.dumps(list(activities), ensure_ascii=False, indent=2, allow_nan=False)
        except ValueError as exc:
            logger.error(f"Refusing to write non-JSON value to {self.path}: {exc}")
            raise IOFailure(f"Activities for {self.path} are not JSON-serialisable") from exc
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.error(f"Error writing data file {self.path}: {exc}")
            raise IOFailure(f"Could not write {self.path}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        logger.debug(f"Wrote {len(activities)} activities to {self.path}")
