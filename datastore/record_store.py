from __future__ import annotations
import json
import logging
from contextlib import suppress
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from pydantic import ValidationError

from app.schemas import Assessment
from settings import get_settings

logger = logging.getLogger(__name__)


class StoreWriteError(RuntimeError):
    """Raised when a mutation could not be applied; stored state is unchanged."""


class AssessmentTable:
    """Durable mapping from assessment id to record, iterated in key order."""

    def __init__(
        self,
        name: str,
        persistence_path: Optional[Path] = None,
        max_key_bytes: int = 44,
        max_value_bytes: Optional[int] = None,
    ) -> None:
        self.name = name
        self._items: Dict[str, Assessment] = {}
        self.persistence_path = persistence_path
        self.max_key_bytes = max_key_bytes
        self.max_value_bytes = max_value_bytes
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def get(self, key: str) -> Optional[Assessment]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            return item.model_copy(deep=True)

    def put(self, item: Assessment) -> None:
        """Insert or fully replace the record stored under ``item.id``."""
        self._check_capacity(item)
        with self._lock:
            previous = self._items.get(item.id)
            self._items[item.id] = item.model_copy(deep=True)
            try:
                self._persist()
            except StoreWriteError:
                if previous is None:
                    del self._items[item.id]
                else:
                    self._items[item.id] = previous
                raise

    def delete(self, key: str) -> Optional[Assessment]:
        with self._lock:
            previous = self._items.pop(key, None)
            if previous is None:
                return None
            try:
                self._persist()
            except StoreWriteError:
                self._items[key] = previous
                raise
            return previous.model_copy(deep=True)

    def values(self) -> list[Assessment]:
        """Return deep copies of all stored records in ascending id order."""

        with self._lock:
            return [self._items[key].model_copy(deep=True) for key in sorted(self._items)]

    def _check_capacity(self, item: Assessment) -> None:
        problem: Optional[str] = None
        key_size = len(item.id.encode("utf-8"))
        if key_size > self.max_key_bytes:
            problem = f"Key {item.id!r} is {key_size} bytes, limit is {self.max_key_bytes}."
        elif self.max_value_bytes is not None:
            value_size = len(item.model_dump_json().encode("utf-8"))
            if value_size > self.max_value_bytes:
                problem = (
                    f"Record {item.id!r} is {value_size} bytes, "
                    f"limit is {self.max_value_bytes}."
                )
        if problem is None:
            return
        logger.error(
            "Rejected write to table %s",
            self.name,
            extra={"assessment_id": item.id, "reason": problem},
        )
        raise StoreWriteError(problem)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        staging = self.persistence_path.with_name(self.persistence_path.name + ".tmp")
        try:
            payload = {
                key: item.model_dump(mode="json") for key, item in self._items.items()
            }
            text = json.dumps(payload, indent=2, sort_keys=True, allow_nan=False)
            staging.write_text(text)
            staging.replace(self.persistence_path)
        except (OSError, TypeError, ValueError) as exc:
            with suppress(OSError):
                staging.unlink(missing_ok=True)
            logger.error(
                "Failed to persist table %s",
                self.name,
                extra={"path": str(self.persistence_path), "reason": str(exc)},
            )
            raise StoreWriteError(f"Failed to persist table {self.name!r}: {exc}") from exc

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, found {type(data).__name__}")
            loaded = {
                key: Assessment.model_validate(payload) for key, payload in data.items()
            }
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning(
                "Ignoring unreadable table file",
                extra={"path": str(self.persistence_path), "reason": str(exc)},
            )
            loaded = {}

        self._items.update(loaded)
        logger.debug(
            "Loaded table %s",
            self.name,
            extra={"path": str(self.persistence_path), "record_count": len(self._items)},
        )


@lru_cache
def build_default_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> AssessmentTable:
    settings = get_settings()
    table_name = settings.table_name if name is None else name
    table_path = settings.table_persistence_path if path is None else path
    persistence = Path(table_path) if table_path else None
    return AssessmentTable(
        name=table_name,
        persistence_path=persistence,
        max_key_bytes=settings.max_key_bytes,
        max_value_bytes=settings.max_value_bytes,
    )
