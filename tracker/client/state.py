"""
tracker/client/state.py
In-memory activity list for one client session, synced with the activities
endpoint through explicit load/save.

Mutations apply to the local list immediately and then schedule a save
without waiting for it. `save()` hands back the asyncio.Task so callers that
care about the outcome can await it; the fallback cache is written on every
save attempt, whether or not the server accepted it.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Literal, Optional, Set, Tuple

import httpx
from pydantic import ValidationError

from tracker.api.schemas import Activity
from tracker.client.cache import FallbackCache
from tracker.config import (
    ACTIVITIES_CACHE_KEY,
    get_api_url,
    get_cache_dir,
    get_http_timeout,
    get_status_ttl,
)
from tracker.core.activities import completion_stats, filter_by_date, new_activity_id, today
from tracker.errors import TransportFailure, ValidationFailure

logger = logging.getLogger(__name__)

StatusKind = Literal["success", "error", "info"]


@dataclass
class StatusMessage:
    text: str
    kind: StatusKind
    created_at: float = field(default_factory=time.monotonic)


def _parse_activities(data: Any) -> Tuple[List[Activity], List[Any]]:
    """Split a stored array into usable activities and elements kept only to be written back."""
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    activities: List[Activity] = []
    unparsed: List[Any] = []
    for item in data:
        try:
            activities.append(Activity.model_validate(item))
        except ValidationError as exc:
            logger.warning(f"Keeping unrecognised activity record as-is: {exc.error_count()} error(s)")
            unparsed.append(item)
    return activities, unparsed


class ActivityStateManager:
    def __init__(
        self,
        api_url: Optional[str] = None,
        cache: Optional[FallbackCache] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        status_ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_url = api_url or get_api_url()
        self.cache = cache or FallbackCache(get_cache_dir())
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=get_http_timeout())
        self.status_ttl = get_status_ttl() if status_ttl is None else status_ttl
        self._clock = clock

        self.activities: List[Activity] = []
        # Stored elements that are not valid activities; saved back untouched
        self.unparsed: List[Any] = []
        self.selected_date: str = today()
        self.last_save: Optional[asyncio.Task] = None
        self._status: Optional[StatusMessage] = None
        self._in_flight = 0
        self._pending: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Status / loading flag
    # ------------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    @property
    def status(self) -> Optional[StatusMessage]:
        """Most recent status message, or None once it has been dismissed."""
        if self._status is None:
            return None
        if self._clock() - self._status.created_at >= self.status_ttl:
            self._status = None
        return self._status

    def _set_status(self, text: str, kind: StatusKind) -> None:
        self._status = StatusMessage(text=text, kind=kind, created_at=self._clock())

    # ------------------------------------------------------------------
    # Sync with the endpoint
    # ------------------------------------------------------------------

    async def _request(self, method: str, payload: Any = None) -> httpx.Response:
        try:
            resp = await self._client.request(method, self.api_url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportFailure(f"{method} {self.api_url} failed: {exc}") from exc
        return resp

    async def load(self) -> bool:
        self._in_flight += 1
        try:
            resp = await self._request("GET")
            self.activities, self.unparsed = _parse_activities(resp.json())
            self._set_status("Activities loaded from server", "success")
            return True
        except (TransportFailure, ValueError) as exc:
            logger.error(f"Error loading activities: {exc}")
            self._set_status("Failed to load activities from server", "error")
            self._restore_from_cache()
            return False
        finally:
            self._in_flight -= 1

    def _restore_from_cache(self) -> None:
        cached = self.cache.get(ACTIVITIES_CACHE_KEY)
        if cached is None:
            return
        try:
            self.activities, self.unparsed = _parse_activities(cached)
        except ValueError as exc:
            logger.error(f"Ignoring unusable fallback cache: {exc}")
            return
        self._set_status("Loaded from local storage (server unavailable)", "info")

    def save(self) -> asyncio.Task:
        """Schedule a whole-list save. The task resolves to True on server success."""
        loop = asyncio.get_running_loop()
        snapshot = [a.model_dump() for a in self.activities] + list(self.unparsed)
        self._in_flight += 1
        task = loop.create_task(self._save(snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        self.last_save = task
        return task

    async def _save(self, snapshot: List[dict]) -> bool:
        try:
            await self._request("POST", snapshot)
        except TransportFailure as exc:
            logger.error(f"Error saving activities: {exc}")
            self._set_status("Failed to save to server, saved locally instead", "error")
            return False
        else:
            self._set_status("Activities saved to server", "success")
            return True
        finally:
            self._write_cache(snapshot)
            self._in_flight -= 1

    def _write_cache(self, snapshot: List[dict]) -> None:
        try:
            self.cache.set(ACTIVITIES_CACHE_KEY, snapshot)
        except OSError as exc:
            logger.error(f"Could not write fallback cache: {exc}")

    async def flush(self) -> None:
        """Wait for every save scheduled so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ------------------------------------------------------------------
    # Mutations (apply locally, then fire a save)
    # ------------------------------------------------------------------

    @staticmethod
    def _require_loop() -> None:
        # Mutations schedule a save, so the list must not change outside a running loop
        asyncio.get_running_loop()

    def add(self, name: str, date: Optional[str] = None, time: str = "", notes: str = "") -> Activity:
        self._require_loop()
        if not name:
            raise ValidationFailure("Activity name is required")
        activity = Activity(
            id=new_activity_id(a.id for a in self.activities),
            date=date or self.selected_date,
            name=name,
            completed=False,
            time=time,
            notes=notes,
        )
        self.activities = [*self.activities, activity]
        self.save()
        return activity

    def edit(self, activity: Activity) -> None:
        self._require_loop()
        if not activity.name:
            raise ValidationFailure("Activity name is required")
        self.activities = [activity if a.id == activity.id else a for a in self.activities]
        self.save()

    def toggle_complete(self, activity_id: str) -> None:
        self._require_loop()
        self.activities = [
            a.model_copy(update={"completed": not a.completed}) if a.id == activity_id else a
            for a in self.activities
        ]
        self.save()

    def delete(self, activity_id: str) -> None:
        self._require_loop()
        self.activities = [a for a in self.activities if a.id != activity_id]
        self.save()

    def get(self, activity_id: str) -> Optional[Activity]:
        for activity in self.activities:
            if activity.id == activity_id:
                return activity
        return None

    # ------------------------------------------------------------------
    # Read-side projections
    # ------------------------------------------------------------------

    def filter_by_date(self, selected_date: Optional[str] = None) -> List[Activity]:
        return filter_by_date(self.activities, selected_date or self.selected_date)

    def stats(self) -> dict:
        return completion_stats(self.activities)

    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        await self.flush()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ActivityStateManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
