"""In-process registry of hub sessions, one per browser session.

The registry is bounded: sessions idle longer than `idle_seconds` expire,
and once `max_sessions` is reached the least recently used idle session is
evicted to make room. A session with a call in flight is never evicted.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple
from uuid import uuid4

from src.agents.orchestrator import AgentDispatcher
from src.config import (
    DEFAULT_HUB_IDLE_SECONDS,
    DEFAULT_HUB_MAX_SESSIONS,
    HubSettings,
    get_settings,
)
from src.services import build_generation_service, build_video_search

from .session import HubSession

logger = logging.getLogger(__name__)

HubFactory = Callable[[], HubSession]


def build_hub_session(settings: Optional[HubSettings] = None) -> HubSession:
    settings = settings or get_settings()
    dispatcher = AgentDispatcher(
        build_generation_service(settings),
        build_video_search(settings),
        roadmap_max_depth=settings.roadmap_max_depth,
    )
    return HubSession(dispatcher)


class HubRegistry:
    def __init__(
        self,
        factory: HubFactory = build_hub_session,
        *,
        max_sessions: int = DEFAULT_HUB_MAX_SESSIONS,
        idle_seconds: float = DEFAULT_HUB_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1")
        self._factory = factory
        self._max_sessions = max_sessions
        self._idle_seconds = idle_seconds
        self._clock = clock
        # Least recently used first.
        self._sessions: "OrderedDict[str, Tuple[HubSession, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, hub_id: Optional[str]) -> Optional[HubSession]:
        if not hub_id:
            return None
        with self._lock:
            entry = self._sessions.get(hub_id)
            if entry is None:
                return None
            hub, last_seen = entry
            now = self._clock()
            if self._expired(hub, last_seen, now):
                del self._sessions[hub_id]
                logger.info("Hub session %s expired after %.0fs idle", hub_id, now - last_seen)
                return None
            self._sessions[hub_id] = (hub, now)
            self._sessions.move_to_end(hub_id)
            return hub

    def create(self) -> Tuple[str, HubSession]:
        hub = self._factory()
        hub_id = uuid4().hex
        with self._lock:
            self._evict_locked()
            self._sessions[hub_id] = (hub, self._clock())
        logger.info("Created hub session %s", hub_id)
        return hub_id, hub

    def discard(self, hub_id: Optional[str]) -> bool:
        if not hub_id:
            return False
        with self._lock:
            removed = self._sessions.pop(hub_id, None) is not None
        if removed:
            logger.info("Discarded hub session %s", hub_id)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _expired(self, hub: HubSession, last_seen: float, now: float) -> bool:
        return not hub.busy and now - last_seen > self._idle_seconds

    def _evict_locked(self) -> None:
        now = self._clock()
        for hub_id, (hub, last_seen) in list(self._sessions.items()):
            if self._expired(hub, last_seen, now):
                del self._sessions[hub_id]
                logger.info("Hub session %s expired", hub_id)

        while len(self._sessions) >= self._max_sessions:
            victim = next((hid for hid, (hub, _) in self._sessions.items() if not hub.busy), None)
            if victim is None:
                logger.warning("All %d hub sessions are busy; admitting one over the cap", len(self._sessions))
                return
            del self._sessions[victim]
            logger.info("Evicted hub session %s (cap %d)", victim, self._max_sessions)


__all__ = ["HubFactory", "HubRegistry", "build_hub_session"]
