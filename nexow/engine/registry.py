# nexow/engine/registry.py
from __future__ import annotations

import threading
from typing import Dict, Optional

from loguru import logger

from nexow.domain.models import EngineConfig
from nexow.engine.engine import Engine, EngineHandle

JOIN_TIMEOUT_SEC = 10.0


class SessionRegistry:
    """
    Engine runs keyed by session id, with at most one "current" run.
    start() stops and joins the current run before installing the new one,
    so no worker keeps producing into a stream nobody tracks.

    Two locks: `_start_lock` serialises replacements (held across the join),
    `_lock` guards the session map and is never held while waiting on a worker.
    Finished sessions other than the current one are dropped on every start().
    """

    def __init__(self, join_timeout: float = JOIN_TIMEOUT_SEC):
        self._start_lock = threading.Lock()
        self._lock = threading.Lock()
        self._sessions: Dict[str, EngineHandle] = {}
        self._current: Optional[str] = None
        self.join_timeout = join_timeout

    def start(self, config: EngineConfig, **spawn_kwargs) -> EngineHandle:
        with self._start_lock:
            with self._lock:
                prev = self._sessions.get(self._current) if self._current else None
            if prev is not None:
                self._shutdown(prev)
            handle = Engine.spawn(config, **spawn_kwargs)
            with self._lock:
                self._sessions[handle.session_id] = handle
                self._current = handle.session_id
                dropped = self._prune_locked()
            logger.info(f"session {handle.session_id} installed as current ({dropped} finished dropped)")
            return handle

    def stop(self, session_id: Optional[str] = None) -> bool:
        """Stops the given (or current) session. Returns False when there was nothing to stop."""
        with self._lock:
            sid = session_id or self._current
            handle = self._sessions.get(sid) if sid else None
        if handle is None or not handle.is_running():
            return False
        self._shutdown(handle)
        return True

    def get(self, session_id: str) -> Optional[EngineHandle]:
        with self._lock:
            return self._sessions.get(session_id)

    @property
    def current(self) -> Optional[EngineHandle]:
        with self._lock:
            return self._sessions.get(self._current) if self._current else None

    def status(self) -> dict:
        with self._lock:
            handle = self._sessions.get(self._current) if self._current else None
            return {
                "running": bool(handle and handle.is_running()),
                "session_id": self._current,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def prune(self) -> int:
        """Drops finished sessions other than the current one."""
        with self._lock:
            return self._prune_locked()

    def _prune_locked(self) -> int:
        done = [sid for sid, h in self._sessions.items() if sid != self._current and not h.is_running()]
        for sid in done:
            del self._sessions[sid]
        return len(done)

    def _shutdown(self, handle: EngineHandle) -> None:
        handle.stop()
        if not handle.join(self.join_timeout):
            logger.warning(f"session {handle.session_id} did not exit within {self.join_timeout}s")
        else:
            logger.info(f"session {handle.session_id} stopped")
