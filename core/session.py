"""
core/session.py

Per-conversation state and the store that keys it by conversation id.
- Session: search session, selected place, pending deletion/reservation, reply history
- SessionStore: creates sessions on first use, discards them when the conversation
  ends or after it has been idle too long
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime

from core.search import SearchSession
from tools.base import Place


logger = logging.getLogger(__name__)


@dataclass
class PendingDeletion:
    title: str | None = None
    point: datetime | None = None


@dataclass
class PendingReservation:
    """A reservation being collected over several turns: time, party size, then name."""
    place: Place
    point: datetime | None = None
    party_size: int | None = None


@dataclass
class Session:
    conversation_id: str = ""
    search: SearchSession = field(default_factory=SearchSession)
    place: Place | None = None
    pending_deletion: PendingDeletion | None = None
    pending_reservation: PendingReservation | None = None
    history: list[dict[str, str]] = field(default_factory=list)  # list of {role, content}
    last_seen: float = 0.0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add(self, role, content, limit=None):
        """Append a message to the conversation history, keeping the last `limit`."""
        self.history.append({"role": role, "content": content})
        if limit:
            del self.history[:-limit]

    def new_search(self):
        """Drop the search results and the selected place."""
        self.search = SearchSession()
        self.place = None
        return self.search


class SessionStore:
    def __init__(self, idle_seconds=None, clock=time.monotonic):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self.idle_seconds = idle_seconds  # None keeps sessions until discarded
        self._clock = clock

    def _expire(self, now):
        if not self.idle_seconds:
            return
        for conversation_id, sess in list(self._sessions.items()):
            # a session whose turn is running is never expired
            if now - sess.last_seen > self.idle_seconds and not sess.lock.locked():
                del self._sessions[conversation_id]
                logger.info("Conversation %s expired after %.0fs idle", conversation_id, now - sess.last_seen)

    def get(self, conversation_id: str) -> Session:
        with self._lock:
            now = self._clock()
            self._expire(now)
            sess = self._sessions.get(conversation_id)
            if sess is None:
                sess = Session(conversation_id=conversation_id)
                self._sessions[conversation_id] = sess
            sess.last_seen = now
            return sess

    def discard(self, conversation_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(conversation_id, None) is not None

    def __contains__(self, conversation_id):
        with self._lock:
            return conversation_id in self._sessions

    def __len__(self):
        with self._lock:
            return len(self._sessions)
