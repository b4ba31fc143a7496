import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from memory.types import ConversationWindow
from transport.base import ChatTransport


class SessionStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    DISCONNECTED = "disconnected"


@dataclass
class SessionState:
    """
    One messaging account bound to a system prompt and per-user memory.

    Mutated only from the event loop thread. The prompt is replaced as a
    whole string, so concurrent readers see either the old or the new value.
    """
    session_id: str
    transport: ChatTransport
    prompt: str = "You are a helpful assistant."
    status: SessionStatus = SessionStatus.PENDING
    pairing_artifact: Optional[str] = None
    users: Dict[str, ConversationWindow] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    _user_locks: Dict[str, asyncio.Lock] = field(default_factory=dict, repr=False)

    @property
    def is_active(self) -> bool:
        return self.status != SessionStatus.DISCONNECTED

    def window_for(self, user_id: str) -> ConversationWindow:
        """Get or lazily create the user's window."""
        window = self.users.get(user_id)
        if window is None:
            window = ConversationWindow()
            self.users[user_id] = window
        return window

    def find_window(self, user_id: str) -> Optional[ConversationWindow]:
        return self.users.get(user_id)

    def user_lock(self, user_id: str) -> asyncio.Lock:
        """Lock serializing exchanges with one user."""
        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._user_locks[user_id] = lock
        return lock

    def mark_ready(self) -> None:
        self.status = SessionStatus.READY
        self.pairing_artifact = None

    def release(self) -> None:
        """Drop session-level resources on teardown."""
        self.status = SessionStatus.DISCONNECTED
        self.pairing_artifact = None
