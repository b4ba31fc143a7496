"""
Session Registry

In-memory map of session_id -> SessionState.

DESIGN RULES:
- No persistence, no cross-session sharing
- Every mutation runs on the event loop without awaiting, so each
  operation is atomic with respect to other coroutines
- Transport event handlers return immediately; work is scheduled as tasks
- Teardown never waits on in-flight model calls
"""

import asyncio
import logging
import uuid
from typing import Awaitable, Callable, Coroutine, Dict, List, Optional, Set

from memory.types import ConversationWindow
from orchestration.errors import (
    PairingArtifactNotFoundError,
    SessionNotFoundError,
    UserNotFoundError,
)
from orchestration.state import SessionState, SessionStatus
from transport.base import ChatTransport, InboundMessage, TransportError, TransportEventHandler
from transport.local import LocalTransport


logger = logging.getLogger(__name__)

TransportFactory = Callable[[str], ChatTransport]
InboundHandler = Callable[[str, str, Optional[str], bool], Awaitable[Optional[str]]]

DEFAULT_PROMPT = "You are a helpful assistant."


class _SessionEvents(TransportEventHandler):
    """Binds one transport's events to its registry entry."""

    def __init__(self, registry: "SessionRegistry", session_id: str):
        self._registry = registry
        self._session_id = session_id

    def pairing_ready(self, artifact: str) -> None:
        self._registry._on_pairing_ready(self._session_id, artifact)

    def connection_ready(self) -> None:
        self._registry._on_connection_ready(self._session_id)

    def disconnected(self) -> None:
        self._registry.remove(self._session_id)

    def message_received(self, message: InboundMessage) -> None:
        self._registry._on_message(self._session_id, message)


class SessionRegistry:
    """
    Owner of every live session.

    Creates sessions with their transport, reacts to transport events and
    serves prompt/history administration.
    """

    def __init__(
        self,
        transport_factory: TransportFactory = LocalTransport,
        default_prompt: str = DEFAULT_PROMPT,
    ):
        """
        Args:
            transport_factory: Builds the ChatTransport for a new session id
            default_prompt: System prompt assigned to new sessions
        """
        self._sessions: Dict[str, SessionState] = {}
        self._transport_factory = transport_factory
        self._default_prompt = default_prompt
        self._inbound_handler: Optional[InboundHandler] = None
        self._tasks: Set[asyncio.Task] = set()

    # =====================================================
    # Lifecycle
    # =====================================================

    def create(self) -> str:
        """
        Register a new pending session and start its transport.

        Must be called with a running event loop. Returns before the
        transport finishes initializing.
        """
        session_id = uuid.uuid4().hex
        while session_id in self._sessions:
            session_id = uuid.uuid4().hex

        transport = self._transport_factory(session_id)
        transport.subscribe(_SessionEvents(self, session_id))
        self._sessions[session_id] = SessionState(
            session_id=session_id,
            transport=transport,
            prompt=self._default_prompt,
        )
        self._spawn(self._initialize(session_id, transport), name=f"init-{session_id}")

        logger.info(f"[{session_id}] Session created")
        return session_id

    def remove(self, session_id: str) -> Optional[SessionState]:
        """
        Evict a session and release its pairing artifact.

        Unknown ids are ignored. In-flight replies for the session are
        dropped by the router.
        """
        state = self._sessions.pop(session_id, None)
        if state is None:
            return None
        state.release()
        logger.info(f"[{session_id}] Session disconnected and removed")
        return state

    async def disconnect(self, session_id: str) -> None:
        """Tear a session down from the admin side."""
        state = self.remove(session_id)
        if state is None:
            raise SessionNotFoundError(session_id)
        try:
            await state.transport.disconnect()
        except TransportError as e:
            logger.error(f"[{session_id}] Transport disconnect failed: {e}")

    async def shutdown(self) -> None:
        """Disconnect every session and cancel outstanding work."""
        try:
            for session_id in list(self._sessions):
                # May already be gone if its transport disconnected meanwhile
                state = self.remove(session_id)
                if state is None:
                    continue
                try:
                    await state.transport.disconnect()
                except TransportError as e:
                    logger.error(f"[{session_id}] Transport disconnect failed: {e}")
        finally:
            pending = [task for task in self._tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    async def wait_idle(self) -> None:
        """Wait until every scheduled transport/routing task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # =====================================================
    # Lookups
    # =====================================================

    def find(self, session_id: str) -> Optional[SessionState]:
        return self._sessions.get(session_id)

    def get(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            raise SessionNotFoundError(session_id)
        return state

    def list_sessions(self) -> List[SessionState]:
        return list(self._sessions.values())

    def pairing_artifact(self, session_id: str) -> str:
        state = self.get(session_id)
        if state.pairing_artifact is None:
            raise PairingArtifactNotFoundError(session_id)
        return state.pairing_artifact

    def _window(self, session_id: str, user_id: str) -> ConversationWindow:
        window = self.get(session_id).find_window(user_id)
        if window is None:
            raise UserNotFoundError(session_id, user_id)
        return window

    def user_history(self, session_id: str, user_id: str) -> List[Dict[str, str]]:
        """Full stored history for one user."""
        return self._window(session_id, user_id).history()

    # =====================================================
    # Administration
    # =====================================================

    def set_prompt(self, session_id: str, prompt: str) -> None:
        """Replace the system prompt used for subsequent routing."""
        self.get(session_id).prompt = prompt
        logger.info(f"[{session_id}] Prompt updated ({len(prompt)} chars)")

    def clear_user_history(self, session_id: str, user_id: str) -> None:
        self._window(session_id, user_id).clear()
        logger.info(f"[{session_id}] History cleared for {user_id}")

    def set_inbound_handler(self, handler: InboundHandler) -> None:
        """Subscribe the coroutine that processes inbound messages."""
        self._inbound_handler = handler

    # =====================================================
    # Transport events
    # =====================================================

    async def _initialize(self, session_id: str, transport: ChatTransport) -> None:
        try:
            await transport.initialize()
        except TransportError as e:
            logger.error(f"[{session_id}] Transport initialization failed: {e}")

    def _on_pairing_ready(self, session_id: str, artifact: str) -> None:
        state = self._sessions.get(session_id)
        if state is None or state.status != SessionStatus.PENDING:
            return
        state.pairing_artifact = artifact
        logger.info(f"[{session_id}] Pairing artifact available")

    def _on_connection_ready(self, session_id: str) -> None:
        state = self._sessions.get(session_id)
        if state is None:
            return
        state.mark_ready()
        logger.info(f"[{session_id}] Session is ready")

    def _on_message(self, session_id: str, message: InboundMessage) -> None:
        if self._inbound_handler is None:
            logger.warning(f"[{session_id}] No inbound handler, dropping message")
            return
        self._spawn(
            self._inbound_handler(session_id, message.sender_id, message.text, message.is_group_chat),
            name=f"inbound-{session_id}",
        )

    def _spawn(self, coro: Coroutine, name: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background task {task.get_name()} failed", exc_info=error)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
