"""
Message Router

Turns one inbound message into zero or one outbound reply.

FLOW GUARANTEES:
1. Group chats and empty messages are ignored
2. One exchange at a time per (session, user), in arrival order
3. Context = system prompt + last CONTEXT_WINDOW_TURNS turns
4. Exactly one assistant turn per successful completion
5. A failed completion leaves history untouched and sends FALLBACK_REPLY
6. Nothing here propagates an error to the transport

FLOW:
Inbound → Window(user turn) → ModelClient → Window(assistant turn) → Transport.send
"""

import asyncio
import logging
from typing import Dict, List, Optional

from llm.base import ModelClient, ModelError
from memory.types import Role
from orchestration.registry import SessionRegistry
from orchestration.state import SessionState
from transport.base import TransportError


logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, something went wrong."


class MessageRouter:
    """
    Routes inbound messages through the model client.

    Subscribes itself to the registry on construction.
    """

    DEFAULT_TIMEOUT_SECONDS = 60.0

    def __init__(
        self,
        registry: SessionRegistry,
        model_client: ModelClient,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Args:
            registry: Source of session state
            model_client: Chat-completion backend
            timeout_seconds: Upper bound for one completion call
        """
        self._registry = registry
        self._model_client = model_client
        self._timeout_seconds = timeout_seconds or self.DEFAULT_TIMEOUT_SECONDS
        registry.set_inbound_handler(self.handle_inbound)

    async def handle_inbound(
        self,
        session_id: str,
        user_id: str,
        text: Optional[str],
        is_group_chat: bool = False,
    ) -> Optional[str]:
        """
        Process one inbound message.

        Returns:
            The text dispatched to the user, or None if nothing was sent
        """
        if not text or not text.strip() or is_group_chat:
            return None

        session = self._registry.find(session_id)
        if session is None:
            logger.debug(f"[{session_id}] Message for unknown session dropped")
            return None

        async with session.user_lock(user_id):
            if not session.is_active:
                return None

            window = session.window_for(user_id)
            generation = window.generation
            user_turn = window.append(Role.USER, text)
            context = self.build_context(session.prompt, window.context())

            reply = await self._complete(session_id, user_id, context)

            if reply is None:
                window.discard(user_turn)
                outgoing = FALLBACK_REPLY
            else:
                # A clear() during the call already dropped the user turn
                if session.is_active and window.generation == generation:
                    window.append(Role.ASSISTANT, reply)
                outgoing = reply

            if not session.is_active:
                logger.info(f"[{session_id}] Session closed during completion, reply to {user_id} dropped")
                return None

            return await self._dispatch(session, user_id, outgoing)

    @staticmethod
    def build_context(prompt: str, recent_turns: List[Dict[str, str]]) -> List[Dict[str, str]]:
        """System prompt followed by the windowed history."""
        return [{"role": Role.SYSTEM.value, "content": prompt}] + recent_turns

    async def _complete(self, session_id: str, user_id: str, context: List[Dict[str, str]]) -> Optional[str]:
        try:
            return await asyncio.wait_for(
                self._model_client.complete(context),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[{session_id}] Completion for {user_id} timed out after {self._timeout_seconds}s")
        except ModelError as e:
            logger.warning(f"[{session_id}] Completion for {user_id} failed (retryable={e.retryable}): {e}")
        except Exception:
            logger.exception(f"[{session_id}] Unexpected model client error for {user_id}")
        return None

    async def _dispatch(self, session: SessionState, user_id: str, text: str) -> Optional[str]:
        try:
            await session.transport.send(user_id, text)
        except TransportError as e:
            logger.error(f"[{session.session_id}] Send to {user_id} failed: {e}")
            return None
        return text
