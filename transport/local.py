"""
Local Transport

In-process ChatTransport used for development, demos and tests.
Pairing is confirmed explicitly, inbound messages are injected by hand
and outbound messages are kept in an outbox.
"""

import logging
import secrets
from typing import Dict, List, Optional

from transport.base import ChatTransport, InboundMessage, TransportError


logger = logging.getLogger(__name__)


class LocalTransport(ChatTransport):
    """
    Loopback transport with no network side.

    Lifecycle:
        initialize()      -> pairing_ready(payload)
        confirm_pairing() -> connection_ready()
        disconnect()      -> disconnected()
    """

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.outbox: List[Dict[str, str]] = []
        self.pairing_payload: Optional[str] = None
        self.ready = False
        self.closed = False

    async def initialize(self) -> None:
        if self.closed:
            raise TransportError(f"Transport for {self.session_id} is closed")
        self.pairing_payload = f"local-pair:{self.session_id}:{secrets.token_urlsafe(16)}"
        logger.info(f"[{self.session_id}] Local transport initialized, awaiting pairing")
        if self._handler:
            self._handler.pairing_ready(self.pairing_payload)

    def confirm_pairing(self) -> None:
        """Simulate the account owner scanning the pairing code."""
        if self.closed:
            raise TransportError(f"Transport for {self.session_id} is closed")
        if self.pairing_payload is None:
            raise TransportError(f"Transport for {self.session_id} has not been initialized")
        self.ready = True
        self.pairing_payload = None
        if self._handler:
            self._handler.connection_ready()

    def inject(self, sender_id: str, text: Optional[str], is_group_chat: bool = False) -> None:
        """Deliver an inbound message as if it came from the platform."""
        if not self.ready or self.closed:
            raise TransportError(f"Transport for {self.session_id} is not connected")
        if self._handler:
            self._handler.message_received(
                InboundMessage(sender_id=sender_id, text=text, is_group_chat=is_group_chat)
            )

    async def send(self, recipient_id: str, text: str) -> None:
        if not self.ready or self.closed:
            raise TransportError(f"Transport for {self.session_id} is not connected")
        self.outbox.append({"recipient_id": recipient_id, "text": text})
        logger.debug(f"[{self.session_id}] -> {recipient_id}: {len(text)} chars")

    async def disconnect(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.ready = False
        self.pairing_payload = None
        if self._handler:
            self._handler.disconnected()
