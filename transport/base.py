"""
Chat Transport Interface

Abstract messaging-platform client bound to one session.
Platform protocol, pairing UI and browser automation live behind this
boundary; the relay only reacts to events and calls operations.

EVENTS (transport -> relay):
    pairing_ready(artifact)
    connection_ready()
    disconnected()
    message_received(InboundMessage)

OPERATIONS (relay -> transport):
    initialize()
    send(recipient_id, text)
    disconnect()
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class TransportError(Exception):
    """Raised when a transport fails to initialize, send or disconnect."""


@dataclass(frozen=True)
class InboundMessage:
    """A message received from the messaging platform."""
    sender_id: str
    text: Optional[str]
    is_group_chat: bool = False


class TransportEventHandler(ABC):
    """
    Subscriber for transport events.

    Handlers must return quickly; long work is scheduled, not run inline.
    """

    @abstractmethod
    def pairing_ready(self, artifact: str) -> None:
        pass

    @abstractmethod
    def connection_ready(self) -> None:
        pass

    @abstractmethod
    def disconnected(self) -> None:
        pass

    @abstractmethod
    def message_received(self, message: InboundMessage) -> None:
        pass


class ChatTransport(ABC):
    """
    Messaging-platform client for a single session.
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self._handler: Optional[TransportEventHandler] = None

    def subscribe(self, handler: TransportEventHandler) -> None:
        """Register the event handler. A transport has exactly one subscriber."""
        self._handler = handler

    @abstractmethod
    async def initialize(self) -> None:
        """Start connecting. Pairing and readiness are reported through events."""
        pass

    @abstractmethod
    async def send(self, recipient_id: str, text: str) -> None:
        """Deliver `text` to `recipient_id`. Raises TransportError on failure."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the platform connection."""
        pass
