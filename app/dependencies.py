"""
FastAPI Dependencies

All object creation happens here, not per request.

RULE: Routes talk to the SessionRegistry only. The MessageRouter is wired
to the registry here and is reached through transport events.
"""

from typing import Dict, Optional

from app.core.config import settings
from llm.base import ModelClient
from llm.langchain_client import LangChainModelClient
from orchestration.registry import SessionRegistry, TransportFactory
from orchestration.router import MessageRouter
from transport.local import LocalTransport


TRANSPORT_BACKENDS: Dict[str, TransportFactory] = {
    "local": LocalTransport,
}

# Process-scoped registry, created on first use
_registry: Optional[SessionRegistry] = None


def build_relay(
    model_client: Optional[ModelClient] = None,
    transport_factory: Optional[TransportFactory] = None,
) -> SessionRegistry:
    """
    Wire a SessionRegistry with its MessageRouter.

    Args:
        model_client: Chat-completion backend (LangChain/OpenAI by default)
        transport_factory: Transport per session (from settings by default)

    Returns:
        SessionRegistry: Registry with the router subscribed to its events
    """
    if transport_factory is None:
        try:
            transport_factory = TRANSPORT_BACKENDS[settings.transport_backend]
        except KeyError:
            raise ValueError(f"Unknown transport backend: {settings.transport_backend}") from None

    registry = SessionRegistry(
        transport_factory=transport_factory,
        default_prompt=settings.default_prompt,
    )
    MessageRouter(
        registry=registry,
        model_client=model_client or LangChainModelClient(),
        timeout_seconds=settings.model_timeout_seconds,
    )
    return registry


def get_session_registry() -> SessionRegistry:
    """Get the process-wide session registry."""
    global _registry
    if _registry is None:
        _registry = build_relay()
    return _registry


async def shutdown_session_registry() -> None:
    """Disconnect all sessions of the process-wide registry, if it was created."""
    global _registry
    if _registry is not None:
        await _registry.shutdown()
        _registry = None
