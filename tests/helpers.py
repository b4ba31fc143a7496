"""
Shared test doubles and async helpers.
"""

import asyncio
from typing import Dict, List, Mapping, Optional, Sequence

from llm.base import ModelClient
from orchestration.registry import SessionRegistry


class FakeModelClient(ModelClient):
    """
    Scripted model client.

    Records every context it receives. Calls listed in `gates` (1-based)
    block until the matching event is set.
    """

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.calls: List[List[Dict[str, str]]] = []
        self.replies = list(replies or [])
        self.error = error
        self.gates: Dict[int, asyncio.Event] = {}

    def hold(self, call_number: int) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[call_number] = gate
        return gate

    async def complete(self, context: Sequence[Mapping[str, str]]) -> str:
        self.calls.append([dict(turn) for turn in context])
        call_number = len(self.calls)
        gate = self.gates.get(call_number)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return f"reply {call_number}"


async def settle(rounds: int = 10) -> None:
    """Let scheduled tasks run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def open_session(registry: SessionRegistry) -> str:
    """Create a session, let its transport initialize and confirm pairing."""
    session_id = registry.create()
    await registry.wait_idle()
    registry.get(session_id).transport.confirm_pairing()
    return session_id
