"""
Memory Types

Data structures for per-user conversation memory.

DESIGN RULES:
- Turns are immutable
- Full history is kept for audit and clear operations
- Only the context view is windowed
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List


# Number of most recent turns sent to the model alongside the system prompt.
CONTEXT_WINDOW_TURNS = 10


class Role(str, Enum):
    """Author of a conversation turn."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Turn:
    """
    A single conversation turn.
    """
    role: Role
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_message(self) -> Dict[str, str]:
        """Plain role/content mapping used for model context and API output."""
        return {"role": self.role.value, "content": self.content}


@dataclass
class ConversationWindow:
    """
    Append-only message log for one user within one session.

    The full log is retained; `context()` exposes at most the last
    `window_size` turns.
    """
    window_size: int = CONTEXT_WINDOW_TURNS
    turns: List[Turn] = field(default_factory=list)
    generation: int = 0

    def append(self, role: Role, content: str) -> Turn:
        """Record a turn at the end of the full history."""
        turn = Turn(role=Role(role), content=content)
        self.turns.append(turn)
        return turn

    def discard(self, turn: Turn) -> bool:
        """
        Remove `turn` if it is still the most recent entry.

        Returns:
            True if the turn was removed
        """
        if self.turns and self.turns[-1] is turn:
            self.turns.pop()
            return True
        return False

    def context(self) -> List[Dict[str, str]]:
        """Most recent turns, bounded by the window size."""
        return [turn.to_message() for turn in self.turns[-self.window_size:]]

    def history(self) -> List[Dict[str, str]]:
        """Copy of the full history."""
        return [turn.to_message() for turn in self.turns]

    def clear(self) -> None:
        """Empty the history. The window itself survives."""
        self.turns = []
        self.generation += 1

    def is_empty(self) -> bool:
        return len(self.turns) == 0

    def __len__(self) -> int:
        return len(self.turns)
