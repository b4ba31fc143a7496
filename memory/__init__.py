# Memory Package
from memory.types import CONTEXT_WINDOW_TURNS, ConversationWindow, Role, Turn

__all__ = ["CONTEXT_WINDOW_TURNS", "ConversationWindow", "Role", "Turn"]
