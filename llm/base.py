"""
Model Client Interface

Stateless request/response chat completion.

DESIGN RULES:
- Context in, text out
- Every upstream failure surfaces as ModelError
- No provider types cross this boundary
"""

from abc import ABC, abstractmethod
from typing import Mapping, Sequence


class ModelError(Exception):
    """
    Chat completion failed.

    `retryable` separates transient failures (timeouts, rate limits,
    connection drops) from terminal ones. Callers currently treat both
    the same way.
    """

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class ModelTimeoutError(ModelError):
    """Completion did not finish within the allowed time."""

    def __init__(self, message: str = "Model completion timed out"):
        super().__init__(message, retryable=True)


class ModelResponseError(ModelError):
    """Upstream returned something that is not a usable reply."""

    def __init__(self, message: str = "Malformed model response"):
        super().__init__(message, retryable=False)


class ModelClient(ABC):
    """
    Chat-completion backend.
    """

    @abstractmethod
    async def complete(self, context: Sequence[Mapping[str, str]]) -> str:
        """
        Produce the assistant reply for `context`.

        Args:
            context: Ordered {"role", "content"} turns, system prompt first

        Returns:
            str: Reply text

        Raises:
            ModelError: On any upstream failure
        """
        pass
