"""
LangChain Model Client

Encapsulates all LangChain logic for the relay.
Exposes simple Python types only - NO LangChain objects leak out.

DESIGN RULES:
- LangChain stays INSIDE this module
- Context is a list of {"role", "content"} dicts
- Returns str only; failures become ModelError
"""

import logging
import time
from typing import List, Mapping, Optional, Sequence

import openai
from langchain_community.callbacks import get_openai_callback
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from app.core.config import settings
from llm.base import ModelClient, ModelError, ModelResponseError, ModelTimeoutError


logger = logging.getLogger(__name__)

_MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}

_RETRYABLE_ERRORS = (openai.RateLimitError, openai.APIConnectionError)


def to_langchain_messages(context: Sequence[Mapping[str, str]]) -> List[BaseMessage]:
    """Convert role/content dicts to LangChain message objects."""
    messages = []
    for turn in context:
        message_type = _MESSAGE_TYPES.get(turn["role"])
        if message_type is None:
            raise ModelResponseError(f"Unsupported role in context: {turn['role']}")
        messages.append(message_type(content=turn["content"]))
    return messages


class LangChainModelClient(ModelClient):
    """
    ModelClient backed by LangChain's ChatOpenAI.

    The chat model is built on first use so the app can start without
    reaching the provider.
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
        api_key: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        llm: Optional[ChatOpenAI] = None,
    ):
        self.model_name = model_name or settings.openai_model
        self._temperature = settings.openai_temperature if temperature is None else temperature
        self._api_key = api_key or settings.openai_api_key
        self._timeout_seconds = timeout_seconds or settings.model_timeout_seconds
        self._llm = llm

    def _get_llm(self) -> ChatOpenAI:
        """Get configured ChatOpenAI instance."""
        if self._llm is None:
            self._llm = ChatOpenAI(
                model=self.model_name,
                temperature=self._temperature,
                api_key=self._api_key,
                timeout=self._timeout_seconds,
                max_retries=0,
            )
        return self._llm

    async def complete(self, context: Sequence[Mapping[str, str]]) -> str:
        messages = to_langchain_messages(context)
        start_time = time.time()

        try:
            with get_openai_callback() as cb:
                response = await self._get_llm().ainvoke(messages)
                tokens_used = cb.total_tokens
        except openai.APITimeoutError as e:
            raise ModelTimeoutError(f"{self.model_name} timed out: {e}") from e
        except _RETRYABLE_ERRORS as e:
            raise ModelError(f"{self.model_name} unavailable: {e}", retryable=True) from e
        except openai.OpenAIError as e:
            raise ModelError(f"{self.model_name} request failed: {e}") from e
        except Exception as e:
            raise ModelError(f"{self.model_name} call failed: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise ModelResponseError(f"{self.model_name} returned an empty reply")

        logger.debug(
            f"Completion from {self.model_name}: {len(messages)} messages, "
            f"{tokens_used} tokens, {latency_ms}ms"
        )
        return content
