import pytest
from unittest.mock import MagicMock, AsyncMock
from langchain_core.messages import AIMessage

from orchestration.registry import SessionRegistry
from orchestration.router import MessageRouter
from transport.local import LocalTransport
from tests.helpers import FakeModelClient


@pytest.fixture
def fake_model():
    return FakeModelClient()


@pytest.fixture
def registry():
    return SessionRegistry(transport_factory=LocalTransport)


@pytest.fixture
def router(registry, fake_model):
    return MessageRouter(registry, fake_model, timeout_seconds=5)


@pytest.fixture
def mock_llm():
    mock = MagicMock()
    # Mock ainvoke for chat model
    mock.ainvoke = AsyncMock(return_value=AIMessage(content="Mocked Response"))
    return mock
