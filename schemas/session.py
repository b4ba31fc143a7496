from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from orchestration.state import SessionState, SessionStatus


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class SessionCreated(BaseModel):
    session_id: str = Field(..., description="Opaque session token")
    status: SessionStatus = Field(..., description="Lifecycle status at creation")


class SessionSummary(BaseModel):
    """Administrative view of one session."""
    session_id: str
    status: SessionStatus
    prompt: str
    users: List[str] = Field(default_factory=list, description="Users with stored history")
    has_pairing_artifact: bool = False
    created_at: datetime

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionSummary":
        return cls(
            session_id=state.session_id,
            status=state.status,
            prompt=state.prompt,
            users=sorted(state.users),
            has_pairing_artifact=state.pairing_artifact is not None,
            created_at=state.created_at,
        )


class PairingArtifactResponse(BaseModel):
    session_id: str
    payload: str = Field(..., description="Pairing code to render for the account owner")


class SetPromptRequest(BaseModel):
    prompt: str = Field(..., description="New system prompt for the session")


class TurnView(BaseModel):
    role: str
    content: str


class HistoryResponse(BaseModel):
    session_id: str
    user_id: str
    turns: List[TurnView] = Field(default_factory=list)


class InjectMessageRequest(BaseModel):
    """Inbound message delivered through the local transport."""
    sender_id: str
    text: Optional[str] = None
    is_group_chat: bool = False


class OutboxMessage(BaseModel):
    recipient_id: str
    text: str


class OutboxResponse(BaseModel):
    session_id: str
    messages: List[OutboxMessage] = Field(default_factory=list)
