"""
Local Transport Routes

Drive the in-process LocalTransport over HTTP: confirm pairing, inject
inbound messages and read what the relay sent back.
Mounted only when the local transport backend is active.
"""

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_session_registry
from orchestration.errors import NotFoundError
from orchestration.registry import SessionRegistry
from schemas.session import InjectMessageRequest, MessageResponse, OutboxMessage, OutboxResponse
from transport.base import TransportError
from transport.local import LocalTransport


router = APIRouter()


def _local_transport(registry: SessionRegistry, session_id: str) -> LocalTransport:
    try:
        transport = registry.get(session_id).transport
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    if not isinstance(transport, LocalTransport):
        raise HTTPException(status_code=404, detail="Session does not use the local transport")
    return transport


@router.post("/{session_id}/pair", response_model=MessageResponse)
async def confirm_pairing(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> MessageResponse:
    transport = _local_transport(registry, session_id)
    try:
        transport.confirm_pairing()
    except TransportError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return MessageResponse(message="Session paired")


@router.post("/{session_id}/messages", response_model=MessageResponse, status_code=202)
async def inject_message(
    session_id: str,
    request: InjectMessageRequest,
    registry: SessionRegistry = Depends(get_session_registry),
) -> MessageResponse:
    transport = _local_transport(registry, session_id)
    try:
        transport.inject(request.sender_id, request.text, request.is_group_chat)
    except TransportError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return MessageResponse(message="Message accepted")


@router.get("/{session_id}/outbox", response_model=OutboxResponse)
async def get_outbox(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> OutboxResponse:
    transport = _local_transport(registry, session_id)
    return OutboxResponse(
        session_id=session_id,
        messages=[OutboxMessage(**item) for item in transport.outbox],
    )
