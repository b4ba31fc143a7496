"""
Session API Routes

Thin administrative layer over the SessionRegistry.
Contains NO routing or model logic.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_session_registry
from orchestration.errors import NotFoundError
from orchestration.registry import SessionRegistry
from schemas.session import (
    HistoryResponse,
    MessageResponse,
    PairingArtifactResponse,
    SessionCreated,
    SessionSummary,
    SetPromptRequest,
    TurnView,
)


router = APIRouter()


@router.get("/session/new", response_model=SessionCreated, status_code=status.HTTP_201_CREATED)
async def create_session(registry: SessionRegistry = Depends(get_session_registry)) -> SessionCreated:
    """
    Create a session and start connecting its transport.

    Poll /qr/{id} for the pairing code and /session/{id} for readiness.
    """
    session_id = registry.create()
    return SessionCreated(session_id=session_id, status=registry.get(session_id).status)


@router.get("/sessions", response_model=List[SessionSummary])
async def list_sessions(registry: SessionRegistry = Depends(get_session_registry)) -> List[SessionSummary]:
    return [SessionSummary.from_state(state) for state in registry.list_sessions()]


@router.get("/session/{session_id}", response_model=SessionSummary)
async def get_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> SessionSummary:
    try:
        return SessionSummary.from_state(registry.get(session_id))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.delete("/session/{session_id}", response_model=MessageResponse)
async def delete_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> MessageResponse:
    try:
        await registry.disconnect(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    return MessageResponse(message="Session disconnected")


@router.get("/qr/{session_id}", response_model=PairingArtifactResponse)
async def get_pairing_artifact(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> PairingArtifactResponse:
    """
    Return the raw pairing payload; the front-end renders it as a QR code.
    """
    try:
        payload = registry.pairing_artifact(session_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="QR not found")
    return PairingArtifactResponse(session_id=session_id, payload=payload)


@router.post("/session/{session_id}/set-prompt", response_model=MessageResponse)
async def set_prompt(
    session_id: str,
    request: SetPromptRequest,
    registry: SessionRegistry = Depends(get_session_registry),
) -> MessageResponse:
    try:
        registry.set_prompt(session_id, request.prompt)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    return MessageResponse(message="Prompt updated")


@router.post("/session/{session_id}/clear-history/{user_id}", response_model=MessageResponse)
async def clear_user_history(
    session_id: str,
    user_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> MessageResponse:
    try:
        registry.clear_user_history(session_id, user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session or user not found")
    return MessageResponse(message="User history cleared")


@router.get("/session/{session_id}/history/{user_id}", response_model=HistoryResponse)
async def get_user_history(
    session_id: str,
    user_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> HistoryResponse:
    try:
        turns = registry.user_history(session_id, user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Session or user not found")
    return HistoryResponse(
        session_id=session_id,
        user_id=user_id,
        turns=[TurnView(**turn) for turn in turns],
    )
