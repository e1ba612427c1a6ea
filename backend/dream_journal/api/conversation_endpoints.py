from fastapi import APIRouter, Depends, HTTPException
from typing import List
from ..core.errors import (
    ConversationBusyError,
    EntryNotFoundError,
    MissingCredentialError,
    DreamServiceError,
)
from ..models.conversation import ConversationState
from ..models.dream import (
    TagCatalog,
    DraftUpdate,
    SubmitRequest,
    SubmitOutcome,
    VisualizeOutcome,
    ConnectionStatus,
)
from ..services.conversation_manager import DreamConversationManager, conversation_manager

router = APIRouter(prefix="/api/dream", tags=["dream"])


def get_conversation_manager() -> DreamConversationManager:
    return conversation_manager


@router.get("/", response_model=ConversationState)
async def get_conversation(manager: DreamConversationManager = Depends(get_conversation_manager)):
    """Get the current dream conversation"""
    return manager.get_state()


@router.get("/tags", response_model=TagCatalog)
async def get_tags():
    """Get the emotion and symbol labels that can be selected"""
    return TagCatalog()


@router.put("/draft")
async def update_draft(
    draft: DraftUpdate,
    manager: DreamConversationManager = Depends(get_conversation_manager)
):
    """Store the text the user is typing"""
    return {"draft_text": manager.set_draft(draft.text)}


@router.post("/emotions/{emotion}/toggle", response_model=List[str])
async def toggle_emotion(
    emotion: str,
    manager: DreamConversationManager = Depends(get_conversation_manager)
):
    """Select or deselect an emotion; returns the current selection"""
    try:
        return manager.toggle_emotion(emotion)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/symbols/{symbol:path}/toggle", response_model=List[str])
async def toggle_symbol(
    symbol: str,
    manager: DreamConversationManager = Depends(get_conversation_manager)
):
    """Select or deselect a symbol; returns the current selection"""
    try:
        return manager.toggle_symbol(symbol)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/submit", response_model=SubmitOutcome)
async def submit(
    request: SubmitRequest,
    manager: DreamConversationManager = Depends(get_conversation_manager)
):
    """Submit the dream or a follow-up question"""
    try:
        return await manager.submit(request.text, request.emotions, request.symbols)
    except ConversationBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/entries/{entry_id}/visualize", response_model=VisualizeOutcome)
async def visualize_entry(
    entry_id: str,
    manager: DreamConversationManager = Depends(get_conversation_manager)
):
    """Generate a cartoon image for the initial dream analysis"""
    try:
        return await manager.visualize(entry_id)
    except EntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConversationBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/reset", response_model=ConversationState)
async def reset_conversation(manager: DreamConversationManager = Depends(get_conversation_manager)):
    """Start a new dream"""
    return await manager.reset()


@router.get("/connection", response_model=ConnectionStatus)
async def check_connection(manager: DreamConversationManager = Depends(get_conversation_manager)):
    """Check that the OpenAI API key works"""
    try:
        reply = await manager.gateway.test_connection()
        return ConnectionStatus(ok=True, reply=reply)
    except MissingCredentialError as e:
        raise HTTPException(status_code=503, detail=e.message)
    except DreamServiceError as e:
        raise HTTPException(status_code=502, detail=e.message)
