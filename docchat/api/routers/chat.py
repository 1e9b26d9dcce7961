"""
Chat API endpoint.

Routes: POST /chat

Dependencies: docchat.application.services, docchat.models
System role: Chat HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from docchat.api.deps import get_chat_service
from docchat.application.services.chat_service import ChatService
from docchat.core.exceptions import DocChatException
from docchat.models.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    Answer a question from the indexed documents.

    Raises:
        HTTPException(400): Empty question
        HTTPException(500): Retrieval or completion failure
    """
    question = request.question()
    if not question:
        raise HTTPException(status_code=400, detail="Empty question")

    try:
        return await chat_service.answer(question)
    except DocChatException as e:
        logger.exception("Chat failed", extra={"error_type": type(e).__name__})
        raise HTTPException(status_code=500, detail=e.message)
    except Exception as e:
        logger.exception("Chat failed unexpectedly")
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {e}")
