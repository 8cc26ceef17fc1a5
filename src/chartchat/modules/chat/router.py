"""
ChartChat Chat - Router.

API endpoint for chat turns.
"""

from fastapi import APIRouter, Depends

from chartchat.config import Settings, get_settings
from chartchat.deps import require_chat
from chartchat.modules.chat.schemas import ChatRequest, ChatResponse
from chartchat.modules.chat.service import ChatService
from chartchat.schemas import ErrorResponse

router = APIRouter(
    prefix="/chat",
    tags=["chat"],
    dependencies=[require_chat],
    responses={
        502: {"model": ErrorResponse, "description": "Language model unavailable"},
        503: {"model": ErrorResponse, "description": "Chat feature disabled"},
    },
)


def get_service(settings: Settings = Depends(get_settings)) -> ChatService:
    """Get chat service instance."""
    return ChatService(settings=settings)


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_service),
):
    """
    Send a chat message.

    When the model returns a chart action it is applied to the session's
    chart before responding; a failed action is reported in ``chartError``.
    """
    return await service.chat(request)
