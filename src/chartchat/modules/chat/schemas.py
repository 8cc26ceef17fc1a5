"""
ChartChat Chat - Schemas.

Pydantic models for chat turns and the model's structured reply.
"""

from typing import Literal

from pydantic import Field

from chartchat.modules.charts.schemas import CamelModel, ChartConfiguration, ChartIntent
from chartchat.schemas import ErrorDetail


class ChatMessage(CamelModel):
    """One earlier turn of the conversation."""

    role: Literal["user", "assistant"]
    content: str


# =============================================================================
# Request Schemas
# =============================================================================


class ChatRequest(CamelModel):
    """A chat message addressed to a chart session."""

    session_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    chat_history: list[ChatMessage] = Field(default_factory=list)
    available_fields: list[str] = Field(
        default_factory=list,
        description="Dataset fields as Table.Field, offered to the model as the schema",
    )


# =============================================================================
# Response Schemas
# =============================================================================


class AssistantReply(CamelModel):
    """Structured reply expected from the language model."""

    chat_response: str
    chart_action: ChartIntent | None = None


class ChatResponse(CamelModel):
    """Chat answer plus the outcome of any chart action it carried."""

    chat_response: str
    chart_action: ChartIntent | None = None
    applied_configuration: ChartConfiguration
    chart_error: ErrorDetail | None = None
