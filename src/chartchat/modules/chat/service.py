"""
ChartChat Chat - Service.

One chat turn: ask the model for a reply, then apply the chart action it
carries (if any) to the session's chart.
"""

import json
import logging
import re

from pydantic import ValidationError

from chartchat.config import Settings, get_settings
from chartchat.core.gemini import generate_json
from chartchat.exceptions import ChartChatException
from chartchat.modules.charts.schemas import ChartIntent
from chartchat.modules.charts.service import ChartsService
from chartchat.modules.chat.prompts import build_system_prompt
from chartchat.modules.chat.schemas import AssistantReply, ChatRequest, ChatResponse
from chartchat.schemas import ErrorDetail

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class GeminiChartAssistant:
    """Language model collaborator backed by the Gemini Developer API."""

    def __init__(self, model: str | None = None):
        self.model = model

    async def complete(self, system_prompt: str, message: str) -> str:
        return await generate_json(system_prompt, message, model=self.model)


def parse_assistant_reply(text: str) -> AssistantReply:
    """
    Parse the model's reply.

    Text that holds no JSON object becomes a plain chat response. A chart
    action that fails validation is dropped so the chat text still reaches
    the user.
    """
    text = (text or "").strip()
    match = _JSON_OBJECT.search(text)
    if not match:
        return AssistantReply(chat_response=text)

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.warning("Model reply was not valid JSON; returning it as chat text")
        return AssistantReply(chat_response=text)
    if not isinstance(data, dict):
        return AssistantReply(chat_response=text)

    chart_action = None
    raw_action = data.get("chartAction")
    if raw_action:
        try:
            chart_action = ChartIntent.model_validate(raw_action)
        except ValidationError as e:
            logger.warning(f"Dropping invalid chart action {raw_action}: {e.error_count()} error(s)")

    return AssistantReply(
        chat_response=str(data.get("chatResponse") or ""),
        chart_action=chart_action,
    )


class ChatService:
    """Service for chat turns."""

    def __init__(
        self,
        charts: ChartsService | None = None,
        assistant=None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.charts = charts or ChartsService(settings=self.settings)
        self.assistant = assistant or GeminiChartAssistant(model=self.settings.gemini.model)

    async def chat(self, request: ChatRequest) -> ChatResponse:
        session = self.charts.get_session(request.session_id)
        current = session.get_applied_configuration()

        system_prompt = build_system_prompt(
            current,
            available_fields=request.available_fields,
            history=request.chat_history,
            history_limit=self.settings.gemini.history_limit,
        )
        raw = await self.assistant.complete(system_prompt, request.message)
        reply = parse_assistant_reply(raw)

        if reply.chart_action is None:
            logger.info(f"[{request.session_id}] No chart action in reply (clarification or schema answer)")
            return ChatResponse(chat_response=reply.chat_response, applied_configuration=current)

        try:
            outcome = await session.apply_intent(reply.chart_action)
        except ChartChatException as e:
            logger.warning(f"[{request.session_id}] Chart action failed: {e.code} - {e.message}")
            return ChatResponse(
                chat_response=reply.chat_response,
                chart_action=reply.chart_action,
                applied_configuration=session.get_applied_configuration(),
                chart_error=ErrorDetail(code=e.code, message=e.message, details=e.details),
            )

        return ChatResponse(
            chat_response=reply.chat_response,
            chart_action=reply.chart_action,
            applied_configuration=outcome.configuration,
        )
