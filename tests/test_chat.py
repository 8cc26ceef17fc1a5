"""Tests for the chat module."""

import json

import pytest

from chartchat.config import Settings
from chartchat.core.session_store import InMemorySessionStore
from chartchat.modules.charts.schemas import ChartConfiguration, ChartIntent
from chartchat.modules.charts.service import ChartSession, ChartsService
from chartchat.modules.chat.prompts import build_system_prompt
from chartchat.modules.chat.schemas import ChatMessage, ChatRequest
from chartchat.modules.chat.service import ChatService, parse_assistant_reply

from fakes import RecordingVisual, report_with


class FakeAssistant:
    """Returns canned replies and remembers the prompts it was given."""

    def __init__(self, *replies: str):
        self.replies = list(replies)
        self.prompts = []

    async def complete(self, system_prompt: str, message: str) -> str:
        self.prompts.append((system_prompt, message))
        return self.replies.pop(0)


def reply(chat_response: str, chart_action: dict | None = None) -> str:
    data = {"chatResponse": chat_response}
    if chart_action is not None:
        data["chartAction"] = chart_action
    return json.dumps(data)


@pytest.fixture
def visual():
    return RecordingVisual("chart", "lineChart")


@pytest.fixture
def charts(visual):
    store = InMemorySessionStore()
    store.get_or_create("s1", lambda sid: ChartSession(sid, report_with(visual)))
    return ChartsService(store=store, settings=Settings())


class TestParseAssistantReply:
    def test_reply_with_action(self):
        parsed = parse_assistant_reply(
            reply("Here you go", {"yAxis": "Sales.TotalSales", "xAxis": "Time.Month", "chartType": "lineChart"})
        )

        assert parsed.chat_response == "Here you go"
        assert parsed.chart_action == ChartIntent(
            y_axis="Sales.TotalSales", x_axis="Time.Month", chart_type="lineChart"
        )

    def test_json_wrapped_in_prose(self):
        parsed = parse_assistant_reply('Sure!\n```json\n{"chatResponse": "Done", "chartAction": {"chartType": "barChart"}}\n```')

        assert parsed.chat_response == "Done"
        assert parsed.chart_action.chart_type == "barChart"

    def test_plain_text_becomes_chat_response(self):
        parsed = parse_assistant_reply("Which measure would you like to see?")

        assert parsed.chat_response == "Which measure would you like to see?"
        assert parsed.chart_action is None

    def test_unsupported_chart_type_drops_action(self):
        parsed = parse_assistant_reply(reply("Radar it is", {"chartType": "radarChart"}))

        assert parsed.chat_response == "Radar it is"
        assert parsed.chart_action is None

    def test_empty_action_is_ignored(self):
        assert parse_assistant_reply(reply("Hi", {})).chart_action is None


class TestSystemPrompt:
    def test_includes_schema_and_current_chart(self):
        current = ChartConfiguration(y_axis="Sales.TotalSales", x_axis="Time.Month", chart_type="lineChart")

        prompt = build_system_prompt(current, available_fields=["Sales.TotalSales", "Time.Month"])

        assert "Sales.TotalSales\nTime.Month" in prompt
        assert "- Chart type: lineChart" in prompt
        assert "clusteredColumnChart" in prompt

    def test_history_is_limited(self):
        history = [ChatMessage(role="user", content=f"message {i}") for i in range(6)]

        prompt = build_system_prompt(ChartConfiguration(), history=history, history_limit=2)

        assert "message 5" in prompt
        assert "message 4" in prompt
        assert "message 3" not in prompt

    def test_missing_schema_is_explained(self):
        assert "Schema temporarily unavailable" in build_system_prompt(ChartConfiguration())


class TestChatService:
    @pytest.mark.asyncio
    async def test_chart_action_is_applied(self, charts, visual):
        assistant = FakeAssistant(
            reply("Sales by month", {"yAxis": "Sales.TotalSales", "xAxis": "Time.Month", "chartType": "lineChart"})
        )
        service = ChatService(charts=charts, assistant=assistant, settings=Settings())

        response = await service.chat(ChatRequest(session_id="s1", message="show sales by month"))

        assert response.chat_response == "Sales by month"
        assert response.chart_error is None
        assert response.applied_configuration == ChartConfiguration(
            y_axis="Sales.TotalSales", x_axis="Time.Month", chart_type="lineChart"
        )
        assert [t.qualified_name for t in await visual.get_data_fields("Y")] == ["Sales.TotalSales"]
        assert assistant.prompts[0][1] == "show sales by month"

    @pytest.mark.asyncio
    async def test_clarification_leaves_chart_alone(self, charts, visual):
        service = ChatService(
            charts=charts,
            assistant=FakeAssistant(reply("By month or by district?")),
            settings=Settings(),
        )

        response = await service.chat(ChatRequest(session_id="s1", message="show me sales"))

        assert response.chart_action is None
        assert response.applied_configuration.is_empty
        assert visual.calls == []

    @pytest.mark.asyncio
    async def test_failed_action_is_reported(self, charts, visual):
        visual.fail_add.add("Category")
        service = ChatService(
            charts=charts,
            assistant=FakeAssistant(
                reply("Done", {"yAxis": "Sales.TotalSales", "xAxis": "Time.Month", "chartType": "lineChart"})
            ),
            settings=Settings(),
        )

        response = await service.chat(ChatRequest(session_id="s1", message="sales by month"))

        assert response.chart_error.code == "MANDATORY_ASSIGNMENT_FAILED"
        assert response.applied_configuration.is_empty

    @pytest.mark.asyncio
    async def test_second_turn_sees_committed_chart(self, charts):
        assistant = FakeAssistant(
            reply("Sales by month", {"yAxis": "Sales.TotalSales", "xAxis": "Time.Month", "chartType": "lineChart"}),
            reply("Bar chart", {"chartType": "barChart"}),
        )
        service = ChatService(charts=charts, assistant=assistant, settings=Settings())

        await service.chat(ChatRequest(session_id="s1", message="sales by month"))
        response = await service.chat(ChatRequest(session_id="s1", message="make it a bar chart"))

        assert "- Y-axis: Sales.TotalSales" in assistant.prompts[1][0]
        assert response.applied_configuration.chart_type == "barChart"
        assert response.applied_configuration.y_axis == "Sales.TotalSales"
