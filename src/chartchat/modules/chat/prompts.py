"""
ChartChat Chat - Prompts.

System prompt for turning chat messages into chart actions.
"""

from chartchat.modules.charts.schemas import SUPPORTED_CHART_TYPES, ChartConfiguration
from chartchat.modules.chat.schemas import ChatMessage

BASE_PROMPT = """You are a chart authoring assistant for an embedded analytics report.
You create and modify ONE chart by choosing fields from the dataset schema, and you
answer questions about which tables and fields are available.

FIELD NAMES:
- Always use the full Table.Field form (e.g. "Sales.TotalSales", "Time.Month").
- Only use fields listed in the SCHEMA section. Never invent field names.
- If the user uses a synonym, map it to the closest listed field and say so.

CHART TYPES: {chart_types}
- Time dimension only (e.g. "sales by month"): lineChart.
- Categorical dimension only (e.g. "sales by district"): columnChart.
- Time and a categorical grouping (e.g. "sales by month by district"): clusteredColumnChart,
  with the time field on xAxis and the grouping field in "series".
- Respect an explicitly requested chart type.

AXES:
- yAxis holds the measure and xAxis the dimension, except for barChart where they are
  swapped (dimension on yAxis, measure on xAxis).
- For pie and donut charts, xAxis holds the slices and yAxis the values.

RESPONSE FORMAT (JSON only, no extra commentary):
{{"chatResponse": "<text shown to the user>",
  "chartAction": {{"yAxis": "...", "xAxis": "...", "chartType": "...", "series": "..."}}}}

- Omit "chartAction" when you need clarification (e.g. "show me sales" without a grouping).
- Include "series" only for grouped charts.
- For partial updates ("make it a bar chart") always send yAxis, xAxis and chartType,
  re-evaluating the axes for the new chart type."""


def _schema_section(available_fields: list[str]) -> str:
    if not available_fields:
        return (
            "\n\nSCHEMA:\nSchema temporarily unavailable. If the user asks about the schema, "
            "explain that the dataset metadata could not be retrieved."
        )
    return "\n\nSCHEMA (Table.Field):\n" + "\n".join(available_fields)


def _current_chart_section(current: ChartConfiguration) -> str:
    if current.is_empty:
        return (
            "\n\nCURRENT CHART: none yet. If the user asks for a partial change, "
            "ask them to create a chart first."
        )
    return (
        "\n\nCURRENT CHART:\n"
        f"- Y-axis: {current.y_axis or 'none'}\n"
        f"- X-axis: {current.x_axis or 'none'}\n"
        f"- Chart type: {current.chart_type or 'unknown'}\n"
        f"- Series: {current.series or 'none'}\n"
        "Requests like \"change it\" refer to this chart."
    )


def _history_section(history: list[ChatMessage]) -> str:
    if not history:
        return ""
    lines = [f"{m.role.capitalize()}: {m.content}" for m in history]
    return (
        "\n\nRECENT CONVERSATION:\n"
        + "\n".join(lines)
        + "\nIf your last message asked for clarification and the user's message answers it, "
        "combine both into the complete chart action."
    )


def build_system_prompt(
    current: ChartConfiguration,
    available_fields: list[str] | None = None,
    history: list[ChatMessage] | None = None,
    history_limit: int = 4,
) -> str:
    """Assemble the system prompt for one chat turn."""
    recent = (history or [])[-history_limit:] if history_limit else []
    return (
        BASE_PROMPT.format(chart_types=", ".join(SUPPORTED_CHART_TYPES))
        + _schema_section(available_fields or [])
        + _current_chart_section(current)
        + _history_section(recent)
    )
