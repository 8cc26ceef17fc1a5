"""
ChartChat Charts - Schemas.

Pydantic models for chart intents and the session's chart configuration.
"""

from dataclasses import dataclass
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


ChartType = Literal[
    "columnChart",
    "barChart",
    "lineChart",
    "areaChart",
    "pieChart",
    "donutChart",
    "clusteredColumnChart",
    "stackedColumnChart",
]

SUPPORTED_CHART_TYPES: tuple[str, ...] = get_args(ChartType)

CONFIGURATION_FIELDS = ("y_axis", "x_axis", "chart_type", "series")
REQUIRED_FIELDS = ("y_axis", "x_axis", "chart_type")


class CamelModel(BaseModel):
    """Base model serialized with the camelCase names used on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Field references
# =============================================================================


@dataclass(frozen=True)
class FieldReference:
    """A dataset field addressed as Table.Field."""

    table: str | None
    field: str

    @property
    def qualified_name(self) -> str:
        return f"{self.table}.{self.field}" if self.table else self.field


# =============================================================================
# Intent / configuration
# =============================================================================


class ChartIntent(CamelModel):
    """Sparse desired chart state produced by the language model."""

    y_axis: str | None = None
    x_axis: str | None = None
    chart_type: ChartType | None = None
    series: str | None = None

    @field_validator("y_axis", "x_axis", "chart_type", "series", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ChartConfiguration(CamelModel):
    """Session-local mirror of the chart's configuration."""

    y_axis: str | None = None
    x_axis: str | None = None
    chart_type: str | None = None
    series: str | None = None

    def missing_required(self) -> list[str]:
        """Return wire names of required fields that are still empty."""
        return [to_camel(name) for name in REQUIRED_FIELDS if getattr(self, name) is None]

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in CONFIGURATION_FIELDS)


# =============================================================================
# Request / Response Schemas
# =============================================================================


class ApplyIntentResponse(CamelModel):
    """Acknowledgment returned after an intent was applied."""

    applied_configuration: ChartConfiguration
    committed: bool
    visual_type: str | None = None
    series_role: str | None = None


class SessionEndedResponse(CamelModel):
    """Returned when a chart session is dropped."""

    session_id: str
    ended: bool
