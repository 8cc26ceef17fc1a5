"""
ChartChat Host - Visual host interface.

The embedded analytics host owns the report, its pages and their visuals.
ChartChat only sees the low-level authoring surface below: per-role field
lists addressed by index, append-only adds, and chart type changes. Every
call is a remote round trip.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from chartchat.exceptions import HostTimeoutException

T = TypeVar("T")

# Data role names recognized by the host.
ROLE_Y = "Y"
ROLE_CATEGORY = "Category"
ROLE_LEGEND = "Legend"
ROLE_SERIES = "Series"
ROLE_COLUMN_SERIES = "ColumnSeries"

MEASURE_SCHEMA = "http://powerbi.com/product/schema#measure"
COLUMN_SCHEMA = "http://powerbi.com/product/schema#column"


class FieldTarget(BaseModel):
    """A field as the host addresses it: a measure or a column of a table."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_: str | None = Field(default=None, alias="$schema")
    table: str | None = None
    column: str | None = None
    measure: str | None = None

    @classmethod
    def for_measure(cls, table: str | None, measure: str) -> "FieldTarget":
        return cls(schema_=MEASURE_SCHEMA, table=table, measure=measure)

    @classmethod
    def for_column(cls, table: str | None, column: str) -> "FieldTarget":
        return cls(schema_=COLUMN_SCHEMA, table=table, column=column)

    @property
    def kind(self) -> Literal["measure", "column"]:
        return "measure" if self.measure is not None else "column"

    @property
    def name(self) -> str | None:
        return self.measure if self.measure is not None else self.column

    @property
    def qualified_name(self) -> str | None:
        """Table.Field form, or the bare field when no table is known."""
        if self.name is None:
            return None
        return f"{self.table}.{self.name}" if self.table else self.name

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"$schema": self.schema_, "table": self.table}
        payload[self.kind] = self.name
        return payload


class Visual(ABC):
    """A single chart element hosted on a report page."""

    name: str
    type: str
    title: str | None

    @abstractmethod
    async def get_data_fields(self, role: str) -> list[FieldTarget]:
        """Return the ordered fields assigned to a data role."""

    @abstractmethod
    async def remove_data_field(self, role: str, index: int) -> None:
        """Remove the field at a zero-based index of a data role."""

    @abstractmethod
    async def add_data_field(self, role: str, target: FieldTarget) -> None:
        """Append a field to a data role."""

    @abstractmethod
    async def change_type(self, kind: str) -> None:
        """Switch the visual to another chart kind."""


class Page(ABC):
    """A report page."""

    name: str
    display_name: str | None
    is_active: bool

    @abstractmethod
    async def get_visuals(self) -> list[Visual]:
        """Enumerate the visuals on the page in host order."""


class Report(ABC):
    """An embedded report."""

    @abstractmethod
    async def get_pages(self) -> list[Page]:
        """Enumerate report pages."""

    async def aclose(self) -> None:
        """Release transport resources held by the report."""


async def call_host(awaitable: Awaitable[T], operation: str, timeout_seconds: float | None) -> T:
    """Await a host round trip, bounded by ``timeout_seconds``."""
    if timeout_seconds is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise HostTimeoutException(operation, timeout_seconds)
