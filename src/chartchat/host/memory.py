"""
ChartChat Host - In-memory report.

Process-local stand-in for the embedded analytics host. Each chart kind
exposes its own set of data roles, so role-name differences between kinds
(Legend vs Series, no grouping role on pie charts) behave like the real host.
"""

from __future__ import annotations

import logging

from chartchat.exceptions import HostException, NothingToRemoveException, RoleUnavailableException
from chartchat.host.base import (
    ROLE_CATEGORY,
    ROLE_LEGEND,
    ROLE_SERIES,
    ROLE_Y,
    FieldTarget,
    Page,
    Report,
    Visual,
)

logger = logging.getLogger(__name__)


CHART_ROLES: dict[str, tuple[str, ...]] = {
    "columnChart": (ROLE_CATEGORY, ROLE_Y, ROLE_LEGEND),
    "barChart": (ROLE_CATEGORY, ROLE_Y, ROLE_LEGEND),
    "clusteredColumnChart": (ROLE_CATEGORY, ROLE_Y, ROLE_LEGEND),
    "stackedColumnChart": (ROLE_CATEGORY, ROLE_Y, ROLE_LEGEND),
    "lineChart": (ROLE_CATEGORY, ROLE_Y, ROLE_LEGEND),
    "areaChart": (ROLE_CATEGORY, ROLE_Y, ROLE_SERIES),
    "pieChart": (ROLE_CATEGORY, ROLE_Y),
    "donutChart": (ROLE_CATEGORY, ROLE_Y),
    # Non-chart visuals the demo page carries alongside the chart.
    "card": ("Values",),
    "slicer": ("Values",),
    "textbox": (),
}


class InMemoryVisual(Visual):
    def __init__(
        self,
        name: str,
        visual_type: str,
        title: str | None = None,
        fields: dict[str, list[FieldTarget]] | None = None,
    ):
        if visual_type not in CHART_ROLES:
            raise ValueError(f"Unknown visual type: {visual_type}")
        self.name = name
        self.type = visual_type
        self.title = title
        self._fields: dict[str, list[FieldTarget]] = {role: [] for role in CHART_ROLES[visual_type]}
        for role, targets in (fields or {}).items():
            self._role(role).extend(targets)

    def _role(self, role: str) -> list[FieldTarget]:
        try:
            return self._fields[role]
        except KeyError:
            raise RoleUnavailableException(role, self.type)

    async def get_data_fields(self, role: str) -> list[FieldTarget]:
        return list(self._role(role))

    async def remove_data_field(self, role: str, index: int) -> None:
        fields = self._role(role)
        if index < 0 or index >= len(fields):
            raise NothingToRemoveException(role, index)
        del fields[index]

    async def add_data_field(self, role: str, target: FieldTarget) -> None:
        self._role(role).append(target)

    async def change_type(self, kind: str) -> None:
        if kind not in CHART_ROLES:
            raise HostException(f"Unsupported visual type: {kind}", details={"type": kind})
        # Fields survive on roles that the new kind also exposes.
        self._fields = {role: self._fields.get(role, []) for role in CHART_ROLES[kind]}
        logger.debug(f"Visual {self.name} changed type {self.type} -> {kind}")
        self.type = kind


class InMemoryPage(Page):
    def __init__(
        self,
        name: str,
        visuals: list[Visual] | None = None,
        display_name: str | None = None,
        is_active: bool = False,
    ):
        self.name = name
        self.display_name = display_name or name
        self.is_active = is_active
        self.visuals: list[Visual] = list(visuals or [])

    async def get_visuals(self) -> list[Visual]:
        return list(self.visuals)


class InMemoryReport(Report):
    def __init__(self, pages: list[Page] | None = None):
        self.pages: list[Page] = list(pages or [])

    async def get_pages(self) -> list[Page]:
        return list(self.pages)


def build_demo_report() -> InMemoryReport:
    """Single active page with a card ahead of an empty line chart."""
    return InMemoryReport(
        pages=[
            InMemoryPage(
                name="ReportSection",
                display_name="Sales Overview",
                is_active=True,
                visuals=[
                    InMemoryVisual("kpiCard", "card", title="Total Sales"),
                    InMemoryVisual("salesChart", "lineChart", title="Sales"),
                ],
            )
        ]
    )
