"""
ChartChat Charts - Intent applier.

Applies one chart intent to the live visual:

    locate -> clear roles -> change type -> assign fields -> merge

Clearing always precedes assignment because the host's add is append-only;
the type change precedes assignment because the available roles depend on
the chart kind. The host has no transactions, so a fatal failure part way
through can leave the visual half-updated until the next run clears it.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from chartchat.exceptions import (
    ChartChatException,
    ChartTypeChangeException,
    HostException,
    HostTimeoutException,
    MandatoryAssignmentException,
)
from chartchat.host.base import ROLE_CATEGORY, ROLE_Y, FieldTarget, Report, Visual, call_host
from chartchat.modules.charts.fields import column_target, measure_target
from chartchat.modules.charts.locator import locate_chart_visual
from chartchat.modules.charts.mirror import commit_intent
from chartchat.modules.charts.roles import RoleMutator
from chartchat.modules.charts.schemas import ChartConfiguration, ChartIntent

logger = logging.getLogger(__name__)


class ApplyState(Enum):
    """Steps of one intent application."""

    IDLE = "idle"
    LOCATING = "locating"
    CLEARING_ROLES = "clearing_roles"
    CHANGING_TYPE = "changing_type"
    ASSIGNING_FIELDS = "assigning_fields"
    MERGING = "merging"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ApplyOutcome:
    """Result of a run that reached DONE."""

    configuration: ChartConfiguration
    committed: bool
    visual_type: str
    series_role: str | None = None
    state: ApplyState = ApplyState.DONE


class IntentApplier:
    """Sequences every host call of an intent application."""

    def __init__(self, mutator: RoleMutator | None = None, timeout_seconds: float | None = None):
        self.mutator = mutator or RoleMutator(timeout_seconds=timeout_seconds)
        self.timeout_seconds = self.mutator.timeout_seconds
        self.state = ApplyState.IDLE

    def _enter(self, state: ApplyState) -> None:
        logger.debug(f"Intent applier: {self.state.value} -> {state.value}")
        self.state = state

    async def apply(
        self,
        report: Report,
        intent: ChartIntent,
        current: ChartConfiguration,
    ) -> ApplyOutcome:
        """
        Apply ``intent`` to the chart visual of ``report``.

        Args:
            report: Embedded report to locate the chart on
            intent: Sparse desired state from the language model
            current: Configuration the session holds before this run

        Returns:
            ApplyOutcome with the configuration the session should keep

        Raises:
            ChartChatException: fatal failure; the state is ABORTED and the
                caller keeps ``current``.
        """
        logger.info(f"Starting chart update with: {intent.model_dump(by_alias=True, exclude_none=True)}")
        try:
            return await self._run(report, intent, current)
        except ChartChatException as e:
            logger.warning(f"Chart update aborted during {self.state.value}: {e.code} - {e.message}")
            self._enter(ApplyState.ABORTED)
            raise

    async def _run(
        self,
        report: Report,
        intent: ChartIntent,
        current: ChartConfiguration,
    ) -> ApplyOutcome:
        self._enter(ApplyState.LOCATING)
        visual = await locate_chart_visual(report, self.timeout_seconds)

        self._enter(ApplyState.CLEARING_ROLES)
        await self.mutator.clear(visual, ROLE_Y)
        await self.mutator.clear(visual, ROLE_CATEGORY)
        await self.mutator.clear_grouping(visual)

        self._enter(ApplyState.CHANGING_TYPE)
        if intent.chart_type and intent.chart_type != visual.type:
            await self._change_type(visual, intent.chart_type)

        self._enter(ApplyState.ASSIGNING_FIELDS)
        if intent.y_axis:
            await self._assign_mandatory(visual, ROLE_Y, measure_target(intent.y_axis), intent.y_axis)
        if intent.x_axis:
            await self._assign_mandatory(visual, ROLE_CATEGORY, column_target(intent.x_axis), intent.x_axis)
        series_role = None
        if intent.series:
            series_role = await self.mutator.assign_grouping(visual, column_target(intent.series))

        self._enter(ApplyState.MERGING)
        configuration, committed = commit_intent(current, intent)

        self._enter(ApplyState.DONE)
        logger.info(f"Chart updated: {self._describe(intent)} as {visual.type}")
        return ApplyOutcome(
            configuration=configuration,
            committed=committed,
            visual_type=visual.type,
            series_role=series_role,
        )

    async def _change_type(self, visual: Visual, kind: str) -> None:
        previous = visual.type
        logger.info(f"Changing chart type from {previous} to {kind}")
        try:
            await call_host(visual.change_type(kind), f"changeType({kind})", self.timeout_seconds)
        except HostTimeoutException:
            raise
        except HostException as e:
            raise ChartTypeChangeException(previous, kind, e.message) from e
        # Remote adapters may not track the new kind on the handle themselves.
        visual.type = kind

    async def _assign_mandatory(self, visual: Visual, role: str, target: FieldTarget, field_name: str) -> None:
        try:
            await self.mutator.assign(visual, role, target)
        except HostTimeoutException:
            raise
        except HostException as e:
            raise MandatoryAssignmentException(role, field_name, e.message) from e
        logger.info(f"{field_name} added to {role} data role successfully")

    @staticmethod
    def _describe(intent: ChartIntent) -> str:
        parts = []
        if intent.y_axis:
            parts.append(f"Y: {intent.y_axis}")
        if intent.x_axis:
            parts.append(f"X: {intent.x_axis}")
        if intent.series:
            parts.append(f"Series: {intent.series}")
        return ", ".join(parts) or "no fields"
