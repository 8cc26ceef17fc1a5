"""
ChartChat Charts - Configuration mirror.

The session's best-known copy of the chart configuration. Intents are sparse,
so each one is merged over the previous configuration; a merge only becomes
the new configuration once yAxis, xAxis and chartType are all known.
"""

import logging

from chartchat.host.base import ROLE_CATEGORY, ROLE_Y, Visual
from chartchat.modules.charts.roles import RoleMutator
from chartchat.modules.charts.schemas import CONFIGURATION_FIELDS, ChartConfiguration, ChartIntent

logger = logging.getLogger(__name__)


def merge_configuration(
    old: ChartConfiguration, intent: ChartIntent
) -> tuple[ChartConfiguration, list[str]]:
    """
    Overlay ``intent`` on ``old`` field by field.

    Returns the merged configuration and the required fields it still lacks.
    An empty list means the merge may be committed.
    """
    merged = ChartConfiguration(
        **{
            name: getattr(intent, name) if getattr(intent, name) is not None else getattr(old, name)
            for name in CONFIGURATION_FIELDS
        }
    )
    return merged, merged.missing_required()


def commit_intent(
    current: ChartConfiguration, intent: ChartIntent
) -> tuple[ChartConfiguration, bool]:
    """
    Merge ``intent`` over ``current``.

    Returns the configuration to keep and whether the merge was adopted. An
    incomplete merge is discarded and ``current`` is returned unchanged.
    """
    merged, missing = merge_configuration(current, intent)
    if missing:
        logger.warning(
            f"Incomplete chart action (missing {', '.join(missing)}), preserving current config: "
            f"{current.model_dump(by_alias=True)}"
        )
        return current, False
    logger.info(f"Updated current chart config: {merged.model_dump(by_alias=True)}")
    return merged, True


class ConfigurationMirror:
    """Holds one session's chart configuration."""

    def __init__(self, configuration: ChartConfiguration | None = None):
        self._configuration = configuration or ChartConfiguration()

    def snapshot(self) -> ChartConfiguration:
        return self._configuration.model_copy()

    def replace(self, configuration: ChartConfiguration) -> None:
        self._configuration = configuration.model_copy()
        logger.info(f"Chart configuration set: {self._configuration.model_dump(by_alias=True)}")


async def resync_configuration(visual: Visual, mutator: RoleMutator | None = None) -> ChartConfiguration:
    """Rebuild a configuration from the fields currently assigned on ``visual``."""
    mutator = mutator or RoleMutator()

    y_fields = await mutator.read(visual, ROLE_Y)
    x_fields = await mutator.read(visual, ROLE_CATEGORY)

    series = None
    for role in mutator.grouping_roles:
        fields = await mutator.read(visual, role)
        if fields:
            series = fields[0].qualified_name
            break

    configuration = ChartConfiguration(
        y_axis=y_fields[0].qualified_name if y_fields else None,
        x_axis=x_fields[0].qualified_name if x_fields else None,
        chart_type=visual.type,
        series=series,
    )
    logger.info(f"Current chart config read from visual: {configuration.model_dump(by_alias=True)}")
    return configuration
