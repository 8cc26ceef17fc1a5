"""
ChartChat Charts - Role mutator.

Clear/add operations against the data roles of a located visual. The host
only offers remove-by-index and append, so a role is cleared one field at a
time from the highest index down, and the grouping role (whose name depends
on the chart kind) is resolved by trying candidates in order.
"""

import logging

from chartchat.exceptions import (
    HostException,
    HostTimeoutException,
    NothingToRemoveException,
    RoleUnavailableException,
)
from chartchat.host.base import (
    ROLE_COLUMN_SERIES,
    ROLE_LEGEND,
    ROLE_SERIES,
    FieldTarget,
    Visual,
    call_host,
)

logger = logging.getLogger(__name__)

# Tried in order; the first role that accepts the field wins.
GROUPING_ROLE_CANDIDATES: tuple[str, ...] = (ROLE_LEGEND, ROLE_SERIES, ROLE_COLUMN_SERIES)


class RoleMutator:
    """Field mutations for one visual's data roles, bounded by a host timeout."""

    def __init__(
        self,
        timeout_seconds: float | None = None,
        grouping_roles: tuple[str, ...] = GROUPING_ROLE_CANDIDATES,
    ):
        self.timeout_seconds = timeout_seconds
        self.grouping_roles = grouping_roles

    async def read(self, visual: Visual, role: str) -> list[FieldTarget]:
        """Fields currently assigned to ``role``; an unavailable role reads as empty."""
        try:
            return await call_host(visual.get_data_fields(role), f"getDataFields({role})", self.timeout_seconds)
        except RoleUnavailableException:
            logger.info(f"Data role {role} not available on {visual.type}")
            return []

    async def clear(self, visual: Visual, role: str) -> int:
        """
        Remove every field from ``role``.

        Returns the number of removals the host acknowledged. Indices shift
        on each removal, so they are issued from the last index to zero.
        """
        fields = await self.read(visual, role)
        if not fields:
            return 0

        logger.info(f"Clearing {len(fields)} field(s) from {role}")
        removed = 0
        for index in range(len(fields) - 1, -1, -1):
            try:
                await call_host(
                    visual.remove_data_field(role, index),
                    f"removeDataField({role}, {index})",
                    self.timeout_seconds,
                )
            except (NothingToRemoveException, RoleUnavailableException):
                logger.info(f"Nothing to remove at {role}[{index}]")
                continue
            removed += 1
            logger.info(f"Removed {role} field at index {index}")
        return removed

    async def clear_grouping(self, visual: Visual) -> None:
        """Best-effort clear of every grouping role candidate."""
        for role in self.grouping_roles:
            try:
                await self.clear(visual, role)
            except HostTimeoutException:
                raise
            except HostException as e:
                logger.info(f"Could not clear {role} fields (may not exist): {e.message}")

    async def assign(self, visual: Visual, role: str, target: FieldTarget) -> None:
        """Append ``target`` to ``role``. Host errors propagate to the caller."""
        logger.info(f"Adding {target.qualified_name} ({target.kind}) to {role} data role")
        await call_host(
            visual.add_data_field(role, target),
            f"addDataField({role})",
            self.timeout_seconds,
        )

    async def assign_grouping(self, visual: Visual, target: FieldTarget) -> str | None:
        """
        Add ``target`` to the first grouping role that accepts it.

        Returns the accepting role, or None once every candidate failed.
        Failures are routine here and never abort the caller; only a host
        timeout propagates.
        """
        for role in self.grouping_roles:
            try:
                await self.assign(visual, role, target)
            except HostTimeoutException:
                raise
            except HostException as e:
                logger.info(f"Failed to add {target.qualified_name} to {role}: {e.message}")
                continue
            logger.info(f"{target.qualified_name} added to {role} data role")
            return role

        logger.warning(
            f"Failed to add series field {target.qualified_name} to any of "
            f"{', '.join(self.grouping_roles)}; continuing without series"
        )
        return None
