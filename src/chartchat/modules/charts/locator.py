"""
ChartChat Charts - Visual locator.

Finds the chart visual an intent applies to. The lookup is re-run for every
request because the host can replace or re-render visuals at any time.
"""

import logging

from chartchat.exceptions import VisualNotFoundException
from chartchat.host.base import Page, Report, Visual, call_host
from chartchat.modules.charts.schemas import SUPPORTED_CHART_TYPES

logger = logging.getLogger(__name__)


def is_supported_chart(visual: Visual) -> bool:
    return visual.type in SUPPORTED_CHART_TYPES


def find_active_page(pages: list[Page]) -> Page | None:
    """Return the active page, falling back to the first page."""
    for page in pages:
        if page.is_active:
            return page
    return pages[0] if pages else None


def select_chart_visual(visuals: list[Visual]) -> Visual | None:
    """Return the first eligible chart visual, in host order."""
    for visual in visuals:
        if is_supported_chart(visual):
            logger.info(f"Found chart visual: {visual.type} {visual.title or ''}".rstrip())
            return visual

    logger.info(f"No suitable chart visual found - available types: {', '.join(v.type for v in visuals)}")
    return None


async def locate_chart_visual(report: Report, timeout_seconds: float | None = None) -> Visual:
    """
    Locate the chart visual on the report's active page.

    Raises:
        VisualNotFoundException: no page, or no visual of a supported kind.
    """
    pages = await call_host(report.get_pages(), "getPages", timeout_seconds)
    page = find_active_page(pages)
    if page is None:
        raise VisualNotFoundException("Could not find an active page to update the chart.")

    visuals = await call_host(page.get_visuals(), "getVisuals", timeout_seconds)
    logger.info(f"Found {len(visuals)} visuals on page {page.display_name or page.name}")
    visual = select_chart_visual(visuals)
    if visual is None:
        raise VisualNotFoundException(
            "Could not find a chart visual to update.",
            available_types=[v.type for v in visuals],
        )
    return visual
