"""ChartChat Host - embedded visual host adapters."""

from chartchat.config import Settings
from chartchat.host.base import FieldTarget, Page, Report, Visual, call_host
from chartchat.host.bridge import BridgeClient, BridgeReport
from chartchat.host.memory import InMemoryPage, InMemoryReport, InMemoryVisual, build_demo_report


def create_report(settings: Settings, session_id: str) -> Report:
    """Build the report adapter for a chart session."""
    if settings.host.mode == "bridge":
        client = BridgeClient(
            settings.host.bridge_url,
            session_id,
            timeout_seconds=settings.host.timeout_seconds,
        )
        return BridgeReport(client)
    return build_demo_report()


__all__ = [
    "BridgeClient",
    "BridgeReport",
    "FieldTarget",
    "InMemoryPage",
    "InMemoryReport",
    "InMemoryVisual",
    "Page",
    "Report",
    "Visual",
    "build_demo_report",
    "call_host",
    "create_report",
]
