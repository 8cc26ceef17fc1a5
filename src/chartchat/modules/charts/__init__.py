"""ChartChat Charts Module - Chart intent reconciliation."""

from chartchat.modules.charts.router import router
from chartchat.modules.charts.service import ChartSession, ChartsService

__all__ = ["router", "ChartSession", "ChartsService"]
