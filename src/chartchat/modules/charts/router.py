"""
ChartChat Charts - Router.

API endpoints for applying chart intents to a session's visual.
"""

from fastapi import APIRouter, Depends

from chartchat.config import Settings, get_settings
from chartchat.deps import require_charts
from chartchat.modules.charts.schemas import (
    ApplyIntentResponse,
    ChartConfiguration,
    ChartIntent,
    SessionEndedResponse,
)
from chartchat.modules.charts.service import ChartsService
from chartchat.schemas import ErrorResponse

router = APIRouter(
    prefix="/charts",
    tags=["charts"],
    dependencies=[require_charts],
    responses={503: {"model": ErrorResponse, "description": "Charts feature disabled"}},
)

HOST_ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "No active page or chart visual"},
    409: {"model": ErrorResponse, "description": "Session ended while the request was queued"},
    502: {"model": ErrorResponse, "description": "Host rejected a mandatory step"},
    504: {"model": ErrorResponse, "description": "Host did not acknowledge in time"},
}


def get_service(settings: Settings = Depends(get_settings)) -> ChartsService:
    """Get charts service instance."""
    return ChartsService(settings=settings)


@router.post(
    "/sessions/{session_id}/intent",
    response_model=ApplyIntentResponse,
    responses=HOST_ERROR_RESPONSES,
)
async def apply_intent(
    session_id: str,
    intent: ChartIntent,
    service: ChartsService = Depends(get_service),
):
    """
    Apply a chart intent to the session's chart visual.

    Requests for the same session run one at a time.
    """
    outcome = await service.apply_intent(session_id, intent)
    return ApplyIntentResponse(
        applied_configuration=outcome.configuration,
        committed=outcome.committed,
        visual_type=outcome.visual_type,
        series_role=outcome.series_role,
    )


@router.get("/sessions/{session_id}/configuration", response_model=ChartConfiguration)
async def get_configuration(
    session_id: str,
    service: ChartsService = Depends(get_service),
):
    """Get the session's applied chart configuration."""
    return service.get_applied_configuration(session_id)


@router.post(
    "/sessions/{session_id}/rendered",
    response_model=ChartConfiguration,
    responses=HOST_ERROR_RESPONSES,
)
async def visual_rendered(
    session_id: str,
    service: ChartsService = Depends(get_service),
):
    """Signal that the visual finished rendering; syncs the configuration once."""
    return await service.on_rendered(session_id)


@router.delete("/sessions/{session_id}", response_model=SessionEndedResponse)
async def end_session(
    session_id: str,
    service: ChartsService = Depends(get_service),
):
    """End a chart session and drop its configuration."""
    ended = await service.end_session(session_id)
    return SessionEndedResponse(session_id=session_id, ended=ended)
