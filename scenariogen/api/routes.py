"""Scenario API endpoints for converting recorded actions to YAML."""

import structlog
from fastapi import APIRouter
from pydantic import BaseModel, Field

from ..config import get_settings
from ..recording.models import RecordingFormatError, action_in_context_from_dict
from ..scenario.emitter import ScenarioEmitter, emit_scenario

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/scenarios", tags=["Scenarios"])


# =============================================================================
# Request/Response Models
# =============================================================================


class ConvertRequest(BaseModel):
    """Request to convert a recording into a scenario document."""

    actions: list[dict] = Field(
        ...,
        description="Recorded actions in context, in recording order",
        max_length=50000
    )
    base_url: str | None = Field(None, description="Seed base URL for the scenario")
    name: str | None = Field(None, description="Explicit scenario name")
    debug: bool | None = Field(None, description="Embed diagnostics in each step")


class ConvertResponse(BaseModel):
    """Response with the generated scenario."""

    success: bool
    yaml: str | None = None
    steps_generated: int = 0
    skipped: int = 0
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/convert", response_model=ConvertResponse)
async def convert_actions(body: ConvertRequest):
    """
    Convert recorded browser actions to a YAML scenario.

    Malformed actions fail the whole conversion; unknown action names are
    kept as unsupported steps.
    """
    emitter = ScenarioEmitter.from_settings(get_settings())
    if body.debug is not None:
        emitter.debug = body.debug

    try:
        actions = [action_in_context_from_dict(a) for a in body.actions]
        document = emit_scenario(actions, emitter=emitter, base_url=body.base_url, name=body.name)

        logger.info(
            "Recording converted to scenario",
            actions=len(actions),
            steps=emitter.steps_emitted,
            skipped=emitter.actions_skipped,
        )

        return ConvertResponse(
            success=True,
            yaml=document,
            steps_generated=emitter.steps_emitted,
            skipped=emitter.actions_skipped,
        )

    except RecordingFormatError as e:
        logger.warning("Rejected malformed recording", error=str(e))
        return ConvertResponse(success=False, error=str(e))
    except Exception as e:
        logger.exception("Scenario conversion failed", error=str(e))
        return ConvertResponse(success=False, error=str(e))
