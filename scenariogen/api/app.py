"""FastAPI application serving scenario conversion."""

from fastapi import FastAPI
from pydantic import BaseModel

from .. import __version__
from ..config import get_settings
from ..logging_config import configure_logging
from .routes import router as scenarios_router


class HealthResponse(BaseModel):
    status: str
    version: str


def create_app() -> FastAPI:
    """Create the API application."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title="scenariogen",
        description="Convert recorded browser actions into YAML test scenarios",
        version=__version__,
    )
    app.include_router(scenarios_router)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        return HealthResponse(status="healthy", version=__version__)

    return app


app = create_app()
