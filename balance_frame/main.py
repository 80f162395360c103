from __future__ import annotations

from fastapi import FastAPI
from loguru import logger

from balance_frame.application.dtos.frame_dto import HealthResponse, RootResponse
from balance_frame.config import Settings, load_settings
from balance_frame.infrastructure.api.middlewares import add_default_middlewares
from balance_frame.infrastructure.api.routes.frame_routes import router as frame_router


def create_app(settings: Settings | None = None) -> FastAPI:
    # Refuse to build the app without valid settings (raises ConfigurationError)
    settings = settings or load_settings()

    app = FastAPI(
        title="Farcaster $GOLDIES Balance Frame",
        version="0.1.0",
        description="""
        ## Balance Frame API

        Farcaster frame that looks up the clicking user's profile and $GOLDIES
        token balance through the Airstack GraphQL API and answers with an image
        and follow-up buttons.

        ### Frames
        - **/api**: home frame
        - **/api/check**: echoes the resolved identity
        - **/api/result**: profile and balance, or an error frame with retry

        ### Identity
        The clicking user's FID from the frame action payload is used. Values
        carried on buttons are only trusted when `ALLOW_CARRIED_IDENTITY=true`.
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    app.state.settings = settings
    add_default_middlewares(app, settings.env)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the frame service",
    )
    def root():
        """Get API root information."""
        return {
            "status": "ok",
            "service": "balance-frame",
            "version": app.version,
            "theme": settings.frame_theme,
        }

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the frame service is running",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(frame_router)
    logger.info("Frame app ready (theme={}, env={})", settings.frame_theme, settings.env)
    return app


app = create_app()


def run() -> None:
    """Serve the frame app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
