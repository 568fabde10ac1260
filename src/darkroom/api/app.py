"""FastAPI application factory."""

from fastapi import FastAPI

from darkroom.api.admin import router as admin_router
from darkroom.api.darkroom import router as darkroom_router
from darkroom.api.photos import router as photos_router
from darkroom.app_logging import configure_logging
from darkroom.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    app = FastAPI(title="Darkroom")
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(darkroom_router)
    app.include_router(photos_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
