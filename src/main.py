from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from src.infrastructure.api.middlewares import add_default_middlewares, add_error_handlers
from src.infrastructure.api.routes.auth_routes import router as auth_router
from src.infrastructure.api.routes.event_routes import router as event_router
from src.infrastructure.api.routes.profile_routes import router as profile_router
from src.infrastructure.api.routes.sponsor_event_type_routes import router as sponsor_event_type_router
from src.infrastructure.api.routes.sponsor_offer_routes import router as sponsor_offer_router


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="SponsorSync Backend",
        version="0.1.0",
        description="""
        ## SponsorSync Backend API

        Marketplace connecting event organizers with sponsors. Every request is
        checked against a row-level policy engine before it reaches storage.

        ### Access rules
        - **Profiles**: visible to and editable by their owner only
        - **Events**: readable by any authenticated user; created and edited by
          the owning organizer
        - **Sponsor offers**: readable by any authenticated user; created and
          edited by the owning sponsor
        - **Sponsor event types**: readable by any authenticated user; appended
          by the sponsor owning the referenced offer

        ### Authentication
        Send a Supabase access token as a Bearer token:
        ```
        Authorization: Bearer your-jwt-token
        ```

        ### Error Responses
        - **401 Unauthorized**: Invalid authentication token
        - **403 Forbidden**: The policy engine denied the operation
        - **404 Not Found**: Requested row does not exist
        - **422 Unprocessable Entity**: A field violates a data constraint
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app)
    add_error_handlers(app)

    @app.get("/", summary="API Root")
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "sponsorsync-backend", "version": app.version}

    @app.get("/health", summary="Health Check")
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(event_router)
    app.include_router(sponsor_offer_router)
    app.include_router(sponsor_event_type_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "0") == "1",
    )
