"""FastAPI application for the педработник.рф consultant.

This module provides the main FastAPI application with:
- Lifespan management for the consultant service and history store
- CORS middleware
- Route registration
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .conversation import create_session_store
from .consultant.service import ConsultantService
from .infrastructure import SessionStore, configure_tracing
from .routes import history, messages

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    consultant: Optional[ConsultantService] = None,
    session_store: Optional[SessionStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        consultant: Prebuilt service; built from settings at startup when omitted
        session_store: Prebuilt history store; built from settings when omitted

    Returns:
        Configured FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the consultant and history store on startup, close on shutdown."""
        app_settings = get_settings()
        logger.info(f"Starting application with history mode: {app_settings.history_mode}")

        if consultant is None:
            app_settings.validate_credentials()
            configure_tracing(
                app_settings.tracing_backend,
                app_settings.appinsights_connection_string,
                app_settings.local_otlp_endpoint,
                app_settings.enable_sensitive_data,
            )
            app.state.consultant = ConsultantService.from_settings(app_settings)
        else:
            app.state.consultant = consultant

        app.state.session_store = session_store or await create_session_store(app_settings)

        yield

        logger.info("Shutting down application")
        await app.state.session_store.close()

    app = FastAPI(
        title="Pedrabotnik Consultant API",
        description="Safety-screened, intent-routed consultant for педработник.рф clients",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(messages.router, prefix="/api", tags=["messages"])
    app.include_router(history.router, prefix="/api", tags=["history"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
