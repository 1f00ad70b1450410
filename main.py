"""
FastAPI Application Entry Point

Integrates:
  - Origin admission + CORS
  - Chat endpoint (POST /api/chat)
  - Liveness checks
  - Middleware for logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 10000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from config import Config
from gateway import APOLOGY_REPLY, OriginAdmissionMiddleware, router as chat_router
from infra import InfraBootstrap

# Setup logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# httpx logs full request URLs at INFO, and the upstream key is a query parameter
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

LIVENESS_TEXT = "Finova AI Bot is Running! 🚀"


def create_app(bootstrap: Optional[InfraBootstrap] = None) -> FastAPI:
    """Create the FastAPI application around one gateway object graph."""
    infra = bootstrap or InfraBootstrap()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan: startup and shutdown handlers.
        """
        # Startup
        logger.info("=" * 60)
        logger.info("Finova chat gateway starting up...")
        logger.info(f"Environment: {Config.ENVIRONMENT}")
        logger.info(f"LLM Backend: {infra.config.llm_backend}")
        logger.info(f"Model source: {infra.config.model_source}")
        if infra.config.llm_backend == "gemini" and not infra.config.api_key:
            logger.warning("GEMINI_API_KEY is not set; upstream calls will fail")
        logger.info("=" * 60)

        yield

        # Shutdown
        logger.info("Finova chat gateway shutting down...")

    app = FastAPI(
        title="Finova Chat Gateway",
        description="Persona-routed chat gateway with upstream model fallback",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.gateway = infra.get_gateway()

    # Middleware for logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"Request error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"reply": APOLOGY_REPLY},
            )

    # Origin admission wraps everything, including the logging middleware
    app.add_middleware(
        OriginAdmissionMiddleware,
        guard=infra.get_origin_guard(),
        allow_methods=["GET", "POST"],
    )

    app.include_router(chat_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Liveness text for the hosting platform's health check."""
        return LIVENESS_TEXT

    @app.get("/health/live")
    async def health_live():
        """Live health check (process supervisor liveness probe)."""
        return {"status": "alive"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=Config.PORT,
    )
