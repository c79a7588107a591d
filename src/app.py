"""
Main FastAPI Application

Brand awareness API server.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config.settings import settings

from src.routes import health_routes, brand_awareness_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="API for testing what AI assistants know about a business"
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_routes.router)
    app.include_router(brand_awareness_routes.router)

    @app.on_event("startup")
    async def startup_event():
        """Check backing services on startup."""
        from config.database import test_connections

        configured = [
            name for name, key in (
                ("chatgpt", settings.OPENAI_API_KEY),
                ("claude", settings.ANTHROPIC_API_KEY),
                ("gemini", settings.GEMINI_API_KEY),
                ("perplexity", settings.PERPLEXITY_API_KEY),
            ) if key
        ]
        logger.info(f"Providers with API keys: {', '.join(configured) or 'none'}")
        if settings.GROUNDED_SEARCH_ENABLED and not settings.TAVILY_API_KEY:
            logger.warning("⚠️  TAVILY_API_KEY not set - Claude answers without search results")

        status = test_connections()
        if status["redis"]["connected"]:
            logger.info("✅ Redis: Connected")
        else:
            logger.warning(f"⚠️  Redis: Not connected - {status['redis']['error']}")
            logger.warning("Reports will not be persisted and costs go to the log only")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the Redis pool."""
        from config.database import close_connections
        close_connections()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
