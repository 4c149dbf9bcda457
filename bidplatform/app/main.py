"""FastAPI application - Bid Platform API."""

from fastapi import FastAPI

from bidplatform.app.api.routes.auth import router as auth_router
from bidplatform.app.api.routes.health import router as health_router
from bidplatform.app.api.routes.metrics import router as metrics_router
from bidplatform.app.api.routes.rfq import router as rfq_router
from bidplatform.app.config import get_settings
from bidplatform.app.utils.logging import configure_logging

configure_logging(get_settings().log_level)

app = FastAPI(title="Bid Platform API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(auth_router, tags=["auth"])
app.include_router(rfq_router, tags=["rfq"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Welcome to the Bid Platform API", "version": "0.1.0"}
