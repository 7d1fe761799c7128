#!/usr/bin/env python3
"""Soapbox Portal - team registration API for the soapbox derby"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from soapbox_portal.config import config
from soapbox_portal.logging_config import get_logger, setup_logging
from soapbox_portal.routers.admin import router as admin_router
from soapbox_portal.routers.health import health
from soapbox_portal.routers.registration import router as registration_router

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)


app = FastAPI(
    title="Soapbox Portal",
    description="Team registration, organiser review and event-day check-in for the soapbox derby",
    version="1.0.0",
)

allowed_origins = [
    origin.strip()
    for origin in (config.get("cors_origins") or "").split(",")
    if origin.strip()
]
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include routers
app.include_router(health)
app.include_router(registration_router)
app.include_router(admin_router)


if __name__ == "__main__":
    port = config.get("port")
    logger.info(f"Starting Soapbox Portal on 0.0.0.0:{port}")
    logger.info("Health check available at /health")

    try:
        uvicorn.run(
            app, host="0.0.0.0", port=port, log_level=config["log_level"].lower()
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
