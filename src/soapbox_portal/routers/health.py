from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from soapbox_portal.config import config
from soapbox_portal.models.database import get_db
from soapbox_portal.models.registration import TeamRegistration

health = APIRouter(tags=["Health"])

SERVICE_NAME = "soapbox-portal"


def _base_status() -> dict:
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
    }


@health.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return _base_status()


@health.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Health check that also proves the registration tables are reachable"""
    health_status = {**_base_status(), "checks": {}}
    checks = health_status["checks"]

    # Counting rows fails both when the database is down and when migrations
    # have not been applied
    try:
        total = db.exec(select(func.count(TeamRegistration.id))).one()
        checks["database"] = "healthy"
        health_status["registrations"] = total
    except SQLAlchemyError as e:
        checks["database"] = f"unhealthy: {e}"
        health_status["status"] = "unhealthy"

    # Uploads and emails degrade gracefully, so only flag them
    checks["blob_store"] = "configured" if config.get("s3_bucket") else "not configured"
    checks["email"] = (
        "configured"
        if config.get("mailgun_api_key") and config.get("mailgun_domain")
        else "not configured"
    )

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
