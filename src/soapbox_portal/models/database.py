"""Database configuration and session dependency"""

import os

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from soapbox_portal.config import config

# Database URL from config
DATABASE_URL = config["database_url"]

# Validate DATABASE_URL exists
if not DATABASE_URL:
    raise ValueError(
        "DATABASE_URL environment variable is not set. "
        "Set DATABASE_URL in the deployment dashboard or local .env file."
    )


def build_engine(database_url: str, echo: bool = False):
    """Create an engine, sharing one connection for in-memory SQLite"""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url, echo=echo, connect_args={"check_same_thread": False}
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


engine = build_engine(
    DATABASE_URL, echo=os.getenv("DEBUG", "false").lower() == "true"
)


def get_db():
    """Get database session"""
    with Session(engine) as session:
        yield session
