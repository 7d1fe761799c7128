"""Configuration loader for Soapbox Portal with environment-specific support"""

import os
from pathlib import Path

from dotenv import load_dotenv

project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

# Configuration dictionary - set once at initialization
config = {
    "database_url": os.getenv("DATABASE_URL"),
    "port": int(os.getenv("PORT", "8000")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "auth0_domain": os.getenv("AUTH0_DOMAIN"),
    "auth0_audience": os.getenv("AUTH0_AUDIENCE"),
    "admin_api_key": os.getenv("ADMIN_API_KEY"),
    "mailgun_api_key": os.getenv("MAILGUN_API_KEY"),
    "mailgun_domain": os.getenv("MAILGUN_DOMAIN"),
    "sender_email": os.getenv("SENDER_EMAIL"),
    # Organiser inbox that receives a copy of every new or updated registration
    "organizer_email": os.getenv("ORGANIZER_EMAIL"),
    "event_name": os.getenv("EVENT_NAME", "Castle Douglas Soapbox Derby"),
    "s3_bucket": os.getenv("S3_BUCKET"),
    "aws_region": os.getenv("AWS_REGION", "eu-west-2"),
    # Optional, for S3-compatible stores (MinIO, Supabase storage, ...)
    "s3_endpoint_url": os.getenv("S3_ENDPOINT_URL"),
    # Comma separated browser origins for the registration front-end
    "cors_origins": os.getenv("CORS_ORIGINS"),
    "environment": os.getenv("ENVIRONMENT", "development"),
}
