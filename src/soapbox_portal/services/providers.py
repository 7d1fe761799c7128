"""Process-wide capability instances, injected into routers with Depends"""

import logging
from typing import Optional

from soapbox_portal.backends.blob_client import S3BlobStore
from soapbox_portal.config import config
from soapbox_portal.services.email_service import EmailService
from soapbox_portal.services.interfaces import BlobStore, Notifier

logger = logging.getLogger(__name__)

# Global instances
_blob_store = None
_notifier = None


def get_blob_store() -> Optional[BlobStore]:
    """Get or create the global S3 blob store; None when S3 is not configured"""
    global _blob_store
    if _blob_store is None and config.get("s3_bucket"):
        _blob_store = S3BlobStore(config)
        logger.info(f"Initialized S3 blob store for bucket {config['s3_bucket']}")
    return _blob_store


def get_notifier() -> Notifier:
    """Get or create the global email notifier"""
    global _notifier
    if _notifier is None:
        _notifier = EmailService(config)
        logger.info("Initialized email notifier")
    return _notifier
