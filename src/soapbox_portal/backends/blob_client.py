"""S3 object storage for uploaded design files"""

import asyncio
import io
import logging
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from soapbox_portal.services.schemas import DesignFile

logger = logging.getLogger(__name__)


class S3BlobStore:
    """BlobStore backed by an S3 (or S3-compatible) bucket.

    The returned reference is the object key; public or presigned URLs are
    derived from it on read.
    """

    def __init__(self, config: dict, client=None):
        self.bucket = config["s3_bucket"]
        self.region = config.get("aws_region")
        if not self.bucket:
            raise ValueError("S3_BUCKET must be configured")

        self.client = client or boto3.client(
            "s3",
            region_name=self.region,
            endpoint_url=config.get("s3_endpoint_url"),
            config=Config(signature_version="s3v4"),
        )

    def _upload(self, key: str, file: DesignFile) -> None:
        self.client.upload_fileobj(
            io.BytesIO(file.data),
            self.bucket,
            key,
            ExtraArgs={"ContentType": file.content_type},
        )

    async def put(self, path: str, file: DesignFile) -> str:
        """Upload `file` under `path` and return its key.

        Raises:
            RuntimeError: If the upload fails
        """
        try:
            await asyncio.to_thread(self._upload, path, file)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {path} to bucket {self.bucket}: {e}")
            raise RuntimeError(f"Upload failed: {e}") from e

        logger.info(f"Uploaded {file.size} bytes to s3://{self.bucket}/{path}")
        return path

    def presigned_url(self, key: str, expires_in: int = 3600) -> Optional[str]:
        """Short-lived download link for organisers reviewing a design"""
        if not key:
            return None
        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )
