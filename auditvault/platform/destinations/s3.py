"""S3-compatible object store.

Supports AWS S3, MinIO, LocalStack or any S3 API-compatible service via ``endpoint_url``.
Credentials come from the standard AWS chain (environment, profile, instance role).
"""

from typing import Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from auditvault.core.logging import ContextualLogger
from auditvault.platform.destinations._base import BaseObjectStore
from auditvault.platform.export.exceptions import ArchiveWriteError


class S3ObjectStore(BaseObjectStore):
    """Object store that writes archives to an S3 bucket."""

    def __init__(
        self,
        bucket_name: str,
        session: Optional[aioboto3.Session] = None,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        logger: Optional[ContextualLogger] = None,
    ):
        """Initialize the store.

        Args:
            bucket_name: Destination bucket
            session: aioboto3 session (a new one is created if omitted)
            region: AWS region
            endpoint_url: Optional endpoint override (MinIO, LocalStack)
            logger: Contextual logger
        """
        super().__init__()
        self.bucket_name = bucket_name
        self.session = session or aioboto3.Session()
        self._region = region
        self._endpoint_url = endpoint_url
        if logger:
            self.set_logger(logger)

    async def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
        content_encoding: Optional[str] = None,
    ) -> str:
        """Upload a single object and return its ``s3://`` location."""
        params = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        if content_encoding:
            params["ContentEncoding"] = content_encoding

        try:
            async with self.session.client(
                "s3", region_name=self._region, endpoint_url=self._endpoint_url
            ) as s3:
                await s3.put_object(**params)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("NoSuchBucket", "404"):
                raise ArchiveWriteError(f"S3 bucket '{self.bucket_name}' does not exist") from e
            if error_code in ("AccessDenied", "403"):
                raise ArchiveWriteError(f"Access denied to S3 bucket '{self.bucket_name}'") from e
            raise ArchiveWriteError(f"failed to upload {key}: {e}") from e
        except BotoCoreError as e:
            raise ArchiveWriteError(f"failed to upload {key}: {e}") from e

        location = f"s3://{self.bucket_name}/{key}"
        self.logger.debug(f"Uploaded {len(body)} bytes to {location}")
        return location
