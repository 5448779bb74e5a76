"""
S3-backed object store adapter.

Implements ObjectStorePort using boto3: downloads for s3:// file sources and
presigned GET/PUT URLs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shared_utils.logging_utils import get_scoped_logger
from shared_utils.constants import LogScope
from shared_utils.error_handler import ExternalServiceError, ValidationError


logger = get_scoped_logger(LogScope.ADAPTER)


class S3ObjectStoreAdapter:
    """Amazon S3 implementation of ObjectStorePort.

    Objects are addressed as ``s3://{bucket}/{key}``.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        endpoint_url: str = "",
        s3_client: Optional[object] = None,
    ) -> None:
        client_kwargs: dict = {}
        if region:
            client_kwargs["region_name"] = region
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url
        self._client_kwargs = client_kwargs
        self._s3 = s3_client

    @property
    def s3(self):
        # Created lazily so commands that never touch S3 need no AWS credentials
        if self._s3 is None:
            self._s3 = boto3.client("s3", **self._client_kwargs)
        return self._s3

    # ------------------------------------------------------------------
    # ObjectStorePort implementation
    # ------------------------------------------------------------------

    def download_to_path(self, url: str, destination: Path) -> int:
        """Download an S3 object to ``destination``."""
        bucket, key = self.parse_s3_url(url)
        try:
            with open(destination, "wb") as handle:
                self.s3.download_fileobj(bucket, key, handle)
        except (ClientError, BotoCoreError) as exc:
            logger.error("s3_download_failed", s3_uri=url, error=str(exc))
            raise ExternalServiceError("S3", f"Failed to download {url}: {exc}") from exc
        size = Path(destination).stat().st_size
        logger.info("s3_object_downloaded", s3_uri=url, size_bytes=size)
        return size

    def presign_get(self, url: str, expires: int) -> str:
        """Presigned GET URL for ``s3://bucket/key``."""
        bucket, key = self.parse_s3_url(url)
        return self._presign("get_object", {"Bucket": bucket, "Key": key}, expires, url)

    def presign_put(self, url: str, expires: int, content_type: Optional[str] = None) -> str:
        """Presigned PUT URL; ``content_type`` is signed into the URL when given."""
        bucket, key = self.parse_s3_url(url)
        params = {"Bucket": bucket, "Key": key}
        if content_type:
            params["ContentType"] = content_type
        return self._presign("put_object", params, expires, url)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _presign(self, operation: str, params: dict, expires: int, url: str) -> str:
        try:
            presigned = self.s3.generate_presigned_url(
                ClientMethod=operation,
                Params=params,
                ExpiresIn=expires,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("s3_presign_failed", s3_uri=url, operation=operation, error=str(exc))
            raise ExternalServiceError("S3", f"Failed to presign {url}: {exc}") from exc
        logger.info("s3_url_presigned", s3_uri=url, operation=operation, expires=expires)
        return presigned

    @staticmethod
    def parse_s3_url(url: str) -> tuple[str, str]:
        """Parse ``s3://bucket/key`` into (bucket, key)."""
        parsed = urlparse(url)
        if parsed.scheme != "s3":
            raise ValidationError(f"Expected s3:// URL, got: {url}")
        bucket = parsed.netloc
        key = parsed.path.lstrip("/")
        if not bucket or not key:
            raise ValidationError(f"s3 URL needs a bucket and a key: {url}")
        return bucket, key
