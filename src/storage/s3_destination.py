# src/storage/s3_destination.py — v1
"""S3-compatible destination (NETWORK_DESTINATION=s3://bucket/prefix).

Supports AWS S3, MinIO, and other S3-compatible storage.
"""

from __future__ import annotations

import logging
from pathlib import Path

from confvault.storage.base_destination import BaseDestination

logger = logging.getLogger(__name__)


class S3Destination(BaseDestination):
    """Upload the archive and manifest to S3-compatible object storage."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        """Initialize S3 destination.

        Args:
            bucket: S3 bucket name.
            prefix: Key prefix for all objects (e.g. "backups/web01/").
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
        """
        import boto3

        kwargs: dict = {}
        if region:
            kwargs["region_name"] = region
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._s3 = boto3.client("s3", **kwargs)
        self._bucket = bucket
        self._prefix = prefix.strip("/") + "/" if prefix.strip("/") else ""

    def _full_key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    @property
    def location(self) -> str:
        return f"s3://{self._bucket}/{self._prefix}"

    @property
    def is_remote(self) -> bool:
        return True

    def is_reachable(self) -> bool:
        """HEAD the bucket; any client or connection error means unreachable."""
        try:
            self._s3.head_bucket(Bucket=self._bucket)
        except Exception as exc:
            logger.warning("S3 bucket %s not reachable: %s", self._bucket, exc)
            return False
        return True

    def ensure_directory(self) -> None:
        """Key prefixes need no creation in object storage."""

    def upload(self, local_path: Path, name: str) -> str:
        key = self._full_key(name)
        self._s3.upload_file(str(local_path), self._bucket, key)
        logger.debug("S3 upload: %s -> s3://%s/%s", local_path, self._bucket, key)
        return f"s3://{self._bucket}/{key}"

    def exists(self, name: str) -> bool:
        try:
            self._s3.head_object(Bucket=self._bucket, Key=self._full_key(name))
        except self._s3.exceptions.ClientError:
            return False
        return True
