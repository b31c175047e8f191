# src/storage/destination_factory.py — v1
"""Factory: instantiate the publish destination from configuration."""

from __future__ import annotations

from confvault.config.settings import Settings
from confvault.core.errors import ConfigurationError
from confvault.storage.base_destination import BaseDestination
from confvault.storage.local_destination import LocalDestination


def parse_s3_uri(uri: str) -> tuple[str, str]:
    """Split ``s3://bucket/prefix`` into (bucket, prefix)."""
    rest = uri[len("s3://"):]
    bucket, _, prefix = rest.partition("/")
    if not bucket:
        raise ConfigurationError(f"NETWORK_DESTINATION has no bucket: {uri!r}")
    return bucket, prefix


def create_destination(settings: Settings) -> BaseDestination:
    """Create the destination named by NETWORK_DESTINATION.

    ``s3://bucket/prefix`` selects S3; anything else is a filesystem path
    (local directory or UNC share).

    Raises:
        ConfigurationError: If the destination is empty or malformed.
    """
    target = settings.network_destination
    if not target:
        raise ConfigurationError("NETWORK_DESTINATION must be set")

    if target.lower().startswith("s3://"):
        from confvault.storage.s3_destination import S3Destination

        bucket, prefix = parse_s3_uri(target)
        return S3Destination(
            bucket=bucket,
            prefix=prefix,
            region=settings.destination_s3_region or None,
            endpoint_url=settings.destination_s3_endpoint_url or None,
        )

    return LocalDestination(target)
