"""
Port interface for object storage used by file sources and presigning.

Implementations: S3ObjectStoreAdapter (adapters/)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ObjectStorePort(Protocol):
    """Abstract interface for s3:// object access."""

    def download_to_path(self, url: str, destination: Path) -> int:
        """Download an object to a local file.

        Args:
            url: ``s3://bucket/key`` URL.
            destination: Local path to write.

        Returns:
            Number of bytes written.

        Raises:
            ExternalServiceError: If download fails.
        """
        ...

    def presign_get(self, url: str, expires: int) -> str:
        """Return a presigned GET URL valid for ``expires`` seconds."""
        ...

    def presign_put(self, url: str, expires: int, content_type: Optional[str] = None) -> str:
        """Return a presigned PUT URL valid for ``expires`` seconds."""
        ...
