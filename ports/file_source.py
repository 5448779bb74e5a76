"""
Port interface for turning a CLI file argument into a local file.

Implementations: FileSourceAdapter (adapters/)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.models import FileParam


@runtime_checkable
class FileSourcePort(Protocol):
    """Resolves local paths, http(s) URLs and s3:// URLs to a local file."""

    def resolve(self, value: str) -> FileParam:
        """Resolve a file source.

        Args:
            value: Local path (optionally ``@path`` or ``file://path``),
                ``http(s)://`` URL, or ``s3://bucket/key``.

        Returns:
            FileParam; remote sources are downloaded to a temporary file
            the caller releases with ``FileParam.cleanup()``.

        Raises:
            FileError: If a local path does not exist.
            ExternalServiceError: If a remote download fails.
        """
        ...
