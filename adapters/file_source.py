"""
File source adapter.

Implements FileSourcePort: local paths are used in place, http(s) and s3
sources are downloaded to a temporary file first.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import urlparse

import httpx

from domain.models import FileParam
from ports.object_store import ObjectStorePort
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import ExternalServiceError, FileError
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.ADAPTER)


class FileSourceAdapter:
    """Resolves ``--file`` arguments to local files."""

    def __init__(
        self,
        object_store: ObjectStorePort,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._objects = object_store
        self._http = http_client or httpx.Client(
            follow_redirects=True,
            timeout=None,
            headers={"User-Agent": Defaults.USER_AGENT},
        )

    def resolve(self, value: str) -> FileParam:
        """Resolve a file source; see FileSourcePort.resolve."""
        if value.startswith("s3://"):
            return self._download_s3(value)
        if value.startswith("http://") or value.startswith("https://"):
            return self._download_http(value)

        local = self._local_path(value)
        if local.exists():
            return FileParam(path=local, file_name=local.name or "upload")
        raise FileError(value, "file not found")

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FileSourceAdapter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _local_path(value: str) -> Path:
        if value.startswith("@"):
            return Path(value[1:])
        if value.startswith("file://"):
            return Path(value[len("file://"):])
        return Path(value)

    @staticmethod
    def _temp_path(file_name: str) -> Path:
        fd, name = tempfile.mkstemp(prefix="linkedin-upload-", suffix=PurePosixPath(file_name).suffix)
        os.close(fd)
        return Path(name)

    def _download_http(self, url: str) -> FileParam:
        file_name = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1] or "download"
        path = self._temp_path(file_name)
        try:
            with self._http.stream("GET", url) as response:
                response.raise_for_status()
                with open(path, "wb") as handle:
                    for chunk in response.iter_bytes():
                        handle.write(chunk)
        except httpx.HTTPError as exc:
            path.unlink(missing_ok=True)
            logger.error("http_download_failed", url=url, error=str(exc))
            raise ExternalServiceError("HTTP", f"Failed to download {url}: {exc}") from exc

        logger.info("http_source_downloaded", url=url, size_bytes=path.stat().st_size)
        return FileParam(path=path, file_name=file_name, is_temporary=True)

    def _download_s3(self, url: str) -> FileParam:
        key = urlparse(url).path.lstrip("/")
        file_name = PurePosixPath(key).name or "s3-object"
        path = self._temp_path(file_name)
        try:
            self._objects.download_to_path(url, path)
        except Exception:
            path.unlink(missing_ok=True)
            raise
        return FileParam(path=path, file_name=file_name, is_temporary=True)
