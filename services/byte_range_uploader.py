"""
Byte-range uploader — pushes file bytes to upload targets.

Whole-file targets are read once and PUT as-is; ranged targets are sliced by
seeking to ``firstByte`` and reading exactly the range length. Parts go out
one at a time in the order given and the first failure aborts the run.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, List, Sequence

from domain.models import ByteRange, PartResult, UploadTarget
from ports.rest_client import RestClientPort
from shared_utils.constants import LogScope, RestliHeaders
from shared_utils.error_handler import FileError, SchemaError
from shared_utils.http_utils import find_header_ci, strip_quotes
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.UPLOADER)


class ByteRangeUploader:
    """PUTs whole files or byte ranges and records each part's ETag."""

    def __init__(self, rest_client: RestClientPort) -> None:
        self._client = rest_client

    def upload(
        self,
        file_path: Path,
        targets: Sequence[UploadTarget],
        include_auth: bool = False,
    ) -> List[PartResult]:
        """Upload to every target, in order.

        Args:
            file_path: Local file to read.
            targets: Upload targets; a target with ``byte_range`` gets only that slice.
            include_auth: Attach the bearer token (direct uploads only).

        Returns:
            One PartResult per target, in target order.

        Raises:
            FileError: File unreadable or shorter than a declared range.
            SchemaError: A ranged PUT response carried no ETag.
        """
        results: List[PartResult] = []
        try:
            handle = open(file_path, "rb")
        except OSError as exc:
            raise FileError(str(file_path), f"cannot open file ({exc.strerror})") from exc

        with handle:
            for index, target in enumerate(targets):
                if target.byte_range is None:
                    payload = self._read_all(handle, file_path)
                else:
                    payload = self._read_range(handle, file_path, target.byte_range, index)

                response = self._client.put_bytes(
                    target.url, payload, target.headers, include_auth=include_auth
                )

                etag = find_header_ci(response.headers, RestliHeaders.ETAG)
                if etag is None and target.byte_range is not None:
                    raise SchemaError(
                        RestliHeaders.ETAG,
                        "missing header for multipart part",
                        context={"part_index": index},
                    )
                result = PartResult(etag=strip_quotes(etag) if etag is not None else None)
                results.append(result)

                logger.info(
                    "part_uploaded",
                    part_index=index,
                    part_count=len(targets),
                    size_bytes=len(payload),
                    etag=result.etag,
                )

        return results

    @staticmethod
    def _read_all(handle: BinaryIO, file_path: Path) -> bytes:
        try:
            handle.seek(0)
            return handle.read()
        except OSError as exc:
            raise FileError(str(file_path), f"cannot read file ({exc.strerror})") from exc

    @staticmethod
    def _read_range(handle: BinaryIO, file_path: Path, byte_range: ByteRange, index: int) -> bytes:
        try:
            handle.seek(byte_range.first_byte)
            payload = handle.read(byte_range.length)
        except OSError as exc:
            raise FileError(
                str(file_path), f"cannot read part ({exc.strerror})", context={"part_index": index}
            ) from exc
        if len(payload) != byte_range.length:
            raise FileError(
                str(file_path),
                "short read for part",
                context={
                    "part_index": index,
                    "first_byte": byte_range.first_byte,
                    "last_byte": byte_range.last_byte,
                    "bytes_read": len(payload),
                },
            )
        return payload
