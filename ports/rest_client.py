"""
Port interface for the Rest.li dispatcher.

Implementations: RestliClient (adapters/)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from domain.models import RestResponse


@runtime_checkable
class RestClientPort(Protocol):
    """Abstract interface for Rest.li calls and raw upload PUTs."""

    def call(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Any] = None,
    ) -> RestResponse:
        """Issue a Rest.li request and normalize the response.

        Args:
            method: HTTP method (GET, DELETE, POST, PUT).
            path: Path relative to the base URL, or an absolute http(s) URL.
            query: Query parameters (tunneled for long GET/DELETE).
            headers: Extra headers applied after the protocol headers.
            body: JSON body for POST/PUT.

        Returns:
            RestResponse for a 2xx status.

        Raises:
            ProtocolError: Non-2xx status.
            TransportError: Network or timeout failure.
        """
        ...

    def put_bytes(
        self,
        url: str,
        content: bytes,
        headers: Optional[Mapping[str, str]] = None,
        include_auth: bool = False,
    ) -> RestResponse:
        """PUT a binary payload to an absolute URL.

        Args:
            url: Absolute upload URL.
            content: Bytes to send as ``application/octet-stream``.
            headers: Headers required by the upload target.
            include_auth: Attach the bearer token. Presigned part URLs must not.

        Returns:
            RestResponse including the response headers (e.g. ETag).
        """
        ...
