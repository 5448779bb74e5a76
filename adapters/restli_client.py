"""
Rest.li dispatcher adapter.

Implements RestClientPort with httpx: protocol headers, query tunneling for
long GET/DELETE URLs, and uniform response normalization.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

import httpx

from domain.models import RestResponse
from shared_utils.constants import Defaults, LogScope, RestliHeaders, TunnelMode
from shared_utils.error_handler import (
    ConfigurationError,
    ProtocolError,
    TransportError,
    ValidationError,
)
from shared_utils.http_utils import parse_response_body
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.REST_CLIENT)

_TUNNELABLE_METHODS = frozenset({"GET", "DELETE"})
_BODY_METHODS = frozenset({"POST", "PUT"})
_SUPPORTED_METHODS = _TUNNELABLE_METHODS | _BODY_METHODS


def assemble_url(url: str, query_pairs: List[Tuple[str, str]]) -> str:
    """Append form-encoded query pairs to ``url`` the way the request line will carry them."""
    if not query_pairs:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(query_pairs)}"


class RestliClient:
    """httpx implementation of RestClientPort.

    One client is shared by every call of an upload run; it is never
    mutated after construction.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        linkedin_version: str = Defaults.LINKEDIN_VERSION,
        restli_protocol_version: str = Defaults.RESTLI_PROTOCOL_VERSION,
        timeout: Optional[float] = None,
        tunnel_mode: TunnelMode = TunnelMode.AUTO,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url
        self.access_token = access_token
        self.linkedin_version = linkedin_version
        self.restli_protocol_version = restli_protocol_version
        self.tunnel_mode = TunnelMode(tunnel_mode)
        self._http = http_client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": Defaults.USER_AGENT},
        )

    # ------------------------------------------------------------------
    # RestClientPort implementation
    # ------------------------------------------------------------------

    def call(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Any] = None,
    ) -> RestResponse:
        """Issue a Rest.li request; see RestClientPort.call."""
        method = method.upper()
        if method not in _SUPPORTED_METHODS:
            raise ValidationError(f"unsupported method {method}", context={"method": method})

        url = self.build_url(path)
        query_pairs = [(str(k), str(v)) for k, v in (query or {}).items()]
        tunnel = self.should_tunnel(method, url, query_pairs)

        request_headers = httpx.Headers()
        if tunnel:
            request_headers[RestliHeaders.METHOD_OVERRIDE] = method
        request_headers[RestliHeaders.AUTHORIZATION] = f"Bearer {self.access_token}"
        request_headers[RestliHeaders.LINKEDIN_VERSION] = self.linkedin_version
        request_headers[RestliHeaders.X_LINKEDIN_VERSION] = self.linkedin_version
        request_headers[RestliHeaders.PROTOCOL_VERSION] = self.restli_protocol_version
        request_headers[RestliHeaders.ACCEPT] = "application/json"
        for name, value in (headers or {}).items():
            request_headers[name] = value

        if tunnel:
            # POST + X-HTTP-Method-Override + x-www-form-urlencoded body
            request_kwargs: dict = {"data": dict(query_pairs)}
            wire_method = "POST"
            wire_url = url
        else:
            # appended to any query the URL already carries
            request_kwargs = {}
            wire_url = assemble_url(url, query_pairs)
            if method in _BODY_METHODS and body is not None:
                request_kwargs["json"] = body
            wire_method = method

        logger.debug("request", method=method, url=url, tunneled=tunnel)
        response = self._send(wire_method, wire_url, headers=request_headers, **request_kwargs)
        return self._normalize(response, method, url)

    def put_bytes(
        self,
        url: str,
        content: bytes,
        headers: Optional[Mapping[str, str]] = None,
        include_auth: bool = False,
    ) -> RestResponse:
        """PUT raw bytes to an upload URL; see RestClientPort.put_bytes."""
        request_headers = httpx.Headers()
        request_headers[RestliHeaders.CONTENT_TYPE] = "application/octet-stream"
        request_headers[RestliHeaders.ACCEPT] = "application/json"
        if include_auth:
            request_headers[RestliHeaders.AUTHORIZATION] = f"Bearer {self.access_token}"
        for name, value in (headers or {}).items():
            request_headers[name] = value

        logger.debug("request", method="PUT", url=url, size_bytes=len(content), with_auth=include_auth)
        response = self._send("PUT", url, headers=request_headers, content=content)
        return self._normalize(response, "PUT", url)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def build_url(self, path: str) -> str:
        """Join ``path`` onto the base URL; absolute http(s) URLs pass through."""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def should_tunnel(self, method: str, url: str, query_pairs: List[Tuple[str, str]]) -> bool:
        """Decide whether a request is re-encoded as a tunneled POST.

        Only GET/DELETE with at least one query parameter qualify. In
        ``auto`` mode the fully assembled URL must reach the length threshold.
        """
        if method.upper() not in _TUNNELABLE_METHODS:
            return False
        if self.tunnel_mode == TunnelMode.NEVER:
            return False
        if not query_pairs:
            return False
        if self.tunnel_mode == TunnelMode.ALWAYS:
            return True
        return len(assemble_url(url, query_pairs)) >= Defaults.TUNNEL_URL_THRESHOLD

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RestliClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self._http.request(method, url, **kwargs)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise ConfigurationError(f"malformed URL {url}: {exc}", context={"url": url}) from exc
        except httpx.RequestError as exc:
            logger.error("request_failed", method=method, url=url, error=str(exc))
            raise TransportError(
                f"{method} {url} failed: {exc}",
                context={"method": method, "url": url, "error_type": type(exc).__name__},
            ) from exc

    @staticmethod
    def _normalize(response: httpx.Response, method: str, url: str) -> RestResponse:
        """Build a RestResponse, or raise ProtocolError for non-2xx.

        The body is parsed first (that step never raises) so a failed call
        always surfaces its status together with whatever body came back.
        """
        out_headers = {}
        for raw_name, raw_value in response.headers.raw:
            try:
                name = raw_name.decode("ascii")
                value = raw_value.decode("utf-8")
            except UnicodeDecodeError:
                continue
            if name.lower() == "authorization":
                continue
            out_headers[name] = value

        body = parse_response_body(response.text)

        if not response.is_success:
            logger.warning("request_rejected", method=method, url=url, status=response.status_code)
            raise ProtocolError(response.status_code, body, context={"method": method, "url": url})

        return RestResponse(status=response.status_code, headers=out_headers, body=body)
