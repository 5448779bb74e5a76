"""
Pagination and response unwrapping for Rest.li collection calls.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from domain.models import RestResponse
from ports.rest_client import RestClientPort
from shared_utils.constants import LogScope, RestliHeaders
from shared_utils.http_utils import find_header_ci
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.PAGINATION)


def next_link_href(body: Any) -> Optional[str]:
    """Return ``paging.links[rel=next].href`` if present."""
    if not isinstance(body, dict):
        return None
    paging = body.get("paging")
    links = paging.get("links") if isinstance(paging, dict) else None
    if not isinstance(links, list):
        return None
    for link in links:
        if not isinstance(link, dict):
            continue
        if link.get("rel") == "next" and isinstance(link.get("href"), str):
            return link["href"]
    return None


def paginate_all(
    client: RestClientPort,
    method: str,
    path: str,
    query: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
    body: Optional[Any] = None,
    max_pages: int = 0,
    max_items: int = 0,
) -> RestResponse:
    """Follow ``next`` links and collect every page's ``elements``.

    Args:
        max_pages: Stop after this many pages (0 = unlimited).
        max_items: Stop once this many elements are collected (0 = unlimited).

    Returns:
        The last page's response with ``body`` replaced by ``{"elements": [...]}``.
    """
    response = client.call(method, path, query=query, headers=headers, body=body)
    items: List[Any] = []
    pages = 1

    while True:
        elements = response.body.get("elements") if isinstance(response.body, dict) else None
        if not isinstance(elements, list):
            break

        for item in elements:
            items.append(item)
            if max_items and len(items) >= max_items:
                logger.debug("pagination_item_limit", pages=pages, items=len(items))
                return response.model_copy(update={"body": {"elements": items}})

        next_href = next_link_href(response.body)
        if next_href is None:
            break
        if max_pages and pages >= max_pages:
            break
        pages += 1
        response = client.call("GET", next_href, headers=headers)

    logger.debug("pagination_complete", pages=pages, items=len(items))
    return response.model_copy(update={"body": {"elements": items}})


def unwrap_body(body: Any, headers: Mapping[str, str]) -> Any:
    """Reduce a Rest.li envelope to its payload.

    ``elements`` wins over ``value``; a create response's ``X-RestLi-Id``
    header is folded in as ``id`` when the payload has none.
    """
    out: Any = body
    if isinstance(body, dict):
        if "elements" in body:
            out = body["elements"]
        elif "value" in body:
            out = body["value"]

    restli_id = find_header_ci(headers, RestliHeaders.RESTLI_ID)
    if restli_id is not None:
        if out is None:
            out = {"id": restli_id}
        elif isinstance(out, dict):
            out = {**out}
            out.setdefault("id", restli_id)
    return out
