"""
Unit tests for pagination and response unwrapping.
"""

from unittest.mock import MagicMock

import httpx
import pytest

from adapters.restli_client import RestliClient
from domain.models import RestResponse
from services.pagination import next_link_href, paginate_all, unwrap_body


def _page(elements, next_href=None) -> RestResponse:
    links = [{"rel": "next", "href": next_href, "type": "application/json"}] if next_href else []
    return RestResponse(status=200, body={"elements": elements, "paging": {"start": 0, "count": 2, "links": links}})


class TestNextLinkHref:
    def test_found(self) -> None:
        body = {"paging": {"links": [{"rel": "prev", "href": "/a"}, {"rel": "next", "href": "/b"}]}}
        assert next_link_href(body) == "/b"

    @pytest.mark.parametrize(
        "body",
        [None, "text", {}, {"paging": {}}, {"paging": {"links": "x"}}, {"paging": {"links": [{"rel": "prev", "href": "/a"}]}}],
    )
    def test_absent(self, body) -> None:
        assert next_link_href(body) is None


class TestPaginateAll:
    def test_follows_next_links(self, mock_rest_client: MagicMock) -> None:
        mock_rest_client.call.side_effect = [
            _page([1, 2], "/adAccounts?start=2"),
            _page([3, 4], "/adAccounts?start=4"),
            _page([5]),
        ]

        response = paginate_all(
            mock_rest_client, "GET", "/adAccounts", {"q": "search"}, {"X-Extra": "1"}, None
        )

        assert response.body == {"elements": [1, 2, 3, 4, 5]}
        first, second, third = mock_rest_client.call.call_args_list
        assert first[0] == ("GET", "/adAccounts")
        assert first[1]["query"] == {"q": "search"}
        assert second[0] == ("GET", "/adAccounts?start=2")
        assert second[1]["headers"] == {"X-Extra": "1"}
        assert third[0] == ("GET", "/adAccounts?start=4")

    def test_max_pages(self, mock_rest_client: MagicMock) -> None:
        mock_rest_client.call.side_effect = [_page([1, 2], "/n1"), _page([3, 4], "/n2"), _page([5])]
        response = paginate_all(mock_rest_client, "GET", "/x", max_pages=2)
        assert response.body == {"elements": [1, 2, 3, 4]}
        assert mock_rest_client.call.call_count == 2

    def test_max_items(self, mock_rest_client: MagicMock) -> None:
        mock_rest_client.call.side_effect = [_page([1, 2], "/n1"), _page([3, 4], "/n2")]
        response = paginate_all(mock_rest_client, "GET", "/x", max_items=3)
        assert response.body == {"elements": [1, 2, 3]}
        assert mock_rest_client.call.call_count == 2

    def test_next_link_query_reaches_server(self) -> None:
        base = "https://api.example.com/rest"
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if len(requests) > 5:
                raise AssertionError("pagination did not advance")
            start = int(request.url.params.get("start", "0"))
            if start == 0:
                links = [{"rel": "next", "href": f"{base}/adCampaigns?q=search&start=10&count=10"}]
                return httpx.Response(200, json={"elements": [1, 2], "paging": {"links": links}})
            return httpx.Response(200, json={"elements": [3], "paging": {"links": []}})

        client = RestliClient(
            base_url=base,
            access_token="tok",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        response = paginate_all(client, "GET", "/adCampaigns", {"q": "search"})

        assert response.body == {"elements": [1, 2, 3]}
        assert len(requests) == 2
        assert requests[1].url.params["start"] == "10"

    def test_non_collection_body(self, mock_rest_client: MagicMock) -> None:
        mock_rest_client.call.return_value = RestResponse(status=200, body={"id": 1})
        response = paginate_all(mock_rest_client, "GET", "/x")
        assert response.body == {"elements": []}


class TestUnwrapBody:
    def test_elements_preferred(self) -> None:
        assert unwrap_body({"elements": [1], "value": {"a": 1}}, {}) == [1]

    def test_value(self) -> None:
        assert unwrap_body({"value": {"a": 1}}, {}) == {"a": 1}

    def test_passthrough(self) -> None:
        assert unwrap_body({"a": 1}, {}) == {"a": 1}

    def test_restli_id_for_empty_body(self) -> None:
        assert unwrap_body(None, {"x-restli-id": "urn:li:sponsoredCampaign:1"}) == {"id": "urn:li:sponsoredCampaign:1"}

    def test_restli_id_does_not_override(self) -> None:
        assert unwrap_body({"id": 7, "name": "n"}, {"X-RestLi-Id": "9"}) == {"id": 7, "name": "n"}

    def test_restli_id_added_to_object(self) -> None:
        original = {"name": "n"}
        assert unwrap_body(original, {"X-RestLi-Id": "9"}) == {"name": "n", "id": "9"}
        assert original == {"name": "n"}

    def test_restli_id_ignored_for_lists(self) -> None:
        assert unwrap_body({"elements": [1]}, {"X-RestLi-Id": "9"}) == [1]
