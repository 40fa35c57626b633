from typing import Optional

import pytest
from starlette.requests import Request

from modules.auth.extractors import (
    BearerHeaderExtractor,
    CookieExtractor,
    QueryParamExtractor,
    default_extractors,
    extract_credential,
)


def make_request(
    cookie: Optional[str] = None,
    authorization: Optional[str] = None,
    query: str = "",
) -> Request:
    headers = []
    if cookie is not None:
        headers.append((b"cookie", f"auth={cookie}".encode()))
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/account",
        "headers": headers,
        "query_string": query.encode(),
    }
    return Request(scope)


class TestExtractors:
    def test_cookie_extractor(self):
        assert CookieExtractor("auth").extract(make_request(cookie="c-token")) == "c-token"

    def test_cookie_extractor_other_name(self):
        assert CookieExtractor("session").extract(make_request(cookie="c-token")) is None

    def test_bearer_extractor(self):
        request = make_request(authorization="Bearer h-token")
        assert BearerHeaderExtractor().extract(request) == "h-token"

    def test_bearer_scheme_is_case_insensitive(self):
        request = make_request(authorization="bearer h-token")
        assert BearerHeaderExtractor().extract(request) == "h-token"

    @pytest.mark.parametrize("header", ["Basic dXNlcjpwYXNz", "Bearer", "Bearer   ", "h-token"])
    def test_bearer_extractor_rejects_other_shapes(self, header):
        assert BearerHeaderExtractor().extract(make_request(authorization=header)) is None

    def test_query_extractor(self):
        assert QueryParamExtractor("token").extract(make_request(query="token=q-token")) == "q-token"

    def test_query_extractor_empty_value(self):
        assert QueryParamExtractor("token").extract(make_request(query="token=")) is None


class TestExtractCredential:
    @pytest.fixture
    def extractors(self):
        return default_extractors("auth", "token")

    def test_default_order(self, extractors):
        """Cookie first, then bearer header, then query string."""
        assert [e.name for e in extractors] == ["cookie", "bearer", "query"]

    def test_cookie_beats_header(self, extractors):
        request = make_request(cookie="c-token", authorization="Bearer h-token")
        assert extract_credential(request, extractors) == "c-token"

    def test_header_beats_query(self, extractors):
        request = make_request(authorization="Bearer h-token", query="token=q-token")
        assert extract_credential(request, extractors) == "h-token"

    def test_query_only(self, extractors):
        assert extract_credential(make_request(query="token=q-token"), extractors) == "q-token"

    def test_empty_cookie_falls_through(self, extractors):
        """An empty cookie value should not stop the search."""
        request = make_request(cookie="", authorization="Bearer h-token")
        assert extract_credential(request, extractors) == "h-token"

    def test_nothing_found(self, extractors):
        assert extract_credential(make_request(), extractors) is None
