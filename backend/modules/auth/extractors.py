"""
Session credential extractors.

A request may carry its session token in one of several places. Each
extractor knows one location; `extract_credential` walks an ordered list
and the first non-empty value wins. Sources are never merged.
"""

from typing import Optional, Protocol, Sequence

from starlette.requests import Request


class CredentialExtractor(Protocol):
    """Locates a raw session token in one part of the request."""

    name: str

    def extract(self, request: Request) -> Optional[str]:
        ...


class CookieExtractor:
    """Reads the token from the auth cookie (browser flows)."""

    name = "cookie"

    def __init__(self, cookie_name: str):
        self._cookie_name = cookie_name

    def extract(self, request: Request) -> Optional[str]:
        return request.cookies.get(self._cookie_name) or None


class BearerHeaderExtractor:
    """Reads the token from an `Authorization: Bearer <token>` header."""

    name = "bearer"

    def extract(self, request: Request) -> Optional[str]:
        header = request.headers.get("authorization")
        if not header:
            return None
        scheme, _, value = header.partition(" ")
        if scheme.lower() != "bearer":
            return None
        return value.strip() or None


class QueryParamExtractor:
    """
    Reads the token from a query-string parameter.

    Meant for download links where neither headers nor cookies can be set.
    """

    name = "query"

    def __init__(self, param_name: str):
        self._param_name = param_name

    def extract(self, request: Request) -> Optional[str]:
        return request.query_params.get(self._param_name) or None


def default_extractors(cookie_name: str, query_param: str) -> list[CredentialExtractor]:
    """Cookie first, then bearer header, then query string."""
    return [
        CookieExtractor(cookie_name),
        BearerHeaderExtractor(),
        QueryParamExtractor(query_param),
    ]


def extract_credential(
    request: Request,
    extractors: Sequence[CredentialExtractor],
) -> Optional[str]:
    """Return the token from the first extractor that yields one."""
    for extractor in extractors:
        token = extractor.extract(request)
        if token:
            return token
    return None
