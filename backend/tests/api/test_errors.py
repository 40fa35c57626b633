"""
Tests for the exception handlers.
"""

import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient

from shared.exceptions import ExternalServiceError, NotFoundError
from modules.accounts.exceptions import AccountIdExhaustedError


@pytest.fixture
def failing_client(app):
    router = APIRouter()

    @router.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    @router.get("/exhausted")
    async def exhausted():
        raise AccountIdExhaustedError(10)

    @router.get("/upstream")
    async def upstream():
        raise ExternalServiceError("quote host down", service="metals-api")

    @router.get("/missing")
    async def missing():
        raise NotFoundError("Thing not found", code="THING_NOT_FOUND")

    app.include_router(router, prefix="/test")
    return TestClient(app, raise_server_exceptions=False)


GENERIC = {"error": "INTERNAL_ERROR", "message": "Something went wrong", "details": {}}


class TestErrorResponses:
    def test_unexpected_exception_is_generic(self, failing_client):
        response = failing_client.get("/test/boom")

        assert response.status_code == 500
        assert response.json() == GENERIC

    def test_unmapped_domain_error_is_generic(self, failing_client):
        response = failing_client.get("/test/exhausted")

        assert response.status_code == 500
        assert response.json() == GENERIC

    def test_external_service_error_is_generic(self, failing_client):
        response = failing_client.get("/test/upstream")

        assert response.status_code == 500
        assert response.json() == GENERIC

    def test_domain_error_body(self, failing_client):
        response = failing_client.get("/test/missing")

        assert response.status_code == 404
        assert response.json() == {
            "error": "THING_NOT_FOUND",
            "message": "Thing not found",
            "details": {},
        }
