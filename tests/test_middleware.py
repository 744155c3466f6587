from __future__ import annotations

import logging
import uuid
from fastapi import status
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


class TestCorrelationIdMiddleware:
    """Test correlation ID middleware functionality."""

    def test_correlation_id_generated_when_missing(self, test_client: TestClient) -> None:
        resp = test_client.get("/api/books")
        assert resp.status_code == status.HTTP_200_OK
        corr_id = resp.headers["X-Request-ID"]
        assert uuid.UUID(corr_id)

    def test_correlation_id_preserved_when_provided(
        self, test_client: TestClient, headers_with_correlation: dict[str, str]
    ) -> None:
        resp = test_client.get("/api/stats", headers=headers_with_correlation)
        assert resp.headers["X-Request-ID"] == headers_with_correlation["X-Request-ID"]

    def test_correlation_id_in_error_responses(self, test_client: TestClient) -> None:
        provided = "trace-404"
        resp = test_client.get("/api/books/999", headers={"X-Request-ID": provided})
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        assert resp.headers["X-Request-ID"] == provided

    def test_correlation_id_different_per_request(self, test_client: TestClient) -> None:
        first = test_client.get("/api/genres").headers["X-Request-ID"]
        second = test_client.get("/api/genres").headers["X-Request-ID"]
        assert first != second

    def test_access_line_logged(self, test_client: TestClient, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="catalogue.core.middleware_correlation"):
            test_client.get("/api/authors", headers={"X-Request-ID": "log-me"})

        records = [
            r for r in caplog.records if r.name == "catalogue.core.middleware_correlation"
        ]
        assert records
        assert "GET /api/authors -> 200" in records[-1].getMessage()
        assert records[-1].request_id == "log-me"


class TestCors:
    def test_cors_headers_present(self, test_client: TestClient) -> None:
        resp = test_client.get("/api/books", headers={"Origin": "http://example.com"})
        assert resp.headers["access-control-allow-origin"] in ("*", "http://example.com")
