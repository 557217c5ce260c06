"""Tests for the correlation ID middleware."""

import logging
import uuid

import pytest

from infusion_schedule.middleware import CORRELATION_ID_HEADER


class TestCorrelationIdMiddleware:
    """Every response carries the request's correlation ID."""

    @pytest.mark.asyncio
    async def test_generates_id_when_missing(self, client):
        response = await client.get("/health/live")

        correlation_id = response.headers[CORRELATION_ID_HEADER]
        assert uuid.UUID(correlation_id).version == 4

    @pytest.mark.asyncio
    async def test_echoes_caller_id(self, client):
        response = await client.get(
            "/health/live", headers={CORRELATION_ID_HEADER: "nurse-report-17"}
        )
        assert response.headers[CORRELATION_ID_HEADER] == "nurse-report-17"

    @pytest.mark.asyncio
    async def test_distinct_ids_per_request(self, client):
        first = await client.get("/health/live")
        second = await client.get("/health/live")

        assert (
            first.headers[CORRELATION_ID_HEADER]
            != second.headers[CORRELATION_ID_HEADER]
        )

    @pytest.mark.asyncio
    async def test_request_logged_with_status(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="infusion_schedule.middleware"):
            await client.get("/health/live")

        completed = [
            r for r in caplog.records if r.getMessage() == "Request completed"
        ]
        assert len(completed) == 1
        assert completed[0].extra_fields["status_code"] == 200
        assert completed[0].extra_fields["path"] == "/health/live"
        assert completed[0].extra_fields["method"] == "GET"

    @pytest.mark.asyncio
    async def test_error_responses_also_tagged(self, client):
        response = await client.get("/does-not-exist")

        assert response.status_code == 404
        assert CORRELATION_ID_HEADER in response.headers
