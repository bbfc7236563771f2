"""Unit tests for base_client module."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from drug_safety_mcp.data_sources.base_client import (
    BaseClient,
    DataSourceError,
    FetchError,
    RequestContext,
    UpstreamError,
    _encode_value,
    _with_query,
)
from drug_safety_mcp.services.query_builder import build_drug_search


class ConcreteTestClient(BaseClient):
    """Concrete implementation of BaseClient for testing."""

    @property
    def _source_name(self) -> str:
        return "test_client"


def _mock_session(resp=None, get_side_effect=None):
    """A session whose ``get`` is an async context manager yielding ``resp``."""
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=resp)
    ctx.__aexit__ = AsyncMock(return_value=False)
    session = MagicMock()
    session.get = MagicMock(return_value=ctx, side_effect=get_side_effect)
    return session


def _mock_response(status=200, payload=None, json_error=None):
    resp = MagicMock()
    resp.status = status
    resp.json = AsyncMock(return_value=payload, side_effect=json_error)
    return resp


@pytest.mark.asyncio
class TestBaseClient:
    """Unit tests for BaseClient session lifecycle (no network calls)."""

    async def test_client_context_manager(self):
        """Test that client can be used as async context manager."""
        async with ConcreteTestClient() as client:
            assert client._session is None  # Session created lazily
            session = await client._get_session()

            assert session is not None
            assert not session.closed

        assert client._session.closed

    async def test_session_reuse(self):
        """Test that session is reused across requests."""
        client = ConcreteTestClient()

        session1 = await client._get_session()
        session2 = await client._get_session()

        assert session1 is session2
        await client.close()


@pytest.mark.asyncio
class TestRestGet:
    """Unit tests for _rest_get outcome mapping."""

    async def test_returns_payload_on_success(self):
        payload = {"meta": {}, "results": [{"term": "Nausea", "count": 3}]}
        session = _mock_session(_mock_response(payload=payload))

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            result = await client._rest_get("https://example.com/x.json", {"limit": "1"})

        assert result == payload
        session.get.assert_called_once()

    async def test_error_object_raises_upstream_error(self):
        payload = {"error": {"code": "BAD_REQUEST", "message": "Invalid search"}}
        session = _mock_session(_mock_response(status=400, payload=payload))

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            with pytest.raises(UpstreamError, match="Invalid search") as exc_info:
                await client._rest_get("https://example.com/x.json", {})

        assert exc_info.value.code == "BAD_REQUEST"
        assert exc_info.value.status_code == 400
        assert exc_info.value.source == "test_client"
        assert isinstance(exc_info.value, DataSourceError)

    async def test_non_json_body_raises_fetch_error(self):
        session = _mock_session(
            _mock_response(status=502, json_error=ValueError("Expecting value"))
        )

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            with pytest.raises(FetchError, match="Non-JSON response") as exc_info:
                await client._rest_get("https://example.com/x.json", {})

        assert exc_info.value.status_code == 502

    async def test_non_object_payload_raises_fetch_error(self):
        session = _mock_session(_mock_response(payload=[1, 2, 3]))

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            with pytest.raises(FetchError, match="list"):
                await client._rest_get("https://example.com/x.json", {})

    async def test_connection_error_raises_fetch_error(self):
        session = _mock_session(get_side_effect=aiohttp.ClientConnectionError("refused"))

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            with pytest.raises(FetchError, match="Connection error"):
                await client._rest_get("https://example.com/x.json", {})

    async def test_timeout_raises_fetch_error(self):
        session = _mock_session(get_side_effect=asyncio.TimeoutError())

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            with pytest.raises(FetchError, match="Timeout"):
                await client._rest_get("https://example.com/x.json", {})

    async def test_query_operators_reach_the_wire_unencoded(self):
        session = _mock_session(_mock_response(payload={"results": []}))

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            await client._rest_get(
                "https://example.com/x.json",
                {"search": 'a:"X"+AND+b:[1+TO+2]', "limit": "5"},
            )

        sent = str(session.get.call_args.args[0])
        assert sent == "https://example.com/x.json?search=a:%22X%22+AND+b:[1+TO+2]&limit=5"

    async def test_request_line_logs_context_params(self, caplog):
        session = _mock_session(_mock_response(payload={"results": []}))
        context = RequestContext(
            source="openfda", method="count_events", params={"search": 'a:"X"'}
        )

        client = ConcreteTestClient()
        with patch.object(client, "_get_session", new_callable=AsyncMock, return_value=session):
            with caplog.at_level(logging.INFO, logger="drug_safety_mcp.data_sources"):
                await client._rest_get(
                    "https://example.com/x.json",
                    {"api_key": "secret", "search": 'a:"X"'},
                    context=context,
                )

        request_line = next(r.getMessage() for r in caplog.records if "Request [" in r.getMessage())
        assert "count_events" in request_line
        assert "search" in request_line
        assert "secret" not in request_line


class TestQueryEncoding:
    def test_empty_params_leave_url_alone(self):
        assert _with_query("https://example.com/x.json", {}) == "https://example.com/x.json"

    def test_spaces_become_plus(self):
        assert _encode_value('drugindication:"type 2 diabetes"') == (
            "drugindication:%22type+2+diabetes%22"
        )

    def test_ampersand_and_backslash_are_encoded(self):
        assert _encode_value('x:"a&b\\"') == "x:%22a%26b%5C%22"

    def test_plus_inside_phrase_is_user_text(self):
        assert _encode_value('a:"A+D"+OR+b:"A+D"') == "a:%22A%2BD%22+OR+b:%22A%2BD%22"

    def test_plus_between_phrases_stays_an_operator(self):
        assert _encode_value('a:"x"+AND+b:[1+TO+2]') == "a:%22x%22+AND+b:[1+TO+2]"

    def test_escaped_quote_does_not_end_phrase(self):
        assert _encode_value('a:"x\\"+y"') == "a:%22x%5C%22%2By%22"

    def test_drug_name_with_plus_survives(self):
        query = _with_query(
            "https://example.com/x.json", {"search": build_drug_search("A+D")}
        )

        assert "%22A%2BD%22" in query
        assert "%22A+D%22" not in query

    def test_error_string_includes_source(self):
        err = DataSourceError("openfda", "boom", status_code=500)

        assert str(err) == "[openfda] boom"
        assert err.detail == "boom"
