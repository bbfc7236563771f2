"""Unit tests for OpenFDAClient and ApiKeyProvider."""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from drug_safety_mcp.constants import (
    OPENFDA_ENFORCEMENT_URL,
    OPENFDA_EVENT_URL,
    OPENFDA_LABEL_URL,
)
from drug_safety_mcp.data_sources.base_client import ClientConfig, UpstreamError
from drug_safety_mcp.data_sources.fda import ApiKeyProvider, OpenFDAClient


def _client(api_key: str = "") -> OpenFDAClient:
    return OpenFDAClient(api_key_provider=ApiKeyProvider(api_key), config=ClientConfig())


# --- ApiKeyProvider ---


def test_env_key_wins_over_secret_file(tmp_path):
    secret = tmp_path / "key"
    secret.write_text("from-file")

    provider = ApiKeyProvider("from-env", secret)

    assert provider.get() == "from-env"
    assert provider.configured


def test_secret_file_read_lazily_and_cached(tmp_path):
    secret = tmp_path / "key"
    secret.write_text("  from-file\n")
    provider = ApiKeyProvider("", secret)

    assert provider.get() == "from-file"

    secret.unlink()
    assert provider.get() == "from-file"


def test_missing_key_degrades_with_single_warning(tmp_path, caplog):
    provider = ApiKeyProvider("", tmp_path / "does-not-exist")

    with caplog.at_level(logging.WARNING, logger="drug_safety_mcp.data_sources.fda"):
        assert provider.get() == ""
        assert provider.get() == ""

    assert not provider.configured
    warnings = [r for r in caplog.records if "No openFDA API key" in r.getMessage()]
    assert len(warnings) == 1


# --- _build_params ---


def test_build_params_drops_unset_values():
    params = _client()._build_params(search="a:1", count=None, limit=None, skip=None)

    assert params == {"search": "a:1"}


def test_build_params_puts_api_key_first():
    params = _client("secret")._build_params(search="a:1", limit=5)

    assert list(params) == ["api_key", "search", "limit"]
    assert params["limit"] == "5"


# --- Endpoint methods ---


@pytest.mark.asyncio
class TestEndpoints:
    async def test_count_events_uses_event_url(self):
        client = _client()
        payload = {"results": [{"term": "Nausea", "count": 10}]}

        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value=payload
        ) as mock_get:
            result = await client.count_events("a:1", count="x.exact", limit=3)

        url, params = mock_get.call_args.args
        assert url == OPENFDA_EVENT_URL
        assert params == {"search": "a:1", "count": "x.exact", "limit": "3"}
        assert mock_get.call_args.kwargs["context"].method == "count_events"
        assert result.results == payload["results"]

    async def test_search_labels_defaults_to_one_result(self):
        client = _client()

        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value={"results": []}
        ) as mock_get:
            await client.search_labels("b:2")

        url, params = mock_get.call_args.args
        assert url == OPENFDA_LABEL_URL
        assert params["limit"] == "1"

    async def test_search_enforcement_uses_enforcement_url(self):
        client = _client()

        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value={"results": []}
        ) as mock_get:
            await client.search_enforcement("c:3", limit=10)

        assert mock_get.call_args.args[0] == OPENFDA_ENFORCEMENT_URL

    async def test_api_key_never_logged_in_context(self):
        client = _client("secret")

        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value={"results": []}
        ) as mock_get:
            await client.search_events("a:1", limit=1)

        assert mock_get.call_args.args[1]["api_key"] == "secret"
        assert "api_key" not in mock_get.call_args.kwargs["context"].params

    async def test_envelope_meta_parsed(self):
        client = _client()
        payload = {
            "meta": {"last_updated": "2024-06-25", "results": {"skip": 0, "limit": 1, "total": 4321}},
            "results": [{"safetyreportid": "1"}],
        }

        with patch.object(client, "_rest_get", new_callable=AsyncMock, return_value=payload):
            result = await client.search_events("a:1", limit=1)

        assert result.total == 4321
        assert result.last_updated == "2024-06-25"
        assert not result.is_empty

    async def test_not_found_maps_to_empty_envelope(self):
        client = _client()
        not_found = UpstreamError("openfda", "No matches found!", code="NOT_FOUND", status_code=404)

        with patch.object(client, "_rest_get", new_callable=AsyncMock, side_effect=not_found):
            result = await client.search_events("a:1", limit=1)

        assert result.is_empty
        assert result.total == 0

    async def test_other_upstream_errors_propagate(self):
        client = _client()
        bad = UpstreamError("openfda", "Invalid search", code="BAD_REQUEST", status_code=400)

        with patch.object(client, "_rest_get", new_callable=AsyncMock, side_effect=bad):
            with pytest.raises(UpstreamError, match="Invalid search"):
                await client.count_events("a:1", count="x")
