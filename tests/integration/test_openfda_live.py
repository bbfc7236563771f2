"""Integration tests against the live openFDA API."""

import pytest

from drug_safety_mcp.services import query_builder as qb

# --- Client ---


@pytest.mark.asyncio
async def test_count_events_for_known_drug(fda_client):
    envelope = await fda_client.count_events(
        qb.build_drug_search("metformin"), count="patient.reaction.reactionmeddrapt.exact", limit=5
    )

    assert len(envelope.results) == 5
    counts = [row["count"] for row in envelope.results]
    assert counts == sorted(counts, reverse=True)


@pytest.mark.asyncio
async def test_unknown_drug_is_empty(fda_client):
    envelope = await fda_client.search_events(
        qb.build_drug_search("zzzznotadrugzzzz"), limit=1
    )

    assert envelope.is_empty
    assert envelope.total == 0


@pytest.mark.asyncio
async def test_label_lookup(fda_client):
    envelope = await fda_client.search_labels(qb.build_label_search("ibuprofen"))

    assert len(envelope.results) == 1
    assert "openfda" in envelope.results[0]


# --- Tools ---


@pytest.mark.asyncio
async def test_search_adverse_events_tool(live_dispatcher):
    result = await live_dispatcher.dispatch(
        "search_adverse_events", {"drug_name": "aspirin", "limit": 3}
    )

    assert result["total_matching"] > 0
    assert result["returned"] == 3


@pytest.mark.asyncio
async def test_safety_summary_tool(live_dispatcher):
    result = await live_dispatcher.dispatch("get_safety_summary", {"drug_name": "atorvastatin"})

    assert result["adverse_events"]["total_reports"] > 0
    assert result["adverse_events"]["top_reactions"]


@pytest.mark.asyncio
async def test_data_info_tool(live_dispatcher):
    result = await live_dispatcher.dispatch("get_data_info", {})

    assert result["last_updated"] != "Unknown"
