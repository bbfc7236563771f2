"""Unit tests for the tool catalog."""

import json
import re

import mcp.types as types
import pytest

from drug_safety_mcp.tools.definitions import TOOLS, TOOLS_BY_NAME

EXPECTED_TOOLS = [
    "search_adverse_events",
    "get_event_counts",
    "compare_safety_profiles",
    "get_serious_events",
    "get_reporting_trends",
    "search_by_reaction",
    "get_concomitant_drugs",
    "get_data_info",
    "get_drug_label_info",
    "get_recall_info",
    "search_by_indication",
    "search_by_drug_class",
    "compare_label_to_reports",
    "get_pediatric_safety",
    "get_geriatric_safety",
    "get_safety_summary",
    "get_pregnancy_lactation_info",
]


def test_catalog_order_and_names():
    assert [t.name for t in TOOLS] == EXPECTED_TOOLS
    assert set(TOOLS_BY_NAME) == set(EXPECTED_TOOLS)


@pytest.mark.parametrize("tool", TOOLS, ids=lambda t: t.name)
def test_descriptor_shape(tool):
    dumped = tool.model_dump(by_alias=True)

    assert tool.description
    assert dumped["inputSchema"]["type"] == "object"
    assert isinstance(dumped["inputSchema"]["properties"], dict)
    assert set(tool.required) <= set(dumped["inputSchema"]["properties"])
    assert tool.annotations.title
    assert tool.annotations.readOnlyHint is True
    assert tool.annotations.destructiveHint is False
    assert tool.annotations.openWorldHint is True
    assert re.fullmatch(r"[a-z][a-z0-9_]*", tool.name)
    assert len(tool.name) < 64
    assert len(tool.description) > 10


@pytest.mark.parametrize(
    "name, required",
    [
        ("search_adverse_events", ["drug_name"]),
        ("get_event_counts", ["drug_name", "group_by"]),
        ("compare_safety_profiles", ["drug_names"]),
        ("search_by_reaction", ["reaction"]),
        ("search_by_indication", ["indication"]),
        ("search_by_drug_class", ["drug_class"]),
        ("get_data_info", []),
    ],
)
def test_required_parameters(name, required):
    assert TOOLS_BY_NAME[name].required == required


def test_catalog_never_mentions_credentials():
    catalog = json.dumps([t.model_dump(by_alias=True) for t in TOOLS]).lower()

    assert "api_key" not in catalog
    assert "apikey" not in catalog


def test_descriptors_are_frozen():
    with pytest.raises(Exception):
        TOOLS[0].name = "other"


def test_to_mcp_round_trip():
    tool = TOOLS_BY_NAME["get_event_counts"].to_mcp()

    assert isinstance(tool, types.Tool)
    assert tool.name == "get_event_counts"
    assert tool.inputSchema["required"] == ["drug_name", "group_by"]
    assert tool.annotations.title == "Get Adverse Event Counts"


def test_descriptions_embed_no_token_like_strings():
    for tool in TOOLS:
        assert not re.search(r"[A-Za-z0-9]{32,}", tool.description)
