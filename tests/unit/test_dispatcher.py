"""Unit tests for tool dispatch and parameter validation."""

import logging

import pytest

from drug_safety_mcp.data_sources.base_client import FetchError, UpstreamError
from drug_safety_mcp.tools.definitions import TOOLS
from drug_safety_mcp.tools.dispatcher import ROUTES, ToolName, resolve_tool
from drug_safety_mcp.tools.errors import (
    InvalidParamsError,
    ToolExecutionError,
    UnknownToolError,
)
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

from fakes import counts


def test_every_catalog_tool_has_a_route():
    assert {t.name for t in TOOLS} == {name.value for name in ROUTES}
    assert len(ToolName) == 17


def test_resolve_tool_rejects_unknown_names():
    with pytest.raises(UnknownToolError) as exc_info:
        resolve_tool("unknown_tool")

    assert exc_info.value.message == "Unknown tool: unknown_tool"
    assert exc_info.value.code == METHOD_NOT_FOUND


@pytest.mark.asyncio
class TestValidation:
    """Invalid arguments are rejected before any network I/O."""

    @pytest.mark.parametrize(
        "tool, arguments, fragment",
        [
            ("search_adverse_events", {}, "Missing required parameter: drug_name"),
            ("search_adverse_events", {"drug_name": ""}, "empty"),
            ("search_adverse_events", {"drug_name": "   "}, "empty"),
            ("search_adverse_events", {"drug_name": "x" * 201}, "200"),
            ("search_adverse_events", {"drug_name": "a", "limit": 0}, "limit"),
            ("search_adverse_events", {"drug_name": "a", "limit": 101}, "limit"),
            ("search_adverse_events", {"drug_name": "a", "start_date": "2024-01-01"}, "start_date"),
            ("get_event_counts", {"drug_name": "a"}, "Missing required parameter: group_by"),
            ("get_event_counts", {"drug_name": "a", "group_by": "weight"}, "group_by"),
            ("compare_safety_profiles", {"drug_names": ["a"]}, "drug_names"),
            ("compare_safety_profiles", {"drug_names": ["a", "b", "c", "d", "e", "f"]}, "drug_names"),
            ("compare_safety_profiles", {"drug_names": ["a", ""]}, "empty"),
            ("compare_safety_profiles", {"drug_names": ["Aspirin", " aspirin "]}, "more than once"),
            ("get_reporting_trends", {"drug_name": "a", "years": 21}, "years"),
            ("compare_label_to_reports", {"drug_name": "a", "top_n": 500}, "top_n"),
            ("get_recall_info", {"drug_name": "a", "classification": "Class IV"}, "classification"),
            ("search_by_drug_class", {"drug_class": "X", "class_type": "atc"}, "class_type"),
            ("get_pediatric_safety", {"drug_name": "a", "age_group": "senior"}, "age_group"),
        ],
    )
    async def test_invalid_arguments(self, make_dispatcher, tool, arguments, fragment):
        dispatcher, client = make_dispatcher()

        with pytest.raises(InvalidParamsError) as exc_info:
            await dispatcher.dispatch(tool, arguments)

        assert fragment in exc_info.value.message
        assert exc_info.value.code == INVALID_PARAMS
        assert client.calls == []

    async def test_non_object_arguments(self, make_dispatcher):
        dispatcher, client = make_dispatcher()

        with pytest.raises(InvalidParamsError, match="JSON object"):
            await dispatcher.dispatch("search_adverse_events", ["aspirin"])

        assert client.calls == []

    async def test_unknown_tool_makes_no_call(self, make_dispatcher):
        dispatcher, client = make_dispatcher()

        with pytest.raises(UnknownToolError):
            await dispatcher.dispatch("unknown_tool", {})

        assert client.calls == []

    async def test_empty_optional_strings_are_absent(self, make_dispatcher):
        dispatcher, client = make_dispatcher()

        await dispatcher.dispatch(
            "search_adverse_events",
            {"drug_name": "aspirin", "reaction": "", "start_date": "", "end_date": ""},
        )

        (search,) = client.searches
        assert "reactionmeddrapt" not in search
        assert "receivedate" not in search

    async def test_get_data_info_accepts_no_arguments(self, make_dispatcher):
        dispatcher, _ = make_dispatcher()

        result = await dispatcher.dispatch("get_data_info", None)

        assert "disclaimer" in result


@pytest.mark.asyncio
class TestErrorWrapping:
    async def test_upstream_error_becomes_execution_error(self, make_dispatcher):
        dispatcher, _ = make_dispatcher(
            UpstreamError("openfda", "Invalid search syntax", code="BAD_REQUEST", status_code=400)
        )

        with pytest.raises(ToolExecutionError) as exc_info:
            await dispatcher.dispatch("get_event_counts", {"drug_name": "a", "group_by": "sex"})

        assert exc_info.value.message == "openFDA API error: Invalid search syntax"
        assert exc_info.value.code == INTERNAL_ERROR

    async def test_fetch_error_becomes_execution_error(self, make_dispatcher):
        dispatcher, _ = make_dispatcher(FetchError("openfda", "Connection error: refused"))

        with pytest.raises(ToolExecutionError, match="Failed to fetch openFDA data"):
            await dispatcher.dispatch("search_by_reaction", {"reaction": "rash"})

    async def test_audit_line_names_tool_and_primary_argument(self, make_dispatcher, caplog):
        dispatcher, _ = make_dispatcher(counts(("Nausea", 3)))

        with caplog.at_level(logging.INFO, logger="drug_safety_mcp.audit"):
            await dispatcher.dispatch(
                "get_event_counts", {"drug_name": "aspirin", "group_by": "reaction"}
            )

        audit = [r.getMessage() for r in caplog.records if r.name == "drug_safety_mcp.audit"]
        assert len(audit) == 1
        assert "get_event_counts" in audit[0]
        assert "aspirin" in audit[0]
