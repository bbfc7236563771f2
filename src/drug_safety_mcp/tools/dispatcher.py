"""
Tool dispatch.

Resolves a tool name, validates the raw argument object into the tool's
parameter record, routes to the handler and turns upstream failures into
tool errors. Validation always happens before any network I/O.
"""

import logging
from enum import Enum
from typing import Any, NamedTuple

from pydantic import ValidationError

from drug_safety_mcp.data_sources.base_client import DataSourceError, UpstreamError
from drug_safety_mcp.data_sources.fda import OpenFDAClient
from drug_safety_mcp.models.model_tools import ToolDescriptor
from drug_safety_mcp.tools import params as p
from drug_safety_mcp.tools.definitions import TOOLS, TOOLS_BY_NAME
from drug_safety_mcp.tools.errors import (
    InvalidParamsError,
    ToolExecutionError,
    UnknownToolError,
)
from drug_safety_mcp.tools.handlers import SafetyToolHandlers

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("drug_safety_mcp.audit")


class ToolName(str, Enum):
    SEARCH_ADVERSE_EVENTS = "search_adverse_events"
    GET_EVENT_COUNTS = "get_event_counts"
    COMPARE_SAFETY_PROFILES = "compare_safety_profiles"
    GET_SERIOUS_EVENTS = "get_serious_events"
    GET_REPORTING_TRENDS = "get_reporting_trends"
    SEARCH_BY_REACTION = "search_by_reaction"
    GET_CONCOMITANT_DRUGS = "get_concomitant_drugs"
    GET_DATA_INFO = "get_data_info"
    GET_DRUG_LABEL_INFO = "get_drug_label_info"
    GET_RECALL_INFO = "get_recall_info"
    SEARCH_BY_INDICATION = "search_by_indication"
    SEARCH_BY_DRUG_CLASS = "search_by_drug_class"
    COMPARE_LABEL_TO_REPORTS = "compare_label_to_reports"
    GET_PEDIATRIC_SAFETY = "get_pediatric_safety"
    GET_GERIATRIC_SAFETY = "get_geriatric_safety"
    GET_SAFETY_SUMMARY = "get_safety_summary"
    GET_PREGNANCY_LACTATION_INFO = "get_pregnancy_lactation_info"


class ToolRoute(NamedTuple):
    params: type[p.ToolParams]
    handler: str  # method name on SafetyToolHandlers


ROUTES: dict[ToolName, ToolRoute] = {
    ToolName.SEARCH_ADVERSE_EVENTS: ToolRoute(
        p.SearchAdverseEventsParams, "search_adverse_events"
    ),
    ToolName.GET_EVENT_COUNTS: ToolRoute(p.GetEventCountsParams, "get_event_counts"),
    ToolName.COMPARE_SAFETY_PROFILES: ToolRoute(
        p.CompareSafetyProfilesParams, "compare_safety_profiles"
    ),
    ToolName.GET_SERIOUS_EVENTS: ToolRoute(p.GetSeriousEventsParams, "get_serious_events"),
    ToolName.GET_REPORTING_TRENDS: ToolRoute(
        p.GetReportingTrendsParams, "get_reporting_trends"
    ),
    ToolName.SEARCH_BY_REACTION: ToolRoute(p.SearchByReactionParams, "search_by_reaction"),
    ToolName.GET_CONCOMITANT_DRUGS: ToolRoute(
        p.GetConcomitantDrugsParams, "get_concomitant_drugs"
    ),
    ToolName.GET_DATA_INFO: ToolRoute(p.GetDataInfoParams, "get_data_info"),
    ToolName.GET_DRUG_LABEL_INFO: ToolRoute(p.GetDrugLabelInfoParams, "get_drug_label_info"),
    ToolName.GET_RECALL_INFO: ToolRoute(p.GetRecallInfoParams, "get_recall_info"),
    ToolName.SEARCH_BY_INDICATION: ToolRoute(
        p.SearchByIndicationParams, "search_by_indication"
    ),
    ToolName.SEARCH_BY_DRUG_CLASS: ToolRoute(
        p.SearchByDrugClassParams, "search_by_drug_class"
    ),
    ToolName.COMPARE_LABEL_TO_REPORTS: ToolRoute(
        p.CompareLabelToReportsParams, "compare_label_to_reports"
    ),
    ToolName.GET_PEDIATRIC_SAFETY: ToolRoute(
        p.GetPediatricSafetyParams, "get_pediatric_safety"
    ),
    ToolName.GET_GERIATRIC_SAFETY: ToolRoute(
        p.GetGeriatricSafetyParams, "get_geriatric_safety"
    ),
    ToolName.GET_SAFETY_SUMMARY: ToolRoute(p.GetSafetySummaryParams, "get_safety_summary"),
    ToolName.GET_PREGNANCY_LACTATION_INFO: ToolRoute(
        p.GetPregnancyLactationInfoParams, "get_pregnancy_lactation_info"
    ),
}

# The catalog, the enum and the route table must name exactly the same tools.
if set(ROUTES) != set(ToolName) or {t.value for t in ToolName} != set(TOOLS_BY_NAME):
    raise RuntimeError("Tool catalog, ToolName and ROUTES are out of sync")


def resolve_tool(name: str) -> ToolName:
    try:
        return ToolName(name)
    except ValueError:
        raise UnknownToolError(name) from None


def format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as ``Missing required parameter: x`` style messages."""
    messages: list[str] = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "arguments"
        if err["type"] == "missing":
            messages.append(f"Missing required parameter: {field}")
        else:
            msg = err["msg"].removeprefix("Value error, ")
            messages.append(f"Invalid parameter '{field}': {msg}")
    return "; ".join(messages)


def parse_arguments(tool: ToolName, arguments: Any) -> p.ToolParams:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidParamsError("Tool arguments must be a JSON object")
    try:
        return ROUTES[tool].params.model_validate(arguments)
    except ValidationError as e:
        raise InvalidParamsError(format_validation_error(e)) from e


class ToolDispatcher:
    """Routes validated tool calls to SafetyToolHandlers."""

    def __init__(self, client: OpenFDAClient):
        self.client = client
        self.handlers = SafetyToolHandlers(client)

    @staticmethod
    def list_tools() -> tuple[ToolDescriptor, ...]:
        return TOOLS

    async def dispatch(self, name: str, arguments: Any = None) -> dict[str, Any]:
        tool = resolve_tool(name)
        params = parse_arguments(tool, arguments)

        descriptor = TOOLS_BY_NAME[tool.value]
        primary = {field: getattr(params, field) for field in descriptor.required}
        audit_logger.info("tool=%s args=%s", tool.value, primary)

        handler = getattr(self.handlers, ROUTES[tool].handler)
        try:
            return await handler(params)
        except UpstreamError as e:
            logger.error("Tool %s failed upstream: %s", tool.value, e)
            raise ToolExecutionError(f"openFDA API error: {e.detail}") from e
        except DataSourceError as e:
            logger.error("Tool %s failed to fetch: %s", tool.value, e)
            raise ToolExecutionError(f"Failed to fetch openFDA data: {e.detail}") from e

    async def close(self) -> None:
        await self.client.close()
