"""
Tool catalog.

FDA Adverse Event Reporting System (FAERS), drug label and enforcement
tools exposed over MCP. The catalog is built once at import time and is
never mutated; numeric bounds are stated in the descriptions and enforced by
the parameter models in ``tools.params``.
"""

from typing import Any

from drug_safety_mcp.models.model_tools import ToolAnnotations, ToolDescriptor

_DRUG_NAME: dict[str, str] = {
    "type": "string",
    "description": "Brand name or generic name of the drug (e.g., 'Humira', 'adalimumab')",
}


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


def _tool(
    name: str, title: str, description: str, schema: dict[str, Any]
) -> ToolDescriptor:
    return ToolDescriptor(
        name=name,
        description=description,
        input_schema=schema,
        annotations=ToolAnnotations(title=title),
    )


TOOLS: tuple[ToolDescriptor, ...] = (
    # -- FAERS listing ------------------------------------------------------
    _tool(
        "search_adverse_events",
        "Search Adverse Event Reports",
        "Search FAERS for adverse event reports by drug name, reaction, or date range. "
        "Returns individual case reports with patient demographics, reactions, and outcomes.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "reaction": {
                    "type": "string",
                    "description": "MedDRA preferred term for the adverse reaction "
                    "(e.g., 'headache', 'nausea', 'injection site reaction')",
                },
                "start_date": {
                    "type": "string",
                    "description": "Start date for search range in YYYYMMDD format (e.g., '20200101')",
                },
                "end_date": {
                    "type": "string",
                    "description": "End date for search range in YYYYMMDD format (e.g., '20231231')",
                },
                "serious": {
                    "type": "boolean",
                    "description": "Filter to only serious adverse events "
                    "(death, hospitalization, life-threatening, disability)",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of results to return (default: 10, max: 100)",
                },
            },
            ["drug_name"],
        ),
    ),
    # -- FAERS aggregation --------------------------------------------------
    _tool(
        "get_event_counts",
        "Get Adverse Event Counts",
        "Get aggregated counts of adverse events for a drug, grouped by reaction, outcome, "
        "patient age, sex, country, reporter type, or route. Useful for understanding the "
        "safety profile distribution.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "group_by": {
                    "type": "string",
                    "enum": [
                        "reaction",
                        "outcome",
                        "age",
                        "sex",
                        "country",
                        "reporter_type",
                        "route",
                    ],
                    "description": "Field to group counts by",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of top results to return (default: 20, max: 100)",
                },
            },
            ["drug_name", "group_by"],
        ),
    ),
    _tool(
        "compare_safety_profiles",
        "Compare Drug Safety Profiles",
        "Compare adverse event profiles across multiple drugs. Returns top reactions for "
        "each drug for side-by-side comparison.",
        _schema(
            {
                "drug_names": {
                    "type": "array",
                    "items": {"type": "string"},
                    "uniqueItems": True,
                    "description": "List of distinct drug names to compare (2-5 drugs)",
                },
                "top_n": {
                    "type": "number",
                    "description": "Number of top reactions to return per drug (default: 10, max: 100)",
                },
            },
            ["drug_names"],
        ),
    ),
    _tool(
        "get_serious_events",
        "Get Serious Adverse Events",
        "Get serious adverse events for a drug, filtered by outcome type (death, "
        "hospitalization, life-threatening, disability, congenital anomaly, or other serious).",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "outcome_type": {
                    "type": "string",
                    "enum": [
                        "death",
                        "hospitalization",
                        "life_threatening",
                        "disability",
                        "congenital_anomaly",
                        "other_serious",
                    ],
                    "description": "Type of serious outcome to filter by "
                    "(optional - returns all serious if not specified)",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of results (default: 10, max: 100)",
                },
            },
            ["drug_name"],
        ),
    ),
    _tool(
        "get_reporting_trends",
        "Get Reporting Trends",
        "Get adverse event reporting trends over time for a drug. Useful for detecting "
        "safety signals (sudden increases in reports).",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "granularity": {
                    "type": "string",
                    "enum": ["year", "quarter", "month"],
                    "description": "Time granularity for trend analysis (default: quarter)",
                },
                "years": {
                    "type": "number",
                    "description": "Number of years of history to include (default: 5, max: 20)",
                },
            },
            ["drug_name"],
        ),
    ),
    _tool(
        "search_by_reaction",
        "Search Drugs by Reaction",
        "Find all drugs associated with a specific adverse reaction. Useful for understanding "
        "which drugs commonly cause a particular side effect.",
        _schema(
            {
                "reaction": {
                    "type": "string",
                    "description": "MedDRA preferred term for the adverse reaction "
                    "(e.g., 'Stevens-Johnson syndrome', 'QT prolongation')",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of top drugs to return (default: 20, max: 100)",
                },
            },
            ["reaction"],
        ),
    ),
    _tool(
        "get_concomitant_drugs",
        "Get Concomitant Drugs",
        "Find drugs commonly co-reported with a specific drug in adverse event reports. "
        "Helps identify potential drug interactions.",
        _schema(
            {
                "drug_name": {
                    "type": "string",
                    "description": "Brand name or generic name of the primary drug",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of top concomitant drugs to return (default: 20, max: 100)",
                },
            },
            ["drug_name"],
        ),
    ),
    _tool(
        "get_data_info",
        "Get FAERS Data Information",
        "Get information about the FAERS database including last update date, data "
        "limitations, and how to interpret results.",
        _schema({}, []),
    ),
    # -- Labels and recalls -------------------------------------------------
    _tool(
        "get_drug_label_info",
        "Get Drug Label Information",
        "Get official FDA drug label (prescribing information) sections for a drug: boxed "
        "warning, warnings, contraindications, adverse reactions, interactions, dosage, and "
        "special populations.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "sections": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Label sections to return (e.g., 'boxed_warning', "
                    "'adverse_reactions', 'drug_interactions'). Returns all key sections "
                    "if not specified.",
                },
            },
            ["drug_name"],
        ),
    ),
    _tool(
        "get_recall_info",
        "Get Drug Recall Information",
        "Get FDA enforcement reports (recalls) for a drug, with recall classification, "
        "status, reason, and recalling firm.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "classification": {
                    "type": "string",
                    "enum": ["Class I", "Class II", "Class III"],
                    "description": "Recall severity: Class I (most serious) to Class III (least serious)",
                },
                "status": {
                    "type": "string",
                    "enum": ["Ongoing", "Completed", "Terminated"],
                    "description": "Recall status filter",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of recalls to return (default: 10, max: 100)",
                },
            },
            ["drug_name"],
        ),
    ),
    # -- Cross-cutting FAERS views ------------------------------------------
    _tool(
        "search_by_indication",
        "Search by Indication",
        "Find adverse events reported for drugs used to treat a given indication, grouped "
        "by drug or by reaction.",
        _schema(
            {
                "indication": {
                    "type": "string",
                    "description": "Indication or condition as reported "
                    "(e.g., 'rheumatoid arthritis', 'type 2 diabetes mellitus')",
                },
                "group_by": {
                    "type": "string",
                    "enum": ["drug", "reaction"],
                    "description": "Group results by drug or by reaction (default: drug)",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of top results to return (default: 20, max: 100)",
                },
            },
            ["indication"],
        ),
    ),
    _tool(
        "search_by_drug_class",
        "Search by Pharmacologic Class",
        "Get adverse event patterns for an entire pharmacologic class "
        "(e.g., 'TNF Blocker [EPC]'), grouped by reaction or by drug.",
        _schema(
            {
                "drug_class": {
                    "type": "string",
                    "description": "FDA pharmacologic class name "
                    "(e.g., 'TNF Blocker [EPC]', 'Proton Pump Inhibitor [EPC]')",
                },
                "class_type": {
                    "type": "string",
                    "enum": ["epc", "moa", "pe", "cs"],
                    "description": "Class vocabulary: established pharmacologic class (epc), "
                    "mechanism of action (moa), physiologic effect (pe), chemical structure "
                    "(cs). Default: epc",
                },
                "group_by": {
                    "type": "string",
                    "enum": ["reaction", "drug"],
                    "description": "Group results by reaction or by drug (default: reaction)",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of top results to return (default: 20, max: 100)",
                },
            },
            ["drug_class"],
        ),
    ),
    _tool(
        "compare_label_to_reports",
        "Compare Label to Reports",
        "Compare the most frequently reported adverse reactions for a drug with its FDA "
        "label text to flag reactions that may not be documented (potential signals). "
        "Text matching is approximate.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "top_n": {
                    "type": "number",
                    "description": "Number of top reported reactions to check (default: 20, max: 100)",
                },
            },
            ["drug_name"],
        ),
    ),
    _tool(
        "get_pediatric_safety",
        "Get Pediatric Safety",
        "Get adverse events reported in pediatric patients for a drug, compared against "
        "adult reports, with the label's pediatric use section.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "age_group": {
                    "type": "string",
                    "enum": ["all", "neonate", "infant", "child", "adolescent"],
                    "description": "Pediatric age bracket: neonate (0), infant (0-1), child "
                    "(2-11), adolescent (12-17), or all (0-17). Default: all",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of top reactions to return (default: 20, max: 100)",
                },
            },
            ["drug_name"],
        ),
    ),
    _tool(
        "get_geriatric_safety",
        "Get Geriatric Safety",
        "Get adverse events reported in elderly patients (65+) for a drug, compared against "
        "adult reports, with the label's geriatric use section.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "age_group": {
                    "type": "string",
                    "enum": ["all", "65_to_74", "75_to_84", "85_plus"],
                    "description": "Geriatric age bracket in years. Default: all (65+)",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of top reactions to return (default: 20, max: 100)",
                },
            },
            ["drug_name"],
        ),
    ),
    _tool(
        "get_safety_summary",
        "Get Safety Summary",
        "Get a one-call safety overview for a drug: total and serious report counts, top "
        "reactions, boxed warning status, and recall history.",
        _schema({"drug_name": _DRUG_NAME}, ["drug_name"]),
    ),
    _tool(
        "get_pregnancy_lactation_info",
        "Get Pregnancy and Lactation Information",
        "Get pregnancy, lactation, and reproductive potential sections of the FDA label for a "
        "drug, optionally with adverse events reported after exposure during pregnancy.",
        _schema(
            {
                "drug_name": _DRUG_NAME,
                "include_reports": {
                    "type": "boolean",
                    "description": "Also summarize FAERS reports of exposure during pregnancy "
                    "(default: true)",
                },
            },
            ["drug_name"],
        ),
    ),
)

TOOLS_BY_NAME: dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOLS}
