"""
Tool handlers.

Each handler receives an already-validated parameter record, builds its
search expression(s), calls openFDA through the injected client and returns a
JSON-serialisable dict. Handlers that cross-reference several result sets
issue their sub-queries concurrently; the reads are independent.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import date
from typing import Any

from drug_safety_mcp.constants import (
    AGE_BRACKETS,
    BRAND_NAME_COUNT_FIELD,
    COLOR_SCHEMES,
    EVENT_COUNT_FIELDS,
    FAERS_DISCLAIMER,
    FAERS_LIMITATIONS,
    FAERS_PROPER_USE,
    LABEL_SOURCE,
    MAX_RESULT_LIMIT,
    OPENFDA_AUTH_DOCS_URL,
    OPENFDA_DOCS_URL,
    OPENFDA_MAX_COUNT_LIMIT,
    PHARM_CLASS_DESCRIPTIONS,
    PREGNANCY_EXPOSURE_REACTIONS,
    PREGNANCY_LABEL_SECTIONS,
    REACTION_COUNT_FIELD,
    RECALL_SOURCE,
    RECEIVE_DATE_COUNT_FIELD,
    SIGNAL_LABEL_SECTIONS,
)
from drug_safety_mcp.data_sources.base_client import DataSourceError
from drug_safety_mcp.data_sources.fda import OpenFDAClient
from drug_safety_mcp.models.model_fda import DrugLabel, OpenFDAEnvelope
from drug_safety_mcp.services import normalizer as norm
from drug_safety_mcp.services import query_builder as qb
from drug_safety_mcp.tools.params import (
    CompareLabelToReportsParams,
    CompareSafetyProfilesParams,
    GetConcomitantDrugsParams,
    GetDataInfoParams,
    GetDrugLabelInfoParams,
    GetEventCountsParams,
    GetGeriatricSafetyParams,
    GetPediatricSafetyParams,
    GetPregnancyLactationInfoParams,
    GetRecallInfoParams,
    GetReportingTrendsParams,
    GetSafetySummaryParams,
    GetSeriousEventsParams,
    SearchAdverseEventsParams,
    SearchByDrugClassParams,
    SearchByIndicationParams,
    SearchByReactionParams,
)

logger = logging.getLogger(__name__)

_PREGNANCY_CATEGORY_RE = re.compile(r"Pregnancy Category\s+([ABCDX])\b", re.IGNORECASE)


def _first_label(envelope: OpenFDAEnvelope) -> DrugLabel | None:
    if envelope.is_empty:
        return None
    return DrugLabel.model_validate(envelope.results[0])


def _years_ago(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:  # Feb 29 in a non-leap target year
        return today.replace(year=today.year - years, day=28)


def _count_hint(group_by: str, drug_name: str) -> dict[str, Any]:
    if group_by in ("outcome", "sex", "reporter_type"):
        scheme = {"outcome": "outcomes", "sex": "sex", "reporter_type": "reporter"}[group_by]
        titles = {
            "outcome": f"Outcome Distribution for {drug_name}",
            "sex": f"Patient Sex Distribution for {drug_name}",
            "reporter_type": f"Reporter Types for {drug_name}",
        }
        return {
            "type": "pie_chart",
            "category": group_by,
            "value": "count",
            "title": titles[group_by],
            "color_scheme": COLOR_SCHEMES[scheme],
        }
    if group_by == "age":
        return {
            "type": "histogram",
            "x_axis": "age",
            "y_axis": "count",
            "title": f"Patient Age Distribution for {drug_name}",
            "bin_size": 10,
        }
    titles = {
        "reaction": f"Top Adverse Events for {drug_name}",
        "country": f"Reports by Country for {drug_name}",
        "route": f"Administration Routes for {drug_name}",
    }
    hint = {
        "type": "horizontal_bar_chart",
        "x_axis": "count",
        "y_axis": group_by,
        "title": titles[group_by],
        "sort": "descending",
    }
    if group_by == "country":
        hint["max_items"] = 15
    return hint


class SafetyToolHandlers:
    """Handlers for every tool in the catalog, sharing one openFDA client."""

    def __init__(self, client: OpenFDAClient) -> None:
        self.client = client

    # ------------------------------------------------------------------
    # FAERS listing
    # ------------------------------------------------------------------

    async def search_adverse_events(self, p: SearchAdverseEventsParams) -> dict[str, Any]:
        search = qb.compose_event_search(
            p.drug_name,
            reaction=p.reaction,
            start_date=p.start_date,
            end_date=p.end_date,
            serious=p.serious,
        )
        envelope = await self.client.search_events(search, limit=p.limit)
        if envelope.is_empty:
            return norm.no_results(
                f'No adverse event reports found for "{p.drug_name}"',
                disclaimer=FAERS_DISCLAIMER,
            )

        results = [norm.normalize_adverse_event(r).model_dump() for r in envelope.results]
        return {
            "total_matching": envelope.total,
            "returned": len(results),
            "results": results,
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def get_serious_events(self, p: GetSeriousEventsParams) -> dict[str, Any]:
        search = qb.join_and(
            qb.build_drug_search(p.drug_name), qb.build_serious_clause(p.outcome_type)
        )
        envelope = await self.client.search_events(search, limit=p.limit)
        if envelope.is_empty:
            return norm.no_results(
                f'No serious adverse events found for "{p.drug_name}"',
                disclaimer=FAERS_DISCLAIMER,
            )

        reports = [norm.normalize_serious_event(r) for r in envelope.results]
        return {
            "drug": p.drug_name,
            "outcome_filter": p.outcome_type or "all serious",
            "total_matching": envelope.total,
            "seriousness_breakdown": norm.seriousness_breakdown(reports),
            "results": [r.model_dump() for r in reports],
            "visualization_hint": {
                "type": "stacked_bar_chart",
                "x_axis": "category",
                "y_axis": "count",
                "title": f"Serious Event Breakdown for {p.drug_name}",
                "categories": list(COLOR_SCHEMES["seriousness"]),
                "color_scheme": COLOR_SCHEMES["seriousness"],
                "x_label": "Seriousness Type",
                "y_label": "Number of Reports",
            },
            "disclaimer": FAERS_DISCLAIMER,
        }

    # ------------------------------------------------------------------
    # FAERS aggregation
    # ------------------------------------------------------------------

    async def get_event_counts(self, p: GetEventCountsParams) -> dict[str, Any]:
        envelope = await self.client.count_events(
            qb.build_drug_search(p.drug_name),
            count=EVENT_COUNT_FIELDS[p.group_by],
            limit=p.limit,
        )
        if envelope.is_empty:
            return norm.no_results(
                f'No data found for "{p.drug_name}" grouped by {p.group_by}',
                disclaimer=FAERS_DISCLAIMER,
            )

        return {
            "drug": p.drug_name,
            "grouped_by": p.group_by,
            "results": norm.count_rows(envelope, p.group_by, group_by=p.group_by),
            "visualization_hint": _count_hint(p.group_by, p.drug_name),
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def compare_safety_profiles(
        self, p: CompareSafetyProfilesParams
    ) -> dict[str, Any]:
        envelopes = await asyncio.gather(
            *(
                self.client.count_events(
                    qb.build_drug_search(name), count=REACTION_COUNT_FIELD, limit=p.top_n
                )
                for name in p.drug_names
            )
        )
        comparison = {
            name: norm.count_rows(envelope, "reaction")
            for name, envelope in zip(p.drug_names, envelopes)
        }

        reaction_sets = {
            name: {row["reaction"].lower() for row in rows}
            for name, rows in comparison.items()
        }
        shared = set.intersection(*reaction_sets.values()) if reaction_sets else set()
        unique: dict[str, list[str]] = {}
        for name, rows in comparison.items():
            others = [
                row for other, other_rows in comparison.items() if other != name
                for row in other_rows
            ]
            unique[name] = [row["reaction"] for row in norm.reactions_not_in(rows, others)]

        return {
            "comparison": comparison,
            "shared_reactions": sorted(shared),
            "unique_reactions": unique,
            "visualization_hint": {
                "type": "grouped_bar_chart",
                "group_by": "reaction",
                "series": "drug_name",
                "value": "count",
                "title": "Safety Profile Comparison",
                "x_axis": "reaction",
                "y_axis": "count",
                "legend": list(p.drug_names),
            },
            "note": "Counts are not normalized by usage - a drug with more reports may "
            "simply be more widely used",
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def get_reporting_trends(self, p: GetReportingTrendsParams) -> dict[str, Any]:
        today = date.today()
        start = _years_ago(today, p.years)
        search = qb.join_and(
            qb.build_drug_search(p.drug_name),
            qb.build_date_range(start.strftime("%Y%m%d"), today.strftime("%Y%m%d")),
        )
        envelope = await self.client.count_events(
            search, count=RECEIVE_DATE_COUNT_FIELD, limit=OPENFDA_MAX_COUNT_LIMIT
        )
        if envelope.is_empty:
            return norm.no_results(
                f'No reporting trend data found for "{p.drug_name}"',
                disclaimer=FAERS_DISCLAIMER,
            )

        trends = norm.bucket_trends(norm.parse_counts(envelope), p.granularity)
        x_labels = {"year": "Year", "quarter": "Quarter", "month": "Month"}
        return {
            "drug": p.drug_name,
            "granularity": p.granularity,
            "period": f"{p.years} years",
            "total_reports": sum(t["count"] for t in trends),
            "trends": trends,
            "visualization_hint": {
                "type": "line_chart",
                "x_axis": "period",
                "y_axis": "count",
                "title": f"Adverse Event Reports for {p.drug_name} Over Time",
                "x_label": x_labels[p.granularity],
                "y_label": "Report Count",
                "show_trend_line": True,
            },
            "note": "Increases in reports may reflect increased usage, publicity, or "
            "actual safety signals",
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def search_by_reaction(self, p: SearchByReactionParams) -> dict[str, Any]:
        envelope = await self.client.count_events(
            qb.build_reaction_clause(p.reaction), count=BRAND_NAME_COUNT_FIELD, limit=p.limit
        )
        if envelope.is_empty:
            return norm.no_results(
                f'No drugs found associated with reaction "{p.reaction}"',
                disclaimer=FAERS_DISCLAIMER,
            )

        return {
            "reaction": p.reaction,
            "drugs": norm.count_rows(envelope, "drug_name", "report_count"),
            "visualization_hint": {
                "type": "horizontal_bar_chart",
                "x_axis": "report_count",
                "y_axis": "drug_name",
                "title": f"Drugs Associated with {p.reaction}",
                "sort": "descending",
                "max_items": 20,
                "x_label": "Number of Reports",
                "y_label": "Drug Name",
            },
            "note": "Higher counts may reflect more widely used drugs, not necessarily "
            "higher risk",
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def get_concomitant_drugs(self, p: GetConcomitantDrugsParams) -> dict[str, Any]:
        # Over-fetch so the primary drug's own brand entries can be dropped.
        envelope = await self.client.count_events(
            qb.build_drug_search(p.drug_name), count=BRAND_NAME_COUNT_FIELD, limit=p.limit + 5
        )
        if envelope.is_empty:
            return norm.no_results(
                f'No concomitant drug data found for "{p.drug_name}"',
                disclaimer=FAERS_DISCLAIMER,
            )

        primary = p.drug_name.lower()
        rows = [
            row
            for row in norm.count_rows(envelope, "drug_name", "co_report_count")
            if primary not in str(row["drug_name"]).lower()
        ][: p.limit]
        return {
            "primary_drug": p.drug_name,
            "concomitant_drugs": rows,
            "visualization_hint": {
                "type": "horizontal_bar_chart",
                "x_axis": "co_report_count",
                "y_axis": "drug_name",
                "title": f"Drugs Co-Reported with {p.drug_name}",
                "sort": "descending",
                "x_label": "Co-Report Count",
                "y_label": "Drug Name",
            },
            "note": "These are drugs commonly reported alongside the primary drug in AE "
            "reports - does not imply interaction",
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def search_by_indication(self, p: SearchByIndicationParams) -> dict[str, Any]:
        by_reaction = p.group_by == "reaction"
        envelope = await self.client.count_events(
            qb.build_indication_search(p.indication),
            count=REACTION_COUNT_FIELD if by_reaction else BRAND_NAME_COUNT_FIELD,
            limit=p.limit,
        )
        if envelope.is_empty:
            return norm.no_results(
                f'No adverse events found for indication "{p.indication}"',
                suggestion="Try using different terms for the indication "
                "(e.g., 'type 2 diabetes' vs 'diabetes mellitus')",
                disclaimer=FAERS_DISCLAIMER,
            )

        key = "reaction" if by_reaction else "drug_name"
        if by_reaction:
            title = f"Top Adverse Events for {p.indication} Medications"
            note = "Shows most common adverse reactions for drugs used for this indication"
        else:
            title = f"Drugs Used for {p.indication} (by AE Report Count)"
            note = (
                "Shows drugs most commonly reported with this indication - higher counts "
                "may reflect more widely used drugs"
            )
        return {
            "indication": p.indication,
            "grouped_by": p.group_by,
            "results": norm.count_rows(envelope, key, "report_count"),
            "visualization_hint": {
                "type": "horizontal_bar_chart",
                "x_axis": "report_count",
                "y_axis": key,
                "title": title,
                "sort": "descending",
                "x_label": "Number of Reports",
                "y_label": "Adverse Reaction" if by_reaction else "Drug Name",
            },
            "note": note,
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def search_by_drug_class(self, p: SearchByDrugClassParams) -> dict[str, Any]:
        by_reaction = p.group_by == "reaction"
        envelope = await self.client.count_events(
            qb.build_drug_class_search(p.drug_class, p.class_type),
            count=REACTION_COUNT_FIELD if by_reaction else BRAND_NAME_COUNT_FIELD,
            limit=p.limit,
        )
        if envelope.is_empty:
            return norm.no_results(
                f'No adverse events found for drug class "{p.drug_class}"',
                suggestion="Use the exact FDA class name including its suffix "
                "(e.g., 'TNF Blocker [EPC]')",
                disclaimer=FAERS_DISCLAIMER,
            )

        key = "reaction" if by_reaction else "drug_name"
        return {
            "drug_class": p.drug_class,
            "class_type": p.class_type,
            "class_type_description": PHARM_CLASS_DESCRIPTIONS[p.class_type],
            "grouped_by": p.group_by,
            "results": norm.count_rows(envelope, key, "report_count"),
            "visualization_hint": {
                "type": "horizontal_bar_chart",
                "x_axis": "report_count",
                "y_axis": key,
                "title": f"{'Top Adverse Events' if by_reaction else 'Drugs'} in {p.drug_class}",
                "sort": "descending",
            },
            "note": "Class-level counts pool every drug in the class; widely used members "
            "dominate the totals",
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def get_data_info(self, p: GetDataInfoParams) -> dict[str, Any]:
        last_year = date.today().year - 1
        try:
            envelope = await self.client.search_events(
                qb.build_date_range(f"{last_year}0101", f"{last_year}1231"), limit=1
            )
            last_updated = envelope.last_updated or "Unknown"
        except DataSourceError as e:
            logger.warning("Could not fetch FAERS metadata: %s", e)
            last_updated = "Unknown"

        if self.client.api_keys.configured:
            key_status = "Configured (120,000 requests/day)"
        else:
            key_status = "Not configured - using free tier (1,000 requests/day)"
        return {
            "database": "FDA Adverse Event Reporting System (FAERS)",
            "source": "OpenFDA API",
            "api_documentation": OPENFDA_DOCS_URL,
            "last_updated": last_updated,
            "coverage": "January 2004 - present",
            "update_frequency": "Quarterly",
            "api_key_status": key_status,
            "get_api_key": OPENFDA_AUTH_DOCS_URL,
            "limitations": list(FAERS_LIMITATIONS),
            "proper_use": list(FAERS_PROPER_USE),
            "disclaimer": FAERS_DISCLAIMER,
        }

    # ------------------------------------------------------------------
    # Labels and recalls
    # ------------------------------------------------------------------

    async def get_drug_label_info(self, p: GetDrugLabelInfoParams) -> dict[str, Any]:
        envelope = await self.client.search_labels(qb.build_label_search(p.drug_name))
        label = _first_label(envelope)
        if label is None:
            return norm.no_results(
                f'No drug label information found for "{p.drug_name}"',
                suggestion="Try searching with the exact brand name or generic name as it "
                "appears on the FDA label",
            )

        return {
            "drug": p.drug_name,
            "label_info": norm.extract_label_sections(label, p.sections),
            "has_boxed_warning": bool(label.boxed_warning),
            "source": LABEL_SOURCE,
        }

    async def get_recall_info(self, p: GetRecallInfoParams) -> dict[str, Any]:
        envelope = await self.client.search_enforcement(
            qb.build_recall_search(p.drug_name, p.classification, p.status), limit=p.limit
        )
        if envelope.is_empty:
            return norm.no_results(
                f'No recall information found for "{p.drug_name}"',
                note="This may mean the drug has not been recalled, or the search term "
                "doesn't match FDA records",
            )

        recalls = [norm.normalize_recall(r) for r in envelope.results]
        summary = norm.classification_summary(recalls)
        return {
            "drug": p.drug_name,
            "total_recalls": envelope.total or len(recalls),
            "returned": len(recalls),
            "classification_summary": summary,
            "recalls": recalls,
            "visualization_hint": {
                "type": "timeline",
                "x_axis": "recall_initiation_date",
                "label": "reason_for_recall",
                "title": f"Recall History for {p.drug_name}",
                "color_by": "classification",
                "color_scheme": COLOR_SCHEMES["recall_classification"],
                "secondary_chart": {
                    "type": "pie_chart",
                    "category": "classification",
                    "value": "count",
                    "title": "Recalls by Classification",
                    "data": [
                        {"classification": c, "count": n} for c, n in summary.items()
                    ],
                    "color_scheme": COLOR_SCHEMES["recall_classification"],
                },
            },
            "source": RECALL_SOURCE,
        }

    # ------------------------------------------------------------------
    # Cross-referencing
    # ------------------------------------------------------------------

    async def compare_label_to_reports(
        self, p: CompareLabelToReportsParams
    ) -> dict[str, Any]:
        label_envelope, counts = await asyncio.gather(
            self.client.search_labels(qb.build_label_search(p.drug_name)),
            self.client.count_events(
                qb.build_drug_search(p.drug_name), count=REACTION_COUNT_FIELD, limit=p.top_n
            ),
        )
        if counts.is_empty:
            return norm.no_results(
                f'No adverse event reports found for "{p.drug_name}"',
                disclaimer=FAERS_DISCLAIMER,
            )

        reported = norm.count_rows(counts, "reaction")
        label = _first_label(label_envelope)
        if label is None:
            return {
                "drug": p.drug_name,
                "label_found": False,
                "message": f'No FDA label found for "{p.drug_name}" - reported reactions '
                "cannot be checked against label text",
                "top_reported_reactions": reported,
                "disclaimer": FAERS_DISCLAIMER,
            }

        text = norm.label_text(label, SIGNAL_LABEL_SECTIONS)
        labeled = [r for r in reported if norm.term_mentioned_in(str(r["reaction"]), text)]
        signals = [
            r for r in reported if not norm.term_mentioned_in(str(r["reaction"]), text)
        ]
        reported_terms = {str(r["reaction"]).lower() for r in reported}
        label_only = [
            t for t in norm.extract_label_terms(text) if t not in reported_terms
        ][:25]

        return {
            "drug": p.drug_name,
            "label_found": True,
            "brand_name": label.openfda.brand_name[0] if label.openfda.brand_name else None,
            "generic_name": (
                label.openfda.generic_name[0] if label.openfda.generic_name else None
            ),
            "reactions_checked": len(reported),
            "labeled_reactions": labeled,
            "potential_signals": signals,
            "signal_count": len(signals),
            "label_terms_not_in_top_reports": label_only,
            "visualization_hint": {
                "type": "horizontal_bar_chart",
                "x_axis": "count",
                "y_axis": "reaction",
                "title": f"Reported Reactions vs Label for {p.drug_name}",
                "color_by": "in_label",
                "color_scheme": {"labeled": "#22c55e", "potential_signal": "#ef4444"},
            },
            "note": "Matching is approximate text search against label sections. A "
            "'potential signal' may be described in the label with different wording; "
            "it warrants review, not a conclusion.",
            "source": LABEL_SOURCE,
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def get_pediatric_safety(self, p: GetPediatricSafetyParams) -> dict[str, Any]:
        bracket = "pediatric" if p.age_group == "all" else p.age_group
        return await self._compare_population(
            p.drug_name, bracket, p.age_group, "pediatric", "pediatric_use", p.limit
        )

    async def get_geriatric_safety(self, p: GetGeriatricSafetyParams) -> dict[str, Any]:
        bracket = "geriatric" if p.age_group == "all" else p.age_group
        return await self._compare_population(
            p.drug_name, bracket, p.age_group, "geriatric", "geriatric_use", p.limit
        )

    async def _compare_population(
        self,
        drug_name: str,
        bracket: str,
        age_group: str,
        population: str,
        label_section: str,
        limit: int,
    ) -> dict[str, Any]:
        """Top reactions in an age bracket versus adults (18-64)."""
        drug_search = qb.build_drug_search(drug_name)
        target_search = qb.join_and(drug_search, qb.build_age_clause(bracket))
        adult_search = qb.join_and(drug_search, qb.build_age_clause("adult"))

        target_counts, adult_counts, target_total, adult_total, label_envelope = (
            await asyncio.gather(
                self.client.count_events(target_search, count=REACTION_COUNT_FIELD, limit=limit),
                self.client.count_events(adult_search, count=REACTION_COUNT_FIELD, limit=limit),
                self.client.search_events(target_search, limit=1),
                self.client.search_events(adult_search, limit=1),
                self.client.search_labels(qb.build_label_search(drug_name)),
            )
        )
        label = _first_label(label_envelope)
        label_text = (label.first(label_section) if label else None) or "Not specified in label"

        if target_counts.is_empty:
            return norm.no_results(
                f'No {population} adverse event reports found for "{drug_name}"',
                **{f"label_{label_section}": label_text},
                disclaimer=FAERS_DISCLAIMER,
            )

        total = target_total.total
        target_rows = [
            {**row, "percentage": norm.percentage(row["count"], total)}
            for row in norm.count_rows(target_counts, "reaction")
        ]
        adult_rows = norm.count_rows(adult_counts, "reaction")
        low, high = AGE_BRACKETS[bracket]

        return {
            "drug": drug_name,
            "population": population,
            "age_group": age_group,
            "age_range_years": f"{low}-{high}",
            f"{population}_reports": total,
            "adult_reports": adult_total.total,
            f"{population}_to_adult_ratio": norm.report_ratio(total, adult_total.total),
            "top_reactions": target_rows,
            f"reactions_not_in_adult_top_{limit}": [
                row["reaction"] for row in norm.reactions_not_in(target_rows, adult_rows)
            ],
            f"label_{label_section}": label_text,
            "visualization_hint": {
                "type": "grouped_bar_chart",
                "x_axis": "reaction",
                "y_axis": "count",
                "series": [population, "adult"],
                "title": f"{population.capitalize()} vs Adult Reports for {drug_name}",
                "color_scheme": {
                    population: COLOR_SCHEMES["population"][population],
                    "adult": COLOR_SCHEMES["population"]["adult"],
                },
            },
            "note": f"Ratio compares report volumes ({population}:adult); it is not an "
            "incidence rate. Reactions absent from the adult top list are candidates "
            "for review, not confirmed age-specific effects.",
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def get_safety_summary(self, p: GetSafetySummaryParams) -> dict[str, Any]:
        drug_search = qb.build_drug_search(p.drug_name)
        total, serious, top, label_envelope, recalls_envelope = await asyncio.gather(
            self.client.search_events(drug_search, limit=1),
            self.client.search_events(
                qb.join_and(drug_search, qb.build_serious_clause()), limit=1
            ),
            self.client.count_events(drug_search, count=REACTION_COUNT_FIELD, limit=10),
            self.client.search_labels(qb.build_label_search(p.drug_name)),
            self.client.search_enforcement(
                qb.build_recall_search(p.drug_name), limit=MAX_RESULT_LIMIT
            ),
        )
        label = _first_label(label_envelope)
        if total.is_empty and top.is_empty and label is None:
            return norm.no_results(
                f'No safety data found for "{p.drug_name}"',
                disclaimer=FAERS_DISCLAIMER,
            )

        recalls = [norm.normalize_recall(r) for r in recalls_envelope.results]
        recall_dates = [r["recall_initiation_date"] for r in recalls if r["recall_initiation_date"]]
        boxed = label.first("boxed_warning") if label else None
        return {
            "drug": p.drug_name,
            "adverse_events": {
                "total_reports": total.total,
                "serious_reports": serious.total,
                "serious_percentage": norm.percentage(serious.total, total.total),
                "top_reactions": norm.count_rows(top, "reaction"),
            },
            "label": {
                "found": label is not None,
                "brand_name": (
                    label.openfda.brand_name[0] if label and label.openfda.brand_name else None
                ),
                "generic_name": (
                    label.openfda.generic_name[0]
                    if label and label.openfda.generic_name
                    else None
                ),
                "has_boxed_warning": bool(boxed),
                "boxed_warning_excerpt": boxed[:500] if boxed else None,
            },
            "recalls": {
                "total": recalls_envelope.total or len(recalls),
                "classification_summary": norm.classification_summary(recalls),
                "most_recent": norm.format_date(max(recall_dates)) if recall_dates else None,
            },
            "visualization_hint": {
                "type": "summary_card",
                "metrics": ["total_reports", "serious_percentage", "has_boxed_warning"],
                "title": f"Safety Summary for {p.drug_name}",
                "secondary_chart": {
                    "type": "horizontal_bar_chart",
                    "x_axis": "count",
                    "y_axis": "reaction",
                    "title": "Top Reported Reactions",
                },
            },
            "source": f"FAERS, {LABEL_SOURCE}, {RECALL_SOURCE}",
            "disclaimer": FAERS_DISCLAIMER,
        }

    async def get_pregnancy_lactation_info(
        self, p: GetPregnancyLactationInfoParams
    ) -> dict[str, Any]:
        label_request = self.client.search_labels(qb.build_label_search(p.drug_name))
        if p.include_reports:
            exposure_search = qb.join_and(
                qb.build_drug_search(p.drug_name),
                qb.build_reactions_any(PREGNANCY_EXPOSURE_REACTIONS),
            )
            label_envelope, exposure_total, exposure_counts = await asyncio.gather(
                label_request,
                self.client.search_events(exposure_search, limit=1),
                self.client.count_events(exposure_search, count=REACTION_COUNT_FIELD, limit=25),
            )
        else:
            label_envelope = await label_request
            exposure_total = exposure_counts = None

        label = _first_label(label_envelope)
        sections: dict[str, str] = {}
        if label is not None:
            for section in PREGNANCY_LABEL_SECTIONS:
                value = label.first(section)
                if value:
                    sections[section] = value

        no_reports = exposure_counts is None or exposure_counts.is_empty
        if label is None and no_reports:
            return norm.no_results(
                f'No pregnancy or lactation information found for "{p.drug_name}"',
                suggestion="Try the exact brand or generic name as it appears on the FDA label",
            )

        category = _PREGNANCY_CATEGORY_RE.search(" ".join(sections.values()))
        result: dict[str, Any] = {
            "drug": p.drug_name,
            "label_found": label is not None,
            "brand_name": (
                label.openfda.brand_name[0] if label and label.openfda.brand_name else None
            ),
            "generic_name": (
                label.openfda.generic_name[0] if label and label.openfda.generic_name else None
            ),
            "pregnancy_category": category.group(1).upper() if category else None,
            "label_sections": sections,
            "note": "Labels approved after June 2015 use the Pregnancy and Lactation "
            "Labeling Rule narrative format instead of letter categories",
            "source": LABEL_SOURCE,
        }
        if exposure_counts is not None and exposure_total is not None:
            exposure_terms = {t.lower() for t in PREGNANCY_EXPOSURE_REACTIONS}
            result["pregnancy_exposure_reports"] = {
                "total_reports": exposure_total.total,
                "co_reported_reactions": [
                    row
                    for row in norm.count_rows(exposure_counts, "reaction")
                    if str(row["reaction"]).lower() not in exposure_terms
                ],
            }
            result["disclaimer"] = FAERS_DISCLAIMER
        return result
