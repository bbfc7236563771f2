"""
Response normalization for openFDA payloads.

Turns raw upstream records into the shapes the tools return: coded enums are
decoded to labels, dates are hyphenated, count buckets are re-keyed, and the
cross-referencing helpers compute set differences and ratios between result
sets. Nothing here performs I/O.
"""

import logging
import math
import re
from typing import Any

from drug_safety_mcp.constants import (
    AGE_UNIT_MAP,
    DRUG_ROLE_MAP,
    OUTCOME_MAP,
    RECALL_CLASSIFICATION_DESCRIPTIONS,
    REPORTER_TYPE_MAP,
    SEX_MAP,
)
from drug_safety_mcp.models.model_fda import (
    AdverseEventReport,
    CountBucket,
    DrugLabel,
    DrugRole,
    FAERSReport,
    OpenFDAEnvelope,
    PatientSummary,
    RecallRecord,
    SeriousEventReport,
    SeriousnessFlags,
)

logger = logging.getLogger(__name__)

CODED_GROUPS: dict[str, dict[int, str]] = {
    "sex": SEX_MAP,
    "outcome": OUTCOME_MAP,
    "reporter_type": REPORTER_TYPE_MAP,
}

# ------------------------------------------------------------------
# Scalars
# ------------------------------------------------------------------


def format_date(date_str: str | None) -> str | None:
    """``YYYYMMDD`` -> ``YYYY-MM-DD``; anything else is returned unchanged."""
    if date_str and len(date_str) == 8:
        return f"{date_str[:4]}-{date_str[4:6]}-{date_str[6:8]}"
    return date_str


def _flag(value: str | None) -> bool:
    return value == "1"


def _as_code(term: Any) -> int | None:
    if isinstance(term, bool):
        return None
    if isinstance(term, int):
        return term
    if isinstance(term, str) and term.strip().isdigit():
        return int(term)
    return None


def decode_code(mapping: dict[int, str], term: Any) -> Any:
    """Label for a coded value; unmapped codes pass through unchanged."""
    code = _as_code(term)
    if code is not None and code in mapping:
        return mapping[code]
    return term


def decode_term(group_by: str, term: Any) -> Any:
    """Decode a count-bucket term when the grouping dimension is a coded enum."""
    mapping = CODED_GROUPS.get(group_by)
    if mapping is None:
        return term
    return decode_code(mapping, term)


def percentage(part: int, total: int) -> float:
    """Share of ``total`` as a percentage rounded to one decimal, 0.0 when total is 0."""
    if total <= 0:
        return 0.0
    return round(part * 100.0 / total, 1)


def report_ratio(numerator_total: int, denominator_total: int) -> str:
    """Render ``a : b`` with the smaller side as 1, e.g. ``"1:5"`` or ``"5:1"``.

    A zero on either side yields ``"N/A"`` instead of a division error.
    """
    if numerator_total <= 0 or denominator_total <= 0:
        return "N/A"
    if denominator_total >= numerator_total:
        return f"1:{round(denominator_total / numerator_total)}"
    return f"{round(numerator_total / denominator_total)}:1"


# ------------------------------------------------------------------
# FAERS listing records
# ------------------------------------------------------------------


def format_age(age: str | None, unit: str | None) -> str:
    if not age:
        return "Unknown"
    unit_label = AGE_UNIT_MAP.get(unit or "", unit or "")
    return f"{age} {unit_label}".strip()


def _format_weight(weight: str | None) -> str:
    return f"{weight} kg" if weight else "Unknown"


def _sex_label(code: str | None) -> str:
    label = decode_code(SEX_MAP, code)
    return label if label in SEX_MAP.values() else "Unknown"


def normalize_adverse_event(raw: dict[str, Any]) -> AdverseEventReport:
    """Map one raw FAERS report to the listing shape."""
    report = FAERSReport.model_validate(raw)
    patient = report.patient
    return AdverseEventReport(
        report_id=report.safetyreportid,
        receive_date=format_date(report.receivedate),
        serious=_flag(report.serious),
        patient=PatientSummary(
            age=format_age(patient.patientonsetage, patient.patientonsetageunit),
            sex=_sex_label(patient.patientsex),
            weight=_format_weight(patient.patientweight),
        ),
        reactions=[r.reactionmeddrapt for r in patient.reaction if r.reactionmeddrapt],
        outcomes=[
            str(decode_code(OUTCOME_MAP, r.reactionoutcome))
            for r in patient.reaction
            if r.reactionoutcome
        ],
        drugs=[
            DrugRole(
                name=d.medicinalproduct,
                indication=d.drugindication,
                role=DRUG_ROLE_MAP.get(d.drugcharacterization or "", "Interacting"),
            )
            for d in patient.drug
        ],
    )


def normalize_serious_event(raw: dict[str, Any]) -> SeriousEventReport:
    report = FAERSReport.model_validate(raw)
    patient = report.patient
    return SeriousEventReport(
        report_id=report.safetyreportid,
        receive_date=format_date(report.receivedate),
        seriousness=SeriousnessFlags(
            death=_flag(report.seriousnessdeath),
            hospitalization=_flag(report.seriousnesshospitalization),
            life_threatening=_flag(report.seriousnesslifethreatening),
            disability=_flag(report.seriousnessdisabling),
            congenital_anomaly=_flag(report.seriousnesscongenitalanomali),
            other=_flag(report.seriousnessother),
        ),
        reactions=[r.reactionmeddrapt for r in patient.reaction if r.reactionmeddrapt],
        patient_age=format_age(patient.patientonsetage, patient.patientonsetageunit),
    )


def seriousness_breakdown(reports: list[SeriousEventReport]) -> list[dict[str, Any]]:
    """Count reports per seriousness category, dropping empty categories."""
    totals = dict.fromkeys(SeriousnessFlags.model_fields, 0)
    for report in reports:
        for category, flagged in report.seriousness.model_dump().items():
            if flagged:
                totals[category] += 1
    return [
        {"category": category, "count": count}
        for category, count in totals.items()
        if count > 0
    ]


# ------------------------------------------------------------------
# Count buckets
# ------------------------------------------------------------------


def parse_counts(envelope: OpenFDAEnvelope) -> list[CountBucket]:
    return [CountBucket.model_validate(r) for r in envelope.results]


def count_rows(
    envelope: OpenFDAEnvelope, key: str, count_key: str = "count", group_by: str = ""
) -> list[dict[str, Any]]:
    """Re-key ``{term, count}`` buckets as ``{key: term, count_key: count}``."""
    return [
        {key: decode_term(group_by, bucket.term), count_key: bucket.count}
        for bucket in parse_counts(envelope)
    ]


def _period(date_str: str, granularity: str) -> str:
    year, month = date_str[:4], date_str[4:6]
    if granularity == "year":
        return year
    if granularity == "month":
        return f"{year}-{month}"
    return f"{year}-Q{math.ceil(int(month) / 3)}"


def bucket_trends(buckets: list[CountBucket], granularity: str) -> list[dict[str, Any]]:
    """Sum daily counts into year / quarter / month periods, sorted by period.

    Period labels are zero-padded, so lexicographic order is chronological.
    """
    aggregated: dict[str, int] = {}
    for bucket in buckets:
        date_str = bucket.time or (str(bucket.term) if bucket.term is not None else "")
        if len(date_str) < 6 or not date_str[:6].isdigit():
            continue
        period = _period(date_str, granularity)
        aggregated[period] = aggregated.get(period, 0) + bucket.count
    return [
        {"period": period, "count": count}
        for period, count in sorted(aggregated.items())
    ]


# ------------------------------------------------------------------
# Labels
# ------------------------------------------------------------------


def _all_label_sections(label: DrugLabel) -> dict[str, Any]:
    openfda = label.openfda
    return {
        "brand_name": openfda.brand_name[0] if openfda.brand_name else "Unknown",
        "generic_name": openfda.generic_name[0] if openfda.generic_name else "Unknown",
        "manufacturer": (
            openfda.manufacturer_name[0] if openfda.manufacturer_name else "Unknown"
        ),
        "product_type": openfda.product_type[0] if openfda.product_type else "Unknown",
        "route": openfda.route,
        "substance_name": openfda.substance_name,
        "boxed_warning": label.first("boxed_warning"),
        "warnings": label.first("warnings") or label.first("warnings_and_cautions"),
        "contraindications": label.first("contraindications"),
        "adverse_reactions": label.first("adverse_reactions"),
        "drug_interactions": label.first("drug_interactions"),
        "indications_and_usage": label.first("indications_and_usage"),
        "dosage_and_administration": label.first("dosage_and_administration"),
        "pregnancy": label.first("pregnancy")
        or label.first("pregnancy_or_breast_feeding"),
        "pediatric_use": label.first("pediatric_use"),
        "geriatric_use": label.first("geriatric_use"),
        "overdosage": label.first("overdosage"),
    }


def extract_label_sections(
    label: DrugLabel, sections: list[str] | None = None
) -> dict[str, Any]:
    """Pull the named sections from a label.

    With ``sections`` given, only those (plus brand and generic name) are
    kept; requested names that are not known sections are silently absent.
    Sections the label does not carry are dropped from the result.
    """
    all_sections = _all_label_sections(label)
    if sections:
        result: dict[str, Any] = {}
        for section in sections:
            key = section.strip().lower().replace(" ", "_")
            if key in all_sections:
                result[key] = all_sections[key]
        result["brand_name"] = all_sections["brand_name"]
        result["generic_name"] = all_sections["generic_name"]
    else:
        result = all_sections
    return {key: value for key, value in result.items() if value is not None}


def label_text(label: DrugLabel, sections: tuple[str, ...]) -> str:
    """Concatenate every paragraph of the given label sections."""
    parts: list[str] = []
    for section in sections:
        value = getattr(label, section, None)
        if value is None and label.model_extra:
            value = label.model_extra.get(section)
        if isinstance(value, list):
            parts.extend(str(v) for v in value)
        elif value:
            parts.append(str(value))
    return "\n".join(parts)


# Capitalised word optionally followed by up to three lower-case words,
# e.g. "Nausea", "Hepatic failure", "Stevens-Johnson syndrome".
_LABEL_TERM_RE = re.compile(r"\b([A-Z][a-z]+(?:-[A-Z]?[a-z]+)?(?:\s[a-z]+){0,3})\b")

_LABEL_TERM_STOPWORDS = frozenset(
    {
        "adverse", "after", "all", "also", "and", "because", "before", "both",
        "but", "clinical", "data", "during", "each", "for", "from", "however",
        "if", "in", "information", "is", "it", "no", "not", "of", "other",
        "patients", "placebo", "reactions", "see", "since", "some", "table",
        "the", "there", "these", "this", "those", "treatment", "use", "when",
        "where", "which", "while", "with", "warnings", "precautions",
    }
)


def extract_label_terms(text: str, max_terms: int = 200) -> list[str]:
    """Best-effort extraction of reaction-like terms from label free text.

    This is a heuristic: labels are prose, and a capitalised phrase is only a
    hint that a reaction is being listed. Results are unique, lower-cased,
    in order of first appearance.
    """
    terms: list[str] = []
    seen: set[str] = set()
    for match in _LABEL_TERM_RE.finditer(text):
        words = match.group(1).lower().split()
        while len(words) > 1 and words[-1] in _LABEL_TERM_STOPWORDS:
            words.pop()
        key = " ".join(words)
        if words[0] in _LABEL_TERM_STOPWORDS or len(key) < 4:
            continue
        if key not in seen:
            seen.add(key)
            terms.append(key)
        if len(terms) >= max_terms:
            break
    return terms


def term_mentioned_in(term: str, text: str) -> bool:
    return bool(term) and term.lower() in text.lower()


def reactions_not_in(
    rows: list[dict[str, Any]], other: list[dict[str, Any]], key: str = "reaction"
) -> list[dict[str, Any]]:
    """Rows of ``rows`` whose ``key`` does not appear (case-insensitively) in ``other``."""
    present = {str(row[key]).lower() for row in other}
    return [row for row in rows if str(row[key]).lower() not in present]


# ------------------------------------------------------------------
# Recalls
# ------------------------------------------------------------------


def normalize_recall(raw: dict[str, Any]) -> dict[str, Any]:
    recall = RecallRecord.model_validate(raw)
    return {
        **recall.model_dump(include={"recall_number", "classification", "status"}),
        "classification_description": RECALL_CLASSIFICATION_DESCRIPTIONS.get(
            recall.classification or "", RECALL_CLASSIFICATION_DESCRIPTIONS["Class III"]
        ),
        **recall.model_dump(
            exclude={"recall_number", "classification", "status"}
        ),
    }


def classification_summary(recalls: list[dict[str, Any]]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for recall in recalls:
        key = recall.get("classification") or "Unclassified"
        counts[key] = counts.get(key, 0) + 1
    return counts


# ------------------------------------------------------------------
# Empty results
# ------------------------------------------------------------------


def no_results(message: str, **extra: Any) -> dict[str, Any]:
    """Structured "nothing found" payload (a success, not an error)."""
    return {"message": message, **extra}
