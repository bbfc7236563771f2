"""
openFDA search-expression builders.

All functions are pure: they take user-supplied terms and return a search
string in openFDA query syntax. Clauses are joined with the literal tokens
``+AND+`` / ``+OR+``; user text is double-quoted with embedded quotes escaped
so a stray ``"`` cannot break the expression.
"""

from drug_safety_mcp.constants import (
    AGE_BRACKETS,
    AGE_UNIT_YEARS,
    AND,
    OPEN_END_DATE,
    OPEN_START_DATE,
    OR,
    PHARM_CLASS_FIELDS,
    SERIOUS_OUTCOME_FILTERS,
)


def escape_quotes(text: str) -> str:
    return text.replace('"', '\\"')


def quoted(field: str, value: str) -> str:
    """``field:"value"`` with the value quote-escaped."""
    return f'{field}:"{escape_quotes(value)}"'


def join_and(*clauses: str) -> str:
    """Join the non-empty clauses with ``+AND+``."""
    return AND.join(c for c in clauses if c)


def join_or(*clauses: str) -> str:
    return "(" + OR.join(c for c in clauses if c) + ")"


# ------------------------------------------------------------------
# FAERS clauses
# ------------------------------------------------------------------


def build_drug_search(drug_name: str) -> str:
    """Match a drug by brand name, generic name, or reported product name."""
    return join_or(
        quoted("patient.drug.openfda.brand_name", drug_name),
        quoted("patient.drug.openfda.generic_name", drug_name),
        quoted("patient.drug.medicinalproduct", drug_name),
    )


def build_reaction_clause(reaction: str) -> str:
    return quoted("patient.reaction.reactionmeddrapt", reaction)


def build_reactions_any(reactions: list[str] | tuple[str, ...]) -> str:
    return join_or(*(build_reaction_clause(r) for r in reactions))


def build_date_range(start_date: str | None = None, end_date: str | None = None) -> str:
    """``receivedate:[start+TO+end]``; an absent bound becomes open-ended.

    Returns an empty string when neither bound is given.
    """
    if not start_date and not end_date:
        return ""
    start = start_date or OPEN_START_DATE
    end = end_date or OPEN_END_DATE
    return f"receivedate:[{start}+TO+{end}]"


def build_age_clause(bracket: str) -> str:
    """Onset-age range for a named bracket, always qualified as years."""
    try:
        low, high = AGE_BRACKETS[bracket]
    except KeyError:
        raise ValueError(f"Unknown age bracket: {bracket}") from None
    return (
        f"(patient.patientonsetage:[{low}+TO+{high}]"
        f"{AND}patient.patientonsetageunit:{AGE_UNIT_YEARS})"
    )


def build_serious_clause(outcome_type: str | None = None) -> str:
    """``serious:1``, optionally narrowed to one seriousness category."""
    if outcome_type is None:
        return "serious:1"
    try:
        return join_and("serious:1", SERIOUS_OUTCOME_FILTERS[outcome_type])
    except KeyError:
        raise ValueError(f"Unknown outcome_type: {outcome_type}") from None


def compose_event_search(
    drug_name: str,
    reaction: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    serious: bool = False,
) -> str:
    """Full listing query: drug, then optional reaction, date range and seriousness."""
    return join_and(
        build_drug_search(drug_name),
        build_reaction_clause(reaction) if reaction else "",
        build_date_range(start_date, end_date),
        "serious:1" if serious else "",
    )


def build_indication_search(indication: str) -> str:
    return quoted("patient.drug.drugindication", indication)


def build_drug_class_search(drug_class: str, class_type: str = "epc") -> str:
    """Match reports where any drug carries the given pharmacologic class."""
    try:
        field = PHARM_CLASS_FIELDS[class_type]
    except KeyError:
        raise ValueError(f"Unknown class_type: {class_type}") from None
    return quoted(field, drug_class)


# ------------------------------------------------------------------
# Label and enforcement clauses
# ------------------------------------------------------------------


def build_label_search(drug_name: str) -> str:
    return join_or(
        quoted("openfda.brand_name", drug_name),
        quoted("openfda.generic_name", drug_name),
    )


def build_recall_search(
    drug_name: str,
    classification: str | None = None,
    status: str | None = None,
) -> str:
    return join_and(
        join_or(
            quoted("product_description", drug_name),
            quoted("openfda.brand_name", drug_name),
            quoted("openfda.generic_name", drug_name),
        ),
        quoted("classification", classification) if classification else "",
        quoted("status", status) if status else "",
    )
