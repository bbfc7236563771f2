"""Project-wide constants."""

from pathlib import Path

# -- openFDA endpoints ------------------------------------------------------
OPENFDA_EVENT_URL: str = "https://api.fda.gov/drug/event.json"
OPENFDA_LABEL_URL: str = "https://api.fda.gov/drug/label.json"
OPENFDA_ENFORCEMENT_URL: str = "https://api.fda.gov/drug/enforcement.json"
OPENFDA_DOCS_URL: str = "https://open.fda.gov/apis/drug/event/"
OPENFDA_AUTH_DOCS_URL: str = "https://open.fda.gov/apis/authentication/"

# openFDA answers "zero matches" with HTTP 404 and this error code
OPENFDA_NOT_FOUND_CODE: str = "NOT_FOUND"

# Count queries on receivedate can return one bucket per day
OPENFDA_MAX_COUNT_LIMIT: int = 1000

DEFAULT_API_KEY_FILE: Path = Path("/run/secrets/openfda_api_key")

# -- Query syntax -----------------------------------------------------------
AND: str = "+AND+"
OR: str = "+OR+"
OPEN_START_DATE: str = "19000101"
OPEN_END_DATE: str = "29991231"
AGE_UNIT_YEARS: str = "801"

# -- Parameter limits -------------------------------------------------------
MAX_STRING_LENGTH: int = 200
MAX_RESULT_LIMIT: int = 100
MAX_TREND_YEARS: int = 20
MIN_COMPARE_DRUGS: int = 2
MAX_COMPARE_DRUGS: int = 5

# -- Count fields (FAERS) ---------------------------------------------------
REACTION_COUNT_FIELD: str = "patient.reaction.reactionmeddrapt.exact"
BRAND_NAME_COUNT_FIELD: str = "patient.drug.openfda.brand_name.exact"
RECEIVE_DATE_COUNT_FIELD: str = "receivedate"

EVENT_COUNT_FIELDS: dict[str, str] = {
    "reaction": REACTION_COUNT_FIELD,
    "outcome": "patient.reaction.reactionoutcome",
    "age": "patient.patientonsetage",
    "sex": "patient.patientsex",
    "country": "occurcountry.exact",
    "reporter_type": "primarysource.qualification",
    "route": "patient.drug.drugadministrationroute",
}

SERIOUS_OUTCOME_FILTERS: dict[str, str] = {
    "death": "seriousnessdeath:1",
    "hospitalization": "seriousnesshospitalization:1",
    "life_threatening": "seriousnesslifethreatening:1",
    "disability": "seriousnessdisabling:1",
    "congenital_anomaly": "seriousnesscongenitalanomali:1",
    "other_serious": "seriousnessother:1",
}

PHARM_CLASS_FIELDS: dict[str, str] = {
    "epc": "patient.drug.openfda.pharm_class_epc",
    "moa": "patient.drug.openfda.pharm_class_moa",
    "pe": "patient.drug.openfda.pharm_class_pe",
    "cs": "patient.drug.openfda.pharm_class_cs",
}

PHARM_CLASS_DESCRIPTIONS: dict[str, str] = {
    "epc": "Established Pharmacologic Class",
    "moa": "Mechanism of Action",
    "pe": "Physiologic Effect",
    "cs": "Chemical Structure",
}

# -- Coded value maps -------------------------------------------------------
SEX_MAP: dict[int, str] = {
    0: "Unknown",
    1: "Male",
    2: "Female",
}

OUTCOME_MAP: dict[int, str] = {
    1: "Recovered",
    2: "Recovering",
    3: "Not recovered",
    4: "Recovered with sequelae",
    5: "Fatal",
    6: "Unknown",
}

REPORTER_TYPE_MAP: dict[int, str] = {
    1: "Physician",
    2: "Pharmacist",
    3: "Other health professional",
    4: "Lawyer",
    5: "Consumer",
}

DRUG_ROLE_MAP: dict[str, str] = {
    "1": "Suspect",
    "2": "Concomitant",
    "3": "Interacting",
}

AGE_UNIT_MAP: dict[str, str] = {
    "800": "decades",
    "801": "years",
    "802": "months",
    "803": "weeks",
    "804": "days",
    "805": "hours",
}

RECALL_CLASSIFICATION_DESCRIPTIONS: dict[str, str] = {
    "Class I": "Most serious - may cause death or serious health problems",
    "Class II": "May cause temporary or reversible health problems",
    "Class III": "Unlikely to cause adverse health consequences",
}

# -- Age brackets (inclusive, in years) -------------------------------------
AGE_BRACKETS: dict[str, tuple[int, int]] = {
    "neonate": (0, 0),
    "infant": (0, 1),
    "child": (2, 11),
    "adolescent": (12, 17),
    "pediatric": (0, 17),
    "adult": (18, 64),
    "65_to_74": (65, 74),
    "75_to_84": (75, 84),
    "85_plus": (85, 150),
    "geriatric": (65, 150),
}

# -- Label sections ---------------------------------------------------------
PREGNANCY_LABEL_SECTIONS: tuple[str, ...] = (
    "pregnancy",
    "pregnancy_or_breast_feeding",
    "teratogenic_effects",
    "nonteratogenic_effects",
    "labor_and_delivery",
    "lactation",
    "nursing_mothers",
    "females_and_males_of_reproductive_potential",
)

SIGNAL_LABEL_SECTIONS: tuple[str, ...] = (
    "adverse_reactions",
    "warnings",
    "warnings_and_cautions",
    "boxed_warning",
    "precautions",
    "contraindications",
)

PREGNANCY_EXPOSURE_REACTIONS: tuple[str, ...] = (
    "Exposure during pregnancy",
    "Maternal exposure during pregnancy",
    "Foetal exposure during pregnancy",
)

# -- Disclaimers and attribution ---------------------------------------------
FAERS_DISCLAIMER: str = """
IMPORTANT DATA LIMITATIONS:
- A report in FAERS does NOT prove the drug caused the adverse event
- Reports are voluntarily submitted and may be incomplete or duplicated
- Reporting rates cannot be used to calculate incidence rates
- Many factors influence reporting (publicity, time on market, etc.)
- This data should not be the sole basis for clinical decisions
- Always consult healthcare professionals for medical advice

Source: FDA Adverse Event Reporting System (FAERS) via OpenFDA API
"""

LABEL_SOURCE: str = "FDA Drug Label via OpenFDA API"
RECALL_SOURCE: str = "FDA Enforcement Reports via OpenFDA API"

FAERS_LIMITATIONS: list[str] = [
    "Reports do NOT prove causation between drug and event",
    "Voluntary reporting - many events go unreported",
    "Duplicate and incomplete reports exist in the database",
    "Cannot calculate incidence rates (no denominator data)",
    "Reporting influenced by publicity, time on market, etc.",
    "Data quality varies by reporter and time period",
]

FAERS_PROPER_USE: list[str] = [
    "Signal detection - identifying potential safety issues for further investigation",
    "Hypothesis generation - not hypothesis confirmation",
    "Understanding reported adverse event patterns",
    "Comparing relative frequency of different reactions for a drug",
]

# -- Visualization color schemes ------------------------------------------
COLOR_SCHEMES: dict[str, dict[str, str]] = {
    "outcomes": {
        "Recovered": "#22c55e",
        "Recovering": "#84cc16",
        "Not recovered": "#f59e0b",
        "Recovered with sequelae": "#f97316",
        "Fatal": "#ef4444",
        "Unknown": "#9ca3af",
    },
    "seriousness": {
        "death": "#991b1b",
        "hospitalization": "#dc2626",
        "life_threatening": "#f97316",
        "disability": "#eab308",
        "congenital_anomaly": "#a855f7",
        "other": "#6b7280",
    },
    "sex": {
        "Male": "#3b82f6",
        "Female": "#ec4899",
        "Unknown": "#9ca3af",
    },
    "reporter": {
        "Physician": "#2563eb",
        "Pharmacist": "#7c3aed",
        "Other health professional": "#0891b2",
        "Consumer": "#16a34a",
        "Lawyer": "#dc2626",
    },
    "recall_classification": {
        "Class I": "#dc2626",
        "Class II": "#f59e0b",
        "Class III": "#22c55e",
    },
    "population": {
        "pediatric": "#8b5cf6",
        "geriatric": "#0ea5e9",
        "adult": "#64748b",
    },
}
