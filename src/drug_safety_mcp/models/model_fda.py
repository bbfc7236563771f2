"""
Pydantic models for openFDA data.

Upstream models mirror the raw JSON returned by the event, label and
enforcement endpoints. Output models are the normalized records the tools
hand back to the agent; agents never see raw FAERS rows.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

# ------------------------------------------------------------------
# Envelope
# ------------------------------------------------------------------


class ResultsPage(BaseModel):
    """Pagination block inside ``meta``."""

    skip: int = 0
    limit: int = 0
    total: int = 0


class EnvelopeMeta(BaseModel):
    last_updated: str | None = None
    results: ResultsPage | None = None


class UpstreamErrorBody(BaseModel):
    code: str = ""
    message: str = ""


class OpenFDAEnvelope(BaseModel):
    """One openFDA response: meta, results, and an optional error object."""

    meta: EnvelopeMeta | None = None
    results: list[dict[str, Any]] = []
    error: UpstreamErrorBody | None = None

    @property
    def total(self) -> int:
        if self.meta and self.meta.results:
            return self.meta.results.total
        return 0

    @property
    def last_updated(self) -> str | None:
        return self.meta.last_updated if self.meta else None

    @property
    def is_empty(self) -> bool:
        return not self.results


# ------------------------------------------------------------------
# FAERS records
# ------------------------------------------------------------------


class CountBucket(BaseModel):
    """A single ``{term, count}`` pair from a count query.

    Date counts come back as ``{time, count}`` instead.
    """

    term: str | int | None = None
    time: str | None = None
    count: int = 0


class FAERSReaction(BaseModel):
    reactionmeddrapt: str | None = None
    reactionoutcome: str | None = None


class FAERSDrug(BaseModel):
    medicinalproduct: str | None = None
    drugindication: str | None = None
    drugcharacterization: str | None = None
    drugadministrationroute: str | None = None


class FAERSPatient(BaseModel):
    patientonsetage: str | None = None
    patientonsetageunit: str | None = None
    patientsex: str | None = None
    patientweight: str | None = None
    reaction: list[FAERSReaction] = []
    drug: list[FAERSDrug] = []


class FAERSReport(BaseModel):
    """One FAERS safety report as returned by the event search endpoint."""

    safetyreportid: str | None = None
    receivedate: str | None = None
    serious: str | None = None
    seriousnessdeath: str | None = None
    seriousnesshospitalization: str | None = None
    seriousnesslifethreatening: str | None = None
    seriousnessdisabling: str | None = None
    seriousnesscongenitalanomali: str | None = None
    seriousnessother: str | None = None
    occurcountry: str | None = None
    patient: FAERSPatient = FAERSPatient()


# ------------------------------------------------------------------
# Label and enforcement records
# ------------------------------------------------------------------


class LabelOpenFDA(BaseModel):
    brand_name: list[str] = []
    generic_name: list[str] = []
    manufacturer_name: list[str] = []
    product_type: list[str] = []
    route: list[str] = []
    substance_name: list[str] = []
    pharm_class_epc: list[str] = []


class DrugLabel(BaseModel):
    """An SPL drug label. Every free-text section is a list of paragraphs."""

    model_config = ConfigDict(extra="allow")

    openfda: LabelOpenFDA = LabelOpenFDA()
    boxed_warning: list[str] | None = None
    warnings: list[str] | None = None
    warnings_and_cautions: list[str] | None = None
    precautions: list[str] | None = None
    contraindications: list[str] | None = None
    adverse_reactions: list[str] | None = None
    drug_interactions: list[str] | None = None
    indications_and_usage: list[str] | None = None
    dosage_and_administration: list[str] | None = None
    pregnancy: list[str] | None = None
    pregnancy_or_breast_feeding: list[str] | None = None
    pediatric_use: list[str] | None = None
    geriatric_use: list[str] | None = None
    overdosage: list[str] | None = None

    def first(self, section: str) -> str | None:
        """Return the first paragraph of a section, or None when absent."""
        value = getattr(self, section, None)
        if value is None and self.model_extra:
            value = self.model_extra.get(section)
        if isinstance(value, list):
            return value[0] if value else None
        return value


class RecallRecord(BaseModel):
    recall_number: str | None = None
    classification: str | None = None
    status: str | None = None
    recall_initiation_date: str | None = None
    report_date: str | None = None
    reason_for_recall: str | None = None
    product_description: str | None = None
    recalling_firm: str | None = None
    distribution_pattern: str | None = None
    voluntary_mandated: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


# ------------------------------------------------------------------
# Normalized output records
# ------------------------------------------------------------------


class PatientSummary(BaseModel):
    age: str  # "45 years" or "Unknown"
    sex: str  # "Male" | "Female" | "Unknown"
    weight: str  # "70 kg" or "Unknown"


class DrugRole(BaseModel):
    name: str | None = None
    indication: str | None = None
    role: str  # "Suspect" | "Concomitant" | "Interacting"


class AdverseEventReport(BaseModel):
    report_id: str | None = None
    receive_date: str | None = None
    serious: bool
    patient: PatientSummary
    reactions: list[str] = []
    outcomes: list[str] = []
    drugs: list[DrugRole] = []


class SeriousnessFlags(BaseModel):
    death: bool = False
    hospitalization: bool = False
    life_threatening: bool = False
    disability: bool = False
    congenital_anomaly: bool = False
    other: bool = False


class SeriousEventReport(BaseModel):
    report_id: str | None = None
    receive_date: str | None = None
    seriousness: SeriousnessFlags
    reactions: list[str] = []
    patient_age: str
