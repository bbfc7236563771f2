"""
Typed parameter records, one per tool.

The dispatcher validates raw call arguments into these models before any
network I/O, so handlers only ever see well-formed input. Numeric bounds live
here rather than in the advertised JSON schema.
"""

from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)

from drug_safety_mcp.constants import (
    MAX_COMPARE_DRUGS,
    MAX_RESULT_LIMIT,
    MAX_STRING_LENGTH,
    MAX_TREND_YEARS,
    MIN_COMPARE_DRUGS,
)


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    if len(value) > MAX_STRING_LENGTH:
        raise ValueError(f"must be at most {MAX_STRING_LENGTH} characters")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _optional_text(value: str | None) -> str | None:
    return _required_text(value) if value is not None else None


RequiredText = Annotated[str, AfterValidator(_required_text)]
OptionalText = Annotated[
    str | None, BeforeValidator(_blank_to_none), AfterValidator(_optional_text)
]
DateText = Annotated[
    Annotated[str, StringConstraints(pattern=r"^\d{8}$")] | None,
    BeforeValidator(_blank_to_none),
]


def _limit(default: int, maximum: int = MAX_RESULT_LIMIT) -> Any:
    return Field(default, ge=1, le=maximum)


GroupBy = Literal["reaction", "outcome", "age", "sex", "country", "reporter_type", "route"]
OutcomeType = Literal[
    "death",
    "hospitalization",
    "life_threatening",
    "disability",
    "congenital_anomaly",
    "other_serious",
]
Granularity = Literal["year", "quarter", "month"]
RecallClassification = Literal["Class I", "Class II", "Class III"]
RecallStatus = Literal["Ongoing", "Completed", "Terminated"]
ClassType = Literal["epc", "moa", "pe", "cs"]
PediatricAgeGroup = Literal["all", "neonate", "infant", "child", "adolescent"]
GeriatricAgeGroup = Literal["all", "65_to_74", "75_to_84", "85_plus"]


class ToolParams(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class SearchAdverseEventsParams(ToolParams):
    drug_name: RequiredText
    reaction: OptionalText = None
    start_date: DateText = None
    end_date: DateText = None
    serious: bool = False
    limit: int = _limit(10)


class GetEventCountsParams(ToolParams):
    drug_name: RequiredText
    group_by: GroupBy
    limit: int = _limit(20)


class CompareSafetyProfilesParams(ToolParams):
    drug_names: list[RequiredText] = Field(
        min_length=MIN_COMPARE_DRUGS, max_length=MAX_COMPARE_DRUGS
    )
    top_n: int = _limit(10)

    @field_validator("drug_names")
    @classmethod
    def _distinct_drugs(cls, names: list[str]) -> list[str]:
        seen: set[str] = set()
        for name in names:
            if name.lower() in seen:
                raise ValueError(f"lists '{name}' more than once")
            seen.add(name.lower())
        return names


class GetSeriousEventsParams(ToolParams):
    drug_name: RequiredText
    outcome_type: OutcomeType | None = None
    limit: int = _limit(10)


class GetReportingTrendsParams(ToolParams):
    drug_name: RequiredText
    granularity: Granularity = "quarter"
    years: int = _limit(5, MAX_TREND_YEARS)


class SearchByReactionParams(ToolParams):
    reaction: RequiredText
    limit: int = _limit(20)


class GetConcomitantDrugsParams(ToolParams):
    drug_name: RequiredText
    limit: int = _limit(20)


class GetDataInfoParams(ToolParams):
    pass


class GetDrugLabelInfoParams(ToolParams):
    drug_name: RequiredText
    sections: list[str] | None = None


class GetRecallInfoParams(ToolParams):
    drug_name: RequiredText
    classification: RecallClassification | None = None
    status: RecallStatus | None = None
    limit: int = _limit(10)


class SearchByIndicationParams(ToolParams):
    indication: RequiredText
    group_by: Literal["drug", "reaction"] = "drug"
    limit: int = _limit(20)


class SearchByDrugClassParams(ToolParams):
    drug_class: RequiredText
    class_type: ClassType = "epc"
    group_by: Literal["reaction", "drug"] = "reaction"
    limit: int = _limit(20)


class CompareLabelToReportsParams(ToolParams):
    drug_name: RequiredText
    top_n: int = _limit(20)


class GetPediatricSafetyParams(ToolParams):
    drug_name: RequiredText
    age_group: PediatricAgeGroup = "all"
    limit: int = _limit(20)


class GetGeriatricSafetyParams(ToolParams):
    drug_name: RequiredText
    age_group: GeriatricAgeGroup = "all"
    limit: int = _limit(20)


class GetSafetySummaryParams(ToolParams):
    drug_name: RequiredText


class GetPregnancyLactationInfoParams(ToolParams):
    drug_name: RequiredText
    include_reports: bool = True
