from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Jurisdiction(str, Enum):
    GLOBAL = "GLOBAL"
    IN = "IN"
    EU = "EU"
    US = "US"
    OTHER = "OTHER"


class Domain(str, Enum):
    MARKETPLACE = "marketplace"
    PSP = "psp"
    BANKING = "banking"
    CARDS = "cards"
    CRYPTO = "crypto"
    REMITTANCE = "remittance"


class TypologyRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    domains: List[str] = Field(default_factory=list)
    products: List[str] = Field(default_factory=list)
    countries: List[str] = Field(default_factory=list)
    keywords_any: List[str] = Field(default_factory=list)
    base_priority: Optional[Priority] = None
    red_flags: List[str] = Field(default_factory=list)
    recommended_checks: List[str] = Field(default_factory=list)
    sar_str_angles: List[str] = Field(default_factory=list)
    pitfalls: List[str] = Field(default_factory=list)
    country_notes: Dict[str, str] = Field(default_factory=dict)

    @field_validator(
        "domains", "products", "countries", "keywords_any",
        "red_flags", "recommended_checks", "sar_str_angles", "pitfalls",
        mode="before",
    )
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [item for item in v if item is not None]
        return v

    @field_validator("country_notes", mode="before")
    @classmethod
    def _none_to_dict(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            # null notes contribute nothing
            return {k: note for k, note in v.items() if note is not None}
        return v

    @field_validator("base_priority", mode="before")
    @classmethod
    def _unknown_priority(cls, v: Any) -> Any:
        # anything outside Low/Medium/High has no influence
        return v if isinstance(v, str) and v in {p.value for p in Priority} else None


class ScenarioMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    country: str = ""
    domain: str = ""
    product: str = ""
    customer_type: str = Field(default="", alias="customerType")
    amount_band: str = Field(default="", alias="amountBand")
    volume_band: str = Field(default="", alias="volumeBand")
    cross_border: str = Field(default="No", alias="crossBorder")

    @field_validator("cross_border", mode="before")
    @classmethod
    def _bool_to_yes_no(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return "Yes" if v else "No"
        return v


@dataclass
class ScoredCandidate:
    rule: TypologyRule
    score: int


class PriorityAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: Priority = Priority.LOW
    rationale: str = ""


class AdvisoryResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    meta: ScenarioMetadata
    likely_typologies: Tuple[str, ...]
    red_flags: Tuple[str, ...] = ()
    recommended_checks: Tuple[str, ...] = ()
    sar_str_angles: Tuple[str, ...] = ()
    priority_assessment: PriorityAssessment = Field(default_factory=PriorityAssessment)
    country_notes: Tuple[str, ...] = ()
    pitfalls_to_avoid: Tuple[str, ...] = ()


class AnalyseRequest(BaseModel):
    meta: ScenarioMetadata = Field(default_factory=ScenarioMetadata)
    scenario: str


class AnalyseResponse(BaseModel):
    result: AdvisoryResult
    narrative: str
    filing_paragraph: str
