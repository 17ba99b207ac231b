from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Condition = Literal["new", "good", "average", "poor"]
Confidence = Literal["low", "medium", "high"]


class _Record(BaseModel):
    """
    Upstream extraction emits camelCase JSON; accept that as well as
    the snake_case attribute names. Records are immutable once parsed.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class Location(_Record):
    city: str
    suburb: str
    country: str


class EstimatedFlags(_Record):
    """True where the extraction step inferred a value rather than observing it."""
    price: bool
    levies: bool
    taxes: bool
    rental: bool
    size: bool


class InferredMarketData(_Record):
    avg_monthly_rental: float = Field(..., description="Average achievable monthly rent")
    vacancy_rate: float = Field(..., ge=0.0, le=100.0, description="Percent, e.g. 5.0")
    annual_appreciation: float = Field(..., gt=-100.0, description="Percent per year")
    effective_tax_rate: float = Field(..., ge=0.0, description="Percent of value per year")


class StructuralSubScores(_Record):
    roof_exterior: float = Field(..., ge=0.0, le=100.0)
    plumbing_water: float = Field(..., ge=0.0, le=100.0)
    hvac_electrical: float = Field(..., ge=0.0, le=100.0)
    guidance: str = ""

    def systems(self) -> dict[str, float]:
        return {
            "roof and exterior": self.roof_exterior,
            "plumbing and water": self.plumbing_water,
            "HVAC and electrical": self.hvac_electrical,
        }


class GroundingSource(_Record):
    title: str
    uri: str


class PropertyData(_Record):
    """
    Normalized listing record produced by the extraction step.

    All monetary fields are in `currency`; nothing here converts between currencies.
    Price and rent are deliberately not range-restricted: implausible values are
    analysis outcomes reported by the sanity checks, not parse failures.
    """
    url: str | None = None

    price: float
    location: Location
    property_type: str = Field(..., alias="type")
    year_built: int | None = None
    condition: Condition | None = None

    size_sqm: float = Field(..., ge=0.0)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0.0)

    hoa_levies_monthly: float = Field(..., ge=0.0)
    property_taxes_annual: float = Field(..., ge=0.0)
    currency: str

    confidence: Confidence
    is_estimated: EstimatedFlags
    inferred_market_data: InferredMarketData

    structural_sub_scores: StructuralSubScores | None = None
    grounding_sources: list[GroundingSource] | None = None

    @field_validator("currency")
    @classmethod
    def _iso_currency(cls, v: str) -> str:
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("currency must be a 3-letter ISO code")
        return code


class RiskFactor(_Record):
    """One externally assessed risk dimension; higher score is safer."""
    id: str
    label: str
    score: float = Field(..., ge=0.0, le=100.0)
    description: str = ""
