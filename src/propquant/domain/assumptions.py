# src/propquant/domain/assumptions.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from propquant.domain.policy import MAINTENANCE_TIERS


class AnalysisConfig(BaseModel):
    """
    Investor assumptions. All rates are in percent units (6.8 means 6.8%).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )

    down_payment_pct: float = Field(20.0, ge=0.0, le=100.0)
    interest_rate: float = Field(6.8, ge=0.0, le=100.0, description="Annual, percent")
    loan_term_years: int = Field(30, ge=1, le=50)
    maintenance_pct: float = Field(MAINTENANCE_TIERS.AVERAGE, ge=0.0, description="Percent of price per year")
    insurance_pct: float = Field(0.5, ge=0.0, description="Percent of price per year")
    management_pct: float = Field(8.0, ge=0.0, le=100.0, description="Percent of effective rent")
    self_managed: bool = False

    @property
    def management_rate(self) -> float:
        """Management fee percent actually charged; zero when self-managed."""
        return 0.0 if self.self_managed else self.management_pct

    def with_rate(self, interest_rate: float) -> "AnalysisConfig":
        return self.model_copy(update={"interest_rate": interest_rate})


DEFAULT_CONFIG = AnalysisConfig()
