# src/propquant/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from propquant.domain.assumptions import AnalysisConfig


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # Investor assumption defaults (percent units, e.g. 6.8 == 6.8%)
    DOWN_PAYMENT_PCT: float = Field(default=20.0)
    INTEREST_RATE: float = Field(default=6.8)
    LOAN_TERM_YEARS: int = Field(default=30)
    MAINTENANCE_PCT: float = Field(default=1.0)
    INSURANCE_PCT: float = Field(default=0.5)
    MANAGEMENT_PCT: float = Field(default=8.0)
    SELF_MANAGED: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="PROPQUANT_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "DOWN_PAYMENT_PCT",
        "INTEREST_RATE",
        "MAINTENANCE_PCT",
        "INSURANCE_PCT",
        "MANAGEMENT_PCT",
        mode="before",
    )
    @classmethod
    def _to_non_negative_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("LOAN_TERM_YEARS", mode="before")
    @classmethod
    def _term_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("LOAN_TERM_YEARS must be > 0")
        return n

    def default_analysis_config(self) -> AnalysisConfig:
        """Investor assumptions used when a caller does not supply its own."""
        return AnalysisConfig(
            down_payment_pct=self.DOWN_PAYMENT_PCT,
            interest_rate=self.INTEREST_RATE,
            loan_term_years=self.LOAN_TERM_YEARS,
            maintenance_pct=self.MAINTENANCE_PCT,
            insurance_pct=self.INSURANCE_PCT,
            management_pct=self.MANAGEMENT_PCT,
            self_managed=self.SELF_MANAGED,
        )


config = AppConfig()
