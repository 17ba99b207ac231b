from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

from propquant.domain.property import PropertyData, RiskFactor

Severity = Literal["warning", "info", "critical"]


@dataclass(frozen=True)
class ExpenseBreakdown:
    # all annual, in the property's currency
    taxes: float
    levies: float
    maintenance: float
    insurance: float
    management: float

    @property
    def total(self) -> float:
        return self.taxes + self.levies + self.maintenance + self.insurance + self.management


@dataclass(frozen=True)
class Financials:
    gross_rental_yield: float      # % of price
    net_rental_yield: float        # % of price, same basis as cap_rate
    monthly_cash_flow: float       # after debt service
    annual_noi: float
    cap_rate: float                # %
    cash_on_cash: float            # %
    break_even_years: float        # UNBOUNDED when cash flow <= 0
    mortgage_payment_monthly: float
    total_annual_expenses: float
    dscr: float                    # UNBOUNDED when there is no debt service

    # derivation context for downstream stages
    effective_vacancy: float       # %
    gross_annual_rental: float
    effective_gross_income: float  # annual, after vacancy
    loan_amount: float
    down_payment: float
    closing_costs: float
    cash_invested: float
    interest_rate: float           # %
    loan_term_years: int
    maintenance_pct: float
    expenses: ExpenseBreakdown

    @property
    def annual_debt_service(self) -> float:
        return self.mortgage_payment_monthly * 12.0


@dataclass(frozen=True)
class SanityCheck:
    id: str
    severity: Severity
    message: str
    triggered: bool


@dataclass(frozen=True)
class InstitutionalScores:
    asset_quality_score: int
    deal_economics_score: int
    leverage_impact_score: int
    final_score: int
    verdict: str
    score_explanation: str
    mitigation_suggestions: tuple[str, ...]


@dataclass(frozen=True)
class SensitivityAnalysis:
    label: str
    rate: float
    monthly_cash_flow: float
    net_yield: float


@dataclass(frozen=True)
class Projection:
    year: int
    value: float
    equity: float


@dataclass(frozen=True)
class AnalysisResult:
    id: str
    timestamp: str
    property: PropertyData
    financials: Financials
    risks: tuple[RiskFactor, ...]
    sanity_checks: tuple[SanityCheck, ...]
    institutional_scores: InstitutionalScores
    sensitivity: tuple[SensitivityAnalysis, ...]
    projections: tuple[Projection, ...]

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["property"] = self.property.model_dump(mode="json")
        out["risks"] = [r.model_dump(mode="json") for r in self.risks]
        out["financials"]["expenses"]["total"] = self.financials.expenses.total
        return out
