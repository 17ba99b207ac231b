# src/propquant/services/sanity.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from propquant.adapters.logging_utils import get_logger, log_event
from propquant.domain.policy import (
    DEEP_NEGATIVE_CASHFLOW_RENT_MULTIPLE,
    DSCR_LENDER_MIN,
    INSTITUTIONAL_FLOORS,
    MAINTENANCE_TIERS,
    TAX_MISMATCH_TOLERANCE,
)
from propquant.domain.property import PropertyData
from propquant.domain.underwriting import Financials, SanityCheck, Severity

logger = get_logger(__name__)

Predicate = Callable[[PropertyData, Financials], bool]


@dataclass(frozen=True)
class SanityRule:
    id: str
    severity: Severity
    message: str
    predicate: Predicate

    def evaluate(self, prop: PropertyData, fin: Financials) -> SanityCheck:
        return SanityCheck(
            id=self.id,
            severity=self.severity,
            message=self.message,
            triggered=bool(self.predicate(prop, fin)),
        )


# ------------------------------------------------------------------
# Predicates. Each reads only its inputs; absent optional fields mean
# "not applicable".
# ------------------------------------------------------------------


def _rent(prop: PropertyData) -> float:
    return prop.inferred_market_data.avg_monthly_rental


def _deep_negative_cashflow(prop: PropertyData, fin: Financials) -> bool:
    threshold = DEEP_NEGATIVE_CASHFLOW_RENT_MULTIPLE * max(_rent(prop), 0.0)
    return fin.monthly_cash_flow < -threshold


def _shallow_negative_cashflow(prop: PropertyData, fin: Financials) -> bool:
    return fin.monthly_cash_flow < 0 and not _deep_negative_cashflow(prop, fin)


def _tax_rate_mismatch(prop: PropertyData, fin: Financials) -> bool:
    expected = prop.price * prop.inferred_market_data.effective_tax_rate / 100.0
    if expected <= 0:
        return False
    return abs(prop.property_taxes_annual - expected) / expected > TAX_MISMATCH_TOLERANCE


def _no_sources(prop: PropertyData, fin: Financials) -> bool:
    return not prop.grounding_sources


SANITY_RULES: tuple[SanityRule, ...] = (
    # ---------------- critical ----------------
    SanityRule(
        "price_non_positive",
        "critical",
        "Listing price is zero or negative; yields and returns are not meaningful.",
        lambda p, f: p.price <= 0,
    ),
    SanityRule(
        "rent_non_positive",
        "critical",
        "Market rent is zero or negative; the asset produces no rental income.",
        lambda p, f: _rent(p) <= 0,
    ),
    SanityRule(
        "dscr_below_one",
        "critical",
        "DSCR below 1.0x: net operating income does not cover debt service. A lender would decline.",
        lambda p, f: f.dscr < DSCR_LENDER_MIN,
    ),
    SanityRule(
        "deep_negative_cashflow",
        "critical",
        f"Monthly cash flow loss exceeds {DEEP_NEGATIVE_CASHFLOW_RENT_MULTIPLE:.0%} of market rent.",
        _deep_negative_cashflow,
    ),
    # ---------------- warning ----------------
    SanityRule(
        "negative_cashflow",
        "warning",
        "Negative monthly cash flow after debt service.",
        _shallow_negative_cashflow,
    ),
    SanityRule(
        "estimated_price",
        "warning",
        "Price was estimated, not observed on the listing.",
        lambda p, f: p.is_estimated.price,
    ),
    SanityRule(
        "estimated_taxes",
        "warning",
        "Property taxes were estimated; confirm with the local assessor.",
        lambda p, f: p.is_estimated.taxes,
    ),
    SanityRule(
        "estimated_rental",
        "warning",
        "Market rent was estimated; income figures carry estimation risk.",
        lambda p, f: p.is_estimated.rental,
    ),
    SanityRule(
        "vacancy_floor_applied",
        "warning",
        f"Reported vacancy is below the {INSTITUTIONAL_FLOORS.VACANCY_MIN:g}% institutional floor; the floor was used instead.",
        lambda p, f: p.inferred_market_data.vacancy_rate < INSTITUTIONAL_FLOORS.VACANCY_MIN,
    ),
    SanityRule(
        "deferred_maintenance",
        "warning",
        "Poor condition asset: deferred maintenance tier applied; expect near-term capex.",
        lambda p, f: p.condition == "poor" and f.maintenance_pct >= MAINTENANCE_TIERS.DEFERRED,
    ),
    SanityRule(
        "maintenance_under_provisioned",
        "warning",
        "Poor condition asset provisioned below the deferred maintenance tier.",
        lambda p, f: p.condition == "poor" and f.maintenance_pct < MAINTENANCE_TIERS.DEFERRED,
    ),
    # ---------------- info ----------------
    SanityRule(
        "estimated_levies",
        "info",
        "HOA levies were estimated.",
        lambda p, f: p.is_estimated.levies,
    ),
    SanityRule(
        "estimated_size",
        "info",
        "Floor area was estimated.",
        lambda p, f: p.is_estimated.size,
    ),
    SanityRule(
        "tax_rate_mismatch",
        "info",
        f"Listed property taxes differ from the regional effective tax rate by more than {TAX_MISMATCH_TOLERANCE:.0%}.",
        _tax_rate_mismatch,
    ),
    SanityRule(
        "low_confidence",
        "info",
        "Extraction confidence is low; treat all inputs as provisional.",
        lambda p, f: p.confidence == "low",
    ),
    SanityRule(
        "no_grounding_sources",
        "info",
        "No evidentiary sources were supplied for the extracted data.",
        _no_sources,
    ),
)


def run_sanity_checks(prop: PropertyData, fin: Financials) -> list[SanityCheck]:
    """
    Evaluate the fixed rule table in order and return only triggered checks.

    These do *not* block anything; they flag sketchy inputs and outcomes so
    the caller can highlight them.
    """
    checks = [rule.evaluate(prop, fin) for rule in SANITY_RULES]
    triggered = [c for c in checks if c.triggered]

    if triggered:
        log_event(
            logger,
            "sanity_checks_triggered",
            checks=[c.id for c in triggered],
            critical=sum(1 for c in triggered if c.severity == "critical"),
        )

    return triggered
