# src/propquant/domain/policy.py
"""
Underwriting policy tables.

Every threshold, weight and band used by the calculator, the sanity checker and
the institutional scorer lives here so it can be audited and tested on its own.
Percent quantities use percent units (4.0 == 4%).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from propquant.domain.property import PropertyData


# Reported instead of infinity: DSCR with no debt, break-even with no positive cash flow.
# Computed DSCR and break-even are capped here too, so 999 reads as "999 or more".
UNBOUNDED = 999.0


@dataclass(frozen=True)
class InstitutionalFloors:
    VACANCY_MIN: float = 4.0
    VACANCY_DEFAULT: float = 5.0
    CLOSING_COSTS_PCT: float = 4.0


INSTITUTIONAL_FLOORS = InstitutionalFloors()


@dataclass(frozen=True)
class MaintenanceTiers:
    NEW_BUILD: float = 0.6   # < 5 years old or "new"
    EXCELLENT: float = 0.8   # well maintained
    AVERAGE: float = 1.0     # standard
    DEFERRED: float = 1.25   # older / poor condition


MAINTENANCE_TIERS = MaintenanceTiers()

NEW_BUILD_MAX_AGE_YEARS = 5


def suggest_maintenance_pct(prop: "PropertyData", as_of_year: int | None = None) -> float:
    """Pick the canonical maintenance tier for an asset from its condition and age."""
    year = as_of_year if as_of_year is not None else date.today().year
    if prop.condition == "new":
        return MAINTENANCE_TIERS.NEW_BUILD
    if prop.year_built is not None and 0 <= year - prop.year_built < NEW_BUILD_MAX_AGE_YEARS:
        return MAINTENANCE_TIERS.NEW_BUILD
    if prop.condition == "good":
        return MAINTENANCE_TIERS.EXCELLENT
    if prop.condition == "poor":
        return MAINTENANCE_TIERS.DEFERRED
    return MAINTENANCE_TIERS.AVERAGE


# ---------------------------------------------------------------------
# Qualitative bands (shared by deal economics, the verdict and display)
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class ScoreBand:
    key: str
    label: str
    min: int
    max: int
    verdict: str


SCORE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand("POOR", "poor", 0, 40, "Pass: capital at risk"),
    ScoreBand("AVERAGE", "average", 41, 60, "Hold: marginal conviction"),
    ScoreBand("GOOD", "good", 61, 75, "Buy: qualified conviction"),
    ScoreBand("STRONG", "strong", 76, 100, "Strong buy: institutional grade"),
)

SCORE_LABELS: Mapping[str, ScoreBand] = {b.key: b for b in SCORE_BANDS}

GOOD_THRESHOLD = SCORE_LABELS["GOOD"].min
AVERAGE_FLOOR = SCORE_LABELS["AVERAGE"].min


def band_for(score: float) -> ScoreBand:
    """Highest band whose minimum does not exceed `score`."""
    chosen = SCORE_BANDS[0]
    for band in SCORE_BANDS:
        if score >= band.min:
            chosen = band
    return chosen


# ---------------------------------------------------------------------
# Institutional scoring weights
# ---------------------------------------------------------------------

ASSET_QUALITY_WEIGHTS: Mapping[str, float] = {
    "structural": 0.40,
    "condition": 0.20,
    "external_risk": 0.40,
}

FINAL_SCORE_WEIGHTS: Mapping[str, float] = {
    "asset_quality": 0.35,
    "deal_economics": 0.35,
    "leverage_impact": 0.30,
}

DEAL_ECONOMICS_WEIGHTS: Mapping[str, float] = {
    "cap_rate": 0.35,
    "net_yield": 0.25,
    "cash_on_cash": 0.40,
}

# Used when an optional input (structural sub-scores, condition, risks) is absent.
NEUTRAL_COMPONENT_SCORE = 50.0

CONDITION_SCORES: Mapping[str, float] = {
    "new": 90.0,
    "good": 75.0,
    "average": 55.0,
    "poor": 25.0,
}

# Piecewise-linear anchors: (x points, score points). Anchor scores sit on the
# band edges so a metric's band can be read straight off its x position.
_BAND_EDGE_SCORES = (0.0, 40.0, 60.0, 75.0, 100.0)

# Cap-rate spread (pp) over the regional baseline.
CAP_RATE_SPREAD_ANCHORS = ((-3.0, -1.0, 0.0, 1.5, 3.0), _BAND_EDGE_SCORES)
# Absolute net yield (%).
NET_YIELD_ANCHORS = ((0.0, 3.0, 5.0, 7.0, 10.0), _BAND_EDGE_SCORES)
# Absolute cash-on-cash (%).
CASH_ON_CASH_ANCHORS = ((-5.0, 0.0, 4.0, 8.0, 12.0), _BAND_EDGE_SCORES)

# Regional cap-rate baseline: markets with stronger appreciation trade at lower caps.
REGIONAL_CAP_RATE_REFERENCE = 6.0
REGIONAL_APPRECIATION_OFFSET = 0.5
REGIONAL_CAP_RATE_BOUNDS = (3.0, 10.0)


def regional_cap_rate_baseline(annual_appreciation: float) -> float:
    lo, hi = REGIONAL_CAP_RATE_BOUNDS
    raw = REGIONAL_CAP_RATE_REFERENCE - REGIONAL_APPRECIATION_OFFSET * annual_appreciation
    return min(max(raw, lo), hi)


# Leverage impact: DSCR segments mapped onto band ranges.
DSCR_LENDER_MIN = 1.0
DSCR_STRONG = 1.25
DSCR_CEILING = 2.0
LEVERAGE_BELOW_ONE_ANCHORS = ((0.0, DSCR_LENDER_MIN), (0.0, 40.0))
LEVERAGE_THIN_ANCHORS = ((DSCR_LENDER_MIN, DSCR_STRONG), (41.0, 75.0))
LEVERAGE_STRONG_ANCHORS = ((DSCR_STRONG, DSCR_CEILING), (76.0, 100.0))
# Hard ceilings, not weighted penalties.
LEVERAGE_CEILING_BELOW_ONE = 40.0
LEVERAGE_CEILING_NO_CASHFLOW = 75.0


# ---------------------------------------------------------------------
# Sanity thresholds
# ---------------------------------------------------------------------

# Critical when the monthly loss exceeds this share of average monthly rent.
DEEP_NEGATIVE_CASHFLOW_RENT_MULTIPLE = 0.25
# Info when reported taxes deviate from price * effective tax rate by more than this share.
TAX_MISMATCH_TOLERANCE = 0.50


# ---------------------------------------------------------------------
# Scenarios and projections
# ---------------------------------------------------------------------

SENSITIVITY_STEP_PP = 1.0
PROJECTION_YEARS = 10
