# src/propquant/analysis/scoring.py
from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np

from propquant.domain import policy
from propquant.domain.policy import (
    ASSET_QUALITY_WEIGHTS,
    CONDITION_SCORES,
    DEAL_ECONOMICS_WEIGHTS,
    FINAL_SCORE_WEIGHTS,
    GOOD_THRESHOLD,
    INSTITUTIONAL_FLOORS,
    NEUTRAL_COMPONENT_SCORE,
    band_for,
    regional_cap_rate_baseline,
)
from propquant.domain.property import PropertyData, RiskFactor
from propquant.domain.underwriting import Financials, InstitutionalScores

_DIMENSION_NAMES = {
    "asset_quality": "asset quality",
    "deal_economics": "deal economics",
    "leverage_impact": "leverage impact",
}


def _interp(x: float, anchors: tuple[tuple[float, ...], tuple[float, ...]]) -> float:
    xp, fp = anchors
    return float(np.interp(x, xp, fp))


def _weighted(components: Mapping[str, float], weights: Mapping[str, float]) -> float:
    return sum(components[k] * w for k, w in weights.items())


# =====================================================================
# Sub-scores
# =====================================================================


def _structural_component(prop: PropertyData) -> float:
    subs = prop.structural_sub_scores
    if subs is None:
        return NEUTRAL_COMPONENT_SCORE
    return float(np.mean(list(subs.systems().values())))


def _condition_component(prop: PropertyData) -> float:
    if prop.condition is None:
        return NEUTRAL_COMPONENT_SCORE
    return CONDITION_SCORES[prop.condition]


def _external_risk_component(risks: Sequence[RiskFactor]) -> float:
    if not risks:
        return NEUTRAL_COMPONENT_SCORE
    return float(np.mean([r.score for r in risks]))


def asset_quality_score(prop: PropertyData, risks: Sequence[RiskFactor]) -> float:
    components = {
        "structural": _structural_component(prop),
        "condition": _condition_component(prop),
        "external_risk": _external_risk_component(risks),
    }
    return _weighted(components, ASSET_QUALITY_WEIGHTS)


def deal_economics_score(prop: PropertyData, fin: Financials) -> float:
    """
    Cap rate is judged as a spread over the regional baseline implied by the
    market's appreciation; net yield and cash-on-cash on absolute anchors.
    """
    baseline = regional_cap_rate_baseline(prop.inferred_market_data.annual_appreciation)
    components = {
        "cap_rate": _interp(fin.cap_rate - baseline, policy.CAP_RATE_SPREAD_ANCHORS),
        "net_yield": _interp(fin.net_rental_yield, policy.NET_YIELD_ANCHORS),
        "cash_on_cash": _interp(fin.cash_on_cash, policy.CASH_ON_CASH_ANCHORS),
    }
    return _weighted(components, DEAL_ECONOMICS_WEIGHTS)


def leverage_impact_score(fin: Financials) -> float:
    """
    Monotonic in DSCR. Below 1.0 the score is capped under the "average"
    floor no matter what else looks good.
    """
    dscr = fin.dscr

    if dscr < policy.DSCR_LENDER_MIN:
        score = _interp(dscr, policy.LEVERAGE_BELOW_ONE_ANCHORS)
        return min(score, policy.LEVERAGE_CEILING_BELOW_ONE)

    if dscr < policy.DSCR_STRONG:
        return _interp(dscr, policy.LEVERAGE_THIN_ANCHORS)

    score = _interp(dscr, policy.LEVERAGE_STRONG_ANCHORS)
    if fin.monthly_cash_flow <= 0:
        score = min(score, policy.LEVERAGE_CEILING_NO_CASHFLOW)
    return score


# =====================================================================
# Narrative
# =====================================================================


def _asset_mitigation(prop: PropertyData, risks: Sequence[RiskFactor]) -> str:
    subs = prop.structural_sub_scores
    if subs is not None:
        system, score = min(subs.systems().items(), key=lambda kv: kv[1])
        if score < GOOD_THRESHOLD:
            return f"Commission a specialist inspection of {system} ({score:.0f}/100) before committing capital."
    if prop.condition == "poor":
        return "Budget a capital expenditure reserve for deferred maintenance before closing."
    if risks:
        weakest = min(risks, key=lambda r: r.score)
        return f"Investigate {weakest.label.lower()} risk ({weakest.score:.0f}/100) with local due diligence."
    return "Obtain an independent condition report to establish asset quality."


def _deal_mitigation(prop: PropertyData, fin: Financials) -> str:
    if fin.effective_vacancy > INSTITUTIONAL_FLOORS.VACANCY_DEFAULT:
        return (
            f"Verify rental comps with local agent; modeled vacancy of "
            f"{fin.effective_vacancy:.1f}% erodes effective income."
        )
    baseline = regional_cap_rate_baseline(prop.inferred_market_data.annual_appreciation)
    return (
        f"Negotiate price toward a {baseline:.1f}% cap rate "
        f"(currently {fin.cap_rate:.1f}%)."
    )


def _leverage_mitigation(fin: Financials) -> str:
    if fin.dscr < policy.DSCR_LENDER_MIN:
        return f"Increase down payment or negotiate price: DSCR of {fin.dscr:.2f}x does not cover debt service."
    return f"Increase down payment or negotiate price to lift DSCR from {fin.dscr:.2f}x toward {policy.DSCR_STRONG:.2f}x."


def _explanation(scores: dict[str, int], final: int, fin: Financials) -> str:
    band = band_for(final)
    strongest = max(scores, key=scores.get)
    weakest = min(scores, key=scores.get)
    dscr_txt = "no debt service" if fin.annual_debt_service <= 0 else f"DSCR {fin.dscr:.2f}x"
    return (
        f"Conviction {final}/100 ({band.label}). "
        f"Strongest driver is {_DIMENSION_NAMES[strongest]} at {scores[strongest]}; "
        f"weakest is {_DIMENSION_NAMES[weakest]} at {scores[weakest]}, with {dscr_txt}."
    )


# =====================================================================
# Aggregate
# =====================================================================


def calculate_institutional_scores(
    prop: PropertyData,
    fin: Financials,
    risks: Sequence[RiskFactor],
) -> InstitutionalScores:
    raw = {
        "asset_quality": asset_quality_score(prop, risks),
        "deal_economics": deal_economics_score(prop, fin),
        "leverage_impact": leverage_impact_score(fin),
    }
    final = int(round(_weighted(raw, FINAL_SCORE_WEIGHTS)))
    scores = {k: int(round(v)) for k, v in raw.items()}

    mitigations: list[str] = []
    if scores["asset_quality"] < GOOD_THRESHOLD:
        mitigations.append(_asset_mitigation(prop, risks))
    if scores["deal_economics"] < GOOD_THRESHOLD:
        mitigations.append(_deal_mitigation(prop, fin))
    if scores["leverage_impact"] < GOOD_THRESHOLD:
        mitigations.append(_leverage_mitigation(fin))

    return InstitutionalScores(
        asset_quality_score=scores["asset_quality"],
        deal_economics_score=scores["deal_economics"],
        leverage_impact_score=scores["leverage_impact"],
        final_score=final,
        verdict=band_for(final).verdict,
        score_explanation=_explanation(scores, final, fin),
        mitigation_suggestions=tuple(mitigations),
    )
