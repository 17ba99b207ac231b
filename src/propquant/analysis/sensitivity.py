from __future__ import annotations

from propquant.analysis.finance import calculate_financials
from propquant.domain.assumptions import AnalysisConfig
from propquant.domain.policy import SENSITIVITY_STEP_PP
from propquant.domain.property import PropertyData
from propquant.domain.underwriting import SensitivityAnalysis


def _scenario_rates(base_rate: float, step: float) -> list[tuple[str, float]]:
    # ordered low, base, high; rates never go negative
    return [
        (f"Rate -{step:.2f}pp", max(base_rate - step, 0.0)),
        ("Base Rate", base_rate),
        (f"Rate +{step:.2f}pp", base_rate + step),
    ]


def generate_sensitivity(
    prop: PropertyData,
    config: AnalysisConfig,
    step: float = SENSITIVITY_STEP_PP,
) -> list[SensitivityAnalysis]:
    """
    Re-run the calculator with only the interest rate substituted, so the base
    row is the calculator's own output rather than a re-derivation.
    """
    rows: list[SensitivityAnalysis] = []
    for label, rate in _scenario_rates(config.interest_rate, step):
        fin = calculate_financials(prop, config.with_rate(rate))
        rows.append(
            SensitivityAnalysis(
                label=label,
                rate=rate,
                monthly_cash_flow=fin.monthly_cash_flow,
                net_yield=fin.net_rental_yield,
            )
        )
    return rows
