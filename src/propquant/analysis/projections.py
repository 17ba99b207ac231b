from __future__ import annotations

import numpy as np

from propquant.analysis.finance import remaining_balance
from propquant.domain.policy import PROJECTION_YEARS
from propquant.domain.property import PropertyData
from propquant.domain.underwriting import Financials, Projection


def project_values(price: float, annual_appreciation_pct: float, years: int) -> np.ndarray:
    """Value at the end of each year 0..years, compounding annually from price."""
    t = np.arange(years + 1, dtype=float)
    return price * np.power(1.0 + annual_appreciation_pct / 100.0, t)


def project_balances(fin: Financials, years: int) -> np.ndarray:
    """Scheduled loan balance at the end of each year 0..years (zero once repaid)."""
    term_months = fin.loan_term_years * 12
    return np.array(
        [
            remaining_balance(
                principal=fin.loan_amount,
                annual_rate_pct=fin.interest_rate,
                payment=fin.mortgage_payment_monthly,
                months_paid=y * 12,
            )
            if y * 12 < term_months
            else 0.0
            for y in range(years + 1)
        ],
        dtype=float,
    )


def generate_projections(
    prop: PropertyData,
    fin: Financials,
    years: int = PROJECTION_YEARS,
) -> list[Projection]:
    """
    Year 0 is the purchase: value is the price and equity is the down payment.
    Later years compound appreciation and advance the amortization schedule
    with the same loan terms the calculator used.
    """
    values = project_values(prop.price, prop.inferred_market_data.annual_appreciation, years)
    balances = project_balances(fin, years)
    equity = values - balances

    return [
        Projection(year=int(y), value=float(values[y]), equity=float(equity[y]))
        for y in range(years + 1)
    ]
