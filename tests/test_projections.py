import pytest

from propquant.analysis.finance import calculate_financials
from propquant.analysis.projections import generate_projections
from propquant.domain.assumptions import DEFAULT_CONFIG
from propquant.domain.policy import PROJECTION_YEARS
from samples.listings import strong_listing, with_market


def test_one_row_per_year_from_purchase(listing):
    rows = generate_projections(listing, calculate_financials(listing, DEFAULT_CONFIG))

    assert len(rows) == PROJECTION_YEARS + 1
    assert [r.year for r in rows] == list(range(PROJECTION_YEARS + 1))


def test_year_zero_reconciles_with_down_payment(listing):
    fin = calculate_financials(listing, DEFAULT_CONFIG)
    first = generate_projections(listing, fin)[0]

    assert first.value == pytest.approx(listing.price)
    assert first.equity == pytest.approx(fin.down_payment)
    assert first.equity == pytest.approx(60_000.0)


def test_value_compounds_annually(listing):
    rows = generate_projections(listing, calculate_financials(listing, DEFAULT_CONFIG))

    assert rows[10].value == pytest.approx(300_000.0 * 1.035 ** 10)
    assert rows[1].value == pytest.approx(310_500.0)


def test_equity_grows_with_appreciation_and_paydown(listing):
    rows = generate_projections(listing, calculate_financials(listing, DEFAULT_CONFIG))
    equities = [r.equity for r in rows]

    assert equities == sorted(equities)
    # paydown adds to equity on top of appreciation
    assert rows[5].equity > rows[5].value - 240_000.0


def test_zero_rate_balance_is_straight_line():
    prop = with_market(strong_listing(), annual_appreciation=0.0)
    fin = calculate_financials(prop, DEFAULT_CONFIG.with_rate(0.0))
    rows = generate_projections(prop, fin)

    # 10 of 30 years repaid
    assert rows[10].equity == pytest.approx(300_000.0 - 240_000.0 * 2 / 3)


def test_short_loan_is_fully_repaid_inside_horizon():
    prop = strong_listing()
    fin = calculate_financials(prop, DEFAULT_CONFIG.model_copy(update={"loan_term_years": 5}))
    rows = generate_projections(prop, fin)

    for r in rows[5:]:
        assert r.equity == pytest.approx(r.value)
    assert rows[4].equity < rows[4].value


def test_amortized_not_linear(listing):
    fin = calculate_financials(listing, DEFAULT_CONFIG)
    rows = generate_projections(listing, fin)
    linear_balance = 240_000.0 * (1 - 10 / 30)

    # amortizing debt pays down slower than straight line in early years
    assert rows[10].value - rows[10].equity > linear_balance


def test_no_debt_equity_is_value():
    prop = strong_listing()
    fin = calculate_financials(prop, DEFAULT_CONFIG.model_copy(update={"down_payment_pct": 100.0}))

    for r in generate_projections(prop, fin):
        assert r.equity == pytest.approx(r.value)
