from propquant.domain.assumptions import AnalysisConfig
from propquant.domain.policy import INSTITUTIONAL_FLOORS, UNBOUNDED
from propquant.domain.property import PropertyData
from propquant.domain.underwriting import ExpenseBreakdown, Financials


def monthly_mortgage_payment(principal: float, annual_rate_pct: float, years: int) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * r / (1 - (1+r)^-n)
    P = loan principal
    r = monthly interest rate (annual percent / 100 / 12)
    n = number of payments (months)
    """
    r = annual_rate_pct / 100.0 / 12.0
    n = years * 12

    if principal <= 0:
        return 0.0
    denom = 1 - (1 + r) ** -n
    if r == 0 or denom == 0:
        return principal / n

    return principal * r / denom


def remaining_balance(principal: float, annual_rate_pct: float, payment: float, months_paid: int) -> float:
    """
    Outstanding principal after `months_paid` scheduled payments.

    B_k = P(1+r)^k - M((1+r)^k - 1)/r, or P - M*k at 0%.
    """
    if principal <= 0 or months_paid <= 0:
        return max(principal, 0.0)

    r = annual_rate_pct / 100.0 / 12.0
    growth = (1 + r) ** months_paid
    if r == 0 or growth == 1:
        balance = principal - payment * months_paid
    else:
        balance = principal * growth - payment * (growth - 1) / r
    # float residue around the final payment
    return max(balance, 0.0)


def effective_vacancy(prop: PropertyData) -> float:
    """Vacancy is never modeled below the institutional floor."""
    return max(prop.inferred_market_data.vacancy_rate, INSTITUTIONAL_FLOORS.VACANCY_MIN)


def _operating_expenses_annual(
    prop: PropertyData,
    effective_income_annual: float,
    config: AnalysisConfig,
) -> ExpenseBreakdown:
    """
    Operating expenses do NOT include mortgage. (Mortgage is financing, not operations.)
    - Taxes (annual, as listed)
    - HOA levies
    - Maintenance provision: % of price
    - Insurance provision: % of price
    - Management fee: % of effective income, zero when self-managed
    """
    price = prop.price
    return ExpenseBreakdown(
        taxes=prop.property_taxes_annual,
        levies=prop.hoa_levies_monthly * 12.0,
        maintenance=price * config.maintenance_pct / 100.0,
        insurance=price * config.insurance_pct / 100.0,
        management=effective_income_annual * config.management_rate / 100.0,
    )


def calculate_financials(prop: PropertyData, config: AnalysisConfig) -> Financials:
    """
    Core underwriting math. Pure and total: implausible inputs (zero price,
    negative rent) produce defined numbers for the sanity checks to flag.
    """

    # --- financing basics ---
    price = prop.price
    down_payment = price * config.down_payment_pct / 100.0
    loan_amount = price - down_payment
    closing_costs = price * INSTITUTIONAL_FLOORS.CLOSING_COSTS_PCT / 100.0
    cash_invested = down_payment + closing_costs

    mortgage_monthly = monthly_mortgage_payment(
        principal=loan_amount,
        annual_rate_pct=config.interest_rate,
        years=config.loan_term_years,
    )
    annual_debt_service = mortgage_monthly * 12.0

    # --- income side ---
    vacancy = effective_vacancy(prop)
    gross_annual = prop.inferred_market_data.avg_monthly_rental * 12.0
    effective_income = gross_annual * (1 - vacancy / 100.0)

    # --- operating expenses ---
    opx = _operating_expenses_annual(prop, effective_income, config)
    total_opx = opx.total

    # --- NOI: after vacancy + operating expenses, BEFORE debt ---
    noi = effective_income - total_opx

    monthly_cash_flow = noi / 12.0 - mortgage_monthly
    annual_cash_flow = monthly_cash_flow * 12.0

    dscr = UNBOUNDED
    if annual_debt_service > 0:
        dscr = min(noi / annual_debt_service, UNBOUNDED)

    gross_yield = 0.0
    cap_rate = 0.0
    if price > 0:
        gross_yield = gross_annual / price * 100.0
        cap_rate = noi / price * 100.0

    cash_on_cash = 0.0
    if cash_invested > 0:
        cash_on_cash = annual_cash_flow / cash_invested * 100.0

    break_even_years = UNBOUNDED
    if annual_cash_flow > 0:
        break_even_years = min(cash_invested / annual_cash_flow, UNBOUNDED)

    return Financials(
        gross_rental_yield=gross_yield,
        net_rental_yield=cap_rate,
        monthly_cash_flow=monthly_cash_flow,
        annual_noi=noi,
        cap_rate=cap_rate,
        cash_on_cash=cash_on_cash,
        break_even_years=break_even_years,
        mortgage_payment_monthly=mortgage_monthly,
        total_annual_expenses=total_opx,
        dscr=dscr,
        effective_vacancy=vacancy,
        gross_annual_rental=gross_annual,
        effective_gross_income=effective_income,
        loan_amount=loan_amount,
        down_payment=down_payment,
        closing_costs=closing_costs,
        cash_invested=cash_invested,
        interest_rate=config.interest_rate,
        loan_term_years=config.loan_term_years,
        maintenance_pct=config.maintenance_pct,
        expenses=opx,
    )
