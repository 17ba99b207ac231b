import pytest

from propquant.analysis.finance import calculate_financials, monthly_mortgage_payment
from propquant.domain.assumptions import DEFAULT_CONFIG
from propquant.domain import policy
from propquant.domain.policy import MAINTENANCE_TIERS
from propquant.services.sanity import SANITY_RULES, run_sanity_checks
from samples.listings import bare_config, strong_listing, thin_listing, with_market


def _ids(checks):
    return [c.id for c in checks]


def _dscr_095_listing():
    """
    Bare config: NOI = rent * 12 * 0.96 - taxes. Solve the rent that puts
    NOI at 95% of annual debt service.
    """
    payment = monthly_mortgage_payment(240_000.0, 6.8, 30)
    rent = (0.95 * payment * 12 + 3_300.0) / (12 * 0.96)
    return with_market(strong_listing(), avg_monthly_rental=rent, vacancy_rate=4.0)


def test_clean_listing_triggers_nothing(listing):
    fin = calculate_financials(listing, DEFAULT_CONFIG)

    assert run_sanity_checks(listing, fin) == []


def test_dscr_095_is_critical():
    prop = _dscr_095_listing()
    fin = calculate_financials(prop, bare_config())
    assert fin.dscr == pytest.approx(0.95)

    checks = run_sanity_checks(prop, fin)
    dscr_checks = [c for c in checks if c.id == "dscr_below_one"]

    assert len(dscr_checks) == 1
    assert dscr_checks[0].severity == "critical"
    assert "DSCR" in dscr_checks[0].message
    assert dscr_checks[0].triggered is True


def test_no_debt_does_not_trigger_dscr():
    prop = strong_listing()
    fin = calculate_financials(prop, DEFAULT_CONFIG.model_copy(update={"down_payment_pct": 100.0}))

    assert "dscr_below_one" not in _ids(run_sanity_checks(prop, fin))


def test_thin_deal_is_negative_but_not_deep():
    prop = thin_listing()
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    ids = _ids(run_sanity_checks(prop, fin))

    assert "dscr_below_one" in ids
    assert "negative_cashflow" in ids
    assert "deep_negative_cashflow" not in ids


def test_deep_negative_cash_flow_is_critical():
    prop = with_market(strong_listing(), avg_monthly_rental=900.0)
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    checks = {c.id: c for c in run_sanity_checks(prop, fin)}

    assert checks["deep_negative_cashflow"].severity == "critical"
    assert "negative_cashflow" not in checks


def test_estimated_fields_warn():
    prop = strong_listing(
        isEstimated={"price": True, "levies": True, "taxes": True, "rental": True, "size": True}
    )
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    checks = {c.id: c.severity for c in run_sanity_checks(prop, fin)}

    assert checks["estimated_price"] == "warning"
    assert checks["estimated_taxes"] == "warning"
    assert checks["estimated_rental"] == "warning"
    assert checks["estimated_levies"] == "info"
    assert checks["estimated_size"] == "info"


def test_vacancy_floor_override_warns():
    prop = with_market(strong_listing(), vacancy_rate=2.0)
    fin = calculate_financials(prop, DEFAULT_CONFIG)

    assert "vacancy_floor_applied" in _ids(run_sanity_checks(prop, fin))


def test_poor_condition_maintenance_rules():
    prop = strong_listing(condition="poor")
    deferred = DEFAULT_CONFIG.model_copy(update={"maintenance_pct": MAINTENANCE_TIERS.DEFERRED})

    ids_deferred = _ids(run_sanity_checks(prop, calculate_financials(prop, deferred)))
    ids_average = _ids(run_sanity_checks(prop, calculate_financials(prop, DEFAULT_CONFIG)))

    assert "deferred_maintenance" in ids_deferred
    assert "maintenance_under_provisioned" not in ids_deferred
    assert "maintenance_under_provisioned" in ids_average
    assert "deferred_maintenance" not in ids_average


def test_info_rules_for_provenance():
    prop = strong_listing(confidence="low", groundingSources=None)
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    checks = {c.id: c.severity for c in run_sanity_checks(prop, fin)}

    assert checks["low_confidence"] == "info"
    assert checks["no_grounding_sources"] == "info"


def test_tax_mismatch_is_info():
    prop = strong_listing(propertyTaxesAnnual=9_000.0)
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    checks = {c.id: c.severity for c in run_sanity_checks(prop, fin)}

    assert checks["tax_rate_mismatch"] == "info"


def test_non_positive_price_and_rent_are_critical():
    prop = with_market(strong_listing(price=0.0), avg_monthly_rental=0.0)
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    checks = {c.id: c.severity for c in run_sanity_checks(prop, fin)}

    assert checks["price_non_positive"] == "critical"
    assert checks["rent_non_positive"] == "critical"


def test_missing_optional_fields_are_not_applicable():
    prop = strong_listing(condition=None, yearBuilt=None, structuralSubScores=None, groundingSources=[])
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    ids = _ids(run_sanity_checks(prop, fin))

    assert ids == ["no_grounding_sources"]


def test_checks_follow_rule_table_order():
    prop = strong_listing(
        confidence="low",
        groundingSources=None,
        isEstimated={"price": True, "levies": False, "taxes": False, "rental": True, "size": False},
    )
    prop = with_market(prop, avg_monthly_rental=2_400.0, vacancy_rate=1.0)
    fin = calculate_financials(prop, DEFAULT_CONFIG)
    ids = _ids(run_sanity_checks(prop, fin))

    table_order = [r.id for r in SANITY_RULES]
    assert ids == sorted(ids, key=table_order.index)
    assert ids[0] == "dscr_below_one"


def test_rule_ids_are_unique():
    ids = [r.id for r in SANITY_RULES]
    assert len(ids) == len(set(ids))


def test_messages_quote_the_policy_thresholds():
    messages = {rule.id: rule.message for rule in SANITY_RULES}

    assert f"{policy.DEEP_NEGATIVE_CASHFLOW_RENT_MULTIPLE:.0%}" in messages["deep_negative_cashflow"]
    assert f"{policy.INSTITUTIONAL_FLOORS.VACANCY_MIN:g}%" in messages["vacancy_floor_applied"]
    assert f"{policy.TAX_MISMATCH_TOLERANCE:.0%}" in messages["tax_rate_mismatch"]
    assert "25%" in messages["deep_negative_cashflow"]
