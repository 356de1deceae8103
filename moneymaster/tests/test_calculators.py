from __future__ import annotations

from math import isclose

import pytest
from pydantic import ValidationError

from moneymaster.core.calculators import (
    CALCULATORS,
    CalculatorKind,
    UnknownCalculatorError,
    list_calculators,
    run_calculator,
)
from moneymaster.core.formulas import amortized_payment, periodic_rate
from moneymaster.domain.outcomes import DomainErrorKind


def test_every_kind_has_exactly_one_calculator():
    assert set(CALCULATORS) == set(CalculatorKind)

    listed = [info.kind for info in list_calculators()]
    assert sorted(listed) == sorted(kind.value for kind in CalculatorKind)
    assert len(listed) == len(set(listed))


def test_unknown_kind_is_rejected():
    with pytest.raises(UnknownCalculatorError):
        run_calculator("lottery", {})


def test_sip_maturity_and_breakdown():
    result = run_calculator(
        "sip",
        {"periodicContribution": 5000, "annualRatePercent": 12, "periods": 120},
    )

    assert result.computable
    assert result.unit == "currency"
    assert isclose(result.value, 1_161_695, rel_tol=1e-5)
    assert result.details["invested"] == 600_000
    assert isclose(result.details["gains"], result.value - 600_000)


def test_rd_with_yearly_periods_uses_annual_rate():
    flat = run_calculator(
        CalculatorKind.RD,
        {"periodicContribution": 12000, "annualRatePercent": 0, "periods": 5, "periodUnit": "year"},
    )
    one_year = run_calculator(
        CalculatorKind.RD,
        {"periodicContribution": 12000, "annualRatePercent": 10, "periods": 1, "periodUnit": "year"},
    )

    assert flat.value == 60_000
    # paid at the start of the year, so it earns the full year's interest
    assert isclose(one_year.value, 13_200)


def test_ppf_defaults_to_fifteen_years():
    result = run_calculator("ppf", {"yearlyInvestment": 100_000})

    assert result.details["invested"] == 1_500_000
    assert result.value > 1_500_000
    assert result.subtitle == "Maturity after 15 years"


@pytest.mark.parametrize("kind", ["fd", "cd", "lumpsum"])
def test_deposit_interest(kind):
    result = run_calculator(kind, {"principal": 10_000, "annualRatePercent": 6.5, "years": 5})

    assert isclose(result.value, 10_000 * 1.065**5)
    assert isclose(result.details["interest"], result.value - 10_000)


def test_emi_breakdown():
    result = run_calculator("emi", {"principal": 500_000, "annualRatePercent": 9.5, "termMonths": 60})

    assert isclose(result.value, 10_501, abs_tol=1.0)
    assert isclose(result.details["totalPayment"], result.value * 60)
    assert isclose(result.details["totalInterest"], result.details["totalPayment"] - 500_000)


def test_interest_free_loan():
    result = run_calculator("emi", {"principal": 120_000, "annualRatePercent": 0, "termMonths": 12})

    assert result.value == 10_000
    assert result.details["totalInterest"] == 0


def test_mortgage_matches_emi_over_months():
    mortgage = run_calculator("mortgage", {"principal": 300_000, "annualRatePercent": 6.5, "years": 30})
    emi = run_calculator("emi", {"principal": 300_000, "annualRatePercent": 6.5, "termMonths": 360})

    assert mortgage.value == emi.value


def test_loan_eligibility_round_trips_through_emi():
    result = run_calculator(
        "loan_eligibility",
        {"monthlyIncome": 50_000, "existingEmi": 5_000, "annualRatePercent": 8.5, "tenureYears": 20},
    )

    assert result.details["maxAffordableEmi"] == 20_000
    emi = amortized_payment(result.value, periodic_rate(8.5), 240)
    assert isclose(emi, 20_000, rel_tol=1e-9)


def test_loan_eligibility_when_existing_emis_use_the_limit():
    result = run_calculator(
        "loan_eligibility",
        {"monthlyIncome": 10_000, "existingEmi": 6_000, "annualRatePercent": 8.5, "tenureYears": 20},
    )

    assert result.value == 0
    assert result.details["maxAffordableEmi"] == 0


def test_cagr_with_zero_start_is_reported_not_raised():
    result = run_calculator("cagr", {"startValue": 0, "endValue": 20_000, "periods": 5})

    assert not result.computable
    assert result.value is None
    assert result.error.kind == DomainErrorKind.UNDEFINED


def test_roi_keeps_profit_detail():
    result = run_calculator("roi", {"invested": 50_000, "returned": 65_000})

    assert isclose(result.value, 30)
    assert result.details["profit"] == 15_000


def test_break_even_without_margin():
    result = run_calculator(
        "break_even", {"fixedCost": 1000, "pricePerUnit": 20, "variableCostPerUnit": 50}
    )

    assert result.value is None
    assert result.error.kind == DomainErrorKind.NO_SOLUTION
    assert result.details["contributionMargin"] == -30


def test_debt_payoff_guidance():
    ok = run_calculator("debt_payoff", {"balance": 5000, "annualRatePercent": 18, "monthlyPayment": 200})
    too_low = run_calculator("debt_payoff", {"balance": 5000, "annualRatePercent": 18, "monthlyPayment": 50})

    assert ok.unit == "months"
    assert isclose(ok.value, 31.57, abs_tol=0.01)
    assert ok.subtitle == "2.6 Years"
    assert too_low.error.kind == DomainErrorKind.PAYMENT_TOO_LOW
    assert too_low.subtitle == "Increase Payment!"


def test_goal_inverts_sip():
    sip = run_calculator("sip", {"periodicContribution": 5000, "annualRatePercent": 12, "periods": 120})
    goal = run_calculator("goal", {"targetAmount": sip.value, "annualRatePercent": 12, "years": 10})

    assert isclose(goal.value, 5000, rel_tol=1e-6)
    assert isclose(goal.details["totalInvested"], 600_000, rel_tol=1e-6)


def test_goal_with_no_time_left():
    goal = run_calculator("goal", {"targetAmount": 100_000, "annualRatePercent": 10, "years": 0})

    assert goal.error.kind == DomainErrorKind.DIVISION_BY_ZERO
    assert goal.details["totalInvested"] is None


def test_budget_split():
    result = run_calculator("budget", {"monthlyIncome": 5000})

    assert isclose(result.details["needs"], 2500)
    assert isclose(result.details["wants"], 1500)
    assert isclose(result.details["savings"], 1000)


def test_retirement_corpus():
    result = run_calculator("retirement", {"monthlyExpense": 3000, "currentAge": 30, "retireAge": 60})

    assert result.details["yearsToRetirement"] == 30
    assert isclose(result.details["futureMonthlyExpense"], 3000 * 1.06**30)
    assert isclose(result.value, 3000 * 1.06**30 * 12 * 20)


def test_retirement_age_order_is_validated():
    with pytest.raises(ValidationError):
        run_calculator("retirement", {"monthlyExpense": 3000, "currentAge": 60, "retireAge": 30})


def test_salary_from_hourly_rate():
    result = run_calculator("salary", {"amount": 25, "period": "hour"})

    assert result.value == 52_000
    assert isclose(result.details["monthly"], 52_000 / 12)
    assert result.details["hourly"] == 25


def test_currency_conversion_uses_default_rates():
    result = run_calculator("currency", {"amount": 2, "fromCurrency": "usd", "toCurrency": "INR"})

    assert result.value == 167
    assert result.details["rate"] == 83.5
    assert result.subtitle == "1 USD = 83.5000 INR"


def test_currency_conversion_with_custom_rates():
    result = run_calculator(
        "currency",
        {"amount": 10, "fromCurrency": "EUR", "toCurrency": "USD", "rates": {"USD": 1, "EUR": 0.5}},
    )

    assert result.value == 20


def test_unsupported_currency():
    with pytest.raises(ValidationError):
        run_calculator("currency", {"amount": 10, "fromCurrency": "USD", "toCurrency": "XYZ"})


def test_crypto_profit_after_fees():
    result = run_calculator(
        "crypto", {"buyPrice": 50_000, "sellPrice": 55_000, "quantity": 0.5, "feePercent": 0.1}
    )

    assert isclose(result.details["fees"], 52.5)
    assert isclose(result.value, 2447.5)
    assert isclose(result.details["roiPercent"], 2447.5 / 25_000 * 100)
    assert result.subtitle == "Profit"


def test_crypto_without_quantity_has_no_roi():
    result = run_calculator("crypto", {"buyPrice": 50_000, "sellPrice": 55_000, "quantity": 0})

    assert result.value == 0
    assert result.details["roiPercent"] is None


def test_fuel_requires_mileage():
    ok = run_calculator("fuel", {"distanceKm": 300, "mileageKmPerLitre": 15, "fuelPrice": 100})
    broken = run_calculator("fuel", {"distanceKm": 300, "mileageKmPerLitre": 0, "fuelPrice": 100})

    assert isclose(ok.value, 2000)
    assert ok.subtitle == "Fuel Required: 20.0L"
    assert broken.error.kind == DomainErrorKind.DIVISION_BY_ZERO


def test_shopping_list_totals():
    result = run_calculator(
        "shopping",
        {
            "items": [
                {"name": "Milk", "price": 2.5, "quantity": 2},
                {"name": "Bread", "price": 3, "done": True},
            ]
        },
    )

    assert result.value == 8
    assert result.details == {"pending": 5, "purchased": 3, "items": 2}


@pytest.mark.parametrize(
    "kind,detail",
    [("tip", "tip"), ("gst", "tax"), ("vat", "tax")],
)
def test_surcharges(kind, detail):
    result = run_calculator(kind, {"amount": 200, "percent": 15})

    assert isclose(result.value, 230)
    assert isclose(result.details[detail], 30)


def test_discount():
    result = run_calculator("discount", {"price": 500, "percent": 20})

    assert isclose(result.value, 400)
    assert isclose(result.details["savings"], 100)


def test_tax_estimate():
    result = run_calculator("tax", {"annualIncome": 60_000})

    assert isclose(result.value, 7000)
    assert isclose(result.details["netMonthly"], 53_000 / 12)
    assert isclose(result.details["effectiveRatePercent"], 7000 / 60_000 * 100)


def test_tax_on_no_income():
    result = run_calculator("tax", {"annualIncome": 0})

    assert result.value == 0
    assert result.details["effectiveRatePercent"] is None


def test_unit_price_picks_cheapest_offer():
    result = run_calculator(
        "unit_price",
        {
            "offers": [
                {"label": "small", "price": 100, "quantity": 2},
                {"label": "large", "price": 90, "quantity": 2},
                {"label": "empty", "price": 10, "quantity": 0},
            ]
        },
    )

    assert result.value == 45
    assert result.subtitle == "Best value: large"
    assert result.details == {"small": 50, "large": 45, "empty": None}


def test_unit_price_without_any_quantity():
    result = run_calculator("unit_price", {"offers": [{"label": "a", "price": 10, "quantity": 0}]})

    assert result.error.kind == DomainErrorKind.DIVISION_BY_ZERO


@pytest.mark.parametrize(
    "kind,payload,expected",
    [
        ("rental_yield", {"propertyCost": 200_000, "monthlyRent": 1500}, 9.0),
        ("dividend_yield", {"sharePrice": 100, "annualDividend": 5}, 5.0),
        ("cap_rate", {"netOperatingIncome": 30_000, "propertyValue": 500_000}, 6.0),
        ("margin", {"cost": 50, "revenue": 100}, 50.0),
        ("rule72", {"annualRatePercent": 12}, 6.0),
        ("simple_interest", {"principal": 10_000, "ratePercent": 5, "years": 2}, 11_000.0),
        ("fire", {"annualExpense": 40_000}, 1_000_000.0),
        ("emergency", {"monthlyExpense": 3000, "months": 6}, 18_000.0),
        ("networth", {"totalAssets": 500_000, "totalLiabilities": 200_000}, 300_000.0),
        ("inflation", {"currentCost": 1000, "inflationPercent": 0, "years": 10}, 1000.0),
    ],
)
def test_single_figure_calculators(kind, payload, expected):
    result = run_calculator(kind, payload)

    assert result.computable
    assert isclose(result.value, expected)


@pytest.mark.parametrize(
    "kind,payload",
    [
        ("rental_yield", {"propertyCost": 0, "monthlyRent": 1500}),
        ("dividend_yield", {"sharePrice": 0, "annualDividend": 5}),
        ("cap_rate", {"netOperatingIncome": 30_000, "propertyValue": 0}),
        ("margin", {"cost": 50, "revenue": 0}),
        ("roi", {"invested": 0, "returned": 10}),
    ],
)
def test_zero_bases_are_not_computable(kind, payload):
    result = run_calculator(kind, payload)

    assert result.value is None
    assert result.error.kind == DomainErrorKind.DIVISION_BY_ZERO


def test_networth_subtitle():
    assert run_calculator("networth", {"totalAssets": 1, "totalLiabilities": 2}).subtitle == "In Debt"


@pytest.mark.parametrize(
    "payload",
    [
        {"principal": -1, "annualRatePercent": 9.5, "termMonths": 60},
        {"principal": 1000, "annualRatePercent": 9.5, "termMonths": 0},
        {"principal": float("nan"), "annualRatePercent": 9.5, "termMonths": 60},
        {"principal": 1000, "annualRatePercent": 9.5, "termMonths": 60, "extra": True},
        {"principal": 1000},
    ],
)
def test_bad_loan_inputs_are_rejected(payload):
    with pytest.raises(ValidationError):
        run_calculator("emi", payload)


def test_step_up_sip_breakdown():
    result = run_calculator(
        CalculatorKind.STEPUP_SIP,
        {"monthly": 1000, "annualRatePercent": 12, "years": 2, "stepUpPercent": 10},
    )

    assert result.computable
    assert isclose(result.value, 28_524.13, abs_tol=0.05)
    assert isclose(result.details["invested"], 12_000 + 13_200)
    assert isclose(result.details["gains"], result.value - 25_200)


def test_step_up_sip_without_raise_matches_sip():
    step_up = run_calculator("stepup_sip", {"monthly": 5000, "annualRatePercent": 12, "years": 10, "stepUpPercent": 0})
    sip = run_calculator("sip", {"periodicContribution": 5000, "annualRatePercent": 12, "periods": 120})

    assert isclose(step_up.value, sip.value, rel_tol=1e-9)
    assert step_up.details["invested"] == sip.details["invested"]


@pytest.mark.parametrize(
    "kind,payload",
    [
        ("fire", {"annualExpense": 1e308}),
        ("salary", {"amount": 1e308, "period": "hour"}),
        ("crypto", {"buyPrice": 1e308, "sellPrice": 1e308, "quantity": 10}),
        ("rental_yield", {"propertyCost": 1, "monthlyRent": 1e308}),
        ("shopping", {"items": [{"name": "yacht", "price": 1e308, "quantity": 2}]}),
        ("currency", {"amount": 1e308, "fromCurrency": "USD", "toCurrency": "JPY"}),
    ],
)
def test_overflowing_figures_are_reported(kind, payload):
    result = run_calculator(kind, payload)

    assert not result.computable
    assert result.value is None
    assert result.error.kind == DomainErrorKind.INFINITE
    assert all(value is None or abs(value) < float("inf") for value in result.details.values())


@pytest.mark.parametrize("kind", ["sip", "rd"])
def test_rates_above_the_ceiling_are_rejected(kind):
    with pytest.raises(ValidationError):
        run_calculator(kind, {"periodicContribution": 5000, "annualRatePercent": 1200, "periods": 1200})
