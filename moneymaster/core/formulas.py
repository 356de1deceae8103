"""Closed-form financial formulas used by the calculator catalogue.

Every function here is pure. Inputs outside a formula's domain produce a
``NotComputable`` value instead of NaN or infinity. Non-finite inputs and
negative period counts raise ``InputValidationError`` before any arithmetic.
Results too large for a float come back as ``NotComputable`` of kind
``infinite``.

Rates are fractions per period (0.01 for 1% per month) unless the parameter
name ends in ``_percent``.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

from moneymaster.domain.outcomes import (
    DomainErrorKind,
    InputValidationError,
    NotComputable,
    Outcome,
)

# (lower bound, upper bound or None, marginal rate)
TAX_SLABS: List[Tuple[float, Optional[float], float]] = [
    (10_000.0, 40_000.0, 0.10),
    (40_000.0, None, 0.20),
]


def _validate(values: Dict[str, float], counts: Tuple[str, ...] = ()) -> None:
    errors: List[str] = []
    for name, value in values.items():
        if not math.isfinite(value):
            errors.append(f"{name} must be a finite number")
        elif name in counts and value < 0:
            errors.append(f"{name} must not be negative")
    if errors:
        raise InputValidationError(errors)


def _undefined_rate(rate: float) -> NotComputable:
    return NotComputable(
        DomainErrorKind.UNDEFINED,
        f"a rate of {rate * 100:g}% per period wipes out more than the whole balance",
    )


def _too_large() -> NotComputable:
    return NotComputable(DomainErrorKind.INFINITE, "result is too large to represent")


def _finite(value: float) -> Outcome:
    if not math.isfinite(value):
        return _too_large()
    return value


def _growth_minus_one(rate: float, periods: float) -> Outcome:
    """(1 + rate)^periods - 1, accurate for rates close to zero.

    ``rate`` must be at least -1.
    """
    if rate == -1:
        return -1.0 if periods > 0 else 0.0
    try:
        return _finite(math.expm1(periods * math.log1p(rate)))
    except OverflowError:
        return _too_large()


def periodic_rate(annual_rate_percent: float, periods_per_year: int = 12) -> float:
    """Convert an annual percentage into a fractional rate per period."""
    return annual_rate_percent / 100 / periods_per_year


def divide(numerator: float, denominator: float, what: str = "denominator") -> Outcome:
    _validate({"numerator": numerator, "denominator": denominator})
    if denominator == 0:
        return NotComputable(DomainErrorKind.DIVISION_BY_ZERO, f"{what} must not be zero")
    return _finite(numerator / denominator)


def future_value_of_annuity(contribution: float, rate_per_period: float, periods: float) -> Outcome:
    """Future value of a contribution paid at the START of each period.

    FV = c * ((1 + r)^n - 1) / r * (1 + r)

    The trailing (1 + r) factor is the annuity-due convention; SIP, RD, PPF and
    goal planning all rely on it.
    """
    _validate(
        {"contribution": contribution, "rate_per_period": rate_per_period, "periods": periods},
        counts=("periods",),
    )
    if periods == 0:
        return 0.0
    if rate_per_period == 0:
        return _finite(contribution * periods)
    if rate_per_period < -1:
        return _undefined_rate(rate_per_period)

    growth = _growth_minus_one(rate_per_period, periods)
    if isinstance(growth, NotComputable):
        return growth
    return _finite(contribution * growth / rate_per_period * (1 + rate_per_period))


def required_contribution(target: float, rate_per_period: float, periods: float) -> Outcome:
    """Contribution per period needed to reach ``target``; inverse of the annuity-due FV."""
    _validate(
        {"target": target, "rate_per_period": rate_per_period, "periods": periods},
        counts=("periods",),
    )
    if periods == 0:
        return NotComputable(DomainErrorKind.DIVISION_BY_ZERO, "at least one period is required")
    if rate_per_period == 0:
        return target / periods
    if rate_per_period < -1:
        return _undefined_rate(rate_per_period)

    growth = _growth_minus_one(rate_per_period, periods)
    if isinstance(growth, NotComputable):
        # an unbounded growth factor needs no measurable contribution
        return 0.0
    factor = growth / rate_per_period * (1 + rate_per_period)
    if factor == 0:
        return NotComputable(DomainErrorKind.NO_SOLUTION, "contributions never accumulate at this rate")
    return _finite(target / factor)


def step_up_annuity(
    contribution: float,
    rate_per_period: float,
    years: int,
    step_up_percent: float,
    periods_per_year: int = 12,
) -> Outcome:
    """Annuity-due future value where the contribution rises by ``step_up_percent`` each year.

    Each year's deposits compound for the rest of the term; the raise applies
    from the first period of the following year.
    """
    _validate(
        {
            "contribution": contribution,
            "rate_per_period": rate_per_period,
            "years": years,
            "step_up_percent": step_up_percent,
        },
        counts=("years",),
    )
    if rate_per_period < -1:
        return _undefined_rate(rate_per_period)
    year_growth = _growth_minus_one(rate_per_period, periods_per_year)
    if isinstance(year_growth, NotComputable):
        return year_growth

    corpus = 0.0
    yearly = contribution
    for _ in range(int(years)):
        if not (math.isfinite(yearly) and math.isfinite(corpus)):
            return _too_large()
        deposits = future_value_of_annuity(yearly, rate_per_period, periods_per_year)
        if isinstance(deposits, NotComputable):
            return deposits
        corpus = corpus * (1 + year_growth) + deposits
        yearly *= 1 + step_up_percent / 100
    return _finite(corpus)


def future_value_lump_sum(principal: float, rate: float, periods: float) -> Outcome:
    _validate({"principal": principal, "rate": rate, "periods": periods}, counts=("periods",))
    if rate < -1:
        return _undefined_rate(rate)
    growth = _growth_minus_one(rate, periods)
    if isinstance(growth, NotComputable):
        return growth
    return _finite(principal * (1 + growth))


def present_value_of_annuity(payment: float, rate_per_period: float, periods: float) -> Outcome:
    """Present value of an ordinary annuity (payments at the END of each period).

    PV = pmt * (1 - (1 + r)^-n) / r
    """
    _validate(
        {"payment": payment, "rate_per_period": rate_per_period, "periods": periods},
        counts=("periods",),
    )
    if periods == 0:
        return 0.0
    if rate_per_period == 0:
        return _finite(payment * periods)
    if rate_per_period <= -1:
        return _undefined_rate(rate_per_period)

    discount = _growth_minus_one(rate_per_period, -periods)
    if isinstance(discount, NotComputable):
        return discount
    return _finite(-payment * discount / rate_per_period)


def amortized_payment(principal: float, rate_per_period: float, periods: float) -> Outcome:
    """Level payment that fully amortizes ``principal`` over ``periods`` (EMI).

    pmt = p * r / (1 - (1 + r)^-n)
    """
    _validate(
        {"principal": principal, "rate_per_period": rate_per_period, "periods": periods},
        counts=("periods",),
    )
    if periods == 0:
        return NotComputable(DomainErrorKind.DIVISION_BY_ZERO, "loan term must be at least one period")
    if rate_per_period <= -1:
        return _undefined_rate(rate_per_period)

    discount = 0.0 if rate_per_period == 0 else _growth_minus_one(rate_per_period, -periods)
    if isinstance(discount, NotComputable):
        return discount
    if discount == 0:
        return principal / periods
    return _finite(-principal * rate_per_period / discount)


def cagr(start_value: float, end_value: float, periods: float) -> Outcome:
    """Compound annual growth rate, as a percentage."""
    _validate(
        {"start_value": start_value, "end_value": end_value, "periods": periods},
        counts=("periods",),
    )
    if periods == 0:
        return NotComputable(DomainErrorKind.DIVISION_BY_ZERO, "growth needs at least one period")
    if start_value <= 0 or end_value < 0:
        return NotComputable(
            DomainErrorKind.UNDEFINED,
            "growth rate is only defined for a positive start value and a non-negative end value",
        )
    ratio = end_value / start_value
    if not math.isfinite(ratio):
        return _too_large()
    try:
        return _finite((ratio ** (1 / periods) - 1) * 100)
    except OverflowError:
        return _too_large()


def roi(invested: float, returned: float) -> Outcome:
    _validate({"invested": invested, "returned": returned})
    if invested == 0:
        return NotComputable(DomainErrorKind.DIVISION_BY_ZERO, "invested amount must not be zero")
    return _finite((returned - invested) / invested * 100)


def rule_of_72(annual_rate_percent: float) -> Outcome:
    """Approximate number of periods needed to double money at a compound rate."""
    _validate({"annual_rate_percent": annual_rate_percent})
    if annual_rate_percent == 0:
        return NotComputable(DomainErrorKind.INFINITE, "money never doubles at a 0% rate")
    if annual_rate_percent < 0:
        return NotComputable(DomainErrorKind.NO_SOLUTION, "money never doubles at a negative rate")
    return _finite(72 / annual_rate_percent)


def break_even_units(fixed_cost: float, price_per_unit: float, variable_cost_per_unit: float) -> Outcome:
    _validate(
        {
            "fixed_cost": fixed_cost,
            "price_per_unit": price_per_unit,
            "variable_cost_per_unit": variable_cost_per_unit,
        }
    )
    margin = price_per_unit - variable_cost_per_unit
    if margin <= 0:
        return NotComputable(
            DomainErrorKind.NO_SOLUTION,
            "price per unit must exceed variable cost per unit to ever break even",
        )
    return _finite(fixed_cost / margin)


def months_to_payoff(balance: float, annual_rate_percent: float, monthly_payment: float) -> Outcome:
    """Months until ``balance`` is repaid: n = -ln(1 - r*B/P) / ln(1 + r), r = rate/1200."""
    _validate(
        {
            "balance": balance,
            "annual_rate_percent": annual_rate_percent,
            "monthly_payment": monthly_payment,
        }
    )
    if balance <= 0:
        return 0.0
    if monthly_payment <= 0:
        return NotComputable(DomainErrorKind.PAYMENT_TOO_LOW, "monthly payment must be positive")

    rate = periodic_rate(annual_rate_percent)
    if rate == 0:
        return _finite(balance / monthly_payment)
    if rate <= -1:
        return _undefined_rate(rate)
    interest = balance * rate
    if monthly_payment <= interest:
        return NotComputable(
            DomainErrorKind.PAYMENT_TOO_LOW,
            f"payment must exceed the monthly interest of {interest:.2f}",
        )
    return _finite(-math.log1p(-interest / monthly_payment) / math.log1p(rate))


def simple_interest(principal: float, rate_percent: float, years: float) -> Outcome:
    """Total amount (principal plus interest) under simple interest."""
    _validate({"principal": principal, "rate_percent": rate_percent, "years": years}, counts=("years",))
    return _finite(principal + principal * rate_percent * years / 100)


def add_percentage(amount: float, percent: float) -> Outcome:
    _validate({"amount": amount, "percent": percent})
    return _finite(amount * (1 + percent / 100))


def apply_discount(price: float, percent: float) -> Outcome:
    _validate({"price": price, "percent": percent})
    return _finite(price * (1 - percent / 100))


def percentage_of(part: float, whole: float) -> Outcome:
    result = divide(part, whole, what="base amount")
    if isinstance(result, NotComputable):
        return result
    return _finite(result * 100)


def unit_price(price: float, quantity: float) -> Outcome:
    return divide(price, quantity, what="quantity")


def progressive_tax(annual_income: float) -> float:
    _validate({"annual_income": annual_income})
    tax = 0.0
    for lower, upper, marginal in TAX_SLABS:
        if annual_income <= lower:
            continue
        top = annual_income if upper is None else min(annual_income, upper)
        tax += (top - lower) * marginal
    return tax
