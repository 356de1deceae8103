"""Catalogue of calculators built on the formula library.

Each ``CalculatorKind`` maps to exactly one ``Calculator``: its input model,
the function that computes it, and display metadata. ``run_calculator`` is the
single entry point used by the API.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from moneymaster.core.formulas import (
    add_percentage,
    amortized_payment,
    apply_discount,
    break_even_units,
    cagr,
    divide,
    future_value_lump_sum,
    future_value_of_annuity,
    months_to_payoff,
    percentage_of,
    periodic_rate,
    present_value_of_annuity,
    progressive_tax,
    required_contribution,
    roi,
    rule_of_72,
    simple_interest,
    step_up_annuity,
    unit_price,
)
from moneymaster.domain.outcomes import DomainErrorKind, NotComputable, Outcome
from moneymaster.schemas.calculators import (
    AnnuityInput,
    BreakEvenInput,
    BudgetInput,
    CalculatorInput,
    CapRateInput,
    CryptoInput,
    CurrencyInput,
    DebtPayoffInput,
    DiscountInput,
    DividendYieldInput,
    EmergencyInput,
    FireInput,
    FuelInput,
    GoalInput,
    GrowthInput,
    InflationInput,
    LoanEligibilityInput,
    LoanInput,
    LumpSumInput,
    MarginInput,
    MortgageInput,
    NetWorthInput,
    PercentageInput,
    PpfInput,
    RentalYieldInput,
    RetirementInput,
    RoiInput,
    Rule72Input,
    SalaryInput,
    ShoppingListInput,
    SimpleInterestInput,
    StepUpSipInput,
    TaxInput,
    UnitPriceInput,
)
from moneymaster.schemas.results import (
    CalculatorInfo,
    CalculatorResult,
    DomainErrorDetail,
    Unit,
)

logger = logging.getLogger(__name__)

BUDGET_SPLIT = {"needs": 0.50, "wants": 0.30, "savings": 0.20}
FIRE_MULTIPLE = 25
RETIREMENT_INFLATION = 0.06
RETIREMENT_YEARS = 20
MAX_EMI_SHARE_OF_INCOME = 0.50
HOURS_PER_WEEK = 40
WORKING_DAYS_PER_YEAR = 260

TOO_LARGE = NotComputable(DomainErrorKind.INFINITE, "result is too large to represent")


class CalculatorKind(str, Enum):
    # investment
    SIP = "sip"
    STEPUP_SIP = "stepup_sip"
    FD = "fd"
    RD = "rd"
    PPF = "ppf"
    CD = "cd"
    LUMPSUM = "lumpsum"
    CRYPTO = "crypto"
    CAGR = "cagr"
    ROI = "roi"
    RULE72 = "rule72"
    SIMPLE_INTEREST = "simple_interest"
    # planning
    BUDGET = "budget"
    FIRE = "fire"
    RETIREMENT = "retirement"
    EMERGENCY = "emergency"
    GOAL = "goal"
    NETWORTH = "networth"
    SALARY = "salary"
    RENTAL_YIELD = "rental_yield"
    DIVIDEND_YIELD = "dividend_yield"
    CAP_RATE = "cap_rate"
    # loans
    EMI = "emi"
    MORTGAGE = "mortgage"
    LOAN_ELIGIBILITY = "loan_eligibility"
    DEBT_PAYOFF = "debt_payoff"
    # business
    BREAK_EVEN = "break_even"
    MARGIN = "margin"
    # daily
    CURRENCY = "currency"
    FUEL = "fuel"
    SHOPPING = "shopping"
    DISCOUNT = "discount"
    TIP = "tip"
    TAX = "tax"
    GST = "gst"
    VAT = "vat"
    INFLATION = "inflation"
    UNIT_PRICE = "unit_price"


class UnknownCalculatorError(LookupError):
    def __init__(self, kind: str):
        super().__init__(f"unknown calculator: {kind}")
        self.kind = kind


@dataclass
class Computation:
    """Headline outcome plus supporting figures for one calculator run."""

    outcome: Outcome
    details: Dict[str, Outcome] = field(default_factory=dict)
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class Calculator:
    kind: CalculatorKind
    title: str
    description: str
    group: str
    unit: Unit
    input_model: Type[CalculatorInput]
    compute: Callable[[Any], Computation]

    def info(self) -> CalculatorInfo:
        return CalculatorInfo(
            kind=self.kind.value,
            title=self.title,
            description=self.description,
            group=self.group,
            unit=self.unit,
        )


def _minus(left: Outcome, right: Outcome) -> Outcome:
    if isinstance(left, NotComputable):
        return left
    if isinstance(right, NotComputable):
        return right
    return left - right


def _times(value: Outcome, factor: float) -> Outcome:
    if isinstance(value, NotComputable):
        return value
    return value * factor


def _share(part: float, whole: float) -> Outcome:
    if not (math.isfinite(part) and math.isfinite(whole)):
        return TOO_LARGE
    return percentage_of(part, whole)


# --- investment ------------------------------------------------------------


def _annuity_maturity(params: AnnuityInput) -> Computation:
    maturity = future_value_of_annuity(
        params.periodicContribution, params.rate_per_period, params.periods
    )
    invested = params.periodicContribution * params.periods
    return Computation(maturity, {"invested": invested, "gains": _minus(maturity, invested)})


def _step_up_sip(params: StepUpSipInput) -> Computation:
    maturity = step_up_annuity(
        params.monthly, periodic_rate(params.annualRatePercent), params.years, params.stepUpPercent
    )
    raise_factor = 1 + params.stepUpPercent / 100
    invested = sum(params.monthly * 12 * raise_factor**year for year in range(params.years))
    return Computation(maturity, {"invested": invested, "gains": _minus(maturity, invested)})


def _lump_sum_maturity(params: LumpSumInput) -> Computation:
    maturity = future_value_lump_sum(params.principal, params.annualRatePercent / 100, params.years)
    return Computation(maturity, {"principal": params.principal, "interest": _minus(maturity, params.principal)})


def _ppf(params: PpfInput) -> Computation:
    maturity = future_value_of_annuity(
        params.yearlyInvestment, params.annualRatePercent / 100, params.years
    )
    invested = params.yearlyInvestment * params.years
    return Computation(
        maturity,
        {"invested": invested, "gains": _minus(maturity, invested)},
        subtitle=f"Maturity after {params.years} years",
    )


def _crypto(params: CryptoInput) -> Computation:
    cost = params.buyPrice * params.quantity
    revenue = params.sellPrice * params.quantity
    fees = (cost + revenue) * params.feePercent / 100
    profit = revenue - cost - fees
    return Computation(
        profit,
        {"cost": cost, "revenue": revenue, "fees": fees, "roiPercent": _share(profit, cost)},
        subtitle="Profit" if profit >= 0 else "Loss",
    )


def _cagr(params: GrowthInput) -> Computation:
    return Computation(cagr(params.startValue, params.endValue, params.periods))


def _roi(params: RoiInput) -> Computation:
    return Computation(
        roi(params.invested, params.returned),
        {"profit": params.returned - params.invested},
    )


def _rule72(params: Rule72Input) -> Computation:
    return Computation(rule_of_72(params.annualRatePercent), subtitle="At compound interest")


def _simple_interest(params: SimpleInterestInput) -> Computation:
    total = simple_interest(params.principal, params.ratePercent, params.years)
    return Computation(total, {"interest": _minus(total, params.principal)})


# --- planning --------------------------------------------------------------


def _budget(params: BudgetInput) -> Computation:
    return Computation(
        params.monthlyIncome,
        {bucket: params.monthlyIncome * share for bucket, share in BUDGET_SPLIT.items()},
    )


def _fire(params: FireInput) -> Computation:
    return Computation(
        params.annualExpense * FIRE_MULTIPLE,
        subtitle="Corpus for financial independence",
    )


def _retirement(params: RetirementInput) -> Computation:
    years = params.retireAge - params.currentAge
    future_monthly = future_value_lump_sum(params.monthlyExpense, RETIREMENT_INFLATION, years)
    corpus = _times(future_monthly, 12 * RETIREMENT_YEARS)
    return Computation(
        corpus,
        {"yearsToRetirement": float(years), "futureMonthlyExpense": future_monthly},
        subtitle=f"For {RETIREMENT_YEARS} years post-retirement",
    )


def _emergency(params: EmergencyInput) -> Computation:
    return Computation(params.monthlyExpense * params.months, subtitle="Keep in liquid assets")


def _goal(params: GoalInput) -> Computation:
    months = params.years * 12
    monthly = required_contribution(params.targetAmount, periodic_rate(params.annualRatePercent), months)
    return Computation(monthly, {"months": months, "totalInvested": _times(monthly, months)})


def _networth(params: NetWorthInput) -> Computation:
    worth = params.totalAssets - params.totalLiabilities
    return Computation(worth, subtitle="Positive Equity" if worth > 0 else "In Debt")


def _salary(params: SalaryInput) -> Computation:
    per_year = {
        "year": 1,
        "month": 12,
        "week": 52,
        "hour": HOURS_PER_WEEK * 52,
    }
    annual = params.amount * per_year[params.period]
    return Computation(
        annual,
        {
            "yearly": annual,
            "monthly": annual / 12,
            "biWeekly": annual / 26,
            "weekly": annual / 52,
            "daily": annual / WORKING_DAYS_PER_YEAR,
            "hourly": annual / (HOURS_PER_WEEK * 52),
        },
    )


def _rental_yield(params: RentalYieldInput) -> Computation:
    return Computation(
        _share(params.monthlyRent * 12, params.propertyCost),
        subtitle="Gross Annual Yield %",
    )


def _dividend_yield(params: DividendYieldInput) -> Computation:
    return Computation(percentage_of(params.annualDividend, params.sharePrice))


def _cap_rate(params: CapRateInput) -> Computation:
    return Computation(percentage_of(params.netOperatingIncome, params.propertyValue))


# --- loans -----------------------------------------------------------------


def _amortize(principal: float, annual_rate_percent: float, months: int) -> Computation:
    payment = amortized_payment(principal, periodic_rate(annual_rate_percent), months)
    total = _times(payment, months)
    return Computation(
        payment,
        {"months": float(months), "totalPayment": total, "totalInterest": _minus(total, principal)},
    )


def _emi(params: LoanInput) -> Computation:
    return _amortize(params.principal, params.annualRatePercent, params.termMonths)


def _mortgage(params: MortgageInput) -> Computation:
    return _amortize(params.principal, params.annualRatePercent, params.years * 12)


def _loan_eligibility(params: LoanEligibilityInput) -> Computation:
    max_emi = params.monthlyIncome * MAX_EMI_SHARE_OF_INCOME - params.existingEmi
    if max_emi <= 0:
        return Computation(0.0, {"maxAffordableEmi": 0.0}, subtitle="Existing EMIs use up the affordable limit")
    max_loan = present_value_of_annuity(
        max_emi, periodic_rate(params.annualRatePercent), params.tenureYears * 12
    )
    return Computation(max_loan, {"maxAffordableEmi": max_emi})


def _debt_payoff(params: DebtPayoffInput) -> Computation:
    months = months_to_payoff(params.balance, params.annualRatePercent, params.monthlyPayment)
    if isinstance(months, NotComputable):
        return Computation(months, subtitle="Increase Payment!")
    return Computation(months, {"years": months / 12}, subtitle=f"{months / 12:.1f} Years")


# --- business --------------------------------------------------------------


def _break_even(params: BreakEvenInput) -> Computation:
    return Computation(
        break_even_units(params.fixedCost, params.pricePerUnit, params.variableCostPerUnit),
        {"contributionMargin": params.pricePerUnit - params.variableCostPerUnit},
    )


def _margin(params: MarginInput) -> Computation:
    gross_profit = params.revenue - params.cost
    return Computation(percentage_of(gross_profit, params.revenue), {"grossProfit": gross_profit})


# --- daily -----------------------------------------------------------------


def _currency(params: CurrencyInput) -> Computation:
    rates = params.rates or {}
    rate = rates[params.toCurrency] / rates[params.fromCurrency]
    return Computation(
        params.amount * rate,
        {"rate": rate},
        subtitle=f"1 {params.fromCurrency} = {rate:.4f} {params.toCurrency}",
    )


def _fuel(params: FuelInput) -> Computation:
    litres = divide(params.distanceKm, params.mileageKmPerLitre, what="mileage")
    if isinstance(litres, NotComputable):
        return Computation(litres)
    return Computation(
        litres * params.fuelPrice,
        {"litres": litres},
        subtitle=f"Fuel Required: {litres:.1f}L",
    )


def _shopping(params: ShoppingListInput) -> Computation:
    pending = sum(item.price * item.quantity for item in params.items if not item.done)
    purchased = sum(item.price * item.quantity for item in params.items if item.done)
    return Computation(
        pending + purchased,
        {"pending": pending, "purchased": purchased, "items": float(len(params.items))},
    )


def _discount(params: DiscountInput) -> Computation:
    final = apply_discount(params.price, params.percent)
    return Computation(final, {"savings": _minus(params.price, final)})


def _surcharge(label: str) -> Callable[[PercentageInput], Computation]:
    def compute(params: PercentageInput) -> Computation:
        total = add_percentage(params.amount, params.percent)
        return Computation(total, {label: _minus(total, params.amount)})

    return compute


def _tax(params: TaxInput) -> Computation:
    tax = progressive_tax(params.annualIncome)
    net = params.annualIncome - tax
    return Computation(
        tax,
        {
            "effectiveRatePercent": percentage_of(tax, params.annualIncome),
            "netAnnual": net,
            "netMonthly": net / 12,
        },
    )


def _inflation(params: InflationInput) -> Computation:
    return Computation(
        future_value_lump_sum(params.currentCost, params.inflationPercent / 100, params.years),
        subtitle="Effect of purchasing power loss",
    )


def _unit_price(params: UnitPriceInput) -> Computation:
    prices = {offer.label: unit_price(offer.price, offer.quantity) for offer in params.offers}
    comparable = {label: price for label, price in prices.items() if not isinstance(price, NotComputable)}
    if not comparable:
        return Computation(
            NotComputable(DomainErrorKind.DIVISION_BY_ZERO, "every offer has a zero quantity"),
            prices,
        )
    best = min(comparable, key=comparable.__getitem__)
    return Computation(comparable[best], prices, subtitle=f"Best value: {best}")


_CATALOGUE: List[Calculator] = [
    Calculator(CalculatorKind.SIP, "SIP Wealth", "Systematic Investment Plan maturity", "investment", "currency", AnnuityInput, _annuity_maturity),
    Calculator(CalculatorKind.STEPUP_SIP, "Step-Up SIP", "SIP with a yearly contribution raise", "investment", "currency", StepUpSipInput, _step_up_sip),
    Calculator(CalculatorKind.FD, "FD Calc", "Fixed Deposit maturity calculator", "investment", "currency", LumpSumInput, _lump_sum_maturity),
    Calculator(CalculatorKind.RD, "RD Calc", "Recurring Deposit planner", "investment", "currency", AnnuityInput, _annuity_maturity),
    Calculator(CalculatorKind.PPF, "PPF Calc", "Public Provident Fund estimator", "investment", "currency", PpfInput, _ppf),
    Calculator(CalculatorKind.CD, "CD Calc", "Certificate of Deposit returns", "investment", "currency", LumpSumInput, _lump_sum_maturity),
    Calculator(CalculatorKind.LUMPSUM, "Lumpsum", "One-time investment growth", "investment", "currency", LumpSumInput, _lump_sum_maturity),
    Calculator(CalculatorKind.CRYPTO, "Crypto Calc", "Profit/Loss calculator with exchange fees", "investment", "currency", CryptoInput, _crypto),
    Calculator(CalculatorKind.CAGR, "CAGR", "Compound Annual Growth Rate", "investment", "percent", GrowthInput, _cagr),
    Calculator(CalculatorKind.ROI, "ROI", "Return on Investment calculator", "investment", "percent", RoiInput, _roi),
    Calculator(CalculatorKind.RULE72, "Rule of 72", "Years to double your money", "investment", "years", Rule72Input, _rule72),
    Calculator(CalculatorKind.SIMPLE_INTEREST, "Simple Int", "Basic interest calculator", "investment", "currency", SimpleInterestInput, _simple_interest),
    Calculator(CalculatorKind.BUDGET, "Budget 50/30/20", "Smart budget allocation tool", "planning", "currency", BudgetInput, _budget),
    Calculator(CalculatorKind.FIRE, "FIRE Calc", "Financial Independence Retire Early", "planning", "currency", FireInput, _fire),
    Calculator(CalculatorKind.RETIREMENT, "Retirement", "Corpus needed for retirement", "planning", "currency", RetirementInput, _retirement),
    Calculator(CalculatorKind.EMERGENCY, "Emergency Fund", "Safety net calculator", "planning", "currency", EmergencyInput, _emergency),
    Calculator(CalculatorKind.GOAL, "Goal Planner", "Monthly savings for a target", "planning", "currency", GoalInput, _goal),
    Calculator(CalculatorKind.NETWORTH, "Net Worth", "Assets vs Liabilities", "planning", "currency", NetWorthInput, _networth),
    Calculator(CalculatorKind.SALARY, "Salary Breakdown", "Hourly to Yearly converter", "planning", "currency", SalaryInput, _salary),
    Calculator(CalculatorKind.RENTAL_YIELD, "Rental Yield", "Property return calculator", "planning", "percent", RentalYieldInput, _rental_yield),
    Calculator(CalculatorKind.DIVIDEND_YIELD, "Div. Yield", "Stock dividend return", "planning", "percent", DividendYieldInput, _dividend_yield),
    Calculator(CalculatorKind.CAP_RATE, "Cap Rate", "Real estate capitalization rate", "planning", "percent", CapRateInput, _cap_rate),
    Calculator(CalculatorKind.EMI, "EMI Advanced", "Loan EMI with Interest breakdown", "loans", "currency", LoanInput, _emi),
    Calculator(CalculatorKind.MORTGAGE, "Mortgage", "Home loan estimator", "loans", "currency", MortgageInput, _mortgage),
    Calculator(CalculatorKind.LOAN_ELIGIBILITY, "Loan Eligibility", "Max loan amount estimator", "loans", "currency", LoanEligibilityInput, _loan_eligibility),
    Calculator(CalculatorKind.DEBT_PAYOFF, "Debt Payoff", "Time to become debt free", "loans", "months", DebtPayoffInput, _debt_payoff),
    Calculator(CalculatorKind.BREAK_EVEN, "Break Even", "Units to sell to cover costs", "business", "units", BreakEvenInput, _break_even),
    Calculator(CalculatorKind.MARGIN, "Margin", "Gross profit margin", "business", "percent", MarginInput, _margin),
    Calculator(CalculatorKind.CURRENCY, "Currency Conv.", "Multi-currency converter", "daily", "currency", CurrencyInput, _currency),
    Calculator(CalculatorKind.FUEL, "Fuel Trip", "Trip cost estimator", "daily", "currency", FuelInput, _fuel),
    Calculator(CalculatorKind.SHOPPING, "Smart List", "Shopping list with total", "daily", "currency", ShoppingListInput, _shopping),
    Calculator(CalculatorKind.DISCOUNT, "Discount", "Sale price calculator", "daily", "currency", DiscountInput, _discount),
    Calculator(CalculatorKind.TIP, "Tip Calc", "Bill total with tip", "daily", "currency", PercentageInput, _surcharge("tip")),
    Calculator(CalculatorKind.TAX, "Tax Est", "Income tax estimator", "daily", "currency", TaxInput, _tax),
    Calculator(CalculatorKind.GST, "GST Calc", "Goods and Services Tax", "daily", "currency", PercentageInput, _surcharge("tax")),
    Calculator(CalculatorKind.VAT, "VAT Calc", "Value Added Tax", "daily", "currency", PercentageInput, _surcharge("tax")),
    Calculator(CalculatorKind.INFLATION, "Inflation", "Future value of money", "daily", "currency", InflationInput, _inflation),
    Calculator(CalculatorKind.UNIT_PRICE, "Unit Price", "Compare offers by price per unit", "daily", "currency", UnitPriceInput, _unit_price),
]

CALCULATORS: Dict[CalculatorKind, Calculator] = {calc.kind: calc for calc in _CATALOGUE}

_missing = [kind.value for kind in CalculatorKind if kind not in CALCULATORS]
if _missing or len(CALCULATORS) != len(_CATALOGUE):
    raise RuntimeError(f"calculator catalogue is inconsistent; missing: {_missing}")


def get_calculator(kind: CalculatorKind | str) -> Calculator:
    try:
        return CALCULATORS[CalculatorKind(kind)]
    except ValueError:
        raise UnknownCalculatorError(str(kind)) from None


def list_calculators() -> List[CalculatorInfo]:
    return [calc.info() for calc in _CATALOGUE]


def _as_number(outcome: Outcome) -> Optional[float]:
    if isinstance(outcome, NotComputable) or not math.isfinite(outcome):
        return None
    return float(outcome)


def _overflowed(outcome: Outcome) -> bool:
    return not isinstance(outcome, NotComputable) and not math.isfinite(outcome)


def run_calculator(kind: CalculatorKind | str, payload: Mapping[str, Any]) -> CalculatorResult:
    """Validate ``payload`` for ``kind`` and compute it.

    Raises UnknownCalculatorError for an unregistered kind and pydantic's
    ValidationError for bad input. Inputs outside a formula's domain are
    reported through ``CalculatorResult.error``, never raised.
    """
    calculator = get_calculator(kind)
    params = calculator.input_model.model_validate(payload)
    computation = calculator.compute(params)
    outcome = computation.outcome
    if _overflowed(outcome) or any(_overflowed(value) for value in computation.details.values()):
        outcome = TOO_LARGE

    error = None
    if isinstance(outcome, NotComputable):
        error = DomainErrorDetail(kind=outcome.kind, message=outcome.message)
        logger.info("%s not computable: %s", calculator.kind.value, outcome.message)
    else:
        logger.debug("%s computed %s", calculator.kind.value, outcome)

    return CalculatorResult(
        kind=calculator.kind.value,
        title=calculator.title,
        unit=calculator.unit,
        value=_as_number(outcome),
        details={name: _as_number(value) for name, value in computation.details.items()},
        subtitle=computation.subtitle,
        error=error,
    )
