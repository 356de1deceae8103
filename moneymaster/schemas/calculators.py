"""Input contracts for the calculator catalogue.

Field names are camelCase to match the JSON the front-end sends.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from moneymaster.config import DEFAULT_EXCHANGE_RATES

MAX_RATE_PERCENT = 1000.0


class CalculatorInput(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)


# --- compounding -----------------------------------------------------------


class AnnuityInput(CalculatorInput):
    """A fixed contribution paid at the start of every period."""

    periodicContribution: float = Field(ge=0)
    annualRatePercent: float = Field(ge=-100, le=MAX_RATE_PERCENT)
    periods: int = Field(ge=0, le=1200)
    periodUnit: Literal["month", "year"] = "month"

    @property
    def rate_per_period(self) -> float:
        per_year = 12 if self.periodUnit == "month" else 1
        return self.annualRatePercent / 100 / per_year


class StepUpSipInput(CalculatorInput):
    """A monthly SIP whose contribution rises by ``stepUpPercent`` every year."""

    monthly: float = Field(ge=0)
    annualRatePercent: float = Field(ge=-100, le=MAX_RATE_PERCENT)
    years: int = Field(ge=0, le=100)
    stepUpPercent: float = Field(default=10.0, ge=0, le=100)


class LumpSumInput(CalculatorInput):
    principal: float = Field(ge=0)
    annualRatePercent: float = Field(ge=-100, le=MAX_RATE_PERCENT)
    years: float = Field(ge=0, le=100)


class PpfInput(CalculatorInput):
    yearlyInvestment: float = Field(ge=0)
    annualRatePercent: float = Field(default=7.1, ge=0, le=MAX_RATE_PERCENT)
    years: int = Field(default=15, ge=1, le=50)


class GoalInput(CalculatorInput):
    targetAmount: float = Field(ge=0)
    annualRatePercent: float = Field(ge=-100, le=MAX_RATE_PERCENT)
    years: float = Field(ge=0, le=100)


class InflationInput(CalculatorInput):
    currentCost: float = Field(ge=0)
    inflationPercent: float = Field(ge=-100, le=MAX_RATE_PERCENT)
    years: float = Field(ge=0, le=100)


# --- returns ---------------------------------------------------------------


class GrowthInput(CalculatorInput):
    startValue: float
    endValue: float
    periods: float = Field(ge=0)


class RoiInput(CalculatorInput):
    invested: float = Field(ge=0)
    returned: float = Field(ge=0)


class Rule72Input(CalculatorInput):
    annualRatePercent: float = Field(le=MAX_RATE_PERCENT)


class SimpleInterestInput(CalculatorInput):
    principal: float = Field(ge=0)
    ratePercent: float = Field(ge=0, le=MAX_RATE_PERCENT)
    years: float = Field(ge=0)


class CryptoInput(CalculatorInput):
    buyPrice: float = Field(ge=0)
    sellPrice: float = Field(ge=0)
    quantity: float = Field(ge=0)
    feePercent: float = Field(default=0.1, ge=0, le=100)


class RentalYieldInput(CalculatorInput):
    propertyCost: float = Field(ge=0)
    monthlyRent: float = Field(ge=0)


class DividendYieldInput(CalculatorInput):
    sharePrice: float = Field(ge=0)
    annualDividend: float = Field(ge=0)


class CapRateInput(CalculatorInput):
    netOperatingIncome: float
    propertyValue: float = Field(ge=0)


# --- loans -----------------------------------------------------------------


class LoanInput(CalculatorInput):
    principal: float = Field(ge=0)
    annualRatePercent: float = Field(ge=0, le=MAX_RATE_PERCENT)
    termMonths: int = Field(ge=1, le=1200)


class MortgageInput(CalculatorInput):
    principal: float = Field(ge=0)
    annualRatePercent: float = Field(ge=0, le=MAX_RATE_PERCENT)
    years: int = Field(ge=1, le=100)


class LoanEligibilityInput(CalculatorInput):
    monthlyIncome: float = Field(ge=0)
    existingEmi: float = Field(default=0.0, ge=0)
    annualRatePercent: float = Field(ge=0, le=MAX_RATE_PERCENT)
    tenureYears: int = Field(ge=1, le=100)


class DebtPayoffInput(CalculatorInput):
    balance: float = Field(ge=0)
    annualRatePercent: float = Field(ge=0, le=MAX_RATE_PERCENT)
    monthlyPayment: float = Field(ge=0)


# --- planning --------------------------------------------------------------


class BudgetInput(CalculatorInput):
    monthlyIncome: float = Field(ge=0)


class FireInput(CalculatorInput):
    annualExpense: float = Field(ge=0)


class RetirementInput(CalculatorInput):
    monthlyExpense: float = Field(ge=0)
    currentAge: int = Field(ge=0, le=120)
    retireAge: int = Field(ge=0, le=120)

    @model_validator(mode="after")
    def ensure_order(self) -> "RetirementInput":
        if self.retireAge < self.currentAge:
            raise ValueError("retireAge must not be before currentAge")
        return self


class EmergencyInput(CalculatorInput):
    monthlyExpense: float = Field(ge=0)
    months: int = Field(default=6, ge=0, le=120)


class NetWorthInput(CalculatorInput):
    totalAssets: float = Field(ge=0)
    totalLiabilities: float = Field(ge=0)


class SalaryInput(CalculatorInput):
    amount: float = Field(ge=0)
    period: Literal["year", "month", "week", "hour"] = "year"


# --- business --------------------------------------------------------------


class BreakEvenInput(CalculatorInput):
    fixedCost: float = Field(ge=0)
    pricePerUnit: float = Field(ge=0)
    variableCostPerUnit: float = Field(ge=0)


class MarginInput(CalculatorInput):
    cost: float = Field(ge=0)
    revenue: float = Field(ge=0)


# --- everyday --------------------------------------------------------------


class CurrencyInput(CalculatorInput):
    amount: float = Field(ge=0)
    fromCurrency: str
    toCurrency: str
    rates: Optional[Dict[str, float]] = None

    @model_validator(mode="after")
    def ensure_known_currencies(self) -> "CurrencyInput":
        rates = {code.upper(): rate for code, rate in (self.rates or DEFAULT_EXCHANGE_RATES).items()}
        if any(rate <= 0 for rate in rates.values()):
            raise ValueError("exchange rates must be positive")
        self.fromCurrency = self.fromCurrency.upper()
        self.toCurrency = self.toCurrency.upper()
        unknown = [code for code in (self.fromCurrency, self.toCurrency) if code not in rates]
        if unknown:
            raise ValueError(f"unsupported currency: {', '.join(unknown)}")
        self.rates = rates
        return self


class FuelInput(CalculatorInput):
    distanceKm: float = Field(ge=0)
    mileageKmPerLitre: float = Field(ge=0)
    fuelPrice: float = Field(ge=0)


class ShoppingItem(CalculatorInput):
    name: str
    price: float = Field(ge=0)
    quantity: float = Field(default=1, ge=0)
    done: bool = False


class ShoppingListInput(CalculatorInput):
    items: List[ShoppingItem] = Field(default_factory=list)


class PercentageInput(CalculatorInput):
    """A base amount and a percentage added on top (tax, VAT, GST, tip)."""

    amount: float = Field(ge=0)
    percent: float = Field(ge=0)


class DiscountInput(CalculatorInput):
    price: float = Field(ge=0)
    percent: float = Field(ge=0, le=100)


class TaxInput(CalculatorInput):
    annualIncome: float = Field(ge=0)


class UnitOffer(CalculatorInput):
    label: str
    price: float = Field(ge=0)
    quantity: float = Field(ge=0)


class UnitPriceInput(CalculatorInput):
    offers: List[UnitOffer] = Field(min_length=1)
