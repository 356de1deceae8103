"""Data contracts for transaction summaries."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

CurrencyCode = Literal["USD", "INR", "EUR", "GBP", "JPY"]


class TransactionType(str, Enum):
    EXPENSE = "EXPENSE"
    INCOME = "INCOME"


class Transaction(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    title: str
    amount: float = Field(..., gt=0)
    type: TransactionType
    category: str = "Others"
    date: dt.date
    notes: Optional[str] = None


class SummaryRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    transactions: List[Transaction] = Field(default_factory=list)
    currency: CurrencyCode = "USD"
    privacyMode: bool = False


class ChartPoint(BaseModel):
    name: str
    value: float


class TransactionSummary(BaseModel):
    """Totals and category breakdowns for the dashboard."""

    income: float
    expense: float
    balance: float
    savingsRate: float = Field(..., ge=0, description="Percent of income kept, floored at 0.")
    incomeByCategory: List[ChartPoint]
    expenseByCategory: List[ChartPoint]
    transactionCount: int


class SummaryResponse(TransactionSummary):
    formatted: Dict[str, str]
    recent: List[Transaction]
