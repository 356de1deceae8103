"""Dashboard aggregation over a user's transactions."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from moneymaster.schemas.transactions import (
    ChartPoint,
    Transaction,
    TransactionSummary,
    TransactionType,
)


def category_breakdown(transactions: Iterable[Transaction], tx_type: TransactionType) -> List[ChartPoint]:
    """Sum amounts per category for one transaction type, largest first."""
    totals: Dict[str, float] = defaultdict(float)
    for tx in transactions:
        if tx.type == tx_type:
            totals[tx.category] += tx.amount
    return [
        ChartPoint(name=name, value=value)
        for name, value in sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    ]


def savings_rate(income: float, expense: float) -> float:
    if income <= 0:
        return 0.0
    return max(0.0, (income - expense) / income * 100)


def summarize(transactions: List[Transaction]) -> TransactionSummary:
    income = sum(tx.amount for tx in transactions if tx.type == TransactionType.INCOME)
    expense = sum(tx.amount for tx in transactions if tx.type == TransactionType.EXPENSE)
    return TransactionSummary(
        income=income,
        expense=expense,
        balance=income - expense,
        savingsRate=savings_rate(income, expense),
        incomeByCategory=category_breakdown(transactions, TransactionType.INCOME),
        expenseByCategory=category_breakdown(transactions, TransactionType.EXPENSE),
        transactionCount=len(transactions),
    )


def recent(transactions: List[Transaction], limit: int = 5) -> List[Transaction]:
    # sorted() is stable, so same-day entries keep their submitted order
    return sorted(transactions, key=lambda tx: tx.date, reverse=True)[:limit]
