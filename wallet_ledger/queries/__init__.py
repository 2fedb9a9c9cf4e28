"""Read-only query package."""

from wallet_ledger.queries.statistics import (
    StatisticsEngine,
    chart_totals,
    daily_statistics,
    day_key,
    sorted_transactions,
    total_balance,
    transactions_on_date,
    wallet_summaries,
)

__all__ = [
    "StatisticsEngine",
    "chart_totals",
    "daily_statistics",
    "day_key",
    "sorted_transactions",
    "total_balance",
    "transactions_on_date",
    "wallet_summaries",
]
