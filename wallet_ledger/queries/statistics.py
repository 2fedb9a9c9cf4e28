"""
Statistics Engine

DESIGN DECISION: Every query here is a PURE function of its arguments.
Nothing is cached, nothing is persisted and nothing is logged, so calling
a query twice without a mutation in between always gives the same answer.

All day filtering compares day keys (calendar dates), never full
timestamps. The selected day is owned by the caller.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Union

from wallet_ledger.ledger.store import LedgerStore
from wallet_ledger.models.ledger import (
    ChartTotals,
    DailyStatistics,
    Transaction,
    TransactionType,
    Wallet,
    WalletSummary,
)

DayInput = Union[datetime, date, str]


def day_key(value: DayInput) -> date:
    """
    Normalize a timestamp to its calendar date.

    Accepts datetimes, dates and ISO strings. Aware datetimes are
    converted to local time first.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()

    return value


def total_balance(source: Union[LedgerStore, Iterable[Wallet]]) -> Decimal:
    """Sum of balances across all wallets."""
    wallets = source.wallets if isinstance(source, LedgerStore) else source
    return sum((wallet.balance for wallet in wallets), Decimal("0"))


def sorted_transactions(wallet: Wallet) -> list[Transaction]:
    """
    All of a wallet's transactions, most recent first.

    Ties keep insertion order.
    """
    return sorted(wallet.transactions, key=lambda t: t.date, reverse=True)


def transactions_on_date(wallet: Wallet, on_date: DayInput) -> list[Transaction]:
    """Transactions whose day key is on_date, most recent first."""
    key = day_key(on_date)
    return [t for t in sorted_transactions(wallet) if day_key(t.date) == key]


def _income_and_expense(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    income = Decimal("0")
    expense = Decimal("0")
    for transaction in transactions:
        if transaction.amount > 0:
            income += transaction.amount
        elif transaction.amount < 0:
            expense += -transaction.amount
    return income, expense


def daily_statistics(wallet: Wallet, on_date: DayInput) -> DailyStatistics:
    """
    Income and expense of one wallet on one day.

    Adjustments count by sign. The balance is the wallet's live balance,
    not the balance at the end of that day.
    """
    key = day_key(on_date)
    income, expense = _income_and_expense(
        t for t in wallet.transactions if day_key(t.date) == key
    )
    return DailyStatistics(
        day=key,
        income=income,
        expense=expense,
        balance=wallet.balance,
    )


def chart_totals(wallet: Wallet, on_date: Union[DayInput, None] = None) -> ChartTotals:
    """
    Income/expense totals for the doughnut chart.

    With a day, these are that day's totals. Without one, they cover the
    whole history, classifying by type first and sign second.
    """
    if on_date is not None:
        stats = daily_statistics(wallet, on_date)
        return ChartTotals(income=stats.income, expense=stats.expense)

    income = Decimal("0")
    expense = Decimal("0")
    for transaction in wallet.transactions:
        if transaction.type == TransactionType.INCOME or transaction.amount > 0:
            income += abs(transaction.amount)
        elif transaction.type == TransactionType.EXPENSE or transaction.amount < 0:
            expense += abs(transaction.amount)
    return ChartTotals(income=income, expense=expense)


def wallet_summaries(store: LedgerStore) -> list[WalletSummary]:
    """Wallet list rows in store order, flagging the active wallet."""
    return [
        WalletSummary(
            id=wallet.id,
            name=wallet.name,
            balance=wallet.balance,
            currency=wallet.currency,
            is_active=wallet.id == store.active_wallet_id,
        )
        for wallet in store.wallets
    ]


class StatisticsEngine:
    """
    Read-only queries over a ledger.

    Thin object wrapper around the module functions, for callers that
    inject their collaborators.
    """

    day_key = staticmethod(day_key)
    total_balance = staticmethod(total_balance)
    sorted_transactions = staticmethod(sorted_transactions)
    transactions_on_date = staticmethod(transactions_on_date)
    daily_statistics = staticmethod(daily_statistics)
    chart_totals = staticmethod(chart_totals)
    wallet_summaries = staticmethod(wallet_summaries)
