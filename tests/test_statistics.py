"""
Tests for the read-only statistics queries.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from wallet_ledger.models.ledger import Transaction, TransactionType, Wallet
from wallet_ledger.queries import (
    StatisticsEngine,
    chart_totals,
    daily_statistics,
    day_key,
    sorted_transactions,
    total_balance,
    transactions_on_date,
    wallet_summaries,
)


def make_wallet(*entries) -> Wallet:
    """Build a consistent wallet from (type, amount, date) tuples."""
    transactions = [
        Transaction(type=kind, amount=Decimal(str(amount)), date=when, name=f"tx{i}")
        for i, (kind, amount, when) in enumerate(entries)
    ]
    return Wallet(
        name="Test",
        balance=sum((t.amount for t in transactions), Decimal("0")),
        transactions=transactions,
    )


@pytest.fixture
def two_day_wallet():
    return make_wallet(
        (TransactionType.INCOME, 50000, datetime(2024, 1, 1, 9, 30)),
        (TransactionType.EXPENSE, -20000, datetime(2024, 1, 2, 12, 0)),
    )


class TestDayKey:
    """Tests for day_key normalization."""

    def test_datetime(self):
        """Test that the time part is dropped."""
        assert day_key(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)

    def test_date(self):
        """Test that dates pass through."""
        assert day_key(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_iso_strings(self):
        """Test bare dates and naive timestamps as strings."""
        assert day_key("2024-01-01") == date(2024, 1, 1)
        assert day_key(" 2024-01-01T08:15:00 ") == date(2024, 1, 1)

    def test_utc_string_uses_local_day(self):
        """Test that 'Z' timestamps are read as UTC and moved to local time."""
        expected = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc).astimezone().date()
        assert day_key("2024-06-15T12:00:00Z") == expected


class TestDailyStatistics:
    """Tests for daily_statistics."""

    def test_single_day(self, two_day_wallet):
        """Scenario: income on 2024-01-01, expense on 2024-01-02."""
        stats = daily_statistics(two_day_wallet, "2024-01-01")
        assert stats.day == date(2024, 1, 1)
        assert stats.income == Decimal("50000")
        assert stats.expense == Decimal("0")
        assert stats.balance == two_day_wallet.balance == Decimal("30000")

    def test_expense_is_magnitude(self, two_day_wallet):
        """Test that expense is reported as a positive number."""
        stats = daily_statistics(two_day_wallet, date(2024, 1, 2))
        assert stats.income == 0
        assert stats.expense == Decimal("20000")

    def test_adjustments_count_by_sign(self):
        """Test that adjustments land in income or expense by sign."""
        day = datetime(2024, 3, 1, 10, 0)
        wallet = make_wallet(
            (TransactionType.ADJUSTMENT, 1000, day),
            (TransactionType.ADJUSTMENT, -300, day),
            (TransactionType.ADJUSTMENT, 0, day),
        )
        stats = daily_statistics(wallet, day)
        assert stats.income == Decimal("1000")
        assert stats.expense == Decimal("300")

    def test_empty_day(self, two_day_wallet):
        """Test a day with no entries."""
        stats = daily_statistics(two_day_wallet, "2023-12-31")
        assert stats.income == 0
        assert stats.expense == 0
        assert stats.balance == Decimal("30000")

    def test_idempotent(self, two_day_wallet):
        """Test that repeated queries give the same answer."""
        first = daily_statistics(two_day_wallet, "2024-01-01")
        second = daily_statistics(two_day_wallet, "2024-01-01")
        assert first == second


class TestTransactionLists:
    """Tests for sorted_transactions and transactions_on_date."""

    def test_most_recent_first(self, two_day_wallet):
        """Test descending date order."""
        ordered = sorted_transactions(two_day_wallet)
        assert [t.name for t in ordered] == ["tx1", "tx0"]

    def test_ties_keep_insertion_order(self):
        """Test that equal timestamps stay in the order they were added."""
        when = datetime(2024, 1, 1, 8, 0)
        wallet = make_wallet(
            (TransactionType.INCOME, 1, when),
            (TransactionType.INCOME, 2, when),
            (TransactionType.EXPENSE, -1, when - timedelta(hours=1)),
            (TransactionType.INCOME, 3, when),
        )
        ordered = sorted_transactions(wallet)
        assert [t.name for t in ordered] == ["tx0", "tx1", "tx3", "tx2"]

    def test_sorting_does_not_mutate_wallet(self, two_day_wallet):
        """Test that the wallet history keeps insertion order."""
        sorted_transactions(two_day_wallet)
        assert [t.name for t in two_day_wallet.transactions] == ["tx0", "tx1"]

    def test_filter_by_day(self):
        """Test that only the selected day is returned, newest first."""
        wallet = make_wallet(
            (TransactionType.INCOME, 1, datetime(2024, 1, 1, 8, 0)),
            (TransactionType.INCOME, 2, datetime(2024, 1, 2, 8, 0)),
            (TransactionType.EXPENSE, -3, datetime(2024, 1, 1, 20, 0)),
        )
        on_day = transactions_on_date(wallet, "2024-01-01")
        assert [t.name for t in on_day] == ["tx2", "tx0"]
        assert transactions_on_date(wallet, date(2024, 2, 1)) == []


class TestChartTotals:
    """Tests for chart_totals."""

    def test_day_scoped(self, two_day_wallet):
        """Test totals for one day."""
        totals = chart_totals(two_day_wallet, "2024-01-02")
        assert totals.income == 0
        assert totals.expense == Decimal("20000")
        assert not totals.is_empty

    def test_all_time(self):
        """Test whole-history totals."""
        wallet = make_wallet(
            (TransactionType.ADJUSTMENT, 500, datetime(2024, 1, 1)),
            (TransactionType.INCOME, 100, datetime(2024, 1, 2)),
            (TransactionType.EXPENSE, -40, datetime(2024, 1, 3)),
            (TransactionType.ADJUSTMENT, -60, datetime(2024, 1, 4)),
        )
        totals = chart_totals(wallet)
        assert totals.income == Decimal("600")
        assert totals.expense == Decimal("100")

    def test_empty(self):
        """Test the no-data state."""
        wallet = make_wallet((TransactionType.ADJUSTMENT, 0, datetime(2024, 1, 1)))
        assert chart_totals(wallet).is_empty
        assert chart_totals(wallet, "2024-05-05").is_empty


class TestTotalsAndSummaries:
    """Tests for cross-wallet queries."""

    def test_total_balance_over_wallets(self):
        """Test summing balances of several wallets."""
        a = make_wallet((TransactionType.ADJUSTMENT, 100, datetime(2024, 1, 1)))
        b = make_wallet((TransactionType.ADJUSTMENT, -30, datetime(2024, 1, 1)))
        assert total_balance([a, b]) == Decimal("70")
        assert total_balance([]) == Decimal("0")

    def test_total_balance_over_store(self, store):
        """Test that a store can be passed directly."""
        store.create_wallet("Savings", 250)
        store.add_transaction(None, "expense", 50, name="Test entry")
        assert total_balance(store) == Decimal("200")

    def test_wallet_summaries(self, store):
        """Test list rows and the active flag."""
        main = store.wallets[0]
        savings = store.create_wallet("Savings", 10)

        rows = wallet_summaries(store)

        assert [row.name for row in rows] == ["Main wallet", "Savings"]
        assert [row.is_active for row in rows] == [False, True]
        assert rows[0].id == main.id
        assert rows[1].balance == savings.balance
        assert rows[1].currency == "VND"

    def test_engine_delegates(self, two_day_wallet):
        """Test the object wrapper."""
        engine = StatisticsEngine()
        assert engine.daily_statistics(two_day_wallet, "2024-01-01") == \
            daily_statistics(two_day_wallet, "2024-01-01")
        assert engine.total_balance([two_day_wallet]) == Decimal("30000")

    def test_queries_do_not_touch_store(self, store, snapshot_storage):
        """Test that reads never save or notify."""
        calls = []
        store.on_change = calls.append
        saves_before = snapshot_storage.save_count

        wallet = store.active_wallet
        daily_statistics(wallet, date.today())
        chart_totals(wallet)
        wallet_summaries(store)
        total_balance(store)

        assert calls == []
        assert snapshot_storage.save_count == saves_before


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
