"""
Core Data Models for Wallet Ledger

These models define the strict schemas for wallets and their transactions.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable to the snapshot format the storage layer persists
4. Guard the balance invariant whenever a wallet is built from data

DESIGN DECISION: Amounts are Decimal, never float. A wallet balance is a
running sum and has to compare exactly against the sum of its entries.
The one allowance is on load: float noise from browser data is absorbed
(see BALANCE_TOLERANCE).

Snapshot keys are camelCase ({"wallets": [...], "activeWalletId": ...}) so
data written by the browser tracker loads as-is.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# User-entered names (wallets, transactions)
MAX_NAME_LENGTH = 200

# Generated transfer labels embed a wallet name
MAX_LABEL_LENGTH = 400

# Browser data sums amounts as binary floats, leaving noise such as
# 30.299999999999997 for 10.1 + 20.2
BALANCE_TOLERANCE = Decimal("0.000001")


def generate_id() -> str:
    """Opaque unique identifier for wallets and transactions."""
    return uuid4().hex


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Kinds of ledger entries.

    Transfers are not a type of their own: a transfer is an EXPENSE on the
    source wallet paired with an INCOME on the destination wallet.
    """
    INCOME = "income"          # Stored positive
    EXPENSE = "expense"        # Stored negative
    ADJUSTMENT = "adjustment"  # Either sign, manual correction


# =============================================================================
# CORE LEDGER MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A single signed monetary entry against a wallet.

    CRITICAL: Transactions are immutable. The ledger only ever appends or
    removes them; it never edits one in place.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Unique transaction ID"
    )
    type: TransactionType = Field(
        ...,
        description="Income, expense or adjustment"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Signed amount; positive increases the wallet balance"
    )
    name: str = Field(
        default="",
        max_length=MAX_LABEL_LENGTH,
        description="Short display label"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the transaction is considered to have occurred"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-text annotation"
    )

    @field_validator('date', mode='before')
    @classmethod
    def expand_plain_date(cls, v):
        """A bare calendar date means midnight of that day."""
        if isinstance(v, str) and len(v.strip()) == 10:
            v = date.fromisoformat(v.strip())
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @field_validator('date')
    @classmethod
    def to_local_naive(cls, v: datetime) -> datetime:
        """
        Store every timestamp as local naive time.

        Tracker data mixes UTC instants ("...Z") with bare dates typed
        by the user; normalizing keeps them comparable and day keys local.
        """
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.amount < 0


class Wallet(BaseModel):
    """
    A named account holding a running balance and its history.

    INVARIANT: balance == sum(t.amount for t in transactions).
    The ledger store maintains it on every mutation; the validator below
    rejects any wallet built from data that breaks it.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=generate_id,
        min_length=1,
        description="Unique wallet ID"
    )
    name: str = Field(
        ...,
        max_length=MAX_NAME_LENGTH,
        description="Display label"
    )
    balance: Decimal = Field(
        default=Decimal("0"),
        allow_inf_nan=False,
        description="Current balance"
    )
    currency: str = Field(
        default="VND",
        max_length=10,
        description="Display currency label (no conversion is ever done)"
    )
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Append/remove-only history; display order is by date"
    )
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="When the wallet was created"
    )

    @model_validator(mode='after')
    def validate_balance(self) -> 'Wallet':
        """
        Balance must match the transaction history.

        A difference within BALANCE_TOLERANCE is float noise from browser
        data; the balance is reset to the exact sum instead of rejected.
        """
        expected = self.computed_balance()
        if abs(self.balance - expected) > BALANCE_TOLERANCE:
            raise ValueError(
                f"Wallet {self.id} balance {self.balance} does not match "
                f"its transactions ({expected})"
            )
        self.balance = expected
        return self

    def computed_balance(self) -> Decimal:
        """Sum of all transaction amounts."""
        return sum((t.amount for t in self.transactions), Decimal("0"))

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        return None


class LedgerSnapshot(BaseModel):
    """
    Serializable state of a whole ledger.

    Format version 0: there is no version field. Each wallet carries its
    full transaction list.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    wallets: list[Wallet] = Field(default_factory=list)
    active_wallet_id: Optional[str] = Field(
        default=None,
        description="ID of the selected wallet"
    )

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'LedgerSnapshot':
        """Wallet IDs must be unique."""
        ids = [wallet.id for wallet in self.wallets]
        if len(ids) != len(set(ids)):
            raise ValueError("Snapshot contains duplicate wallet IDs")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, data: str) -> 'LedgerSnapshot':
        return cls.model_validate_json(data)


# =============================================================================
# QUERY RESULT MODELS
# =============================================================================

class DailyStatistics(BaseModel):
    """
    Income/expense breakdown of one wallet for one calendar day.

    NOTE: balance is the wallet's live balance, not the balance as of
    that day.
    """

    day: date
    income: Decimal = Field(ge=0)
    expense: Decimal = Field(ge=0)
    balance: Decimal


class ChartTotals(BaseModel):
    """The two numbers behind the income/expense doughnut chart."""

    income: Decimal = Field(ge=0)
    expense: Decimal = Field(ge=0)

    @property
    def is_empty(self) -> bool:
        return self.income == 0 and self.expense == 0


class WalletSummary(BaseModel):
    """One row of the wallet list."""

    id: str
    name: str
    balance: Decimal
    currency: str
    is_active: bool = False
