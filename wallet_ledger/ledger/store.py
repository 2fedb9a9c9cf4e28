"""
Ledger Store

Owns the wallets and the active-wallet selection, and is the ONLY place
where balances change.

Every mutation follows the same steps:
1. Validate - reject bad input before touching anything
2. Mutate - append/remove transactions and move the balance by the same amount
3. Persist - save a full snapshot (best effort)
4. Audit - record what happened
5. Notify - call the single on_change hook so the UI can re-query

GUARANTEES:
- balance == sum(transaction amounts) on every wallet after every call
- A call that raises leaves the store exactly as it was
- At least one wallet exists once the store is opened
"""

from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterator, Optional, TypeVar, Union

from pydantic import ValidationError as SchemaValidationError

from wallet_ledger.audit import AuditLogger, create_correlation_id
from wallet_ledger.config import LedgerSettings, get_settings
from wallet_ledger.exceptions import (
    InsufficientFundsError,
    LastWalletError,
    LedgerError,
    LedgerIntegrityError,
    NotFoundError,
    ValidationError,
)
from wallet_ledger.models.ledger import (
    LedgerSnapshot,
    Transaction,
    TransactionType,
    Wallet,
)
from wallet_ledger.services.storage import SnapshotStorageInterface, StorageError
from wallet_ledger.validation import LedgerValidator
from wallet_ledger.validation.validator import AmountInput

ChangeListener = Callable[["LedgerStore"], None]
ModelT = TypeVar("ModelT", Transaction, Wallet)


class LedgerStore:
    """
    The wallet collection plus every operation that mutates it.

    Wallets keep insertion order; "first wallet" always means the oldest
    remaining one.
    """

    def __init__(
        self,
        storage: Optional[SnapshotStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LedgerValidator] = None,
        on_change: Optional[ChangeListener] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        """
        Initialize an empty store.

        Args:
            storage: Where snapshots are saved. If None, the ledger only
                     lives in memory.
            audit_logger: Audit sink. Defaults to local-only logging.
            validator: Input validator.
            on_change: Called with the store after every successful mutation.
            settings: Labels and defaults; read from the environment if None.
        """
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or LedgerValidator()
        self._settings = settings or get_settings().ledger
        self.on_change = on_change

        self._wallets: dict[str, Wallet] = {}
        self._active_wallet_id: Optional[str] = None

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot, **kwargs) -> "LedgerStore":
        """
        Build a store from a snapshot.

        A missing or dangling active wallet ID is repaired to the first wallet.
        """
        store = cls(**kwargs)
        for wallet in snapshot.wallets:
            store._wallets[wallet.id] = wallet.model_copy(deep=True)

        if snapshot.active_wallet_id in store._wallets:
            store._active_wallet_id = snapshot.active_wallet_id
        else:
            store._active_wallet_id = store._first_wallet_id()
        return store

    @classmethod
    def open(
        cls,
        storage: Optional[SnapshotStorageInterface] = None,
        **kwargs,
    ) -> "LedgerStore":
        """
        Load the ledger from storage and make sure it has a wallet.

        Raises:
            StorageError: If stored data exists but cannot be read
        """
        snapshot = storage.load() if storage else None

        if snapshot is not None:
            store = cls.from_snapshot(snapshot, storage=storage, **kwargs)
            store._audit_logger.log_snapshot_loaded(
                wallet_count=len(store._wallets),
                active_wallet_id=store._active_wallet_id,
            )
        else:
            store = cls(storage=storage, **kwargs)

        store.bootstrap()
        return store

    def bootstrap(self) -> Optional[Wallet]:
        """
        Create the default wallet if the store is empty.

        Also selects the first wallet if nothing is active.

        Returns:
            The created wallet, or None if the store already had wallets
        """
        created = None

        if not self._wallets:
            created = self._new_wallet(
                name=self._settings.default_wallet_name,
                initial_balance=Decimal("0"),
            )
            self._wallets[created.id] = created
            self._active_wallet_id = created.id
            self._persist("bootstrap")
            self._audit_logger.log_wallet_created(
                wallet_id=created.id,
                name=created.name,
                initial_balance=created.balance,
            )
            self._notify()
        elif self._active_wallet_id not in self._wallets:
            self._active_wallet_id = self._first_wallet_id()
            self._persist("bootstrap")
            self._notify()

        return created

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def wallets(self) -> list[Wallet]:
        """Wallets in store order."""
        return list(self._wallets.values())

    @property
    def active_wallet_id(self) -> Optional[str]:
        return self._active_wallet_id

    @property
    def active_wallet(self) -> Optional[Wallet]:
        if self._active_wallet_id is None:
            return None
        return self._wallets.get(self._active_wallet_id)

    def find_wallet(self, wallet_id: Optional[str]) -> Optional[Wallet]:
        return self._wallets.get(wallet_id)

    def get_wallet(self, wallet_id: Optional[str]) -> Wallet:
        """
        Get a wallet by ID.

        Raises:
            NotFoundError: If no such wallet exists
        """
        wallet = self._wallets.get(wallet_id)
        if wallet is None:
            raise NotFoundError("wallet", wallet_id)
        return wallet

    def to_snapshot(self) -> LedgerSnapshot:
        """Serializable copy of the current state."""
        return LedgerSnapshot(
            wallets=[wallet.model_copy(deep=True) for wallet in self._wallets.values()],
            active_wallet_id=self._active_wallet_id,
        )

    def verify_balances(self) -> None:
        """
        Check the balance invariant on every wallet.

        Raises:
            LedgerIntegrityError: Listing every wallet that is off
        """
        mismatches = {}
        for wallet in self._wallets.values():
            expected = wallet.computed_balance()
            if wallet.balance != expected:
                mismatches[wallet.id] = (wallet.balance, expected)
        if mismatches:
            raise LedgerIntegrityError(mismatches)

    # =========================================================================
    # WALLET OPERATIONS
    # =========================================================================

    def create_wallet(
        self,
        name: str,
        initial_balance: AmountInput = 0,
        currency: Optional[str] = None,
    ) -> Wallet:
        """
        Create a wallet and make it active.

        The wallet starts with one adjustment equal to the initial balance,
        even when that is zero. An unparseable balance counts as zero.

        Raises:
            ValidationError: Name or currency too long
        """
        balance = self._validator.parse_initial_balance(initial_balance)
        with self._rejections("create_wallet"):
            wallet = self._new_wallet(
                name=self._validator.validate_wallet_name(name),
                initial_balance=balance,
                currency=currency,
            )

        self._wallets[wallet.id] = wallet
        self._active_wallet_id = wallet.id

        self._persist("create_wallet")
        self._audit_logger.log_wallet_created(
            wallet_id=wallet.id,
            name=wallet.name,
            initial_balance=balance,
        )
        self._notify()
        return wallet

    def rename_wallet(self, wallet_id: str, new_name: Optional[str]) -> bool:
        """
        Rename a wallet.

        An empty or unchanged name is treated as the user cancelling.

        Returns:
            True if the name changed

        Raises:
            ValidationError: Name too long
            NotFoundError: Unknown wallet
        """
        with self._rejections("rename_wallet", wallet_id):
            wallet = self.get_wallet(wallet_id)
            name = self._validator.validate_wallet_name(new_name)

        if not name or name == wallet.name:
            return False

        old_name = wallet.name
        wallet.name = name

        self._persist("rename_wallet")
        self._audit_logger.log_wallet_renamed(
            wallet_id=wallet.id,
            old_name=old_name,
            new_name=name,
        )
        self._notify()
        return True

    def delete_wallet(self, wallet_id: str) -> None:
        """
        Delete a wallet and all its transactions.

        If it was active, the first remaining wallet becomes active.
        The caller is responsible for asking the user first.
        """
        with self._rejections("delete_wallet", wallet_id):
            wallet = self.get_wallet(wallet_id)
            if len(self._wallets) == 1:
                raise LastWalletError(wallet_id)

        del self._wallets[wallet_id]
        if self._active_wallet_id == wallet_id:
            self._active_wallet_id = self._first_wallet_id()

        self._persist("delete_wallet")
        self._audit_logger.log_wallet_deleted(
            wallet_id=wallet_id,
            name=wallet.name,
            transaction_count=len(wallet.transactions),
            new_active_wallet_id=self._active_wallet_id,
        )
        self._notify()

    def set_active_wallet(self, wallet_id: Optional[str]) -> bool:
        """
        Select the wallet new entries go to.

        Unknown IDs are ignored.

        Returns:
            True if wallet_id is now the active wallet
        """
        if wallet_id not in self._wallets:
            return False
        if wallet_id == self._active_wallet_id:
            return True

        previous = self._active_wallet_id
        self._active_wallet_id = wallet_id

        self._persist("set_active_wallet")
        self._audit_logger.log_active_wallet_changed(
            wallet_id=wallet_id,
            previous_wallet_id=previous,
        )
        self._notify()
        return True

    # =========================================================================
    # TRANSACTION OPERATIONS
    # =========================================================================

    def add_transaction(
        self,
        wallet_id: Optional[str],
        transaction_type: Union[TransactionType, str],
        amount: AmountInput,
        date: Optional[Union[datetime, date, str]] = None,
        name: str = "",
        note: Optional[str] = None,
    ) -> Transaction:
        """
        Record an income or expense.

        Args:
            wallet_id: Target wallet; None means the active wallet
            transaction_type: income or expense
            amount: Positive magnitude; the sign comes from the type
            date: When it happened; defaults to now
            name: Display label, required
            note: Optional annotation

        Raises:
            ValidationError: Bad type, amount, name or date, or no active wallet
            NotFoundError: Unknown wallet
        """
        with self._rejections("add_transaction", wallet_id):
            wallet = self._resolve_wallet(wallet_id)
            parsed_type, magnitude, cleaned_name = self._validator.validate_transaction(
                transaction_type, amount, name
            )
            signed = magnitude if parsed_type == TransactionType.INCOME else -magnitude
            transaction = self._build(
                Transaction,
                type=parsed_type,
                amount=signed,
                name=cleaned_name,
                date=date if date is not None else datetime.now(),
                note=note or None,
            )

        self._append(wallet, transaction)

        self._persist("add_transaction")
        self._audit_logger.log_transaction_added(
            wallet_id=wallet.id,
            transaction_id=transaction.id,
            transaction_type=parsed_type.value,
            amount=signed,
            balance=wallet.balance,
        )
        self._notify()
        return transaction

    def adjust_balance(
        self,
        wallet_id: Optional[str],
        amount: AmountInput,
        note: Optional[str] = None,
    ) -> Transaction:
        """
        Correct a wallet balance by a signed amount.

        Raises:
            ValidationError: Zero or missing amount, or no active wallet
            NotFoundError: Unknown wallet
        """
        with self._rejections("adjust_balance", wallet_id):
            wallet = self._resolve_wallet(wallet_id)
            signed = self._validator.validate_adjustment(amount)
            transaction = self._build(
                Transaction,
                type=TransactionType.ADJUSTMENT,
                amount=signed,
                name=self._settings.adjustment_label,
                note=note or None,
            )

        self._append(wallet, transaction)

        self._persist("adjust_balance")
        self._audit_logger.log_balance_adjusted(
            wallet_id=wallet.id,
            transaction_id=transaction.id,
            amount=signed,
            balance=wallet.balance,
        )
        self._notify()
        return transaction

    def transfer(
        self,
        from_wallet_id: str,
        to_wallet_id: str,
        amount: AmountInput,
        note: Optional[str] = None,
    ) -> tuple[Transaction, Transaction]:
        """
        Move money between two wallets.

        Both legs share one timestamp and one note. Every check runs before
        either wallet is touched, so a rejected transfer changes nothing.

        Returns:
            (expense on the source wallet, income on the destination wallet)

        Raises:
            ValidationError: Same wallet, or amount not positive
            NotFoundError: Either wallet missing
            InsufficientFundsError: Source balance below the amount
        """
        with self._rejections("transfer", from_wallet_id):
            magnitude = self._validator.validate_transfer(
                from_wallet_id, to_wallet_id, amount
            )
            source = self.get_wallet(from_wallet_id)
            destination = self.get_wallet(to_wallet_id)
            if source.balance < magnitude:
                raise InsufficientFundsError(source.id, source.balance, magnitude)

            timestamp = datetime.now()
            shared_note = note or self._settings.transfer_note
            outgoing = self._build(
                Transaction,
                type=TransactionType.EXPENSE,
                amount=-magnitude,
                name=self._settings.transfer_out_label.format(wallet=destination.name),
                date=timestamp,
                note=shared_note,
            )
            incoming = self._build(
                Transaction,
                type=TransactionType.INCOME,
                amount=magnitude,
                name=self._settings.transfer_in_label.format(wallet=source.name),
                date=timestamp,
                note=shared_note,
            )

        self._append(source, outgoing)
        self._append(destination, incoming)

        self._persist("transfer")
        self._audit_logger.log_transfer_completed(
            from_wallet_id=source.id,
            to_wallet_id=destination.id,
            amount=magnitude,
            correlation_id=create_correlation_id(),
        )
        self._notify()
        return outgoing, incoming

    def delete_transaction(self, wallet_id: str, transaction_id: str) -> Transaction:
        """
        Remove a transaction and undo its effect on the balance.

        The caller is responsible for asking the user first.

        Returns:
            The removed transaction
        """
        with self._rejections("delete_transaction", wallet_id):
            wallet = self.get_wallet(wallet_id)
            transaction = wallet.find_transaction(transaction_id)
            if transaction is None:
                raise NotFoundError("transaction", transaction_id)

        wallet.balance -= transaction.amount
        wallet.transactions = [
            t for t in wallet.transactions if t.id != transaction_id
        ]

        self._persist("delete_transaction")
        self._audit_logger.log_transaction_deleted(
            wallet_id=wallet.id,
            transaction_id=transaction.id,
            amount=transaction.amount,
            balance=wallet.balance,
        )
        self._notify()
        return transaction

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _new_wallet(
        self,
        name: str,
        initial_balance: Decimal,
        currency: Optional[str] = None,
    ) -> Wallet:
        seed = self._build(
            Transaction,
            type=TransactionType.ADJUSTMENT,
            amount=initial_balance,
            name=self._settings.initial_balance_label,
            note=self._settings.initial_balance_note,
        )
        return self._build(
            Wallet,
            name=name,
            balance=initial_balance,
            currency=currency or self._settings.default_currency,
            transactions=[seed],
        )

    def _resolve_wallet(self, wallet_id: Optional[str]) -> Wallet:
        """Explicit wallet, or the active one when wallet_id is None."""
        if wallet_id is None:
            if self._active_wallet_id is None:
                raise ValidationError("Select a wallet before adding transactions")
            wallet_id = self._active_wallet_id
        return self.get_wallet(wallet_id)

    def _build(self, model: type[ModelT], **fields) -> ModelT:
        """
        Construct a model, reporting schema failures as ledger errors.

        Raises:
            ValidationError: Bad date, or a field too long
        """
        try:
            return model(**fields)
        except SchemaValidationError as e:
            raise ValidationError(
                f"Invalid {model.__name__.lower()}: {e.error_count()} field(s) rejected",
                issues=self._validator.issues_from_schema_error(e),
            )

    @staticmethod
    def _append(wallet: Wallet, transaction: Transaction) -> None:
        wallet.transactions.append(transaction)
        wallet.balance += transaction.amount

    def _first_wallet_id(self) -> Optional[str]:
        return next(iter(self._wallets), None)

    @contextmanager
    def _rejections(self, operation: str, entity_id: Optional[str] = None) -> Iterator[None]:
        """Audit ledger errors raised inside the block, then re-raise."""
        try:
            yield
        except LedgerError as e:
            self._audit_logger.log_operation_rejected(operation, e, entity_id)
            raise

    def _persist(self, operation: str) -> None:
        """
        Save a snapshot if storage is configured.

        A failed save is logged; the in-memory change stands.
        """
        if self._storage is None:
            return
        try:
            self._storage.save(self.to_snapshot())
        except StorageError as e:
            self._audit_logger.log_persistence_failed(
                operation=operation,
                error_message=str(e),
            )

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)
