"""
Ledger Input Validation

DESIGN DECISION: The validator collects ALL issues with an input before
reporting, instead of stopping at the first one. The store then raises a
single ValidationError carrying the full list, so the caller can show
everything that is wrong with a form in one go.

IMPORTANT: Validation NEVER silently fixes issues.
The only lenient parse is the initial balance of a new wallet, which falls
back to zero, so a bad balance never blocks creating a wallet.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import ValidationError as SchemaValidationError

from wallet_ledger.exceptions import ValidationError
from wallet_ledger.models.ledger import MAX_NAME_LENGTH, TransactionType
from wallet_ledger.models.validation import ValidationIssue

AmountInput = Union[Decimal, int, float, str, None]


class LedgerValidator:
    """
    Validates user-entered amounts and operation arguments.

    Each validate_* method returns the parsed values or raises
    ValidationError with every issue found.
    """

    @staticmethod
    def parse_amount(value: AmountInput) -> Optional[Decimal]:
        """
        Parse a user-entered amount.

        Returns None for blank, non-numeric, NaN or infinite input.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, Decimal):
            parsed = value
        elif isinstance(value, (int, float)):
            parsed = Decimal(str(value))
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                parsed = Decimal(text)
            except InvalidOperation:
                return None
        else:
            return None

        if not parsed.is_finite():
            return None
        return parsed

    def parse_initial_balance(self, value: AmountInput) -> Decimal:
        """Initial wallet balance, defaulting to 0 when not parseable."""
        parsed = self.parse_amount(value)
        return parsed if parsed is not None else Decimal("0")

    def _check_positive_amount(
        self,
        value: AmountInput,
        field: str = "amount",
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        issues = []
        amount = self.parse_amount(value)

        if amount is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message="Amount is required and must be a number",
                suggested_fix="Enter the amount as a plain number",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                suggested_fix="Enter the amount without a sign",
            ))

        return amount, issues

    def _check_name(
        self,
        name: Optional[str],
        field: str = "name",
        required: bool = True,
    ) -> tuple[str, list[ValidationIssue]]:
        issues = []
        cleaned = (name or "").strip()

        if required and not cleaned:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message="Name is required",
                suggested_fix="Describe what the money was for",
            ))
        elif len(cleaned) > MAX_NAME_LENGTH:
            issues.append(ValidationIssue(
                field=field,
                issue_type="too_long",
                message=f"Name must be at most {MAX_NAME_LENGTH} characters",
                suggested_fix="Shorten the name",
            ))

        return cleaned, issues

    def validate_wallet_name(self, name: Optional[str]) -> str:
        """
        Validate a wallet name for create or rename.

        An empty name passes through as "" so callers can treat it as a
        cancel; only over-long names are rejected.
        """
        cleaned, issues = self._check_name(name, required=False)
        self.raise_for_issues(issues, "Invalid wallet name")
        return cleaned

    def validate_transaction(
        self,
        transaction_type: Union[TransactionType, str],
        amount: AmountInput,
        name: Optional[str],
    ) -> tuple[TransactionType, Decimal, str]:
        """
        Validate an income/expense entry.

        Returns:
            (transaction_type, positive_amount, stripped_name)
        """
        issues = []

        parsed_type = None
        try:
            parsed_type = TransactionType(transaction_type)
        except ValueError:
            pass

        if parsed_type not in (TransactionType.INCOME, TransactionType.EXPENSE):
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Transaction type must be income or expense, got {transaction_type!r}",
                suggested_fix="Use adjust_balance for manual corrections",
            ))

        parsed_amount, amount_issues = self._check_positive_amount(amount)
        issues.extend(amount_issues)

        cleaned_name, name_issues = self._check_name(name)
        issues.extend(name_issues)

        self.raise_for_issues(issues, "Invalid transaction")
        return parsed_type, parsed_amount, cleaned_name

    def validate_adjustment(self, amount: AmountInput) -> Decimal:
        """
        Validate a manual balance adjustment.

        Returns the signed amount; zero is rejected.
        """
        issues = []
        parsed = self.parse_amount(amount)

        if parsed is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Adjustment amount is required and must be a number",
            ))
        elif parsed == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Adjustment amount cannot be zero",
                suggested_fix="Use a negative amount to lower the balance",
            ))

        self.raise_for_issues(issues, "Invalid adjustment")
        return parsed

    def validate_transfer(
        self,
        from_wallet_id: str,
        to_wallet_id: str,
        amount: AmountInput,
    ) -> Decimal:
        """
        Validate transfer arguments that do not need the ledger.

        Wallet existence and funds are checked by the store.
        """
        issues = []

        if from_wallet_id == to_wallet_id:
            issues.append(ValidationIssue(
                field="to_wallet_id",
                issue_type="same_wallet",
                message="Cannot transfer money to the same wallet",
                suggested_fix="Pick a different destination wallet",
            ))

        parsed, amount_issues = self._check_positive_amount(amount)
        issues.extend(amount_issues)

        self.raise_for_issues(issues, "Invalid transfer")
        return parsed

    @staticmethod
    def issues_from_schema_error(error: SchemaValidationError) -> list[ValidationIssue]:
        """Translate a pydantic validation error into ledger issues."""
        return [
            ValidationIssue(
                field=".".join(str(part) for part in detail["loc"]) or "value",
                issue_type=detail["type"],
                message=detail["msg"],
            )
            for detail in error.errors()
        ]

    @staticmethod
    def raise_for_issues(issues: list[ValidationIssue], message: str) -> None:
        """Raise ValidationError if any error-level issue is present."""
        errors = [issue for issue in issues if issue.severity == "error"]
        if errors:
            details = "; ".join(issue.message for issue in errors)
            raise ValidationError(f"{message}: {details}", issues=issues)

    def get_user_friendly_summary(self, error: ValidationError) -> str:
        """
        Generate a user-friendly summary of a rejected input.

        This is what the presentation layer shows next to the form.
        """
        if not error.issues:
            return f"❌ {error.message}"

        lines = ["❌ Please fix the following:"]
        for issue in error.issues:
            lines.append(f"   • {issue.message}")
            if issue.suggested_fix:
                lines.append(f"     💡 {issue.suggested_fix}")

        return "\n".join(lines)
