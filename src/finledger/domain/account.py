"""Account domain service."""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Optional

from finledger.database.base import Database
from finledger.domain.entities import (
    Account as AccountEntity,
    AccountWithTransactions,
    Normalized,
    TransactionView,
)
from finledger.domain.normalize import (
    AccountRecord,
    BalanceFound,
    display_name,
    normalize_account,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service for reconciling bank accounts into the local store."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def upsert_account(self, payload: Any) -> Normalized[AccountRecord]:
        """Insert or update one raw aggregator account.

        An account without a valid identity is skipped and nothing is written.
        On update, a reported balance of zero or a missing balance never
        replaces a stored non-zero balance; the aggregator returns both under
        rate limiting. New accounts take whatever was reported (zero if none).

        Args:
            payload: Raw account payload from the aggregator

        Returns:
            The normalization result; ``ok`` is False when the record was skipped
        """
        result = normalize_account(payload)
        if not result.ok:
            logger.warning("Skipping account: %s %s", result.skip_reason.value, result.detail)
            return result

        record = result.value
        with self.db.write_lock:
            existing = self.db.get_account(record.account_id)
            balance = self._resolve_balance(record, existing)
            created = self.db.save_account(
                account_id=record.account_id,
                name=record.name,
                iban=record.iban,
                balance=balance,
                currency=record.currency,
                bank_name=record.bank_name,
                last_synced=datetime.now(UTC),
            )

        logger.info(
            "%s account %s (balance %s %s)",
            "Created" if created else "Updated",
            record.account_id,
            balance,
            record.currency,
        )
        return result

    @staticmethod
    def _resolve_balance(record: AccountRecord, existing: Optional[AccountEntity]) -> Decimal:
        reported = record.balance.amount if isinstance(record.balance, BalanceFound) else None
        if existing is None:
            return reported if reported is not None else Decimal("0")

        if (reported is None or reported == 0) and existing.balance != 0:
            logger.info(
                "Keeping stored balance %s for account %s (reported: %s)",
                existing.balance,
                record.account_id,
                "none" if reported is None else reported,
            )
            return existing.balance
        return reported if reported is not None else existing.balance

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by its identity."""
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts."""
        return self.db.list_accounts()

    def get_accounts_with_transactions(self) -> list[AccountWithTransactions]:
        """List accounts joined to their transactions, newest booking date first.

        Each transaction carries a display name: the creditor or debtor name,
        else a name recovered from the remittance text, else "Unknown".
        """
        result = []
        for account in self.db.list_accounts():
            views = tuple(
                TransactionView(
                    transaction=txn,
                    display_name=display_name(
                        txn.creditor_name, txn.debtor_name, txn.remittance_information
                    ),
                )
                for txn in self.db.list_transactions(account_id=account.account_id)
            )
            result.append(AccountWithTransactions(account=account, transactions=views))
        return result
