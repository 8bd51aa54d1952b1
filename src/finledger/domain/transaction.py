"""Transaction domain service."""

import logging
from typing import Any, Iterable, Optional
from datetime import date

from finledger.database.base import Database
from finledger.domain.entities import (
    Normalized,
    SkipReason,
    SyncReport,
    Transaction as TransactionEntity,
)
from finledger.domain.normalize import TransactionRecord, normalize_transaction

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for reconciling bank transactions into the local store."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def upsert_transaction(self, payload: Any, account_id: str) -> Normalized[TransactionRecord]:
        """Insert or replace one raw aggregator transaction.

        Malformed payloads are logged and skipped; this never raises for bad
        upstream data.

        Args:
            payload: Raw transaction payload from the aggregator
            account_id: Identity of the owning account

        Returns:
            The normalization result; ``ok`` is False when the record was skipped
        """
        result = normalize_transaction(payload, account_id)
        if not result.ok:
            logger.warning(
                "Skipping transaction for account %s: %s %s",
                account_id,
                result.skip_reason.value,
                result.detail,
            )
            return result

        record = result.value
        self.db.save_transaction(
            transaction_id=record.transaction_id,
            account_id=record.account_id,
            booking_date=record.booking_date,
            amount=record.amount,
            currency=record.currency,
            creditor_name=record.creditor_name,
            debtor_name=record.debtor_name,
            remittance_information=record.remittance_information,
            raw_json=record.raw_json,
        )
        return result

    def upsert_transactions_batch(self, payloads: Iterable[Any], account_id: str) -> SyncReport:
        """Upsert many transactions for one account, one commit per record.

        Args:
            payloads: Raw transaction payloads
            account_id: Identity of the owning account

        Returns:
            SyncReport with saved/skipped transaction counts
        """
        saved = 0
        skip_reasons: list[SkipReason] = []
        with self.db.write_lock:
            for payload in payloads or ():
                result = self.upsert_transaction(payload, account_id)
                if result.ok:
                    saved += 1
                else:
                    skip_reasons.append(result.skip_reason)

        logger.info(
            "Saved %d transaction(s) for account %s, skipped %d",
            saved,
            account_id,
            len(skip_reasons),
        )
        return SyncReport(
            transactions_saved=saved,
            transactions_skipped=len(skip_reasons),
            skip_reasons=tuple(skip_reasons),
        )

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by its identity."""
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        account_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest booking date first.

        Args:
            account_id: Optional account filter
            start_date: Optional start date filter
            end_date: Optional end date filter

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            account_id=account_id, start_date=start_date, end_date=end_date
        )
