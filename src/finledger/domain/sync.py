"""Aggregator sync domain service."""

import logging
from collections.abc import Mapping
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from finledger.aggregator.base import AggregatorClient, AggregatorError, SessionExpiredError
from finledger.database.base import Database
from finledger.domain.account import AccountService
from finledger.domain.entities import RefreshReport, SkipReason, SyncReport
from finledger.domain.normalize import derive_account_id, is_valid_identity
from finledger.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

REFRESH_WINDOW_DAYS = 90


class SyncService:
    """Service feeding aggregator responses into the account and transaction stores.

    Two entry points exist: ``sync_accounts`` takes the payload of an
    authorization-code session exchange, ``refresh_accounts`` pulls fresh
    balances and transactions for already known accounts.
    """

    def __init__(self, db: Database):
        """Initialize sync service.

        Args:
            db: Database instance
        """
        self.db = db
        self.account_service = AccountService(db)
        self.transaction_service = TransactionService(db)

    def sync_accounts(self, payload: Any) -> SyncReport:
        """Store the accounts, balances and transactions of a session exchange.

        Args:
            payload: ``{"accounts": [...]}`` or a bare list of account payloads,
                each optionally carrying ``balances`` and ``transactions``

        Returns:
            SyncReport with saved/skipped counts
        """
        if isinstance(payload, Mapping):
            accounts = payload.get("accounts") or []
        else:
            accounts = payload or []
        if not isinstance(accounts, list):
            logger.warning("Ignoring sync payload without an accounts list")
            return SyncReport()

        accounts_saved = 0
        accounts_skipped = 0
        transactions_saved = 0
        transactions_skipped = 0
        skip_reasons: list[SkipReason] = []

        for raw_account in accounts:
            account_id = derive_account_id(raw_account) if isinstance(raw_account, Mapping) else None
            if account_id is None:
                result = self.account_service.upsert_account(raw_account)
                accounts_skipped += 1
                skip_reasons.append(result.skip_reason)
                continue

            transactions = raw_account.get("transactions")
            if isinstance(transactions, list):
                batch = self.transaction_service.upsert_transactions_batch(transactions, account_id)
                transactions_saved += batch.transactions_saved
                transactions_skipped += batch.transactions_skipped
                skip_reasons.extend(batch.skip_reasons)

            result = self.account_service.upsert_account(raw_account)
            if result.ok:
                accounts_saved += 1
            else:
                accounts_skipped += 1
                skip_reasons.append(result.skip_reason)

        logger.info(
            "Sync stored %d account(s), %d transaction(s); skipped %d account(s), %d transaction(s)",
            accounts_saved,
            transactions_saved,
            accounts_skipped,
            transactions_skipped,
        )
        return SyncReport(
            accounts_saved=accounts_saved,
            accounts_skipped=accounts_skipped,
            transactions_saved=transactions_saved,
            transactions_skipped=transactions_skipped,
            skip_reasons=tuple(skip_reasons),
        )

    def refresh_accounts(
        self,
        client: AggregatorClient,
        account_ids: Optional[Iterable[str]] = None,
        today: Optional[date] = None,
    ) -> RefreshReport:
        """Refresh balances and trailing-window transactions of known accounts.

        A failing or expired account keeps its stored data untouched; the
        other accounts are still refreshed.

        Args:
            client: Aggregator client
            account_ids: Accounts to refresh; all stored accounts if None
            today: Reference date for the transaction window

        Returns:
            RefreshReport listing refreshed, failed and expired accounts
        """
        if account_ids is None:
            account_ids = [acc.account_id for acc in self.account_service.list_accounts()]
        date_from = (today or date.today()) - timedelta(days=REFRESH_WINDOW_DAYS)

        refreshed: list[str] = []
        failed: list[str] = []
        expired: list[str] = []
        transactions_saved = 0
        transactions_skipped = 0

        for account_id in account_ids:
            if not is_valid_identity(account_id):
                logger.warning("Skipping refresh of account with invalid identity %r", account_id)
                failed.append(str(account_id))
                continue

            try:
                balances_response = client.get_balances(account_id)
                transactions_response = client.get_transactions(account_id, date_from)
            except AggregatorError as e:
                if isinstance(e, SessionExpiredError) or e.status_code == 401:
                    logger.warning("Session expired while refreshing account %s: %s", account_id, e)
                    expired.append(account_id)
                else:
                    logger.warning("Failed to refresh account %s: %s", account_id, e)
                    failed.append(account_id)
                continue

            transactions = _field(transactions_response, "transactions")
            if isinstance(transactions, list):
                batch = self.transaction_service.upsert_transactions_batch(transactions, account_id)
                transactions_saved += batch.transactions_saved
                transactions_skipped += batch.transactions_skipped

            self.account_service.upsert_account(
                self._refresh_payload(account_id, _field(balances_response, "balances"))
            )
            refreshed.append(account_id)

        return RefreshReport(
            refreshed_accounts=tuple(refreshed),
            failed_accounts=tuple(failed),
            expired_accounts=tuple(expired),
            transactions_saved=transactions_saved,
            transactions_skipped=transactions_skipped,
        )

    def _refresh_payload(self, account_id: str, balances: Any) -> dict[str, Any]:
        # Stored descriptive fields are carried over; only the balance is fresh.
        payload: dict[str, Any] = {"uid": account_id, "balances": balances}
        existing = self.account_service.get_account(account_id)
        if existing is not None:
            payload.update(
                name=existing.name,
                iban=existing.iban,
                currency=existing.currency,
                bank_name=existing.bank_name,
            )
        return payload


def _field(response: Any, key: str) -> Any:
    if isinstance(response, Mapping):
        return response.get(key)
    return None
