"""Normalization of banking aggregator payloads.

The aggregator returns accounts and transactions in several shapes, and
under rate limiting it may return empty or zeroed data. Every function here
is pure: it turns one raw payload into a ``Normalized`` result holding either
a clean record or the reason the record has to be skipped. Nothing in this
module raises on malformed upstream data.
"""

import hashlib
import json
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from finledger.domain.entities import Normalized, SkipReason
from finledger.utils.amount_parser import parse_amount
from finledger.utils.date_parser import parse_date

DEFAULT_CURRENCY = "EUR"
DEFAULT_ACCOUNT_NAME = "Bank Account"
DEFAULT_BANK_NAME = "Bank"
UNKNOWN_COUNTERPARTY = "Unknown"

# IBAN fragments (bank routing codes) used to guess the bank when the
# aggregator does not name it. Best effort only.
KNOWN_BANK_ROUTING = (
    ("541001100", "N26"),
    ("72160400", "Commerzbank"),
)

STRINGIFIED_OBJECT_MARKER = "[object"

DEBIT_INDICATORS = frozenset({"DBIT", "D"})
CREDIT_INDICATORS = frozenset({"CRDT", "C"})

BALANCE_AMOUNT_FIELDS = ("amount", "balanceAmount", "balance_amount")
PREFERRED_BALANCE_TYPE = "closingBooked"

SENT_FROM_PATTERN = re.compile(r"^(.*?) Sent from", re.IGNORECASE)

# Prefix of synthetic transaction ids. Changing the prefix or the fingerprint
# layout in ``synthetic_transaction_id`` re-keys every previously synced
# transaction that has no upstream id, so both are fixed.
SYNTHETIC_ID_PREFIX = "syn-"


# Balance shapes


@dataclass(frozen=True)
class BalanceFound:
    """A balance the aggregator actually reported (possibly zero)."""

    amount: Decimal
    currency: Optional[str] = None


@dataclass(frozen=True)
class BalanceMissing:
    """No usable balance in the payload."""


Balance = BalanceFound | BalanceMissing


@dataclass(frozen=True)
class AccountRecord:
    """Normalized account ready for upsert."""

    account_id: str
    name: str
    iban: str
    balance: Balance
    currency: str
    bank_name: str


@dataclass(frozen=True)
class TransactionRecord:
    """Normalized transaction ready for upsert."""

    transaction_id: str
    account_id: str
    booking_date: date
    amount: Decimal
    currency: str
    creditor_name: Optional[str]
    debtor_name: Optional[str]
    remittance_information: str
    raw_json: str


def is_valid_identity(value: Any) -> bool:
    """Return True for a non-empty string that is not a stringified object."""
    return isinstance(value, str) and bool(value.strip()) and STRINGIFIED_OBJECT_MARKER not in value


def derive_account_id(payload: Mapping[str, Any]) -> Optional[str]:
    """Resolve the account identity: uid, then account_id, then iban.

    The first present value wins. If it is not a valid identity the IBAN is
    tried as a fallback; None means no valid identity exists.
    """
    candidate = payload.get("uid") or payload.get("account_id") or payload.get("iban")
    if is_valid_identity(candidate):
        return candidate.strip()

    iban = payload.get("iban")
    if is_valid_identity(iban):
        return iban.strip()
    return None


def infer_bank_name(iban: str) -> str:
    """Guess the bank from known routing fragments in the IBAN."""
    compact = (iban or "").replace(" ", "")
    for fragment, bank_name in KNOWN_BANK_ROUTING:
        if fragment in compact:
            return bank_name
    return DEFAULT_BANK_NAME


def _amount_or_none(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return parse_amount(value)
    except ValueError:
        return None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _balance_from_entry(entry: Any) -> Balance:
    if not isinstance(entry, Mapping):
        return BalanceMissing()
    for field_name in BALANCE_AMOUNT_FIELDS:
        amount_obj = entry.get(field_name)
        if isinstance(amount_obj, Mapping):
            amount = _amount_or_none(amount_obj.get("amount"))
            if amount is not None:
                return BalanceFound(amount=amount, currency=_text(amount_obj.get("currency")))
    return BalanceMissing()


def extract_balance(balances: Any) -> Balance:
    """Extract the balance from any known upstream shape.

    Shapes, in order:
    - object form ``{"current": 12.5, "iso_currency_code": "EUR"}``
    - array form ``[{"amount": {"amount": "12.50", "currency": "EUR"}}, ...]``,
      with ``balanceAmount`` and ``balance_amount`` accepted for ``amount``;
      the ``closingBooked`` entry is preferred over the first one
    - anything else is ``BalanceMissing``
    """
    if isinstance(balances, Mapping):
        if "current" not in balances:
            return BalanceMissing()
        amount = _amount_or_none(balances.get("current"))
        if amount is None:
            return BalanceMissing()
        return BalanceFound(amount=amount, currency=_text(balances.get("iso_currency_code")))

    if isinstance(balances, list) and balances:
        preferred = next(
            (
                entry
                for entry in balances
                if isinstance(entry, Mapping)
                and PREFERRED_BALANCE_TYPE
                in (entry.get("balance_type"), entry.get("balanceType"))
            ),
            None,
        )
        if preferred is not None:
            found = _balance_from_entry(preferred)
            if isinstance(found, BalanceFound):
                return found
        return _balance_from_entry(balances[0])

    return BalanceMissing()


def normalize_account(payload: Any) -> Normalized[AccountRecord]:
    """Normalize one raw account payload."""
    if not isinstance(payload, Mapping):
        return Normalized.skip(SkipReason.NOT_A_MAPPING, type(payload).__name__)

    account_id = derive_account_id(payload)
    if account_id is None:
        return Normalized.skip(
            SkipReason.INVALID_IDENTITY,
            repr(payload.get("uid") or payload.get("account_id") or payload.get("iban")),
        )

    balance = extract_balance(payload.get("balances"))
    iban = _text(payload.get("iban")) or ""
    balance_currency = balance.currency if isinstance(balance, BalanceFound) else None

    return Normalized(
        value=AccountRecord(
            account_id=account_id,
            name=_text(payload.get("name")) or DEFAULT_ACCOUNT_NAME,
            iban=iban,
            balance=balance,
            currency=_text(payload.get("currency")) or balance_currency or DEFAULT_CURRENCY,
            bank_name=_text(payload.get("bank_name")) or infer_bank_name(iban),
        )
    )


def _unwrap_mapped_transaction(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    # Already-mapped transactions carry the original payload under "raw".
    raw = payload.get("raw")
    if payload.get("transactionId") and "transaction_amount" not in payload and isinstance(raw, Mapping):
        return raw
    return payload


def _party_name(payload: Mapping[str, Any], role: str) -> Optional[str]:
    party = payload.get(role)
    if isinstance(party, Mapping) and _text(party.get("name")):
        return _text(party.get("name"))
    camel = role + "Name"
    return _text(payload.get(f"{role}_name")) or _text(payload.get(camel))


def _remittance(payload: Mapping[str, Any]) -> str:
    for key in (
        "remittance_information",
        "remittance_information_unstructured",
        "remittance_information_structured",
        "remittanceInformation",
    ):
        value = payload.get(key)
        if isinstance(value, list):
            joined = " ".join(str(part) for part in value if part is not None).strip()
            if joined:
                return joined
        elif isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def counterparty_from_remittance(remittance: str) -> Optional[str]:
    """Extract the name from remittance text like "<Name> Sent from <Bank>"."""
    match = SENT_FROM_PATTERN.match(remittance or "")
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def signed_amount(amount: Decimal, indicator: Any) -> Decimal:
    """Force the sign of an amount from its credit/debit indicator.

    Debits become negative and credits positive whatever the raw sign; an
    unknown or missing indicator leaves the amount as reported.
    """
    code = indicator.strip().upper() if isinstance(indicator, str) else None
    if code in DEBIT_INDICATORS:
        return -abs(amount)
    if code in CREDIT_INDICATORS:
        return abs(amount)
    return amount


def synthetic_transaction_id(account_id: str, booking_date: str, amount: Decimal) -> str:
    """Deterministic identity for a transaction without an upstream id.

    The fingerprint is the SHA-256 of ``"<account_id>|<booking_date>|<amount>"``
    with the amount fixed to two decimals, so the same bank transaction maps
    to the same row on every sync.
    """
    fingerprint = f"{account_id}|{booking_date}|{amount:.2f}"
    return SYNTHETIC_ID_PREFIX + hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()


def normalize_transaction(payload: Any, account_id: str) -> Normalized[TransactionRecord]:
    """Normalize one raw transaction payload for the given account."""
    if not isinstance(payload, Mapping):
        return Normalized.skip(SkipReason.NOT_A_MAPPING, type(payload).__name__)
    if not is_valid_identity(account_id):
        return Normalized.skip(SkipReason.INVALID_IDENTITY, repr(account_id))

    payload = _unwrap_mapped_transaction(payload)

    amount_obj = payload.get("transaction_amount")
    currency = DEFAULT_CURRENCY
    if isinstance(amount_obj, Mapping) and amount_obj.get("amount") not in (None, ""):
        raw_amount = amount_obj.get("amount")
        currency = _text(amount_obj.get("currency")) or DEFAULT_CURRENCY
    elif payload.get("amount") not in (None, ""):
        raw_amount = payload.get("amount")
        currency = _text(payload.get("currency")) or DEFAULT_CURRENCY
    else:
        return Normalized.skip(SkipReason.MISSING_AMOUNT)

    try:
        amount = parse_amount(raw_amount)
    except ValueError as e:
        return Normalized.skip(SkipReason.INVALID_AMOUNT, str(e))
    amount = signed_amount(amount, payload.get("credit_debit_indicator"))

    booking_raw = payload.get("booking_date") or payload.get("bookingDate")
    effective_raw = payload.get("value_date") or booking_raw
    try:
        booking_date = parse_date(effective_raw) if effective_raw else date.today()
    except ValueError as e:
        return Normalized.skip(SkipReason.INVALID_DATE, str(e))

    transaction_id = next(
        (
            str(candidate).strip()
            for candidate in (
                payload.get("transaction_id"),
                payload.get("transactionId"),
                payload.get("entry_reference"),
            )
            if candidate not in (None, "") and is_valid_identity(str(candidate))
        ),
        None,
    )
    if transaction_id is None:
        transaction_id = synthetic_transaction_id(
            account_id, str(booking_raw or effective_raw or ""), amount
        )

    creditor_name = _party_name(payload, "creditor")
    debtor_name = _party_name(payload, "debtor")
    remittance = _remittance(payload)
    if creditor_name is None and debtor_name is None:
        creditor_name = counterparty_from_remittance(remittance)

    return Normalized(
        value=TransactionRecord(
            transaction_id=transaction_id,
            account_id=account_id,
            booking_date=booking_date,
            amount=amount,
            currency=currency,
            creditor_name=creditor_name,
            debtor_name=debtor_name,
            remittance_information=remittance,
            raw_json=json.dumps(payload, sort_keys=True, default=str),
        )
    )


def display_name(
    creditor_name: Optional[str], debtor_name: Optional[str], remittance: str
) -> str:
    """Resolve the counterparty shown for a transaction."""
    return (
        creditor_name
        or debtor_name
        or counterparty_from_remittance(remittance)
        or UNKNOWN_COUNTERPARTY
    )
