"""Ledger JSON payload parsing into `RawLedgerTransaction` values.

The ledger-access collaborator hands over transactions in the ledger's native
JSON shape. Both the flat API-v1 layout and the API-v2 layout, where fields sit
under `tx_json` and payments carry `DeliverMax` instead of `Amount`, are
accepted so the mapper never has to know which one it received.
"""

from __future__ import annotations

from typing import Mapping

from .models import IssuedAmount, LedgerMemo, RawLedgerTransaction

_DOMAIN_LEDGER_NULL_SENTINELS = frozenset({"-", "--", "N/A"})


def domain_ledger_normalize_optional_text(value: object | None) -> str | None:
    """Normalize one optional ledger text value using the shared null-sentinel policy.

    Args:
        value: Candidate value from a ledger payload.

    Returns:
        str | None: Stripped text, or None when missing, non-text or a sentinel.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None:
        return None
    if not isinstance(value, str):
        return None

    normalized_value = value.strip()
    if not normalized_value:
        return None
    if normalized_value in _DOMAIN_LEDGER_NULL_SENTINELS:
        return None
    return normalized_value


def domain_ledger_parse_amount(value: object | None) -> object | None:
    """Parse a ledger amount field into its typed representation.

    Args:
        value: `Amount` value from the payload.

    Returns:
        object | None: Native-unit string, `IssuedAmount` for objects carrying a
        `value`, the raw value for any other shape, or None when absent.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping) and "value" in value:
        raw_value = value.get("value")
        if isinstance(raw_value, (str, int, float)) and not isinstance(raw_value, bool) and str(raw_value).strip():
            return IssuedAmount(
                currency=domain_ledger_normalize_optional_text(value.get("currency")),
                value=str(raw_value).strip(),
                issuer=domain_ledger_normalize_optional_text(value.get("issuer")),
            )
    return value


def domain_ledger_parse_memos(value: object | None) -> tuple[LedgerMemo, ...]:
    """Parse the `Memos` array, skipping entries without a `Memo` object.

    Args:
        value: `Memos` value from the payload.

    Returns:
        tuple[LedgerMemo, ...]: Memos in ledger order.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not isinstance(value, (list, tuple)):
        return ()

    memos: list[LedgerMemo] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        memo_payload = entry.get("Memo", entry)
        if not isinstance(memo_payload, Mapping):
            continue
        memos.append(
            LedgerMemo(
                memo_data=domain_ledger_normalize_optional_text(memo_payload.get("MemoData")),
                memo_type=domain_ledger_normalize_optional_text(memo_payload.get("MemoType")),
                memo_format=domain_ledger_normalize_optional_text(memo_payload.get("MemoFormat")),
            )
        )
    return tuple(memos)


def domain_ledger_parse_transaction(payload: Mapping[str, object]) -> RawLedgerTransaction:
    """Parse one ledger transaction payload.

    Args:
        payload: Transaction JSON object as returned by the ledger node.

    Returns:
        RawLedgerTransaction: Immutable raw transaction value.

    Raises:
        ValueError: Raised when payload is not an object or misses account fields.
    """

    if not isinstance(payload, Mapping):
        raise ValueError("ledger transaction payload must be a JSON object")

    fields: dict[str, object] = dict(payload)
    envelope = payload.get("tx_json")
    if isinstance(envelope, Mapping):
        fields.update(envelope)

    account = domain_ledger_normalize_optional_text(fields.get("Account"))
    destination = domain_ledger_normalize_optional_text(fields.get("Destination"))
    if account is None:
        raise ValueError("ledger transaction payload missing Account")
    if destination is None:
        raise ValueError("ledger transaction payload missing Destination")

    raw_amount = fields.get("Amount")
    if raw_amount is None:
        raw_amount = fields.get("DeliverMax")

    return RawLedgerTransaction(
        transaction_type=domain_ledger_normalize_optional_text(fields.get("TransactionType")) or "",
        amount=domain_ledger_parse_amount(raw_amount),
        account=account,
        destination=destination,
        transaction_hash=domain_ledger_normalize_optional_text(fields.get("hash")) or "",
        memos=domain_ledger_parse_memos(fields.get("Memos")),
    )


__all__ = [
    "domain_ledger_normalize_optional_text",
    "domain_ledger_parse_amount",
    "domain_ledger_parse_memos",
    "domain_ledger_parse_transaction",
]
