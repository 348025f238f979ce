"""Regression tests for ledger JSON payload parsing."""

import pytest

from iso_bridge.domain import IssuedAmount, LedgerMemo, MessageType, UnsupportedMessageTypeError
from iso_bridge.domain import domain_ledger_normalize_optional_text, domain_ledger_parse_transaction
from iso_bridge.domain import domain_resolve_message_type


def test_domain_ledger_parse_transaction_reads_flat_payment_payload() -> None:
    """Parse a flat ledger payment payload with issued amount and memo.

    Returns:
        None: Assertions validate parsed transaction fields.

    Raises:
        AssertionError: Raised when parsed fields differ from payload.
    """

    transaction = domain_ledger_parse_transaction(
        {
            "TransactionType": "Payment",
            "Amount": {"currency": "HCT", "value": "100.00", "issuer": "rISSUER"},
            "Account": "rDEBTOR123",
            "Destination": "rCREDITOR456",
            "hash": "TXN-001",
            "Memos": [{"Memo": {"MemoData": "48656C6C6F", "MemoType": "74657874"}}],
        }
    )

    assert transaction.transaction_type == "Payment"
    assert transaction.amount == IssuedAmount(currency="HCT", value="100.00", issuer="rISSUER")
    assert transaction.account == "rDEBTOR123"
    assert transaction.destination == "rCREDITOR456"
    assert transaction.transaction_hash == "TXN-001"
    assert transaction.memos == (LedgerMemo(memo_data="48656C6C6F", memo_type="74657874", memo_format=None),)


def test_domain_ledger_parse_transaction_reads_tx_json_envelope_with_deliver_max() -> None:
    """Parse API-v2 payloads where fields live under `tx_json` and amount is `DeliverMax`.

    Returns:
        None: Assertions validate envelope unwrapping.

    Raises:
        AssertionError: Raised when envelope fields are ignored.
    """

    transaction = domain_ledger_parse_transaction(
        {
            "hash": "ABC123",
            "tx_json": {
                "TransactionType": "Payment",
                "DeliverMax": "15000000",
                "Account": "rSOURCE",
                "Destination": "rTARGET",
            },
        }
    )

    assert transaction.amount == "15000000"
    assert transaction.transaction_hash == "ABC123"
    assert transaction.memos == ()


def test_domain_ledger_parse_transaction_keeps_unrecognized_amount_shape() -> None:
    """Pass amounts without a `value` through untouched so the mapper can reject them.

    Returns:
        None: Assertions validate raw amount passthrough.

    Raises:
        AssertionError: Raised when unknown shapes are coerced.
    """

    transaction = domain_ledger_parse_transaction(
        {"Account": "rA", "Destination": "rB", "Amount": {"currency": "HCT"}}
    )

    assert transaction.amount == {"currency": "HCT"}
    assert transaction.transaction_hash == ""


def test_domain_ledger_parse_transaction_rejects_missing_accounts() -> None:
    """Reject payloads without source or destination accounts.

    Returns:
        None: Assertions validate contract errors.

    Raises:
        AssertionError: Raised when missing accounts are accepted.
    """

    with pytest.raises(ValueError, match="Account"):
        domain_ledger_parse_transaction({"Destination": "rB", "Amount": "1"})
    with pytest.raises(ValueError, match="Destination"):
        domain_ledger_parse_transaction({"Account": "rA", "Amount": "1"})
    with pytest.raises(ValueError, match="JSON object"):
        domain_ledger_parse_transaction(["not", "an", "object"])  # type: ignore[arg-type]


def test_domain_ledger_normalize_optional_text_maps_null_sentinels_to_none() -> None:
    assert domain_ledger_normalize_optional_text(None) is None
    assert domain_ledger_normalize_optional_text(5) is None
    assert domain_ledger_normalize_optional_text("  ") is None
    assert domain_ledger_normalize_optional_text("N/A") is None
    assert domain_ledger_normalize_optional_text(" rA ") == "rA"


def test_domain_resolve_message_type_accepts_selectors_and_rejects_others() -> None:
    """Resolve selector text and enum names, rejecting anything else.

    Returns:
        None: Assertions validate closed enum resolution.

    Raises:
        AssertionError: Raised when resolution is incorrect.
    """

    assert domain_resolve_message_type("pacs.008") is MessageType.FI_TO_FI_CREDIT_TRANSFER
    assert domain_resolve_message_type(" pain.001 ") is MessageType.CREDIT_TRANSFER_INITIATION
    assert domain_resolve_message_type("CREDIT_TRANSFER_INITIATION") is MessageType.CREDIT_TRANSFER_INITIATION
    with pytest.raises(UnsupportedMessageTypeError):
        domain_resolve_message_type("camt.053")
    with pytest.raises(UnsupportedMessageTypeError):
        domain_resolve_message_type(None)  # type: ignore[arg-type]
