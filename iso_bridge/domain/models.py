"""Typed domain models shared across mapping, serialization and validation.

Raw ledger input and the canonical payment record are frozen dataclasses so
they can be handed between pipeline stages and threads without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class IssuedAmount:
    """Structured ledger amount for issued (non-native) currencies.

    Attributes:
        currency: Currency code, may be blank when the ledger omits it.
        value: Decimal amount text exactly as delivered by the ledger.
        issuer: Issuing account identifier.
    """

    currency: str | None
    value: str
    issuer: str | None = None


@dataclass(frozen=True)
class LedgerMemo:
    """One memo attached to a ledger transaction.

    Attributes:
        memo_data: Hex-encoded payload bytes.
        memo_type: Optional hex-encoded memo type.
        memo_format: Optional hex-encoded memo format.
    """

    memo_data: str | None
    memo_type: str | None = None
    memo_format: str | None = None


@dataclass(frozen=True)
class RawLedgerTransaction:
    """Raw ledger payment as fetched by the ledger-access collaborator.

    Attributes:
        transaction_type: Ledger transaction type tag (for example `Payment`).
        amount: Native-unit integer string, `IssuedAmount`, or an unrecognized raw value.
        account: Source account identifier.
        destination: Destination account identifier.
        transaction_hash: Stable unique transaction identifier.
        memos: Attached memos in ledger order.
    """

    transaction_type: str
    amount: object | None
    account: str
    destination: str
    transaction_hash: str
    memos: tuple[LedgerMemo, ...] = ()


@dataclass(frozen=True)
class PostalAddress:
    """Structured postal placeholder for ledger accounts, which carry no address."""

    address_type: str
    department: str
    street_name: str
    building_number: str
    post_code: str
    town_name: str
    country: str


@dataclass(frozen=True)
class PartyRecord:
    """Debtor or creditor party.

    Attributes:
        name: Display name, synthesized unless a resolver supplies a real one.
        identification: Ledger account identifier.
        address: Postal placeholder.
        date_of_birth: Optional KYC attribute.
        country_of_residence: Optional KYC attribute.
    """

    name: str
    identification: str
    address: PostalAddress
    date_of_birth: str | None = None
    country_of_residence: str | None = None


@dataclass(frozen=True)
class AccountRecord:
    identification: str
    currency: str


@dataclass(frozen=True)
class AmountRecord:
    currency: str
    value: str


@dataclass(frozen=True)
class RemittanceInformation:
    unstructured: str


@dataclass(frozen=True)
class RegulatoryReporting:
    """Regulatory reporting block attached by KYC/AML enrichment.

    Attributes:
        authority: Reporting authority label.
        details: Free-form authority-specific details.
    """

    authority: str
    details: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class CanonicalPaymentRecord:
    """Message-type-agnostic payment record produced by the mapper.

    Every field emitted into XML already satisfies ISO length and character
    constraints when the record is constructed.

    Attributes:
        message_id: Group header message identifier.
        instruction_id: Instruction identifier.
        end_to_end_id: End-to-end identifier.
        transaction_id: Interbank transaction identifier.
        creation_date_time: UTC ISO-8601 creation timestamp.
        number_of_transactions: Always `"1"`.
        control_sum: Decimal control sum text.
        instructed_amount: Instructed amount and currency.
        debtor: Debtor party.
        debtor_account: Debtor account.
        creditor: Creditor party.
        creditor_account: Creditor account.
        remittance_information: Unstructured remittance text.
        charge_bearer: Charge bearer code.
        purpose_code: Purpose code.
        source_transaction_hash: Unmodified ledger hash, not emitted into XML.
        regulatory_reporting: Optional KYC/AML reporting block.
    """

    message_id: str
    instruction_id: str
    end_to_end_id: str
    transaction_id: str
    creation_date_time: str
    number_of_transactions: str
    control_sum: str
    instructed_amount: AmountRecord
    debtor: PartyRecord
    debtor_account: AccountRecord
    creditor: PartyRecord
    creditor_account: AccountRecord
    remittance_information: RemittanceInformation
    charge_bearer: str
    purpose_code: str
    source_transaction_hash: str = ""
    regulatory_reporting: RegulatoryReporting | None = None
