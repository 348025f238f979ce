"""Typed interfaces for ledger-to-canonical mapping."""

from dataclasses import dataclass, field
from typing import Mapping, Protocol

from iso_bridge.domain import CanonicalPaymentRecord, MessageType, RawLedgerTransaction


class MappingContractViolationError(ValueError):
    """Raised when a raw transaction cannot satisfy canonical mapping contract requirements."""


class MalformedAmountError(MappingContractViolationError):
    """Raised when the ledger amount is absent or has an unrecognized shape."""


class MemoDecodeError(MappingContractViolationError):
    """Raised when a memo payload is not valid hex or does not decode as UTF-8."""


@dataclass(frozen=True)
class KycEnrichment:
    """KYC/AML attributes supplied by a compliance collaborator.

    Attributes:
        authority: Regulatory reporting authority label.
        details: Authority-specific reporting details.
        debtor_date_of_birth: Debtor date of birth.
        debtor_country: Debtor country of residence.
        creditor_date_of_birth: Creditor date of birth.
        creditor_country: Creditor country of residence.
    """

    authority: str = "LOCAL"
    details: Mapping[str, object] = field(default_factory=dict)
    debtor_date_of_birth: str | None = None
    debtor_country: str | None = None
    creditor_date_of_birth: str | None = None
    creditor_country: str | None = None


class MappingPort(Protocol):
    """Port definition for mapping raw ledger transactions to canonical records."""

    def mapping_map_transaction(
        self,
        transaction: RawLedgerTransaction,
        message_type: MessageType | str,
    ) -> CanonicalPaymentRecord:
        """Map one raw ledger transaction into a canonical payment record.

        Args:
            transaction: Raw ledger transaction.
            message_type: Target message family.

        Returns:
            CanonicalPaymentRecord: Canonical record ready for serialization.

        Raises:
            MalformedAmountError: Raised when the amount is absent or unrecognized.
            MemoDecodeError: Raised when the first memo payload cannot be decoded.
        """
