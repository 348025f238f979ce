"""Typed interfaces for pipeline-layer orchestration responsibilities."""

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from iso_bridge.domain import CanonicalPaymentRecord, MessageType, RawLedgerTransaction
from iso_bridge.mapping import KycEnrichment
from iso_bridge.validation import ValidationResult


class IneligibleTransactionError(ValueError):
    """Raised when a transaction is not a payment in the configured ledger token."""


@dataclass(frozen=True)
class PaymentPipelineResult:
    """Result contract for one processed transaction.

    Attributes:
        message_type: Message family the document was rendered as.
        record: Canonical payment record.
        xml_document: Rendered XML document.
        validation_result: Validation outcome of the document.
        stage_timeline: Structured stage events in execution order.
    """

    message_type: MessageType
    record: CanonicalPaymentRecord
    xml_document: str
    validation_result: ValidationResult
    stage_timeline: tuple[dict[str, object], ...] = field(default=())


@dataclass(frozen=True)
class PaymentBatchOutcome:
    """Per-transaction outcome of a batch run.

    Attributes:
        transaction_hash: Ledger hash of the input transaction.
        result: Pipeline result when processing succeeded.
        error: Error text when mapping or serialization failed.
    """

    transaction_hash: str
    result: PaymentPipelineResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None


class PaymentPipelinePort(Protocol):
    """Port definition for turning ledger transactions into validated messages."""

    def job_process_transaction(
        self,
        transaction: RawLedgerTransaction,
        message_type: MessageType | str,
        kyc: KycEnrichment | None = None,
    ) -> PaymentPipelineResult:
        """Map, serialize and validate one transaction.

        Args:
            transaction: Raw ledger transaction.
            message_type: Target message family.
            kyc: Optional KYC/AML enrichment.

        Returns:
            PaymentPipelineResult: Record, document and validation result.

        Raises:
            IneligibleTransactionError: Raised when the token filter rejects the transaction.
            MappingContractViolationError: Raised when mapping fails.
            UnsupportedMessageTypeError: Raised for unsupported message families.
        """

    def job_process_batch(
        self,
        transactions: Sequence[RawLedgerTransaction],
        message_type: MessageType | str,
    ) -> list[PaymentBatchOutcome]:
        """Process independent transactions concurrently.

        Args:
            transactions: Raw ledger transactions.
            message_type: Target message family.

        Returns:
            list[PaymentBatchOutcome]: Outcomes in input order.

        Raises:
            UnsupportedMessageTypeError: Raised for unsupported message families.
        """
