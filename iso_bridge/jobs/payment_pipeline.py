"""Payment message pipeline: ledger transaction to validated ISO 20022 document."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

from iso_bridge.domain import (
    MessageType,
    RawLedgerTransaction,
    UnsupportedMessageTypeError,
    domain_build_stage_event,
    domain_resolve_message_type,
)
from iso_bridge.mapping import (
    KycEnrichment,
    MappingContractViolationError,
    MappingPort,
    mapping_apply_kyc_enrichment,
    mapping_is_token_payment,
)
from iso_bridge.serialization import SerializerPort
from iso_bridge.validation import ValidationResult, ValidatorPort

from .interfaces import (
    IneligibleTransactionError,
    PaymentBatchOutcome,
    PaymentPipelinePort,
    PaymentPipelineResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentPipelineConfig:
    """Runtime options for the payment pipeline.

    Attributes:
        token_currency_code: Token currency accepted by the eligibility filter.
        token_issuer: Token issuer accepted by the eligibility filter.
        max_workers: Thread count for batch processing.
    """

    token_currency_code: str | None = None
    token_issuer: str | None = None
    max_workers: int = 4

    def pipeline_validate(self) -> None:
        """Validate pipeline configuration values.

        Returns:
            None: This method does not return a value.

        Raises:
            ValueError: Raised when configuration values are invalid.
        """

        if self.max_workers < 1:
            raise ValueError("config.max_workers must be >= 1")
        if bool(self.token_currency_code) != bool(self.token_issuer):
            raise ValueError("config.token_currency_code and config.token_issuer must be set together")

    @property
    def token_filter_enabled(self) -> bool:
        return bool(self.token_currency_code and self.token_issuer)


class PaymentMessagePipeline(PaymentPipelinePort):
    """Orchestrates mapper, serializer and validator for ledger payments."""

    def __init__(
        self,
        mapping_service: MappingPort,
        serializer: SerializerPort,
        validator: ValidatorPort,
        config: PaymentPipelineConfig | None = None,
    ):
        """Initialize payment pipeline.

        Args:
            mapping_service: Ledger-to-canonical mapper.
            serializer: Canonical-to-XML serializer.
            validator: XML validator.
            config: Optional pipeline configuration.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        resolved_config = config or PaymentPipelineConfig()
        resolved_config.pipeline_validate()

        self._mapping_service = mapping_service
        self._serializer = serializer
        self._validator = validator
        self._config = resolved_config

    def job_process_transaction(
        self,
        transaction: RawLedgerTransaction,
        message_type: MessageType | str = MessageType.FI_TO_FI_CREDIT_TRANSFER,
        kyc: KycEnrichment | None = None,
    ) -> PaymentPipelineResult:
        """Map, serialize and validate one transaction.

        Args:
            transaction: Raw ledger transaction.
            message_type: Target message family.
            kyc: Optional KYC/AML enrichment attached to the canonical record.

        Returns:
            PaymentPipelineResult: Record, document, validation result and stage timeline.

        Raises:
            IneligibleTransactionError: Raised when the token filter rejects the transaction.
            MappingContractViolationError: Raised when mapping fails.
            UnsupportedMessageTypeError: Raised for unsupported message families.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        stage_timeline: list[dict[str, object]] = []

        if self._config.token_filter_enabled and not mapping_is_token_payment(
            transaction,
            currency_code=self._config.token_currency_code or "",
            issuer=self._config.token_issuer or "",
        ):
            raise IneligibleTransactionError(
                f"transaction {transaction.transaction_hash or '<unhashed>'} is not a "
                f"{self._config.token_currency_code} payment"
            )

        stage_timeline.append(domain_build_stage_event(stage="map", status="started"))
        record = self._mapping_service.mapping_map_transaction(transaction, resolved_message_type)
        record = mapping_apply_kyc_enrichment(record, kyc)
        stage_timeline.append(
            domain_build_stage_event(stage="map", status="completed", details={"message_id": record.message_id})
        )

        stage_timeline.append(domain_build_stage_event(stage="serialize", status="started"))
        xml_document = self._serializer.serializer_render(record, resolved_message_type)
        stage_timeline.append(domain_build_stage_event(stage="serialize", status="completed"))

        stage_timeline.append(domain_build_stage_event(stage="validate", status="started"))
        validation_result = self._validator.validator_validate(xml_document, resolved_message_type)
        stage_timeline.append(
            domain_build_stage_event(
                stage="validate",
                status="completed",
                details={
                    "is_valid": validation_result.is_valid,
                    "error_count": len(validation_result.errors),
                    "warning_count": len(validation_result.warnings),
                },
            )
        )

        return PaymentPipelineResult(
            message_type=resolved_message_type,
            record=record,
            xml_document=xml_document,
            validation_result=validation_result,
            stage_timeline=tuple(stage_timeline),
        )

    def job_revalidate(self, xml_document: str, message_type: MessageType | str) -> ValidationResult:
        """Re-run validation on a previously generated document.

        Args:
            xml_document: Stored XML document.
            message_type: Message family of the document.

        Returns:
            ValidationResult: Fresh validation outcome.

        Raises:
            UnsupportedMessageTypeError: Raised for unsupported message families.
        """

        return self._validator.validator_validate(xml_document, message_type)

    def job_process_batch(
        self,
        transactions: Sequence[RawLedgerTransaction],
        message_type: MessageType | str = MessageType.FI_TO_FI_CREDIT_TRANSFER,
    ) -> list[PaymentBatchOutcome]:
        """Process independent transactions concurrently.

        A failure of one transaction is captured in its outcome and never
        affects the others.

        Args:
            transactions: Raw ledger transactions.
            message_type: Target message family.

        Returns:
            list[PaymentBatchOutcome]: Outcomes in input order.

        Raises:
            UnsupportedMessageTypeError: Raised for unsupported message families.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        if not transactions:
            return []

        worker_count = min(self._config.max_workers, len(transactions))
        with ThreadPoolExecutor(max_workers=worker_count) as executor:
            return list(
                executor.map(
                    lambda transaction: self._job_process_batch_item(transaction, resolved_message_type),
                    transactions,
                )
            )

    def _job_process_batch_item(
        self,
        transaction: RawLedgerTransaction,
        message_type: MessageType,
    ) -> PaymentBatchOutcome:
        try:
            result = self.job_process_transaction(transaction, message_type)
        except (IneligibleTransactionError, MappingContractViolationError, UnsupportedMessageTypeError) as error:
            logger.warning("Skipping transaction %s: %s", transaction.transaction_hash, error)
            return PaymentBatchOutcome(transaction_hash=transaction.transaction_hash, error=str(error))
        return PaymentBatchOutcome(transaction_hash=transaction.transaction_hash, result=result)


__all__ = ["PaymentMessagePipeline", "PaymentPipelineConfig"]
