"""Job layer package for payment pipeline orchestration."""

from .interfaces import (
	IneligibleTransactionError,
	PaymentBatchOutcome,
	PaymentPipelinePort,
	PaymentPipelineResult,
)
from .payment_pipeline import PaymentMessagePipeline, PaymentPipelineConfig

__all__ = [
	"IneligibleTransactionError",
	"PaymentBatchOutcome",
	"PaymentMessagePipeline",
	"PaymentPipelineConfig",
	"PaymentPipelinePort",
	"PaymentPipelineResult",
]
