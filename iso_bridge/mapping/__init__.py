"""Mapping layer package for ledger-to-canonical transformation boundaries."""

from .interfaces import (
	KycEnrichment,
	MalformedAmountError,
	MappingContractViolationError,
	MappingPort,
	MemoDecodeError,
)
from .service import (
	CanonicalMappingService,
	MappingServiceConfig,
	mapping_apply_kyc_enrichment,
	mapping_build_placeholder_address,
	mapping_default_account_name,
	mapping_is_token_payment,
)

__all__ = [
	"CanonicalMappingService",
	"KycEnrichment",
	"MalformedAmountError",
	"MappingContractViolationError",
	"MappingPort",
	"MappingServiceConfig",
	"MemoDecodeError",
	"mapping_apply_kyc_enrichment",
	"mapping_build_placeholder_address",
	"mapping_default_account_name",
	"mapping_is_token_payment",
]
