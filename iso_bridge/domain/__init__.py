"""Domain models used across mapping, serialization and validation boundaries."""

from .ledger_parsing import (
	domain_ledger_normalize_optional_text,
	domain_ledger_parse_amount,
	domain_ledger_parse_transaction,
)
from .message_types import MessageType, UnsupportedMessageTypeError, domain_resolve_message_type
from .models import (
	AccountRecord,
	AmountRecord,
	CanonicalPaymentRecord,
	IssuedAmount,
	LedgerMemo,
	PartyRecord,
	PostalAddress,
	RawLedgerTransaction,
	RegulatoryReporting,
	RemittanceInformation,
)
from .timeline import domain_build_stage_event

__all__ = [
	"AccountRecord",
	"AmountRecord",
	"CanonicalPaymentRecord",
	"IssuedAmount",
	"LedgerMemo",
	"MessageType",
	"PartyRecord",
	"PostalAddress",
	"RawLedgerTransaction",
	"RegulatoryReporting",
	"RemittanceInformation",
	"UnsupportedMessageTypeError",
	"domain_build_stage_event",
	"domain_ledger_normalize_optional_text",
	"domain_ledger_parse_amount",
	"domain_ledger_parse_transaction",
	"domain_resolve_message_type",
]
