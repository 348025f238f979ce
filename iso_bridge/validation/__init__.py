"""Validation layer package for generated ISO 20022 documents."""

from .interfaces import (
	ValidationIssue,
	ValidationIssueKind,
	ValidationResult,
	ValidationSeverity,
	ValidatorPort,
)
from .rules import AMOUNT_PATTERN, BIC_PATTERN, MessageRuleSet, RuleTable, validation_build_default_rule_table
from .service import Iso20022ValidationService, validation_find_first_element, validation_local_name

__all__ = [
	"AMOUNT_PATTERN",
	"BIC_PATTERN",
	"Iso20022ValidationService",
	"MessageRuleSet",
	"RuleTable",
	"ValidationIssue",
	"ValidationIssueKind",
	"ValidationResult",
	"ValidationSeverity",
	"ValidatorPort",
	"validation_build_default_rule_table",
	"validation_find_first_element",
	"validation_local_name",
]
