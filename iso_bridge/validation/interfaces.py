"""Typed interfaces and result values for ISO 20022 document validation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol

from iso_bridge.adapters import ConformanceCheckResult
from iso_bridge.domain import MessageType


class ValidationIssueKind(str, Enum):
    """Kinds of findings the validator can report."""

    MALFORMED_XML = "MalformedXML"
    RULE_MISSING = "RuleViolation.Missing"
    RULE_TOO_LONG = "RuleViolation.TooLong"
    RULE_PATTERN_MISMATCH = "RuleViolation.PatternMismatch"
    ELEMENT_MISSING = "ElementMissing"
    INVALID_BIC = "InvalidBIC"
    INVALID_AMOUNT_FORMAT = "InvalidAmountFormat"
    EXTERNAL_VALIDATOR_UNAVAILABLE = "ExternalValidatorUnavailable"
    EXTERNAL_VALIDATOR_REPORTED = "ExternalValidatorReported"


class ValidationSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """One validation finding.

    Attributes:
        kind: Finding kind.
        severity: Error or warning.
        message: Human-readable description.
        subject: Field, element or value the finding is about.
    """

    kind: ValidationIssueKind
    severity: ValidationSeverity
    message: str
    subject: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Immutable outcome of one validation call.

    Attributes:
        is_valid: True only when no error-severity finding was recorded.
        errors: Error messages in discovery order.
        warnings: Warning messages in discovery order.
        issues: Typed findings backing `errors` and `warnings`.
        external_check: Verdict of the external checker when it was reachable.
    """

    is_valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    issues: tuple[ValidationIssue, ...] = ()
    external_check: ConformanceCheckResult | None = None

    @classmethod
    def from_issues(
        cls,
        issues: Iterable[ValidationIssue],
        external_check: ConformanceCheckResult | None = None,
    ) -> ValidationResult:
        collected_issues = tuple(issues)
        errors = tuple(issue.message for issue in collected_issues if issue.severity is ValidationSeverity.ERROR)
        warnings = tuple(issue.message for issue in collected_issues if issue.severity is ValidationSeverity.WARNING)
        return cls(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            issues=collected_issues,
            external_check=external_check,
        )

    def issues_of_kind(self, kind: ValidationIssueKind) -> tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.kind is kind)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-compatible summary for persistence and HTTP collaborators.

        Returns:
            dict[str, object]: `isValid`, `errors`, `warnings` and optional `externalCheck`.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        payload: dict[str, object] = {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
        if self.external_check is not None:
            payload["externalCheck"] = {
                "valid": self.external_check.valid,
                "errors": list(self.external_check.errors),
                "warnings": list(self.external_check.warnings),
            }
        return payload


class ValidatorPort(Protocol):
    """Port definition for validating generated ISO 20022 documents."""

    def validator_validate(self, xml_document: str, message_type: MessageType | str) -> ValidationResult:
        """Validate one XML document exhaustively.

        Args:
            xml_document: XML document text.
            message_type: Message family the document claims to be.

        Returns:
            ValidationResult: Every finding of the call.

        Raises:
            UnsupportedMessageTypeError: Raised for selectors outside the supported families.
        """
