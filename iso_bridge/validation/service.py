"""Rule-table driven validation service for generated ISO 20022 documents.

Validation collects every finding in one pass. Only a document that is not
well-formed XML short-circuits, because no further check can run on it.

Field lookup is a depth-first search that returns the first element in
document order whose local tag name matches, ignoring namespaces. It cannot
tell apart same-named fields under different transaction blocks, which is
acceptable only while messages carry a single transaction. Multi-transaction
messages need a path-qualified lookup keyed by transaction index instead.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as element_tree

from iso_bridge.adapters import ConformanceCheckResult, ConformancePort, ConformanceUnavailableError
from iso_bridge.domain import MessageType, domain_resolve_message_type

from .interfaces import (
    ValidationIssue,
    ValidationIssueKind,
    ValidationResult,
    ValidationSeverity,
    ValidatorPort,
)
from .rules import MessageRuleSet, RuleTable, validation_build_default_rule_table

logger = logging.getLogger(__name__)


def validation_local_name(tag: object) -> str:
    """Return an element tag without its `{namespace}` prefix.

    Args:
        tag: ElementTree tag value.

    Returns:
        str: Local tag name; empty for comments and processing instructions.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def validation_find_first_element(root: element_tree.Element, local_name: str) -> element_tree.Element | None:
    """Depth-first search for the first element with a given local tag name.

    Args:
        root: Parsed document root.
        local_name: Tag name without namespace.

    Returns:
        xml.etree.ElementTree.Element | None: First match in document order.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    for element in root.iter():
        if validation_local_name(element.tag) == local_name:
            return element
    return None


def _validation_element_text(element: element_tree.Element) -> str:
    return (element.text or "").strip()


class Iso20022ValidationService(ValidatorPort):
    """Validator combining well-formedness, rule-table and format checks."""

    def __init__(
        self,
        rule_table: RuleTable | None = None,
        conformance_client: ConformancePort | None = None,
    ):
        """Initialize validation service.

        Args:
            rule_table: Immutable rule table; a default table is built when omitted.
            conformance_client: Optional external conformance checker.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: Initializer does not raise runtime errors.
        """

        self._rule_table = rule_table or validation_build_default_rule_table()
        self._conformance_client = conformance_client

    def validator_validate(self, xml_document: str, message_type: MessageType | str) -> ValidationResult:
        """Validate one XML document exhaustively.

        Args:
            xml_document: XML document text.
            message_type: Message family the document claims to be.

        Returns:
            ValidationResult: Every local finding plus the merged external verdict.

        Raises:
            UnsupportedMessageTypeError: Raised for selectors outside the supported families.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        root, issues = self._validator_run_local_checks(xml_document, resolved_message_type)
        if root is None:
            return ValidationResult.from_issues(issues)

        external_check: ConformanceCheckResult | None = None
        if self._conformance_client is not None:
            try:
                external_check = self._conformance_client.adapter_check(xml_document, resolved_message_type)
            except ConformanceUnavailableError as error:
                issues.append(self._validator_unavailable_issue(error))
            else:
                issues.extend(self._validator_external_issues(external_check))

        return self._validator_finish(issues, external_check, resolved_message_type)

    async def validator_validate_async(
        self,
        xml_document: str,
        message_type: MessageType | str,
    ) -> ValidationResult:
        """Awaitable variant of `validator_validate`.

        Local checks run inline; only the external conformance call suspends, so
        concurrent validations never wait on each other's checker round-trips.

        Args:
            xml_document: XML document text.
            message_type: Message family the document claims to be.

        Returns:
            ValidationResult: Every local finding plus the merged external verdict.

        Raises:
            UnsupportedMessageTypeError: Raised for selectors outside the supported families.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        root, issues = self._validator_run_local_checks(xml_document, resolved_message_type)
        if root is None:
            return ValidationResult.from_issues(issues)

        external_check: ConformanceCheckResult | None = None
        if self._conformance_client is not None:
            try:
                external_check = await self._conformance_client.adapter_check_async(
                    xml_document,
                    resolved_message_type,
                )
            except ConformanceUnavailableError as error:
                issues.append(self._validator_unavailable_issue(error))
            else:
                issues.extend(self._validator_external_issues(external_check))

        return self._validator_finish(issues, external_check, resolved_message_type)

    def _validator_run_local_checks(
        self,
        xml_document: str,
        message_type: MessageType,
    ) -> tuple[element_tree.Element | None, list[ValidationIssue]]:
        rule_set = self._rule_table.rules_for(message_type)
        root, parse_issue = self._validator_parse(xml_document)
        if root is None:
            return None, [parse_issue]

        issues: list[ValidationIssue] = []
        issues.extend(self._validator_check_rules(root, rule_set))
        issues.extend(self._validator_check_elements(root, rule_set))
        issues.extend(self._validator_check_formats(root))
        return root, issues

    def _validator_parse(self, xml_document: object) -> tuple[element_tree.Element | None, ValidationIssue | None]:
        """Parse document text, converting parse failures into one `MalformedXML` issue.

        Args:
            xml_document: Candidate XML document.

        Returns:
            tuple: Parsed root and None, or None and the malformed-XML issue.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        if not isinstance(xml_document, str):
            return None, ValidationIssue(
                kind=ValidationIssueKind.MALFORMED_XML,
                severity=ValidationSeverity.ERROR,
                message="XML structure invalid: document must be text",
            )

        try:
            return element_tree.fromstring(xml_document.encode("utf-8")), None
        except element_tree.ParseError as error:
            return None, ValidationIssue(
                kind=ValidationIssueKind.MALFORMED_XML,
                severity=ValidationSeverity.ERROR,
                message=f"XML structure invalid: {error}",
            )

    def _validator_check_rules(self, root: element_tree.Element, rule_set: MessageRuleSet) -> list[ValidationIssue]:
        """Apply required-field, max-length and pattern rules.

        Args:
            root: Parsed document root.
            rule_set: Rules of the message family.

        Returns:
            list[ValidationIssue]: Findings in rule declaration order.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        issues: list[ValidationIssue] = []
        for field_name in rule_set.required_fields:
            element = validation_find_first_element(root, field_name)
            if element is None or not _validation_element_text(element):
                issues.append(
                    ValidationIssue(
                        kind=ValidationIssueKind.RULE_MISSING,
                        severity=ValidationSeverity.ERROR,
                        message=f"Required field {field_name} is missing",
                        subject=field_name,
                    )
                )

        for field_name, max_length in rule_set.max_lengths.items():
            element = validation_find_first_element(root, field_name)
            if element is None:
                continue
            if len(_validation_element_text(element)) > max_length:
                issues.append(
                    ValidationIssue(
                        kind=ValidationIssueKind.RULE_TOO_LONG,
                        severity=ValidationSeverity.ERROR,
                        message=f"Field {field_name} exceeds maximum length of {max_length}",
                        subject=field_name,
                    )
                )

        for field_name, pattern in rule_set.patterns.items():
            element = validation_find_first_element(root, field_name)
            if element is None:
                continue
            value = _validation_element_text(element)
            if value and pattern.fullmatch(value) is None:
                issues.append(
                    ValidationIssue(
                        kind=ValidationIssueKind.RULE_PATTERN_MISMATCH,
                        severity=ValidationSeverity.ERROR,
                        message=f"Field {field_name} does not match required pattern",
                        subject=field_name,
                    )
                )
        return issues

    def _validator_check_elements(self, root: element_tree.Element, rule_set: MessageRuleSet) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for element_name in rule_set.required_elements:
            if validation_find_first_element(root, element_name) is None:
                issues.append(
                    ValidationIssue(
                        kind=ValidationIssueKind.ELEMENT_MISSING,
                        severity=ValidationSeverity.ERROR,
                        message=f"Required element {element_name} is missing",
                        subject=element_name,
                    )
                )
        return issues

    def _validator_check_formats(self, root: element_tree.Element) -> list[ValidationIssue]:
        """Check every BIC and amount element in document order.

        Args:
            root: Parsed document root.

        Returns:
            list[ValidationIssue]: One finding per offending element.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        issues: list[ValidationIssue] = []
        for element in root.iter():
            local_name = validation_local_name(element.tag)
            value = _validation_element_text(element)
            if local_name in self._rule_table.bic_element_names:
                if self._rule_table.bic_pattern.fullmatch(value) is None:
                    issues.append(
                        ValidationIssue(
                            kind=ValidationIssueKind.INVALID_BIC,
                            severity=ValidationSeverity.ERROR,
                            message=f"Invalid BIC format: {value}",
                            subject=value,
                        )
                    )
            elif local_name in self._rule_table.amount_element_names:
                if self._rule_table.amount_pattern.fullmatch(value) is None:
                    issues.append(
                        ValidationIssue(
                            kind=ValidationIssueKind.INVALID_AMOUNT_FORMAT,
                            severity=ValidationSeverity.ERROR,
                            message=f"Invalid amount format in {local_name}: {value}",
                            subject=value,
                        )
                    )
        return issues

    def _validator_unavailable_issue(self, error: ConformanceUnavailableError) -> ValidationIssue:
        logger.warning("External conformance validator unavailable: %s", error)
        return ValidationIssue(
            kind=ValidationIssueKind.EXTERNAL_VALIDATOR_UNAVAILABLE,
            severity=ValidationSeverity.WARNING,
            message=f"External validator unavailable: {error}",
        )

    def _validator_external_issues(self, external_check: ConformanceCheckResult) -> list[ValidationIssue]:
        """Translate an external verdict into additive findings.

        Args:
            external_check: Verdict from the conformance checker.

        Returns:
            list[ValidationIssue]: Reported errors and warnings; a generic error when
            the checker rejected the document without listing errors.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        issues = [
            ValidationIssue(
                kind=ValidationIssueKind.EXTERNAL_VALIDATOR_REPORTED,
                severity=ValidationSeverity.ERROR,
                message=f"External validator: {message}",
            )
            for message in external_check.errors
        ]
        if external_check.valid is False and not external_check.errors:
            issues.append(
                ValidationIssue(
                    kind=ValidationIssueKind.EXTERNAL_VALIDATOR_REPORTED,
                    severity=ValidationSeverity.ERROR,
                    message="External validator: document rejected",
                )
            )
        issues.extend(
            ValidationIssue(
                kind=ValidationIssueKind.EXTERNAL_VALIDATOR_REPORTED,
                severity=ValidationSeverity.WARNING,
                message=f"External validator: {message}",
            )
            for message in external_check.warnings
        )
        return issues

    def _validator_finish(
        self,
        issues: list[ValidationIssue],
        external_check: ConformanceCheckResult | None,
        message_type: MessageType,
    ) -> ValidationResult:
        result = ValidationResult.from_issues(issues, external_check=external_check)
        logger.info(
            "Validation of %s document completed: valid=%s errors=%d warnings=%d",
            message_type.value,
            result.is_valid,
            len(result.errors),
            len(result.warnings),
        )
        return result


__all__ = ["Iso20022ValidationService", "validation_find_first_element", "validation_local_name"]
