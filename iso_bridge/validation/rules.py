"""Immutable rule table driving ISO 20022 document validation.

The table is built once and handed to the validator at construction. All
collections are frozen (tuples, read-only mappings, compiled patterns), so a
single table can be shared by concurrent validations without locking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Mapping

from iso_bridge.domain import MessageType, UnsupportedMessageTypeError, domain_resolve_message_type

BIC_PATTERN: Final[str] = r"[A-Z]{6}[A-Z0-9]{2}([A-Z0-9]{3})?"
AMOUNT_PATTERN: Final[str] = r"\d+(\.\d{1,5})?"

_RULES_MESSAGE_ID_PATTERN: Final[str] = r"[A-Za-z0-9\-]+"
_RULES_DATE_TIME_PATTERN: Final[str] = r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,9})?(Z|[+-]\d{2}:\d{2})?"
_RULES_COUNT_PATTERN: Final[str] = r"[0-9]{1,15}"


@dataclass(frozen=True)
class MessageRuleSet:
    """Rules for one message family.

    Attributes:
        required_fields: Leaf field tags that must be present with content, in reporting order.
        max_lengths: Maximum text length per field tag.
        patterns: Full-match pattern per field tag.
        required_elements: Structural element tags that must be present.
    """

    required_fields: tuple[str, ...]
    max_lengths: Mapping[str, int] = field(default_factory=dict)
    patterns: Mapping[str, re.Pattern[str]] = field(default_factory=dict)
    required_elements: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "required_fields", tuple(self.required_fields))
        object.__setattr__(self, "max_lengths", MappingProxyType(dict(self.max_lengths)))
        object.__setattr__(self, "patterns", MappingProxyType(dict(self.patterns)))
        object.__setattr__(self, "required_elements", tuple(self.required_elements))


@dataclass(frozen=True)
class RuleTable:
    """Per-message-family rules plus the format rules shared by all families.

    Attributes:
        rule_sets: Rule set per message family.
        bic_element_names: Element tags holding bank identifier codes.
        bic_pattern: Full-match BIC pattern.
        amount_element_names: Element tags holding instructed/settlement amounts.
        amount_pattern: Full-match amount pattern.
    """

    rule_sets: Mapping[MessageType, MessageRuleSet]
    bic_element_names: frozenset[str] = frozenset({"BIC", "BICFI", "AnyBIC"})
    bic_pattern: re.Pattern[str] = re.compile(BIC_PATTERN)
    amount_element_names: frozenset[str] = frozenset({"InstdAmt", "IntrBkSttlmAmt"})
    amount_pattern: re.Pattern[str] = re.compile(AMOUNT_PATTERN)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rule_sets", MappingProxyType(dict(self.rule_sets)))
        object.__setattr__(self, "bic_element_names", frozenset(self.bic_element_names))
        object.__setattr__(self, "amount_element_names", frozenset(self.amount_element_names))

    def rules_for(self, message_type: MessageType | str) -> MessageRuleSet:
        """Return the rule set of one message family.

        Args:
            message_type: Message family or selector.

        Returns:
            MessageRuleSet: Rules of the family.

        Raises:
            UnsupportedMessageTypeError: Raised when the family has no rules.
        """

        resolved_message_type = domain_resolve_message_type(message_type)
        rule_set = self.rule_sets.get(resolved_message_type)
        if rule_set is None:
            raise UnsupportedMessageTypeError(f"No validation rules for message type {resolved_message_type.value}")
        return rule_set


def validation_build_default_rule_table() -> RuleTable:
    """Build the default rule table for `pacs.008` and `pain.001`.

    Returns:
        RuleTable: Fresh immutable rule table.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    message_id_pattern = re.compile(_RULES_MESSAGE_ID_PATTERN)
    date_time_pattern = re.compile(_RULES_DATE_TIME_PATTERN)
    count_pattern = re.compile(_RULES_COUNT_PATTERN)

    return RuleTable(
        rule_sets={
            MessageType.FI_TO_FI_CREDIT_TRANSFER: MessageRuleSet(
                required_fields=("MsgId", "CreDtTm", "NbOfTxs", "InstrId", "EndToEndId"),
                max_lengths={"MsgId": 35, "InstrId": 35, "EndToEndId": 35, "TxId": 35},
                patterns={"MsgId": message_id_pattern, "CreDtTm": date_time_pattern, "NbOfTxs": count_pattern},
                required_elements=("GrpHdr", "CdtTrfTxInf", "IntrBkSttlmAmt"),
            ),
            MessageType.CREDIT_TRANSFER_INITIATION: MessageRuleSet(
                required_fields=("MsgId", "CreDtTm", "NbOfTxs", "EndToEndId"),
                max_lengths={"MsgId": 35, "EndToEndId": 35, "PmtInfId": 35},
                patterns={"MsgId": message_id_pattern, "CreDtTm": date_time_pattern, "NbOfTxs": count_pattern},
                required_elements=("GrpHdr", "PmtInf", "CdtTrfTxInf", "InstdAmt"),
            ),
        }
    )


__all__ = ["AMOUNT_PATTERN", "BIC_PATTERN", "MessageRuleSet", "RuleTable", "validation_build_default_rule_table"]
