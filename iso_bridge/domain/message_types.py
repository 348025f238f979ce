"""Closed message-type selector shared by serialization and validation."""

from __future__ import annotations

from enum import Enum


class UnsupportedMessageTypeError(ValueError):
    """Raised when a caller supplies a selector outside the supported message families."""


class MessageType(str, Enum):
    """Supported ISO 20022 message families.

    Attributes:
        FI_TO_FI_CREDIT_TRANSFER: FI-to-FI customer credit transfer (`pacs.008`).
        CREDIT_TRANSFER_INITIATION: Customer credit transfer initiation (`pain.001`).
    """

    FI_TO_FI_CREDIT_TRANSFER = "pacs.008"
    CREDIT_TRANSFER_INITIATION = "pain.001"


def domain_resolve_message_type(value: MessageType | str) -> MessageType:
    """Resolve one caller selector into the closed `MessageType` enum.

    Args:
        value: Enum member or selector text such as `pacs.008`.

    Returns:
        MessageType: Resolved message family.

    Raises:
        UnsupportedMessageTypeError: Raised when selector is not one of the supported families.
    """

    if isinstance(value, MessageType):
        return value
    if isinstance(value, str):
        normalized_value = value.strip()
        for member in MessageType:
            if normalized_value in (member.value, member.name):
                return member
    raise UnsupportedMessageTypeError(f"Unsupported message type: {value!r}")


__all__ = ["MessageType", "UnsupportedMessageTypeError", "domain_resolve_message_type"]
