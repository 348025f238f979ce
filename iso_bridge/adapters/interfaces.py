"""Typed interfaces for adapter-layer responsibilities."""

from dataclasses import dataclass
from typing import Protocol

from iso_bridge.domain import MessageType


@dataclass(frozen=True)
class ConformanceCheckResult:
    """Verdict returned by an external conformance checker.

    Attributes:
        valid: Checker verdict, None when the checker did not state one.
        errors: Checker-reported errors.
        warnings: Checker-reported warnings.
    """

    valid: bool | None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def reports_failure(self) -> bool:
        return self.valid is False or bool(self.errors)


class ConformancePort(Protocol):
    """Port definition for submitting generated XML to an external conformance checker."""

    def adapter_check(self, xml_document: str, message_type: MessageType) -> ConformanceCheckResult:
        """Submit one document and wait for the checker verdict.

        Args:
            xml_document: Generated XML document.
            message_type: Message family of the document.

        Returns:
            ConformanceCheckResult: Checker verdict.

        Raises:
            ConformanceUnavailableError: Raised when the checker is unreachable, times out or
                answers outside its contract.
        """

    async def adapter_check_async(self, xml_document: str, message_type: MessageType) -> ConformanceCheckResult:
        """Awaitable variant of `adapter_check`, cancellable by the caller.

        Args:
            xml_document: Generated XML document.
            message_type: Message family of the document.

        Returns:
            ConformanceCheckResult: Checker verdict.

        Raises:
            ConformanceUnavailableError: Raised when the checker is unreachable, times out or
                answers outside its contract.
        """
