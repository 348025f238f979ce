"""Structured stage events recorded while a payment moves through the pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> dict[str, object]:
    """Build one structured pipeline stage event.

    Args:
        stage: Pipeline stage name (`map`, `serialize`, `validate`).
        status: Stage status marker.
        details: Optional structured details object.
        clock: Optional UTC clock override.

    Returns:
        dict[str, object]: Structured stage event.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    resolved_now = (clock or _domain_utc_now)()
    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": resolved_now.astimezone(timezone.utc).isoformat(),
    }
    if details is not None:
        event_payload["details"] = details
    return event_payload


def _domain_utc_now() -> datetime:
    return datetime.now(timezone.utc)
