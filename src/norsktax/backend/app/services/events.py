"""In-process notifications emitted around calculations.

Observers subscribe to a :class:`CalculationEvent` (or to every event) and
receive an immutable :class:`CalculationNotice`. Delivery is synchronous and
in subscription order; an observer that raises is logged and skipped so it
cannot change the outcome of the calculation it observes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Mapping
from uuid import UUID, uuid4

_LOGGER = logging.getLogger(__name__)


class CalculationEvent(str, Enum):
    BEFORE_CALCULATION = "before_calculation"
    AFTER_CALCULATION = "after_calculation"
    EXPENSES_VALIDATED = "expenses_validated"
    CALCULATION_FAILED = "calculation_failed"


@dataclass(frozen=True)
class CalculationNotice:
    """Payload delivered to observers."""

    event: CalculationEvent
    calculation_type: str
    request: Any = None
    result: Any = None
    error: BaseException | None = None
    operation: str | None = None
    stage: str | None = None
    category_count: int = 0
    flagged_count: int = 0
    context: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: UUID = field(default_factory=uuid4)


Handler = Callable[[CalculationNotice], None]


class CalculationEvents:
    """Registry of observers keyed by event type."""

    def __init__(self) -> None:
        self._handlers: dict[CalculationEvent, list[Handler]] = {}
        self._global_handlers: list[Handler] = []

    def subscribe(self, event: CalculationEvent, handler: Handler) -> None:
        self._handlers.setdefault(CalculationEvent(event), []).append(handler)
        _LOGGER.debug("Subscribed handler to %s", CalculationEvent(event).value)

    def subscribe_all(self, handler: Handler) -> None:
        self._global_handlers.append(handler)

    def unsubscribe(self, event: CalculationEvent, handler: Handler) -> bool:
        """Remove ``handler`` from ``event``; return ``True`` when it was registered."""

        handlers = self._handlers.get(CalculationEvent(event), [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        if handler in self._global_handlers:
            self._global_handlers.remove(handler)
            return True
        return False

    def clear(self) -> None:
        self._handlers.clear()
        self._global_handlers.clear()

    def handler_count(self, event: CalculationEvent | None = None) -> int:
        if event is None:
            return sum(len(entries) for entries in self._handlers.values()) + len(
                self._global_handlers
            )
        return len(self._handlers.get(CalculationEvent(event), [])) + len(
            self._global_handlers
        )

    def publish(self, notice: CalculationNotice) -> None:
        """Deliver ``notice`` to its subscribers, isolating observer failures."""

        handlers = list(self._handlers.get(notice.event, [])) + list(self._global_handlers)
        for handler in handlers:
            try:
                handler(notice)
            except Exception:
                _LOGGER.error(
                    "Observer %r failed while handling %s",
                    handler,
                    notice.event.value,
                    exc_info=True,
                )


def log_calculation_notice(notice: CalculationNotice) -> None:
    """Observer writing a one-line audit entry for each notice."""

    if notice.event is CalculationEvent.CALCULATION_FAILED:
        _LOGGER.warning(
            "%s calculation failed in %s at stage %s: %s",
            notice.calculation_type,
            notice.operation,
            notice.stage,
            notice.error,
        )
    elif notice.event is CalculationEvent.EXPENSES_VALIDATED:
        _LOGGER.info(
            "Expenses validated (%d categories, %d flagged) session=%s",
            notice.category_count,
            notice.flagged_count,
            notice.session_id,
        )
    else:
        _LOGGER.info(
            "%s %s session=%s",
            notice.calculation_type,
            notice.event.value,
            notice.session_id,
        )


__all__ = [
    "CalculationEvent",
    "CalculationEvents",
    "CalculationNotice",
    "Handler",
    "log_calculation_notice",
]
