"""Progress events and the per-request translation context."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from modelbridge.infrastructure.logging.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ProgressEvent:
    """A progress notification for one unit of work."""

    stage: str
    step: str
    processed: int = 0
    total: int = 0
    percentage: float = 0.0
    message: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage,
            "step": self.step,
            "processed": self.processed,
            "total": self.total,
            "percentage": self.percentage,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


ProgressListener = Callable[[ProgressEvent], Any]


class ProgressEmitter:
    """
    Ordered, callback-based progress transport.

    Listeners run synchronously in registration order. A coroutine returned by a
    listener is scheduled on the running loop. Listener failures are logged and
    do not interrupt the request that emitted the event.
    """

    def __init__(self, keep_history: bool = True) -> None:
        self._listeners: list[ProgressListener] = []
        self._keep_history = keep_history
        self.history: list[ProgressEvent] = []

    def on(self, listener: ProgressListener) -> None:
        """Register a listener."""
        self._listeners.append(listener)

    def off(self, listener: ProgressListener) -> None:
        """Remove a listener if registered."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: ProgressEvent) -> None:
        if self._keep_history:
            self.history.append(event)

        for listener in list(self._listeners):
            try:
                result = listener(event)
                if asyncio.iscoroutine(result):
                    asyncio.get_running_loop().create_task(result)
            except Exception:
                logger.exception(f"Progress listener failed for {event.stage}.{event.step}")


@dataclass
class TranslationContext:
    """Context carried through a single translation or normalization request."""

    events: ProgressEmitter = field(default_factory=ProgressEmitter)
    metadata: dict[str, Any] = field(default_factory=dict)
    run_id: str | None = None
