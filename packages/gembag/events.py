"""
Notification channel for the gem engine.

A minimal synchronous publish/subscribe bus. Engine operations wrap their work
in `bus.batch()`: events emitted inside the batch are queued and delivered only
after the operation has fully settled, so listeners never observe a
half-applied state. Batches nest; queued events flush when the outermost batch
exits cleanly and are dropped if the operation raises.

Usage:
    bus = EventBus()
    bus.subscribe(GemEvent.PLAYED, lambda ev: resolver.apply(ev.payload["instance"], ev.payload["success"]))
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional
from enum import Enum

logger = logging.getLogger(__name__)


class GemEvent(Enum):
    """Event names emitted by the engine."""
    DRAWN = "drawn"
    PLAYED = "played"
    DISCARDED = "discarded"
    RECYCLED = "recycled"
    MASTERY_CHANGED = "mastery_changed"
    UNLOCKED = "unlocked"
    PERIOD_RESET = "period_reset"
    GEM_ADDED = "gem_added"
    GEM_REMOVED = "gem_removed"
    GEM_UPGRADED = "gem_upgraded"


@dataclass(frozen=True)
class Event:
    """A delivered notification."""
    type: GemEvent
    payload: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[Event], None]


class EventBus:
    """Synchronous pub/sub with operation-scoped batching."""

    def __init__(self):
        self._handlers: Dict[Optional[GemEvent], List[Handler]] = {}
        self._frames: List[List[Event]] = []

    def subscribe(self, event_type: Optional[GemEvent], handler: Handler) -> Callable[[], None]:
        """
        Register a handler. `event_type=None` receives every event.

        Returns a callable that removes the subscription.
        """
        self._handlers.setdefault(event_type, []).append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def emit(self, event_type: GemEvent, **payload: Any) -> None:
        event = Event(type=event_type, payload=payload)
        if self._frames:
            self._frames[-1].append(event)
        else:
            self._dispatch(event)

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Queue events until the block completes."""
        self._frames.append([])
        try:
            yield
        except BaseException:
            dropped = self._frames.pop()
            if dropped:
                logger.debug("Dropped %d queued events after failed operation", len(dropped))
            raise
        pending = self._frames.pop()
        if self._frames:
            self._frames[-1].extend(pending)
            return
        for event in pending:
            self._dispatch(event)

    @property
    def in_batch(self) -> bool:
        return bool(self._frames)

    def _dispatch(self, event: Event) -> None:
        for handler in list(self._handlers.get(event.type, [])):
            handler(event)
        for handler in list(self._handlers.get(None, [])):
            handler(event)
