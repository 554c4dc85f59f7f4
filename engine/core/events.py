"""
Typed events and a publish/subscribe bus.

Events are tagged records: an Enum member for the kind and a dict of
primitive payload fields. The combat core only ever builds Event objects;
turning them into text is the job of whoever subscribes.

Usage:
    class BattleEventType(Enum):
        ENEMY_ATTACK_HIT = "enemyAttackHit"

    bus.subscribe(BattleEventType.ENEMY_ATTACK_HIT, on_hit)
    bus.publish(BattleEventType.ENEMY_ATTACK_HIT, damage=12, target_index=0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Event-specific payload
        consumed: Whether a handler stopped propagation
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]

    def to_dict(self) -> dict[str, Any]:
        """Flat wire form: {"type": <enum value>, **data}."""
        return {"type": self.type.value, **self.data}


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Enum-keyed subscriptions
    - Priority ordering (higher first)
    - Weak references (handlers vanish with their owners)
    - One-shot handlers
    - Event consumption (stops propagation)
    """

    def __init__(self):
        # event type -> list of (priority, handler_ref, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, hold only a weak reference to the handler
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler

        handlers = self._handlers.setdefault(event_type, [])
        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break
        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler from an event type."""
        if event_type not in self._handlers:
            return
        self._handlers[event_type] = [
            (p, h, o) for p, h, o in self._handlers[event_type]
            if self._get_handler(h) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Build and publish an event.

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """Publish a pre-built event (e.g. one returned by the combat core)."""
        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

    def publish_all(self, events: list[Event]) -> None:
        """Publish a batch of pre-built events in order."""
        for event in events:
            self.publish_event(event)

    def clear(self, event_type: Enum | None = None) -> None:
        """Clear handlers for one event type, or all of them."""
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers, then drain anything queued meanwhile."""
        handlers = self._handlers.get(event.type)
        if handlers:
            self._is_publishing = True
            to_remove = []
            try:
                for i, (_, handler_ref, one_shot) in enumerate(handlers):
                    handler = self._get_handler(handler_ref)
                    if handler is None:
                        to_remove.append(i)
                        continue

                    try:
                        handler(event)
                    except Exception:
                        # A broken subscriber must not break the battle
                        logger.exception(f"Error in event handler for {event.type}")

                    if one_shot:
                        to_remove.append(i)
                    if event.consumed:
                        break
            finally:
                for i in reversed(to_remove):
                    handlers.pop(i)
                self._is_publishing = False

        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from a strong or weak reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
