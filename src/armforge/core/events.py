"""EventBus for decoupled publish/subscribe communication."""

from collections import defaultdict
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    # Chain lifecycle
    CHAIN_ACTIVATED = auto()      # data: joint_count (int)
    CHAIN_DEACTIVATED = auto()
    CHAIN_STATE_CHANGED = auto()  # data: previous (ChainState), state (ChainState)

    # Composition
    JOINT_COMPOSED = auto()       # data: index (int), angle_deg (float), orientation (Quat)
    CHAIN_UPDATED = auto()        # data: chain (JointChain)

    # Diagnostics
    JOINT_WARNING = auto()        # data: warning (JointWarning)


class EventBus:
    """Simple publish/subscribe event system."""

    def __init__(self):
        self._handlers: dict[EventType, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: EventType, **data: Any) -> None:
        for handler in self._handlers[event_type]:
            handler(**data)
