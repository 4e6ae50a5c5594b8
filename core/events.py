"""core/events.py — Lightweight event bus.

Decouples whoever *signals* something (interaction code, the map
loader, the round flow) from the systems that *react* to it.  The bus
lives as an ECS resource::

    from core.events import EventBus, InteractHand
    bus = world.res(EventBus)
    bus.emit(InteractHand(eid=42, user=7))

Consumers subscribe with a callable::

    bus.subscribe("InteractHand", my_handler)

And the orchestrator drains once per frame::

    bus.drain()          # calls all handlers for pending events

Design rules:
  - Events are plain dataclasses — no behaviour.
  - ``emit()`` is O(1) (just appends).
  - ``drain()`` processes all queued events in FIFO order.
  - Handlers may emit new events; those are processed in the same drain.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable
from collections import defaultdict
import traceback


# ═══════════════════════════════════════════════════════════════════
#  Run levels
# ═══════════════════════════════════════════════════════════════════

PRE_ROUND = "pre_round"
IN_ROUND = "in_round"
POST_ROUND = "post_round"


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class InteractHand:
    """A user pressed an empty hand on an entity.

    ``handled`` is flipped by the first subscriber that acts on it so
    later subscribers leave it alone.
    """
    eid: int
    user: int | None = None
    handled: bool = False


@dataclass
class PartsRefreshed:
    """Machine parts changed; ``rating`` is the new part rating (≥1)."""
    eid: int
    rating: int = 1


@dataclass
class GeneratorRemoved:
    """A generator entity is being destroyed or detached."""
    eid: int


@dataclass
class ZoneRemoved:
    """A zone (grid / structure) is being deleted from the map."""
    zone: str


@dataclass
class RunLevelChanged:
    """The round flow moved between pre-round, in-round and post-round."""
    old: str = PRE_ROUND
    new: str = IN_ROUND


@dataclass
class Examined:
    """Someone examined an entity.  Subscribers append to ``lines``."""
    eid: int
    in_details_range: bool = True
    lines: list | None = None


@dataclass
class GeneratorActivated:
    """Raised after a generator successfully starts priming."""
    eid: int
    zone: str = ""


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget event bus stored as an ECS resource."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)

    # ── Public API ───────────────────────────────────────────────────

    def emit(self, event) -> None:
        """Queue an event for processing on next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Register *handler* to receive events of *event_type*.

        *event_type* is the class name, e.g. ``"ZoneRemoved"``.
        """
        self._subs[event_type].append(handler)

    def drain(self) -> int:
        """Process all queued events.  Returns number processed.

        Handlers may emit new events — those are processed in the
        same drain pass (breadth-first).
        """
        processed = 0
        safety = 1000  # prevent infinite loops
        while self._queue and safety > 0:
            batch = self._queue[:]
            self._queue.clear()
            for event in batch:
                name = type(event).__name__
                self._stats[name] += 1
                for handler in self._subs.get(name, []):
                    try:
                        handler(event)
                    except Exception as exc:
                        print(f"[EVENT] handler error for {name}: {exc}")
                        traceback.print_exc()
            processed += len(batch)
            safety -= 1
        return processed

    def clear(self) -> None:
        """Discard all pending events."""
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Return cumulative event counts by type."""
        return dict(self._stats)

    def pending_count(self) -> int:
        """Number of events waiting to be drained."""
        return len(self._queue)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"
