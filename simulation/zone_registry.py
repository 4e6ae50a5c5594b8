"""simulation/zone_registry.py — Per-zone clocks for pulse generators.

One ``ZoneRegistry`` per world, stored as a world resource.  It maps
zone name → ``ZoneClock`` and remembers which zone every cycling
generator is registered on, so a generator can never be active on two
zones at once.

    registry = ZoneRegistry()
    world.set_res(registry)

    clock = registry.get_or_create("outpost")
    registry.register_active("outpost", eid)
    registry.advance("outpost", dt)          # no-op while paused

Clocks are created lazily on the first activation in a zone.  A clock
with no active generators stays in the registry; the scheduler simply
skips it.
"""

from __future__ import annotations
from typing import Iterator

from components.pulse import ZoneClock


class ZoneRegistry:
    """Process-wide (per world) zone → ``ZoneClock`` bookkeeping."""

    def __init__(self) -> None:
        self._clocks: dict[str, ZoneClock] = {}
        self._zone_for: dict[int, str] = {}
        # Pause is a property of the zone itself, so it survives
        # clearing the zone's clock and a clock being created later.
        self._paused: set[str] = set()

    # ── Clocks ───────────────────────────────────────────────────────

    def get_or_create(self, zone: str) -> ZoneClock:
        clock = self._clocks.get(zone)
        if clock is None:
            clock = ZoneClock()
            self._clocks[zone] = clock
        return clock

    def get(self, zone: str | None) -> ZoneClock | None:
        if zone is None:
            return None
        return self._clocks.get(zone)

    def __contains__(self, zone: str) -> bool:
        return zone in self._clocks

    def __len__(self) -> int:
        return len(self._clocks)

    def zones(self) -> list[str]:
        return list(self._clocks)

    def items(self) -> Iterator[tuple[str, ZoneClock]]:
        """Yield ``(zone, clock)`` over a snapshot of the registry."""
        yield from list(self._clocks.items())

    def advance(self, zone: str, dt: float) -> bool:
        """Add *dt* seconds to *zone*'s clock.  Returns False if paused
        or unknown (clock untouched)."""
        if dt < 0:
            raise ValueError(f"cannot advance a zone clock backwards (dt={dt})")
        clock = self._clocks.get(zone)
        if clock is None or zone in self._paused:
            return False
        clock.current_time += dt
        return True

    # ── Pause ────────────────────────────────────────────────────────

    def pause(self, zone: str) -> None:
        self._paused.add(zone)

    def resume(self, zone: str) -> None:
        self._paused.discard(zone)

    def is_paused(self, zone: str) -> bool:
        return zone in self._paused

    # ── Active generators ────────────────────────────────────────────

    def register_active(self, zone: str, eid: int) -> ZoneClock:
        """Track *eid* as cycling on *zone*.

        Re-registering on the same zone is a no-op.  Registering on a
        different zone moves it: the old entry is dropped first.
        """
        current = self._zone_for.get(eid)
        if current is not None and current != zone:
            self.deregister_active(current, eid)
        clock = self.get_or_create(zone)
        if eid not in clock.active_generators:
            clock.active_generators.append(eid)
        self._zone_for[eid] = zone
        return clock

    def deregister_active(self, zone: str, eid: int) -> bool:
        """Stop tracking *eid* on *zone*.  Returns True if it was there."""
        clock = self._clocks.get(zone)
        removed = False
        if clock is not None and eid in clock.active_generators:
            clock.active_generators.remove(eid)
            removed = True
        if self._zone_for.get(eid) == zone:
            del self._zone_for[eid]
        return removed

    def zone_for(self, eid: int) -> str | None:
        """Zone *eid* is registered active on, if any."""
        return self._zone_for.get(eid)

    def is_active(self, eid: int) -> bool:
        return eid in self._zone_for

    # ── Clearing ─────────────────────────────────────────────────────

    def clear_zone(self, zone: str) -> list[int]:
        """Drop *zone*'s clock and every registration on it.

        Returns the generator ids that were active there.
        """
        clock = self._clocks.pop(zone, None)
        self._paused.discard(zone)
        if clock is None:
            return []
        dropped = list(clock.active_generators)
        for eid in dropped:
            if self._zone_for.get(eid) == zone:
                del self._zone_for[eid]
        return dropped

    def clear_all(self) -> list[int]:
        """Forget every zone (round / session reset).

        Returns every generator id that was registered anywhere.
        """
        dropped = list(self._zone_for)
        self._clocks.clear()
        self._zone_for.clear()
        self._paused.clear()
        return dropped

    def __repr__(self) -> str:
        active = sum(len(c.active_generators) for c in self._clocks.values())
        return f"ZoneRegistry(zones={len(self._clocks)}, active={active})"
