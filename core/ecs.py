"""
core/ecs.py — Entity-Component-System

Entities are ints. Components are any object, stored by type.
Every generator is an entity carrying a ``PulseGenerator`` component;
the zone it sits on is tracked by the zone index below.

    w = World()
    e = w.spawn()
    w.add(e, PulseGenerator())
    w.zone_add(e, "outpost")

    for eid, gen in w.all_of(PulseGenerator):
        ...
"""

from __future__ import annotations
from typing import Any, Iterator


class World:
    def __init__(self):
        self._next_id = 0
        self._stores: dict[type, dict[int, Any]] = {}
        self._dead: set[int] = set()
        # zone → entities placed on it, and the reverse lookup.  An entity
        # sits on at most one zone; unplaced entities have no entry.
        self._zone_index: dict[str, set[int]] = {}
        self._zone_of: dict[int, str] = {}

    # -- Zone placement --

    def zone_add(self, eid: int, zone: str):
        """Place *eid* on *zone* (moves it if already placed elsewhere)."""
        self.zone_set(eid, zone)

    def zone_set(self, eid: int, new_zone: str):
        """Move *eid* from its current zone to *new_zone*."""
        old = self._zone_of.get(eid)
        if old is not None:
            self._zone_index.get(old, set()).discard(eid)
        self._zone_index.setdefault(new_zone, set()).add(eid)
        self._zone_of[eid] = new_zone

    def zone_clear(self, eid: int):
        """Detach *eid* from whatever zone it sits on."""
        old = self._zone_of.pop(eid, None)
        if old is not None:
            self._zone_index.get(old, set()).discard(eid)

    def zone_drop(self, zone: str) -> set[int]:
        """Forget *zone* entirely.  Returns the entities that were on it."""
        eids = self._zone_index.pop(zone, set())
        for eid in eids:
            self._zone_of.pop(eid, None)
        return eids

    def zone_of(self, eid: int) -> str | None:
        """Zone *eid* is placed on, or ``None`` for loose / dead entities."""
        if eid in self._dead:
            return None
        return self._zone_of.get(eid)

    def zone_entities(self, zone: str) -> set[int]:
        """Return the set of living entity IDs on *zone*."""
        return self._zone_index.get(zone, set()) - self._dead

    def zones(self) -> list[str]:
        return list(self._zone_index)

    # -- Entities --

    def spawn(self) -> int:
        self._next_id += 1
        return self._next_id

    def kill(self, eid: int):
        self._dead.add(eid)

    def alive(self, eid: int) -> bool:
        return eid not in self._dead

    def purge(self):
        """Remove dead entities from all stores. Call once per frame."""
        for store in self._stores.values():
            for eid in self._dead:
                store.pop(eid, None)
        for eid in self._dead:
            self.zone_clear(eid)
        self._dead.clear()

    # -- Components --

    def add(self, eid: int, comp: Any):
        t = type(comp)
        if t not in self._stores:
            self._stores[t] = {}
        self._stores[t][eid] = comp

    def get(self, eid: int, comp_type: type) -> Any | None:
        return self._stores.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid in self._stores.get(comp_type, {})

    def remove(self, eid: int, comp_type: type):
        store = self._stores.get(comp_type)
        if store and eid in store:
            del store[eid]

    # -- Queries --

    def all_of(self, comp_type: type) -> Iterator[tuple[int, Any]]:
        """Yield (eid, component) for every living entity with this type."""
        for eid, comp in list(self._stores.get(comp_type, {}).items()):
            if eid not in self._dead and eid >= 0:
                yield eid, comp

    # -- Resources (singletons, not tied to entities) --

    def set_res(self, resource: Any, as_type: type | None = None):
        """Store *resource* as a singleton.

        ``as_type`` files it under a base class so subclasses (test
        doubles, scene adapters) are found by ``res(BaseClass)``.
        """
        t = as_type or type(resource)
        if t not in self._stores:
            self._stores[t] = {}
        self._stores[t][-1] = resource

    def res(self, res_type: type) -> Any | None:
        return self._stores.get(res_type, {}).get(-1)
