"""
Entity Store
=============
Integer entity IDs with one component table per component type.
A round owns exactly one World; nothing else writes to it.
"""

import itertools
from typing import Any, Dict, Iterator, Optional, Set, Tuple, Type, TypeVar


C = TypeVar('C')


class World:
    """
    Every ship, bullet, asteroid and particle of one round.

    Removal is two-phase: destroy_entity() only flags an ID, so systems
    can keep iterating, and process_dead_entities() sweeps the flagged
    IDs out of every table.
    """

    def __init__(self):
        self._ids = itertools.count()
        self._alive: Set[int] = set()
        self._doomed: Set[int] = set()
        self._tables: Dict[Type, Dict[int, Any]] = {}

    def create_entity(self) -> int:
        entity_id = next(self._ids)
        self._alive.add(entity_id)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Flag an entity; it disappears at the next sweep."""
        if entity_id in self._alive:
            self._doomed.add(entity_id)

    def process_dead_entities(self) -> None:
        if not self._doomed:
            return
        for table in self._tables.values():
            for entity_id in self._doomed:
                table.pop(entity_id, None)
        self._alive -= self._doomed
        self._doomed = set()

    def add_component(self, entity_id: int, component: Any) -> None:
        """Attach a component, replacing any of the same type."""
        self._tables.setdefault(type(component), {})[entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        return self._tables.get(component_type, {}).get(entity_id)

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        return entity_id in self._tables.get(component_type, {})

    def query(self, *component_types: Type) -> Iterator[Tuple[int, ...]]:
        """
        Yield (entity_id, component, ...) for each live entity holding
        every requested type, in creation order so that a seeded game
        resolves collisions the same way each run.
        """
        tables = [self._tables.get(component_type) for component_type in component_types]
        if not tables or not all(tables):
            return

        smallest = min(tables, key=len)
        matches = [eid for eid in smallest if all(eid in table for table in tables)]
        for entity_id in sorted(matches):
            if entity_id not in self._doomed:
                yield (entity_id,) + tuple(table[entity_id] for table in tables)

    def count(self, component_type: Type) -> int:
        """Live entities carrying a component type."""
        table = self._tables.get(component_type, {})
        return sum(1 for entity_id in table if entity_id not in self._doomed)

    def entity_count(self) -> int:
        return len(self._alive - self._doomed)

    def is_alive(self, entity_id: int) -> bool:
        return entity_id in self._alive and entity_id not in self._doomed
