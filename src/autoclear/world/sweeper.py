"""In-memory worlds and the default dropped item sweeper."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Callable, Iterable

from autoclear.infrastructure.logger import logger

DROPPED_ITEM = "item"

_entity_ids = itertools.count(1)


@dataclass
class Entity:
    kind: str
    world: str
    entity_id: int = 0

    def __post_init__(self) -> None:
        if not self.entity_id:
            self.entity_id = next(_entity_ids)


class World:
    """A named collection of live entities."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entities: dict[int, Entity] = {}

    def spawn(self, kind: str) -> Entity:
        entity = Entity(kind=kind, world=self.name)
        self._entities[entity.entity_id] = entity
        return entity

    def entities(self) -> list[Entity]:
        return list(self._entities.values())

    def remove(self, entity: Entity) -> bool:
        return self._entities.pop(entity.entity_id, None) is not None

    def __len__(self) -> int:
        return len(self._entities)


def is_dropped_item(entity: Entity) -> bool:
    return entity.kind == DROPPED_ITEM


class DroppedItemSweeper:
    """Removes every eligible entity from every world and returns how many went."""

    def __init__(
        self,
        worlds: Callable[[], Iterable[World]],
        is_eligible: Callable[[Entity], bool] = is_dropped_item,
    ) -> None:
        self._worlds = worlds
        self._is_eligible = is_eligible

    def __call__(self) -> int:
        count = 0
        for world in self._worlds():
            removed = 0
            for entity in world.entities():
                if self._is_eligible(entity) and world.remove(entity):
                    removed += 1
            if removed:
                logger.debug("Removed entities", world=world.name, count=removed)
            count += removed
        return count
