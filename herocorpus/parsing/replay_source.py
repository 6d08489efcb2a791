"""
Replay Source Interface

Defines the boundary between corpus building and replay decoding.
Decoders (binary demo parsers, event logs, test scripts) implement the Entity and
ReplaySource abstract base classes; the two passes only ever talk to these.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple

from herocorpus.config.game_config import GameConfig, PROPERTIES


class Entity(ABC):
    """
    A decoded game entity.

    Property reads return None when the property is absent, which is distinct from a legitimate zero.
    """

    @property
    @abstractmethod
    def index(self) -> int:
        """Entity index (the handle used by unit orders)."""
        pass

    @property
    @abstractmethod
    def class_name(self) -> str:
        """C++ class name of the entity (e.g. 'CDOTA_Unit_Hero_Axe')."""
        pass

    @abstractmethod
    def fetch_int(self, path: str) -> Optional[int]:
        """Read a signed integer property."""
        pass

    @abstractmethod
    def fetch_uint(self, path: str) -> Optional[int]:
        """Read an unsigned integer property."""
        pass

    @abstractmethod
    def fetch_float(self, path: str) -> Optional[float]:
        """Read a float property."""
        pass

    @abstractmethod
    def fetch_string(self, path: str) -> Optional[str]:
        """Read a string property."""
        pass


@dataclass(frozen=True)
class UnitOrder:
    """
    A spectated unit order.

    Attributes:
        units: Indices of the selected units issuing the order
        target_index: Targeted entity index, 0 when the order has no target
        ability_index: Ability/item entity index, 0 when no ability or item is used
        position: Absolute world (x, y) the order points at, if any
    """
    units: Tuple[int, ...]
    target_index: int = 0
    ability_index: int = 0
    position: Optional[Tuple[float, float]] = None


EntityCallback = Callable[[Entity], None]
OrderCallback = Callable[[UnitOrder], None]


class ReplaySource(ABC):
    """
    Abstract base class for replay decoders.

    A source is built over a binary stream positioned at the start of a replay and is
    consumed once by start(). Callbacks fire in stream order; entity state visible through
    entity() is already updated when order callbacks run.
    """

    @property
    @abstractmethod
    def tick(self) -> int:
        """Current tick of the stream."""
        pass

    @abstractmethod
    def on_entity(self, callback: EntityCallback) -> None:
        """Subscribe to entity create/update events."""
        pass

    @abstractmethod
    def on_unit_orders(self, callback: OrderCallback) -> None:
        """Subscribe to spectated unit orders."""
        pass

    @abstractmethod
    def entity(self, index: int) -> Optional[Entity]:
        """Look up a live entity by index, None when it does not exist (anymore)."""
        pass

    @abstractmethod
    def lookup_string(self, table: str, index: int) -> Optional[str]:
        """Look up a string table entry."""
        pass

    @abstractmethod
    def start(self) -> None:
        """Run the stream to its end (or until stop() is called)."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop the stream after the current event."""
        pass


# ============================================================================
# Entity helpers
# ============================================================================

def is_hero(entity: Entity) -> bool:
    return entity.class_name.startswith(GameConfig.HERO_CLASS_PREFIX)


def is_item(entity: Entity) -> bool:
    return entity.class_name.startswith(GameConfig.ITEM_CLASS_PREFIX)


def is_ability(entity: Entity) -> bool:
    name = entity.class_name
    return name == GameConfig.BASE_ABILITY_CLASS or (
        name.startswith(GameConfig.ABILITY_CLASS_PREFIX)
        and name != GameConfig.ATTRIBUTE_BONUS_CLASS
    )


def hammer_name(source: ReplaySource, entity: Entity) -> str:
    """
    Get the Hammer name of an entity (e.g. 'npc_dota_hero_axe').

    This is the edict name, not the C++ class name. Returns an empty string when the name
    index or the string table entry is missing.
    """
    name_index = entity.fetch_int(PROPERTIES['name_index'])
    if name_index is None:
        return ""
    return source.lookup_string(GameConfig.NAME_TABLE, name_index) or ""


def ability_prefix(hero_name: str) -> str:
    """
    Get the prefix shared by a hero's own abilities.

    Example:
        >>> ability_prefix('npc_dota_hero_axe')
        'axe'
    """
    _, marker, suffix = hero_name.partition(GameConfig.HERO_NAME_MARKER)
    return suffix if marker else hero_name


class HandleSlots:
    """
    Bounded, restartable view over an entity's handle array (m_hAbilities, m_hItems).

    Iterating yields the resolved entity for every slot in order, skipping handles that
    point at no live entity. Iteration ends at the first absent slot or at the limit.

    Usage:
        for ability in HandleSlots(source, hero, PROPERTIES['abilities'], GameConfig.MAX_ABILITY_SLOTS):
            ...
    """

    def __init__(self, source: ReplaySource, entity: Entity, array_name: str, limit: int):
        self.source = source
        self.entity = entity
        self.array_name = array_name
        self.limit = limit

    def _handle(self, slot: int) -> Optional[int]:
        return self.entity.fetch_uint(f"{self.array_name}.{slot:04d}")

    def __iter__(self) -> Iterator[Entity]:
        for slot in range(self.limit):
            handle = self._handle(slot)
            if handle is None:
                return
            resolved = self.source.entity(handle & GameConfig.HANDLE_MASK)
            if resolved is not None:
                yield resolved
