"""Pure functions mapping raw positions, times and stats into [0, 1] ranges.

Dota 2 splits an entity's location into two parts in replays:

- m_cellX, m_cellY: which 128x128 "cell" the entity is in
- m_vecX, m_vecY: the offset of the entity within that cell, relative to its lower left corner

world_position() joins them back into regular Cartesian coordinates (the map is 16577 x 16577 with
the origin at its center as of 7.02), and normalize_position() maps those onto the unit square.
"""

from typing import Optional, Tuple

from herocorpus.config.game_config import GameConfig, PROPERTIES
from herocorpus.parsing.replay_source import Entity


def remap_x(x: float) -> float:
    return (x - GameConfig.MIN_X) / (GameConfig.MAX_X - GameConfig.MIN_X)


def remap_y(y: float) -> float:
    return (y - GameConfig.MIN_Y) / (GameConfig.MAX_Y - GameConfig.MIN_Y)


def normalize_position(x: float, y: float) -> Tuple[float, float]:
    """Map a world coordinate onto [0, 1] x [0, 1]."""
    return remap_x(x), remap_y(y)


def world_position(entity: Entity) -> Tuple[float, float]:
    """Rebuild an entity's world coordinate from its cell and in-cell offset."""
    cell_x = entity.fetch_uint(PROPERTIES['cell_x']) or 0
    cell_y = entity.fetch_uint(PROPERTIES['cell_y']) or 0
    offset_x = entity.fetch_float(PROPERTIES['offset_x']) or 0.0
    offset_y = entity.fetch_float(PROPERTIES['offset_y']) or 0.0

    return (
        cell_x * GameConfig.CELL_SIZE - (GameConfig.MAX_X * 2 + 1) + offset_x,
        cell_y * GameConfig.CELL_SIZE - (GameConfig.MAX_Y * 2 + 1) + offset_y,
    )


def entity_position(entity: Entity) -> Tuple[float, float]:
    """Normalized position of an entity."""
    return normalize_position(*world_position(entity))


def normalize_time(tick: int, horn_tick: int) -> float:
    """Time since the horn, in units of TICKS_PER_TIME_UNIT."""
    return (tick - horn_tick) / GameConfig.TICKS_PER_TIME_UNIT


def fraction(current: Optional[float], maximum: Optional[float]) -> float:
    """current / maximum, 0.0 when either is missing or the maximum is zero."""
    if not current or not maximum:
        return 0.0
    return current / maximum


def normalize_level(level: Optional[int]) -> float:
    return (level or 0) / GameConfig.MAX_LEVEL


def normalize_cooldown(cooldown: Optional[float]) -> float:
    return (cooldown or 0.0) / GameConfig.COOLDOWN_SCALE
