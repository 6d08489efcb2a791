"""
Move Example Module

A MoveExample is one labeled training row: the state a hero saw when it issued an order
(inputs) and what the order did (outputs). Examples are assembled field by field through
MoveExampleBuilder and frozen once built.

Row layout (comma separated, floats with six decimals):
    time, health, mana, level, lane_front, x, y,
    4 x (ally_x, ally_y), 4 x (enemy_x, enemy_y),
    cooldowns..., items, item_ids..., output,
    is_attack, move_x, move_y, target, ability, item
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from herocorpus.config.game_config import GameConfig

Position = Tuple[float, float]

ITEMS_MARKER = 'items'
OUTPUT_MARKER = 'output'
EMPTY_SLOT: Position = (0.0, 0.0)


@dataclass(frozen=True)
class MoveExample:
    """A single immutable movement/targeting example."""
    # Inputs
    time: float
    health: float
    mana: float
    level: float
    lane_front: float
    position: Position
    allies: Tuple[Position, ...]
    enemies: Tuple[Position, ...]
    ability_cooldowns: Tuple[float, ...]
    current_items: Tuple[int, ...]

    # Outputs
    is_attack: float
    move: Position
    target: int
    ability_used: int
    item_used: int

    def to_row(self) -> str:
        """Serialize to one corpus line (including the trailing newline)."""
        fields = [
            _fmt(self.time), _fmt(self.health), _fmt(self.mana),
            _fmt(self.level), _fmt(self.lane_front),
            _fmt(self.position[0]), _fmt(self.position[1]),
        ]
        for x, y in self.allies + self.enemies:
            fields.extend([_fmt(x), _fmt(y)])
        fields.extend(_fmt(cooldown) for cooldown in self.ability_cooldowns)
        fields.append(ITEMS_MARKER)
        fields.extend(str(item) for item in self.current_items)
        fields.append(OUTPUT_MARKER)
        fields.extend([
            _fmt(self.is_attack), _fmt(self.move[0]), _fmt(self.move[1]),
            str(self.target), str(self.ability_used), str(self.item_used),
        ])
        return ','.join(fields) + '\n'


def _fmt(value: float) -> str:
    return f"{value:f}"


@dataclass
class MoveExampleBuilder:
    """
    Named-field builder for MoveExample.

    Fields can be set in any order; build() pads the ally/enemy slots and freezes the lists.
    """
    time: float = 0.0
    health: float = 0.0
    mana: float = 0.0
    level: float = 0.0
    lane_front: float = 0.0
    position: Position = EMPTY_SLOT
    allies: List[Position] = field(default_factory=list)
    enemies: List[Position] = field(default_factory=list)
    ability_cooldowns: List[float] = field(default_factory=list)
    current_items: List[int] = field(default_factory=list)

    is_attack: float = 0.0
    move: Position = EMPTY_SLOT
    target: int = 0
    ability_used: int = GameConfig.NO_ACTION_LABEL
    item_used: int = GameConfig.NO_ACTION_LABEL

    def add_ally(self, position: Position) -> bool:
        """Fill the next ally slot. Returns False once all slots are taken."""
        if len(self.allies) >= GameConfig.MAX_ALLIES:
            return False
        self.allies.append(position)
        return True

    def add_enemy(self, position: Position) -> bool:
        """Fill the next enemy slot. Returns False once all slots are taken."""
        if len(self.enemies) >= GameConfig.MAX_ENEMIES:
            return False
        self.enemies.append(position)
        return True

    def build(self) -> MoveExample:
        allies = self.allies + [EMPTY_SLOT] * (GameConfig.MAX_ALLIES - len(self.allies))
        enemies = self.enemies + [EMPTY_SLOT] * (GameConfig.MAX_ENEMIES - len(self.enemies))

        return MoveExample(
            time=self.time,
            health=self.health,
            mana=self.mana,
            level=self.level,
            lane_front=self.lane_front,
            position=self.position,
            allies=tuple(allies),
            enemies=tuple(enemies),
            ability_cooldowns=tuple(self.ability_cooldowns),
            current_items=tuple(self.current_items),
            is_attack=self.is_attack,
            move=self.move,
            target=self.target,
            ability_used=self.ability_used,
            item_used=self.item_used,
        )
