"""
Action Classifier

Turns a single unit order into an output label, or decides that the order is not worth an
example. Classification only reads the replay; it never touches symbol registries, so ids
are assigned only for actions that are actually written.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from herocorpus.config.game_config import ENTITY_CLASSES, GameConfig, PROPERTIES
from herocorpus.parsing.normalization import entity_position, normalize_position
from herocorpus.parsing.replay_source import (
    Entity,
    ReplaySource,
    UnitOrder,
    hammer_name,
    is_ability,
    is_hero,
    is_item,
)

# Discard reasons
LANE_CREEP_WITHOUT_ABILITY = 'lane_creep_without_ability'
UNRESOLVED_ABILITY = 'unresolved_ability'


@dataclass(frozen=True)
class ActionLabel:
    """
    Output side of an example, before registry ids are assigned.

    Attributes:
        is_attack: 1.0 for targeted orders and ability/item uses, 0.0 for plain moves
        target: Target category code
        move: Normalized move/target position
        ability_name: Name of the hero's own ability used, if any
        item_name: Name of the item used, if any
    """
    is_attack: float
    target: int
    move: Tuple[float, float]
    ability_name: Optional[str] = None
    item_name: Optional[str] = None


@dataclass(frozen=True)
class Discarded:
    """An order that produces no example."""
    reason: str


Classification = Union[ActionLabel, Discarded]


def classify_target(source: ReplaySource, unit: int, team: int, target_index: int,
                    has_ability: bool, own_position: Tuple[float, float]) -> Union[Tuple[int, Tuple[float, float]], Discarded]:
    """
    Classify the target of an order.

    Returns:
        (target code, normalized move position), or Discarded for a lane creep targeted
        without an ability or item (a plain last-hit attack)
    """
    if target_index == unit:
        return GameConfig.target_code('self'), own_position

    target = source.entity(target_index)
    if target is None:
        # Entities are updated before order callbacks run, so eaten trees and picked up
        # runes are already gone. Assume a tree.
        return GameConfig.target_code('tree'), own_position

    position = entity_position(target)

    if is_hero(target):
        target_team = target.fetch_uint(PROPERTIES['team']) or 0
        category = 'friendly_hero' if target_team == team else 'enemy_hero'
        return GameConfig.target_code(category), position

    class_name = target.class_name
    if class_name == ENTITY_CLASSES['lane_creep']:
        if not has_ability:
            return Discarded(LANE_CREEP_WITHOUT_ABILITY)
        return GameConfig.target_code('lane_creep'), position
    if class_name == ENTITY_CLASSES['jungle_creep']:
        return GameConfig.target_code('jungle_creep'), position
    if class_name == ENTITY_CLASSES['tower']:
        return GameConfig.target_code('tower'), position

    return GameConfig.target_code('building'), position


def classify_ability(source: ReplaySource, ability: Entity, prefix: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Name the ability or item used by an order.

    Abilities not starting with the hero's prefix (neutral or borrowed abilities) and unnamed
    items are left unlabeled.

    Returns:
        (ability name, item name); at most one is set
    """
    if is_item(ability):
        name = hammer_name(source, ability)
        return None, (name or None)

    if is_ability(ability):
        name = hammer_name(source, ability)
        if name.startswith(prefix):
            return name, None

    return None, None


def classify_action(source: ReplaySource, unit: int, team: int, order: UnitOrder,
                    own_position: Tuple[float, float], prefix: str) -> Classification:
    """
    Classify one unit's part of an order.

    Args:
        source: Replay source positioned at the order
        unit: Index of the acting hero
        team: Team id of the acting hero
        order: The order
        own_position: Normalized position of the acting hero
        prefix: Ability name prefix of the acting hero

    Returns:
        ActionLabel, or Discarded with the reason
    """
    is_attack = 0.0
    target = GameConfig.target_code('none')
    move = (0.0, 0.0)
    ability_name = None
    item_name = None

    if order.target_index != 0:
        is_attack = 1.0
        classified = classify_target(
            source, unit, team, order.target_index, order.ability_index != 0, own_position
        )
        if isinstance(classified, Discarded):
            return classified
        target, move = classified

    if order.ability_index != 0:
        is_attack = 1.0

        if order.target_index == 0:
            # Untargeted: self or ground cast
            target = GameConfig.target_code('self')
            move = own_position

        ability = source.entity(order.ability_index)
        if ability is None:
            # Level ups arrive in the same message shape with no live ability entity
            return Discarded(UNRESOLVED_ABILITY)

        ability_name, item_name = classify_ability(source, ability, prefix)

    if order.position is not None:
        move = normalize_position(*order.position)

    return ActionLabel(
        is_attack=is_attack,
        target=target,
        move=move,
        ability_name=ability_name,
        item_name=item_name
    )
