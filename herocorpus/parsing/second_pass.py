"""
Second Pass - Example Extraction

Re-scans a replay from the start and turns every order issued by a top player's hero into a
MoveExample, written to the corpus of that hero and team side.

Inputs of an example (what the hero saw):
    time since the horn, health, mana, level, lane front (not tracked yet, always 0),
    own position, up to 4 ally and 4 enemy hero positions, cooldowns of the hero's own
    abilities and the ids of the items it holds

Outputs (what the order did):
    attack/targeted flag, move position, target category, ability label, item label
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict

from herocorpus.config.game_config import GameConfig, PROPERTIES
from herocorpus.corpus.examples import MoveExampleBuilder
from herocorpus.corpus.registry import SymbolRegistry
from herocorpus.corpus.sink import CorpusSink
from herocorpus.parsing.action_classifier import ActionLabel, Discarded, classify_action
from herocorpus.parsing.first_pass import FirstPassResult
from herocorpus.parsing.normalization import (
    entity_position,
    fraction,
    normalize_cooldown,
    normalize_level,
    normalize_time,
)
from herocorpus.parsing.replay_source import (
    Entity,
    HandleSlots,
    ReplaySource,
    UnitOrder,
    ability_prefix,
    hammer_name,
    is_hero,
)

logger = logging.getLogger('herocorpus.parsing')

UNKNOWN_TEAM = 'unknown_team'
UNNAMED_HERO = 'unnamed_hero'


@dataclass(frozen=True)
class Hero:
    """A hero present in the match, registered on first sighting."""
    team: int
    index: int


@dataclass
class SecondPassResult:
    """Result of the second pass over a replay."""
    examples_written: int = 0
    discards: Counter = field(default_factory=Counter)
    examples_per_hero: Dict[str, int] = field(default_factory=dict)

    @property
    def total_discarded(self) -> int:
        return sum(self.discards.values())


class ExampleExtractor:
    """
    Entity and order callbacks for the second pass.

    Example:
        >>> first = run_first_pass(open_source())
        >>> extractor = ExampleExtractor(open_source(), sink, first)
        >>> result = extractor.run()
        >>> print(result.examples_written, dict(result.discards))
    """

    def __init__(self, source: ReplaySource, sink: CorpusSink, first_pass: FirstPassResult):
        self.source = source
        self.sink = sink
        self.top_players = first_pass.top_players
        self.horn_tick = first_pass.horn_tick
        self.heroes: Dict[str, Hero] = {}
        self.result = SecondPassResult()

    def run(self) -> SecondPassResult:
        self.source.on_entity(self.handle_entity)
        self.source.on_unit_orders(self.handle_orders)
        self.source.start()
        return self.result

    def handle_entity(self, entity: Entity) -> None:
        if is_hero(entity) and entity.class_name not in self.heroes:
            team = entity.fetch_uint(PROPERTIES['team']) or 0
            self.heroes[entity.class_name] = Hero(team=team, index=entity.index)

    def handle_orders(self, order: UnitOrder) -> None:
        # Several units can be selected at once
        for unit in order.units:
            self._handle_unit(unit, order)

    def _is_tracked(self, entity: Entity) -> bool:
        if not is_hero(entity):
            return False
        player_id = entity.fetch_int(PROPERTIES['player_id'])
        return player_id is not None and player_id in self.top_players

    def _discard(self, reason: str, hero: str) -> None:
        self.result.discards[reason] += 1
        logger.debug(f"Discarded order of {hero} at tick {self.source.tick}: {reason}")

    def _handle_unit(self, unit: int, order: UnitOrder) -> None:
        """
        Turn one unit's part of an order into an example, or count it as discarded.

        The hero's corpus (its files and registries) is only created once the first example
        is about to be written; a top player whose orders are all discarded leaves no
        directory and no entry in the metadata module.
        """
        entity = self.source.entity(unit)
        if entity is None or not self._is_tracked(entity):
            return

        name = hammer_name(self.source, entity)
        team = entity.fetch_uint(PROPERTIES['team']) or 0
        if not name:
            self._discard(UNNAMED_HERO, entity.class_name)
            return
        if team not in GameConfig.TEAMS:
            self._discard(UNKNOWN_TEAM, name)
            return

        prefix = ability_prefix(name)
        position = entity_position(entity)

        label = classify_action(self.source, unit, team, order, position, prefix)
        if isinstance(label, Discarded):
            self._discard(label.reason, name)
            return

        corpus = self.sink.get_corpus(name, team)
        builder = MoveExampleBuilder(position=position)
        self._apply_label(builder, label, corpus.registry)
        self._add_state(builder, entity, team)
        self._add_abilities(builder, entity, prefix, corpus.registry)
        self._add_items(builder, entity, corpus.registry)

        corpus.write(builder.build())
        self.result.examples_written += 1
        self.result.examples_per_hero[name] = self.result.examples_per_hero.get(name, 0) + 1

    def _apply_label(self, builder: MoveExampleBuilder, label: ActionLabel,
                     registry: SymbolRegistry) -> None:
        builder.is_attack = label.is_attack
        builder.target = label.target
        builder.move = label.move

        if label.ability_name is not None:
            builder.ability_used = registry.active_abilities.lookup_or_assign(label.ability_name) + 1
        if label.item_name is not None:
            builder.item_used = registry.active_items.lookup_or_assign(label.item_name) + 1

    def _add_state(self, builder: MoveExampleBuilder, entity: Entity, team: int) -> None:
        builder.time = normalize_time(self.source.tick, self.horn_tick)
        builder.health = fraction(entity.fetch_int(PROPERTIES['health']),
                                  entity.fetch_int(PROPERTIES['max_health']))
        builder.mana = fraction(entity.fetch_float(PROPERTIES['mana']),
                                entity.fetch_float(PROPERTIES['max_mana']))
        builder.level = normalize_level(entity.fetch_int(PROPERTIES['level']))
        builder.lane_front = 0.0  # TODO: derive from lane creep positions

        # Everyone else's position, in registration order
        for hero in self.heroes.values():
            if hero.index == entity.index:
                continue
            other = self.source.entity(hero.index)
            if other is None:
                continue
            if hero.team == team:
                builder.add_ally(entity_position(other))
            else:
                builder.add_enemy(entity_position(other))

    def _add_abilities(self, builder: MoveExampleBuilder, entity: Entity, prefix: str,
                       registry: SymbolRegistry) -> None:
        ordinal = 0
        for ability in HandleSlots(self.source, entity, PROPERTIES['abilities'], GameConfig.MAX_ABILITY_SLOTS):
            name = hammer_name(self.source, ability)
            if not name.startswith(prefix):
                continue

            level = ability.fetch_int(PROPERTIES['ability_level'])
            if not level:
                builder.ability_cooldowns.append(GameConfig.UNLEARNED_COOLDOWN)
            else:
                builder.ability_cooldowns.append(normalize_cooldown(ability.fetch_float(PROPERTIES['cooldown'])))

            registry.observe_ability(ordinal, name)
            ordinal += 1

    def _add_items(self, builder: MoveExampleBuilder, entity: Entity, registry: SymbolRegistry) -> None:
        for item in HandleSlots(self.source, entity, PROPERTIES['items'], GameConfig.MAX_ITEM_SLOTS):
            name = hammer_name(self.source, item)
            if name:
                builder.current_items.append(registry.held_items.lookup_or_assign(name))


def run_second_pass(source: ReplaySource, sink: CorpusSink, first_pass: FirstPassResult) -> SecondPassResult:
    """Run the second pass over a fresh replay source."""
    return ExampleExtractor(source, sink, first_pass).run()
