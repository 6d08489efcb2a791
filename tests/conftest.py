"""
Shared pytest fixtures for all tests.

This file is automatically loaded by pytest and makes fixtures available
to all test files without needing to import them.
"""

import math

import pytest

from herocorpus.config.corpus_config import CorpusConfig
from herocorpus.config.game_config import GameConfig, PROPERTIES
from herocorpus.corpus.sink import CorpusSink
from herocorpus.parsing.event_log import EventLogSource, encode_events


# ============================================================================
# Match Builder
# ============================================================================

def cell_props(x: float, y: float) -> dict:
    """Cell/offset properties placing an entity at world (x, y)."""
    props = {}
    for axis, value, bound in (('x', x, GameConfig.MAX_X), ('y', y, GameConfig.MAX_Y)):
        shifted = value + bound * 2 + 1
        cell = math.floor(shifted / GameConfig.CELL_SIZE)
        props[PROPERTIES[f'cell_{axis}']] = cell
        props[PROPERTIES[f'offset_{axis}']] = shifted - cell * GameConfig.CELL_SIZE
    return props


class MatchBuilder:
    """
    Scripts a decoded match as event-log events.

    Example:
        match = MatchBuilder().horn()
        match.hero(10, 'npc_dota_hero_axe', team=2, player_id=0)
        match.orders([10], target=20)
        match.finish(losing_team=3, kills={0: (12, 'alice')})
        source = match.source()
    """

    ROSTER_INDEX = 1000
    ANCIENT_INDEX = 1001
    RUNE_INDEX = 1002

    def __init__(self):
        self.events = []
        self.tick = 0
        self._names = {}

    def at(self, tick: int) -> 'MatchBuilder':
        self.tick = tick
        return self

    def name_index(self, name: str) -> int:
        if name not in self._names:
            index = len(self._names) + 1
            self._names[name] = index
            self.events.append({'type': 'string', 'table': GameConfig.NAME_TABLE, 'index': index, 'value': name})
        return self._names[name]

    def entity(self, index: int, class_name: str, props: dict = None, name: str = None) -> 'MatchBuilder':
        props = dict(props or {})
        if name is not None:
            props[PROPERTIES['name_index']] = self.name_index(name)
        self.events.append({
            'type': 'entity', 'tick': self.tick, 'index': index, 'class': class_name, 'props': props
        })
        return self

    def update(self, index: int, props: dict) -> 'MatchBuilder':
        self.events.append({'type': 'entity', 'tick': self.tick, 'index': index, 'props': props})
        return self

    def delete(self, index: int) -> 'MatchBuilder':
        self.events.append({'type': 'delete', 'tick': self.tick, 'index': index})
        return self

    def horn(self, tick: int = 100) -> 'MatchBuilder':
        self.tick = tick
        return self.entity(self.RUNE_INDEX, 'CDOTA_Item_Rune')

    def hero(self, index: int, name: str, team: int, player_id: int, position=(0.0, 0.0),
             health: int = 500, max_health: int = 1000, mana: float = 100.0, max_mana: float = 400.0,
             level: int = 5, abilities=(), items=()) -> 'MatchBuilder':
        hero_short = name.split('dota_hero_')[-1]
        props = {
            PROPERTIES['team']: team,
            PROPERTIES['player_id']: player_id,
            PROPERTIES['health']: health,
            PROPERTIES['max_health']: max_health,
            PROPERTIES['mana']: mana,
            PROPERTIES['max_mana']: max_mana,
            PROPERTIES['level']: level,
        }
        props.update(cell_props(*position))
        for slot, handle in enumerate(abilities):
            props[f"{PROPERTIES['abilities']}.{slot:04d}"] = handle
        for slot, handle in enumerate(items):
            props[f"{PROPERTIES['items']}.{slot:04d}"] = handle
        return self.entity(index, f"CDOTA_Unit_Hero_{hero_short.title()}", props, name=name)

    def ability(self, index: int, name: str, level: int = 1, cooldown: float = 0.0,
                class_name: str = 'CDOTABaseAbility') -> 'MatchBuilder':
        props = {PROPERTIES['ability_level']: level, PROPERTIES['cooldown']: cooldown}
        return self.entity(index, class_name, props, name=name)

    def item(self, index: int, name: str) -> 'MatchBuilder':
        return self.entity(index, f"CDOTA_Item_{name.title()}", {}, name=name)

    def unit(self, index: int, class_name: str, position=(0.0, 0.0), team: int = 4) -> 'MatchBuilder':
        props = {PROPERTIES['team']: team}
        props.update(cell_props(*position))
        return self.entity(index, class_name, props)

    def orders(self, units, target: int = 0, ability: int = 0, position=None) -> 'MatchBuilder':
        event = {'type': 'orders', 'tick': self.tick, 'units': list(units), 'target': target, 'ability': ability}
        if position is not None:
            event['position'] = list(position)
        self.events.append(event)
        return self

    def ancient(self, team: int, health: int) -> 'MatchBuilder':
        props = {PROPERTIES['health']: health}
        if team is not None:
            props[PROPERTIES['team']] = team
        return self.entity(self.ANCIENT_INDEX, 'CDOTA_BaseNPC_Fort', props)

    def roster(self, players: dict) -> 'MatchBuilder':
        """players: slot -> (kills, name)"""
        props = {}
        for slot, (kills, name) in players.items():
            props[PROPERTIES['kills'].format(slot=slot)] = kills
            props[PROPERTIES['player_name'].format(slot=slot)] = name
        return self.entity(self.ROSTER_INDEX, 'CDOTA_PlayerResource', props)

    def finish(self, losing_team: int, kills: dict, tick: int = 50000) -> 'MatchBuilder':
        """Destroy the losing team's Ancient, then publish the roster."""
        self.at(tick)
        self.ancient(losing_team, health=0)
        self.at(tick + 1)
        return self.roster(kills)

    def source(self) -> EventLogSource:
        return EventLogSource.from_events(self.events)

    def write(self, path) -> str:
        path.write_bytes(encode_events(self.events))
        return str(path)


@pytest.fixture
def new_match():
    """Provide the MatchBuilder class for scripting matches."""
    return MatchBuilder


@pytest.fixture
def two_hero_match():
    """
    Provide a match with Axe (Radiant, slot 0, entity 10) and Lina (Dire, slot 5, entity 20).

    Abilities and items are registered but no orders are scripted yet; call finish() after
    adding orders to end the match with Radiant winning.
    """
    match = MatchBuilder().horn(tick=100)
    match.at(200)
    match.ability(30, 'axe_berserkers_call', level=1, cooldown=90.0)
    match.ability(31, 'axe_battle_hunger', level=0)
    match.ability(32, 'generic_hidden')
    match.item(40, 'item_tango')
    match.item(41, 'item_blink')
    match.hero(10, 'npc_dota_hero_axe', team=GameConfig.RADIANT, player_id=0,
               position=(-1000.0, 500.0), abilities=(30, 32, 31), items=(40, 41))
    match.hero(20, 'npc_dota_hero_lina', team=GameConfig.DIRE, player_id=5,
               position=(2000.0, -3000.0))
    match.at(1180)
    return match


RADIANT_KILLS = {0: (12, 'alice'), 1: (3, 'bob'), 2: (7, 'carol'), 3: (1, 'dave'), 4: (9, 'erin')}


@pytest.fixture
def radiant_kills():
    """Roster kills for a Radiant win: top 3 are slots 0, 4 and 2."""
    return dict(RADIANT_KILLS)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config(tmp_path):
    """Provide a test configuration writing into a temporary directory."""
    return CorpusConfig(
        output_dir=str(tmp_path / "data"),
        metadata_path=str(tmp_path / "ability_data.lua"),
    )


# ============================================================================
# Sink Fixtures
# ============================================================================

@pytest.fixture
def temp_sink(test_config):
    """
    Provide a CorpusSink writing into a temporary directory.

    Finalized after the test if the test did not do it.
    """
    sink = CorpusSink(test_config.output_dir, test_config.metadata_path)
    yield sink
    sink.finalize()
