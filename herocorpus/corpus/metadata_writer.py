"""
Metadata Writer Module

Renders the symbol registries and team compositions of a run into a Lua module
(ability_data.lua) that the bot scripts load to translate label ids back into names.

Every per-hero table is indexed by team id, so slot 1 is nil, 2 is Radiant and 3 is Dire:

    activeAbilities = {npc_dota_hero_axe={nil, {[1]="axe_berserkers_call",axe_berserkers_call=1,},{}},}
    abilities = {npc_dota_hero_axe={nil, {"axe_berserkers_call","axe_battle_hunger",},{}},}
    teams = {{nil, {"npc_dota_hero_axe",},{"npc_dota_hero_lina",}},}
"""

import re
from typing import Dict, Iterable, List, Mapping

from herocorpus.config.game_config import GameConfig
from herocorpus.corpus.registry import SymbolRegistry, SymbolTable

HEADER = (
    "-- This is an automatically generated file. Do not modify.\n"
    "module(\"ability_data\", package.seeall)\n"
)

LUA_KEYWORDS = {
    'and', 'break', 'do', 'else', 'elseif', 'end', 'false', 'for', 'function', 'goto', 'if',
    'in', 'local', 'nil', 'not', 'or', 'repeat', 'return', 'then', 'true', 'until', 'while',
}
_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def lua_string(value: str) -> str:
    escaped = value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
    return f'"{escaped}"'


def lua_key(name: str) -> str:
    """Table key for a name: bare identifier when Lua allows it, ["..."] otherwise."""
    if _IDENTIFIER.match(name) and name not in LUA_KEYWORDS:
        return name
    return f"[{lua_string(name)}]"


def render_symbol_table(table: SymbolTable) -> str:
    """Both directions of a namespace: [id]="name" and name=id."""
    return ''.join(
        f"[{symbol_id}]={lua_string(name)},{lua_key(name)}={symbol_id},"
        for symbol_id, name in table.to_table()
    )


def render_name_list(names: Iterable[str]) -> str:
    return ''.join(f"{lua_string(name)}," for name in names)


def _render_per_hero(variable: str,
                     registries: Mapping[str, Mapping[int, SymbolRegistry]],
                     render_team) -> str:
    entries = []
    for hero in sorted(registries):
        teams = ','.join(
            '{' + render_team(registries[hero][team]) + '}'
            for team in GameConfig.TEAMS
        )
        entries.append(f"{lua_key(hero)}={{nil, {teams}}},")
    return f"{variable} = {{{''.join(entries)}}}\n"


def render_teams(team_compositions: List[Dict[str, int]]) -> str:
    matches = []
    for composition in team_compositions:
        radiant = [hero for hero, team in composition.items() if team == GameConfig.RADIANT]
        dire = [hero for hero, team in composition.items() if team != GameConfig.RADIANT]
        matches.append(f"{{nil, {{{render_name_list(radiant)}}},{{{render_name_list(dire)}}}}},")
    return f"teams = {{{''.join(matches)}}}\n"


def render_metadata(registries: Mapping[str, Mapping[int, SymbolRegistry]],
                    team_compositions: List[Dict[str, int]]) -> str:
    """
    Render the full metadata module.

    Args:
        registries: hero name -> team id -> SymbolRegistry
        team_compositions: one hero name -> team id dict per processed replay

    Returns:
        Lua source text
    """
    return (
        HEADER
        + _render_per_hero('activeAbilities', registries, lambda r: render_symbol_table(r.active_abilities))
        + _render_per_hero('activeItems', registries, lambda r: render_symbol_table(r.active_items))
        + _render_per_hero('items', registries, lambda r: render_symbol_table(r.held_items))
        + _render_per_hero('abilities', registries, lambda r: render_name_list(r.observed_abilities))
        + render_teams(team_compositions)
    )
