"""
First Pass - Winner and Top Player Selection

Scans a replay's entity updates once to find:
    - the horn tick (first rune spawn), used as t = 0 for normalized time
    - the team composition (hero name -> team id)
    - the winning team (the opponent of the team whose Ancient dies)
    - the 3 players with the most kills on the winning team

The scan stops on the first roster update after the Ancient dies. If the Ancient never dies
the top player set stays empty, and the second pass produces nothing for this replay.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from herocorpus.config.game_config import ENTITY_CLASSES, GameConfig, PROPERTIES
from herocorpus.errors import WinnerResolutionError
from herocorpus.parsing.replay_source import Entity, ReplaySource, hammer_name, is_hero

logger = logging.getLogger('herocorpus.parsing')


@dataclass(frozen=True)
class TopPlayer:
    """A player whose actions are turned into examples."""
    slot: int
    name: str
    kills: int


@dataclass
class FirstPassResult:
    """Result of the first pass over a replay."""
    top_players: Dict[int, TopPlayer]
    horn_tick: int
    team_composition: Dict[str, int]
    winning_team: Optional[int] = None
    stopped_early: bool = False

    @property
    def has_players(self) -> bool:
        return bool(self.top_players)


def min_slot(top_players: Dict[int, TopPlayer]) -> int:
    """Slot of the player with the fewest kills (first one wins ties)."""
    best_slot = None
    best_kills = None
    for slot, player in top_players.items():
        if best_kills is None or player.kills < best_kills:
            best_kills = player.kills
            best_slot = slot
    return best_slot


def update_top_players(top_players: Dict[int, TopPlayer], player: TopPlayer,
                       limit: int = GameConfig.TOP_PLAYER_COUNT) -> bool:
    """
    Offer a player to a running top-k by kills.

    Players are inserted unconditionally until the set is full; after that a player only
    replaces the current minimum when it has strictly more kills, so ties keep the
    earlier entry.

    Args:
        top_players: slot -> TopPlayer, modified in place
        player: Candidate player
        limit: Maximum size of the set

    Returns:
        True if the player was added
    """
    if len(top_players) < limit:
        top_players[player.slot] = player
        return True

    lowest = min_slot(top_players)
    if top_players[lowest].kills < player.kills:
        del top_players[lowest]
        top_players[player.slot] = player
        return True

    return False


class WinnerSelector:
    """
    Entity callback state machine for the first pass.

    Example:
        >>> selector = WinnerSelector(source)
        >>> result = selector.run()
        >>> for slot, player in result.top_players.items():
        ...     print(slot, player.name, player.kills)
    """

    def __init__(self, source: ReplaySource):
        self.source = source
        self.horn_tick: Optional[int] = None
        self.winning_team = 0
        self.top_players: Dict[int, TopPlayer] = {}
        self.team_composition: Dict[str, int] = {}
        self.stopped_early = False

    def run(self) -> FirstPassResult:
        self.source.on_entity(self.handle_entity)
        self.source.start()

        return FirstPassResult(
            top_players=self.top_players,
            horn_tick=self.horn_tick or 0,
            team_composition=self.team_composition,
            winning_team=self.winning_team or None,
            stopped_early=self.stopped_early
        )

    def handle_entity(self, entity: Entity) -> None:
        if self.stopped_early:
            return

        class_name = entity.class_name

        if self.horn_tick is None and class_name == ENTITY_CLASSES['horn_marker']:
            self.horn_tick = self.source.tick
        elif is_hero(entity):
            self._track_hero(entity)
        elif class_name == ENTITY_CLASSES['core']:
            self._check_core(entity)
        elif class_name == ENTITY_CLASSES['roster'] and self.winning_team != 0:
            self._collect_top_players(entity)
            self.stopped_early = True
            self.source.stop()

    def _track_hero(self, entity: Entity) -> None:
        name = hammer_name(self.source, entity)
        if not name or name in self.team_composition:
            return
        team = entity.fetch_uint(PROPERTIES['team'])
        if team is not None:
            self.team_composition[name] = team

    def _check_core(self, entity: Entity) -> None:
        health = entity.fetch_int(PROPERTIES['health'])
        if health is None or health > 0:
            return

        team = entity.fetch_uint(PROPERTIES['team'])
        if team is None:
            raise WinnerResolutionError(self.source.tick)

        self.winning_team = GameConfig.opposing_team(team)
        logger.debug(f"Ancient of team {team} destroyed at tick {self.source.tick}")

    def _collect_top_players(self, roster: Entity) -> None:
        for slot in GameConfig.team_slots(self.winning_team):
            kills = roster.fetch_int(PROPERTIES['kills'].format(slot=slot))
            if kills is None:
                continue
            name = roster.fetch_string(PROPERTIES['player_name'].format(slot=slot))
            if name is None:
                continue
            update_top_players(self.top_players, TopPlayer(slot=slot, name=name, kills=kills))


def run_first_pass(source: ReplaySource) -> FirstPassResult:
    """Run the first pass over a fresh replay source."""
    return WinnerSelector(source).run()
