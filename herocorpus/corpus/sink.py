"""
Corpus Sink Module

Owns every output of a corpus build run:
    - one Corpus per hero and team side (example files + symbol registry), opened lazily
      the first time the hero is referenced and kept open until finalize()
    - the team compositions of every processed replay
    - the Lua metadata module written once by finalize()

The sink is the run context passed to both replay passes. Heroes seen in several replays
accumulate into the same files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from herocorpus.config.game_config import GameConfig
from herocorpus.corpus.examples import MoveExample
from herocorpus.corpus.metadata_writer import render_metadata
from herocorpus.corpus.registry import SymbolRegistry
from herocorpus.errors import CorpusError, CorpusWriteError

logger = logging.getLogger('herocorpus.corpus')

MOVE_FILE_SUFFIX = 'moveexamples'
BUILD_FILE_SUFFIX = 'itemsexamples'


def sanitize_path_component(name: str) -> str:
    """Replace characters that are invalid in file paths with underscores."""
    for char in '<>:"/\\|?*':
        name = name.replace(char, '_')
    return name.strip('. ')


@dataclass
class Corpus:
    """
    Example files and symbol registry for one hero on one team side.

    Attributes:
        hero: Hero name (e.g. 'npc_dota_hero_axe')
        team: Team id (2 = Radiant, 3 = Dire)
        move_file: Movement/targeting examples, one row per action
        build_file: Reserved for item/ability build examples, currently left empty
        registry: Symbol registry for this hero and side
    """
    hero: str
    team: int
    move_file: TextIO
    build_file: TextIO
    registry: SymbolRegistry = field(default_factory=SymbolRegistry)

    def write(self, example: MoveExample) -> None:
        """Append an example to the movement file."""
        try:
            self.move_file.write(example.to_row())
        except OSError as e:
            raise CorpusWriteError(
                f"Error writing example for hero {self.hero}, team {self.team}: {e}"
            ) from e

    def close(self) -> None:
        for handle in (self.move_file, self.build_file):
            if not handle.closed:
                handle.flush()
                handle.close()


class CorpusSink:
    """
    Run-lifetime owner of all corpora and cross-match data.

    Example:
        >>> with CorpusSink('./data', './ability_data.lua') as sink:
        ...     corpus = sink.get_corpus('npc_dota_hero_axe', GameConfig.RADIANT)
        ...     corpus.write(example)
        # files closed and ability_data.lua written on exit
    """

    def __init__(self, output_dir: str = "./data", metadata_path: str = "./ability_data.lua"):
        """
        Initialize the sink and create the output directory.

        Args:
            output_dir: Directory receiving one sub-directory per hero
            metadata_path: Path of the Lua metadata module

        Raises:
            CorpusWriteError: If the output directory cannot be created
        """
        self.output_dir = Path(output_dir)
        self.metadata_path = Path(metadata_path)
        self.corpora: Dict[str, Dict[int, Corpus]] = {}
        self.team_compositions: List[Dict[str, int]] = []
        self.finalized = False

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CorpusWriteError(f"Can't create data folder {self.output_dir}: {e}") from e

    def get_corpus(self, hero: str, team: int) -> Corpus:
        """
        Get the corpus of a hero for one team side, creating the hero's files on first use.

        Args:
            hero: Hero name
            team: Team id (2 or 3)

        Returns:
            Corpus for that hero and side

        Raises:
            CorpusWriteError: If the hero's directory or files cannot be created
            KeyError: If team is not a playing side
        """
        if self.finalized:
            raise CorpusWriteError("Corpus sink already finalized")

        if hero not in self.corpora:
            self.corpora[hero] = self._create_corpora(hero)
        return self.corpora[hero][team]

    def add_team_composition(self, composition: Dict[str, int]) -> None:
        """Record the hero name -> team id table of one replay."""
        self.team_compositions.append(dict(composition))

    @property
    def registries(self) -> Dict[str, Dict[int, SymbolRegistry]]:
        return {
            hero: {team: corpus.registry for team, corpus in teams.items()}
            for hero, teams in self.corpora.items()
        }

    def _create_corpora(self, hero: str) -> Dict[int, Corpus]:
        hero_dir = self.output_dir / sanitize_path_component(hero)
        opened: List[TextIO] = []

        try:
            hero_dir.mkdir(parents=True, exist_ok=True)
            corpora = {}
            for team in GameConfig.TEAMS:
                move_file = open(hero_dir / f"{team}_{MOVE_FILE_SUFFIX}", 'w')
                opened.append(move_file)
                build_file = open(hero_dir / f"{team}_{BUILD_FILE_SUFFIX}", 'w')
                opened.append(build_file)
                corpora[team] = Corpus(hero=hero, team=team, move_file=move_file, build_file=build_file)
        except OSError as e:
            for handle in opened:
                handle.close()
            raise CorpusWriteError(f"Error creating corpus files for hero {hero}: {e}") from e

        logger.info(f"Created corpus files for {hero} in {hero_dir}")
        return corpora

    def finalize(self) -> Optional[Path]:
        """
        Close every corpus file and write the metadata module.

        Safe to call more than once; only the first call writes anything.

        Returns:
            Path of the metadata module, or None if already finalized

        Raises:
            CorpusWriteError: If the metadata module cannot be written
        """
        if self.finalized:
            return None
        self.finalized = True

        for teams in self.corpora.values():
            for corpus in teams.values():
                corpus.close()

        content = render_metadata(self.registries, self.team_compositions)
        try:
            self.metadata_path.parent.mkdir(parents=True, exist_ok=True)
            self.metadata_path.write_text(content)
        except OSError as e:
            raise CorpusWriteError(f"Error creating {self.metadata_path}: {e}") from e

        logger.info(
            f"Wrote metadata for {len(self.corpora)} heroes and "
            f"{len(self.team_compositions)} matches to {self.metadata_path}"
        )
        return self.metadata_path

    def __enter__(self) -> 'CorpusSink':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finalize()
            return

        # Keep the error that ended the run; a failing finalize is only logged
        try:
            self.finalize()
        except CorpusError as e:
            logger.error(f"Finalize failed after {exc_type.__name__}: {e}")

    def __repr__(self) -> str:
        return f"CorpusSink(output_dir={self.output_dir}, heroes={len(self.corpora)})"
