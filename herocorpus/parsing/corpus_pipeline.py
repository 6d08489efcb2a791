"""
Corpus Building Pipeline

Orchestrates the two-pass workflow per replay: first pass -> rewind -> second pass.
All replays of a run share one CorpusSink, so examples of a hero accumulate across matches.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional

from herocorpus.corpus.sink import CorpusSink
from herocorpus.errors import CorpusError, ReplaySourceError
from herocorpus.parsing.first_pass import FirstPassResult, run_first_pass
from herocorpus.parsing.replay_source import ReplaySource
from herocorpus.parsing.second_pass import SecondPassResult, run_second_pass

logger = logging.getLogger('herocorpus.parsing')

DecoderFactory = Callable[[BinaryIO], ReplaySource]


@dataclass
class PipelineProgress:
    """Progress information for corpus building."""
    current: int
    total: int
    replay_path: str
    status: str  # 'first_pass', 'second_pass', 'complete', 'no_winner'
    message: str


@dataclass
class ReplayResult:
    """Outcome of both passes over one replay."""
    replay_path: str
    first_pass: FirstPassResult
    second_pass: SecondPassResult


@dataclass
class PipelineResult:
    """Result of a corpus building run."""
    total_replays: int
    examples_written: int
    discarded: int
    replays_without_winner: int
    examples_per_hero: Dict[str, int] = field(default_factory=dict)
    replay_results: List[ReplayResult] = field(default_factory=list)


class CorpusPipeline:
    """
    High-level corpus building orchestrator.

    Example:
        >>> from herocorpus.corpus import CorpusSink
        >>> from herocorpus.parsing import CorpusPipeline, EventLogSource
        >>>
        >>> with CorpusSink('./data', './ability_data.lua') as sink:
        ...     pipeline = CorpusPipeline(sink, EventLogSource)
        ...     result = pipeline.process_replays(['match1.jsonl', 'match2.jsonl'])
    """

    def __init__(
        self,
        sink: CorpusSink,
        decoder: DecoderFactory,
        progress_callback: Optional[Callable[[PipelineProgress], None]] = None
    ):
        """
        Initialize the pipeline.

        Args:
            sink: Run context receiving examples and team compositions
            decoder: Builds a ReplaySource over a binary stream at the start of a replay
            progress_callback: Optional callback for progress updates
        """
        self.sink = sink
        self.decoder = decoder
        self.progress_callback = progress_callback or self._default_progress_callback

    def _default_progress_callback(self, progress: PipelineProgress):
        """Default progress callback that prints to console."""
        print(f"[{progress.current}/{progress.total}] {progress.replay_path}: {progress.message}")

    def _create_source(self, stream: BinaryIO, replay_path: Path) -> ReplaySource:
        try:
            return self.decoder(stream)
        except CorpusError:
            raise
        except Exception as e:
            raise ReplaySourceError(f"Unable to create parser for {replay_path}: {e}") from e

    def process_replay(self, replay_path: str, current: int = 1, total: int = 1) -> ReplayResult:
        """
        Run both passes over a single replay.

        Args:
            replay_path: Path of the replay file
            current: Position of this replay in the run (for progress reporting)
            total: Number of replays in the run

        Returns:
            ReplayResult with both pass results

        Raises:
            ReplaySourceError: If the replay cannot be opened, decoded or rewound
            CorpusWriteError: If example files cannot be written
            WinnerResolutionError: If the destroyed Ancient has no team
        """
        replay_path = Path(replay_path)

        try:
            stream = open(replay_path, 'rb')
        except OSError as e:
            raise ReplaySourceError(f"Can't open demo {replay_path}: {e}") from e

        with stream:
            if not stream.seekable():
                raise ReplaySourceError(f"Demo {replay_path} is not seekable, cannot run two passes")

            self.progress_callback(PipelineProgress(
                current=current, total=total, replay_path=str(replay_path),
                status='first_pass', message='Finding winner and top players...'
            ))
            first = run_first_pass(self._create_source(stream, replay_path))
            self.sink.add_team_composition(first.team_composition)

            for slot, player in first.top_players.items():
                logger.info(f"Top player slot {slot}: {player.name} ({player.kills} kills)")

            if not first.has_players:
                logger.warning(f"No winner found in {replay_path}, skipping example extraction")
                self.progress_callback(PipelineProgress(
                    current=current, total=total, replay_path=str(replay_path),
                    status='no_winner', message='No Ancient destroyed, no examples'
                ))
                return ReplayResult(str(replay_path), first, SecondPassResult())

            # Go back to the beginning of the demo
            stream.seek(0)

            self.progress_callback(PipelineProgress(
                current=current, total=total, replay_path=str(replay_path),
                status='second_pass', message='Extracting examples...'
            ))
            second = run_second_pass(self._create_source(stream, replay_path), self.sink, first)

        self.progress_callback(PipelineProgress(
            current=current, total=total, replay_path=str(replay_path),
            status='complete',
            message=f'Complete ({second.examples_written} examples, {second.total_discarded} discarded)'
        ))
        return ReplayResult(str(replay_path), first, second)

    def process_replays(self, replay_paths: List[str]) -> PipelineResult:
        """
        Run both passes over every replay, in order.

        Args:
            replay_paths: Paths of the replay files

        Returns:
            PipelineResult with statistics
        """
        total = len(replay_paths)
        results = []

        for i, replay_path in enumerate(replay_paths, 1):
            logger.info(f"Demo {i} ({replay_path})")
            results.append(self.process_replay(replay_path, current=i, total=total))

        per_hero = Counter()
        for r in results:
            per_hero.update(r.second_pass.examples_per_hero)

        pipeline_result = PipelineResult(
            total_replays=total,
            examples_written=sum(r.second_pass.examples_written for r in results),
            discarded=sum(r.second_pass.total_discarded for r in results),
            replays_without_winner=sum(1 for r in results if not r.first_pass.has_players),
            examples_per_hero=dict(per_hero),
            replay_results=results
        )

        print()
        print("=" * 60)
        print("CORPUS SUMMARY")
        print("=" * 60)
        print(f"Total replays: {pipeline_result.total_replays}")
        print(f"Replays without winner: {pipeline_result.replays_without_winner}")
        print(f"Examples written: {pipeline_result.examples_written:,}")
        print(f"Actions discarded: {pipeline_result.discarded:,}")
        print(f"Heroes: {len(self.sink.corpora)}")
        for hero, count in sorted(pipeline_result.examples_per_hero.items()):
            print(f"  {hero}: {count:,}")

        return pipeline_result
