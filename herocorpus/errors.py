"""
Fatal error types raised while building a corpus.

Each of these ends the run; the CLI turns them into a diagnostic and a non-zero exit status.
Per-action problems (unresolvable handles, uninformative targets) are never raised, they are
reported as discards by the second pass.
"""


class CorpusError(Exception):
    """Base class for fatal corpus build errors."""


class ReplaySourceError(CorpusError):
    """A replay could not be opened, decoded or rewound."""


class CorpusWriteError(CorpusError):
    """An output directory, example file or the metadata file could not be written."""


class WinnerResolutionError(CorpusError):
    """The Ancient died but its team could not be read."""

    def __init__(self, tick: int):
        super().__init__(f"Error retrieving m_iTeamNum from ancient (tick {tick})")
        self.tick = tick
