"""
Herocorpus - Dota 2 Replay Training Corpus Builder

Turns replays into labeled movement/targeting examples for a bot, one corpus per hero and
team side, plus a Lua module mapping ability and item label ids back to names.

Main interfaces:
    CorpusPipeline: Runs the two replay passes over a list of replays
    CorpusSink: Owns the example files and writes the metadata module
    EventLogSource: Replay source reading JSON-lines event logs
    CorpusConfig: Run configuration (environment or dict based)
"""

from herocorpus.corpus.sink import CorpusSink
from herocorpus.parsing.corpus_pipeline import CorpusPipeline
from herocorpus.parsing.event_log import EventLogSource
from herocorpus.config.corpus_config import CorpusConfig

__all__ = [
    'CorpusPipeline',
    'CorpusSink',
    'EventLogSource',
    'CorpusConfig',
]
