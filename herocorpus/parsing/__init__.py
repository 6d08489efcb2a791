"""
Herocorpus Parsing Module - Two-Pass Replay Analysis

This module turns decoded Dota 2 replays into labeled training examples.

The first pass finds the winning team and its 3 players with the most kills; the second pass
re-reads the replay and writes an example for every order those players' heroes issued.
Replay decoding itself is delegated to a ReplaySource implementation.

## Quick Start

### Build a corpus from event logs
```python
from herocorpus.corpus import CorpusSink
from herocorpus.parsing import CorpusPipeline, EventLogSource

with CorpusSink('./data', './ability_data.lua') as sink:
    pipeline = CorpusPipeline(sink, EventLogSource)
    result = pipeline.process_replays(['./match.jsonl'])
```

### Run the passes by hand
```python
first = run_first_pass(EventLogSource(stream))
stream.seek(0)
second = run_second_pass(EventLogSource(stream), sink, first)
```
"""

from herocorpus.parsing.replay_source import Entity, ReplaySource, UnitOrder, HandleSlots
from herocorpus.parsing.event_log import EventLogSource, EventLogEntity
from herocorpus.parsing.first_pass import FirstPassResult, TopPlayer, run_first_pass
from herocorpus.parsing.second_pass import SecondPassResult, run_second_pass
from herocorpus.parsing.corpus_pipeline import (
    CorpusPipeline,
    PipelineProgress,
    PipelineResult,
    ReplayResult
)

__all__ = [
    # Decoder interface
    'Entity',
    'ReplaySource',
    'UnitOrder',
    'HandleSlots',
    'EventLogSource',
    'EventLogEntity',

    # Passes
    'FirstPassResult',
    'TopPlayer',
    'run_first_pass',
    'SecondPassResult',
    'run_second_pass',

    # Pipeline orchestrator
    'CorpusPipeline',
    'PipelineProgress',
    'PipelineResult',
    'ReplayResult',
]
