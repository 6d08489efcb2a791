"""
Herocorpus Corpus Module

Output side of corpus building: training example records, per-hero symbol registries,
and the sink that owns the example files and writes the Lua metadata module.

```python
from herocorpus.corpus import CorpusSink, MoveExampleBuilder

with CorpusSink('./data', './ability_data.lua') as sink:
    corpus = sink.get_corpus('npc_dota_hero_axe', 2)
    builder = MoveExampleBuilder(time=0.1, health=1.0)
    corpus.write(builder.build())
```
"""

from herocorpus.corpus.examples import MoveExample, MoveExampleBuilder
from herocorpus.corpus.registry import SymbolRegistry, SymbolTable
from herocorpus.corpus.sink import Corpus, CorpusSink
from herocorpus.corpus.metadata_writer import render_metadata

__all__ = [
    'MoveExample',
    'MoveExampleBuilder',
    'SymbolRegistry',
    'SymbolTable',
    'Corpus',
    'CorpusSink',
    'render_metadata',
]
