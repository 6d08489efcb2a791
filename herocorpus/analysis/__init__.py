"""
Herocorpus Analysis Module

Loading written corpora back for inspection and training data preparation.

Usage:
    from herocorpus.analysis import load_move_examples, to_feature_matrix

    df = load_move_examples('./data/npc_dota_hero_axe/2_moveexamples')
    inputs, outputs = to_feature_matrix(df)
"""

from herocorpus.analysis.corpus_loader import (
    parse_move_row,
    load_move_examples,
    to_feature_matrix,
    pad_lists,
    save_to_parquet,
)

__all__ = [
    'parse_move_row',
    'load_move_examples',
    'to_feature_matrix',
    'pad_lists',
    'save_to_parquet',
]
