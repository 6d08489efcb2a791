"""
Corpus Loader

Reads movement example files written by the corpus sink back into pandas, for inspection,
training data preparation or conversion to Parquet.

Fixed-width fields become regular columns; the variable-length ability cooldown and held item
lists are kept as list columns.
"""

from pathlib import Path
from typing import Any, Dict, List, Tuple

import numpy as np
import pandas as pd

from herocorpus.config.game_config import GameConfig
from herocorpus.corpus.examples import ITEMS_MARKER, OUTPUT_MARKER

SCALAR_COLUMNS = ['time', 'health', 'mana', 'level', 'lane_front', 'x', 'y']
ALLY_COLUMNS = [f"ally_{i}_{axis}" for i in range(GameConfig.MAX_ALLIES) for axis in ('x', 'y')]
ENEMY_COLUMNS = [f"enemy_{i}_{axis}" for i in range(GameConfig.MAX_ENEMIES) for axis in ('x', 'y')]
INPUT_COLUMNS = SCALAR_COLUMNS + ALLY_COLUMNS + ENEMY_COLUMNS
OUTPUT_COLUMNS = ['is_attack', 'move_x', 'move_y', 'target', 'ability_used', 'item_used']


def parse_move_row(line: str) -> Dict[str, Any]:
    """
    Split one movement example row into named fields.

    Args:
        line: A row as written by MoveExample.to_row()

    Returns:
        Dict with every fixed column plus 'ability_cooldowns' and 'current_items' lists

    Raises:
        ValueError: If the row is missing its markers or has the wrong number of fields
    """
    fields = line.strip().rstrip(',').split(',')

    try:
        items_at = fields.index(ITEMS_MARKER)
        output_at = fields.index(OUTPUT_MARKER)
    except ValueError:
        raise ValueError(f"Row is missing '{ITEMS_MARKER}' or '{OUTPUT_MARKER}' marker")

    inputs = fields[:items_at]
    outputs = fields[output_at + 1:]

    if len(inputs) < len(INPUT_COLUMNS):
        raise ValueError(f"Expected at least {len(INPUT_COLUMNS)} input fields, got {len(inputs)}")
    if len(outputs) != len(OUTPUT_COLUMNS):
        raise ValueError(f"Expected {len(OUTPUT_COLUMNS)} output fields, got {len(outputs)}")

    row: Dict[str, Any] = {
        column: float(value) for column, value in zip(INPUT_COLUMNS, inputs)
    }
    row['ability_cooldowns'] = [float(value) for value in inputs[len(INPUT_COLUMNS):]]
    row['current_items'] = [int(value) for value in fields[items_at + 1:output_at]]

    row['is_attack'] = float(outputs[0])
    row['move_x'] = float(outputs[1])
    row['move_y'] = float(outputs[2])
    row['target'] = int(outputs[3])
    row['ability_used'] = int(outputs[4])
    row['item_used'] = int(outputs[5])

    return row


def load_move_examples(path: str) -> pd.DataFrame:
    """
    Load a movement example file (e.g. data/npc_dota_hero_axe/2_moveexamples).

    Args:
        path: Path of the example file

    Returns:
        DataFrame with one row per example
    """
    rows = []
    with open(Path(path)) as f:
        for line in f:
            if line.strip():
                rows.append(parse_move_row(line))

    columns = INPUT_COLUMNS + ['ability_cooldowns', 'current_items'] + OUTPUT_COLUMNS
    return pd.DataFrame(rows, columns=columns)


def to_feature_matrix(df: pd.DataFrame) -> Tuple[np.ndarray, np.ndarray]:
    """
    Fixed-width inputs and outputs as float32 arrays.

    Returns:
        (inputs of shape (n, 23), outputs of shape (n, 6))
    """
    inputs = df[INPUT_COLUMNS].to_numpy(dtype=np.float32)
    outputs = df[OUTPUT_COLUMNS].to_numpy(dtype=np.float32)
    return inputs, outputs


def pad_lists(values: List[List[float]], fill: float = 0.0) -> np.ndarray:
    """Pad variable-length lists (cooldowns, items) into a 2D array."""
    width = max((len(v) for v in values), default=0)
    padded = np.full((len(values), width), fill, dtype=np.float32)
    for i, v in enumerate(values):
        padded[i, :len(v)] = v
    return padded


def save_to_parquet(df: pd.DataFrame, path: str, compression: str = 'snappy') -> Path:
    """
    Save loaded examples as Parquet.

    Args:
        df: DataFrame from load_move_examples()
        path: Output file path
        compression: Parquet compression algorithm

    Returns:
        Path of the written file
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(output_path, engine='pyarrow', compression=compression, index=False)
    return output_path
