"""
Script to convert every movement example file under a corpus directory to Parquet.
Writes one <team>_moveexamples.parquet next to each source file.

Usage:
    python scripts/export_parquet.py --data-dir ./data
"""

import argparse
from pathlib import Path

from herocorpus.analysis import load_move_examples, save_to_parquet


def export_corpus(data_dir: str) -> int:
    """Convert all *_moveexamples files under data_dir. Returns the number of files written."""
    written = 0
    for path in sorted(Path(data_dir).glob('*/*_moveexamples')):
        df = load_move_examples(str(path))
        if df.empty:
            print(f"Skipping {path} (no examples)")
            continue
        output_path = save_to_parquet(df, str(path.with_suffix('.parquet')))
        print(f"{path}: {len(df):,} examples -> {output_path}")
        written += 1
    return written


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Convert corpus example files to Parquet")
    parser.add_argument('--data-dir', type=str, default='./data', help='Corpus output directory')
    args = parser.parse_args()

    count = export_corpus(args.data_dir)
    print(f"\nExported {count} files")
