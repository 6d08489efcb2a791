"""
Script to build per-hero training corpora from a list of replays.

Usage:
    python scripts/build_corpus.py replays/match1.jsonl replays/match2.jsonl
    python scripts/build_corpus.py --output-dir ./data --log-level DEBUG replays/*.jsonl
"""

import sys

from herocorpus.cli import main

if __name__ == "__main__":
    sys.exit(main())
