"""
Command line entry point for building a corpus.

Usage:
    herocorpus-build match1.jsonl match2.jsonl
    herocorpus-build --output-dir ./data --metadata-path ./bots/ability_data.lua replays/*.jsonl
    herocorpus-build --decoder mydecoder:DemoSource replays/*.dem
"""

import argparse
import logging
import sys
from typing import List, Optional

from herocorpus.config.corpus_config import CorpusConfig
from herocorpus.corpus.sink import CorpusSink
from herocorpus.errors import CorpusError
from herocorpus.parsing.corpus_pipeline import CorpusPipeline

logger = logging.getLogger('herocorpus')


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='herocorpus-build',
        description='Build per-hero training corpora from Dota 2 replays'
    )
    parser.add_argument('replays', nargs='*', help='Replay files to process, in order')
    parser.add_argument('--output-dir', help='Directory for per-hero example files')
    parser.add_argument('--metadata-path', help='Path of the generated Lua metadata module')
    parser.add_argument('--decoder', help="Replay decoder as 'module:attribute'")
    parser.add_argument('--log-level', help='Logging level (DEBUG, INFO, WARNING, ...)')
    return parser


def load_config(args: argparse.Namespace) -> CorpusConfig:
    """Environment configuration, overridden by any flags given on the command line."""
    config = CorpusConfig.from_env()

    if args.output_dir:
        config.output_dir = args.output_dir
    if args.metadata_path:
        config.metadata_path = args.metadata_path
    if args.decoder:
        config.decoder = args.decoder
    if args.log_level:
        config.log_level = args.log_level

    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.replays:
        parser.error('at least one replay is required')

    try:
        config = load_config(args)
        config.validate()
        decoder = config.load_decoder()
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(
        stream=sys.stdout,
        level=config.log_level.upper(),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    try:
        with CorpusSink(config.output_dir, config.metadata_path) as sink:
            pipeline = CorpusPipeline(sink, decoder)
            pipeline.process_replays(args.replays)
    except CorpusError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
