"""
Configuration management for corpus building.

Centralizes environment variable loading and configuration management.
Supports both environment-based and programmatic configuration for testing.
"""

from dotenv import load_dotenv
import importlib
import logging
import os
from typing import Callable
from dataclasses import dataclass

DEFAULT_DECODER = 'herocorpus.parsing.event_log:EventLogSource'


@dataclass
class CorpusConfig:
    """
    Configuration for a corpus build run.

    Attributes:
        output_dir: Directory holding one sub-directory of example files per hero
        metadata_path: Path of the Lua metadata module written at shutdown
        decoder: Replay decoder factory as 'module:attribute'
        log_level: Logging level name for the CLI
    """

    output_dir: str = "./data"
    metadata_path: str = "./ability_data.lua"
    decoder: str = DEFAULT_DECODER
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'CorpusConfig':
        """
        Load configuration from environment variables (.env file).

        Optional environment variables:
            - HEROCORPUS_OUTPUT_DIR
            - HEROCORPUS_METADATA_PATH
            - HEROCORPUS_DECODER
            - HEROCORPUS_LOG_LEVEL

        Returns:
            CorpusConfig instance
        """
        load_dotenv()

        defaults = cls()
        return cls(
            output_dir=os.environ.get("HEROCORPUS_OUTPUT_DIR", defaults.output_dir),
            metadata_path=os.environ.get("HEROCORPUS_METADATA_PATH", defaults.metadata_path),
            decoder=os.environ.get("HEROCORPUS_DECODER", defaults.decoder),
            log_level=os.environ.get("HEROCORPUS_LOG_LEVEL", defaults.log_level)
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'CorpusConfig':
        """
        Create configuration from a dictionary.

        Useful for testing or programmatic configuration.

        Example:
            >>> config = CorpusConfig.from_dict({
            ...     'output_dir': './test_data',
            ...     'metadata_path': './test_ability_data.lua'
            ... })
        """
        return cls(**config_dict)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: If the decoder spec or log level is malformed
        """
        module_name, sep, attribute = self.decoder.partition(':')
        if not sep or not module_name or not attribute:
            raise ValueError(
                f"Invalid decoder '{self.decoder}'. Expected 'module:attribute'."
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level '{self.log_level}'")

    def load_decoder(self) -> Callable:
        """
        Import the configured decoder factory.

        Returns:
            Callable taking a binary stream and returning a ReplaySource

        Raises:
            ValueError: If the decoder spec is malformed or cannot be imported
        """
        self.validate()
        module_name, _, attribute = self.decoder.partition(':')
        try:
            module = importlib.import_module(module_name)
            return getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Cannot load decoder '{self.decoder}': {e}") from e
