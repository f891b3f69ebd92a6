"""Initialization for utils package."""
from .config import (
    load_config,
    Config,
    StorageConfig,
    OllamaConfig,
    EngineConfig,
    APIConfig
)
from .logging_config import (
    setup_logger
)
from .helpers import (
    generate_topic_id,
    utc_now,
    parse_timestamp,
    format_timestamp,
    truncate_text
)
from .ollama_client import OllamaClient, OracleError, TextOracle, consult_oracle

__all__ = [
    'load_config',
    'Config',
    'StorageConfig',
    'OllamaConfig',
    'EngineConfig',
    'APIConfig',
    'setup_logger',
    'generate_topic_id',
    'utc_now',
    'parse_timestamp',
    'format_timestamp',
    'truncate_text',
    'OllamaClient',
    'OracleError',
    'TextOracle',
    'consult_oracle'
]
