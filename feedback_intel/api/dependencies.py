"""FastAPI dependencies wiring the engine to its collaborators."""
import os
from functools import lru_cache
from typing import Optional

from fastapi import Depends

from feedback_intel.classifier import CategoryClassifier
from feedback_intel.ingestion import FeedbackIngestor
from feedback_intel.insights import InsightsAggregator
from feedback_intel.matcher import DuplicateMatcher
from feedback_intel.utils import Config, OllamaClient, TextOracle, load_config
from feedback_intel.utils.storage import TopicStorage

CONFIG_PATH_ENV = 'FEEDBACK_INTEL_CONFIG'


@lru_cache()
def get_config() -> Config:
    return load_config(os.environ.get(CONFIG_PATH_ENV, "config/config.yaml"))


@lru_cache()
def _storage_for(topics_path: str) -> TopicStorage:
    return TopicStorage(topics_path=topics_path)


def get_storage(config: Config = Depends(get_config)) -> TopicStorage:
    return _storage_for(config.storage.topics_path)


def get_oracle(config: Config = Depends(get_config)) -> Optional[TextOracle]:
    """Ollama client, or None when the oracle is disabled in config."""
    if not config.ollama.enabled:
        return None
    return OllamaClient.from_config(config.ollama)


def get_ingestor(
    config: Config = Depends(get_config),
    storage: TopicStorage = Depends(get_storage),
    oracle: Optional[TextOracle] = Depends(get_oracle)
) -> FeedbackIngestor:
    timeout = config.ollama.timeout_seconds
    return FeedbackIngestor(
        storage=storage,
        matcher=DuplicateMatcher(oracle, timeout_seconds=timeout),
        classifier=CategoryClassifier(oracle, config.engine, timeout_seconds=timeout)
    )


def get_aggregator(
    config: Config = Depends(get_config),
    storage: TopicStorage = Depends(get_storage),
    oracle: Optional[TextOracle] = Depends(get_oracle)
) -> InsightsAggregator:
    return InsightsAggregator(storage, oracle=oracle, config=config)
