"""Configuration management for the Feedback Intelligence Engine."""
import os
import yaml
from pathlib import Path
from typing import Any, Dict, FrozenSet, Tuple
from dataclasses import dataclass, field


DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Academics",
    "Faculty",
    "Infrastructure",
    "Hostel",
    "Administration",
    "Other",
)

DEFAULT_STOPWORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "and", "or", "to", "of", "in", "on", "for",
    "with", "is", "are", "was", "were", "be", "been", "it", "this", "that",
    "we", "i", "you", "they", "he", "she", "as", "at", "by", "from",
    "into", "not", "no", "too", "very",
})

# Checked in order, first family with a keyword in the description wins.
DEFAULT_KEYWORD_FAMILIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Faculty", ("professor", "teacher", "faculty")),
    ("Infrastructure", ("wifi", "internet", "network")),
    ("Hostel", ("hostel", "dorm", "room")),
    ("Academics", ("course", "class", "exam")),
)

FALLBACK_CATEGORY = "Other"
ALL_CATEGORIES = "All"


@dataclass(frozen=True)
class StorageConfig:
    """Topic store configuration."""
    topics_path: str = "data/topics.json"


@dataclass(frozen=True)
class OllamaConfig:
    """Ollama (local LLM) configuration."""
    enabled: bool = True
    base_url: str = "http://localhost:11434"
    model: str = "gemma:2b"
    temperature: float = 0.0
    timeout_seconds: float = 10.0
    summary_enabled: bool = False
    summary_timeout_seconds: float = 3.0
    summary_char_budget: int = 8000


@dataclass(frozen=True)
class EngineConfig:
    """Clustering, classification and insights parameters."""
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    stopwords: FrozenSet[str] = DEFAULT_STOPWORDS
    keyword_families: Tuple[Tuple[str, Tuple[str, ...]], ...] = DEFAULT_KEYWORD_FAMILIES
    similarity_threshold: float = 0.25
    theme_sample_size: int = 500
    themes_limit: int = 10
    top_topics_limit: int = 10
    leaderboard_limit: int = 10
    summary_top_topics: int = 3
    analytics_top_topics: int = 5
    trend_window_days: int = 7


@dataclass(frozen=True)
class APIConfig:
    """API server configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)


@dataclass(frozen=True)
class Config:
    """Main configuration object."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    api: APIConfig = field(default_factory=APIConfig)


def _engine_config(section: Dict[str, Any]) -> EngineConfig:
    """Freeze list-valued YAML entries so the engine config stays immutable."""
    values = dict(section)
    if 'categories' in values:
        values['categories'] = tuple(values['categories'])
    if 'stopwords' in values:
        values['stopwords'] = frozenset(word.lower() for word in values['stopwords'])
    if 'keyword_families' in values:
        families = values['keyword_families']
        if isinstance(families, dict):
            families = list(families.items())
        values['keyword_families'] = tuple(
            (category, tuple(keyword.lower() for keyword in keywords))
            for category, keywords in families
        )
    return EngineConfig(**values)


def _summary_flag_from_env(ollama: OllamaConfig) -> OllamaConfig:
    """Honour the ENABLE_OLLAMA_SUMMARY=1 feature flag."""
    if os.environ.get('ENABLE_OLLAMA_SUMMARY') == '1' and not ollama.summary_enabled:
        values = {name: getattr(ollama, name) for name in ollama.__dataclass_fields__}
        values['summary_enabled'] = True
        return OllamaConfig(**values)
    return ollama


def load_config(config_path: str = "config/config.yaml") -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Config object
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f) or {}

    api_section = dict(config_dict.get('api', {}))
    if 'cors_origins' in api_section:
        api_section['cors_origins'] = tuple(api_section['cors_origins'])

    return Config(
        storage=StorageConfig(**config_dict.get('storage', {})),
        ollama=_summary_flag_from_env(OllamaConfig(**config_dict.get('ollama', {}))),
        engine=_engine_config(config_dict.get('engine', {})),
        api=APIConfig(**api_section)
    )
