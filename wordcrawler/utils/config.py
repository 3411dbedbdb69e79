"""
Configuration management for the word crawler.
"""

import re
import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional, Pattern, Sequence, Union
from dataclasses import dataclass, field


class ConfigError(ValueError):
    """Raised when configuration values are missing or invalid."""
    pass


def compile_patterns(patterns: Sequence[Union[str, Pattern]], name: str) -> List[Pattern]:
    """Compile regex patterns, reporting the offending one on failure."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except (re.error, TypeError) as e:
            raise ConfigError(f"Invalid pattern in {name}: {pattern!r} ({e})") from e
    return compiled


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    seed_urls: List[str] = field(default_factory=list)
    timeout_seconds: float = 30.0
    popular_word_count: int = 10
    target_parallelism: int = 4
    max_depth: int = 2
    ignored_urls: List[str] = field(default_factory=list)
    ignored_words: List[str] = field(default_factory=list)
    user_agent: str = "wordcrawler/1.0"
    request_timeout: float = 10.0
    max_content_bytes: int = 10 * 1024 * 1024

    def compiled_ignored_urls(self) -> List[Pattern]:
        return compile_patterns(self.ignored_urls, 'ignored_urls')

    def compiled_ignored_words(self) -> List[Pattern]:
        return compile_patterns(self.ignored_words, 'ignored_words')


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: str = "logs/crawler.log"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json: bool = False


@dataclass
class OutputConfig:
    """Where the crawl result is written. An empty path means stdout."""
    result_path: str = ""


@dataclass
class MonitoringConfig:
    """Configuration for monitoring."""
    metrics_enabled: bool = False
    prometheus_port: int = 8000


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


def _section(config_data: Dict[str, Any], name: str, cls):
    data = config_data.get(name) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    try:
        return cls(**data)
    except TypeError as e:
        raise ConfigError(f"Invalid keys in section '{name}': {e}") from e


def validate_crawler_config(crawler: CrawlerConfig):
    """Validate crawler values. Raises ConfigError on the first problem found."""
    for name in ('seed_urls', 'ignored_urls', 'ignored_words'):
        value = getattr(crawler, name)
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ConfigError(f"{name} must be a list of strings, got {value!r}")

    for name in ('timeout_seconds', 'request_timeout'):
        value = getattr(crawler, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{name} must be a number, got {value!r}")

    for name in ('popular_word_count', 'target_parallelism', 'max_depth', 'max_content_bytes'):
        value = getattr(crawler, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{name} must be an integer, got {value!r}")

    if crawler.timeout_seconds < 0:
        raise ConfigError("timeout_seconds must be non-negative")

    if crawler.popular_word_count < 0:
        raise ConfigError("popular_word_count must be non-negative")

    if crawler.target_parallelism < 1:
        raise ConfigError("target_parallelism must be at least 1")

    if crawler.max_depth < 0:
        raise ConfigError("max_depth must be non-negative")

    if crawler.request_timeout <= 0:
        raise ConfigError("request_timeout must be positive")

    if crawler.max_content_bytes <= 0:
        raise ConfigError("max_content_bytes must be positive")

    crawler.compiled_ignored_urls()
    crawler.compiled_ignored_words()


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self._config: Optional[Config] = None
        self.logger = logging.getLogger(__name__)

    def load_config(self) -> Config:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            try:
                config_data = yaml.safe_load(file) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Malformed YAML in {self.config_path}: {e}") from e

        self._config = self.parse(config_data)
        return self._config

    def parse(self, config_data: Dict[str, Any]) -> Config:
        """Build and validate a Config from already-loaded data."""
        if not isinstance(config_data, dict):
            raise ConfigError("Configuration root must be a mapping")

        config = Config(
            crawler=_section(config_data, 'crawler', CrawlerConfig),
            logging=_section(config_data, 'logging', LoggingConfig),
            output=_section(config_data, 'output', OutputConfig),
            monitoring=_section(config_data, 'monitoring', MonitoringConfig),
        )

        validate_crawler_config(config.crawler)
        self.logger.info("Configuration validation passed")
        return config

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ConfigError("Configuration not loaded. Call load_config() first.")
        return self._config


# Global config manager instance
config_manager = ConfigManager()


def get_config() -> Config:
    """Get the global configuration instance."""
    return config_manager.config


def load_config(config_path: str = "config.yaml") -> Config:
    """Load configuration from file."""
    global config_manager
    config_manager = ConfigManager(config_path)
    return config_manager.load_config()
