"""Configuration loading and validation tests."""

import pytest

from wordcrawler.utils import config as config_module
from wordcrawler.utils.config import ConfigError, ConfigManager, get_config, load_config

VALID_YAML = """
crawler:
  seed_urls:
    - https://example.com/
  timeout_seconds: 12
  popular_word_count: 5
  target_parallelism: 3
  max_depth: 2
  ignored_urls:
    - ".*\\\\.pdf"
  ignored_words:
    - "^.{1,3}$"
logging:
  level: DEBUG
  file: ""
output:
  result_path: out/result.json
"""


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_valid_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "config_manager", ConfigManager())
    config = load_config(str(write_config(tmp_path, VALID_YAML)))

    assert config.crawler.seed_urls == ["https://example.com/"]
    assert config.crawler.timeout_seconds == 12
    assert config.crawler.compiled_ignored_urls()[0].fullmatch("http://x/a.pdf")
    assert config.logging.level == "DEBUG"
    assert config.output.result_path == "out/result.json"
    assert config.monitoring.metrics_enabled is False
    assert get_config() is config


def test_missing_sections_use_defaults():
    config = ConfigManager().parse({"crawler": {"seed_urls": ["http://a"]}})

    assert config.crawler.max_depth == 2
    assert config.logging.level == "INFO"
    assert config.output.result_path == ""


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigManager(str(tmp_path / "absent.yaml")).load_config()


def test_config_not_loaded():
    with pytest.raises(ConfigError):
        ConfigManager().config


def test_malformed_yaml(tmp_path):
    with pytest.raises(ConfigError):
        ConfigManager(str(write_config(tmp_path, "crawler: [unclosed"))).load_config()


@pytest.mark.parametrize(
    "crawler",
    [
        {"max_depth": -1},
        {"target_parallelism": 0},
        {"timeout_seconds": -0.5},
        {"popular_word_count": -1},
        {"request_timeout": 0},
        {"max_content_bytes": 0},
        {"max_depth": "3"},
        {"target_parallelism": True},
        {"ignored_urls": ["[bad"]},
        {"ignored_words": ["(bad"]},
        {"seed_urls": "https://example.com/"},
        {"seed_urls": None},
        {"ignored_urls": [5]},
        {"ignored_urls": ".*\\.pdf"},
        {"ignored_words": [None]},
        {"unknown_key": 1},
    ],
)
def test_invalid_crawler_values(crawler):
    with pytest.raises(ConfigError):
        ConfigManager().parse({"crawler": crawler})


def test_section_must_be_mapping():
    with pytest.raises(ConfigError):
        ConfigManager().parse({"crawler": ["not", "a", "mapping"]})


def test_root_must_be_mapping():
    with pytest.raises(ConfigError):
        ConfigManager().parse(["crawler"])


def test_bad_pattern_error_names_the_pattern():
    with pytest.raises(ConfigError, match=r"\[bad"):
        ConfigManager().parse({"crawler": {"ignored_urls": ["ok", "[bad"]}})
