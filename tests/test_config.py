import pytest

from wiki_crawler.config import ConfigLoader, ConfigurationError, validate_config
from wiki_crawler.core import CrawlerConfig


def test_default_config_is_valid():
    config = ConfigLoader.create_default_config()

    assert validate_config(config)
    assert config.politeness.requests_per_pause == 10
    assert config.politeness.pause_seconds == 1.0
    assert config.relevance.policy == "scored"
    assert config.relevance.case_sensitive is False
    assert config.prune_unvisited_edges is True


def test_save_and_load_yaml(tmp_path):
    config = CrawlerConfig(seed_path="/wiki/Tennis", keywords=["tennis", "grand slam"], max_vertices=20)
    config.relevance.policy = "path"
    config.storage.storage_type = "sqlite"
    config.storage.output_path = "data/tennis.db"
    path = tmp_path / "config" / "tennis.yaml"

    ConfigLoader.save_to_yaml(config, str(path))
    loaded = ConfigLoader.load_from_yaml(str(path))

    assert loaded.seed_path == "/wiki/Tennis"
    assert loaded.keywords == ["tennis", "grand slam"]
    assert loaded.max_vertices == 20
    assert loaded.relevance.policy == "path"
    assert loaded.storage.storage_type == "sqlite"
    assert loaded.storage.output_path == "data/tennis.db"
    assert loaded.link_extraction.block_tags == ["p"]


def test_load_partial_yaml_uses_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text(
        "crawl:\n"
        "  seed_path: /wiki/Chess\n"
        "  keywords: chess\n"
        "components:\n"
        "  politeness:\n"
        "    pause_seconds: 2.5\n",
        encoding="utf-8",
    )

    config = ConfigLoader.load_from_yaml(str(path))

    assert config.seed_path == "/wiki/Chess"
    assert config.keywords == ["chess"]
    assert config.politeness.pause_seconds == 2.5
    assert config.politeness.requests_per_pause == 10
    assert config.fetch.base_url == "https://en.wikipedia.org"


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigLoader.load_from_yaml(str(tmp_path / "missing.yaml"))


def test_load_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("crawl: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ConfigLoader.load_from_yaml(str(path))


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Empty"):
        ConfigLoader.load_from_yaml(str(path))


def _set(config, dotted, value):
    target = config
    *parents, name = dotted.split(".")
    for parent in parents:
        target = getattr(target, parent)
    setattr(target, name, value)


@pytest.mark.parametrize("field,value", [
    ("seed_path", ""),
    ("max_vertices", 0),
    ("max_vertices", -5),
    ("keywords", []),
    ("keywords", ["  "]),
    ("politeness.requests_per_pause", 0),
    ("politeness.pause_seconds", -1.0),
    ("relevance.policy", "regex"),
    ("relevance.threshold", 0),
    ("storage.storage_type", "postgresql"),
    ("fetch.timeout_seconds", 0),
])
def test_validate_rejects_bad_settings(field, value):
    config = CrawlerConfig()
    _set(config, field, value)

    with pytest.raises(ConfigurationError):
        validate_config(config)


@pytest.mark.parametrize("field,value", [
    ("seed_path", None),
    ("max_vertices", "50"),
    ("max_vertices", 2.5),
    ("max_vertices", True),
    ("politeness.requests_per_pause", "10"),
    ("politeness.pause_seconds", "fast"),
    ("relevance.threshold", "2"),
    ("fetch.timeout_seconds", None),
])
def test_validate_rejects_wrong_types(field, value):
    config = CrawlerConfig()
    _set(config, field, value)

    with pytest.raises(ConfigurationError, match="must be"):
        validate_config(config)


def test_loaded_string_threshold_fails_validation(tmp_path):
    path = tmp_path / "quoted.yaml"
    path.write_text("components:\n  relevance:\n    threshold: '2'\n", encoding="utf-8")

    config = ConfigLoader.load_from_yaml(str(path))

    with pytest.raises(ConfigurationError, match="relevance threshold must be an integer"):
        validate_config(config)
