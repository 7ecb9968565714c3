"""
Crawler Configuration Management - Centralized configuration loading and validation.
Supports loading from YAML files with validation and defaults.
"""

import logging
import yaml
from typing import Dict, Any
from pathlib import Path
from dataclasses import asdict

from ..components.fetcher import FetchConfig
from ..components.graph_sink import StorageConfig
from ..components.link_extraction import LinkExtractionConfig
from ..components.politeness import PolitenessConfig
from ..components.relevance import RelevanceConfig, RelevancePolicy
from ..components.robots import RobotsConfig
from ..core.crawl_engine import CrawlerConfig
from ..errors import CrawlerError


STORAGE_TYPES = ('text', 'sqlite')


class ConfigurationError(CrawlerError):
    """Raised when configuration is invalid."""
    pass


class ConfigLoader:
    """Loads and saves crawler configuration as YAML files."""

    @staticmethod
    def load_from_yaml(config_path: str) -> CrawlerConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            CrawlerConfig object

        Raises:
            ConfigurationError: If the file is missing, unreadable or malformed
        """
        logger = logging.getLogger(__name__)

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read {config_path}: {e}")

        if not config_dict:
            raise ConfigurationError(f"Empty configuration file: {config_path}")
        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        logger.info(f"Loaded configuration from {config_path}")

        try:
            return ConfigLoader._parse_config(config_dict)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Failed to parse configuration: {e}")

    @staticmethod
    def _parse_config(config_dict: Dict[str, Any]) -> CrawlerConfig:
        """Parse configuration dictionary into CrawlerConfig object."""
        crawl = config_dict.get('crawl') or {}
        components = config_dict.get('components') or {}
        defaults = CrawlerConfig()

        # HTTP Fetch
        fetch_cfg = components.get('fetch') or {}
        fetch = FetchConfig(
            base_url=fetch_cfg.get('base_url', defaults.fetch.base_url),
            timeout_seconds=fetch_cfg.get('timeout_seconds', 30),
            max_retries=fetch_cfg.get('max_retries', 3),
            max_redirects=fetch_cfg.get('max_redirects', 5),
            verify_ssl=fetch_cfg.get('verify_ssl', True),
            user_agent=fetch_cfg.get('user_agent', defaults.fetch.user_agent),
            max_content_size_mb=fetch_cfg.get('max_content_size_mb', 10),
            accept_language=fetch_cfg.get('accept_language', defaults.fetch.accept_language),
            accept_encoding=fetch_cfg.get('accept_encoding', defaults.fetch.accept_encoding),
            retry_backoff_factor=fetch_cfg.get('retry_backoff_factor', 0.5),
            retry_on_status=fetch_cfg.get('retry_on_status'),
            pool_connections=fetch_cfg.get('pool_connections', 1),
            pool_maxsize=fetch_cfg.get('pool_maxsize', 4)
        )

        # Robots.txt
        robots_cfg = components.get('robots') or {}
        robots = RobotsConfig(
            respect_robots_txt=robots_cfg.get('respect_robots_txt', True),
            robots_path=robots_cfg.get('robots_path', '/robots.txt'),
            timeout_seconds=robots_cfg.get('timeout_seconds', 10),
            decode_percent_escapes=robots_cfg.get('decode_percent_escapes', True)
        )

        # Politeness
        polite_cfg = components.get('politeness') or {}
        politeness = PolitenessConfig(
            requests_per_pause=polite_cfg.get('requests_per_pause', 10),
            pause_seconds=polite_cfg.get('pause_seconds', 1.0)
        )

        # Link Extraction
        link_cfg = components.get('link_extraction') or {}
        link_extraction = LinkExtractionConfig(
            parser=link_cfg.get('parser', 'html.parser'),
            base_url=link_cfg.get('base_url', fetch.base_url),
            article_prefix=link_cfg.get('article_prefix', '/wiki/'),
            content_root_selector=link_cfg.get('content_root_selector'),
            block_tags=link_cfg.get('block_tags'),
            context_window=link_cfg.get('context_window', 100),
            lowercase_paths=link_cfg.get('lowercase_paths', False),
            max_links_per_page=link_cfg.get('max_links_per_page', 1000)
        )

        # Relevance
        rel_cfg = components.get('relevance') or {}
        relevance = RelevanceConfig(
            policy=rel_cfg.get('policy', 'scored'),
            threshold=rel_cfg.get('threshold', 1),
            context_window=rel_cfg.get('context_window', 100),
            case_sensitive=rel_cfg.get('case_sensitive', False),
            article_prefix=rel_cfg.get('article_prefix', link_extraction.article_prefix)
        )

        # Storage
        storage_cfg = components.get('storage') or {}
        storage = StorageConfig(
            storage_type=storage_cfg.get('storage_type', 'text'),
            output_path=storage_cfg.get('output_path', defaults.storage.output_path),
            encoding=storage_cfg.get('encoding', 'utf-8')
        )

        keywords = crawl.get('keywords', defaults.keywords)
        if isinstance(keywords, str):
            keywords = [keywords]

        return CrawlerConfig(
            seed_path=crawl.get('seed_path', defaults.seed_path),
            keywords=[str(k) for k in keywords or []],
            max_vertices=crawl.get('max_vertices', defaults.max_vertices),
            prune_unvisited_edges=crawl.get('prune_unvisited_edges', True),
            fetch=fetch,
            robots=robots,
            politeness=politeness,
            link_extraction=link_extraction,
            relevance=relevance,
            storage=storage
        )

    @staticmethod
    def save_to_yaml(config: CrawlerConfig, output_path: str):
        """Save configuration to YAML file."""
        logger = logging.getLogger(__name__)

        config_dict = {
            'crawl': {
                'seed_path': config.seed_path,
                'keywords': list(config.keywords),
                'max_vertices': config.max_vertices,
                'prune_unvisited_edges': config.prune_unvisited_edges,
            },
            'components': {
                'fetch': asdict(config.fetch),
                'robots': asdict(config.robots),
                'politeness': asdict(config.politeness),
                'link_extraction': asdict(config.link_extraction),
                'relevance': asdict(config.relevance),
                'storage': asdict(config.storage),
            }
        }

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)
            logger.info(f"Configuration saved to {output_path}")
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    @staticmethod
    def create_default_config() -> CrawlerConfig:
        """Create a default configuration."""
        return CrawlerConfig()


def _require_number(value: Any, name: str, integer: bool = False):
    """Reject YAML values of the wrong type before they reach a comparison."""
    kinds = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, kinds):
        expected = "an integer" if integer else "a number"
        raise ConfigurationError(f"{name} must be {expected}, got {value!r}")


def validate_config(config: CrawlerConfig) -> bool:
    """
    Validate crawler configuration.

    Raises:
        ConfigurationError: On the first invalid setting
    """
    logger = logging.getLogger(__name__)

    if not isinstance(config.seed_path, str) or not config.seed_path.strip():
        raise ConfigurationError("seed_path must be a non-empty string")

    _require_number(config.max_vertices, "max_vertices", integer=True)
    _require_number(config.politeness.requests_per_pause, "requests_per_pause", integer=True)
    _require_number(config.politeness.pause_seconds, "pause_seconds")
    _require_number(config.relevance.threshold, "relevance threshold", integer=True)
    _require_number(config.fetch.timeout_seconds, "fetch timeout_seconds")

    if config.max_vertices <= 0:
        raise ConfigurationError("max_vertices must be a positive integer")

    if not [k for k in config.keywords if isinstance(k, str) and k.strip()]:
        raise ConfigurationError("at least one keyword is required")

    if config.politeness.requests_per_pause < 1:
        raise ConfigurationError("requests_per_pause must be at least 1")

    if config.politeness.pause_seconds < 0:
        raise ConfigurationError("pause_seconds cannot be negative")

    valid_policies = [policy.value for policy in RelevancePolicy]
    if str(config.relevance.policy).lower() not in valid_policies:
        raise ConfigurationError(
            f"Unknown relevance policy '{config.relevance.policy}' "
            f"(expected one of {valid_policies})"
        )

    if config.relevance.threshold < 1:
        raise ConfigurationError("relevance threshold must be at least 1")

    if str(config.storage.storage_type).lower() not in STORAGE_TYPES:
        raise ConfigurationError(
            f"Unknown storage type '{config.storage.storage_type}' "
            f"(expected one of {list(STORAGE_TYPES)})"
        )

    if config.fetch.timeout_seconds <= 0:
        raise ConfigurationError("fetch timeout_seconds must be positive")

    logger.info("Configuration validated successfully")
    return True
