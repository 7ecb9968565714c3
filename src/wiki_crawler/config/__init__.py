"""
Configuration Module - Configuration management and loading.

Components:
-----------
- ConfigLoader: Loads and saves configurations from/to YAML files
- validate_config: Validates configuration objects
- ConfigurationError: Exception raised for invalid configurations

Usage:
------
from wiki_crawler.config import ConfigLoader, validate_config

config = ConfigLoader.load_from_yaml('config/default.yaml')
validate_config(config)

config.keywords = ['tennis', 'grand slam']
ConfigLoader.save_to_yaml(config, 'config/tennis.yaml')

Configuration File Format:
-------------------------
crawl:
  seed_path: /wiki/Tennis
  keywords:
    - tennis
  max_vertices: 20
  prune_unvisited_edges: true

components:
  politeness:
    requests_per_pause: 10
    pause_seconds: 1.0
  relevance:
    policy: scored
    threshold: 1
  storage:
    storage_type: text
    output_path: data/graph.txt
  # ... fetch, robots, link_extraction
"""

from .crawler_config import (
    ConfigLoader,
    validate_config,
    ConfigurationError
)

__all__ = [
    'ConfigLoader',
    'validate_config',
    'ConfigurationError',
]
