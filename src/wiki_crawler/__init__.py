"""
Wiki Crawler - A keyword-directed breadth-first crawler for encyclopedia sites.

Features:
- Breadth-first expansion from a seed article, bounded by a vertex budget
- Keyword relevance scored from anchor text and surrounding paragraph text
- Simple robots.txt prefix exclusion
- Fixed politeness pause every N examined links
- Configurable via YAML
- Plain text or SQLite graph output
"""

__version__ = "1.0.0"

from .core.crawl_engine import CrawlEngine, CrawlerConfig, CrawlResult
from .config.crawler_config import ConfigLoader, validate_config
from .graph import Vertex, VertexGraph, FrontierQueue

__all__ = [
    'CrawlEngine',
    'CrawlerConfig',
    'CrawlResult',
    'ConfigLoader',
    'validate_config',
    'Vertex',
    'VertexGraph',
    'FrontierQueue',
]
