"""
Core Module - Crawl orchestration.

Components:
-----------
- CrawlEngine: Runs the keyword-directed BFS and persists the resulting graph
- CrawlerConfig: Complete configuration for a crawl and its components
- CrawlResult: Graph, visited paths and counters of a finished crawl

Usage:
------
from wiki_crawler.core import CrawlEngine, CrawlerConfig

config = CrawlerConfig(seed_path='/wiki/Tennis', keywords=['tennis'], max_vertices=20)

with CrawlEngine(config) as engine:
    result = engine.run()

print(result.termination_reason, len(result.graph))
"""

from .crawl_engine import (
    CrawlEngine,
    CrawlerConfig,
    CrawlResult,
    EngineState,
    TerminationReason,
)

__all__ = [
    'CrawlEngine',
    'CrawlerConfig',
    'CrawlResult',
    'EngineState',
    'TerminationReason',
]
