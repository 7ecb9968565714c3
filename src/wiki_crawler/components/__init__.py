"""
Components Module - The collaborators driven by the crawl engine.

Crawl Flow:
-----------
1. RobotsSource / parse_disallow_rules - Loads disallowed path prefixes once
2. HTTPFetcher                         - Downloads article markup
3. WikiLinkExtractor                   - Finds article links in content blocks
4. PolitenessThrottle                  - Pauses after every N examined links
5. RelevanceFilter                     - Accepts or rejects each candidate
6. GraphSink                           - Persists the finished graph

Usage:
------
from wiki_crawler.components import (
    ExclusionRuleSet,
    RelevanceFilter,
    RelevanceConfig,
)

rules = ExclusionRuleSet(['/wiki/Special:'])
relevance = RelevanceFilter(['tennis'], rules, RelevanceConfig(policy='path'))
"""

# Fetching
from .fetcher import Fetcher, HTTPFetcher, FetchConfig, create_session, DEFAULT_BASE_URL

# Exclusion policy
from .robots import (
    ExclusionRuleSet,
    RobotsConfig,
    RobotsSource,
    load_exclusion_rules,
    parse_disallow_rules,
)

# Politeness
from .politeness import PolitenessThrottle, PolitenessConfig

# Link extraction
from .link_extraction import (
    LinkExtractor,
    WikiLinkExtractor,
    LinkExtractionConfig,
    LinkCandidate,
)

# Relevance
from .relevance import (
    RelevanceFilter,
    RelevanceConfig,
    RelevanceDecision,
    RelevancePolicy,
    RejectionReason,
)

# Persistence
from .graph_sink import (
    GraphSink,
    TextGraphSink,
    SQLiteGraphSink,
    StorageConfig,
    create_graph_sink,
)


__all__ = [
    # ========================================================================
    # COMPONENTS
    # ========================================================================
    'Fetcher',
    'HTTPFetcher',
    'ExclusionRuleSet',
    'RobotsSource',
    'PolitenessThrottle',
    'LinkExtractor',
    'WikiLinkExtractor',
    'RelevanceFilter',
    'GraphSink',
    'TextGraphSink',
    'SQLiteGraphSink',

    # ========================================================================
    # CONFIGURATIONS
    # ========================================================================
    'FetchConfig',
    'RobotsConfig',
    'PolitenessConfig',
    'LinkExtractionConfig',
    'RelevanceConfig',
    'StorageConfig',

    # ========================================================================
    # TYPES & UTILITIES
    # ========================================================================
    'LinkCandidate',
    'RelevanceDecision',
    'RelevancePolicy',
    'RejectionReason',
    'DEFAULT_BASE_URL',
    'create_session',
    'create_graph_sink',
    'load_exclusion_rules',
    'parse_disallow_rules',
]
