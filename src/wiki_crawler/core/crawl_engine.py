"""
Crawl Engine - Main orchestrator for a keyword-directed breadth-first crawl.

The engine owns the crawl graph, the frontier and the visited set, and drives
the collaborators (fetcher, link extractor, exclusion policy, politeness
throttle, relevance filter, graph sink) through a single-threaded loop:

    IDLE -> RUNNING -> TERMINATED

The loop stops when cancellation is requested, the frontier runs dry or the
graph reaches its vertex budget. The graph is then pruned and persisted.
"""

import logging
import threading
import time
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass, field

from ..components.fetcher import Fetcher, HTTPFetcher, FetchConfig
from ..components.graph_sink import GraphSink, StorageConfig, create_graph_sink
from ..components.link_extraction import LinkExtractor, WikiLinkExtractor, LinkExtractionConfig
from ..components.politeness import PolitenessThrottle, PolitenessConfig
from ..components.relevance import RelevanceFilter, RelevanceConfig
from ..components.robots import RobotsSource, RobotsConfig, load_exclusion_rules
from ..errors import CrawlerError, FetchError, SinkError
from ..graph import Vertex, VertexGraph, FrontierQueue


@dataclass
class CrawlerConfig:
    """Master configuration for a crawl run."""
    seed_path: str = "/wiki/Web_crawler"
    keywords: List[str] = field(default_factory=lambda: ["crawler"])
    max_vertices: int = 100
    prune_unvisited_edges: bool = True

    # Component configurations
    fetch: FetchConfig = field(default_factory=FetchConfig)
    robots: RobotsConfig = field(default_factory=RobotsConfig)
    politeness: PolitenessConfig = field(default_factory=PolitenessConfig)
    link_extraction: LinkExtractionConfig = field(default_factory=LinkExtractionConfig)
    relevance: RelevanceConfig = field(default_factory=RelevanceConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


class EngineState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    TERMINATED = "terminated"


class TerminationReason(Enum):
    CANCELLED = "cancelled"
    FRONTIER_EXHAUSTED = "frontier_exhausted"
    BUDGET_REACHED = "budget_reached"


@dataclass
class CrawlResult:
    """Outcome of a finished crawl."""
    graph: VertexGraph
    visited: List[str]  # Paths in the order they were expanded
    state: EngineState
    termination_reason: Optional[TerminationReason] = None
    pages_fetched: int = 0
    fetch_errors: int = 0
    candidates_examined: int = 0
    vertices_accepted: int = 0
    politeness_pauses: int = 0
    edges_pruned: int = 0
    persisted: bool = False
    sink_error: Optional[str] = None
    runtime_seconds: float = 0.0


class CrawlEngine:
    """
    Keyword-directed BFS crawler.

    Every collaborator can be injected; missing ones are built from the
    configuration. One engine performs exactly one crawl.
    """

    def __init__(self, config: CrawlerConfig,
                 fetcher: Optional[Fetcher] = None,
                 link_extractor: Optional[LinkExtractor] = None,
                 robots_source: Optional[RobotsSource] = None,
                 sink: Optional[GraphSink] = None,
                 throttle: Optional[PolitenessThrottle] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize crawl engine.

        Args:
            config: Complete crawl configuration
            fetcher: Page fetcher (default: HTTPFetcher)
            link_extractor: Link extractor (default: WikiLinkExtractor)
            robots_source: Exclusion policy source (default: robots.txt over HTTP)
            sink: Graph sink (default: from config.storage)
            throttle: Politeness throttle (default: from config.politeness)
            logger: Logger for crawl progress
        """
        self.config = config
        self.logger = logger or logging.getLogger("CrawlEngine")

        self.fetcher = fetcher or HTTPFetcher(config.fetch)
        self.link_extractor = link_extractor or WikiLinkExtractor(config.link_extraction)
        if robots_source is None:
            session = getattr(self.fetcher, 'session', None)
            robots_source = RobotsSource(config.fetch.base_url, config.robots, session=session)
        self.robots_source = robots_source
        self.sink = sink or create_graph_sink(config.storage, logger=self.logger)
        self.throttle = throttle or PolitenessThrottle(config.politeness)

        # Crawl state
        self.state = EngineState.IDLE
        self.graph = VertexGraph()
        self.frontier = FrontierQueue()
        self.visited: List[str] = []
        self._visited_set = set()
        self.relevance: Optional[RelevanceFilter] = None
        self.result: Optional[CrawlResult] = None

        self.stats = {
            'pages_fetched': 0,
            'fetch_errors': 0,
            'candidates_examined': 0,
            'vertices_accepted': 0,
        }
        self.start_time = None

        self.logger.info(
            f"Crawl engine initialized: seed={config.seed_path}, "
            f"keywords={config.keywords}, max_vertices={config.max_vertices}"
        )

    def run(self, cancel_event: Optional[threading.Event] = None) -> CrawlResult:
        """
        Run the crawl to completion.

        Args:
            cancel_event: Set from another thread to stop at the next iteration

        Returns:
            CrawlResult; the graph is kept even if persisting failed
        """
        if self.state is not EngineState.IDLE:
            if self.result is None:
                raise CrawlerError("Crawl aborted before finishing; create a new engine to retry")
            self.logger.warning("Crawl already finished, returning previous result")
            return self.result

        cancel_event = cancel_event or threading.Event()
        self.start_time = time.time()

        try:
            reason = self._crawl(cancel_event)
        except Exception as e:
            self.state = EngineState.TERMINATED
            self.logger.error(f"Crawl aborted: {e}")
            raise

        self.logger.info(f"Crawl terminated: {reason.value}")
        self.result = self._finalize(reason)
        return self.result

    def _crawl(self, cancel_event: threading.Event) -> TerminationReason:
        """Seed the graph and run the BFS loop until a stop condition holds."""
        rules = load_exclusion_rules(self.robots_source, self.config.robots,
                                     logger=self.logger, user_agent=self.config.fetch.user_agent)
        self.relevance = RelevanceFilter(self.config.keywords, rules, self.config.relevance)

        root = Vertex(self.config.seed_path)
        self.graph.add_vertex(root)
        self.frontier.enqueue(root)
        self.state = EngineState.RUNNING
        self.logger.info(f"Crawl started from {root.path}")

        while True:
            reason = self._stop_reason(cancel_event)
            if reason is not None:
                self.state = EngineState.TERMINATED
                return reason

            vertex = self.frontier.dequeue()
            if vertex.path in self._visited_set:
                continue
            self._expand(vertex)

    def _stop_reason(self, cancel_event: threading.Event) -> Optional[TerminationReason]:
        if cancel_event.is_set():
            return TerminationReason.CANCELLED
        if self.frontier.is_empty():
            return TerminationReason.FRONTIER_EXHAUSTED
        if len(self.graph) >= self.config.max_vertices:
            return TerminationReason.BUDGET_REACHED
        return None

    def _expand(self, vertex: Vertex):
        """Fetch one page and admit its relevant links."""
        self.visited.append(vertex.path)
        self._visited_set.add(vertex.path)

        try:
            markup = self.fetcher.fetch(vertex.path)
        except FetchError as e:
            self.stats['fetch_errors'] += 1
            self.logger.warning(f"{e}; treating {vertex.path} as a leaf")
            return

        self.stats['pages_fetched'] += 1
        candidates = self.link_extractor.extract_links(markup)
        self.logger.info(
            f"Visiting {vertex.path} ({len(candidates)} links, "
            f"{len(self.graph)}/{self.config.max_vertices} vertices)"
        )

        for candidate in candidates:
            if len(self.graph) >= self.config.max_vertices:
                break

            self.throttle.throttle()
            self.stats['candidates_examined'] += 1

            decision = self.relevance.evaluate(candidate, self.graph, self._visited_set)
            if not decision.accepted:
                continue

            target = Vertex(candidate.path)
            if target in self.graph or target in self.frontier:
                continue

            self.graph.add_vertex(target)
            self.graph.add_edge(vertex, target)
            self.frontier.enqueue(target)
            self.stats['vertices_accepted'] += 1
            self.logger.debug(f"Accepted {target.path} (score {decision.score})")

    def _finalize(self, reason: TerminationReason) -> CrawlResult:
        """Prune and persist the graph."""
        edges_pruned = 0
        if self.config.prune_unvisited_edges:
            edges_pruned = self.graph.prune_edges_to_unvisited(self._visited_set)
            self.logger.info(f"Pruned {edges_pruned} edges to unvisited vertices")

        persisted = False
        sink_error = None
        try:
            self.sink.persist(self.graph)
            persisted = True
        except SinkError as e:
            sink_error = str(e)
            self.logger.error(f"Failed to persist graph: {e}")

        runtime = time.time() - self.start_time
        self.logger.info(
            f"Crawl finished: {len(self.graph)} vertices, "
            f"{len(self.visited)} visited, {runtime:.2f}s"
        )

        return CrawlResult(
            graph=self.graph,
            visited=list(self.visited),
            state=self.state,
            termination_reason=reason,
            pages_fetched=self.stats['pages_fetched'],
            fetch_errors=self.stats['fetch_errors'],
            candidates_examined=self.stats['candidates_examined'],
            vertices_accepted=self.stats['vertices_accepted'],
            politeness_pauses=self.throttle.pauses,
            edges_pruned=edges_pruned,
            persisted=persisted,
            sink_error=sink_error,
            runtime_seconds=runtime,
        )

    def get_stats(self) -> dict:
        """
        Get detailed statistics from the engine and its collaborators.

        Returns:
            dict with engine stats and per-component stats
        """
        stats = {
            'engine': {
                'state': self.state.value,
                'vertices': len(self.graph),
                'edges': self.graph.edge_count(),
                'visited': len(self.visited),
                'frontier': len(self.frontier),
                'runtime': time.time() - self.start_time if self.start_time else 0,
                **self.stats,
            },
            'components': {
                'politeness': self.throttle.get_stats(),
            }
        }

        for name, component in (('fetch', self.fetcher),
                                ('link_extraction', self.link_extractor),
                                ('relevance', self.relevance)):
            if component is not None and hasattr(component, 'get_stats'):
                stats['components'][name] = component.get_stats()

        return stats

    def close(self):
        """Release the fetcher's resources."""
        self.fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
