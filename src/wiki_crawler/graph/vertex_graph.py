"""
Vertex Graph - Directed graph of crawled pages.
File: src/wiki_crawler/graph/vertex_graph.py

Each vertex maps to the ordered list of successor vertices that were accepted
from its page. Successor lists keep insertion order and are not de-duplicated.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Set, Tuple, Union

from .vertex import Vertex
from ..errors import VertexAlreadyExistsError, VertexNotFoundError


class VertexGraph:
    """
    Adjacency-list graph keyed by Vertex.

    Vertex order is insertion order (dicts keep it), which is also the order
    the graph sinks persist.
    """

    def __init__(self):
        self._adjacency: Dict[Vertex, List[Vertex]] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def add_vertex(self, vertex: Vertex) -> None:
        """
        Add a vertex with an empty successor list.

        Raises:
            VertexAlreadyExistsError: If the vertex is already a member
        """
        if vertex in self._adjacency:
            raise VertexAlreadyExistsError(vertex.path)
        self._adjacency[vertex] = []

    def add_edge(self, source: Vertex, target: Vertex) -> None:
        """
        Append target to the successor list of source.

        The target is not required to be a member; the crawl engine always
        registers it first.

        Raises:
            VertexNotFoundError: If source is not a member
        """
        self._successors(source).append(target)

    def neighbors(self, vertex: Vertex) -> List[Vertex]:
        """Return a copy of the successor list of vertex."""
        return list(self._successors(vertex))

    def out_degree(self, vertex: Vertex) -> int:
        return len(self._successors(vertex))

    def vertices(self) -> List[Vertex]:
        """Snapshot of all vertices in insertion order."""
        return list(self._adjacency)

    def edges(self) -> Iterator[Tuple[Vertex, Vertex]]:
        """Iterate over (source, target) pairs, grouped by source."""
        for source, targets in self._adjacency.items():
            for target in targets:
                yield source, target

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._adjacency.values())

    def prune_edges_to_unvisited(self, visited: Iterable[str]) -> int:
        """
        Drop every edge whose target path is not in visited.

        Vertices are never removed. Applying the prune again with the same
        visited set removes nothing.

        Args:
            visited: Paths of the pages that were dequeued and processed

        Returns:
            Number of edges removed
        """
        visited_paths: Set[str] = set(visited)
        removed = 0

        for source, targets in self._adjacency.items():
            kept = [target for target in targets if target.path in visited_paths]
            removed += len(targets) - len(kept)
            self._adjacency[source] = kept

        if removed:
            self.logger.debug(f"Pruned {removed} edges to unvisited vertices")
        return removed

    def _successors(self, vertex: Vertex) -> List[Vertex]:
        try:
            return self._adjacency[vertex]
        except KeyError:
            raise VertexNotFoundError(vertex.path) from None

    def __contains__(self, item: Union[Vertex, str]) -> bool:
        if isinstance(item, str):
            item = Vertex(item)
        return item in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(list(self._adjacency))

    def __repr__(self) -> str:
        return f"<VertexGraph vertices={len(self)} edges={self.edge_count()}>"
