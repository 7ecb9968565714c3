"""
Graph Module - The crawl graph and its frontier.

Components:
-----------
- Vertex: Immutable page identity (structural equality by path)
- VertexGraph: Directed adjacency-list graph of accepted pages
- FrontierQueue: FIFO of vertices awaiting expansion

Usage:
------
from wiki_crawler.graph import Vertex, VertexGraph, FrontierQueue

graph = VertexGraph()
root = Vertex('/wiki/Tennis')
graph.add_vertex(root)

frontier = FrontierQueue()
frontier.enqueue(root)
"""

from .vertex import Vertex
from .vertex_graph import VertexGraph
from .frontier_queue import FrontierQueue

__all__ = [
    'Vertex',
    'VertexGraph',
    'FrontierQueue',
]
