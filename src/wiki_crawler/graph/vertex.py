"""
Vertex - A single crawled page, identified by its path.
File: src/wiki_crawler/graph/vertex.py
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Vertex:
    """
    Immutable page identity.

    Two vertices are equal when their paths are equal, so a Vertex can be
    rebuilt from a path string anywhere and still hit the same graph entry.
    """
    path: str

    def __str__(self) -> str:
        return self.path
