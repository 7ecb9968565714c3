"""
Graph Sink - Persists the finished crawl graph.

Supports two backends:
- text: vertex count on the first line, then one path per line in insertion order
- sqlite: vertices and edges tables, rewritten on every persist
"""

import logging
import os
import sqlite3
from typing import Optional
from dataclasses import dataclass

from ..errors import SinkError
from ..graph import VertexGraph


@dataclass
class StorageConfig:
    """Configuration for graph persistence."""
    storage_type: str = "text"  # 'text' or 'sqlite'
    output_path: str = "data/graph.txt"
    encoding: str = "utf-8"


class GraphSink:
    """Collaborator contract: persist a finished graph."""

    def persist(self, graph: VertexGraph):
        """
        Write the graph to the destination.

        Raises:
            SinkError: If the destination cannot be written
        """
        raise NotImplementedError


def _ensure_parent_dir(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


class TextGraphSink(GraphSink):
    """Plain text sink. Edges are not written."""

    def __init__(self, config: StorageConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def render(self, graph: VertexGraph) -> str:
        lines = [str(len(graph))]
        lines.extend(vertex.path for vertex in graph.vertices())
        return '\n'.join(lines) + '\n'

    def persist(self, graph: VertexGraph):
        path = self.config.output_path
        try:
            _ensure_parent_dir(path)
            with open(path, 'w', encoding=self.config.encoding) as f:
                f.write(self.render(graph))
        except OSError as e:
            raise SinkError(f"Could not write graph to {path}: {e}") from e

        self.logger.info(f"Wrote {len(graph)} vertices to {path}")


class SQLiteGraphSink(GraphSink):
    """SQLite sink storing vertices and edges with their insertion positions."""

    def __init__(self, config: StorageConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def _init_database(self, conn: sqlite3.Connection):
        cursor = conn.cursor()
        cursor.execute("DROP TABLE IF EXISTS edges")
        cursor.execute("DROP TABLE IF EXISTS vertices")
        cursor.execute("""
            CREATE TABLE vertices (
                position INTEGER PRIMARY KEY,
                path TEXT UNIQUE NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE edges (
                source TEXT NOT NULL,
                target TEXT NOT NULL,
                position INTEGER NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX idx_edges_source ON edges(source)")

    def persist(self, graph: VertexGraph):
        path = self.config.output_path
        try:
            _ensure_parent_dir(path)
            conn = sqlite3.connect(path)
            try:
                with conn:
                    self._init_database(conn)
                    conn.executemany(
                        "INSERT INTO vertices (position, path) VALUES (?, ?)",
                        [(i, vertex.path) for i, vertex in enumerate(graph.vertices())]
                    )
                    conn.executemany(
                        "INSERT INTO edges (source, target, position) VALUES (?, ?, ?)",
                        [(source.path, target.path, i)
                         for i, (source, target) in enumerate(graph.edges())]
                    )
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as e:
            raise SinkError(f"Could not write graph to {path}: {e}") from e

        self.logger.info(
            f"Stored {len(graph)} vertices and {graph.edge_count()} edges in {path}"
        )


def create_graph_sink(config: StorageConfig, logger: Optional[logging.Logger] = None) -> GraphSink:
    """Create the sink for the configured storage type."""
    logger = logger or logging.getLogger(__name__)
    storage_type = config.storage_type.lower()

    if storage_type == "text":
        logger.info(f"Using text graph output: {config.output_path}")
        return TextGraphSink(config)

    elif storage_type == "sqlite":
        logger.info(f"Using SQLite graph output: {config.output_path}")
        return SQLiteGraphSink(config)

    raise ValueError(f"Unknown storage type '{config.storage_type}'")
