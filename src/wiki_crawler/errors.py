"""
Crawler Exceptions - Error hierarchy shared by the graph model, the
collaborators and the crawl engine.

Recoverable errors (FetchError, PolicyFetchError, SinkError) are caught by the
engine and logged. InvariantViolation subclasses signal programmer errors and
are never caught on the crawl path.
"""
from typing import Optional


class CrawlerError(Exception):
    """Base class for all crawler errors."""
    pass


class InvariantViolation(CrawlerError):
    """Raised when the graph or frontier is used outside its contract."""
    pass


class VertexAlreadyExistsError(InvariantViolation):
    """Raised when a vertex is added to a graph that already contains it."""

    def __init__(self, path: str):
        super().__init__(f"Vertex already in graph: {path}")
        self.path = path


class VertexNotFoundError(InvariantViolation):
    """Raised when an operation names a vertex that is not in the graph."""

    def __init__(self, path: str):
        super().__init__(f"Vertex not in graph: {path}")
        self.path = path


class FrontierEmptyError(InvariantViolation):
    """Raised when dequeuing from an empty frontier."""
    pass


class FetchError(CrawlerError):
    """Raised when page markup cannot be retrieved."""

    def __init__(self, path: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to fetch {path}: {reason}")
        self.path = path
        self.reason = reason
        self.status_code = status_code


class PolicyFetchError(CrawlerError):
    """Raised when the site's exclusion policy cannot be retrieved."""
    pass


class SinkError(CrawlerError):
    """Raised when the crawl graph cannot be persisted."""
    pass
