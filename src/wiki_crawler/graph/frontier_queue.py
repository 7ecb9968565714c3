"""
Frontier Queue - FIFO of vertices discovered but not yet expanded.
File: src/wiki_crawler/graph/frontier_queue.py
"""
from collections import Counter, deque
from typing import Deque

from .vertex import Vertex
from ..errors import FrontierEmptyError


class FrontierQueue:
    """
    Strict insertion-order queue with a membership test.

    A multiplicity counter mirrors the deque so `contains` stays O(1) even if
    a caller enqueues the same vertex twice.
    """

    def __init__(self):
        self._queue: Deque[Vertex] = deque()
        self._members: Counter = Counter()

    def enqueue(self, vertex: Vertex) -> None:
        self._queue.append(vertex)
        self._members[vertex] += 1

    def dequeue(self) -> Vertex:
        """
        Remove and return the oldest vertex.

        Raises:
            FrontierEmptyError: If the queue is empty
        """
        if not self._queue:
            raise FrontierEmptyError("Cannot dequeue from an empty frontier")

        vertex = self._queue.popleft()
        self._members[vertex] -= 1
        if self._members[vertex] <= 0:
            del self._members[vertex]
        return vertex

    def is_empty(self) -> bool:
        return not self._queue

    def contains(self, vertex: Vertex) -> bool:
        return vertex in self._members

    def __contains__(self, vertex: Vertex) -> bool:
        return self.contains(vertex)

    def __len__(self) -> int:
        return len(self._queue)

    def __repr__(self) -> str:
        return f"<FrontierQueue size={len(self)}>"
