"""Shared fakes for crawler tests. Nothing here touches the network."""

from typing import Dict, Iterable, List, Optional

import pytest

from wiki_crawler.components.fetcher import Fetcher
from wiki_crawler.components.graph_sink import GraphSink
from wiki_crawler.components.politeness import PolitenessConfig, PolitenessThrottle
from wiki_crawler.errors import FetchError, PolicyFetchError, SinkError


def article(*paragraphs: str) -> str:
    """Wrap paragraph bodies in a minimal article page."""
    body = "\n".join(f"<p>{p}</p>" for p in paragraphs)
    return (
        "<html><body>"
        "<div id='mw-navigation'><a href='/wiki/Main_Page'>Main page</a></div>"
        f"<div id='mw-content-text'>{body}</div>"
        "</body></html>"
    )


class FakeFetcher(Fetcher):
    """Serves markup from a dict; unknown paths fail like a 404."""

    def __init__(self, pages: Dict[str, str], on_fetch=None):
        self.pages = pages
        self.fetched: List[str] = []
        self.closed = False
        self._on_fetch = on_fetch

    def fetch(self, path: str) -> str:
        self.fetched.append(path)
        if self._on_fetch:
            self._on_fetch(path)
        if path not in self.pages:
            raise FetchError(path, "HTTP 404", status_code=404)
        return self.pages[path]

    def close(self):
        self.closed = True


class FakeRobotsSource:
    def __init__(self, text: str = "", fail: bool = False):
        self.text = text
        self.fail = fail
        self.calls = 0

    def fetch_policy(self) -> str:
        self.calls += 1
        if self.fail:
            raise PolicyFetchError("Could not fetch robots.txt: HTTP 503")
        return self.text


class MemorySink(GraphSink):
    """Records a snapshot of every persisted graph."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.snapshots: List[List[str]] = []

    def persist(self, graph):
        if self.fail:
            raise SinkError("disk full")
        self.snapshots.append([vertex.path for vertex in graph.vertices()])


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float):
        self.calls.append(seconds)


def make_throttle(requests_per_pause: int = 10, pause_seconds: float = 1.0,
                  sleep: Optional[RecordingSleep] = None) -> PolitenessThrottle:
    return PolitenessThrottle(
        PolitenessConfig(requests_per_pause=requests_per_pause, pause_seconds=pause_seconds),
        sleep=sleep or RecordingSleep(),
    )


# Keeps each paragraph outside its neighbours' context window
FILLER = "Filler text without any of the crawl keywords. " * 3


TENNIS_PAGE = article(
    'The <a href="/wiki/Tennis_racket">tennis racket</a> is strung with gut.',
    FILLER,
    'Unrelated: <a href="/wiki/Paris">Paris</a> is a city.',
    FILLER,
    'Also <a href="/wiki/Grand_Slam">the majors</a> are big events.',
    FILLER,
    'See the <a href="/wiki/Tennis#History">history of tennis</a>.',
    FILLER,
    '<a href="/wiki/Help:Tennis">tennis help</a>',
    FILLER,
    '<a href="/wiki/Wimbledon">Wimbledon</a> hosts tennis every summer.',
)


@pytest.fixture
def tennis_pages() -> Dict[str, str]:
    return {
        "/wiki/Tennis": TENNIS_PAGE,
        "/wiki/Wimbledon": article(
            'The <a href="/wiki/Tennis">tennis</a> championships in London.',
            FILLER,
            'Held at the <a href="/wiki/All_England_Club">club</a> since 1877.',
        ),
    }


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


def paths(vertices: Iterable) -> List[str]:
    return [vertex.path for vertex in vertices]
