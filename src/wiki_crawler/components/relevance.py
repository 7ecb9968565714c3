"""
Relevance Filter - Decides which discovered links become new vertices.

Candidates are first screened by cheap structural checks (duplicate, excluded
by robots.txt, fragment link, non-article namespace). Survivors are judged by
the configured acceptance policy:

- scored: count keyword hits in the anchor text and in a window of the
  surrounding text, accept when the score reaches the threshold
- path: accept when a keyword occurs in the article title itself, for
  extractors that cannot supply anchor or context text
"""

import logging
from enum import Enum
from typing import AbstractSet, Iterable, List, Optional, Union
from dataclasses import dataclass

from .link_extraction import LinkCandidate
from .robots import ExclusionRuleSet
from ..graph import VertexGraph


class RelevancePolicy(Enum):
    """Acceptance policies for candidate links."""
    SCORED = "scored"  # Anchor text + surrounding text keyword score
    PATH = "path"      # Keyword substring of the article title


class RejectionReason(Enum):
    """Why a candidate was rejected, in evaluation order."""
    DUPLICATE = "duplicate"
    EXCLUDED = "excluded"
    FRAGMENT = "fragment"
    NAMESPACE = "namespace"
    NOT_RELEVANT = "not_relevant"


@dataclass
class RelevanceConfig:
    """Configuration for the relevance filter."""
    policy: str = "scored"  # 'scored' or 'path'
    threshold: int = 1
    context_window: int = 100  # Characters scanned on each side of the link
    case_sensitive: bool = False
    article_prefix: str = "/wiki/"
    fragment_marker: str = "#"
    namespace_separator: str = ":"


@dataclass(frozen=True)
class RelevanceDecision:
    """Outcome of evaluating one candidate."""
    accepted: bool
    reason: Optional[RejectionReason] = None
    score: int = 0


class RelevanceFilter:
    """
    Keyword relevance filter.

    The filter is stateless with respect to the crawl: graph and visited set
    are passed on every call.
    """

    def __init__(self, keywords: Iterable[str], exclusion_rules: ExclusionRuleSet,
                 config: Optional[RelevanceConfig] = None):
        self.config = config or RelevanceConfig()
        self.policy = RelevancePolicy(self.config.policy.lower())
        self.keywords: List[str] = [k for k in keywords if k]
        self.exclusion_rules = exclusion_rules
        self.logger = logging.getLogger(self.__class__.__name__)

        self._match_keywords = [self._fold(k) for k in self.keywords]

        # Statistics
        self.stats = {reason.value: 0 for reason in RejectionReason}
        self.stats['accepted'] = 0

    def evaluate(self, candidate: Union[LinkCandidate, str], graph: VertexGraph,
                 visited: AbstractSet[str]) -> RelevanceDecision:
        """
        Evaluate a candidate link.

        Args:
            candidate: LinkCandidate, or a bare path when no context is known
            graph: Current crawl graph
            visited: Paths already dequeued and processed

        Returns:
            RelevanceDecision with the rejection reason or the accepting score
        """
        if isinstance(candidate, str):
            candidate = LinkCandidate(path=candidate)
        path = candidate.path

        reason = self._screen(path, graph, visited)
        if reason is not None:
            return self._reject(path, reason)

        if self.policy is RelevancePolicy.SCORED:
            score = self.score(candidate)
        else:
            score = 1 if self.matches_path(path) else 0

        if score < self.config.threshold:
            return self._reject(path, RejectionReason.NOT_RELEVANT, score)

        self.stats['accepted'] += 1
        self.logger.debug(f"Accepted {path} (score {score})")
        return RelevanceDecision(accepted=True, score=score)

    def is_relevant(self, candidate: Union[LinkCandidate, str], graph: VertexGraph,
                    visited: AbstractSet[str]) -> bool:
        return self.evaluate(candidate, graph, visited).accepted

    def _screen(self, path: str, graph: VertexGraph,
                visited: AbstractSet[str]) -> Optional[RejectionReason]:
        if path in graph or path in visited:
            return RejectionReason.DUPLICATE
        if self.exclusion_rules.is_excluded(path):
            return RejectionReason.EXCLUDED
        if self.config.fragment_marker in path:
            return RejectionReason.FRAGMENT
        if self.config.namespace_separator in path:
            return RejectionReason.NAMESPACE
        return None

    def score(self, candidate: LinkCandidate) -> int:
        """
        Relevancy score of a candidate.

        Each keyword adds at most one point per region: once for the anchor
        text and once for the surrounding-text window.
        """
        window = self.config.context_window
        surrounding = (
            candidate.context_before[-window:] if window else ""
        ) + " " + candidate.context_after[:window]

        return self._count_keywords(candidate.anchor_text) + self._count_keywords(surrounding)

    def matches_path(self, path: str) -> bool:
        """True if any keyword occurs in the article title of path."""
        title = path
        if title.startswith(self.config.article_prefix):
            title = title[len(self.config.article_prefix):]
        title = self._fold(title.replace('_', ' '))
        return any(keyword in title for keyword in self._match_keywords)

    def _count_keywords(self, text: str) -> int:
        if not text:
            return 0
        text = self._fold(text)
        return sum(1 for keyword in self._match_keywords if keyword in text)

    def _fold(self, text: str) -> str:
        return text if self.config.case_sensitive else text.lower()

    def _reject(self, path: str, reason: RejectionReason, score: int = 0) -> RelevanceDecision:
        self.stats[reason.value] += 1
        self.logger.debug(f"Rejected {path}: {reason.value}")
        return RelevanceDecision(accepted=False, reason=reason, score=score)

    def get_stats(self) -> dict:
        return self.stats.copy()
