import pytest

from wiki_crawler.components.link_extraction import LinkCandidate
from wiki_crawler.components.relevance import (
    RejectionReason,
    RelevanceConfig,
    RelevanceFilter,
)
from wiki_crawler.components.robots import ExclusionRuleSet
from wiki_crawler.graph import Vertex, VertexGraph


@pytest.fixture
def graph():
    graph = VertexGraph()
    graph.add_vertex(Vertex("/wiki/Tennis"))
    return graph


def path_filter(keywords=("tennis",), rules=(), **kwargs):
    return RelevanceFilter(list(keywords), ExclusionRuleSet(rules),
                           RelevanceConfig(policy="path", **kwargs))


def scored_filter(keywords=("tennis",), rules=(), **kwargs):
    return RelevanceFilter(list(keywords), ExclusionRuleSet(rules),
                           RelevanceConfig(policy="scored", **kwargs))


def test_path_policy_accepts_keyword_in_title(graph):
    relevance = path_filter()

    assert relevance.is_relevant("/wiki/Tennis_racket", graph, set())
    assert not relevance.is_relevant("/wiki/Paris", graph, set())


def test_path_policy_rejects_fragment_link(graph):
    decision = path_filter().evaluate("/wiki/Tennis#History", VertexGraph(), set())

    assert not decision.accepted
    assert decision.reason is RejectionReason.FRAGMENT


def test_path_policy_reads_underscores_as_spaces(graph):
    relevance = path_filter(keywords=["grand slam"])

    assert relevance.is_relevant("/wiki/Grand_Slam_(tennis)", graph, set())


def test_rejects_existing_vertex_and_visited_path(graph):
    relevance = path_filter()

    assert relevance.evaluate("/wiki/Tennis", graph, set()).reason is RejectionReason.DUPLICATE
    assert relevance.evaluate(
        "/wiki/Tennis_court", graph, {"/wiki/Tennis_court"}
    ).reason is RejectionReason.DUPLICATE


def test_rejects_excluded_prefix(graph):
    relevance = path_filter(rules=["/wiki/Tennis_"])

    decision = relevance.evaluate("/wiki/Tennis_racket", graph, set())

    assert decision.reason is RejectionReason.EXCLUDED


def test_rejects_namespace_link(graph):
    decision = path_filter().evaluate("/wiki/Category:Tennis", graph, set())

    assert decision.reason is RejectionReason.NAMESPACE


def test_rejection_checks_run_in_order(graph):
    relevance = path_filter(rules=["/wiki/Special:", "/wiki/Tennis"])

    # Duplicate wins over exclusion
    assert relevance.evaluate("/wiki/Tennis", graph, set()).reason is RejectionReason.DUPLICATE
    # Exclusion wins over fragment and namespace
    assert relevance.evaluate(
        "/wiki/Special:Tennis#top", graph, set()
    ).reason is RejectionReason.EXCLUDED
    # Fragment wins over namespace
    assert path_filter().evaluate(
        "/wiki/Help:Tennis#top", graph, set()
    ).reason is RejectionReason.FRAGMENT


def test_case_insensitive_by_default(graph):
    assert path_filter(keywords=["TENNIS"]).is_relevant("/wiki/tennis_ball", graph, set())


def test_case_sensitive_matching(graph):
    relevance = path_filter(case_sensitive=True)

    assert not relevance.is_relevant("/wiki/Tennis_racket", graph, set())
    assert relevance.is_relevant("/wiki/Table_tennis", graph, set())


def test_scored_policy_counts_anchor_and_context(graph):
    relevance = scored_filter(keywords=["tennis", "racket"])
    candidate = LinkCandidate(
        path="/wiki/Strings",
        anchor_text="racket strings",
        context_before="A tennis ",
        context_after=" are made of gut.",
    )

    decision = relevance.evaluate(candidate, graph, set())

    assert decision.accepted
    assert decision.score == 2


def test_scored_policy_counts_each_keyword_once_per_region(graph):
    relevance = scored_filter(keywords=["tennis"])
    candidate = LinkCandidate(
        path="/wiki/Ball",
        anchor_text="tennis tennis tennis",
        context_before="tennis ",
        context_after=" tennis",
    )

    assert relevance.score(candidate) == 2


def test_scored_policy_applies_threshold(graph):
    relevance = scored_filter(keywords=["tennis"], threshold=2)
    candidate = LinkCandidate(path="/wiki/Ball", anchor_text="tennis ball")

    decision = relevance.evaluate(candidate, graph, set())

    assert not decision.accepted
    assert decision.reason is RejectionReason.NOT_RELEVANT
    assert decision.score == 1


def test_scored_policy_ignores_text_outside_window(graph):
    relevance = scored_filter(context_window=100)
    candidate = LinkCandidate(
        path="/wiki/Paris",
        anchor_text="Paris",
        context_before="tennis " + "x" * 120,
    )

    assert relevance.score(candidate) == 0
    assert not relevance.is_relevant(candidate, graph, set())


def test_scored_policy_ignores_path(graph):
    relevance = scored_filter()

    decision = relevance.evaluate(LinkCandidate(path="/wiki/Tennis_racket"), graph, set())

    assert not decision.accepted
    assert decision.reason is RejectionReason.NOT_RELEVANT


def test_stats_count_decisions(graph):
    relevance = path_filter()
    relevance.evaluate("/wiki/Tennis_racket", graph, set())
    relevance.evaluate("/wiki/Paris", graph, set())
    relevance.evaluate("/wiki/Tennis", graph, set())

    stats = relevance.get_stats()
    assert stats['accepted'] == 1
    assert stats['not_relevant'] == 1
    assert stats['duplicate'] == 1


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError):
        RelevanceFilter(["tennis"], ExclusionRuleSet(), RelevanceConfig(policy="regex"))
