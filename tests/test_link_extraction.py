import pytest

from wiki_crawler.components.link_extraction import (
    LinkExtractionConfig,
    WikiLinkExtractor,
)

from conftest import article


@pytest.fixture
def extractor():
    return WikiLinkExtractor(LinkExtractionConfig(content_root_selector="#mw-content-text"))


def test_extracts_links_from_paragraphs_in_document_order(extractor):
    markup = article(
        'A <a href="/wiki/Tennis_racket">racket</a> and a <a href="/wiki/Tennis_ball">ball</a>.',
        'Played at <a href="/wiki/Wimbledon">Wimbledon</a>.',
    )

    candidates = extractor.extract_links(markup)

    assert [c.path for c in candidates] == [
        "/wiki/Tennis_racket", "/wiki/Tennis_ball", "/wiki/Wimbledon"
    ]


def test_ignores_links_outside_content_blocks(extractor):
    markup = (
        "<html><body><div id='mw-content-text'>"
        "<ul><li><a href='/wiki/Listed'>listed</a></li></ul>"
        "<p><a href='/wiki/Kept'>kept</a></p>"
        "</div><p><a href='/wiki/Footer'>footer</a></p></body></html>"
    )

    assert [c.path for c in extractor.extract_links(markup)] == ["/wiki/Kept"]


def test_whole_page_is_scanned_without_content_root():
    markup = "<html><body><p><a href='/wiki/A'>a</a></p><p><a href='/wiki/B'>b</a></p></body></html>"

    candidates = WikiLinkExtractor().extract_links(markup)

    assert [c.path for c in candidates] == ["/wiki/A", "/wiki/B"]


def test_captures_anchor_text_and_context(extractor):
    markup = article(
        '<b>Tennis</b> is a <a href="/wiki/Racket_sport">racket sport</a> played on a court.'
    )

    [candidate] = extractor.extract_links(markup)

    assert candidate.anchor_text == "racket sport"
    assert candidate.context_before == "Tennis is a "
    assert candidate.context_after == " played on a court."


def test_context_is_limited_to_window():
    extractor = WikiLinkExtractor(LinkExtractionConfig(context_window=5))
    markup = '<p>0123456789<a href="/wiki/X">x</a>abcdefghij</p>'

    [candidate] = extractor.extract_links(markup)

    assert candidate.context_before == "56789"
    assert candidate.context_after == "abcde"


def test_href_normalization(extractor):
    assert extractor.normalize_href("/wiki/Tennis") == "/wiki/Tennis"
    assert extractor.normalize_href("https://en.wikipedia.org/wiki/Tennis") == "/wiki/Tennis"
    assert extractor.normalize_href("//en.wikipedia.org/wiki/Tennis") == "/wiki/Tennis"
    assert extractor.normalize_href("/wiki/Tennis#History") == "/wiki/Tennis#History"
    assert extractor.normalize_href("https://de.wikipedia.org/wiki/Tennis") is None
    assert extractor.normalize_href("/w/index.php?title=Tennis") is None
    assert extractor.normalize_href("/wiki/") is None
    assert extractor.normalize_href("mailto:someone@example.com") is None
    assert extractor.normalize_href("") is None


def test_keeps_namespace_and_fragment_links_for_filtering(extractor):
    markup = article('<a href="/wiki/Help:Contents">help</a> <a href="/wiki/Tennis#History">history</a>')

    assert [c.path for c in extractor.extract_links(markup)] == [
        "/wiki/Help:Contents", "/wiki/Tennis#History"
    ]


def test_lowercase_paths_option():
    extractor = WikiLinkExtractor(LinkExtractionConfig(lowercase_paths=True))

    assert extractor.normalize_href("/wiki/Tennis_Court") == "/wiki/tennis_court"


def test_max_links_per_page():
    extractor = WikiLinkExtractor(LinkExtractionConfig(max_links_per_page=2))
    markup = article(*[f'<a href="/wiki/P{i}">p{i}</a>' for i in range(5)])

    candidates = extractor.extract_links(markup)

    assert [c.path for c in candidates] == ["/wiki/P0", "/wiki/P1"]


def test_extract_content_blocks(extractor):
    markup = article("one", "two", "three")

    blocks = extractor.extract_content_blocks(markup)

    assert [b.get_text() for b in blocks] == ["one", "two", "three"]


def test_stats(extractor):
    extractor.extract_links(article('<a href="/wiki/A">a</a> <a href="/wiki/B">b</a>'))
    extractor.extract_links(article("no links"))

    stats = extractor.get_stats()
    assert stats['pages_processed'] == 2
    assert stats['total_links_extracted'] == 2
    assert stats['avg_links_per_page'] == 1.0


def test_context_reaches_into_neighbouring_blocks(extractor):
    markup = article(
        "Tennis is played on grass.",
        '<a href="/wiki/Wimbledon">Wimbledon</a> is the oldest major.',
    )

    [candidate] = extractor.extract_links(markup)

    assert candidate.context_before == "Tennis is played on grass.\n"
    assert candidate.context_after == " is the oldest major."
