"""
Link Extraction - Finds internal article links in page markup.

Only the page's primary content blocks (paragraphs by default) are scanned.
Each link is returned with its anchor text and the text surrounding it in the
concatenated block text, which the relevance filter scores against the keywords.
"""

import logging
from typing import List, Optional, Tuple
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, NavigableString, Tag

from .fetcher import DEFAULT_BASE_URL


@dataclass
class LinkExtractionConfig:
    """Configuration for link extraction."""
    parser: str = "html.parser"
    base_url: str = DEFAULT_BASE_URL  # Absolute links to this host are kept
    article_prefix: str = "/wiki/"
    content_root_selector: Optional[str] = None  # e.g. '#mw-content-text'
    block_tags: List[str] = None
    context_window: int = 100  # Characters kept on each side of a link
    lowercase_paths: bool = False
    max_links_per_page: int = 1000

    def __post_init__(self):
        """Set defaults for mutable fields."""
        if self.block_tags is None:
            self.block_tags = ['p']


@dataclass(frozen=True)
class LinkCandidate:
    """A link found on a page, with the text used to judge its relevance."""
    path: str
    anchor_text: str = ""
    context_before: str = ""
    context_after: str = ""


class LinkExtractor:
    """
    Collaborator contract for link extraction.

    Implementations return candidates in document order. Duplicates are
    allowed; the relevance filter rejects repeats.
    """

    def extract_content_blocks(self, markup: str) -> list:
        raise NotImplementedError

    def extract_links(self, markup: str) -> List[LinkCandidate]:
        raise NotImplementedError


def _block_text(node) -> str:
    """Concatenate the plain text strings under node, skipping comments and scripts."""
    return ''.join(
        str(child) for child in node.descendants if type(child) is NavigableString
    )


class WikiLinkExtractor(LinkExtractor):
    """Extracts `/wiki/...` links from the paragraphs of an article page."""

    def __init__(self, config: Optional[LinkExtractionConfig] = None):
        self.config = config or LinkExtractionConfig()
        self.logger = logging.getLogger(self.__class__.__name__)
        self._site_netloc = urlparse(self.config.base_url).netloc.lower()

        # Statistics
        self.stats = {
            'pages_processed': 0,
            'total_links_extracted': 0,
            'max_links_in_page': 0,
        }

    def normalize_href(self, href: str) -> Optional[str]:
        """
        Reduce an href to an internal article path.

        Fragments and query strings are kept so the relevance filter can see
        them.

        Returns:
            The path, or None if the href is not an internal article link
        """
        href = href.strip()
        if not href:
            return None

        parsed = urlparse(urljoin(self.config.base_url, href))
        if parsed.scheme not in ('http', 'https'):
            return None
        if parsed.netloc.lower() != self._site_netloc:
            return None
        if not parsed.path.startswith(self.config.article_prefix):
            return None

        path = parsed.path
        if len(path) == len(self.config.article_prefix):
            return None

        if self.config.lowercase_paths:
            prefix = self.config.article_prefix
            path = prefix + path[len(prefix):].lower()

        if parsed.query:
            path += f"?{parsed.query}"
        if parsed.fragment:
            path += f"#{parsed.fragment}"
        return path

    def extract_content_blocks(self, markup: str) -> List[Tag]:
        """Return the content blocks of the page in document order."""
        soup = BeautifulSoup(markup, self.config.parser)
        return self._content_blocks(soup)

    def _content_blocks(self, soup: BeautifulSoup) -> List[Tag]:
        root = soup
        if self.config.content_root_selector:
            selected = soup.select_one(self.config.content_root_selector)
            if selected is not None:
                root = selected
            else:
                self.logger.debug(
                    f"Content root '{self.config.content_root_selector}' not found, "
                    f"scanning whole page"
                )
        return root.find_all(self.config.block_tags)

    def extract_links(self, markup: str) -> List[LinkCandidate]:
        """
        Extract article links from every content block.

        Block texts are joined with newlines, so a link's context can reach
        into the neighbouring blocks.

        Returns:
            LinkCandidate list in document order
        """
        soup = BeautifulSoup(markup, self.config.parser)
        texts: List[str] = []
        spans: List[Tuple[str, str, int, int]] = []
        offset = 0

        for block in self._content_blocks(soup):
            # Nested blocks are scanned through their outermost parent
            if block.find_parent(self.config.block_tags) is not None:
                continue

            if texts:
                offset += 1  # newline separator
            text, block_spans = self._scan_block(block)
            for path, anchor_text, start, end in block_spans:
                spans.append((path, anchor_text, offset + start, offset + end))
            texts.append(text)
            offset += len(text)

            if len(spans) >= self.config.max_links_per_page:
                self.logger.warning(
                    f"Reached max links limit ({self.config.max_links_per_page})"
                )
                spans = spans[:self.config.max_links_per_page]
                break

        document = '\n'.join(texts)
        window = self.config.context_window
        candidates = [
            LinkCandidate(
                path=path,
                anchor_text=anchor_text.strip(),
                context_before=document[max(0, start - window):start],
                context_after=document[end:end + window],
            )
            for path, anchor_text, start, end in spans
        ]
        return self._record(candidates)

    def _scan_block(self, block: Tag) -> Tuple[str, List[Tuple[str, str, int, int]]]:
        """Walk one block, tracking each link's character span in the block text."""
        pieces: List[str] = []
        offset = 0
        spans: List[Tuple[str, str, int, int]] = []

        for node in block.descendants:
            if isinstance(node, Tag):
                if node.name == 'a' and node.has_attr('href'):
                    path = self.normalize_href(node['href'])
                    if path:
                        anchor_text = _block_text(node)
                        spans.append((path, anchor_text, offset, offset + len(anchor_text)))
            elif type(node) is NavigableString:
                pieces.append(str(node))
                offset += len(node)

        return ''.join(pieces), spans

    def _record(self, candidates: List[LinkCandidate]) -> List[LinkCandidate]:
        self.stats['pages_processed'] += 1
        self.stats['total_links_extracted'] += len(candidates)
        if len(candidates) > self.stats['max_links_in_page']:
            self.stats['max_links_in_page'] = len(candidates)

        self.logger.debug(f"Extracted {len(candidates)} article links")
        return candidates

    def get_stats(self) -> dict:
        """Get link extraction statistics."""
        stats = self.stats.copy()
        if stats['pages_processed'] > 0:
            stats['avg_links_per_page'] = round(
                stats['total_links_extracted'] / stats['pages_processed'], 2
            )
        else:
            stats['avg_links_per_page'] = 0.0
        return stats


# Example usage
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    test_html = '''
        <html><body>
        <div id="mw-content-text">
            <p><b>Tennis</b> is a <a href="/wiki/Racket_sport">racket sport</a>
               played on a <a href="/wiki/Tennis_court">tennis court</a>.</p>
            <p>See <a href="/wiki/Help:Contents">help</a> and
               <a href="/wiki/Tennis#History">history</a>.</p>
        </div>
        </body></html>
    '''

    extractor = WikiLinkExtractor(LinkExtractionConfig(content_root_selector='#mw-content-text'))
    for candidate in extractor.extract_links(test_html):
        print(f"{candidate.path:28} anchor={candidate.anchor_text!r}")
        print(f"{'':28} before={candidate.context_before[-40:]!r}")
