"""Locate and clean the story text on a chapter page."""

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from .config import CONTENT_SELECTORS, DISALLOWED_TAGS
from .errors import ContentNotFound
from .fetcher import ContentFetcher
from .models import ChapterContent, ChapterRef

log = logging.getLogger(__name__)

# Anything that takes the parsed page and returns the story container, or None.
ContentMatcher = Callable[[BeautifulSoup], Optional[Tag]]


class CssMatcher:
    def __init__(self, selector: str):
        self.selector = selector

    def __call__(self, soup: BeautifulSoup) -> Optional[Tag]:
        return soup.select_one(self.selector)

    def __repr__(self):
        return f"CssMatcher({self.selector!r})"


def default_matchers(selectors: Sequence[str] = CONTENT_SELECTORS) -> List[ContentMatcher]:
    return [CssMatcher(s) for s in selectors]


def sanitize_fragment(container: Tag, disallowed: Iterable[str] = DISALLOWED_TAGS) -> str:
    """Drop scripts, styles and frames from ``container`` and return its inner HTML.

    Everything else (paragraphs, emphasis, line breaks) is kept as-is.
    """
    for tag in container.find_all(list(disallowed)):
        tag.decompose()
    return "".join(str(c) for c in container.contents)


class ContentExtractor:
    def __init__(self, fetcher: ContentFetcher, matchers: Optional[List[ContentMatcher]] = None):
        self.fetcher = fetcher
        # Order matters: the first matcher that finds something wins.
        self.matchers = matchers if matchers is not None else default_matchers()

    def locate(self, soup: BeautifulSoup) -> Optional[Tag]:
        for matcher in self.matchers:
            node = matcher(soup)
            if node is not None:
                log.debug("Story body matched by %r", matcher)
                return node
        return None

    def extract(self, ref: ChapterRef, position: int = 1, total: int = 1) -> ChapterContent:
        html = self.fetcher.fetch(ref.url)
        soup = BeautifulSoup(html, "lxml")
        node = self.locate(soup)
        if node is None:
            raise ContentNotFound(position, total, ref.url)
        body = sanitize_fragment(node)
        log.info("Extracted chapter %d/%d: %s (%d chars)", position, total, ref.title, len(body))
        return ChapterContent(title=ref.title, body=body)
