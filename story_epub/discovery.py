import logging
from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .config import SERIES_LINK_SELECTOR, SITE_ORIGIN, UNTITLED_CHAPTER
from .fetcher import ContentFetcher
from .models import ChapterRef

log = logging.getLogger(__name__)


def _absolute_link(href: str) -> str:
    if href.startswith("http"):
        return href
    return urljoin(SITE_ORIGIN, href)


def _text(tag) -> str:
    """Visible text with runs of whitespace collapsed, keeping the gaps between nested tags."""
    return " ".join(tag.get_text().split())


class ChapterDiscoverer:
    """Work out which pages make up a story.

    A series index lists its parts under ``SERIES_LINK_SELECTOR``; anything
    else is treated as a standalone story with a single chapter.
    """

    def __init__(self, fetcher: ContentFetcher):
        self.fetcher = fetcher

    def discover(self, source_url: str) -> List[ChapterRef]:
        html = self.fetcher.fetch(source_url)
        soup = BeautifulSoup(html, "lxml")

        links = soup.select(SERIES_LINK_SELECTOR)
        if links:
            chapters: List[ChapterRef] = []
            for a in links:
                href = (a.get("href") or "").strip()
                if not href:
                    continue
                chapters.append(
                    ChapterRef(
                        title=_text(a),
                        url=_absolute_link(href),
                        order=len(chapters),
                    )
                )
            log.info("Series index %s lists %d chapter(s)", source_url, len(chapters))
            return chapters

        h1 = soup.find("h1")
        title = _text(h1) if h1 else ""
        log.info("Standalone story at %s", source_url)
        return [ChapterRef(title=title or UNTITLED_CHAPTER, url=source_url, order=0)]
