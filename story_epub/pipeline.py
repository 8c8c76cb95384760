"""URL in, EPUB bytes out.

Chapters are fetched one at a time in discovery order with a pause between
them; the source site rate-limits aggressive clients.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional
from urllib.parse import urlparse

from .assembler import EpubAssembler
from .config import CHAPTER_DELAY, SITE_DOMAIN
from .discovery import ChapterDiscoverer
from .errors import InvalidInput, NoChaptersFound
from .extractor import ContentExtractor
from .fetcher import ContentFetcher, ProxyRotator
from .models import ChapterContent, EpubProject

log = logging.getLogger(__name__)

# progress(message, severity) with severity one of "info", "success", "error"
ProgressCallback = Callable[[str, str], None]


def validate_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise InvalidInput("Please enter a URL")
    if "://" not in url:
        url = f"https://{url}"
    host = urlparse(url).hostname or ""
    if host != SITE_DOMAIN and not host.endswith("." + SITE_DOMAIN):
        raise InvalidInput("Only Literotica URLs are supported")
    return url


@dataclass
class EpubResult:
    filename: str
    data: bytes
    project: EpubProject


def _noop(message: str, severity: str = "info") -> None:
    pass


class StoryConverter:
    def __init__(
        self,
        fetcher: Optional[ContentFetcher] = None,
        discoverer: Optional[ChapterDiscoverer] = None,
        extractor: Optional[ContentExtractor] = None,
        assembler: Optional[EpubAssembler] = None,
        chapter_delay: float = CHAPTER_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        # A fresh rotator per converter keeps separate runs independent.
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or ContentFetcher(ProxyRotator())
        self.discoverer = discoverer or ChapterDiscoverer(self.fetcher)
        self.extractor = extractor or ContentExtractor(self.fetcher)
        self.assembler = assembler or EpubAssembler()
        self.chapter_delay = chapter_delay
        self.sleep = sleep

    def close(self) -> None:
        """Release the HTTP session of a fetcher this converter created."""
        if self._owns_fetcher:
            self.fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def convert(self, url: str, progress: Optional[ProgressCallback] = None) -> EpubResult:
        report = progress or _noop
        url = validate_url(url)

        report("🔍 Analyzing URL...", "info")
        refs = self.discoverer.discover(url)
        if not refs:
            raise NoChaptersFound(url)

        total = len(refs)
        report(f"📚 Found {total} chapter(s). Downloading...", "info")

        chapters: List[ChapterContent] = []
        for position, ref in enumerate(refs, start=1):
            report(f"📖 Downloading chapter {position}/{total}...", "info")
            chapters.append(self.extractor.extract(ref, position, total))
            if position < total:
                self.sleep(self.chapter_delay)

        report("📦 Creating EPUB file...", "info")
        project = EpubProject.from_chapters(chapters)
        data = self.assembler.assemble(project.title, project.chapters)
        log.info("Converted %s into %s (%d chapters)", url, project.filename, total)
        return EpubResult(filename=project.filename, data=data, project=project)
