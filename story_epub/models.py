import re
from dataclasses import dataclass, field
from typing import List

from .config import DEFAULT_STORY_TITLE


@dataclass
class ChapterRef:
    """A discovered chapter: where to fetch it and what to call it."""

    title: str
    url: str
    order: int


@dataclass
class ChapterContent:
    title: str
    body: str  # sanitized HTML fragment

    def display_title(self, position: int) -> str:
        """Title to print in the book; blank titles get a numbered placeholder."""
        title = (self.title or "").strip()
        return title or f"Chapter {position}"


def sanitize_filename(name: str) -> str:
    """Replace anything that is not an ASCII letter or digit and lower-case it."""
    return re.sub(r"[^a-z0-9]", "_", name or "", flags=re.I).lower()


@dataclass
class EpubProject:
    title: str
    chapters: List[ChapterContent] = field(default_factory=list)

    @classmethod
    def from_chapters(cls, chapters: List[ChapterContent]) -> "EpubProject":
        """Name the book after the first chapter, dropping any " - Part N" style suffix."""
        first = chapters[0].title if chapters else ""
        title = (first or "").split(" - ")[0].strip() or DEFAULT_STORY_TITLE
        return cls(title=title, chapters=list(chapters))

    @property
    def filename(self) -> str:
        return f"{sanitize_filename(self.title)}.epub"
