"""Convert Literotica stories and series into EPUB files."""

from .assembler import EpubAssembler, escape_xml
from .discovery import ChapterDiscoverer
from .errors import (
    ContentNotFound,
    ConversionError,
    InvalidInput,
    NoChaptersFound,
    RetrievalExhausted,
)
from .extractor import ContentExtractor, CssMatcher, sanitize_fragment
from .fetcher import ContentFetcher, ProxyRotator
from .models import ChapterContent, ChapterRef, EpubProject, sanitize_filename
from .pipeline import EpubResult, StoryConverter, validate_url

__all__ = [
    "ChapterContent",
    "ChapterDiscoverer",
    "ChapterRef",
    "ContentExtractor",
    "ContentFetcher",
    "ContentNotFound",
    "ConversionError",
    "CssMatcher",
    "EpubAssembler",
    "EpubProject",
    "EpubResult",
    "InvalidInput",
    "NoChaptersFound",
    "ProxyRotator",
    "RetrievalExhausted",
    "StoryConverter",
    "escape_xml",
    "sanitize_filename",
    "sanitize_fragment",
    "validate_url",
]
