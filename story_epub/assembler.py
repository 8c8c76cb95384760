"""Build the EPUB archive in memory.

Layout::

    mimetype                    (first entry, stored uncompressed)
    META-INF/container.xml
    OEBPS/chapter1.xhtml ... chapterN.xhtml
    OEBPS/content.opf
    OEBPS/toc.ncx
"""

import io
import logging
import time
import zipfile
from typing import Callable, List, Optional

from .config import BOOK_AUTHOR, BOOK_LANGUAGE
from .models import ChapterContent

log = logging.getLogger(__name__)

MIMETYPE = "application/epub+zip"

CONTAINER_XML = """<?xml version="1.0"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""

CHAPTER_XHTML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head>
  <title>{title}</title>
</head>
<body>
  <h1>{title}</h1>
  {body}
</body>
</html>"""

CONTENT_OPF = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>{title}</dc:title>
    <dc:creator>{author}</dc:creator>
    <dc:language>{language}</dc:language>
    <dc:identifier id="uid">{identifier}</dc:identifier>
  </metadata>
  <manifest>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
{manifest}
  </manifest>
  <spine toc="ncx">
{spine}
  </spine>
</package>"""

TOC_NCX = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head>
    <meta name="dtb:uid" content="{identifier}"/>
    <meta name="dtb:depth" content="1"/>
  </head>
  <docTitle>
    <text>{title}</text>
  </docTitle>
  <navMap>
{nav_points}
  </navMap>
</ncx>"""

NAV_POINT = """    <navPoint id="chapter{n}" playOrder="{n}">
      <navLabel>
        <text>{label}</text>
      </navLabel>
      <content src="chapter{n}.xhtml"/>
    </navPoint>"""


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    return (
        (text or "")
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def chapter_filename(n: int) -> str:
    return f"chapter{n}.xhtml"


class EpubAssembler:
    """Turn an ordered list of chapters into EPUB bytes.

    ``identifier`` fixes the book id (handy for reproducible output);
    otherwise it is derived from ``clock`` at assembly time.
    """

    def __init__(self, identifier: Optional[str] = None, clock: Callable[[], float] = time.time):
        self.identifier = identifier
        self.clock = clock

    def _identifier(self) -> str:
        if self.identifier:
            return self.identifier
        return f"literotica-{int(self.clock() * 1000)}"

    def chapter_document(self, chapter: ChapterContent, n: int) -> str:
        return CHAPTER_XHTML.format(
            title=escape_xml(chapter.display_title(n)), body=chapter.body
        )

    def package_document(self, title: str, count: int, identifier: str) -> str:
        manifest = "\n".join(
            f'    <item id="chapter{n}" href="{chapter_filename(n)}" media-type="application/xhtml+xml"/>'
            for n in range(1, count + 1)
        )
        spine = "\n".join(
            f'    <itemref idref="chapter{n}"/>' for n in range(1, count + 1)
        )
        return CONTENT_OPF.format(
            title=escape_xml(title),
            author=escape_xml(BOOK_AUTHOR),
            language=BOOK_LANGUAGE,
            identifier=escape_xml(identifier),
            manifest=manifest,
            spine=spine,
        )

    def navigation_document(self, title: str, chapters: List[ChapterContent], identifier: str) -> str:
        nav_points = "\n".join(
            NAV_POINT.format(n=n, label=escape_xml(chapter.display_title(n)))
            for n, chapter in enumerate(chapters, start=1)
        )
        return TOC_NCX.format(
            identifier=escape_xml(identifier),
            title=escape_xml(title),
            nav_points=nav_points,
        )

    def assemble(self, title: str, chapters: List[ChapterContent]) -> bytes:
        if not chapters:
            raise ValueError("cannot build an EPUB without chapters")

        identifier = self._identifier()
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            # Readers sniff the first entry, so it must be the raw mimetype.
            zf.writestr("mimetype", MIMETYPE, compress_type=zipfile.ZIP_STORED)
            zf.writestr("META-INF/container.xml", CONTAINER_XML)
            for n, chapter in enumerate(chapters, start=1):
                zf.writestr(f"OEBPS/{chapter_filename(n)}", self.chapter_document(chapter, n))
            zf.writestr("OEBPS/content.opf", self.package_document(title, len(chapters), identifier))
            zf.writestr("OEBPS/toc.ncx", self.navigation_document(title, chapters, identifier))

        data = buf.getvalue()
        log.debug("Built EPUB %r: %d chapter(s), %d bytes", title, len(chapters), len(data))
        return data
