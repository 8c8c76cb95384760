from conftest import page
from story_epub.discovery import ChapterDiscoverer

SERIES_URL = "https://www.literotica.com/series/se/12345"
STORY_URL = "https://www.literotica.com/s/a-quiet-evening"

SERIES_PAGE = page(
    """
    <h1>The Long Summer</h1>
    <ul>
      <li class="ser-ttl"><a href="/s/the-long-summer-ch-01">The Long Summer Ch. 01</a></li>
      <li class="ser-ttl"><a href="https://www.literotica.com/s/the-long-summer-ch-02"> The Long Summer Ch. 02 </a></li>
      <li class="ser-ttl"><a href="/s/the-long-summer-ch-03">The Long Summer Ch. 03</a></li>
    </ul>
    <a href="/s/unrelated">Not a chapter</a>
    """
)


def test_series_index_yields_links_in_order(site_fetcher):
    fetcher, _ = site_fetcher({SERIES_URL: SERIES_PAGE})

    chapters = ChapterDiscoverer(fetcher).discover(SERIES_URL)

    assert [c.order for c in chapters] == [0, 1, 2]
    assert [c.title for c in chapters] == [
        "The Long Summer Ch. 01",
        "The Long Summer Ch. 02",
        "The Long Summer Ch. 03",
    ]
    assert [c.url for c in chapters] == [
        "https://www.literotica.com/s/the-long-summer-ch-01",
        "https://www.literotica.com/s/the-long-summer-ch-02",
        "https://www.literotica.com/s/the-long-summer-ch-03",
    ]


def test_series_links_without_target_are_skipped(site_fetcher):
    html = page(
        '<div class="ser-ttl"><a>Broken</a></div>'
        '<div class="ser-ttl"><a href="/s/part-two">Part Two</a></div>'
    )
    fetcher, _ = site_fetcher({SERIES_URL: html})

    chapters = ChapterDiscoverer(fetcher).discover(SERIES_URL)

    assert len(chapters) == 1
    assert chapters[0].title == "Part Two"
    assert chapters[0].order == 0


def test_standalone_story_is_single_chapter(site_fetcher):
    fetcher, session = site_fetcher({STORY_URL: page("<h1> A Quiet Evening </h1><div class='aa_ht'><p>Hi</p></div>")})

    chapters = ChapterDiscoverer(fetcher).discover(STORY_URL)

    assert len(chapters) == 1
    assert chapters[0].url == STORY_URL
    assert chapters[0].title == "A Quiet Evening"
    assert chapters[0].order == 0
    assert session.requested == [STORY_URL]


def test_standalone_story_without_heading_gets_placeholder(site_fetcher):
    fetcher, _ = site_fetcher({STORY_URL: page("<div class='aa_ht'><p>No heading here</p></div>")})

    chapters = ChapterDiscoverer(fetcher).discover(STORY_URL)

    assert chapters[0].title == "Untitled Story"


def test_nested_markup_keeps_word_gaps(site_fetcher):
    html = page(
        '<div class="ser-ttl"><a href="/s/a">The Long Summer <span>Ch. 01</span></a></div>'
        '<div class="ser-ttl"><a href="/s/b"><b>The Long Summer</b>\n   <i>Ch. 02</i></a></div>'
    )
    fetcher, _ = site_fetcher({SERIES_URL: html})

    chapters = ChapterDiscoverer(fetcher).discover(SERIES_URL)

    assert [c.title for c in chapters] == ["The Long Summer Ch. 01", "The Long Summer Ch. 02"]


def test_heading_with_nested_markup_keeps_word_gaps(site_fetcher):
    fetcher, _ = site_fetcher({STORY_URL: page("<h1>My Story <em>- Part 1</em></h1><div class='aa_ht'><p>x</p></div>")})

    chapters = ChapterDiscoverer(fetcher).discover(STORY_URL)

    assert chapters[0].title == "My Story - Part 1"
