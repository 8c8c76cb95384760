"""Site, network and packaging settings shared by the converter."""

SITE_DOMAIN = "literotica.com"
SITE_ORIGIN = "https://www.literotica.com"

# Relays are tried in this order; the target URL is appended percent-encoded.
PROXY_ENDPOINTS = (
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?url=",
    "https://api.codetabs.com/v1/proxy?quest=",
)

REQUEST_TIMEOUT = 30  # seconds per attempt
MAX_ATTEMPTS = 3
RETRY_BACKOFF = 2  # seconds between attempts
CHAPTER_DELAY = 1  # seconds between chapters
# Relays sometimes answer 200 with an empty or stub error page.
MIN_BODY_LENGTH = 100

SESSION_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124 Safari/537.36"
}

SERIES_LINK_SELECTOR = ".ser-ttl a"
CONTENT_SELECTORS = (
    ".aa_ht",
    "div[class*='_article__content']",
    ".panel.article",
)
DISALLOWED_TAGS = ("script", "style", "iframe")

DEFAULT_STORY_TITLE = "Literotica Story"
UNTITLED_CHAPTER = "Untitled Story"
BOOK_AUTHOR = "Literotica Author"
BOOK_LANGUAGE = "en"
