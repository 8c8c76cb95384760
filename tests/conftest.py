from urllib.parse import unquote

import pytest
import requests

from story_epub.fetcher import ContentFetcher, ProxyRotator

RELAYS = ("https://relay-a.test/raw?url=", "https://relay-b.test/?q=", "https://relay-c.test/p?u=")

FILLER = "<p>" + "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 4 + "</p>"


def make_response(status: int = 200, text: str = "", url: str = "https://relay.test/") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = text.encode("utf-8")
    resp._content_consumed = True
    resp.encoding = "utf-8"
    resp.url = url
    resp.reason = "OK" if status < 400 else "Error"
    return resp


def page(body: str, head_title: str = "Test page") -> str:
    """Wrap ``body`` in a full document long enough to pass the length check."""
    return f"<html><head><title>{head_title}</title></head><body>{body}<footer>{FILLER}</footer></body></html>"


class ScriptedSession:
    """Answers each call with the next scripted outcome (response or exception)."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None, stream=False):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout, "stream": stream})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


class SiteSession:
    """Serves fixed pages keyed by the target URL hidden inside the relay URL."""

    def __init__(self, pages):
        self.pages = dict(pages)
        self.requested = []

    def get(self, url, headers=None, timeout=None, stream=False):
        target = None
        for relay in RELAYS:
            if url.startswith(relay):
                target = unquote(url[len(relay):])
        self.requested.append(target)
        if target not in self.pages:
            return make_response(404, "not found", url)
        return make_response(200, self.pages[target], url)


class Sleeper:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def rotator():
    return ProxyRotator(RELAYS)


@pytest.fixture
def sleeper():
    return Sleeper()


@pytest.fixture
def site_fetcher(rotator, sleeper):
    """Build a fetcher over a ``SiteSession`` serving ``pages``."""

    def build(pages):
        session = SiteSession(pages)
        return ContentFetcher(rotator, session=session, sleep=sleeper), session

    return build
