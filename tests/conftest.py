"""Pytest configuration and fixtures for the assistant tests."""
from __future__ import annotations

from datetime import datetime

import pytest

from core.errors import ProviderError
from core.router import Assistant
from core.session import Session
from tools.base import Place, SearchPage, SearchProvider
from tools.calendar import MemoryCalendar
from util.config import Settings


class StubSearchProvider(SearchProvider):
    """Serves canned pages keyed by page token (None for the first page)."""

    def __init__(self, pages=None, routes=None):
        self.pages = dict(pages or {})
        self.routes = routes if routes is not None else ["I-75 N"]
        self.queries = []
        self.fail = False

    def search(self, query):
        self.queries.append(query)
        if self.fail:
            raise ProviderError("service unavailable")
        return self.pages.get(query.page_token, SearchPage())

    def get_directions(self, origin, destination):
        return list(self.routes)

    def render_static_map(self, center, zoom, size):
        return f"https://maps.test/static?center={center}&zoom={zoom}&size={size}"


def make_places(prefix, count):
    return [Place(id=f"{prefix}{i}", name=f"{prefix.title()} Place {i}", address=f"{i} Main St") for i in range(1, count + 1)]


@pytest.fixture
def settings() -> Settings:
    return Settings(google_maps_api_key="test-key", history_turns=6)


@pytest.fixture
def page_one():
    return make_places("alpha", 3)


@pytest.fixture
def page_two():
    return make_places("beta", 2)


@pytest.fixture
def search_provider(page_one, page_two) -> StubSearchProvider:
    return StubSearchProvider({
        None: SearchPage(places=page_one, next_page_token="tok-2"),
        "tok-2": SearchPage(places=page_two, next_page_token=None),
    })


@pytest.fixture
def calendar() -> MemoryCalendar:
    return MemoryCalendar(now=datetime(2024, 1, 1, 8, 0))


@pytest.fixture
def assistant(search_provider, calendar, settings) -> Assistant:
    return Assistant(search_provider, calendar, settings)


@pytest.fixture
def session() -> Session:
    return Session(conversation_id="conv-1")
