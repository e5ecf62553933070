"""
core/search.py

Paginated search state for one conversation's active search.
- pages are append-only and never re-fetched once cached
- only moving past the last cached page calls the provider
- a failed provider call leaves the session untouched
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from core.entities import NUMBER, ORDINAL, PLACE_NAME, IntentPayload, last_value
from core.errors import ProviderError
from tools.base import Place, SearchProvider, SearchQuery


logger = logging.getLogger(__name__)


class PageStatus(enum.Enum):
    LOADED = "loaded"
    EMPTY = "empty"  # nothing found / nothing searched yet
    NO_MORE = "no_more"
    FIRST_PAGE = "first_page"
    FAILED = "failed"


@dataclass(frozen=True)
class PageResult:
    status: PageStatus
    places: list[Place] = field(default_factory=list)
    has_more: bool = False
    is_first_page: bool = False


@dataclass(frozen=True)
class Selector:
    name: str | None = None
    ordinal: int | None = None
    number: int | None = None

    @classmethod
    def from_payload(cls, payload: IntentPayload) -> "Selector":
        name = payload.first(PLACE_NAME)
        return cls(
            name=name.text if name is not None else None,
            ordinal=_position(last_value(payload.first(ORDINAL))),
            number=_position(last_value(payload.first(NUMBER))),
        )


def _position(value):
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric position %r", value)
        return None


@dataclass
class SearchSession:
    pages: list[list[Place]] = field(default_factory=list)
    page_index: int = -1
    next_page_token: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.pages

    @property
    def current_page(self) -> list[Place]:
        if self.is_empty:
            return []
        return self.pages[self.page_index]

    @property
    def has_more(self) -> bool:
        return self.page_index < len(self.pages) - 1 or bool(self.next_page_token)

    def _result(self, status=PageStatus.LOADED):
        return PageResult(status, list(self.current_page), self.has_more, self.page_index == 0)

    def _append(self, places, token):
        self.pages.append(list(places))
        self.page_index = len(self.pages) - 1
        self.next_page_token = token

    def search(self, provider: SearchProvider, query: SearchQuery, closest_only=False) -> PageResult:
        """Run a new query and cache its first page."""
        try:
            page = provider.search(query)
        except ProviderError:
            logger.exception("Place search failed for %r", query.point_of_interest)
            return PageResult(PageStatus.FAILED)

        places = list(page.places)
        if not places:
            logger.info("Place search for %r found nothing", query.point_of_interest)
            return PageResult(PageStatus.EMPTY)
        if closest_only:
            places = places[:1]
        self._append(places, page.next_page_token)
        return self._result()

    def next_page(self, provider: SearchProvider) -> PageResult:
        if self.is_empty:
            return PageResult(PageStatus.EMPTY)
        if self.page_index < len(self.pages) - 1:
            self.page_index += 1
            return self._result()
        if not self.next_page_token:
            return PageResult(PageStatus.NO_MORE, has_more=False)

        try:
            page = provider.search(SearchQuery(page_token=self.next_page_token))
        except ProviderError:
            logger.exception("Fetching the next page of results failed")
            return PageResult(PageStatus.FAILED)
        if not page.places:
            # token led nowhere; keep the cache as it is
            self.next_page_token = None
            return PageResult(PageStatus.NO_MORE, has_more=False)
        self._append(page.places, page.next_page_token)
        return self._result()

    def previous_page(self) -> PageResult:
        if self.is_empty:
            return PageResult(PageStatus.EMPTY)
        if self.page_index <= 0:
            return PageResult(PageStatus.FIRST_PAGE, list(self.current_page), self.has_more, True)
        self.page_index -= 1
        return self._result()

    def restart(self) -> PageResult:
        if self.is_empty:
            return PageResult(PageStatus.EMPTY)
        self.page_index = 0
        return self._result()

    def select(self, selector: Selector) -> Place | None:
        """Pick a place from the current page by name, ordinal or number."""
        places = self.current_page
        if selector.name:
            wanted = selector.name.lower()
            for place in places:
                if wanted in (place.name or "").lower():
                    return place
            return None
        position = selector.ordinal if selector.ordinal is not None else selector.number
        if position is None:
            return None
        index = position - 1
        if 0 <= index < len(places):
            return places[index]
        return None
