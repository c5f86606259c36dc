"""
Result aggregation across "load more" requests.

One ResultAggregator owns one logical search session: the first page
replaces whatever was shown before, later pages are appended in the order
the upstream returned them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tunesearch.services.search.base import SearchService
from tunesearch.services.search.models import SearchResult, DEFAULT_PAGE_SIZE
from tunesearch.utils.exceptions import TuneSearchError, UnknownError
from tunesearch.utils.logging import get_logger


logger = get_logger(__name__)


class SessionState(str, Enum):
    """Lifecycle of a search session."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOADING_MORE = "loading_more"
    ERRORED = "errored"


_IN_FLIGHT = (SessionState.LOADING, SessionState.LOADING_MORE)


@dataclass
class PageState:
    """Snapshot of what the session has accumulated so far."""

    state: SessionState = SessionState.IDLE
    query: str = ""
    items: list[SearchResult] = field(default_factory=list)
    continuation_token: Optional[str] = None
    total_estimate: Optional[int] = None
    error: Optional[TuneSearchError] = None

    @property
    def has_more(self) -> bool:
        return self.continuation_token is not None


class ResultAggregator:
    """
    State machine over one search session.

    IDLE -> LOADING -> LOADED <-> LOADING_MORE, with ERRORED reachable
    from either in-flight state. Calls made while a request is in flight
    are ignored, and a response belonging to a superseded search is
    dropped.
    """

    def __init__(self, service: SearchService, page_size: int = DEFAULT_PAGE_SIZE):
        self._service = service
        self._page_size = page_size
        self._page = PageState()
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._page.state

    @property
    def items(self) -> list[SearchResult]:
        return list(self._page.items)

    @property
    def has_more(self) -> bool:
        return self._page.has_more

    @property
    def query(self) -> str:
        return self._page.query

    @property
    def error(self) -> Optional[TuneSearchError]:
        return self._page.error

    def snapshot(self) -> PageState:
        return PageState(
            state=self._page.state,
            query=self._page.query,
            items=list(self._page.items),
            continuation_token=self._page.continuation_token,
            total_estimate=self._page.total_estimate,
            error=self._page.error,
        )

    def reset(self) -> None:
        """Forget the current session; any in-flight response is discarded."""
        self._generation += 1
        self._page = PageState()

    def _abandon(self, generation: int, exc: BaseException) -> None:
        """Leave the in-flight state after an unexpected failure or cancellation."""
        if generation != self._generation:
            return
        logger.error(f"Search request for '{self._page.query}' aborted: {exc!r}")
        self._page.state = SessionState.ERRORED
        self._page.error = UnknownError(details=repr(exc))

    def _can_load_more(self) -> bool:
        page = self._page
        if page.continuation_token is None:
            return False
        if page.state == SessionState.LOADED:
            return True
        # A failed load_more leaves the earlier pages and token in place
        return page.state == SessionState.ERRORED and bool(page.items)

    async def start_search(self, query: str) -> PageState:
        """Run a fresh search, replacing any accumulated results."""
        if self._page.state in _IN_FLIGHT:
            logger.debug(f"Ignoring search for '{query}': request already in flight")
            return self.snapshot()

        self._generation += 1
        generation = self._generation
        self._page = PageState(state=SessionState.LOADING, query=query)

        try:
            page = await self._service.search(query, self._page_size)
        except TuneSearchError as e:
            if generation != self._generation:
                return self.snapshot()
            logger.warning(f"Search failed for '{query}': {e.message}")
            self._page.state = SessionState.ERRORED
            self._page.error = e
            return self.snapshot()
        except BaseException as e:
            self._abandon(generation, e)
            raise

        if generation != self._generation:
            logger.debug(f"Dropping stale results for '{query}'")
            return self.snapshot()

        self._page.items = list(page.items)
        self._page.continuation_token = page.continuation_token
        self._page.total_estimate = page.total_estimate
        self._page.state = SessionState.LOADED
        logger.info(f"Loaded {len(page.items)} results for '{query}' (has_more={page.has_more})")
        return self.snapshot()

    async def load_more(self) -> PageState:
        """Append the next page. A no-op unless there is more to load."""
        if not self._can_load_more():
            return self.snapshot()

        generation = self._generation
        token = self._page.continuation_token
        self._page.state = SessionState.LOADING_MORE
        self._page.error = None

        try:
            page = await self._service.continue_search(token, self._page_size, self._page.query)
        except TuneSearchError as e:
            if generation != self._generation:
                return self.snapshot()
            logger.warning(f"Loading more results for '{self._page.query}' failed: {e.message}")
            self._page.state = SessionState.ERRORED
            self._page.error = e
            return self.snapshot()
        except BaseException as e:
            self._abandon(generation, e)
            raise

        if generation != self._generation:
            logger.debug("Dropping stale continuation page")
            return self.snapshot()

        self._page.items.extend(page.items)
        self._page.continuation_token = page.continuation_token
        if page.total_estimate is not None:
            self._page.total_estimate = page.total_estimate
        self._page.state = SessionState.LOADED
        return self.snapshot()
