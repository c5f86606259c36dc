"""
Abstract base class for search services.
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from tunesearch.services.search.models import SearchPage, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from tunesearch.utils.exceptions import (
    InvalidArgumentError,
    EmptyQueryError,
    MissingPageTokenError,
)


def validate_page_size(page_size) -> int:
    """Reject page sizes outside [1, MAX_PAGE_SIZE]."""
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise InvalidArgumentError("limit", f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise InvalidArgumentError("limit", f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    return page_size


def validate_query(query) -> str:
    if not isinstance(query, str) or not query.strip():
        raise EmptyQueryError()
    return query.strip()


def validate_token(token, field: str = "pageToken") -> str:
    if not isinstance(token, str) or not token.strip():
        raise MissingPageTokenError(field)
    return token


class SearchService(ABC):
    """
    Abstract interface for search providers.

    A provider turns a query into a :class:`SearchPage` and can continue a
    previous search from the opaque continuation token it handed out.
    Tokens are never interpreted, only passed back upstream.
    """

    provider: str = "search"

    @abstractmethod
    async def search(
        self,
        query: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_token: Optional[str] = None,
    ) -> SearchPage:
        """
        Execute a search query.

        Args:
            query: Search query string
            page_size: Results per page, 1-50
            page_token: Optional continuation token to start from

        Returns:
            SearchPage with normalized results

        Raises:
            InvalidArgumentError: Before any network call, on bad input
            SearchError: If the upstream call fails
        """
        pass

    @abstractmethod
    async def continue_search(
        self,
        token: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        query: str = "",
    ) -> SearchPage:
        """
        Fetch the page following a previous response.

        Args:
            token: Continuation token from the previous page
            page_size: Results per page, 1-50
            query: Original query, passed along where the upstream needs it

        Returns:
            The next SearchPage; its continuation_token is None on the last page
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the upstream is reachable."""
        pass

    async def close(self) -> None:
        """Release any held connections."""
        pass


class HTTPSearchService(SearchService):
    """Search service backed by a lazily created, reusable httpx client."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "User-Agent": "TuneSearch/1.0",
                    "Accept": "application/json",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
