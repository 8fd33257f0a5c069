"""Page-level catalog controller.

Owns the filter, the fetched products and the pagination state of one
catalog view. Every filter change triggers a fresh fetch that fully
replaces the previous results and sends the view back to the first page.

Responses are tagged with request-generation tokens: a slow, older fetch
that resolves after a newer one is discarded. A closed browser ignores
every late response.
"""

from collections.abc import Awaitable, Callable

import structlog

from storefront.application.catalog_service import CatalogResult
from storefront.domain.exceptions import PageOutOfRangeError
from storefront.domain.models import FilterState, Product
from storefront.domain.pagination import Paginator

logger = structlog.get_logger()

CatalogLoader = Callable[[FilterState], Awaitable[CatalogResult]]


class RequestSequencer:
    """Monotonic request-generation tokens."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        """Tag a new request; it supersedes every earlier one."""
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest


class CatalogBrowser:
    """Filter, results and page state for one catalog view.

    Example usage:
        browser = CatalogBrowser(service.fetch_products, page_size=8)
        await browser.set_filter(search="mouse", category="all")
        items = browser.page_items()
        browser.next_page()
    """

    def __init__(self, loader: CatalogLoader, page_size: int, name: str = "catalog") -> None:
        """Initialize browser.

        Args:
            loader: Coroutine function fetching products for a filter.
            page_size: Items per page for this view.
            name: View name used in log events.
        """
        self.name = name
        self._loader = loader
        self._requests = RequestSequencer()
        self.filters = FilterState()
        self.result = CatalogResult()
        self.paginator = Paginator(total_items=0, page_size=page_size)
        self.loading = False
        self.alive = True

    @property
    def products(self) -> list[Product]:
        return self.result.products

    async def set_filter(self, search: str | None = None, category: str | None = None) -> bool:
        """Apply new filter input and refetch."""
        return await self.load(FilterState.create(search, category))

    async def load(self, filters: FilterState | None = None) -> bool:
        """Fetch products and replace the current results.

        Args:
            filters: New filter; the current one is reused when omitted.

        Returns:
            True if this response was applied, False if it was discarded.
        """
        if filters is not None:
            self.filters = filters
        token = self._requests.issue()
        requested = self.filters
        self.loading = True

        result = await self._loader(requested)

        if not self.alive:
            logger.debug("Discarding response for closed view", view=self.name, token=token)
            return False
        if not self._requests.is_current(token):
            logger.info(
                "Discarding stale catalog response",
                view=self.name,
                token=token,
                latest=self._requests.latest,
            )
            return False

        self.result = result
        self.paginator.reset(result.total)
        self.loading = False
        return True

    def page_items(self) -> list[Product]:
        return self.paginator.current_page(self.result.products)

    def next_page(self) -> int:
        return self.paginator.next()

    def previous_page(self) -> int:
        return self.paginator.previous()

    def jump_to(self, page: int) -> int:
        """Go to a page index.

        Raises:
            PageOutOfRangeError: If the page does not exist.
        """
        if not self.paginator.is_valid_page(page):
            raise PageOutOfRangeError(page, self.paginator.page_count)
        return self.paginator.jump_to(page)

    def close(self) -> None:
        """Stop applying responses; pending fetches are not cancelled."""
        self.alive = False
