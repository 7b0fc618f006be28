"""Continuation-driven paging over upload listings.

A paginator starts with no token, fetches the first page, then follows
each page's continuation token until a page arrives without one. Empty
pages that still carry a token are followed like any other. Paging is
sequential and caller-driven; nothing is fetched ahead.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import Enum

from tubescope.models.video import Video, VideoPage

logger = logging.getLogger(__name__)


class PageState(Enum):
    START = "start"
    HAS_PAGE = "has_page"
    DONE = "done"


class VideoPaginator:
    def __init__(
        self,
        fetch_first: Callable[[], Awaitable[VideoPage]],
        fetch_next: Callable[[str], Awaitable[VideoPage]],
    ):
        self._fetch_first = fetch_first
        self._fetch_next = fetch_next
        self.state = PageState.START
        self.continuation: str | None = None
        self._consumed: set[str] = set()

    async def next_page(self) -> VideoPage | None:
        """Fetch the next page, or return None once the listing is exhausted."""
        if self.state is PageState.DONE:
            return None
        if self.state is PageState.START:
            page = await self._fetch_first()
        else:
            token = self.continuation
            self._consumed.add(token)
            page = await self._fetch_next(token)
        self._advance(page.continuation)
        return page

    def _advance(self, token: str | None) -> None:
        if token is None:
            self.state = PageState.DONE
            self.continuation = None
        elif token in self._consumed:
            logger.warning("Upstream returned an already consumed continuation token; stopping")
            self.state = PageState.DONE
            self.continuation = None
        else:
            self.state = PageState.HAS_PAGE
            self.continuation = token

    def __aiter__(self) -> AsyncIterator[VideoPage]:
        return self._pages()

    async def _pages(self) -> AsyncIterator[VideoPage]:
        while True:
            page = await self.next_page()
            if page is None:
                return
            yield page

    async def videos(self) -> AsyncIterator[Video]:
        async for page in self:
            for video in page.videos:
                yield video
