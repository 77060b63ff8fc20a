import logging
from enum import Enum
from typing import Awaitable, Callable, Iterable, TypeVar

from domain.errors import PostNotFound

logger = logging.getLogger('uvicorn.error')

T = TypeVar("T")


class FallbackPolicy(str, Enum):
    BLOCKING = "blocking"  # resolve unknown slugs on request
    NONE = "none"          # only enumerated slugs are routable


class StaticPaths:
    """
    The set of post slugs known to be routable, plus what to do about the rest.

    Slugs are enumerated up front (at startup). A post published afterwards has
    a slug missing from the set; with the blocking policy it is looked up on
    demand and remembered once found, so new posts never 404 just because the
    enumeration is stale.
    """

    def __init__(self, slugs: Iterable[str] = (), fallback: FallbackPolicy = FallbackPolicy.BLOCKING):
        self.slugs = set(slugs)
        self.fallback = FallbackPolicy(fallback)

    def replace(self, slugs: Iterable[str]) -> None:
        self.slugs = set(slugs)
        logger.info(f"Enumerated {len(self.slugs)} post paths.")

    def __contains__(self, slug: str) -> bool:
        return slug in self.slugs

    async def resolve(self, slug: str, load: Callable[[str], Awaitable[T]]) -> T:
        known = slug in self.slugs
        if not known and self.fallback is FallbackPolicy.NONE:
            logger.warning(f"Slug '{slug}' is not an enumerated path and fallback is disabled.")
            raise PostNotFound(slug)

        page = await load(slug)
        if not known:
            logger.info(f"Resolved new path '{slug}' on demand.")
            self.slugs.add(slug)
        return page
