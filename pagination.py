# pagination.py
"""
Page-number pagination over DigitalOcean list endpoints.

List responses carry a "links" object:

    {"links": {"pages": {"prev": ".../droplets?page=1", "next": ..., "last": ...}}}

paginate() walks those links for any resource kind; the caller supplies a
typed fetch function for one page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar
from urllib.parse import parse_qs, urlparse

from errors import PaginationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Links:
    pages: Optional[Dict[str, str]] = None

    @classmethod
    def from_response(cls, body: Dict[str, Any]) -> Optional["Links"]:
        links = body.get("links")
        if not isinstance(links, dict):
            return None
        pages = links.get("pages")
        return cls(pages=pages if isinstance(pages, dict) else None)

    def is_last_page(self) -> bool:
        if not self.pages:
            return True
        return not self.pages.get("last")

    def current_page(self) -> int:
        """The page this response belongs to, derived from the "prev" link."""
        if not self.pages or not self.pages.get("prev"):
            return 1

        prev = self.pages["prev"]
        values = parse_qs(urlparse(prev).query).get("page")
        if not values:
            raise PaginationError(f"no page number in prev link {prev!r}")
        try:
            return int(values[0]) + 1
        except ValueError as e:
            raise PaginationError(f"invalid page number in prev link {prev!r}") from e


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    links: Optional[Links] = None


def paginate(fetch: Callable[[int], Page[T]]) -> List[T]:
    """
    Call fetch(page) from page 1 until the last page and collect every item.

    Errors raised by fetch, or while reading the links, propagate as-is:
    there is no partial result.
    """
    items: List[T] = []
    page_no = 1
    while True:
        page = fetch(page_no)
        items.extend(page.items)
        logger.debug("fetched page=%s items=%s total=%s", page_no, len(page.items), len(items))

        if page.links is None or page.links.is_last_page():
            break

        page_no = page.links.current_page() + 1

    return items
