# do_client.py
"""
Minimal DigitalOcean API v2 client.

Only the read-only list endpoints the inventory needs:
- GET /droplets            (optionally ?tag_name=...)
- GET /projects
- GET /projects/{id}/resources

A single deadline bounds every request made through one client,
including the time spent reading each response body, so the whole run
stops once the configured timeout has elapsed. Failed calls are never
retried.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from config import DEFAULT_API_URL
from errors import APIError, DeadlineExceededError
from models import Machine, Project, ProjectResource
from pagination import Links, Page, paginate

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = "do-ansible-inventory"
DEFAULT_PER_PAGE = 200
READ_CHUNK_SIZE = 8192


class Deadline:
    """Absolute point in time after which no more requests are sent."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    def expired(self) -> bool:
        return self.remaining() <= 0


class DigitalOceanClient:
    def __init__(
        self,
        token: str,
        timeout: float,
        base_url: str = DEFAULT_API_URL,
        per_page: int = DEFAULT_PER_PAGE,
        session: Optional[requests.Session] = None,
        deadline: Optional[Deadline] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.per_page = per_page
        self.deadline = deadline or Deadline(timeout)
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    # HTTP ------------------------------------------------------------------
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self.deadline.expired():
            raise DeadlineExceededError("timeout exceeded before request", "GET", path)

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            with self.session.get(url, params=params, timeout=self.deadline.remaining(), stream=True) as resp:
                raw = self._read_body(resp, path)
        except requests.Timeout as e:
            raise DeadlineExceededError(f"request timed out: {e}", "GET", path) from e
        except requests.RequestException as e:
            # a read timeout while streaming surfaces as ConnectionError
            if self.deadline.expired():
                raise DeadlineExceededError(f"request timed out: {e}", "GET", path) from e
            raise APIError(f"request failed: {e}", "GET", path) from e

        if resp.status_code >= 400:
            raise APIError(_error_message(raw, resp.reason), "GET", path, resp.status_code)

        try:
            body = json.loads(raw)
        except ValueError as e:
            raise APIError("response is not valid JSON", "GET", path, resp.status_code) from e
        if not isinstance(body, dict):
            raise APIError("unexpected response body", "GET", path, resp.status_code)
        return body

    def _read_body(self, resp: requests.Response, path: str) -> bytes:
        """Read the body chunk by chunk; the socket timeout alone does not bound a slow transfer."""
        chunks: List[bytes] = []
        for chunk in resp.iter_content(chunk_size=READ_CHUNK_SIZE):
            chunks.append(chunk)
            if self.deadline.expired():
                raise DeadlineExceededError("timeout exceeded while reading response", "GET", path, resp.status_code)
        if self.deadline.expired():
            raise DeadlineExceededError("timeout exceeded while reading response", "GET", path, resp.status_code)
        return b"".join(chunks)

    def _page(
        self,
        path: str,
        key: str,
        parse: Callable[[Dict[str, Any]], T],
        page: int,
        params: Optional[Dict[str, Any]] = None,
    ) -> Page[T]:
        query = dict(params or {})
        query.update({"page": page, "per_page": self.per_page})
        body = self._get(path, query)

        try:
            items = [parse(raw) for raw in body.get(key) or []]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise APIError(f"couldn't parse {key!r} in response: {e!r}", "GET", path) from e
        return Page(items=items, links=Links.from_response(body))

    # Listing ---------------------------------------------------------------
    def list_droplets(self, tag: Optional[str] = None) -> List[Machine]:
        params = {"tag_name": tag} if tag else None
        return paginate(lambda page: self._page("droplets", "droplets", Machine.from_api, page, params))

    def list_projects(self) -> List[Project]:
        return paginate(lambda page: self._page("projects", "projects", Project.from_api, page))

    def list_project_resources(self, project_id: str) -> List[ProjectResource]:
        path = f"projects/{project_id}/resources"
        return paginate(lambda page: self._page(path, "resources", ProjectResource.from_api, page))


def _error_message(raw: bytes, reason: Optional[str]) -> str:
    try:
        body = json.loads(raw)
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return reason or "request failed"
