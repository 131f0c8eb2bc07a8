"""
Avatar lookup proxy.

The browser cannot call the Roblox APIs directly because of CORS, so
the server resolves a username to a thumbnail URL on its behalf.  The
upstream calls sit behind the ``AvatarLookup`` interface:

* :meth:`AvatarLookup.resolve_id` – username to numeric user id.
* :meth:`AvatarLookup.resolve_thumbnail` – user id to image URL.

``RobloxAvatarLookup`` talks to the real APIs with ``requests``;
tests plug in a fake.  ``AvatarService`` strings the two calls
together.  There is no caching and no retry: one failed upstream call
fails the whole lookup.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from ..core.errors import NotFoundError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


class AvatarLookup(ABC):
    """Source of external user ids and avatar thumbnails."""

    @abstractmethod
    def resolve_id(self, username: str) -> Optional[int]:
        """Return the external id for ``username``, ``None`` if unknown.

        Raises ``UpstreamError`` when the upstream call fails.
        """

    @abstractmethod
    def resolve_thumbnail(self, user_id: int) -> Optional[str]:
        """Return the thumbnail URL for ``user_id``, ``None`` if absent.

        Raises ``UpstreamError`` when the upstream call fails.
        """


class RobloxAvatarLookup(AvatarLookup):
    """``AvatarLookup`` backed by the public Roblox web APIs."""

    def __init__(
        self,
        id_lookup_url: str,
        thumbnail_url: str,
        *,
        thumbnail_size: str = "150x150",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.id_lookup_url = id_lookup_url
        self.thumbnail_url = thumbnail_url
        self.thumbnail_size = thumbnail_size
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_json(self, url: str, params: Dict[str, Any], failure: str) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Any transport error, non‑2xx status or undecodable body is
        turned into an ``UpstreamError`` with the generic ``failure``
        message; the underlying cause is kept in ``detail``.
        """
        try:
            logger.debug("Sending GET request to %s", url)
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise UpstreamError(failure, detail=f"HTTP {status} from {url}") from exc
        except requests.RequestException as exc:
            raise UpstreamError(failure, detail=str(exc)) from exc
        except ValueError as exc:
            raise UpstreamError(failure, detail=f"Invalid JSON from {url}") from exc

    def resolve_id(self, username: str) -> Optional[int]:
        data = self._get_json(
            self.id_lookup_url,
            {"username": username},
            "Could not query the avatar service",
        )
        if not isinstance(data, dict) or not data.get("Id"):
            return None
        try:
            return int(data["Id"])
        except (TypeError, ValueError):
            return None

    def resolve_thumbnail(self, user_id: int) -> Optional[str]:
        data = self._get_json(
            self.thumbnail_url,
            {
                "userIds": user_id,
                "size": self.thumbnail_size,
                "format": "Png",
                "isCircular": "false",
            },
            "Could not fetch the avatar thumbnail",
        )
        if not isinstance(data, dict):
            return None
        entries = data.get("data")
        if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
            return None
        return entries[0].get("imageUrl") or None


class AvatarService:
    def __init__(self, lookup: AvatarLookup) -> None:
        self.lookup = lookup

    def resolve_avatar(self, username: str) -> str:
        """Return the thumbnail URL for an external ``username``.

        Raises ``ValidationError`` for an empty username,
        ``NotFoundError`` when the user or the image does not exist and
        ``UpstreamError`` when either upstream call fails.
        """
        username = (username or "").strip()
        if not username:
            raise ValidationError("Missing username")
        try:
            user_id = self.lookup.resolve_id(username)
            if user_id is None:
                raise NotFoundError("Avatar user not found")
            image_url = self.lookup.resolve_thumbnail(user_id)
        except UpstreamError as exc:
            logger.warning("Avatar lookup for %s failed: %s", username, exc.detail or exc.message)
            raise
        if not image_url:
            raise NotFoundError("No avatar image")
        return image_url
