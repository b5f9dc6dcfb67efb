"""
HTTP client for the STEM Forum API.

Mirrors what the web front end does: it generates a per-session id and a
persistent per-browser user id, posts a view at most once per article per
session, and remembers which articles were liked. That local state is an
advisory cache. It is never reconciled with the server and may be stale
(another browser, a cleared store, a failed request), so callers that need
the truth should ask the API.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Dict, List, Optional, Set

import httpx

logger = logging.getLogger(__name__)

EMPTY_STATS = {"views": 0, "likes": 0, "hasLiked": False, "comments": 0}


def _generate_id(prefix: str) -> str:
    return f"{prefix}_{secrets.token_hex(5)}_{int(time.time() * 1000)}"


def generate_session_id() -> str:
    return _generate_id("session")


def generate_user_id() -> str:
    return _generate_id("user")


def format_count(count: int) -> str:
    """Compact display form: 1234 -> "1.2k" """
    if count >= 1000:
        return f"{count / 1000:.1f}k"
    return str(count)


class ViewedArticles:
    """Article ids that already triggered a view in this session"""

    def __init__(self):
        self._ids: Set[str] = set()

    def __contains__(self, article_id) -> bool:
        return str(article_id) in self._ids

    def mark(self, article_id) -> None:
        self._ids.add(str(article_id))


class LikedArticles:
    """Per-browser map of article id -> liked, updated after successful toggles"""

    def __init__(self, initial: Optional[Dict[str, bool]] = None):
        self._liked: Dict[str, bool] = dict(initial or {})

    def has_liked(self, article_id) -> bool:
        return bool(self._liked.get(str(article_id)))

    def set(self, article_id, liked: bool) -> None:
        self._liked[str(article_id)] = liked

    def as_dict(self) -> Dict[str, bool]:
        return dict(self._liked)


class StemForumClient:
    """Synchronous API client with advisory client-side state"""

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        liked: Optional[LikedArticles] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.user_id = user_id or generate_user_id()
        self.session_id = session_id or generate_session_id()
        self.viewed = ViewedArticles()
        self.liked = liked or LikedArticles()
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"), transport=transport, timeout=timeout
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "StemForumClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def get_article_stats(self, article_id: int) -> Dict[str, Any]:
        """Server stats with ``hasLiked`` filled from the local liked map"""
        try:
            response = self._http.get(f"/article/{article_id}/stats")
            response.raise_for_status()
            stats = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error fetching article stats: {e}")
            stats = dict(EMPTY_STATS)
        stats["hasLiked"] = self.liked.has_liked(article_id)
        return stats

    def record_view(self, article_id: int) -> Optional[Dict[str, Any]]:
        """
        Post a view unless this session already did for ``article_id``.

        Returns the server response, or None when skipped or failed.
        """
        if article_id in self.viewed:
            return None
        try:
            response = self._http.post(
                f"/article/{article_id}/view", json={"sessionId": self.session_id}
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error recording view: {e}")
            return None
        self.viewed.mark(article_id)
        return response.json()

    def toggle_like(self, article_id: int) -> Optional[Dict[str, Any]]:
        """Flip the locally known like state for ``article_id`` on the server"""
        action = "unlike" if self.liked.has_liked(article_id) else "like"
        try:
            response = self._http.post(
                f"/article/{article_id}/like",
                json={"userId": self.user_id, "action": action},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Error toggling like: {e}")
            return None
        self.liked.set(article_id, action == "like")
        return response.json()

    def refresh_like_state(self, article_id: int, liked: bool) -> None:
        """Overwrite the cached like state, e.g. after learning it elsewhere"""
        self.liked.set(article_id, liked)

    def get_all_articles_stats(self) -> Dict[str, Any]:
        try:
            response = self._http.get("/articles/stats")
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error fetching articles stats: {e}")
            return {}

    def get_comments(self, article_id: int) -> List[Dict[str, Any]]:
        response = self._http.get(f"/articles/{article_id}/comments")
        response.raise_for_status()
        return response.json()

    def post_comment(
        self, article_id: int, content: str, author: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"content": content, "userId": self.user_id}
        if author:
            payload["author"] = author
        response = self._http.post(f"/articles/{article_id}/comments", json=payload)
        response.raise_for_status()
        return response.json()

    def subscribe(
        self, email: str, source: Optional[str] = None, article_id: Optional[int] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"email": email}
        if source:
            payload["source"] = source
        if article_id is not None:
            payload["articleId"] = article_id
        response = self._http.post("/newsletter/subscribe", json=payload)
        response.raise_for_status()
        return response.json()

    def check_health(self) -> Dict[str, Any]:
        response = self._http.get("/health")
        response.raise_for_status()
        return response.json()
