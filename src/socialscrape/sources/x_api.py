"""X (Twitter) v2 API sources via tweepy.

Two read paths are supported: recent search for a query string and an
account's timeline. Both are bounded by ``limit`` and page through the API
with ``tweepy.Paginator``. Rate limits are the provider's; the only knob is
tweepy's own ``wait_on_rate_limit``, off unless enabled in settings.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterator

import tweepy

from .base import Source
from ..config import Settings
from ..models import Post, post_url


logger = logging.getLogger(__name__)

TWEET_FIELDS = ["id", "text", "created_at", "public_metrics", "lang", "author_id"]


def make_client(settings: Settings) -> tweepy.Client:
    if not settings.x_bearer_token:
        raise ValueError("X_BEARER_TOKEN not set")
    return tweepy.Client(
        bearer_token=settings.x_bearer_token,
        wait_on_rate_limit=settings.wait_on_rate_limit,
    )


def _payload(obj: Any) -> dict[str, Any]:
    # tweepy models keep the raw JSON on .data
    d = getattr(obj, "data", obj)
    return dict(d or {})


def _iso(value: Any) -> str | None:
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def _page_size(limit: int, lo: int) -> int:
    return max(lo, min(100, limit))


def tweet_to_post(tweet: Any, author: str | None, source: str) -> Post:
    d = _payload(tweet)
    pm = d.get("public_metrics") or {}
    pid = str(d.get("id"))
    return Post(
        post_id=pid,
        source=source,
        author=author,
        text=d.get("text") or "",
        created_at=_iso(d.get("created_at")),
        url=post_url(author, pid),
        likes=int(pm.get("like_count") or 0),
        retweets=int(pm.get("retweet_count") or 0),
        replies=int(pm.get("reply_count") or 0),
        quotes=int(pm.get("quote_count") or 0),
        lang=d.get("lang"),
        raw=d,
    )


def _check_limit(limit: int) -> None:
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")


class XSearchSource(Source):
    name = "search"

    def __init__(self, query: str, limit: int = 100, settings: Settings | None = None, client: Any = None):
        _check_limit(limit)
        self.query = query
        self.limit = limit
        self.settings = settings or Settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = make_client(self.settings)
        return self._client

    def _pages(self) -> Iterator[Any]:
        return iter(
            tweepy.Paginator(
                self.client.search_recent_tweets,
                query=self.query,
                tweet_fields=TWEET_FIELDS,
                expansions=["author_id"],
                user_fields=["username"],
                max_results=_page_size(self.limit, 10),
            )
        )

    def fetch(self) -> list[Post]:
        out: list[Post] = []
        for resp in self._pages():
            users = {}
            for u in (resp.includes or {}).get("users") or []:
                ud = _payload(u)
                users[str(ud.get("id"))] = ud.get("username")
            for t in resp.data or []:
                author = users.get(str(_payload(t).get("author_id")))
                out.append(tweet_to_post(t, author, self.name))
                if len(out) >= self.limit:
                    logger.info("search %r: %d posts", self.query, len(out))
                    return out
        logger.info("search %r: %d posts", self.query, len(out))
        return out


class XTimelineSource(Source):
    name = "timeline"

    def __init__(
        self,
        handle: str,
        limit: int = 100,
        settings: Settings | None = None,
        client: Any = None,
        include_retweets: bool = False,
        include_replies: bool = True,
    ):
        _check_limit(limit)
        self.handle = handle.lstrip("@")
        self.limit = limit
        self.settings = settings or Settings()
        self.include_retweets = include_retweets
        self.include_replies = include_replies
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = make_client(self.settings)
        return self._client

    def user_id(self) -> str:
        resp = self.client.get_user(username=self.handle)
        if not resp.data:
            raise LookupError(f"Unknown account: @{self.handle}")
        return str(_payload(resp.data).get("id"))

    def fetch(self) -> list[Post]:
        uid = self.user_id()
        exclude = []
        if not self.include_retweets:
            exclude.append("retweets")
        if not self.include_replies:
            exclude.append("replies")
        kwargs: dict[str, Any] = {
            "id": uid,
            "tweet_fields": TWEET_FIELDS,
            "max_results": _page_size(self.limit, 5),
        }
        if exclude:
            kwargs["exclude"] = exclude

        out: list[Post] = []
        for resp in tweepy.Paginator(self.client.get_users_tweets, **kwargs):
            for t in resp.data or []:
                out.append(tweet_to_post(t, self.handle, self.name))
                if len(out) >= self.limit:
                    logger.info("timeline @%s: %d posts", self.handle, len(out))
                    return out
        logger.info("timeline @%s: %d posts", self.handle, len(out))
        return out
