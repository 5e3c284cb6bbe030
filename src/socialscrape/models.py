from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any
import hashlib


def stable_id(*parts: str) -> str:
    h = hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()
    return h[:24]


# Order of the columns in a post table.
POST_COLUMNS = [
    "post_id",
    "source",
    "author",
    "created_at",
    "text",
    "likes",
    "retweets",
    "replies",
    "quotes",
    "lang",
    "url",
]

ENGAGEMENT_COLUMNS = ["likes", "retweets", "replies", "quotes"]


@dataclass
class Post:
    post_id: str
    source: str
    author: str | None
    text: str

    # Timestamps as ISO strings for portability
    created_at: str | None = None
    url: str | None = None

    likes: int = 0
    retweets: int = 0
    replies: int = 0
    quotes: int = 0

    lang: str | None = None

    raw: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_row(self) -> dict[str, Any]:
        """Flat row for a post table (no raw payload)."""
        d = self.to_dict()
        return {k: d[k] for k in POST_COLUMNS}


def post_url(author: str | None, post_id: str) -> str:
    if author:
        return f"https://x.com/{author}/status/{post_id}"
    return f"https://x.com/i/web/status/{post_id}"
