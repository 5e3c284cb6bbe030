from __future__ import annotations

import csv
import re
from pathlib import Path

import pandas as pd

from .base import Source
from ..models import Post, post_url, stable_id


ALIASES = {
    "post_id": ("post_id", "id", "tweet_id"),
    "text": ("text", "content", "tweet"),
    "created_at": ("created_at", "date", "timestamp"),
    "author": ("author", "username", "user"),
    "likes": ("likes", "like_count", "favorite_count"),
    "retweets": ("retweets", "retweet_count"),
    "replies": ("replies", "reply_count"),
    "quotes": ("quotes", "quote_count"),
    "lang": ("lang", "language"),
    "url": ("url", "link"),
}

_INT_RE = re.compile(r"^[+-]?\d+$")


def _pick(row: dict[str, str], field: str) -> str | None:
    for k in ALIASES[field]:
        v = row.get(k)
        if v is not None and v.strip() != "":
            return v.strip()
    return None


def _date(value: str | None, line: int) -> str | None:
    if value is None:
        return None
    try:
        return pd.to_datetime(value, utc=True).isoformat()
    except (ValueError, OverflowError):
        raise ValueError(f"line {line}: unreadable date: {value!r}") from None


def _count(value: str | None, field: str, line: int) -> int:
    if value is None:
        return 0
    # whole numbers only: "1.9", "inf" and "1e9" are rejected, not rounded
    digits = value.replace(",", "")
    if not _INT_RE.match(digits):
        raise ValueError(f"line {line}: {field} is not a whole number: {value!r}")
    return int(digits)


class CsvSource(Source):
    """Posts from a pre-downloaded CSV export.

    Header names are matched case-insensitively against ALIASES, so dumps
    from the common scraper tools load without renaming columns.
    """

    name = "csv"

    def __init__(self, path: str = "./data/sample_posts.csv", limit: int | None = None):
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.path = path
        self.limit = limit

    def fetch(self) -> list[Post]:
        p = Path(self.path)
        if not p.exists():
            raise FileNotFoundError(f"Sample CSV not found: {p}")
        out: list[Post] = []
        with open(p, "r", encoding="utf-8", newline="") as f:
            r = csv.DictReader(f)
            for line, raw in enumerate(r, start=2):
                row = {(k or "").strip().lower(): (v if isinstance(v, str) else "") for k, v in raw.items()}
                text = _pick(row, "text") or ""
                author = (_pick(row, "author") or "").lstrip("@") or None
                created_at = _date(_pick(row, "created_at"), line)
                pid = _pick(row, "post_id") or stable_id(self.name, author or "", created_at or "", text)
                out.append(
                    Post(
                        post_id=pid,
                        source=self.name,
                        author=author,
                        text=text,
                        created_at=created_at,
                        url=_pick(row, "url") or post_url(author, pid),
                        likes=_count(_pick(row, "likes"), "likes", line),
                        retweets=_count(_pick(row, "retweets"), "retweets", line),
                        replies=_count(_pick(row, "replies"), "replies", line),
                        quotes=_count(_pick(row, "quotes"), "quotes", line),
                        lang=_pick(row, "lang"),
                        raw=dict(raw),
                    )
                )
                if self.limit is not None and len(out) >= self.limit:
                    break
        return out
