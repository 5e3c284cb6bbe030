from __future__ import annotations

from .base import Source
from .csv_sample import CsvSource
from .x_api import XSearchSource, XTimelineSource
from ..config import Settings


def make_source(kind: str, target: str | None, limit: int | None, settings: Settings) -> Source:
    """Build a source by name.

    ``target`` is the query for search, the handle for timeline and the file
    path for csv (falls back to settings.sample_csv).
    """
    kind = kind.strip().lower()
    if kind in ("search", "x_search"):
        if not target:
            raise ValueError("search needs a query")
        if limit is None:
            limit = 100
        return XSearchSource(target, limit=limit, settings=settings)
    if kind in ("timeline", "x_timeline", "user"):
        if not target:
            raise ValueError("timeline needs an account handle")
        if limit is None:
            limit = 100
        return XTimelineSource(target, limit=limit, settings=settings)
    if kind in ("csv", "sample"):
        return CsvSource(target or settings.sample_csv, limit=limit)
    raise ValueError(f"Unknown source: {kind}")
