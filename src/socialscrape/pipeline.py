from __future__ import annotations

from typing import Iterable

import pandas as pd
import requests
from rich.console import Console

from .config import Settings
from .page import FieldSpec, fetch_document
from .query import filter_contains, filter_min, sort_desc, top
from .sources.base import Source
from .table import posts_frame, scrape_columns, scrape_rows, to_frame


console = Console(stderr=True)


def scrape(
    url: str,
    fields: Iterable[FieldSpec],
    row_selector: str | None = None,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> pd.DataFrame:
    fields = list(fields)
    if not fields:
        raise ValueError("at least one field is required")
    console.print(f"[bold]Fetching[/bold] {url}...")
    doc = fetch_document(url, settings=settings, session=session)
    if row_selector:
        rows = scrape_rows(doc, row_selector, fields)
    else:
        rows = scrape_columns(doc, fields)
    console.print(f"  got {len(rows)} rows")
    return to_frame(rows, [f.name for f in fields])


def collect(source: Source) -> pd.DataFrame:
    console.print(f"[bold]Fetching[/bold] {source.name}...")
    posts = source.fetch()
    console.print(f"  got {len(posts)}")
    return posts_frame(posts)


def refine(
    df: pd.DataFrame,
    contains: str | None = None,
    min_likes: int | None = None,
    sort_by: str | None = None,
    limit: int | None = None,
) -> pd.DataFrame:
    out = df
    if contains:
        out = filter_contains(out, contains)
    if min_likes is not None:
        out = filter_min(out, "likes", min_likes)
    if sort_by:
        out = sort_desc(out, sort_by)
    if limit is not None:
        out = top(out, limit)
    return out
