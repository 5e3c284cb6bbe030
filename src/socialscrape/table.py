from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

import pandas as pd
from bs4 import BeautifulSoup
from bs4.element import Tag

from .models import ENGAGEMENT_COLUMNS, POST_COLUMNS, Post
from .page import FieldSpec, extract, extract_all, select_nodes


logger = logging.getLogger(__name__)


class ColumnMismatchError(ValueError):
    """Parallel selector results differ in length and cannot be zipped."""

    def __init__(self, counts: dict[str, int]):
        self.counts = dict(counts)
        detail = ", ".join(f"{k}={v}" for k, v in self.counts.items())
        super().__init__(f"Selector results are not aligned ({detail})")


def zip_columns(columns: dict[str, Sequence[Any]]) -> list[dict[str, Any]]:
    """Zip parallel value sequences into row records.

    Raises ColumnMismatchError instead of truncating when lengths differ.
    """
    if not columns:
        return []
    counts = {k: len(v) for k, v in columns.items()}
    if len(set(counts.values())) > 1:
        raise ColumnMismatchError(counts)
    names = list(columns)
    return [dict(zip(names, vals)) for vals in zip(*(columns[n] for n in names))]


def scrape_columns(doc: BeautifulSoup | Tag, fields: Iterable[FieldSpec]) -> list[dict[str, Any]]:
    """Select every field over the whole document, then zip."""
    columns: dict[str, list[str | None]] = {}
    for f in fields:
        columns[f.name] = extract_all(doc, f)
        logger.debug("%s: %d matches for %r", f.name, len(columns[f.name]), f.selector)
    return zip_columns(columns)


def scrape_rows(doc: BeautifulSoup | Tag, row_selector: str, fields: Iterable[FieldSpec]) -> list[dict[str, Any]]:
    """One record per ``row_selector`` match; fields are looked up inside it.

    A field with no match inside a row is None for that row.
    """
    fields = list(fields)
    rows = []
    for node in select_nodes(doc, row_selector):
        row: dict[str, Any] = {}
        for f in fields:
            hit = node.select_one(f.selector)
            row[f.name] = extract(hit, f.attr) if hit is not None else None
        rows.append(row)
    logger.debug("%d rows for %r", len(rows), row_selector)
    return rows


def to_frame(rows: list[dict[str, Any]], columns: Sequence[str]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=list(columns))


def posts_frame(posts: Iterable[Post]) -> pd.DataFrame:
    """Post table with ``created_at`` as UTC timestamps."""
    df = pd.DataFrame([p.to_row() for p in posts], columns=POST_COLUMNS)
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True, format="ISO8601")
    for c in ENGAGEMENT_COLUMNS:
        df[c] = df[c].fillna(0).astype("int64")
    return df
