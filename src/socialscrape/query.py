"""Client-side query operations over tables.

Every function returns a new frame and leaves its input untouched.
"""

from __future__ import annotations

import pandas as pd


def filter_contains(df: pd.DataFrame, needle: str, column: str = "text", case: bool = False) -> pd.DataFrame:
    # literal match; regex metacharacters in the needle are not special
    mask = df[column].astype("string").str.contains(needle, case=case, regex=False).fillna(False)
    return df[mask.astype(bool)].copy()


def filter_min(df: pd.DataFrame, column: str, threshold: float) -> pd.DataFrame:
    return df[df[column] >= threshold].copy()


def sort_desc(df: pd.DataFrame, column: str) -> pd.DataFrame:
    # mergesort keeps ties in input order
    return df.sort_values(column, ascending=False, kind="mergesort", na_position="last")


def top(df: pd.DataFrame, n: int) -> pd.DataFrame:
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return df.head(n).copy()


def count_by_period(
    df: pd.DataFrame,
    freq: str = "D",
    column: str = "created_at",
    value: str | None = None,
) -> pd.DataFrame:
    """Bucket rows by time.

    Returns a frame with ``period`` and either ``count`` (rows per bucket) or
    the summed ``value`` column. Buckets between the first and last row are
    present with zero. Rows without a timestamp are skipped.
    """
    label = value or "count"
    frame = pd.DataFrame({"period": pd.to_datetime(df[column], utc=True, format="ISO8601")})
    if value:
        frame[label] = df[value].to_numpy()
    frame = frame.dropna(subset=["period"])
    if frame.empty:
        return pd.DataFrame(
            {
                "period": pd.Series(dtype="datetime64[ns, UTC]"),
                label: pd.Series(dtype="int64"),
            }
        )
    grouped = frame.set_index("period").resample(freq)
    out = grouped[label].sum() if value else grouped.size()
    return out.rename(label).reset_index()
