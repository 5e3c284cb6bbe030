from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from pandas.io.formats.style import Styler
from rich.table import Table

from .models import ENGAGEMENT_COLUMNS


def _cell(v) -> str:
    if v is None or (not isinstance(v, (list, dict)) and pd.isna(v)):
        return ""
    if isinstance(v, pd.Timestamp):
        return v.strftime("%Y-%m-%d %H:%M")
    return str(v)


def console_table(df: pd.DataFrame, title: str | None = None, max_rows: int = 20, max_width: int = 60) -> Table:
    t = Table(title=title, show_lines=False)
    for c in df.columns:
        numeric = pd.api.types.is_numeric_dtype(df[c])
        t.add_column(str(c), justify="right" if numeric else "left", overflow="fold", max_width=max_width)
    for row in df.head(max_rows).itertuples(index=False):
        t.add_row(*(_cell(v) for v in row))
    if len(df) > max_rows:
        t.caption = f"{max_rows} of {len(df)} rows"
    return t


def styled_table(df: pd.DataFrame, bars: Sequence[str] | None = None, caption: str | None = None) -> Styler:
    """Styler with thousands separators and bars on the engagement columns."""
    if bars is None:
        bars = [c for c in ENGAGEMENT_COLUMNS if c in df.columns]
    bars = [c for c in bars if c in df.columns and pd.api.types.is_numeric_dtype(df[c])]

    st = df.style.hide(axis="index")
    numeric = [c for c in df.columns if pd.api.types.is_numeric_dtype(df[c])]
    if numeric:
        st = st.format("{:,}", subset=numeric, na_rep="")
    if "created_at" in df.columns and pd.api.types.is_datetime64_any_dtype(df["created_at"]):
        st = st.format(lambda v: v.strftime("%Y-%m-%d %H:%M") if pd.notna(v) else "", subset=["created_at"])
    if bars and len(df):
        st = st.bar(subset=bars, color="#9ecae1", vmin=0)
    if caption:
        st = st.set_caption(caption)
    return st


def write_table_html(df: pd.DataFrame, path: str, **kwargs) -> str:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(styled_table(df, **kwargs).to_html(), encoding="utf-8")
    return str(p)


def timeline_figure(counts: pd.DataFrame, title: str = "Posts over time") -> go.Figure:
    """Bar chart of a count_by_period frame (``period`` + one value column)."""
    value = [c for c in counts.columns if c != "period"][0]
    fig = px.bar(counts, x="period", y=value, title=title)
    fig.update_layout(xaxis_title=None, yaxis_title=value, bargap=0.1)
    return fig


def write_figure_html(fig: go.Figure, path: str) -> str:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(str(p), include_plotlyjs="cdn")
    return str(p)
