from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd
import requests
import soupsieve
import tweepy
import typer
from pandas.tseries.frequencies import to_offset
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import Settings, load_settings
from .export import export_table
from .page import parse_field
from .pipeline import collect, refine, scrape as scrape_run
from .query import count_by_period
from .render import console_table, timeline_figure, write_figure_html, write_table_html
from .sources.base import source_names
from .sources.registry import make_source


app = typer.Typer(add_completion=False, help="socialscrape - scrape pages and X posts into tables and charts")
console = Console()

sources_app = typer.Typer(help="Manage sources")
app.add_typer(sources_app, name="sources")

# Failures we report as a one-line message instead of a traceback.
EXPECTED_ERRORS = (
    ValueError,
    LookupError,
    OSError,
    requests.RequestException,
    tweepy.TweepyException,
    soupsieve.SelectorSyntaxError,
)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False)],
        force=True,
    )


def _load(env_file: Optional[str], verbose: bool) -> Settings:
    try:
        settings = load_settings(env_file)
    except ValueError as e:
        _fail(e)
    _setup_logging("DEBUG" if verbose else settings.log_level)
    return settings


def _fail(e: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(code=1)


def _report(
    df: pd.DataFrame,
    settings: Settings,
    stem: str,
    title: str,
    html: Optional[str],
    chart: Optional[str] = None,
    freq: str = "D",
    export: bool = False,
) -> None:
    console.print(console_table(df, title=title))
    if html:
        console.print(f"Wrote {write_table_html(df, html, caption=title)}")
    if chart:
        counts = count_by_period(df, freq=freq)
        console.print(f"Wrote {write_figure_html(timeline_figure(counts, title=title), chart)}")
    if export:
        jpath, cpath = export_table(df, out_dir=settings.out_dir, stem=stem)
        console.print(f"Wrote {jpath}")
        console.print(f"Wrote {cpath}")


@sources_app.command("list")
def sources_list():
    for n in source_names():
        typer.echo(n)


@app.command()
def scrape(
    url: str = typer.Argument(..., help="Page to fetch"),
    field: List[str] = typer.Option(..., "--field", "-f", help="name=selector or name=selector@attr (repeatable)"),
    rows: Optional[str] = typer.Option(None, help="Row selector; fields are then matched inside each row"),
    html: Optional[str] = typer.Option(None, help="Write a styled HTML table here"),
    export: bool = typer.Option(False, help="Export JSON/CSV to the output directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    env_file: Optional[str] = typer.Option(None, help="Path to .env"),
):
    """Scrape a page into a table, one column per --field."""
    settings = _load(env_file, verbose)
    try:
        fields = [parse_field(f) for f in field]
        df = scrape_run(url, fields, row_selector=rows, settings=settings)
        _report(df, settings, stem="page", title=url, html=html, export=export)
    except EXPECTED_ERRORS as e:
        _fail(e)


def _posts_command(
    kind: str,
    target: Optional[str],
    title: str,
    limit: Optional[int],
    contains: Optional[str],
    min_likes: Optional[int],
    sort: Optional[str],
    top_n: Optional[int],
    html: Optional[str],
    chart: Optional[str],
    freq: str,
    export: bool,
    verbose: bool,
    env_file: Optional[str],
) -> None:
    settings = _load(env_file, verbose)
    try:
        if chart:
            to_offset(freq)
        source = make_source(kind, target, limit, settings)
        df = collect(source)
        df = refine(df, contains=contains, min_likes=min_likes, sort_by=sort, limit=top_n)
    except KeyError as e:
        _fail(ValueError(f"Unknown column: {e}"))
    except EXPECTED_ERRORS as e:
        _fail(e)
    try:
        _report(df, settings, stem=kind, title=title, html=html, chart=chart, freq=freq, export=export)
    except EXPECTED_ERRORS as e:
        _fail(e)


LIMIT = typer.Option(100, help="Max posts to fetch")
CONTAINS = typer.Option(None, help="Keep posts whose text contains this (case-insensitive)")
MIN_LIKES = typer.Option(None, help="Keep posts with at least this many likes")
SORT = typer.Option(None, help="Sort descending by this column (likes, retweets, created_at...)")
TOP = typer.Option(None, "--top", help="Keep only the first N rows after sorting")
HTML = typer.Option(None, help="Write a styled HTML table here")
CHART = typer.Option(None, help="Write a posts-over-time chart (HTML) here")
FREQ = typer.Option("D", help="Chart bucket size as a pandas offset alias (h, D, W...)")
EXPORT = typer.Option(False, help="Export JSON/CSV to the output directory")
VERBOSE = typer.Option(False, "--verbose", "-v")
ENV_FILE = typer.Option(None, help="Path to .env")


@app.command()
def search(
    query: str = typer.Argument(..., help="X search query"),
    limit: int = LIMIT,
    contains: Optional[str] = CONTAINS,
    min_likes: Optional[int] = MIN_LIKES,
    sort: Optional[str] = SORT,
    top_n: Optional[int] = TOP,
    html: Optional[str] = HTML,
    chart: Optional[str] = CHART,
    freq: str = FREQ,
    export: bool = EXPORT,
    verbose: bool = VERBOSE,
    env_file: Optional[str] = ENV_FILE,
):
    """Recent posts matching a query."""
    _posts_command("search", query, f"search: {query}", limit, contains, min_likes, sort, top_n, html, chart, freq, export, verbose, env_file)


@app.command()
def timeline(
    handle: str = typer.Argument(..., help="Account handle, with or without @"),
    limit: int = LIMIT,
    contains: Optional[str] = CONTAINS,
    min_likes: Optional[int] = MIN_LIKES,
    sort: Optional[str] = SORT,
    top_n: Optional[int] = TOP,
    html: Optional[str] = HTML,
    chart: Optional[str] = CHART,
    freq: str = FREQ,
    export: bool = EXPORT,
    verbose: bool = VERBOSE,
    env_file: Optional[str] = ENV_FILE,
):
    """Most recent posts of one account."""
    _posts_command("timeline", handle, f"@{handle.lstrip('@')}", limit, contains, min_likes, sort, top_n, html, chart, freq, export, verbose, env_file)


@app.command()
def sample(
    path: Optional[str] = typer.Argument(None, help="CSV of posts (default: SOCIALSCRAPE_SAMPLE_CSV)"),
    limit: Optional[int] = typer.Option(None, help="Max rows to read from the CSV"),
    contains: Optional[str] = CONTAINS,
    min_likes: Optional[int] = MIN_LIKES,
    sort: Optional[str] = SORT,
    top_n: Optional[int] = TOP,
    html: Optional[str] = HTML,
    chart: Optional[str] = CHART,
    freq: str = FREQ,
    export: bool = EXPORT,
    verbose: bool = VERBOSE,
    env_file: Optional[str] = ENV_FILE,
):
    """Posts from a pre-downloaded CSV."""
    _posts_command("csv", path, path or "sample", limit, contains, min_likes, sort, top_n, html, chart, freq, export, verbose, env_file)


@app.command()
def ui(
    table: Optional[str] = typer.Option(None, help="Post CSV to show (default: sample CSV)"),
    env_file: Optional[str] = typer.Option(None, help="Path to .env"),
    port: int = typer.Option(8501, help="Streamlit port"),
):
    """Launch the Streamlit dashboard."""
    from .ui.app import run_streamlit

    settings = _load(env_file, False)
    try:
        run_streamlit(table or settings.sample_csv, port=port)
    except FileNotFoundError as e:
        _fail(e)
