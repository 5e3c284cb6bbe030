from __future__ import annotations

from typing import Literal

from pydantic import BaseModel
from dotenv import load_dotenv
import os
from pathlib import Path


class Settings(BaseModel):
    x_bearer_token: str | None = None

    user_agent: str = "socialscrape/0.1"
    http_timeout: float = 30.0
    html_parser: str = "html.parser"

    out_dir: str = "./data/reports"
    sample_csv: str = "./data/sample_posts.csv"

    # Passed straight to tweepy.Client; no backoff of our own.
    wait_on_rate_limit: bool = False

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


def _env(name: str, default: str) -> str:
    return os.getenv(name) or default


def load_settings(env_file: str | None = None) -> Settings:
    # Load .env if present
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    s = Settings(
        x_bearer_token=os.getenv("X_BEARER_TOKEN") or None,
        user_agent=_env("SOCIALSCRAPE_USER_AGENT", "socialscrape/0.1"),
        http_timeout=_env("SOCIALSCRAPE_HTTP_TIMEOUT", "30"),
        html_parser=_env("SOCIALSCRAPE_HTML_PARSER", "html.parser"),
        out_dir=_env("SOCIALSCRAPE_OUT_DIR", "./data/reports"),
        sample_csv=_env("SOCIALSCRAPE_SAMPLE_CSV", "./data/sample_posts.csv"),
        wait_on_rate_limit=_env("SOCIALSCRAPE_WAIT_ON_RATE_LIMIT", "false"),
        log_level=_env("SOCIALSCRAPE_LOG_LEVEL", "INFO").upper(),
    )

    Path(s.out_dir).expanduser().resolve().mkdir(parents=True, exist_ok=True)
    return s
