from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path


def streamlit_command(dash: Path, port: int) -> list[str]:
    # Prefer the console script; fall back to the module in this interpreter.
    exe = shutil.which("streamlit")
    base = [exe] if exe else [sys.executable, "-m", "streamlit"]
    return base + [
        "run",
        str(dash),
        "--server.port",
        str(port),
        "--server.headless",
        "true",
        "--browser.gatherUsageStats",
        "false",
    ]


def run_streamlit(table_path: str, port: int = 8501) -> None:
    """Launch the dashboard on a post CSV.

    The table path goes through an env var since streamlit runs the
    dashboard as a plain script.
    """
    table = Path(table_path).expanduser().resolve()
    if not table.exists():
        raise FileNotFoundError(f"Post table not found: {table}")
    env = os.environ.copy()
    env["SOCIALSCRAPE_TABLE_PATH"] = str(table)
    subprocess.run(streamlit_command(Path(__file__).with_name("dashboard.py"), port), check=True, env=env)
