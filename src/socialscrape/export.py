from __future__ import annotations

from pathlib import Path
from datetime import datetime, timezone

import pandas as pd


def export_table(df: pd.DataFrame, out_dir: str = "./data/reports", stem: str = "table") -> tuple[str, str]:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    outp = Path(out_dir)
    outp.mkdir(parents=True, exist_ok=True)

    json_path = str(outp / f"{stem}_{ts}.json")
    csv_path = str(outp / f"{stem}_{ts}.csv")

    df.to_json(json_path, orient="records", date_format="iso", force_ascii=False, indent=2)
    df.to_csv(csv_path, index=False, encoding="utf-8")

    return json_path, csv_path
