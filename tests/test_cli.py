"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from socialscrape import page
from socialscrape.cli import app

from conftest import SAMPLE, FakeSession, STAFF_PAGE


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SOCIALSCRAPE_OUT_DIR", str(tmp_path / "reports"))
    monkeypatch.setenv("SOCIALSCRAPE_SAMPLE_CSV", str(SAMPLE))
    monkeypatch.delenv("X_BEARER_TOKEN", raising=False)


@pytest.fixture
def offline_http(monkeypatch):
    monkeypatch.setattr(page.requests, "Session", lambda: FakeSession({"https://example.org/team": STAFF_PAGE}))


def test_sources_list():
    result = runner.invoke(app, ["sources", "list"])
    assert result.exit_code == 0
    assert result.stdout.split() == ["search", "timeline", "csv"]


def test_sample_with_outputs(tmp_path):
    html = tmp_path / "top.html"
    chart = tmp_path / "chart.html"
    result = runner.invoke(
        app,
        ["sample", "--sort", "likes", "--top", "3", "--html", str(html), "--chart", str(chart), "--export"],
    )
    assert result.exit_code == 0, result.output
    report = html.read_text(encoding="utf-8")
    assert "datajournal" in report
    assert "1,820" in report
    assert chart.exists()
    assert len(list((tmp_path / "reports").glob("csv_*.csv"))) == 1


def test_sample_missing_file(tmp_path):
    result = runner.invoke(app, ["sample", str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "Error" in result.stdout


def test_sample_unknown_sort_column():
    result = runner.invoke(app, ["sample", "--sort", "shares"])
    assert result.exit_code == 1
    assert "Unknown column" in result.stdout


def test_search_without_token():
    result = runner.invoke(app, ["search", "python"])
    assert result.exit_code == 1
    assert "X_BEARER_TOKEN" in result.stdout


def test_scrape_rows(offline_http, tmp_path):
    html = tmp_path / "team.html"
    result = runner.invoke(
        app,
        [
            "scrape",
            "https://example.org/team",
            "--rows",
            "div.card",
            "-f",
            "name=h3.name",
            "-f",
            "contact=a.contact@href",
            "--html",
            str(html),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Grace Hopper" in result.stdout
    assert "mailto:ada@example.org" in html.read_text(encoding="utf-8")


def test_scrape_misaligned_columns(offline_http):
    result = runner.invoke(
        app,
        ["scrape", "https://example.org/team", "-f", "name=h3.name", "-f", "contact=a.contact@href"],
    )
    assert result.exit_code == 1
    assert "not aligned" in result.stdout


def test_scrape_http_error(offline_http):
    result = runner.invoke(app, ["scrape", "https://example.org/missing", "-f", "name=h3.name"])
    assert result.exit_code == 1
    assert "404" in result.stdout


def test_ui_launches_streamlit(monkeypatch):
    from socialscrape.ui import app as ui_app

    calls = []
    monkeypatch.setattr(ui_app.subprocess, "run", lambda cmd, check, env: calls.append((cmd, env)))
    result = runner.invoke(app, ["ui", "--port", "8600"])
    assert result.exit_code == 0, result.output
    cmd, env = calls[0]
    assert cmd[cmd.index("--server.port") + 1] == "8600"
    assert cmd[cmd.index("run") + 1].endswith("dashboard.py")
    assert env["SOCIALSCRAPE_TABLE_PATH"] == str(SAMPLE)


def test_ui_missing_table(tmp_path):
    result = runner.invoke(app, ["ui", "--table", str(tmp_path / "nope.csv")])
    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_scrape_malformed_selector(offline_http):
    result = runner.invoke(app, ["scrape", "https://example.org/team", "-f", "name=h3[["])
    assert result.exit_code == 1
    assert "Error" in result.stdout


def test_sample_bad_chart_frequency(tmp_path):
    result = runner.invoke(app, ["sample", "--chart", str(tmp_path / "c.html"), "--freq", "fortnight"])
    assert result.exit_code == 1
    assert "Error" in result.stdout
    assert not (tmp_path / "c.html").exists()


def test_sample_unwritable_html(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    result = runner.invoke(app, ["sample", "--html", str(blocker / "out.html")])
    assert result.exit_code == 1
    assert "Error" in result.stdout


def test_sample_limit(tmp_path):
    result = runner.invoke(app, ["sample", "--limit", "2", "--export"])
    assert result.exit_code == 0, result.output
    [csv_path] = (tmp_path / "reports").glob("csv_*.csv")
    assert len(csv_path.read_text(encoding="utf-8").strip().splitlines()) == 3


def test_bad_log_level(monkeypatch):
    monkeypatch.setenv("SOCIALSCRAPE_LOG_LEVEL", "verbose2")
    result = runner.invoke(app, ["sample"])
    assert result.exit_code == 1
    assert "Error" in result.stdout
