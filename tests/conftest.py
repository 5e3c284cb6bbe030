"""Shared fixtures: a static HTML page and offline stand-ins for HTTP."""

from pathlib import Path

import pytest
import requests


SAMPLE = Path(__file__).resolve().parents[1] / "data" / "sample_posts.csv"


STAFF_PAGE = """
<html>
  <body>
    <h1>Our team</h1>
    <div class="card">
      <h3 class="name">Ada Lovelace</h3>
      <p class="title">  Lead
         Analyst </p>
      <a class="contact" href="mailto:ada@example.org">email</a>
    </div>
    <div class="card">
      <h3 class="name">Grace Hopper</h3>
      <p class="title">Compiler Engineer</p>
      <a class="contact" href="mailto:grace@example.org">email</a>
    </div>
    <div class="card">
      <h3 class="name">Edsger Dijkstra</h3>
      <p class="title">Researcher</p>
    </div>
  </body>
</html>
"""


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.content = text.encode("utf-8")
        # what requests falls back to for text/html without a charset
        self.text = self.content.decode("iso-8859-1")
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class FakeSession:
    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if url not in self.pages:
            return FakeResponse("not found", status_code=404)
        return FakeResponse(self.pages[url])


@pytest.fixture
def staff_html():
    return STAFF_PAGE


@pytest.fixture
def fake_session():
    return FakeSession({"https://example.org/team": STAFF_PAGE})
