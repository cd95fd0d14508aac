"""Pytest configuration and fixtures."""

import sys
from datetime import date
from pathlib import Path

import pytest
import structlog

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from drawfetcher.exceptions import FetchError
from drawfetcher.html_utils import parse_document
from drawfetcher.models import Game, Slot, SlotConfig, StateConfig


class FakeDocumentFetcher:
    """Serve canned pages; unknown URLs or Exception values raise."""

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, "HTTP 404", status_code=404, error_type="http_status")
        if isinstance(page, Exception):
            raise page
        return page


def page_url(name: str) -> str:
    return f"https://results.example.test/new-york/{name}/"


@pytest.fixture
def today():
    """Fixed reference date."""
    return date(2025, 9, 12)


@pytest.fixture
def results_html():
    """Result page with a latest-numbers section, noise and an archive."""
    return """
<!DOCTYPE html>
<html>
<head>
    <title>Midday Numbers 417 | Results</title>
    <script>var drawTime = "12:30"; var prize = 500;</script>
</head>
<body>
    <nav>
        <a href="/">Home</a>
        <a href="/evening">Evening Numbers</a>
        <span class="promo">Win up to $5,000 today!</span>
    </nav>
    <section class="results">
        <h2>Latest numbers</h2>
        <div class="draw">
            <h3>Midday</h3>
            <time>Wednesday, Sep 10, 2025</time>
            <ul class="c-result">
                <li class="c-ball">4</li>
                <li class="c-ball">1</li>
                <li class="c-ball">7</li>
                <li class="c-ball c-ball--fireball">2</li>
            </ul>
            <p>Top prize $500. Next draw 2:30 PM</p>
        </div>
    </section>
    <section class="history">
        <h2>Past results</h2>
        <table>
            <tr><td>09/09/2025</td><td>3</td><td>8</td><td>5</td></tr>
        </table>
    </section>
</body>
</html>
"""


@pytest.fixture
def results_document(results_html):
    return parse_document(results_html, page_url("midday-numbers"))


@pytest.fixture
def ny_state():
    """Two-slot state with one candidate URL per game."""
    return StateConfig(
        code="ny",
        name="New York",
        slots={
            Slot.MIDDAY: SlotConfig(
                aliases=["midday", "mid-day"],
                urls={
                    Game.PICK3: [page_url("midday-numbers")],
                    Game.PICK4: [page_url("midday-win-4")],
                },
            ),
            Slot.EVENING: SlotConfig(
                aliases=["evening"],
                urls={
                    Game.PICK3: [page_url("numbers")],
                    Game.PICK4: [page_url("win-4")],
                },
            ),
        },
    )


def draw_page(label: str, digits: str, when: str = "Sep 10, 2025") -> str:
    """Minimal result page rendering one digit per element."""
    balls = "".join(f'<span class="ball">{d}</span>' for d in digits)
    return f"""
<html><body>
  <section>
    <h2>Latest results</h2>
    <div class="draw">
      <h3>{label}</h3>
      <p class="date">{when}</p>
      <div class="balls">{balls}</div>
    </div>
  </section>
</body></html>
"""


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()
