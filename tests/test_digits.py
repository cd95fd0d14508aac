"""Tests for digits module."""

import pytest

from drawfetcher.digits import clean_noise, region_text, structural_digits, textual_digits
from drawfetcher.html_utils import parse_document
from drawfetcher.labels import alias_pattern


def _body(html):
    return parse_document(f"<html><body>{html}</body></html>").soup.body


class TestStructuralDigits:
    """Test structural_digits()."""

    @pytest.mark.parametrize("digits", ["417", "0293"])
    def test_consecutive_single_digit_elements(self, digits):
        """Test N single-digit elements are concatenated."""
        balls = "".join(f"<li>{d}</li>" for d in digits)
        region = _body(f"<ul>{balls}</ul>")

        assert structural_digits(region, len(digits)) == digits

    def test_run_must_be_exact(self):
        """Test runs longer or shorter than N are skipped."""
        region = _body(
            "<p>Archive</p><span>1</span><span>2</span><span>3</span><span>4</span><span>5</span>"
            "<p>Latest</p><span>4</span><span>1</span><span>7</span>"
        )

        assert structural_digits(region, 3) == "417"
        assert structural_digits(region, 4) is None

    def test_bonus_ball_ignored(self):
        """Test bonus-ball elements neither count nor break the run."""
        region = _body(
            '<span class="ball">4</span><span class="ball">1</span><span class="ball">7</span>'
            '<span class="ball fireball">2</span>'
        )

        assert structural_digits(region, 3) == "417"
        assert structural_digits(region, 4) is None

    def test_starts_at_anchor(self):
        """Test digits before the anchor are not considered."""
        region = _body(
            "<div><b>5</b><b>2</b><b>8</b></div><h3 id='label'>Midday</h3>"
            "<div><b>4</b><b>1</b><b>7</b></div>"
        )
        anchor = region.find(id="label")

        assert structural_digits(region, 3, start=anchor) == "417"

    def test_stops_at_rival_label(self):
        """Test scanning ends at another slot's label."""
        region = _body(
            "<h3 id='label'>Midday</h3><p>Not drawn yet</p>"
            "<h3>Evening</h3><b>5</b><b>2</b><b>8</b>"
        )
        anchor = region.find(id="label")

        result = structural_digits(
            region, 3, start=anchor, stop_pattern=alias_pattern(["evening"])
        )

        assert result is None

    def test_multi_digit_text_not_structural(self):
        """Test elements holding several digits are not single digits."""
        region = _body("<span>41</span><span>7</span><span>2</span>")

        assert structural_digits(region, 3) is None


class TestTextualDigits:
    """Test textual_digits()."""

    def test_isolated_token(self):
        """Test exact-length token among noise."""
        text = "Midday draw at 12:30 PM on Sep 10, 2025: 417. Top prize $500"

        assert textual_digits(text, 3) == "417"

    def test_token_not_part_of_longer_number(self):
        """Test digits inside longer numbers are not extracted."""
        assert textual_digits("Ticket 123456 sold", 3) is None
        assert textual_digits("Ticket 123456 sold", 4) is None

    def test_separated_digits(self):
        """Test digits with short filler collapse to N digits."""
        assert textual_digits("Pick 3 Midday: 4 - 1 - 7", 3) == "417"
        assert textual_digits("Win 4 Evening 5, 2, 8, 0", 4) == "5280"

    def test_noise_only(self):
        """Test nothing is extracted from prices, times, odds and dates."""
        text = "Jackpot $5,000,000 drawn at 7:29 PM on 9/10/2025. Odds 1 in 1,000. Draw #1234"

        assert textual_digits(text, 3) is None
        assert textual_digits(text, 4) is None

    def test_footer_numbers_ignored(self):
        """Test phone numbers and copyright years are not draw results."""
        text = "Midday results. Call 555-1234 or (800) 555-1234 for info. (c) 2025 Lottery"

        assert textual_digits(text, 3) is None
        assert textual_digits(text, 4) is None
        assert textual_digits("Midday 417. Copyright 2019-2025, call 1-800-555-1234", 3) == "417"

    def test_empty_text(self):
        """Test empty input."""
        assert textual_digits("", 3) is None

    @pytest.mark.parametrize(
        "text",
        ["4172", "41 7", "$417", "417 and 528", "۴۱۷", "4 1 7 2 9", "Sep 10, 2025 4-1-7-2"],
    )
    @pytest.mark.parametrize("count", [3, 4])
    def test_result_always_exact(self, text, count):
        """Test results are either absent or exactly N ASCII digits."""
        result = textual_digits(text, count)

        assert result is None or (len(result) == count and result.isascii() and result.isdigit())


class TestCleanNoise:
    """Test clean_noise()."""

    def test_strips_noise(self):
        """Test each false-positive family is removed."""
        cleaned = clean_noise(
            "Sep 10, 2025 9/10/25 12:59 PM $1,000 prize 500 payout: $250 Play-4 Drawing No. 8812"
        )

        assert not any(ch.isdigit() for ch in cleaned)

    def test_keeps_draw_digits(self):
        """Test draw digits survive cleaning."""
        assert "4 - 1 - 7" in clean_noise("Midday 4 - 1 - 7 at 1:00 PM")


class TestRegionText:
    """Test region_text()."""

    def test_text_from_anchor_until_rival(self):
        """Test flattened text starts at anchor and stops at the rival label."""
        region = _body(
            "<p>Intro 999</p><h3 id='label'>Midday</h3><p>4 1 7</p>"
            "<h3>Evening</h3><p>5 2 8</p>"
        )
        anchor = region.find(id="label")

        text = region_text(region, start=anchor, stop_pattern=alias_pattern(["evening"]))

        assert text == "Midday 4 1 7"
