"""Tests for the Darwinex invest page scraper.

Tests cover:
1. parse_number edge cases
2. Static page without dynamic markup yields the fallback values
3. Selector and text-context extraction for each field
4. fetch() error mapping to StatsUnavailableError
"""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from adapter.external.darwinex import (
    FALLBACK_STATS,
    DarwinexStatsAdapter,
    parse_darwin_stats,
    parse_number,
)
from domain.model.errors import StatsUnavailableError

FULL_PAGE = """
<html><body>
  <section class="returns"><div>
    <span class="js-return-total" data-inc-value="45.3"></span>
    <span class="js-return-annualized" data-inc-value="12.4"></span>
  </div></section>
  <div class="stat"><div><span data-inc-value="3.5"></span></div><p>Track Record</p></div>
  <div class="stat"><div><span data-inc-value="-7.2"></span></div><p>Maximum Drawdown</p></div>
  <section class="months"><div>
    <span class="js-return-best-month" data-inc-value="9.1"></span>
    <span class="js-return-worst-month" data-inc-value="-2.4"></span>
  </div></section>
  <section>
    <p>Number of trades</p><p>1,234</p>
    <p>Average trade duration</p><p>2 days</p>
    <p>Winning trades</p><p>61.5%</p>
  </section>
  <p>Invested by 87 portfolios with $ 1,250,000 AUM</p>
</body></html>
"""

PLACEHOLDER_PAGE = """
<html><body>
  <span class="js-return-best-month" data-inc-value="0"></span>
  <span class="js-return-worst-month" data-inc-value="0"></span>
  <p>Loading...</p>
</body></html>
"""


class TestParseNumber(unittest.TestCase):

    def test_strips_commas_percent_and_spaces(self):
        self.assertEqual(parse_number(' 1,234.5 % '), 1234.5)

    def test_negative(self):
        self.assertEqual(parse_number('-3.2%'), -3.2)

    def test_leading_number_only(self):
        self.assertEqual(parse_number('12abc'), 12.0)

    def test_unparseable(self):
        self.assertIsNone(parse_number('N/A'))
        self.assertIsNone(parse_number(''))
        self.assertIsNone(parse_number(None))


class TestParseDarwinStats(unittest.TestCase):

    def test_page_without_dynamic_markup_uses_fallbacks(self):
        stats = parse_darwin_stats(PLACEHOLDER_PAGE)

        self.assertEqual(stats.return_since_inception, 31.17)
        self.assertEqual(stats.best_month, 8.21)
        self.assertEqual(stats.worst_month, 0.0)
        for field in (
            'annualized_return', 'track_record_years', 'maximum_drawdown', 'number_of_trades',
            'average_trade_duration', 'winning_trades_ratio', 'current_investors', 'aum',
        ):
            self.assertIsNone(getattr(stats, field), field)
        self.assertTrue(stats.last_updated.endswith('Z'))

    def test_empty_page_uses_fallbacks(self):
        stats = parse_darwin_stats('')
        self.assertEqual(
            (stats.return_since_inception, stats.best_month, stats.worst_month),
            tuple(FALLBACK_STATS[k] for k in ('return_since_inception', 'best_month', 'worst_month')),
        )

    def test_full_page(self):
        stats = parse_darwin_stats(FULL_PAGE)

        self.assertEqual(stats.return_since_inception, 45.3)
        self.assertEqual(stats.annualized_return, 12.4)
        self.assertEqual(stats.track_record_years, 3.5)
        self.assertEqual(stats.maximum_drawdown, -7.2)
        self.assertEqual(stats.best_month, 9.1)
        self.assertEqual(stats.worst_month, -2.4)
        self.assertEqual(stats.number_of_trades, 1234.0)
        self.assertEqual(stats.average_trade_duration, '2 days')
        self.assertEqual(stats.winning_trades_ratio, 61.5)
        self.assertEqual(stats.current_investors, 87.0)
        self.assertEqual(stats.aum, 1250000.0)

    def test_return_from_text_context(self):
        html = '<div>Return since inception <span data-inc-value="22.5"></span></div>'
        self.assertEqual(parse_darwin_stats(html).return_since_inception, 22.5)

    def test_month_from_text_context_skips_placeholder(self):
        html = """
        <span class="js-return-best-month" data-inc-value="0"></span>
        <div>Best month <span data-inc-value="0"></span><span data-inc-value="6.6"></span></div>
        """
        self.assertEqual(parse_darwin_stats(html).best_month, 6.6)

    def test_annualized_return_from_text(self):
        html = '<span class="js-return-annualized">14.2%</span>'
        self.assertEqual(parse_darwin_stats(html).annualized_return, 14.2)


class TestDarwinexStatsAdapter(unittest.IsolatedAsyncioTestCase):

    def _response(self, status_code: int, text: str = '') -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.is_error = status_code >= 400
        response.reason_phrase = 'Forbidden' if status_code == 403 else 'OK'
        response.text = text
        return response

    @patch('adapter.external.darwinex._fetch_with_retry', new_callable=AsyncMock)
    async def test_fetch_parses_page(self, mock_fetch):
        mock_fetch.return_value = self._response(200, FULL_PAGE)

        stats = await DarwinexStatsAdapter().fetch('WLE')

        self.assertEqual(stats.return_since_inception, 45.3)
        self.assertEqual(mock_fetch.call_args[0][1], 'https://www.darwinex.com/invest/WLE')

    @patch('adapter.external.darwinex._fetch_with_retry', new_callable=AsyncMock)
    async def test_non_2xx_raises(self, mock_fetch):
        mock_fetch.return_value = self._response(403)

        with self.assertRaises(StatsUnavailableError) as ctx:
            await DarwinexStatsAdapter().fetch('WLE')

        self.assertIn('403', str(ctx.exception))
        self.assertEqual(ctx.exception.code, 'WLE')

    @patch('adapter.external.darwinex._fetch_with_retry', new_callable=AsyncMock)
    async def test_transport_error_raises(self, mock_fetch):
        mock_fetch.side_effect = httpx.ConnectError("connection refused")

        with self.assertRaises(StatsUnavailableError):
            await DarwinexStatsAdapter().fetch('WLE')


if __name__ == '__main__':
    unittest.main()
