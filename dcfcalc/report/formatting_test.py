import math

import pytest

from dcfcalc.report.formatting import fmt_money
from dcfcalc.report.formatting import fmt_multiple
from dcfcalc.report.formatting import fmt_number
from dcfcalc.report.formatting import fmt_percent
from dcfcalc.report.formatting import fmt_price
from dcfcalc.report.formatting import fmt_signed_percent
from dcfcalc.report.formatting import PLACEHOLDER


class TestFormatting:
  """Tests for display formatting helpers."""

  @pytest.mark.parametrize('value', [None, math.nan, math.inf, -math.inf])
  def test_placeholder(self, value):
    assert fmt_number(value) == PLACEHOLDER
    assert fmt_money(value) == PLACEHOLDER
    assert fmt_price(value) == PLACEHOLDER
    assert fmt_percent(value) == PLACEHOLDER
    assert fmt_signed_percent(value) == PLACEHOLDER
    assert fmt_multiple(value) == PLACEHOLDER

  def test_number(self):
    assert fmt_number(1234567.891, 2) == '1,234,567.89'
    assert fmt_number(7.26) == '7.3'
    assert fmt_number(1000, 0) == '1,000'

  @pytest.mark.parametrize('millions,expected', [
      (1_500_000.0, '$1.50T'),
      (33975.0, '$34.0B'),
      (-2500.0, '-$2.5B'),
      (12.4, '$12M'),
      (0.5, '$500,000'),
      (0.0, '$0'),
  ])
  def test_money(self, millions, expected):
    assert fmt_money(millions) == expected

  def test_money_symbol_and_scale(self):
    assert fmt_money(2.5e9, '₹', unit_scale=1.0) == '₹2.5B'

  def test_percent(self):
    assert fmt_percent(10) == '10.0%'
    assert fmt_signed_percent(3.2988) == '+3.3%'
    assert fmt_signed_percent(0.0) == '+0.0%'
    assert fmt_signed_percent(-12.04) == '-12.0%'

  def test_price_and_multiple(self):
    assert fmt_price(123.9585714) == '$123.96'
    assert fmt_multiple(15) == '15.0x'
