import math

import pytest

from dcfcalc.domain.types import PolicyOutput
from dcfcalc.engine.dcf import project
from dcfcalc.engine.multiples import ev_ebitda_value
from dcfcalc.engine.multiples import football_field
from dcfcalc.engine.multiples import pe_value
from dcfcalc.engine.sensitivity import sweep


class TestEvEbitdaValue:
  """Tests for ev_ebitda_value function."""

  def test_uses_period_five(self, ten_year_assumptions):
    """Year-5 EBITDA, not the final year's."""
    a = ten_year_assumptions
    result = project(a)
    out = ev_ebitda_value(result, a)

    ebitda5 = result.periods[4].ebitda
    expected = (ebitda5 * 18.0 - 35000.0) / 7450.0

    assert isinstance(out, PolicyOutput)
    assert out.value == pytest.approx(expected, rel=1e-12)
    assert out.diag['ebitda_period'] == 5
    assert out.diag['multiple'] == 18.0

  def test_five_year_horizon(self, example_assumptions):
    """Manual calculation:
    EBITDA5 = 50000 * 1.1^5 * 0.25 = 20131.375
    Value = (20131.375 * 15 - 10000) / 1000 = 291.970625
    """
    result = project(example_assumptions)
    out = ev_ebitda_value(result, example_assumptions)

    assert out.value == pytest.approx(291.970625, rel=1e-9)

  def test_period_capped_at_horizon(self, example_assumptions):
    a = example_assumptions.with_changes(growth_rates=(10.0, 10.0))
    out = ev_ebitda_value(project(a), a)

    assert out.diag['ebitda_period'] == 2

  def test_custom_multiple(self, example_assumptions):
    result = project(example_assumptions)
    low = ev_ebitda_value(result, example_assumptions, multiple=10.0)
    high = ev_ebitda_value(result, example_assumptions, multiple=20.0)

    assert low.value < high.value

  def test_zero_shares(self, example_assumptions):
    a = example_assumptions.with_changes(shares_outstanding=0.0)

    assert math.isinf(ev_ebitda_value(project(a), a).value)

  def test_empty_horizon(self, example_assumptions):
    a = example_assumptions.with_changes(growth_rates=())
    out = ev_ebitda_value(project(a), a)

    assert math.isnan(out.value)
    assert out.diag['error'] == 'empty_horizon'


class TestPeValue:
  """Tests for pe_value function."""

  def test_basic(self):
    out = pe_value(12.0, 30.0)

    assert out.value == pytest.approx(360.0)
    assert out.diag['method'] == 'pe'

  def test_missing_eps(self):
    out = pe_value(None, 30.0)

    assert math.isnan(out.value)
    assert out.diag['error'] == 'missing_eps'


class TestFootballField:
  """Tests for football_field function."""

  def test_bands(self, ten_year_assumptions):
    a = ten_year_assumptions
    result = project(a)
    grid = sweep(a)
    bands = football_field(a, result, grid)

    assert [b.method for b in bands] == ['DCF', 'EV/EBITDA', 'P/E']
    dcf = bands[0]
    assert dcf.low == min(grid.flat())
    assert dcf.high == max(grid.flat())
    assert dcf.point == result.implied_price
    pe = bands[2]
    assert pe.low == pytest.approx(12.0 * 28.0)
    assert pe.high == pytest.approx(12.0 * 32.0)
    assert pe.point == pytest.approx(360.0)
    for band in bands:
      assert band.low <= band.point <= band.high

  def test_no_eps(self, example_assumptions):
    result = project(example_assumptions)
    bands = football_field(example_assumptions, result,
                           sweep(example_assumptions))

    assert [b.method for b in bands] == ['DCF', 'EV/EBITDA']

  def test_all_non_finite(self, example_assumptions):
    """A band with no finite values is NaN."""
    a = example_assumptions.with_changes(shares_outstanding=0.0)
    result = project(a)
    bands = football_field(a, result, sweep(a))

    assert math.isnan(bands[0].low)
    assert math.isnan(bands[0].high)
