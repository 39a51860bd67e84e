import math

import pytest

from dcfcalc.domain.types import TerminalMethod
from dcfcalc.engine.dcf import compare_terminal_methods
from dcfcalc.engine.dcf import compound
from dcfcalc.engine.dcf import compute_upside
from dcfcalc.engine.dcf import discount_factor
from dcfcalc.engine.dcf import gordon_terminal_value
from dcfcalc.engine.dcf import present_value_sum
from dcfcalc.engine.dcf import project
from dcfcalc.engine.dcf import project_periods
from dcfcalc.engine.dcf import safe_divide
from dcfcalc.engine.dcf import terminal_warning


class TestSafeDivide:
  """Tests for IEEE-style division."""

  def test_regular(self):
    assert safe_divide(10.0, 4.0) == 2.5

  def test_signed_infinity(self):
    """Non-zero over zero keeps the sign."""
    assert safe_divide(1.0, 0.0) == math.inf
    assert safe_divide(-1.0, 0.0) == -math.inf
    assert safe_divide(1.0, -0.0) == -math.inf

  def test_zero_over_zero(self):
    assert math.isnan(safe_divide(0.0, 0.0))
    assert math.isnan(safe_divide(math.nan, 0.0))

  def test_compound_overflow(self):
    """Overflow saturates instead of raising."""
    assert compound(1e300, 5) == math.inf
    assert discount_factor(1e300, 5) == 0.0


class TestProjectPeriods:
  """Tests for project_periods function."""

  def test_first_period(self, example_assumptions):
    """Period 1 line items.

    Manual calculation:
    Revenue = 50000 * 1.10 = 55000
    EBITDA = 13750, D&A = 2200, EBIT = 11550
    NOPAT = 11550 * 0.79 = 9124.5
    CAPEX = 2750, NWC = 1100
    FCF = 9124.5 + 2200 - 2750 - 1100 = 7474.5
    PV = 7474.5 / 1.1 = 6795.0
    """
    p1 = project_periods(example_assumptions)[0]

    assert p1.index == 1
    assert p1.year == 2025
    assert p1.revenue == pytest.approx(55000.0)
    assert p1.ebitda == pytest.approx(13750.0)
    assert p1.depreciation == pytest.approx(2200.0)
    assert p1.ebit == pytest.approx(11550.0)
    assert p1.nopat == pytest.approx(9124.5)
    assert p1.capex == pytest.approx(2750.0)
    assert p1.nwc_change == pytest.approx(1100.0)
    assert p1.fcf == pytest.approx(7474.5)
    assert p1.pv_fcf == pytest.approx(6795.0)

  def test_revenue_compounds(self, example_assumptions):
    """Each period grows from the previous one."""
    periods = project_periods(example_assumptions)

    assert len(periods) == 5
    assert periods[-1].revenue == pytest.approx(50000 * 1.1**5, rel=1e-12)
    for prev, cur in zip(periods, periods[1:]):
      assert cur.revenue == pytest.approx(prev.revenue * 1.1, rel=1e-12)

  def test_varying_growth(self, example_assumptions):
    """Per-period rates are applied in order."""
    a = example_assumptions.with_changes(growth_rates=(10, 9, 8, 7, 6))
    revenues = [p.revenue for p in project_periods(a)]

    expected = 50000.0
    for got, g in zip(revenues, (10, 9, 8, 7, 6)):
      expected *= 1 + g / 100
      assert got == pytest.approx(expected, rel=1e-12)

  def test_nwc_absent(self, ten_year_assumptions):
    """None NWC contributes nothing to free cash flow."""
    for p in project_periods(ten_year_assumptions):
      assert p.nwc_change == 0.0
      assert p.fcf == pytest.approx(p.nopat + p.depreciation - p.capex)

  def test_zero_revenue(self, example_assumptions):
    """Zero revenue degrades to zero cash flows."""
    a = example_assumptions.with_changes(base_revenue=0.0)

    assert all(p.fcf == 0.0 for p in project_periods(a))


class TestTerminalValue:
  """Tests for terminal value helpers."""

  def test_gordon(self):
    """TV = 10 * 1.03 / 0.07 = 147.1429"""
    assert gordon_terminal_value(10.0, 3.0, 10.0) == pytest.approx(147.1429,
                                                                    abs=1e-4)

  def test_gordon_equal_rates(self):
    """WACC equal to terminal growth is non-finite."""
    assert math.isinf(gordon_terminal_value(10.0, 10.0, 10.0))

  def test_gordon_below(self):
    """WACC below terminal growth keeps the raw negative value."""
    assert gordon_terminal_value(10.0, 12.0, 10.0) < 0

  def test_warning(self):
    assert terminal_warning(TerminalMethod.GORDON, 10.0, 3.0) is None
    assert (terminal_warning(TerminalMethod.GORDON, 10.0,
                             10.0) == 'wacc_equals_terminal_growth')
    assert (terminal_warning(TerminalMethod.GORDON, 8.0,
                             10.0) == 'wacc_below_terminal_growth')
    assert terminal_warning(TerminalMethod.EXIT_MULTIPLE, 10.0, 10.0) is None


class TestProject:
  """Tests for the project entry point."""

  def test_end_to_end_gordon(self, example_assumptions):
    """Generic demo company under the Gordon method.

    Every period's PV equals 7474.5 / 1.1 = 6795 because growth and
    WACC are both 10%, so PV sum = 33975.
    pvTV = 7474.5 * 1.03 / (0.07 * 1.1) = 99983.571
    EV = 133958.571, equity = 123958.571, price = 123.9586
    Upside = 123.9586 / 120 - 1 = 3.2988%
    """
    result = project(example_assumptions)

    assert result.horizon == 5
    assert result.pv_fcf_sum == pytest.approx(33975.0, rel=1e-9)
    assert result.pv_terminal_value == pytest.approx(99983.5714286, rel=1e-9)
    assert result.enterprise_value == pytest.approx(133958.5714286, rel=1e-9)
    assert result.equity_value == pytest.approx(123958.5714286, rel=1e-9)
    assert result.implied_price == pytest.approx(123.9585714, rel=1e-9)
    assert result.upside_pct == pytest.approx(3.2988095, rel=1e-6)
    assert result.tv_percent_of_ev == pytest.approx(74.638, abs=1e-2)
    assert 'terminal_warning' not in result.diag

  def test_formula_consistency(self, example_assumptions):
    """Implied price reproduces from the period sequence."""
    result = project(example_assumptions)
    a = example_assumptions
    last = result.last_period

    pv_sum = sum(p.fcf / 1.1**p.index for p in result.periods)
    tv = last.fcf * 1.03 / 0.07
    pv_tv = tv / 1.1**5
    expected = (pv_sum + pv_tv - a.net_debt) / a.shares_outstanding

    assert result.pv_fcf_sum == pytest.approx(pv_sum, rel=1e-9)
    assert result.terminal_value == pytest.approx(tv, rel=1e-9)
    assert result.implied_price == pytest.approx(expected, rel=1e-9)

  def test_exit_multiple(self, example_assumptions):
    """Exit multiple on final EBITDA.

    pvTV = 13750 * 1.1^4 * 15 / 1.1^5 = 13750 * 15 / 1.1 = 187500
    EV = 33975 + 187500 = 221475, price = 211.475
    """
    a = example_assumptions.with_changes(
        terminal_method=TerminalMethod.EXIT_MULTIPLE)
    result = project(a)

    assert result.terminal_value == pytest.approx(
        result.last_period.ebitda * 15.0)
    assert result.pv_terminal_value == pytest.approx(187500.0, rel=1e-9)
    assert result.implied_price == pytest.approx(211.475, rel=1e-9)
    assert result.diag['exit_multiple'] == 15.0

  def test_upside_absent_without_price(self, example_assumptions):
    """Upside is None, never zero, when no price is known."""
    for price in (0.0, -5.0, math.nan):
      result = project(example_assumptions.with_changes(current_price=price))
      assert result.upside_pct is None

  def test_compute_upside(self):
    assert compute_upside(110.0, 100.0) == pytest.approx(10.0)
    assert compute_upside(110.0, 0.0) is None

  def test_wacc_equals_terminal_growth(self, example_assumptions):
    """Degenerate Gordon case is non-finite and flagged, not raised."""
    a = example_assumptions.with_changes(discount_rate_pct=3.0)
    result = project(a)

    assert math.isinf(result.terminal_value)
    assert not math.isfinite(result.implied_price)
    assert not result.is_finite
    assert result.diag['terminal_warning'] == 'wacc_equals_terminal_growth'
    assert result.diag['non_finite'] is True

  def test_zero_shares(self, example_assumptions):
    """Zero shares yields a non-finite price."""
    result = project(example_assumptions.with_changes(shares_outstanding=0.0))

    assert result.implied_price == math.inf
    assert math.isfinite(result.enterprise_value)

  def test_negative_inputs_do_not_raise(self, example_assumptions):
    """Negative revenue and rates degrade without errors."""
    a = example_assumptions.with_changes(base_revenue=-100.0,
                                         discount_rate_pct=-100.0)
    result = project(a)

    assert len(result.periods) == 5

  def test_empty_horizon(self, example_assumptions):
    """No growth rates gives NaN figures and a diagnostic."""
    result = project(example_assumptions.with_changes(growth_rates=()))

    assert result.periods == ()
    assert math.isnan(result.implied_price)
    assert result.diag['error'] == 'empty_horizon'

  def test_deterministic(self, example_assumptions):
    """Repeated runs on the same snapshot are identical."""
    first = project(example_assumptions)
    second = project(example_assumptions)

    assert first == second
    assert first.implied_price == second.implied_price

  def test_monotonic_in_terminal_growth(self, example_assumptions):
    """Higher terminal growth below WACC raises the price."""
    prices = [
        project(example_assumptions.with_changes(
            terminal_growth_pct=g)).implied_price
        for g in (1.0, 2.0, 3.0, 4.0, 5.0)
    ]

    assert prices == sorted(prices)
    assert len(set(prices)) == len(prices)

  def test_monotonic_in_wacc(self, example_assumptions):
    """Higher WACC lowers the price."""
    prices = [
        project(example_assumptions.with_changes(
            discount_rate_pct=w)).implied_price
        for w in (8.0, 9.0, 10.0, 11.0, 12.0)
    ]

    assert prices == sorted(prices, reverse=True)
    assert len(set(prices)) == len(prices)

  def test_pv_sum_matches_periods(self, ten_year_assumptions):
    """pv_fcf_sum equals the sum of period PVs."""
    result = project(ten_year_assumptions)

    assert result.horizon == 10
    assert result.pv_fcf_sum == pytest.approx(
        sum(p.pv_fcf for p in result.periods), rel=1e-12)
    assert result.pv_fcf_sum == pytest.approx(
        present_value_sum(result.fcfs, 9.0), rel=1e-12)


class TestCompareTerminalMethods:
  """Tests for compare_terminal_methods function."""

  def test_both_methods(self, example_assumptions):
    results = compare_terminal_methods(example_assumptions)

    assert set(results) == set(TerminalMethod)
    assert results[TerminalMethod.GORDON].implied_price == pytest.approx(
        123.9585714, rel=1e-9)
    assert results[TerminalMethod.EXIT_MULTIPLE].implied_price == (
        pytest.approx(211.475, rel=1e-9))
    assert (results[TerminalMethod.GORDON].pv_fcf_sum ==
            results[TerminalMethod.EXIT_MULTIPLE].pv_fcf_sum)
