import math

import pytest

from dcfcalc.domain.types import SweepAxis
from dcfcalc.domain.types import TerminalMethod
from dcfcalc.engine.dcf import project
from dcfcalc.engine.sensitivity import sweep


class TestSweep:
  """Tests for the sensitivity sweep."""

  def test_default_schedule(self, example_assumptions):
    """Default 5x5 grid: WACC rows, terminal growth columns."""
    grid = sweep(example_assumptions)

    assert grid.shape == (5, 5)
    assert grid.row_axis is SweepAxis.WACC
    assert grid.col_axis is SweepAxis.TERMINAL_GROWTH
    assert grid.row_values == (8.0, 9.0, 10.0, 11.0, 12.0)
    assert grid.col_values == (2.0, 2.5, 3.0, 3.5, 4.0)
    assert grid.base_index == (2, 2)

  @pytest.mark.parametrize('method', list(TerminalMethod))
  def test_base_cell_equals_implied_price(self, example_assumptions, method):
    """Zero/zero cell reproduces the projection exactly."""
    a = example_assumptions.with_changes(terminal_method=method)
    grid = sweep(a)

    assert grid.base_value == project(a).implied_price

  def test_base_cell_with_given_base(self, ten_year_assumptions):
    """Passing the base projection gives the same grid."""
    base = project(ten_year_assumptions)

    assert (sweep(ten_year_assumptions,
                  base=base) == sweep(ten_year_assumptions))

  def test_each_cell_matches_full_projection(self, example_assumptions):
    """Every cell equals a full re-projection at that WACC and growth."""
    grid = sweep(example_assumptions)

    for i, wacc in enumerate(grid.row_values):
      for j, g in enumerate(grid.col_values):
        full = project(
            example_assumptions.with_changes(discount_rate_pct=wacc,
                                             terminal_growth_pct=g))
        assert grid.values[i][j] == pytest.approx(full.implied_price,
                                                  rel=1e-9)

  def test_monotonic_gordon(self, example_assumptions):
    """Price falls down the WACC rows and rises across growth columns."""
    grid = sweep(example_assumptions)

    for row in grid.values:
      assert list(row) == sorted(row)
    for j in range(5):
      column = [grid.values[i][j] for i in range(5)]
      assert column == sorted(column, reverse=True)

  def test_exit_multiple_ignores_terminal_growth(self, example_assumptions):
    """Under the exit multiple only WACC moves the price."""
    a = example_assumptions.with_changes(
        terminal_method=TerminalMethod.EXIT_MULTIPLE)
    grid = sweep(a)

    for row in grid.values:
      assert len(set(row)) == 1

  def test_swapped_axes(self, ten_year_assumptions):
    """Terminal growth on rows, WACC on columns."""
    grid = sweep(ten_year_assumptions,
                 row_deltas=[-0.5, -0.25, 0, 0.25, 0.5],
                 col_deltas=[-1, -0.5, 0, 0.5, 1],
                 row_axis=SweepAxis.TERMINAL_GROWTH)

    assert grid.row_axis is SweepAxis.TERMINAL_GROWTH
    assert grid.col_axis is SweepAxis.WACC
    assert grid.row_values == (2.0, 2.25, 2.5, 2.75, 3.0)
    assert grid.col_values == (8.0, 8.5, 9.0, 9.5, 10.0)
    assert grid.base_value == project(ten_year_assumptions).implied_price
    assert grid.values[4][0] == max(grid.flat())

  def test_order_preserved(self, example_assumptions):
    """Unsorted schedules keep their given order."""
    grid = sweep(example_assumptions, row_deltas=[1, -1, 0], col_deltas=[0])

    assert grid.row_values == (11.0, 9.0, 10.0)
    assert grid.base_index == (2, 0)

  def test_degenerate_cell(self, example_assumptions):
    """A cell with WACC equal to terminal growth is non-finite."""
    a = example_assumptions.with_changes(discount_rate_pct=5.0)
    grid = sweep(a)

    # WACC 3% row x growth 3% column
    assert math.isinf(grid.values[0][2])
    assert all(math.isfinite(v) for v in grid.values[2])
    assert len(grid.finite_values()) < 25

  def test_empty_schedule(self, example_assumptions):
    with pytest.raises(ValueError, match='row_deltas cannot be empty'):
      sweep(example_assumptions, row_deltas=[])
    with pytest.raises(ValueError, match='col_deltas cannot be empty'):
      sweep(example_assumptions, col_deltas=[])
