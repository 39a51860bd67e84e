"""
Two-axis sensitivity sweep.

Re-values the base projection over a grid of discount-rate and
terminal-growth perturbations. Free cash flows do not depend on either
swept variable, so they are projected once and only the discounting and
terminal-value stage is repeated per cell.
"""

from collections.abc import Sequence
from math import nan
from typing import Optional

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import SensitivityGrid
from dcfcalc.domain.types import SweepAxis
from dcfcalc.domain.types import ValuationResult
from dcfcalc.engine.dcf import project
from dcfcalc.engine.dcf import value_from_cash_flows

WACC_DELTAS = (-2.0, -1.0, 0.0, 1.0, 2.0)
TERMINAL_GROWTH_DELTAS = (-1.0, -0.5, 0.0, 0.5, 1.0)


def _axis_base(assumptions: Assumptions, axis: SweepAxis) -> float:
  if axis is SweepAxis.WACC:
    return assumptions.discount_rate_pct
  return assumptions.terminal_growth_pct


def sweep(
    assumptions: Assumptions,
    row_deltas: Sequence[float] = WACC_DELTAS,
    col_deltas: Sequence[float] = TERMINAL_GROWTH_DELTAS,
    row_axis: SweepAxis = SweepAxis.WACC,
    base: Optional[ValuationResult] = None,
) -> SensitivityGrid:
  """
  Build a grid of implied share prices.

  Args:
    assumptions: Base valuation inputs
    row_deltas: Percentage-point offsets applied to the row axis
    col_deltas: Percentage-point offsets applied to the other axis
    row_axis: Assumption swept along rows (WACC or terminal growth)
    base: Base projection of these assumptions, projected here if omitted

  Returns:
    SensitivityGrid with rows and columns in schedule order

  Raises:
    ValueError: If either schedule is empty
  """
  if not row_deltas:
    raise ValueError('row_deltas cannot be empty')
  if not col_deltas:
    raise ValueError('col_deltas cannot be empty')

  row_axis = SweepAxis(row_axis)
  col_axis = (SweepAxis.TERMINAL_GROWTH
              if row_axis is SweepAxis.WACC else SweepAxis.WACC)

  if base is None:
    base = project(assumptions)
  fcfs = base.fcfs
  final_ebitda = base.last_period.ebitda if base.last_period else nan

  row_base = _axis_base(assumptions, row_axis)
  col_base = _axis_base(assumptions, col_axis)
  row_values = tuple(row_base + d for d in row_deltas)
  col_values = tuple(col_base + d for d in col_deltas)

  rows = []
  for row_value in row_values:
    cells = []
    for col_value in col_values:
      if row_axis is SweepAxis.WACC:
        wacc, g_terminal = row_value, col_value
      else:
        wacc, g_terminal = col_value, row_value
      *_, implied_price = value_from_cash_flows(
          fcfs,
          final_ebitda,
          assumptions,
          discount_rate_pct=wacc,
          g_terminal_pct=g_terminal,
      )
      cells.append(implied_price)
    rows.append(tuple(cells))

  return SensitivityGrid(
      values=tuple(rows),
      row_axis=row_axis,
      col_axis=col_axis,
      row_deltas=tuple(row_deltas),
      col_deltas=tuple(col_deltas),
      row_values=row_values,
      col_values=col_values,
  )
