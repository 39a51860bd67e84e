"""
Tabular views of a valuation.

Every view is a pandas DataFrame so callers can print it with to_string()
or export it with to_csv(). Numeric frames (projection, sensitivity) keep
floats; display frames (bridge, metrics, bands) hold preformatted text.
"""

from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import SensitivityGrid
from dcfcalc.domain.types import SweepAxis
from dcfcalc.domain.types import TerminalMethod
from dcfcalc.domain.types import ValuationBand
from dcfcalc.domain.types import ValuationResult
from dcfcalc.report.formatting import fmt_money
from dcfcalc.report.formatting import fmt_multiple
from dcfcalc.report.formatting import fmt_number
from dcfcalc.report.formatting import fmt_percent
from dcfcalc.report.formatting import fmt_price
from dcfcalc.report.formatting import fmt_signed_percent

FAVORABLE_THRESHOLD = 0.65
UNFAVORABLE_THRESHOLD = 0.35

AXIS_LABELS = {
    SweepAxis.WACC: 'WACC',
    SweepAxis.TERMINAL_GROWTH: 'Terminal Growth',
}

# (label, ProjectedPeriod attribute)
PROJECTION_ROWS = (
    ('Revenue', 'revenue'),
    ('EBITDA', 'ebitda'),
    ('D&A', 'depreciation'),
    ('EBIT', 'ebit'),
    ('NOPAT', 'nopat'),
    ('CapEx', 'capex'),
    ('NWC Change', 'nwc_change'),
    ('Free Cash Flow', 'fcf'),
    ('Discount Factor', 'discount_factor'),
    ('PV of FCF', 'pv_fcf'),
)


def projection_frame(result: ValuationResult) -> pd.DataFrame:
  """
  Per-period projection, metrics as rows and projected years as columns.

  The NWC row is dropped when the projection did not model it.
  """
  rows = [(label, attr)
          for label, attr in PROJECTION_ROWS
          if attr != 'nwc_change' or result.diag.get('nwc_included', True)]
  data = [[getattr(p, attr) for p in result.periods] for _, attr in rows]
  df = pd.DataFrame(data,
                    index=[label for label, _ in rows],
                    columns=[p.year for p in result.periods],
                    dtype=float)
  df.index.name = 'Metric'
  df.columns.name = 'Year'
  return df


def render_projection(result: ValuationResult, symbol: str = '$') -> str:
  df = projection_frame(result)
  text = pd.DataFrame(
      {
          year: [
              fmt_number(v, 4)
              if label == 'Discount Factor' else fmt_money(v, symbol)
              for label, v in df[year].items()
          ] for year in df.columns
      },
      index=df.index)
  return text.to_string()


def valuation_bridge(assumptions: Assumptions,
                     result: ValuationResult) -> pd.DataFrame:
  """EV-to-price walk; market price and upside only when a price exists."""
  sym = assumptions.currency_symbol
  rows = [
      (f'PV of FCFs (Years 1-{result.horizon})',
       fmt_money(result.pv_fcf_sum, sym)),
      ('PV of Terminal Value', fmt_money(result.pv_terminal_value, sym)),
      ('Enterprise Value', fmt_money(result.enterprise_value, sym)),
      ('Less: Net Debt', f'({fmt_money(assumptions.net_debt, sym)})'),
      ('Equity Value', fmt_money(result.equity_value, sym)),
      ('Shares Outstanding',
       f'{fmt_number(assumptions.shares_outstanding, 0)}M'),
      ('Implied Share Price', fmt_price(result.implied_price, sym)),
  ]
  if result.upside_pct is not None:
    rows.append(('Current Market Price',
                 fmt_price(assumptions.current_price, sym)))
    rows.append(('Upside / (Downside)',
                 fmt_signed_percent(result.upside_pct)))
  return _text_frame(rows, 'Item')


def key_metrics(assumptions: Assumptions,
                result: ValuationResult) -> pd.DataFrame:
  sym = assumptions.currency_symbol
  if result.terminal_method is TerminalMethod.GORDON:
    terminal = ('Terminal Growth', fmt_percent(assumptions.terminal_growth_pct))
  else:
    terminal = ('Exit Multiple', fmt_multiple(assumptions.exit_multiple))
  rows = [
      ('WACC', fmt_percent(assumptions.discount_rate_pct)),
      terminal,
      ('Terminal Value', fmt_money(result.terminal_value, sym)),
      ('TV % of EV', fmt_percent(result.tv_percent_of_ev)),
      ('EBITDA Margin', fmt_percent(assumptions.ebitda_margin_pct)),
      (f'{result.horizon}yr Avg FCF', fmt_money(result.average_fcf, sym)),
  ]
  return _text_frame(rows, 'Metric')


def terminal_comparison(
    assumptions: Assumptions,
    results: Dict[TerminalMethod, ValuationResult],
) -> pd.DataFrame:
  """Side-by-side headline figures for each terminal method."""
  sym = assumptions.currency_symbol
  data = {}
  for method, result in results.items():
    data[TerminalMethod(method).value] = [
        fmt_money(result.terminal_value, sym),
        fmt_money(result.enterprise_value, sym),
        fmt_price(result.implied_price, sym),
        fmt_percent(result.tv_percent_of_ev),
        fmt_signed_percent(result.upside_pct),
    ]
  df = pd.DataFrame(data,
                    index=[
                        'Terminal Value', 'Enterprise Value',
                        'Implied Share Price', 'TV % of EV',
                        'Upside / (Downside)'
                    ])
  df.index.name = 'Metric'
  return df


def bands_frame(bands: List[ValuationBand], symbol: str = '$') -> pd.DataFrame:
  rows = [[fmt_price(b.low, symbol),
           fmt_price(b.point, symbol),
           fmt_price(b.high, symbol)] for b in bands]
  df = pd.DataFrame(rows,
                    index=[b.method for b in bands],
                    columns=['Low', 'Point', 'High'])
  df.index.name = 'Method'
  return df


def _text_frame(rows, index_name: str) -> pd.DataFrame:
  df = pd.DataFrame({'Value': [value for _, value in rows]},
                    index=[label for label, _ in rows])
  df.index.name = index_name
  return df


def sensitivity_frame(grid: SensitivityGrid) -> pd.DataFrame:
  """Implied prices, rows/columns labelled with the swept values in %."""
  df = pd.DataFrame(np.array(grid.values, dtype=float).reshape(grid.shape),
                    index=[fmt_percent(v) for v in grid.row_values],
                    columns=[fmt_percent(v) for v in grid.col_values])
  df.index.name = AXIS_LABELS[grid.row_axis]
  df.columns.name = AXIS_LABELS[grid.col_axis]
  return df


def heat_scale(grid: SensitivityGrid) -> pd.DataFrame:
  """
  Position of each cell between the grid's min and max finite values.

  t = (v - min) / (max - min), with a unit span when all finite values are
  equal. Non-finite cells get NaN.
  """
  values = np.array(grid.values, dtype=float).reshape(grid.shape)
  finite = np.isfinite(values)
  if not finite.any():
    scale = np.full(values.shape, np.nan)
  else:
    lo = values[finite].min()
    hi = values[finite].max()
    span = (hi - lo) or 1.0
    scale = np.where(finite, (values - lo) / span, np.nan)
  frame = sensitivity_frame(grid)
  return pd.DataFrame(scale, index=frame.index, columns=frame.columns)


def heat_class(t: float) -> str:
  if np.isnan(t):
    return 'missing'
  if t > FAVORABLE_THRESHOLD:
    return 'favorable'
  if t < UNFAVORABLE_THRESHOLD:
    return 'unfavorable'
  return 'neutral'


def heat_classes(grid: SensitivityGrid) -> pd.DataFrame:
  """Heat class per cell; the zero-delta cell is 'base'."""
  classes = heat_scale(grid).map(heat_class)
  base = grid.base_index
  if base is not None:
    classes.iloc[base[0], base[1]] = 'base'
  return classes


def render_sensitivity(grid: SensitivityGrid,
                       symbol: str = '$',
                       base_marker: str = '*') -> str:
  """Text grid of prices, the base cell suffixed with base_marker."""
  df = sensitivity_frame(grid)
  text = df.apply(lambda col: col.map(lambda v: fmt_price(v, symbol)))
  base: Optional[tuple] = grid.base_index
  if base is not None:
    text.iloc[base[0], base[1]] = text.iloc[base[0], base[1]] + base_marker
  return text.to_string()
