"""
Sensitivity analysis for DCF valuation.

This module provides tools to generate 2D sensitivity tables that show
how the implied share price varies across discount rates and terminal
growth rates around a company's base case.

CLI Usage:
  python -m dcfcalc.analysis.sensitivity \\
      --ticker MSFT \\
      --row-deltas=-2,-1,0,1,2 \\
      --col-deltas=-1,-0.5,0,0.5,1
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import SensitivityGrid
from dcfcalc.engine.dcf import project
from dcfcalc.engine.sensitivity import sweep
from dcfcalc.report.formatting import fmt_percent
from dcfcalc.report.formatting import fmt_price
from dcfcalc.report.tables import heat_classes
from dcfcalc.report.tables import sensitivity_frame
from dcfcalc.run import load_assumptions
from dcfcalc.scenarios.config import VariantConfig
from dcfcalc.scenarios.registry import create_variant
from dcfcalc.scenarios.registry import list_variants
from dcfcalc.scenarios.registry import row_axis

logger = logging.getLogger(__name__)


class SensitivityTableBuilder:
  """
  Build 2D sensitivity tables of implied share price.

  Free cash flows are projected once; each cell re-discounts them at the
  cell's WACC and terminal growth. All other assumptions stay fixed.
  """

  def __init__(
      self,
      assumptions: Assumptions,
      config: Optional[VariantConfig] = None,
  ):
    """
    Initialize sensitivity table builder.

    Args:
        assumptions: Base valuation inputs
        config: Variant supplying the row axis and default schedules
    """
    self.assumptions = assumptions
    self.config = config or VariantConfig.default()
    self.base = project(assumptions)
    self.grid: Optional[SensitivityGrid] = None

    logger.info('Initialized SensitivityTableBuilder')
    logger.info('  Base WACC: %s', fmt_percent(assumptions.discount_rate_pct))
    logger.info('  Terminal growth: %s',
                fmt_percent(assumptions.terminal_growth_pct))
    logger.info('  Terminal method: %s', assumptions.terminal_method.value)
    logger.info('  Implied price: %s',
                fmt_price(self.base.implied_price,
                          assumptions.currency_symbol))

  def build(
      self,
      row_deltas: Optional[Sequence[float]] = None,
      col_deltas: Optional[Sequence[float]] = None,
  ) -> pd.DataFrame:
    """
    Build 2D sensitivity table.

    Args:
        row_deltas: Row offsets in percentage points (default: variant's)
        col_deltas: Column offsets in percentage points (default: variant's)

    Returns:
        DataFrame with the row axis values as index, the column axis values
        as columns, and implied prices per share as cell values
    """
    if row_deltas is None:
      row_deltas = self.config.row_deltas
    if col_deltas is None:
      col_deltas = self.config.col_deltas

    logger.info('Building sensitivity table: %d x %d', len(row_deltas),
                len(col_deltas))

    self.grid = sweep(self.assumptions,
                      row_deltas=row_deltas,
                      col_deltas=col_deltas,
                      row_axis=row_axis(self.config),
                      base=self.base)

    non_finite = len(self.grid.flat()) - len(self.grid.finite_values())
    if non_finite:
      logger.warning('%d cells are not finite (WACC at or below growth)',
                     non_finite)

    logger.info('Sensitivity table built successfully')
    return sensitivity_frame(self.grid)

  def heat_map(self) -> pd.DataFrame:
    """Heat class per cell of the last built table."""
    if self.grid is None:
      raise ValueError('build() must be called first')
    return heat_classes(self.grid)


def _parse_float_list(s: str) -> list[float]:
  """Parse comma-separated float list."""
  return [float(x.strip()) for x in s.split(',')]


def main() -> None:
  """CLI entrypoint for sensitivity analysis."""
  parser = argparse.ArgumentParser(
      description='DCF Sensitivity Analysis',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  # Variant default schedules
  python -m dcfcalc.analysis.sensitivity --ticker AAPL

  # Custom schedules (percentage points around the base case)
  python -m dcfcalc.analysis.sensitivity \\
      --ticker MSFT --row-deltas=-3,-1.5,0,1.5,3 --col-deltas=-1,0,1

  # Ten-year variant, saved to CSV
  python -m dcfcalc.analysis.sensitivity \\
      --ticker RELIANCE --variant ten_year --output reliance.csv
      """)

  parser.add_argument('--ticker',
                      type=str,
                      required=True,
                      help='Ticker symbol (e.g., AAPL, MSFT)')

  parser.add_argument('--variant',
                      type=str,
                      default='tabbed_5y',
                      choices=list_variants(),
                      help='Calculator variant')

  parser.add_argument('--live',
                      action='store_true',
                      help='Look up company data before using demo data')

  parser.add_argument('--row-deltas',
                      type=str,
                      help='Comma-separated row offsets (e.g., -1,0,1)')

  parser.add_argument('--col-deltas',
                      type=str,
                      help='Comma-separated column offsets (e.g., -0.5,0,0.5)')

  parser.add_argument('--output', type=Path, help='Output CSV path (optional)')

  parser.add_argument('--verbose',
                      '-v',
                      action='store_true',
                      help='Verbose output')

  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  config = create_variant(args.variant)
  logger.info('Using variant: %s', config.name)

  assumptions, _ = load_assumptions(args.ticker, config, live=args.live)

  row_deltas = (_parse_float_list(args.row_deltas)
                if args.row_deltas else None)
  col_deltas = (_parse_float_list(args.col_deltas)
                if args.col_deltas else None)

  builder = SensitivityTableBuilder(assumptions, config)

  logger.info('Building sensitivity table...')
  table = builder.build(row_deltas=row_deltas, col_deltas=col_deltas)

  sym = assumptions.currency_symbol
  print('\n' + '=' * 80)
  print(f'Sensitivity Analysis: {assumptions.company_name} '
        f'({assumptions.ticker})')
  print('=' * 80)
  print(f'\nVariant: {config.name}')
  print(f'WACC: {fmt_percent(assumptions.discount_rate_pct)}')
  print(f'Terminal Growth: {fmt_percent(assumptions.terminal_growth_pct)}')
  print(f'Horizon: {assumptions.horizon} years')
  print('\n' + '=' * 80)
  print(f'Implied Price per Share ({sym})')
  print('=' * 80)
  print(table.to_string(float_format=lambda x: fmt_price(x, sym)))
  print('=' * 80 + '\n')

  if args.output:
    table.to_csv(args.output)
    logger.info('Saved to: %s', args.output)


if __name__ == '__main__':
  main()
