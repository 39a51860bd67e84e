'''
Single-company valuation entrypoint.

This module provides the main entry point for running valuations. It:
1. Loads company assumptions (live lookup or built-in demo profile)
2. Applies overrides and the variant configuration
3. Runs the projection, sensitivity sweep and alternate methods
4. Returns a ValuationReport with full diagnostics

Usage:
  from dcfcalc.run import run_valuation
  from dcfcalc.scenarios.config import VariantConfig

  report = run_valuation(ticker='AAPL', config=VariantConfig.tabbed_5y())
  print(f"Implied price: ${report.result.implied_price:.2f}")

CLI:
  python -m dcfcalc.run --ticker AAPL
  python -m dcfcalc.run --ticker MSFT --variant ten_year --plot msft.png
'''

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dcfcalc.analysis.football_field import plot_football_field
from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import SensitivityGrid
from dcfcalc.domain.types import TerminalMethod
from dcfcalc.domain.types import ValuationBand
from dcfcalc.domain.types import ValuationResult
from dcfcalc.engine.dcf import compare_terminal_methods
from dcfcalc.engine.dcf import project
from dcfcalc.engine.multiples import football_field
from dcfcalc.engine.sensitivity import sweep
from dcfcalc.inputs.fetcher import CompanyDataFetcher
from dcfcalc.inputs.profiles import LoadStatus
from dcfcalc.inputs.profiles import merge_outcome
from dcfcalc.inputs.profiles import Unavailable
from dcfcalc.report.tables import bands_frame
from dcfcalc.report.tables import key_metrics
from dcfcalc.report.tables import render_projection
from dcfcalc.report.tables import render_sensitivity
from dcfcalc.report.tables import terminal_comparison
from dcfcalc.report.tables import valuation_bridge
from dcfcalc.scenarios.config import VariantConfig
from dcfcalc.scenarios.registry import create_variant
from dcfcalc.scenarios.registry import list_variants
from dcfcalc.scenarios.registry import row_axis

logger = logging.getLogger(__name__)

OFFLINE_REASON = 'offline mode'


@dataclass(frozen=True)
class ValuationReport:
  '''
  Everything computed for one company.

  Attributes:
    assumptions: Inputs the valuation ran on
    result: Base projection
    grid: Sensitivity grid around the base case
    status: How the assumptions were loaded
    bands: Football-field bands (variants with alternate methods)
    comparison: Result per terminal method (variants comparing methods)
  '''
  assumptions: Assumptions
  result: ValuationResult
  grid: SensitivityGrid
  status: Optional[LoadStatus] = None
  bands: Optional[List[ValuationBand]] = None
  comparison: Optional[Dict[TerminalMethod, ValuationResult]] = None


def load_assumptions(
    ticker: str,
    config: VariantConfig,
    live: bool = False,
    fetcher: Optional[CompanyDataFetcher] = None,
) -> Tuple[Assumptions, LoadStatus]:
  '''
  Assumptions for a ticker, from a live lookup or the demo table.

  Args:
    ticker: Company ticker
    config: Variant the assumptions are built for
    live: Whether to attempt the live lookup
    fetcher: Fetcher to use (default: one configured from the environment)

  Returns:
    Tuple of (assumptions, status)
  '''
  if live:
    fetcher = fetcher or CompanyDataFetcher()
    outcome = fetcher.fetch(ticker)
  else:
    outcome = Unavailable(OFFLINE_REASON)

  assumptions, status = merge_outcome(outcome, ticker, config)
  if status.ok:
    logger.info(status.message)
  elif live:
    logger.warning(status.message)
  else:
    logger.info('Loaded demo data for %s', assumptions.ticker)
  return assumptions, status


def apply_overrides(
    assumptions: Assumptions,
    terminal_method: Optional[str] = None,
    wacc: Optional[float] = None,
    terminal_growth: Optional[float] = None,
    exit_multiple: Optional[float] = None,
) -> Assumptions:
  '''Replace selected assumptions; None keeps the loaded value.'''
  changes = {
      'terminal_method': terminal_method,
      'discount_rate_pct': wacc,
      'terminal_growth_pct': terminal_growth,
      'exit_multiple': exit_multiple,
  }
  changes = {k: v for k, v in changes.items() if v is not None}
  if not changes:
    return assumptions
  logger.debug('Overrides: %s', changes)
  return assumptions.with_changes(**changes)


def _log_diagnostics(label: str, result: ValuationResult) -> None:
  warning = result.diag.get('terminal_warning')
  if warning:
    logger.warning('%s: terminal value is degenerate (%s)', label, warning)
  if result.diag.get('error'):
    logger.warning('%s: %s', label, result.diag['error'])
  elif not result.is_finite:
    logger.warning('%s: valuation is not finite', label)


def value_assumptions(
    assumptions: Assumptions,
    config: Optional[VariantConfig] = None,
    status: Optional[LoadStatus] = None,
) -> ValuationReport:
  '''
  Run every computation the variant asks for on one assumption set.

  Args:
    assumptions: Valuation inputs
    config: VariantConfig (default: VariantConfig.default())
    status: Load status to carry into the report

  Returns:
    ValuationReport
  '''
  if config is None:
    config = VariantConfig.default()

  result = project(assumptions)
  _log_diagnostics(assumptions.ticker or 'valuation', result)

  grid = sweep(assumptions,
               row_deltas=config.row_deltas,
               col_deltas=config.col_deltas,
               row_axis=row_axis(config),
               base=result)
  non_finite = len(grid.flat()) - len(grid.finite_values())
  if non_finite:
    logger.warning('%d sensitivity cells are not finite', non_finite)

  bands = None
  if config.alternate_methods:
    bands = football_field(assumptions, result, grid)

  comparison = None
  if config.compare_terminal:
    comparison = compare_terminal_methods(assumptions)
    for method, other in comparison.items():
      if method is not result.terminal_method:
        _log_diagnostics(f'{method.value} method', other)

  return ValuationReport(assumptions=assumptions,
                         result=result,
                         grid=grid,
                         status=status,
                         bands=bands,
                         comparison=comparison)


def run_valuation(
    ticker: str,
    config: Optional[VariantConfig] = None,
    live: bool = False,
    fetcher: Optional[CompanyDataFetcher] = None,
    **overrides,
) -> ValuationReport:
  '''
  Load assumptions for a ticker and value them.

  Args:
    ticker: Company ticker symbol (e.g., 'AAPL', 'RELIANCE.NS')
    config: VariantConfig (default: VariantConfig.default())
    live: Whether to attempt the live lookup before the demo table
    fetcher: Fetcher for the live lookup
    **overrides: Keyword overrides accepted by apply_overrides()

  Returns:
    ValuationReport
  '''
  if config is None:
    config = VariantConfig.default()

  assumptions, status = load_assumptions(ticker, config, live, fetcher)
  assumptions = apply_overrides(assumptions, **overrides)
  return value_assumptions(assumptions, config, status)


def log_report(report: ValuationReport, config: VariantConfig) -> None:
  a = report.assumptions
  sym = a.currency_symbol
  separator = '=' * 70

  logger.info('\n%s', separator)
  logger.info('DCF Valuation - %s (%s)', a.company_name, a.ticker)
  logger.info('Variant: %s | %s millions', config.name, a.currency)
  logger.info(separator)

  logger.info('\nProjections:\n%s', render_projection(report.result, sym))
  logger.info('\nValuation Bridge:\n%s',
              valuation_bridge(a, report.result).to_string())
  logger.info('\nKey Metrics:\n%s', key_metrics(a, report.result).to_string())
  if report.comparison:
    logger.info('\nTerminal Methods:\n%s',
                terminal_comparison(a, report.comparison).to_string())
  logger.info('\nSensitivity (implied price, * = base case):\n%s',
              render_sensitivity(report.grid, sym))
  if report.bands:
    logger.info('\nValuation Ranges:\n%s',
                bands_frame(report.bands, sym).to_string())

  logger.info('%s\n', separator)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Run DCF valuation')
  parser.add_argument('--ticker',
                      type=str,
                      required=True,
                      help='Company ticker')
  parser.add_argument('--variant',
                      type=str,
                      default='tabbed_5y',
                      choices=list_variants(),
                      help='Calculator variant')
  parser.add_argument('--live',
                      action='store_true',
                      help='Look up company data before using demo data')
  parser.add_argument('--terminal-method',
                      type=str,
                      choices=[m.value for m in TerminalMethod],
                      help='Terminal value method')
  parser.add_argument('--wacc', type=float, help='WACC in percent')
  parser.add_argument('--terminal-growth',
                      type=float,
                      help='Terminal growth in percent')
  parser.add_argument('--exit-multiple',
                      type=float,
                      help='EV/EBITDA exit multiple')
  parser.add_argument('--plot',
                      type=Path,
                      help='Save a football-field chart to this path')
  parser.add_argument('--verbose',
                      '-v',
                      action='store_true',
                      help='Verbose output')
  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(message)s',
  )

  config = create_variant(args.variant)
  report = run_valuation(
      ticker=args.ticker,
      config=config,
      live=args.live,
      terminal_method=args.terminal_method,
      wacc=args.wacc,
      terminal_growth=args.terminal_growth,
      exit_multiple=args.exit_multiple,
  )
  log_report(report, config)

  if args.plot:
    bands = report.bands or football_field(report.assumptions, report.result,
                                           report.grid)
    plot_football_field(bands,
                        args.plot,
                        title=f'{report.assumptions.ticker} - Valuation Range',
                        current_price=report.assumptions.current_price,
                        symbol=report.assumptions.currency_symbol)


if __name__ == '__main__':
  main()
