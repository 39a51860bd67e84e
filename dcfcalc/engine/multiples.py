"""
Alternate valuation methods.

Cross-checks for the DCF: an EV/EBITDA multiple on a projected year's
EBITDA and a P/E multiple on supplied EPS. football_field() bands all
methods for side-by-side display.
"""

from math import isfinite, nan
from typing import List, Optional

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import PolicyOutput
from dcfcalc.domain.types import SensitivityGrid
from dcfcalc.domain.types import ValuationBand
from dcfcalc.domain.types import ValuationResult
from dcfcalc.engine.dcf import safe_divide

EV_EBITDA_PERIOD = 5


def ev_ebitda_value(
    result: ValuationResult,
    assumptions: Assumptions,
    multiple: Optional[float] = None,
    period: int = EV_EBITDA_PERIOD,
) -> PolicyOutput[float]:
  """
  Per-share value from an EV/EBITDA multiple.

  value = (EBITDA[period] * multiple - net_debt) / shares

  Args:
    result: Projection supplying EBITDA
    assumptions: Source of net debt, shares and the default multiple
    multiple: EV/EBITDA multiple (default: assumptions.exit_multiple)
    period: 1-based projected period whose EBITDA is used; capped at the
      horizon

  Returns:
    PolicyOutput with the implied value per share
  """
  if multiple is None:
    multiple = assumptions.exit_multiple
  if not result.periods:
    return PolicyOutput(value=nan,
                        diag={
                            'method': 'ev_ebitda',
                            'error': 'empty_horizon',
                        })

  used_period = max(1, min(period, result.horizon))
  ebitda = result.periods[used_period - 1].ebitda
  value = safe_divide(ebitda * multiple - assumptions.net_debt,
                      assumptions.shares_outstanding)
  return PolicyOutput(value=value,
                      diag={
                          'method': 'ev_ebitda',
                          'multiple': multiple,
                          'ebitda_period': used_period,
                          'ebitda': ebitda,
                      })


def pe_value(earnings_per_share: Optional[float],
             pe_multiple: float) -> PolicyOutput[float]:
  """Per-share value from a P/E multiple, NaN when EPS is unknown."""
  if earnings_per_share is None:
    return PolicyOutput(value=nan,
                        diag={
                            'method': 'pe',
                            'error': 'missing_eps',
                        })
  return PolicyOutput(value=earnings_per_share * pe_multiple,
                      diag={
                          'method': 'pe',
                          'pe_multiple': pe_multiple,
                          'eps': earnings_per_share,
                      })


def _band(method: str, values: List[float], point: float) -> ValuationBand:
  finite = [v for v in values if isfinite(v)]
  if not finite:
    return ValuationBand(method=method, low=nan, high=nan, point=point)
  return ValuationBand(method=method,
                       low=min(finite),
                       high=max(finite),
                       point=point)


def football_field(
    assumptions: Assumptions,
    result: ValuationResult,
    grid: SensitivityGrid,
    multiple_spread: float = 2.0,
) -> List[ValuationBand]:
  """
  Value ranges per method for comparative display.

  The DCF band spans the finite cells of the sensitivity grid. Multiple
  bands apply +-multiple_spread turns around each multiple. The P/E band
  is omitted when no EPS is available.

  Args:
    assumptions: Valuation inputs
    result: Base projection
    grid: Sensitivity grid of the same assumptions
    multiple_spread: Turns of multiple added/subtracted for the range

  Returns:
    List of ValuationBand, DCF first
  """
  bands = [
      _band('DCF', grid.finite_values() + [result.implied_price],
            result.implied_price)
  ]

  multiple = assumptions.exit_multiple
  ev_values = [
      ev_ebitda_value(result, assumptions, multiple=m).value
      for m in (multiple - multiple_spread, multiple, multiple + multiple_spread)
  ]
  bands.append(_band('EV/EBITDA', ev_values, ev_values[1]))

  if assumptions.earnings_per_share is not None:
    pe = assumptions.pe_multiple
    pe_values = [
        pe_value(assumptions.earnings_per_share, m).value
        for m in (pe - multiple_spread, pe, pe + multiple_spread)
    ]
    bands.append(_band('P/E', pe_values, pe_values[1]))

  return bands
