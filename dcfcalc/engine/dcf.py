"""
Pure DCF math engine.

This module contains pure functions for DCF calculations. No pandas, no I/O,
no logging, just numeric computations on an Assumptions snapshot.

None of these functions raise for numeric edge cases. Division follows IEEE
semantics (x/0 is +-inf, 0/0 is nan) and overflow becomes inf, so a
degenerate input shows up as a non-finite figure in the result.

Key functions:
  project: Main entry point, Assumptions -> ValuationResult
  project_periods: Period-by-period free cash flow projection
  compute_terminal_value: Gordon growth or exit multiple terminal value
  value_from_cash_flows: Discounting and aggregation stage, shared with the
    sensitivity sweep so the base cell reproduces project() exactly
"""

from collections.abc import Sequence
from math import copysign, inf, isclose, isfinite, isnan, nan
from typing import Any, Dict, List, Optional, Tuple

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import ProjectedPeriod
from dcfcalc.domain.types import TerminalMethod
from dcfcalc.domain.types import ValuationResult


def safe_divide(numerator: float, denominator: float) -> float:
  """Divide with IEEE semantics instead of raising ZeroDivisionError."""
  if denominator == 0:
    if numerator == 0 or isnan(numerator):
      return nan
    return copysign(inf, numerator) * copysign(1.0, denominator)
  return numerator / denominator


def compound(rate_pct: float, periods: int) -> float:
  """(1 + rate/100) ** periods, saturating to inf on overflow."""
  try:
    return (1.0 + rate_pct / 100.0)**periods
  except OverflowError:
    return inf


def discount_factor(rate_pct: float, period: int) -> float:
  """Present value of 1 received at the end of the given period."""
  return safe_divide(1.0, compound(rate_pct, period))


def project_periods(assumptions: Assumptions) -> List[ProjectedPeriod]:
  """
  Project free cash flows period by period.

  Revenue compounds from the previous period, so the loop is strictly
  sequential. Discount factors use the assumptions' WACC.

  Args:
    assumptions: Valuation inputs

  Returns:
    One ProjectedPeriod per growth rate, in order
  """
  nwc_pct = assumptions.nwc_change_pct or 0.0
  tax_keep = 1.0 - assumptions.tax_rate_pct / 100.0
  periods = []
  revenue = assumptions.base_revenue

  for t, g in enumerate(assumptions.growth_rates, start=1):
    revenue *= (1.0 + g / 100.0)
    ebitda = revenue * assumptions.ebitda_margin_pct / 100.0
    da = revenue * assumptions.depreciation_pct / 100.0
    ebit = ebitda - da
    nopat = ebit * tax_keep
    capex = revenue * assumptions.capex_pct / 100.0
    nwc = revenue * nwc_pct / 100.0
    fcf = nopat + da - capex - nwc
    df = discount_factor(assumptions.discount_rate_pct, t)
    periods.append(
        ProjectedPeriod(
            index=t,
            year=assumptions.base_year + t,
            revenue=revenue,
            ebitda=ebitda,
            depreciation=da,
            ebit=ebit,
            nopat=nopat,
            capex=capex,
            nwc_change=nwc,
            fcf=fcf,
            discount_factor=df,
            pv_fcf=fcf * df,
        ))

  return periods


def gordon_terminal_value(
    final_fcf: float,
    g_terminal_pct: float,
    discount_rate_pct: float,
) -> float:
  """
  Undiscounted terminal value using the Gordon Growth Model.

  Returns a non-finite value when the discount rate equals terminal
  growth. A discount rate below terminal growth gives the raw (negative)
  formula value.
  """
  return safe_divide(final_fcf * (1.0 + g_terminal_pct / 100.0),
                     (discount_rate_pct - g_terminal_pct) / 100.0)


def exit_multiple_terminal_value(final_ebitda: float, multiple: float) -> float:
  """Undiscounted terminal value as a multiple of final-year EBITDA."""
  return final_ebitda * multiple


def compute_terminal_value(
    method: TerminalMethod,
    final_fcf: float,
    final_ebitda: float,
    discount_rate_pct: float,
    g_terminal_pct: float,
    exit_multiple: float,
) -> float:
  """Undiscounted terminal value for the selected method."""
  if method is TerminalMethod.EXIT_MULTIPLE:
    return exit_multiple_terminal_value(final_ebitda, exit_multiple)
  return gordon_terminal_value(final_fcf, g_terminal_pct, discount_rate_pct)


def terminal_warning(
    method: TerminalMethod,
    discount_rate_pct: float,
    g_terminal_pct: float,
) -> Optional[str]:
  """Describe a Gordon denominator at or below zero, None when sound."""
  if method is not TerminalMethod.GORDON:
    return None
  spread = discount_rate_pct - g_terminal_pct
  if isclose(spread, 0.0, abs_tol=1e-12):
    return 'wacc_equals_terminal_growth'
  if spread < 0:
    return 'wacc_below_terminal_growth'
  return None


def present_value_sum(fcfs: Sequence[float], discount_rate_pct: float) -> float:
  """Sum of discounted cash flows, the first one received at period 1."""
  total = 0.0
  for t, fcf in enumerate(fcfs, start=1):
    total += fcf * discount_factor(discount_rate_pct, t)
  return total


def value_from_cash_flows(
    fcfs: Sequence[float],
    final_ebitda: float,
    assumptions: Assumptions,
    discount_rate_pct: float,
    g_terminal_pct: float,
) -> Tuple[float, float, float, float, float, float]:
  """
  Discount projected cash flows and derive per-share value.

  Only the discount rate and terminal growth are taken as arguments, all
  other inputs come from the assumptions. project() and the sensitivity
  sweep both go through here.

  Args:
    fcfs: Undiscounted free cash flows, period order
    final_ebitda: EBITDA of the last projected period
    assumptions: Valuation inputs (method, multiple, net debt, shares)
    discount_rate_pct: WACC to apply
    g_terminal_pct: Terminal growth to apply

  Returns:
    Tuple of (pv_fcf_sum, tv, pv_tv, ev, equity, implied_price)
  """
  n_years = len(fcfs)
  if n_years < 1:
    return 0.0, nan, nan, nan, nan, nan

  pv_fcf_sum = present_value_sum(fcfs, discount_rate_pct)
  tv = compute_terminal_value(
      assumptions.terminal_method,
      final_fcf=fcfs[-1],
      final_ebitda=final_ebitda,
      discount_rate_pct=discount_rate_pct,
      g_terminal_pct=g_terminal_pct,
      exit_multiple=assumptions.exit_multiple,
  )
  pv_tv = safe_divide(tv, compound(discount_rate_pct, n_years))
  ev = pv_fcf_sum + pv_tv
  equity = ev - assumptions.net_debt
  implied_price = safe_divide(equity, assumptions.shares_outstanding)
  return pv_fcf_sum, tv, pv_tv, ev, equity, implied_price


def compute_upside(implied_price: float,
                   current_price: float) -> Optional[float]:
  """Percent upside vs. market, None when no positive price is known."""
  if not current_price > 0:
    return None
  return (implied_price / current_price - 1.0) * 100.0


def project(assumptions: Assumptions) -> ValuationResult:
  """
  Run the full DCF valuation.

  Stage 1: Explicit projection of free cash flows over the horizon
  Stage 2: Terminal value (Gordon growth or exit multiple)
  Stage 3: EV -> equity value -> implied price, upside vs. market

  Args:
    assumptions: Valuation inputs

  Returns:
    ValuationResult; degenerate inputs yield non-finite figures
  """
  periods = project_periods(assumptions)
  fcfs = [p.fcf for p in periods]
  final_ebitda = periods[-1].ebitda if periods else nan

  pv_fcf_sum, tv, pv_tv, ev, equity, implied_price = value_from_cash_flows(
      fcfs,
      final_ebitda,
      assumptions,
      discount_rate_pct=assumptions.discount_rate_pct,
      g_terminal_pct=assumptions.terminal_growth_pct,
  )

  diag: Dict[str, Any] = {
      'terminal_method': assumptions.terminal_method.value,
      'discount_rate_pct': assumptions.discount_rate_pct,
      'horizon': len(periods),
      'nwc_included': assumptions.nwc_change_pct is not None,
  }
  if assumptions.terminal_method is TerminalMethod.GORDON:
    diag['terminal_growth_pct'] = assumptions.terminal_growth_pct
  else:
    diag['exit_multiple'] = assumptions.exit_multiple

  warning = terminal_warning(assumptions.terminal_method,
                             assumptions.discount_rate_pct,
                             assumptions.terminal_growth_pct)
  if warning:
    diag['terminal_warning'] = warning
  if not periods:
    diag['error'] = 'empty_horizon'
  if not isfinite(implied_price):
    diag['non_finite'] = True

  return ValuationResult(
      periods=tuple(periods),
      pv_fcf_sum=pv_fcf_sum,
      terminal_value=tv,
      pv_terminal_value=pv_tv,
      enterprise_value=ev,
      equity_value=equity,
      implied_price=implied_price,
      tv_percent_of_ev=safe_divide(pv_tv, ev) * 100.0,
      upside_pct=compute_upside(implied_price, assumptions.current_price),
      terminal_method=assumptions.terminal_method,
      diag=diag,
  )


def compare_terminal_methods(
    assumptions: Assumptions) -> Dict[TerminalMethod, ValuationResult]:
  """Project the same assumptions under every terminal method."""
  return {
      method: project(assumptions.with_changes(terminal_method=method))
      for method in TerminalMethod
  }
