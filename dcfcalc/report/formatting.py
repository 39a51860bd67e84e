'''
Display formatting for valuation figures.

Currency amounts in Assumptions and ValuationResult are in millions; the
money formatter scales them back to units and picks a T/B/M suffix. Any
None or non-finite value renders as PLACEHOLDER.
'''

from math import isfinite
from typing import Optional

PLACEHOLDER = '—'
MILLIONS = 1e6


def _missing(value: Optional[float]) -> bool:
  return value is None or not isfinite(value)


def fmt_number(value: Optional[float], decimals: int = 1) -> str:
  '''Thousands-separated number with a fixed number of decimals.'''
  if _missing(value):
    return PLACEHOLDER
  return f'{value:,.{decimals}f}'


def fmt_money(value: Optional[float],
              symbol: str = '$',
              unit_scale: float = MILLIONS) -> str:
  '''
  Scaled currency amount, e.g. 1234.5 (millions) -> '$1.2B'.

  Args:
    value: Amount in units of unit_scale
    symbol: Currency symbol
    unit_scale: Size of one input unit (1e6 for millions)
  '''
  if _missing(value):
    return PLACEHOLDER
  amount = abs(value * unit_scale)
  sign = '-' if value < 0 else ''
  if amount >= 1e12:
    text = f'{fmt_number(amount / 1e12, 2)}T'
  elif amount >= 1e9:
    text = f'{fmt_number(amount / 1e9, 1)}B'
  elif amount >= 1e6:
    text = f'{fmt_number(amount / 1e6, 0)}M'
  else:
    text = fmt_number(amount, 0)
  return f'{sign}{symbol}{text}'


def fmt_price(value: Optional[float], symbol: str = '$') -> str:
  if _missing(value):
    return PLACEHOLDER
  return f'{symbol}{fmt_number(value, 2)}'


def fmt_percent(value: Optional[float], decimals: int = 1) -> str:
  if _missing(value):
    return PLACEHOLDER
  return f'{fmt_number(value, decimals)}%'


def fmt_signed_percent(value: Optional[float], decimals: int = 1) -> str:
  '''Percent with an explicit '+' for non-negative values (upside).'''
  if _missing(value):
    return PLACEHOLDER
  sign = '+' if value >= 0 else ''
  return f'{sign}{fmt_number(value, decimals)}%'


def fmt_multiple(value: Optional[float]) -> str:
  if _missing(value):
    return PLACEHOLDER
  return f'{fmt_number(value, 1)}x'
