'''
Revenue growth schedule policies.

These policies turn the growth inputs a variant exposes (one rate per year,
a high/low pair, or a single last-known rate) into the per-period growth
sequence [g1, g2, ..., gN] consumed by the projection engine.

All rates are percentages.
'''

from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from math import isfinite
from typing import List, Sequence

from dcfcalc.domain.types import PolicyOutput

DECAY_FACTORS = (1.0, 0.88, 0.78, 0.70, 0.64)


def round_half_up(value: float, decimals: int = 1) -> float:
  '''Round with ties away from zero, on the shortest decimal repr.'''
  if not isfinite(value):
    return value
  quantum = Decimal(1).scaleb(-decimals)
  return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class GrowthPolicy(ABC):
  '''
  Base class for growth schedule policies.

  Subclasses implement compute() to return the full sequence of growth rates
  for the explicit forecast period.
  '''

  @abstractmethod
  def compute(self, n_years: int) -> PolicyOutput[List[float]]:
    '''
    Compute growth rate sequence for explicit forecast period.

    Args:
      n_years: Number of explicit forecast years

    Returns:
      PolicyOutput with list of growth rates [g_year1, ..., g_yearN]
    '''


class PerPeriodGrowth(GrowthPolicy):
  '''
  Explicit rate for every year.

  Short lists are padded with their last rate, long lists truncated.
  '''

  def __init__(self, rates: Sequence[float]):
    self.rates = [float(r) for r in rates]

  def compute(self, n_years: int) -> PolicyOutput[List[float]]:
    if n_years < 1:
      return PolicyOutput(value=[], diag={'growth_method': 'per_period'})

    rates = self.rates[:n_years]
    padded = n_years - len(rates)
    if padded > 0:
      fill = rates[-1] if rates else 0.0
      rates = rates + [fill] * padded

    return PolicyOutput(value=rates,
                        diag={
                            'growth_method': 'per_period',
                            'padded_years': max(padded, 0),
                            'truncated_years': max(-padded, 0),
                        })


class TwoPhaseGrowth(GrowthPolicy):
  '''
  High growth for the first years, low growth afterwards.

  Growth stays at high_pct for high_growth_years, then at low_pct for
  the remaining years.
  '''

  def __init__(self,
               high_pct: float,
               low_pct: float,
               high_growth_years: int = 5):
    '''
    Initialize two-phase policy.

    Args:
      high_pct: Growth in the first phase
      low_pct: Growth in the second phase
      high_growth_years: Length of the first phase (default: 5)
    '''
    self.high_pct = float(high_pct)
    self.low_pct = float(low_pct)
    self.high_growth_years = high_growth_years

  def compute(self, n_years: int) -> PolicyOutput[List[float]]:
    hg_years = max(0, min(self.high_growth_years, n_years))
    low_years = max(0, n_years - hg_years)
    rates = [self.high_pct] * hg_years + [self.low_pct] * low_years

    return PolicyOutput(value=rates,
                        diag={
                            'growth_method': 'two_phase',
                            'high_pct': self.high_pct,
                            'low_pct': self.low_pct,
                            'high_growth_years': hg_years,
                            'low_growth_years': low_years,
                        })


class DecayingGrowth(GrowthPolicy):
  '''
  Schedule derived from a single last-known growth rate.

  The starting rate is clipped to [clip_min, clip_max] and multiplied by
  the decay factors year by year; years past the factor list reuse the
  last factor. Rates are rounded to `decimals` places.
  '''

  def __init__(
      self,
      last_growth_pct: float,
      factors: Sequence[float] = DECAY_FACTORS,
      clip_min: float = 3.0,
      clip_max: float = 35.0,
      decimals: int = 1,
  ):
    '''
    Initialize decaying growth policy.

    Args:
      last_growth_pct: Most recent observed growth
      factors: Multipliers applied to the clipped rate per year
      clip_min: Minimum starting rate (default: 3%)
      clip_max: Maximum starting rate (default: 35%)
      decimals: Rounding of the output rates (default: 1)
    '''
    if not factors:
      raise ValueError('factors cannot be empty')
    self.last_growth_pct = last_growth_pct
    self.factors = tuple(factors)
    self.clip_min = clip_min
    self.clip_max = clip_max
    self.decimals = decimals

  @property
  def g0(self) -> float:
    return max(self.clip_min, min(self.clip_max, self.last_growth_pct))

  def compute(self, n_years: int) -> PolicyOutput[List[float]]:
    g0 = self.g0
    rates = []
    for t in range(max(n_years, 0)):
      factor = self.factors[min(t, len(self.factors) - 1)]
      rates.append(round_half_up(g0 * factor, self.decimals))

    return PolicyOutput(value=rates,
                        diag={
                            'growth_method': 'decaying',
                            'raw_growth': self.last_growth_pct,
                            'g0': g0,
                            'clip_range': (self.clip_min, self.clip_max),
                            'clipped': g0 != self.last_growth_pct,
                        })
