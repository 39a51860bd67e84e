"""
Growth policies for building revenue growth schedules.

Each policy turns a few growth inputs into one rate per projected period
and returns both the schedule and diagnostic information.

To add a new policy:
1. Create a new class inheriting from GrowthPolicy
2. Implement the compute() method returning PolicyOutput
3. Register in scenarios/registry.py

Example:
  class FlatGrowth(GrowthPolicy):
    def compute(self, n_years: int) -> PolicyOutput[List[float]]:
      return PolicyOutput(value=[5.0] * n_years, diag={'growth_method': 'flat'})
"""

from dcfcalc.policies.growth import DecayingGrowth
from dcfcalc.policies.growth import GrowthPolicy
from dcfcalc.policies.growth import PerPeriodGrowth
from dcfcalc.policies.growth import TwoPhaseGrowth

__all__ = [
  'GrowthPolicy', 'PerPeriodGrowth', 'TwoPhaseGrowth', 'DecayingGrowth',
]
