"""
Registry mapping string names to variant presets and growth policies.

This lets variants be configured with string names (JSON friendly) while
still instantiating the correct policy classes.

To add a new growth policy:
1. Implement the policy class in policies/growth.py
2. Add a factory here taking the growth inputs as keyword arguments
3. Register it in GROWTH_POLICIES
"""

from collections.abc import Callable
from typing import Any

from dcfcalc.domain.types import PolicyOutput
from dcfcalc.domain.types import SweepAxis
from dcfcalc.domain.types import TerminalMethod
from dcfcalc.policies.growth import DecayingGrowth
from dcfcalc.policies.growth import GrowthPolicy
from dcfcalc.policies.growth import PerPeriodGrowth
from dcfcalc.policies.growth import TwoPhaseGrowth
from dcfcalc.scenarios.config import VariantConfig

GROWTH_POLICIES: dict[str, Callable[..., GrowthPolicy]] = {
    'per_period':
        lambda rates, **_: PerPeriodGrowth(rates),
    'two_phase':
        lambda high_pct, low_pct, high_growth_years=5, **_: TwoPhaseGrowth(
            high_pct, low_pct, high_growth_years=high_growth_years),
    'decaying':
        lambda last_growth_pct, **_: DecayingGrowth(last_growth_pct),
}

VARIANTS: dict[str, Callable[[], VariantConfig]] = {
    'tabbed_5y': VariantConfig.tabbed_5y,
    'form_5y': VariantConfig.form_5y,
    'ten_year': VariantConfig.ten_year,
}


def create_variant(name: str) -> VariantConfig:
  """
  Create a preset variant configuration.

  Raises:
    KeyError: If the name is not registered
  """
  try:
    factory = VARIANTS[name]
  except KeyError as e:
    raise KeyError(f"Unknown variant: '{name}'. "
                   f'Available: {list(VARIANTS.keys())}') from e
  return factory()


def create_growth_policy(config: VariantConfig, **inputs: Any) -> GrowthPolicy:
  """
  Instantiate the growth policy named by the config.

  Args:
    config: Variant configuration
    **inputs: Growth inputs for the policy (rates, high_pct/low_pct or
      last_growth_pct); config.policy_params fill in the rest

  Raises:
    KeyError: If the policy name is not registered
  """
  try:
    factory = GROWTH_POLICIES[config.growth]
  except KeyError as e:
    raise KeyError(f"Unknown growth policy: '{config.growth}'. "
                   f'Available: {list(GROWTH_POLICIES.keys())}') from e
  return factory(**{**config.policy_params, **inputs})


def build_growth_rates(config: VariantConfig,
                       **inputs: Any) -> PolicyOutput[list[float]]:
  """Growth schedule over the variant's horizon."""
  return create_growth_policy(config, **inputs).compute(config.horizon)


def terminal_method(config: VariantConfig) -> TerminalMethod:
  return TerminalMethod(config.terminal)


def row_axis(config: VariantConfig) -> SweepAxis:
  return SweepAxis(config.sensitivity_rows)


def list_variants() -> list[str]:
  return list(VARIANTS.keys())


def list_policies() -> dict[str, list[str]]:
  """List available growth policies and variants."""
  return {
      'growth': list(GROWTH_POLICIES.keys()),
      'variant': list(VARIANTS.keys()),
  }
