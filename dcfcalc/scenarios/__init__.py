"""Variant configuration and policy registry."""

from dcfcalc.scenarios.config import VariantConfig
from dcfcalc.scenarios.registry import build_growth_rates
from dcfcalc.scenarios.registry import create_growth_policy
from dcfcalc.scenarios.registry import create_variant
from dcfcalc.scenarios.registry import GROWTH_POLICIES
from dcfcalc.scenarios.registry import list_policies
from dcfcalc.scenarios.registry import list_variants
from dcfcalc.scenarios.registry import VARIANTS

__all__ = [
    'VariantConfig',
    'GROWTH_POLICIES',
    'VARIANTS',
    'build_growth_rates',
    'create_growth_policy',
    'create_variant',
    'list_policies',
    'list_variants',
]
