import pytest

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import TerminalMethod


@pytest.fixture
def example_assumptions() -> Assumptions:
  """Generic demo company: 50,000 revenue growing 10% a year for 5 years."""
  return Assumptions(
      base_revenue=50000.0,
      growth_rates=(10.0, 10.0, 10.0, 10.0, 10.0),
      ebitda_margin_pct=25.0,
      depreciation_pct=4.0,
      tax_rate_pct=21.0,
      capex_pct=5.0,
      nwc_change_pct=2.0,
      discount_rate_pct=10.0,
      terminal_growth_pct=3.0,
      terminal_method=TerminalMethod.GORDON,
      exit_multiple=15.0,
      net_debt=10000.0,
      shares_outstanding=1000.0,
      current_price=120.0,
      ticker='DEMO',
  )


@pytest.fixture
def ten_year_assumptions() -> Assumptions:
  """Two-phase 10-year profile without the NWC term."""
  return Assumptions(
      base_revenue=245000.0,
      growth_rates=(12.0,) * 5 + (6.0,) * 5,
      ebitda_margin_pct=46.0,
      depreciation_pct=3.0,
      tax_rate_pct=18.0,
      capex_pct=5.0,
      nwc_change_pct=None,
      discount_rate_pct=9.0,
      terminal_growth_pct=2.5,
      exit_multiple=18.0,
      net_debt=35000.0,
      shares_outstanding=7450.0,
      current_price=430.0,
      earnings_per_share=12.0,
      pe_multiple=30.0,
      ticker='MSFT',
  )
