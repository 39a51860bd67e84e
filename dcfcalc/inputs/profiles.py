'''
Company profiles and their mapping onto Assumptions.

A CompanyProfile holds the handful of figures the calculator can be seeded
with (from a live lookup or a built-in demo table). The outcome of a lookup
is an explicit result type, Fetched or Unavailable, and merge_outcome() is a
pure function turning either variant into Assumptions plus a status line.
'''

from dataclasses import dataclass
from math import isfinite
from typing import Any, Mapping, Optional, Tuple, Union

from dcfcalc.domain.types import Assumptions
from dcfcalc.scenarios.config import VariantConfig
from dcfcalc.scenarios.registry import build_growth_rates
from dcfcalc.scenarios.registry import terminal_method
from dcfcalc.policies.growth import DecayingGrowth
from dcfcalc.policies.growth import round_half_up

DEFAULT_EBITDA_MARGIN = 25.0
DEFAULT_DA_PERCENT = 4.0
DEFAULT_TAX_RATE = 21.0
DEFAULT_CAPEX_PERCENT = 5.0
DEFAULT_GROWTH = 10.0
DEFAULT_SHARES = 1000.0
DEFAULT_NWC_PERCENT = 2.0
DEFAULT_EXIT_MULTIPLE = 15.0

# Currency -> (WACC %, terminal growth %)
DISCOUNT_DEFAULTS = {'INR': (12.0, 4.0)}
FALLBACK_DISCOUNT = (10.0, 3.0)


@dataclass(frozen=True)
class CompanyProfile:
  '''
  Seed figures for one company (currency amounts in millions).

  Field names mirror the JSON object requested from the lookup service.
  '''
  company_name: str
  ticker: str
  currency: str = 'USD'
  currency_symbol: str = '$'
  current_price: float = 0.0
  revenue: float = 0.0
  ebitda_margin: Optional[float] = None
  net_debt: float = 0.0
  shares_outstanding: Optional[float] = None
  capex_percent: Optional[float] = None
  da_percent: Optional[float] = None
  tax_rate: Optional[float] = None
  revenue_growth_last: Optional[float] = None

  @classmethod
  def from_payload(cls, payload: Mapping[str, Any],
                   ticker: str) -> 'CompanyProfile':
    '''
    Build a profile from the lookup's JSON object.

    Numeric strings ('210', '1,234.5') are accepted. Missing or
    non-numeric fields become None (or the requested ticker for
    names) so merge_outcome() can apply its defaults.
    '''

    def number(key: str) -> Optional[float]:
      value = payload.get(key)
      if isinstance(value, str):
        try:
          value = float(value.replace(',', '').strip())
        except ValueError:
          return None
      if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
      return float(value) if isfinite(value) else None

    def text(key: str, default: str) -> str:
      value = payload.get(key)
      return str(value) if value else default

    return cls(
        company_name=text('companyName', ticker),
        ticker=text('ticker', ticker),
        currency=text('currency', 'USD'),
        currency_symbol=text('currencySymbol', '$'),
        current_price=number('currentPrice') or 0.0,
        revenue=number('revenue') or 0.0,
        ebitda_margin=number('ebitdaMargin'),
        net_debt=number('netDebt') or 0.0,
        shares_outstanding=number('sharesOutstanding'),
        capex_percent=number('capexPercent'),
        da_percent=number('daPercent'),
        tax_rate=number('taxRate'),
        revenue_growth_last=number('revenueGrowthLast'),
    )


@dataclass(frozen=True)
class Fetched:
  '''Lookup succeeded.'''
  profile: CompanyProfile


@dataclass(frozen=True)
class Unavailable:
  '''Lookup failed or was skipped; reason is shown to the user.'''
  reason: str


FetchOutcome = Union[Fetched, Unavailable]


@dataclass(frozen=True)
class LoadStatus:
  ok: bool
  message: str


DEMO_PROFILES: Tuple[Tuple[str, CompanyProfile], ...] = (
    ('AAPL',
     CompanyProfile(company_name='Apple Inc.',
                    ticker='AAPL',
                    current_price=210.0,
                    revenue=383000.0,
                    ebitda_margin=33.0,
                    net_debt=60000.0,
                    shares_outstanding=15500.0,
                    capex_percent=3.5,
                    da_percent=2.5,
                    tax_rate=16.0,
                    revenue_growth_last=8.0)),
    ('MSFT',
     CompanyProfile(company_name='Microsoft Corporation',
                    ticker='MSFT',
                    current_price=430.0,
                    revenue=245000.0,
                    ebitda_margin=46.0,
                    net_debt=35000.0,
                    shares_outstanding=7450.0,
                    capex_percent=5.0,
                    da_percent=3.0,
                    tax_rate=18.0,
                    revenue_growth_last=12.0)),
    ('RELIANCE',
     CompanyProfile(company_name='Reliance Industries',
                    ticker='RELIANCE.NS',
                    currency='INR',
                    currency_symbol='₹',
                    current_price=2900.0,
                    revenue=1000000.0,
                    ebitda_margin=16.0,
                    net_debt=285000.0,
                    shares_outstanding=6760.0,
                    capex_percent=6.0,
                    da_percent=4.0,
                    tax_rate=25.0,
                    revenue_growth_last=10.0)),
)


def demo_profile(ticker: str) -> CompanyProfile:
  '''Built-in profile matched by ticker substring, else a generic one.'''
  upper = ticker.upper()
  for needle, profile in DEMO_PROFILES:
    if needle in upper:
      return profile
  return CompanyProfile(company_name=upper,
                        ticker=upper,
                        current_price=120.0,
                        revenue=50000.0,
                        ebitda_margin=25.0,
                        net_debt=10000.0,
                        shares_outstanding=1000.0,
                        capex_percent=5.0,
                        da_percent=4.0,
                        tax_rate=21.0,
                        revenue_growth_last=10.0)


def _pct(value: Optional[float], default: float) -> float:
  return round_half_up(value if value else default, 1)


def _growth_rates(profile: CompanyProfile, config: VariantConfig) -> tuple:
  decay = DecayingGrowth(profile.revenue_growth_last or DEFAULT_GROWTH)
  if config.growth == 'per_period':
    rates = build_growth_rates(config, rates=decay.compute(config.horizon).value)
  elif config.growth == 'two_phase':
    low = round_half_up(decay.g0 * decay.factors[-1], decay.decimals)
    rates = build_growth_rates(config, high_pct=decay.g0, low_pct=low)
  else:
    rates = build_growth_rates(config, last_growth_pct=decay.last_growth_pct)
  return tuple(rates.value)


def profile_to_assumptions(profile: CompanyProfile,
                           config: VariantConfig) -> Assumptions:
  '''
  Map a profile onto Assumptions with the documented fallbacks.

  Margin 25%, D&A 4%, tax 21%, CAPEX 5%, growth 10% and 1000 shares when a
  figure is missing; percentages are rounded to one decimal. Growth decays
  from the last known rate. INR profiles get 12% WACC / 4% terminal
  growth, everything else 10% / 3%.
  '''
  wacc, g_terminal = DISCOUNT_DEFAULTS.get(profile.currency, FALLBACK_DISCOUNT)
  return Assumptions(
      base_revenue=profile.revenue,
      growth_rates=_growth_rates(profile, config),
      ebitda_margin_pct=_pct(profile.ebitda_margin, DEFAULT_EBITDA_MARGIN),
      depreciation_pct=_pct(profile.da_percent, DEFAULT_DA_PERCENT),
      tax_rate_pct=_pct(profile.tax_rate, DEFAULT_TAX_RATE),
      capex_pct=_pct(profile.capex_percent, DEFAULT_CAPEX_PERCENT),
      nwc_change_pct=DEFAULT_NWC_PERCENT if config.include_nwc else None,
      discount_rate_pct=wacc,
      terminal_growth_pct=g_terminal,
      terminal_method=terminal_method(config),
      exit_multiple=DEFAULT_EXIT_MULTIPLE,
      net_debt=profile.net_debt,
      shares_outstanding=profile.shares_outstanding or DEFAULT_SHARES,
      current_price=profile.current_price,
      company_name=profile.company_name,
      ticker=profile.ticker,
      currency=profile.currency,
      currency_symbol=profile.currency_symbol,
  )


def merge_outcome(
    outcome: FetchOutcome,
    ticker: str,
    config: VariantConfig,
) -> Tuple[Assumptions, LoadStatus]:
  '''
  Assumptions from a lookup outcome, falling back to the demo table.

  Args:
    outcome: Fetched or Unavailable
    ticker: Ticker the user asked for
    config: Variant the assumptions are built for

  Returns:
    Tuple of (assumptions, status)
  '''
  if isinstance(outcome, Fetched):
    profile = outcome.profile
    status = LoadStatus(
        ok=True,
        message=(f'Loaded {profile.company_name} ({profile.ticker}) · '
                 f'{profile.currency} · FY data'))
  else:
    profile = demo_profile(ticker)
    status = LoadStatus(
        ok=False,
        message=(f'Live fetch unavailable ({outcome.reason}). '
                 f'Loaded demo data for {profile.ticker}.'))
  return profile_to_assumptions(profile, config), status
