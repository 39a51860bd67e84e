'''
Domain types for the DCF calculator.

These dataclasses are the typed seams between the input layer, the pure
engine and the report layer. Everything here is immutable: the caller owns
an Assumptions snapshot and gets a fresh result for every recomputation.
'''

import dataclasses
import enum
from dataclasses import dataclass, field
from math import isfinite
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar('T')


@dataclass
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Every policy returns both a computed value and diagnostic information
  explaining how the value was computed.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


class TerminalMethod(str, enum.Enum):
  '''Terminal value methodology.'''
  GORDON = 'gordon'
  EXIT_MULTIPLE = 'multiple'


class SweepAxis(str, enum.Enum):
  '''Assumption perturbed along one axis of a sensitivity grid.'''
  WACC = 'wacc'
  TERMINAL_GROWTH = 'terminal_growth'


@dataclass(frozen=True)
class Assumptions:
  '''
  Scalar inputs to one valuation.

  All rates are percentages (10.0 means 10%). The projection horizon is
  the length of growth_rates.

  Attributes:
    base_revenue: Revenue of the last actual year
    growth_rates: Revenue growth per projected period
    ebitda_margin_pct: EBITDA as % of revenue
    depreciation_pct: D&A as % of revenue
    tax_rate_pct: Tax rate applied to EBIT
    capex_pct: CAPEX as % of revenue
    nwc_change_pct: NWC change as % of revenue, None drops the term
    discount_rate_pct: WACC
    terminal_growth_pct: Perpetual growth for the Gordon method
    terminal_method: Terminal value formula
    exit_multiple: EV/EBITDA multiple for the exit method
    net_debt: Debt less cash, subtracted from EV
    shares_outstanding: Per-share divisor
    current_price: Market price, <= 0 means not available
    earnings_per_share: EPS for the P/E cross-check (optional)
    pe_multiple: P/E multiple for the P/E cross-check
  '''
  base_revenue: float
  growth_rates: Tuple[float, ...]
  ebitda_margin_pct: float = 25.0
  depreciation_pct: float = 4.0
  tax_rate_pct: float = 21.0
  capex_pct: float = 5.0
  nwc_change_pct: Optional[float] = 2.0
  discount_rate_pct: float = 10.0
  terminal_growth_pct: float = 3.0
  terminal_method: TerminalMethod = TerminalMethod.GORDON
  exit_multiple: float = 15.0
  net_debt: float = 0.0
  shares_outstanding: float = 1000.0
  current_price: float = 0.0
  earnings_per_share: Optional[float] = None
  pe_multiple: float = 20.0
  company_name: str = ''
  ticker: str = ''
  currency: str = 'USD'
  currency_symbol: str = '$'
  base_year: int = 2024

  def __post_init__(self):
    # Accept any sequence but store a tuple so snapshots stay hashable.
    object.__setattr__(self, 'growth_rates', tuple(self.growth_rates))
    object.__setattr__(self, 'terminal_method',
                       TerminalMethod(self.terminal_method))

  @property
  def horizon(self) -> int:
    return len(self.growth_rates)

  @property
  def has_market_price(self) -> bool:
    return self.current_price > 0

  def with_changes(self, **changes: Any) -> 'Assumptions':
    '''Return a new snapshot with the given fields replaced.'''
    return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class ProjectedPeriod:
  '''
  One projected year.

  Attributes:
    index: 1-based period number (also the discounting exponent)
    year: Calendar label (base_year + index)
  '''
  index: int
  year: int
  revenue: float
  ebitda: float
  depreciation: float
  ebit: float
  nopat: float
  capex: float
  nwc_change: float
  fcf: float
  discount_factor: float
  pv_fcf: float


@dataclass(frozen=True)
class ValuationResult:
  '''
  Complete valuation output of the projection engine.

  Non-finite numbers mean the value could not be computed (for example
  WACC equal to terminal growth, or zero shares). upside_pct is None when
  no market price was supplied.

  Attributes:
    periods: Projected periods in order
    pv_fcf_sum: Sum of discounted free cash flows
    terminal_value: Undiscounted terminal value
    pv_terminal_value: Terminal value discounted from the horizon
    enterprise_value: pv_fcf_sum + pv_terminal_value
    equity_value: enterprise_value - net debt
    implied_price: equity_value per share
    tv_percent_of_ev: Share of EV coming from the terminal value
    upside_pct: Implied price vs. market price, in percent
    terminal_method: Method used for terminal_value
    diag: Diagnostics (warnings, inputs echo)
  '''
  periods: Tuple[ProjectedPeriod, ...]
  pv_fcf_sum: float
  terminal_value: float
  pv_terminal_value: float
  enterprise_value: float
  equity_value: float
  implied_price: float
  tv_percent_of_ev: float
  upside_pct: Optional[float]
  terminal_method: TerminalMethod
  diag: Dict[str, Any] = field(default_factory=dict, compare=False)

  @property
  def horizon(self) -> int:
    return len(self.periods)

  @property
  def last_period(self) -> Optional[ProjectedPeriod]:
    return self.periods[-1] if self.periods else None

  @property
  def fcfs(self) -> List[float]:
    '''Undiscounted free cash flows in period order.'''
    return [p.fcf for p in self.periods]

  @property
  def average_fcf(self) -> float:
    if not self.periods:
      return float('nan')
    return sum(self.fcfs) / len(self.periods)

  @property
  def is_finite(self) -> bool:
    return isfinite(self.implied_price) and isfinite(self.enterprise_value)

  def to_dict(self) -> Dict[str, Any]:
    '''Flatten headline figures for DataFrame creation.'''
    result = {
        'pv_fcf_sum': self.pv_fcf_sum,
        'terminal_value': self.terminal_value,
        'pv_terminal_value': self.pv_terminal_value,
        'enterprise_value': self.enterprise_value,
        'equity_value': self.equity_value,
        'implied_price': self.implied_price,
        'tv_percent_of_ev': self.tv_percent_of_ev,
        'upside_pct': self.upside_pct,
        'terminal_method': self.terminal_method.value,
        'horizon': self.horizon,
    }
    result.update(self.diag)
    return result


@dataclass(frozen=True)
class SensitivityGrid:
  '''
  Implied share prices over a grid of perturbed assumptions.

  values[i][j] was computed with the row assumption at row_values[i] and
  the column assumption at col_values[j]. Deltas are kept in the order
  they were given.
  '''
  values: Tuple[Tuple[float, ...], ...]
  row_axis: SweepAxis
  col_axis: SweepAxis
  row_deltas: Tuple[float, ...]
  col_deltas: Tuple[float, ...]
  row_values: Tuple[float, ...]
  col_values: Tuple[float, ...]

  @property
  def shape(self) -> Tuple[int, int]:
    return len(self.row_values), len(self.col_values)

  @property
  def base_index(self) -> Optional[Tuple[int, int]]:
    '''(row, col) of the zero-delta cell, None if a schedule has no zero.'''
    if 0.0 not in self.row_deltas or 0.0 not in self.col_deltas:
      return None
    return self.row_deltas.index(0.0), self.col_deltas.index(0.0)

  @property
  def base_value(self) -> Optional[float]:
    index = self.base_index
    if index is None:
      return None
    return self.values[index[0]][index[1]]

  def flat(self) -> List[float]:
    return [v for row in self.values for v in row]

  def finite_values(self) -> List[float]:
    return [v for v in self.flat() if isfinite(v)]


@dataclass(frozen=True)
class ValuationBand:
  '''
  Low/high range of one valuation method for football-field display.

  Attributes:
    method: Human-readable method name
    low: Lower bound per share
    high: Upper bound per share
    point: Central estimate per share
  '''
  method: str
  low: float
  high: float
  point: float
