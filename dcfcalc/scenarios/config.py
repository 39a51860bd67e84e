"""
Calculator variant configuration.

VariantConfig is a serializable (JSON-friendly) description of one flavour
of the calculator: projection horizon, how growth is entered, whether the
NWC term is modelled, which terminal method is selected by default and how
the sensitivity grid is laid out. The engine itself is the same for every
variant.
"""

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
import json
from typing import Any

FIVE_YEAR_WACC_DELTAS = [-2.0, -1.0, 0.0, 1.0, 2.0]
FIVE_YEAR_GROWTH_DELTAS = [-1.0, -0.5, 0.0, 0.5, 1.0]
TEN_YEAR_GROWTH_DELTAS = [-0.5, -0.25, 0.0, 0.25, 0.5]
TEN_YEAR_WACC_DELTAS = [-1.0, -0.5, 0.0, 0.5, 1.0]


@dataclass
class VariantConfig:
  """
  Configuration for a calculator variant.

  String fields name entries in the registry, which keeps the config
  serializable to JSON for reproducibility.

  Attributes:
    name: Human-readable variant name
    horizon: Number of explicit forecast years
    growth: Growth policy name ('per_period', 'two_phase', 'decaying')
    terminal: Default terminal method ('gordon' or 'multiple')
    include_nwc: Whether the NWC change term is modelled
    sensitivity_rows: Axis swept along rows ('wacc' or 'terminal_growth')
    row_deltas: Row offsets in percentage points
    col_deltas: Column offsets in percentage points
    alternate_methods: Whether EV/EBITDA and P/E cross-checks are shown
    compare_terminal: Whether both terminal methods are reported
    policy_params: Optional dict of policy-specific parameters
  """
  name: str = 'tabbed_5y'
  horizon: int = 5
  growth: str = 'per_period'
  terminal: str = 'gordon'
  include_nwc: bool = True
  sensitivity_rows: str = 'wacc'
  row_deltas: list[float] = field(
      default_factory=lambda: list(FIVE_YEAR_WACC_DELTAS))
  col_deltas: list[float] = field(
      default_factory=lambda: list(FIVE_YEAR_GROWTH_DELTAS))
  alternate_methods: bool = False
  compare_terminal: bool = False
  policy_params: dict[str, Any] = field(default_factory=dict)

  @classmethod
  def default(cls) -> 'VariantConfig':
    """Default variant: the tabbed 5-year calculator."""
    return cls.tabbed_5y()

  @classmethod
  def tabbed_5y(cls) -> 'VariantConfig':
    """
    Tabbed single-page calculator.

    Uses:
      - 5-year horizon with a growth rate per year
      - NWC change modelled
      - Gordon terminal value (switchable to exit multiple)
      - WACC rows +-2pp, terminal growth columns +-1pp
    """
    return cls(name='tabbed_5y')

  @classmethod
  def form_5y(cls) -> 'VariantConfig':
    """Form-triggered 5-year calculator reporting both terminal methods."""
    return cls(name='form_5y', compare_terminal=True)

  @classmethod
  def ten_year(cls) -> 'VariantConfig':
    """
    10-year calculator.

    Uses:
      - Two growth phases (years 1-5 high, 6-10 low)
      - No NWC term
      - Terminal growth rows, WACC columns, smaller deltas
      - EV/EBITDA and P/E cross-checks
    """
    return cls(
        name='ten_year',
        horizon=10,
        growth='two_phase',
        include_nwc=False,
        sensitivity_rows='terminal_growth',
        row_deltas=list(TEN_YEAR_GROWTH_DELTAS),
        col_deltas=list(TEN_YEAR_WACC_DELTAS),
        alternate_methods=True,
        policy_params={'high_growth_years': 5},
    )

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'VariantConfig':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'VariantConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))
