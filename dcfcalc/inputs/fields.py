'''
Input field table.

A static table maps every editable assumption to its label, value kind and
parsing rule. The same table drives the listing of the input surface
(field_table, current_values) and the parse/update logic (parse_form,
update_field), so adding a field means adding one FieldSpec.

Parsing rules:
  - text fields pass through verbatim
  - numeric fields parse as float, falling back to 0 on failure
  - choice fields must be one of the listed options
'''

import enum
from dataclasses import dataclass
from math import isnan
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import TerminalMethod
from dcfcalc.scenarios.config import VariantConfig
from dcfcalc.scenarios.registry import build_growth_rates
from dcfcalc.scenarios.registry import terminal_method

COMPANY = 'Company Data'
OPERATING = 'Operating Assumptions'
GROWTH = 'Revenue Growth by Year (%)'
VALUATION = 'Discount Rate & Terminal Value'
MULTIPLES = 'Multiples Cross-Check'

DEFAULT_GROWTH_INPUTS: Dict[str, Dict[str, Any]] = {
    'per_period': {'rates': [10.0, 9.0, 8.0, 7.0, 6.0]},
    'two_phase': {'high_pct': 10.0, 'low_pct': 6.0},
    'decaying': {'last_growth_pct': 10.0},
}


class ValueKind(str, enum.Enum):
  NUMERIC = 'number'
  TEXT = 'text'
  CHOICE = 'choice'


def parse_number(raw: Any) -> float:
  '''Parse a numeric field, 0.0 when the text is not a number.'''
  try:
    value = float(str(raw).strip())
  except (TypeError, ValueError):
    return 0.0
  return 0.0 if isnan(value) else value


@dataclass(frozen=True)
class FieldSpec:
  '''
  One editable input.

  Attributes:
    key: Assumptions attribute (or growth input name for growth fields)
    label: Display label; '{sym}' is replaced by the currency symbol
    kind: How the raw value is parsed
    section: Group heading on the input surface
    step: Suggested increment for numeric inputs
    choices: Allowed values for choice fields
    index: Period index (0-based) for per-period growth fields
  '''
  key: str
  label: str
  kind: ValueKind = ValueKind.NUMERIC
  section: str = ''
  step: Optional[float] = None
  choices: Tuple[str, ...] = ()
  index: Optional[int] = None

  def label_for(self, symbol: str = '$') -> str:
    return self.label.replace('{sym}', symbol)

  def parse(self, raw: Any) -> Any:
    if self.kind is ValueKind.TEXT:
      return '' if raw is None else str(raw)
    if self.kind is ValueKind.CHOICE:
      value = str(raw)
      if value not in self.choices:
        raise ValueError(f"Invalid value for {self.key}: '{value}'. "
                         f'Allowed: {list(self.choices)}')
      return value
    return parse_number(raw)


FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec('company_name', 'Company Name', ValueKind.TEXT, COMPANY),
    FieldSpec('ticker', 'Ticker', ValueKind.TEXT, COMPANY),
    FieldSpec('base_revenue', 'Revenue ({sym}M)', section=COMPANY),
    FieldSpec('net_debt', 'Net Debt ({sym}M)', section=COMPANY),
    FieldSpec('shares_outstanding', 'Shares Out (M)', section=COMPANY),
    FieldSpec('current_price', 'Current Price ({sym})', section=COMPANY),
    FieldSpec('ebitda_margin_pct', 'EBITDA Margin (%)', section=OPERATING,
              step=0.5),
    FieldSpec('depreciation_pct', 'D&A (% Revenue)', section=OPERATING,
              step=0.5),
    FieldSpec('tax_rate_pct', 'Tax Rate (%)', section=OPERATING, step=0.5),
    FieldSpec('capex_pct', 'CapEx (% Revenue)', section=OPERATING, step=0.5),
    FieldSpec('nwc_change_pct', 'NWC Change (% Revenue)', section=OPERATING,
              step=0.5),
    FieldSpec('discount_rate_pct', 'WACC (%)', section=VALUATION, step=0.25),
    FieldSpec('terminal_method',
              'Terminal Method',
              ValueKind.CHOICE,
              VALUATION,
              choices=tuple(m.value for m in TerminalMethod)),
    FieldSpec('terminal_growth_pct', 'Terminal Growth (%)', section=VALUATION,
              step=0.25),
    FieldSpec('exit_multiple', 'EV/EBITDA Multiple', section=VALUATION,
              step=0.5),
    FieldSpec('earnings_per_share', 'EPS ({sym})', section=MULTIPLES),
    FieldSpec('pe_multiple', 'P/E Multiple', section=MULTIPLES, step=0.5),
)


def growth_fields(config: VariantConfig,
                  base_year: int = 2024) -> Tuple[FieldSpec, ...]:
  '''Growth inputs for the variant's growth policy.'''
  if config.growth == 'two_phase':
    years = config.policy_params.get('high_growth_years', 5)
    return (
        FieldSpec('high_pct', f'Years 1-{years} Growth (%)', section=GROWTH,
                  step=0.5),
        FieldSpec('low_pct',
                  f'Years {years + 1}-{config.horizon} Growth (%)',
                  section=GROWTH,
                  step=0.5),
    )
  if config.growth == 'decaying':
    return (FieldSpec('last_growth_pct', 'Last Revenue Growth (%)',
                      section=GROWTH, step=0.5),)
  return tuple(
      FieldSpec(f'growth_{t}',
                f'Year {t} · {base_year + t}',
                section=GROWTH,
                step=0.5,
                index=t - 1) for t in range(1, config.horizon + 1))


def field_table(config: VariantConfig,
                base_year: int = 2024) -> Tuple[FieldSpec, ...]:
  '''All fields shown for a variant, in display order.'''
  table: List[FieldSpec] = []
  for spec in FIELDS:
    if spec.key == 'nwc_change_pct' and not config.include_nwc:
      continue
    if spec.section == MULTIPLES and not config.alternate_methods:
      continue
    table.append(spec)
    if spec.key == 'nwc_change_pct' or (spec.key == 'capex_pct' and
                                        not config.include_nwc):
      table.extend(growth_fields(config, base_year))
  return tuple(table)


def default_assumptions(config: VariantConfig) -> Assumptions:
  '''Blank calculator state for a variant.'''
  rates = build_growth_rates(config, **DEFAULT_GROWTH_INPUTS[config.growth])
  return Assumptions(
      base_revenue=0.0,
      growth_rates=tuple(rates.value),
      nwc_change_pct=2.0 if config.include_nwc else None,
      terminal_method=terminal_method(config),
  )


def _growth_inputs(assumptions: Assumptions,
                   config: VariantConfig) -> Dict[str, Any]:
  rates = list(assumptions.growth_rates)
  if config.growth == 'two_phase':
    return {
        'high_pct': rates[0] if rates else 0.0,
        'low_pct': rates[-1] if rates else 0.0,
    }
  if config.growth == 'decaying':
    return {'last_growth_pct': rates[0] if rates else 0.0}
  return {'rates': rates}


def current_values(assumptions: Assumptions,
                   config: VariantConfig) -> Dict[str, Any]:
  '''Value to pre-fill for every field of the variant's table.'''
  growth = _growth_inputs(assumptions, config)
  values: Dict[str, Any] = {}
  for spec in field_table(config, assumptions.base_year):
    if spec.section != GROWTH:
      value = getattr(assumptions, spec.key)
      values[spec.key] = value.value if isinstance(value,
                                                   TerminalMethod) else value
    elif spec.index is not None:
      rates = growth['rates']
      values[spec.key] = rates[spec.index] if spec.index < len(rates) else 0.0
    else:
      values[spec.key] = growth[spec.key]
  return values


def parse_form(
    raw: Mapping[str, Any],
    config: VariantConfig,
    base: Optional[Assumptions] = None,
) -> Assumptions:
  '''
  Build Assumptions from raw form values.

  Keys missing from `raw` keep their value from `base` (or the variant's
  defaults). Unknown keys are ignored.

  Args:
    raw: Field key -> raw input (usually text)
    config: Variant whose field table applies
    base: Snapshot to update

  Returns:
    New Assumptions snapshot
  '''
  if base is None:
    base = default_assumptions(config)

  changes: Dict[str, Any] = {}
  growth = _growth_inputs(base, config)
  growth_changed = False

  for spec in field_table(config, base.base_year):
    if spec.key not in raw:
      continue
    value = spec.parse(raw[spec.key])
    if spec.section != GROWTH:
      changes[spec.key] = value
    elif spec.index is not None:
      rates = growth['rates']
      rates.extend([0.0] * (spec.index + 1 - len(rates)))
      rates[spec.index] = value
      growth_changed = True
    else:
      growth[spec.key] = value
      growth_changed = True

  if growth_changed:
    changes['growth_rates'] = tuple(build_growth_rates(config, **growth).value)
  if not config.include_nwc:
    changes['nwc_change_pct'] = None
  return base.with_changes(**changes)


def update_field(
    assumptions: Assumptions,
    key: str,
    raw: Any,
    config: VariantConfig,
) -> Assumptions:
  '''
  Apply one edited field.

  Raises:
    KeyError: If the key is not part of the variant's field table
  '''
  keys = [spec.key for spec in field_table(config, assumptions.base_year)]
  if key not in keys:
    raise KeyError(f"Unknown field: '{key}'. Available: {keys}")
  return parse_form({key: raw}, config, base=assumptions)
