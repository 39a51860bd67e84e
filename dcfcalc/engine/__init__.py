'''DCF calculation engine with pure math functions.'''

from dcfcalc.engine.dcf import (
    compare_terminal_methods,
    compute_terminal_value,
    project,
    project_periods,
    value_from_cash_flows,
)
from dcfcalc.engine.multiples import ev_ebitda_value, football_field, pe_value
from dcfcalc.engine.sensitivity import sweep

__all__ = [
    'compare_terminal_methods',
    'compute_terminal_value',
    'ev_ebitda_value',
    'football_field',
    'pe_value',
    'project',
    'project_periods',
    'sweep',
    'value_from_cash_flows',
]
