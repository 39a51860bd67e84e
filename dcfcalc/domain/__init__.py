"""Domain types for the DCF calculator."""

from dcfcalc.domain.types import Assumptions
from dcfcalc.domain.types import PolicyOutput
from dcfcalc.domain.types import ProjectedPeriod
from dcfcalc.domain.types import SensitivityGrid
from dcfcalc.domain.types import SweepAxis
from dcfcalc.domain.types import TerminalMethod
from dcfcalc.domain.types import ValuationBand
from dcfcalc.domain.types import ValuationResult

__all__ = [
    'Assumptions',
    'PolicyOutput',
    'ProjectedPeriod',
    'SensitivityGrid',
    'SweepAxis',
    'TerminalMethod',
    'ValuationBand',
    'ValuationResult',
]
