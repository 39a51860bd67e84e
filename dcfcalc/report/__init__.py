"""Display formatting and tabular views of valuation results."""

from dcfcalc.report.formatting import fmt_money
from dcfcalc.report.formatting import fmt_percent
from dcfcalc.report.formatting import fmt_price
from dcfcalc.report.formatting import PLACEHOLDER
from dcfcalc.report.tables import bands_frame
from dcfcalc.report.tables import heat_classes
from dcfcalc.report.tables import key_metrics
from dcfcalc.report.tables import projection_frame
from dcfcalc.report.tables import render_projection
from dcfcalc.report.tables import render_sensitivity
from dcfcalc.report.tables import sensitivity_frame
from dcfcalc.report.tables import terminal_comparison
from dcfcalc.report.tables import valuation_bridge

__all__ = [
    'PLACEHOLDER',
    'bands_frame',
    'fmt_money',
    'fmt_percent',
    'fmt_price',
    'heat_classes',
    'key_metrics',
    'projection_frame',
    'render_projection',
    'render_sensitivity',
    'sensitivity_frame',
    'terminal_comparison',
    'valuation_bridge',
]
