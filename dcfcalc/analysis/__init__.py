'''
Valuation analysis utilities.

Note: To avoid RuntimeWarning when using -m flag, import directly:
  from dcfcalc.analysis.football_field import plot_football_field
  from dcfcalc.analysis.sensitivity import SensitivityTableBuilder
'''
