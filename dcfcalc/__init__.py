'''
DCF valuation calculator with policy-based growth schedules.

This package projects free cash flows from a small set of operating
assumptions, discounts them at WACC, adds a Gordon or exit-multiple terminal
value and bridges enterprise value to an implied share price. Sensitivity
sweeps and multiple-based cross-checks reuse the same engine.

Usage:
  from dcfcalc.scenarios.config import VariantConfig
  from dcfcalc.run import run_valuation

  report = run_valuation(ticker='AAPL', config=VariantConfig.tabbed_5y())
  print(report.result.implied_price)
'''
