"""Unit registry shared by all modules of the package.

The engine itself works with plain floats in the legacy units (°C, kPa,
m³/h, RT). Quantities only appear at the boundary of the package, see
`cooling_tower.selection`.
"""
import pint

UNITS = pint.UnitRegistry()
Quantity = UNITS.Quantity

UNITS.define('fraction = [] = frac')
UNITS.define('percent = 1e-2 frac = % = pct')

pint.set_application_registry(UNITS)
