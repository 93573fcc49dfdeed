from .pint_setup import UNITS, Quantity

from .constants import (
    STANDARD_PRESSURE,
    PsychrometricConstants,
    DEFAULT_CONSTANTS
)

from .psychrometrics import (
    PsychrometricError,
    saturated_vapor_pressure,
    saturation_factor,
    humidity_ratio,
    moist_air_enthalpy,
    legacy_saturated_enthalpy
)

from .fill import FillFormula, FillCorrelation, fill_delivered_coefficient

from .transfer import (
    FlowConfiguration,
    required_transfer_coefficient,
    simplified_transfer_coefficient
)

from .solver import (
    TowerFamily,
    TOWER_FAMILIES,
    ConvergenceState,
    LiquidGasRatioSearch,
    HotWaterTemperatureSearch,
    converge,
    solve_liquid_gas_ratio,
    cooling_capacity,
    required_flow_rate,
    solve_cold_water_temperature
)

from .performance import PerformanceCurve

from .selection import TowerSelection
