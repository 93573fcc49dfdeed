"""Required fill transfer coefficient KaV/L by the CTI four-point method.

The Merkel integral over the cooling range is approximated with the
Chebyshev four-point rule: the driving enthalpy difference between saturated
air at the water temperature and the bulk air is evaluated at 10 %, 40 %,
60 % and 90 % of the range above the cold-water temperature.

Two variants exist:

- `required_transfer_coefficient`: enthalpies in kJ/kg from
  `psychrometrics.moist_air_enthalpy`, water heat scaled with `cp_water`.
- `simplified_transfer_coefficient`: the variant of the legacy capacity and
  flow-rate sizing. Enthalpies in kcal/kg from
  `psychrometrics.legacy_saturated_enthalpy` and no `cp_water` scaling.

Both return 0 when the air cannot take up the heat at one of the four nodes
(negative or zero driving force). This is not an error: it tells the solver
that the trial value is out of reach.
"""
from enum import Enum
from .constants import DEFAULT_CONSTANTS, STANDARD_PRESSURE_KPA, PsychrometricConstants
from .psychrometrics import moist_air_enthalpy, legacy_saturated_enthalpy
from .logging import ModuleLogger


logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.WARNING)


CHEBYSHEV_NODES = (0.9, 0.6, 0.4, 0.1)

# Empirical crossflow correction FF = 1 - A * (1 - SS) ** B. The fit
# constants come without a derivation and are kept as they are.
CROSSFLOW_CORRECTION_A = 0.106
CROSSFLOW_CORRECTION_B = 3.5


class FlowConfiguration(Enum):
    COUNTER = 'COUNTER'
    CROSS = 'CROSS'

    @classmethod
    def parse(cls, value: 'FlowConfiguration | str') -> 'FlowConfiguration | None':
        """Normalizes `value` to one of the two flow configurations.

        Accepts e.g. 'counter', 'COUNTERFLOW', 'Cross-flow'. Returns `None`
        for anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        token = value.strip().upper().replace('-', '').replace('_', '').replace(' ', '')
        token = token.removesuffix('FLOW')
        try:
            return cls(token)
        except ValueError:
            return None


def _crossflow_factor(SS: float) -> float:
    return 1.0 - CROSSFLOW_CORRECTION_A * (1.0 - SS) ** CROSSFLOW_CORRECTION_B


def _four_point_integral(
    I_nodes: list[float],
    I_wb: float,
    N: float,
    dT_water: float
) -> float | None:
    # `dT_water` is the heat given off by the water per kg over the full
    # range, expressed in the same unit as the enthalpies.
    dI = [
        I_i - (I_wb + N * frac * dT_water)
        for I_i, frac in zip(I_nodes, CHEBYSHEV_NODES)
    ]
    if any(d <= 0.0 for d in dI):
        return None
    return dT_water * sum(1.0 / d for d in dI) / 4


def required_transfer_coefficient(
    T_hot: float,
    T_cold: float,
    T_wb: float,
    N: float,
    flow: FlowConfiguration | str,
    P: float = STANDARD_PRESSURE_KPA,
    constants: PsychrometricConstants = DEFAULT_CONSTANTS
) -> float:
    """Returns the KaV/L needed to cool water from `T_hot` to `T_cold` with
    air entering at wet-bulb temperature `T_wb`.

    Parameters
    ----------
    T_hot:
        Hot water temperature, °C.
    T_cold:
        Cold water temperature, °C.
    T_wb:
        Wet-bulb temperature of the entering air, °C.
    N:
        Liquid-to-gas mass flow ratio.
    flow:
        Counterflow or crossflow tower.
    P:
        Atmospheric pressure, kPa.
    constants:
        Physical constants.

    Returns
    -------
    float
        The required KaV/L, or 0 if there is no solution for these inputs
        (driving force not positive at one of the nodes, crossflow
        saturation ratio >= 1, or unknown flow configuration).
    """
    flow_config = FlowConfiguration.parse(flow)
    if flow_config is None:
        logger.warning(f"Unknown flow configuration {flow!r}.")
        return 0.0
    R = T_hot - T_cold

    def I(T: float) -> float:
        return moist_air_enthalpy(T, T, P, constants)

    I_hot, I_cold, I_wb = I(T_hot), I(T_cold), I(T_wb)
    I_nodes = [I(T_cold + frac * R) for frac in CHEBYSHEV_NODES]
    dT_water = R * constants.cp_water
    KaV_L = _four_point_integral(I_nodes, I_wb, N, dT_water)
    if KaV_L is None:
        return 0.0
    if flow_config is FlowConfiguration.COUNTER:
        return KaV_L
    SS = (I_cold - (I_wb + N * dT_water)) / (I_hot - I_wb)
    if SS >= 1.0:
        return 0.0
    return KaV_L / _crossflow_factor(SS)


def simplified_transfer_coefficient(
    T_hot: float,
    T_cold: float,
    T_wb: float,
    N: float,
    flow: FlowConfiguration | str
) -> float:
    """Same as `required_transfer_coefficient`, but in the form used by the
    legacy capacity and flow-rate sizing.

    The water-side heat is taken as the bare range (no `cp_water`) and the
    enthalpies come from the kcal/kg correlation at standard pressure. In
    kcal the specific heat of water is 1, so the two variants agree closely,
    but their numeric results are not identical.
    """
    flow_config = FlowConfiguration.parse(flow)
    if flow_config is None:
        logger.warning(f"Unknown flow configuration {flow!r}.")
        return 0.0
    R = T_hot - T_cold
    I = legacy_saturated_enthalpy
    I_hot, I_cold, I_wb = I(T_hot), I(T_cold), I(T_wb)
    I_nodes = [I(T_cold + frac * R) for frac in CHEBYSHEV_NODES]
    KaV_L = _four_point_integral(I_nodes, I_wb, N, R)
    if KaV_L is None:
        return 0.0
    if flow_config is FlowConfiguration.COUNTER:
        return KaV_L
    SS = (I_cold - (I_wb + N * R)) / (I_hot - I_wb)
    if SS >= 1.0:
        return 0.0
    return KaV_L / _crossflow_factor(SS)
