"""Psychrometric properties of moist air.

Saturation pressure of water vapor follows the Hyland-Wexler formulation
used in the ASHRAE Handbook of Fundamentals. Humidity ratio is derived from a
dry-bulb/wet-bulb pair with the psychrometric energy balance. All functions
are pure and take temperatures in °C and pressures in kPa, except
`saturation_factor`, which keeps the units of the correlation it was taken
from (°F and psi).

`legacy_saturated_enthalpy` is the kcal-based correlation of the original
selection spreadsheet. It is only used by the simplified transfer
coefficient of `cooling_tower.transfer`.
"""
import math
import warnings
from .constants import (
    DEFAULT_CONSTANTS,
    KPA_TO_PSI,
    STANDARD_PRESSURE_KPA,
    PsychrometricConstants
)

T_MIN = -100.0
T_MAX = 200.0

# ln(Pws) coefficients, T in K, Pws in Pa.
_C_ICE = (
    -5.6745359e3,
    6.3925247,
    -9.6778430e-3,
    6.2215701e-7,
    2.0747825e-9,
    -9.4840240e-13,
    4.1635019
)
_C_WATER = (
    -5.8002206e3,
    1.3914993,
    -4.8640239e-2,
    4.1764768e-5,
    -1.4452093e-8,
    6.5459673
)

# Enhancement factor f = sum(A[j][i] * t**i * p**j), t in °F, p in psi.
# Buck (1996) correlations rewritten in IP units; one table above and one
# below the freezing point.
_F_WATER = (
    (1.00072, 0.0, 0.0, 0.0),
    (2.33488919e-4, -8.03537459e-7, 1.25552728e-8, 0.0),
    (0.0, 0.0, 0.0, 0.0)
)
_F_ICE = (
    (1.00022, 0.0, 0.0, 0.0),
    (2.78015450e-4, -8.71633856e-7, 1.36192790e-8, 0.0),
    (0.0, 0.0, 0.0, 0.0)
)


class PsychrometricError(ValueError):
    pass


def _to_fahrenheit(T: float) -> float:
    return T * 1.8 + 32.0


def saturated_vapor_pressure(T: float) -> float:
    """Returns the saturation pressure of water vapor in kPa at temperature
    `T` in °C.

    Over ice for -100 °C <= `T` < 0 °C, over liquid water for
    0 °C <= `T` <= 200 °C.

    Raises
    ------
    PsychrometricError
        If `T` lies outside [-100 °C, 200 °C].
    """
    if not T_MIN <= T <= T_MAX:
        raise PsychrometricError(
            f"Saturation pressure is only defined between {T_MIN} °C and "
            f"{T_MAX} °C, got {T} °C."
        )
    T_abs = T + 273.15
    if T < 0.0:
        c1, c2, c3, c4, c5, c6, c7 = _C_ICE
        ln_pws = (
            c1 / T_abs + c2 + c3 * T_abs + c4 * T_abs ** 2
            + c5 * T_abs ** 3 + c6 * T_abs ** 4 + c7 * math.log(T_abs)
        )
    else:
        c8, c9, c10, c11, c12, c13 = _C_WATER
        ln_pws = (
            c8 / T_abs + c9 + c10 * T_abs + c11 * T_abs ** 2
            + c12 * T_abs ** 3 + c13 * math.log(T_abs)
        )
    return math.exp(ln_pws) / 1000.0


def saturation_factor(T_F: float, P_psi: float) -> float:
    """Returns the enhancement factor of saturated moist air.

    Parameters
    ----------
    T_F:
        Temperature in °F.
    P_psi:
        Total pressure in psi.
    """
    table = _F_WATER if T_F >= 32.0 else _F_ICE
    f = 0.0
    for j, row in enumerate(table):
        for i, a in enumerate(row):
            f += a * T_F ** i * P_psi ** j
    return f


def humidity_ratio(
    T_db: float,
    T_wb: float,
    P: float = STANDARD_PRESSURE_KPA,
    constants: PsychrometricConstants = DEFAULT_CONSTANTS
) -> float:
    """Returns the humidity ratio (kg vapor / kg dry air) of moist air with
    dry-bulb temperature `T_db` and wet-bulb temperature `T_wb` (°C) at total
    pressure `P` (kPa).

    Raises
    ------
    PsychrometricError
        If the wet-bulb temperature is above the dry-bulb temperature, or if
        the wet-bulb temperature is out of range.
    """
    if T_wb > T_db:
        raise PsychrometricError(
            f"Wet-bulb temperature {T_wb} °C cannot exceed dry-bulb "
            f"temperature {T_db} °C."
        )
    c = constants
    p_ws = saturated_vapor_pressure(T_wb)
    f = saturation_factor(_to_fahrenheit(T_wb), P * KPA_TO_PSI)
    p_ws *= f
    W_s = c.molecular_weight_ratio * p_ws / (P - p_ws)
    W = (
        ((c.h_fg - (c.cp_water - c.cp_vapor) * T_wb) * W_s - c.cp_air * (T_db - T_wb))
        / (c.h_fg + c.cp_vapor * T_db - c.cp_water * T_wb)
    )
    if W < 0.0:
        warnings.warn(
            message=(
                f"Negative humidity ratio at {T_db} °C DB / {T_wb} °C WB. "
                "W has been reset to 0 kg/kg."
            ),
            category=RuntimeWarning
        )
        W = 0.0
    return W


def moist_air_enthalpy(
    T_db: float,
    T_wb: float,
    P: float = STANDARD_PRESSURE_KPA,
    constants: PsychrometricConstants = DEFAULT_CONSTANTS
) -> float:
    """Returns the specific enthalpy of moist air in kJ/kg dry air.

    With `T_db == T_wb` this is the enthalpy of saturated air at that
    temperature, which is how the transfer coefficient evaluator uses it.
    """
    c = constants
    W = humidity_ratio(T_db, T_wb, P, c)
    return c.cp_air * T_db + W * (c.h_fg + c.cp_vapor * T_db)


def legacy_saturated_enthalpy(T: float) -> float:
    """Returns the enthalpy of saturated air in kcal/kg at temperature `T`
    in °C and standard atmospheric pressure (1.03323 kgf/cm²).
    """
    ca = 373.15 / (T + 273.15)
    cb = 1.0 / ca
    c1 = -0.00000013816 * (10.0 ** (11.344 * (1.0 - cb)) - 1.0)
    c2 = 5.02808 * math.log10(ca) - 7.90298 * (ca - 1.0) + math.log10(1.03323)
    c3 = 0.0081328 * (10.0 ** (-3.49149 * (ca - 1.0)) - 1.0)
    p = 10.0 ** (c1 + c2 + c3)
    return 0.24 * T + (597.3 + 0.441 * T) * 0.622 * p / (1.03323 - p)
