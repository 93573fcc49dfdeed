from dataclasses import dataclass
from .pint_setup import Quantity as Q_

STANDARD_PRESSURE = Q_(101.325, 'kPa')
STANDARD_PRESSURE_KPA = STANDARD_PRESSURE.to('kPa').m

KPA_TO_PSI = Q_(1.0, 'kPa').to('psi').m


@dataclass(frozen=True)
class PsychrometricConstants:
    """Physical constants used throughout the engine.

    Attributes
    ----------
    cp_air:
        Specific heat of dry air, kJ/(kg.K).
    cp_vapor:
        Specific heat of water vapor, kJ/(kg.K).
    cp_water:
        Specific heat of liquid water, kJ/(kg.K).
    h_fg:
        Latent heat of vaporization of water at 0 °C, kJ/kg.
    molecular_weight_ratio:
        Ratio of the molecular mass of water vapor to that of dry air.
    liquid_gas_ratio:
        Default liquid-to-gas mass flow ratio used when the caller doesn't
        supply one.
    """
    cp_air: float = 1.006
    cp_vapor: float = 1.805
    cp_water: float = 4.186
    h_fg: float = 2501.0
    molecular_weight_ratio: float = 0.62198
    liquid_gas_ratio: float = 1.0


DEFAULT_CONSTANTS = PsychrometricConstants()
