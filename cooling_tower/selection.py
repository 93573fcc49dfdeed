"""Unit-aware front end to the sizing engine.

`TowerSelection` holds the design conditions of a selection as pint
quantities and converts them to the units of the engine (°C, kPa, m³/h).
Results are returned as quantities again, or `None` where the engine finds
no solution (the design conditions lie outside the feasible operating
envelope of the tower family).
"""
import pandas as pd
from .pint_setup import Quantity
from .constants import STANDARD_PRESSURE, DEFAULT_CONSTANTS, PsychrometricConstants
from .transfer import FlowConfiguration, required_transfer_coefficient
from .solver import (
    TOWER_FAMILIES,
    TowerFamily,
    get_flow_configuration,
    solve_liquid_gas_ratio,
    cooling_capacity,
    required_flow_rate
)
from .performance import PerformanceCurve

Q_ = Quantity


class TowerSelection:

    def __init__(
        self,
        T_hot: Quantity,
        T_cold: Quantity,
        T_wb: Quantity,
        V_dot: Quantity,
        flow: FlowConfiguration | str,
        P: Quantity = STANDARD_PRESSURE,
        family: TowerFamily | None = None,
        constants: PsychrometricConstants = DEFAULT_CONSTANTS
    ) -> None:
        """
        Parameters
        ----------
        T_hot:
            Hot-water temperature entering the tower.
        T_cold:
            Cold-water temperature leaving the tower.
        T_wb:
            Wet-bulb temperature of the ambient air.
        V_dot:
            Volume flow rate of water.
        flow:
            Counterflow ('COUNTER') or crossflow ('CROSS') tower.
        P:
            Atmospheric pressure.
        family: optional
            Design family of the tower model. Defaults to the family of the
            flow configuration in `TOWER_FAMILIES`.
        constants:
            Physical constants.
        """
        self.flow = get_flow_configuration(flow)
        self.family = family or TOWER_FAMILIES[self.flow]
        self.constants = constants
        self._T_hot = T_hot.to('degC').m
        self._T_cold = T_cold.to('degC').m
        self._T_wb = T_wb.to('degC').m
        self._V_dot = V_dot.to('m ** 3 / hr').m
        self._P = P.to('kPa').m

    def __str__(self):
        return (
            f"{self.flow.value.lower()}flow tower: "
            f"{self.T_hot:~P.1f} -> {self.T_cold:~P.1f} "
            f"at {self.T_wb:~P.1f} WB, {self.V_dot:~P.1f}"
        )

    @property
    def T_hot(self) -> Quantity:
        return Q_(self._T_hot, 'degC')

    @property
    def T_cold(self) -> Quantity:
        return Q_(self._T_cold, 'degC')

    @property
    def T_wb(self) -> Quantity:
        return Q_(self._T_wb, 'degC')

    @property
    def V_dot(self) -> Quantity:
        return Q_(self._V_dot, 'm ** 3 / hr')

    @property
    def P(self) -> Quantity:
        return Q_(self._P, 'kPa')

    @property
    def range(self) -> Quantity:
        return Q_(self._T_hot - self._T_cold, 'K')

    @property
    def approach(self) -> Quantity:
        return Q_(self._T_cold - self._T_wb, 'K')

    @property
    def liquid_gas_ratio(self) -> float | None:
        """Liquid-to-gas ratio at which the fill meets the design duty,
        found with the full KaV/L evaluator (`simplified=False`). This is the
        ratio the performance curve is based on. Cooling capacity and flow
        rate are sized with `sizing_liquid_gas_ratio` instead.
        """
        N = solve_liquid_gas_ratio(
            self._T_hot, self._T_cold, self._T_wb, self.flow,
            fill=self.family.fill,
            P=self._P,
            simplified=False,
            constants=self.constants
        )
        return N or None

    @property
    def sizing_liquid_gas_ratio(self) -> float | None:
        """Liquid-to-gas ratio found with the simplified legacy KaV/L
        evaluator. `cooling_capacity` and `required_flow_rate` are based on
        this ratio, which is close to, but not the same as,
        `liquid_gas_ratio`.
        """
        N = solve_liquid_gas_ratio(
            self._T_hot, self._T_cold, self._T_wb, self.flow,
            fill=self.family.fill
        )
        return N or None

    def required_KaV_L(self, N: float) -> float:
        """Returns the KaV/L the design duty requires at liquid-to-gas ratio
        `N` (0 if the duty cannot be met at this ratio).
        """
        return required_transfer_coefficient(
            self._T_hot, self._T_cold, self._T_wb, N,
            self.flow, self._P, self.constants
        )

    @property
    def cooling_capacity(self) -> Quantity | None:
        """Nominal cooling capacity of the tower at the design conditions,
        based on `sizing_liquid_gas_ratio`.
        """
        Q = cooling_capacity(
            self._T_hot, self._T_cold, self._T_wb,
            self._V_dot, self.flow, self.family
        )
        if Q == 0.0:
            return None
        return Q_(Q, 'ton_of_refrigeration')

    def required_flow_rate(self, capacity: Quantity) -> Quantity | None:
        """Returns the water flow rate a tower of nominal `capacity` can cool
        at the design temperatures.
        """
        V_dot = required_flow_rate(
            self._T_hot, self._T_cold, self._T_wb,
            capacity.to('ton_of_refrigeration').m,
            self.flow, self.family
        )
        if V_dot == 0.0:
            return None
        return Q_(V_dot, 'm ** 3 / hr')

    def performance_curve(self, **kwargs) -> pd.DataFrame:
        """Returns the performance table of the selected tower. Keyword
        arguments are passed to `PerformanceCurve.table`.
        """
        curve = PerformanceCurve(
            self._T_hot, self._T_cold, self._T_wb, self.flow,
            P=self._P,
            family=self.family,
            constants=self.constants
        )
        return curve.table(**kwargs)
