"""Performance curves of a selected cooling tower.

A performance curve shows the cold-water temperature a tower produces as a
function of the entering wet-bulb temperature, for a number of cooling ranges
and water flow rates around the design point. The tower is characterized by
the liquid-to-gas ratio at which its fill just meets the design duty;
off-design points keep the air flow and scale the liquid-to-gas ratio with
the water flow rate.
"""
from concurrent.futures import ProcessPoolExecutor
from typing import Sequence
import numpy as np
import pandas as pd
from .constants import DEFAULT_CONSTANTS, STANDARD_PRESSURE_KPA, PsychrometricConstants
from .transfer import FlowConfiguration
from .solver import (
    TOWER_FAMILIES,
    TowerFamily,
    get_flow_configuration,
    solve_liquid_gas_ratio,
    solve_cold_water_temperature
)
from .logging import ModuleLogger


logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.WARNING)


RANGE_FACTORS = (0.6, 0.8, 1.0, 1.2, 1.4)
WET_BULB_TEMPERATURES = (15.0, 20.0, 25.0, 30.0, 35.0)
FLOW_RATE_PERCENTAGES = (90.0, 100.0, 110.0)


class PerformanceCurve:

    def __init__(
        self,
        T_hot: float,
        T_cold: float,
        T_wb: float,
        flow: FlowConfiguration | str,
        P: float = STANDARD_PRESSURE_KPA,
        family: TowerFamily | None = None,
        constants: PsychrometricConstants = DEFAULT_CONSTANTS
    ) -> None:
        """Creates the performance curve of a tower at design conditions.

        Parameters
        ----------
        T_hot:
            Design hot-water temperature, °C.
        T_cold:
            Design cold-water temperature, °C.
        T_wb:
            Design wet-bulb temperature, °C.
        flow:
            Counterflow or crossflow tower.
        P:
            Atmospheric pressure, kPa.
        family: optional
            Design family of the tower. Defaults to the family of the flow
            configuration in `TOWER_FAMILIES`.
        constants:
            Physical constants.
        """
        self.flow = get_flow_configuration(flow)
        self.family = family or TOWER_FAMILIES[self.flow]
        self.P = P
        self.constants = constants
        self.T_wb_design = T_wb
        self.R_design = T_hot - T_cold
        self.approach_design = T_cold - T_wb
        self.N_design = solve_liquid_gas_ratio(
            T_hot, T_cold, T_wb, self.flow,
            fill=self.family.fill,
            P=P,
            simplified=False,
            constants=constants
        )
        if self.N_design == 0.0:
            logger.warning(
                f"No liquid-to-gas ratio found at design conditions "
                f"{T_hot} °C / {T_cold} °C / {T_wb} °C WB."
            )

    def liquid_gas_ratio_at(self, flow_rate_pct: float) -> float:
        return self.N_design * flow_rate_pct / 100.0

    def cold_water_temperature(
        self,
        T_wb: float,
        R: float | None = None,
        flow_rate_pct: float = 100.0,
        approach_guess: float | None = None
    ) -> float:
        """Returns the cold-water temperature (°C) at wet-bulb temperature
        `T_wb` and range `R` (defaults to the design range), or 0 if there is
        no solution.
        """
        if self.N_design == 0.0:
            return 0.0
        return solve_cold_water_temperature(
            T_wb,
            self.R_design if R is None else R,
            self.flow,
            N=self.N_design,
            fill=self.family.fill,
            P=self.P,
            flow_rate_pct=flow_rate_pct,
            approach_guess=self.approach_design if approach_guess is None else approach_guess,
            constants=self.constants
        )

    def row(
        self,
        R: float,
        flow_rate_pct: float,
        wbt_values: Sequence[float]
    ) -> list[float]:
        """Returns the cold-water temperatures for each wet-bulb temperature
        in `wbt_values` at range `R` and the given flow rate. Points without
        a solution are NaN.

        The search for each point starts from the approach found at the
        neighboring wet-bulb temperature closer to the design wet bulb, which
        is usually within the 2 K a single search reaches around its starting
        value.
        """
        T_cold = dict.fromkeys(wbt_values, np.nan)
        below = sorted(
            (t for t in wbt_values if t < self.T_wb_design),
            reverse=True
        )
        above = sorted(t for t in wbt_values if t >= self.T_wb_design)
        for branch in (above, below):
            approach = self.approach_design
            for T_wb in branch:
                T = self.cold_water_temperature(T_wb, R, flow_rate_pct, approach)
                if T == 0.0:
                    continue
                T_cold[T_wb] = T
                approach = T - T_wb
        return [T_cold[t] for t in wbt_values]

    def table(
        self,
        ranges: Sequence[float] | None = None,
        wbt_values: Sequence[float] = WET_BULB_TEMPERATURES,
        flow_rate_pcts: Sequence[float] = FLOW_RATE_PERCENTAGES,
        max_workers: int | None = None
    ) -> pd.DataFrame:
        """Returns the cold-water temperatures as a table.

        Parameters
        ----------
        ranges: optional
            Cooling ranges (K). Defaults to the design range multiplied by
            `RANGE_FACTORS`.
        wbt_values:
            Wet-bulb temperatures (°C), the columns of the table.
        flow_rate_pcts:
            Water flow rates as a percentage of the design flow rate.
        max_workers: optional
            If larger than 1, rows are calculated in parallel with a
            `ProcessPoolExecutor` using this number of processes.

        Returns
        -------
        pd.DataFrame
            Indexed by (flow rate %, range), one column per wet-bulb
            temperature. Points without a solution are NaN.
        """
        if ranges is None:
            ranges = [f * self.R_design for f in RANGE_FACTORS]
        keys = [(pct, R) for pct in flow_rate_pcts for R in ranges]
        if max_workers is not None and max_workers > 1:
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                rows = list(executor.map(
                    self.row,
                    [R for _, R in keys],
                    [pct for pct, _ in keys],
                    [wbt_values] * len(keys)
                ))
        else:
            rows = [self.row(R, pct, wbt_values) for pct, R in keys]
        index = pd.MultiIndex.from_tuples(keys, names=['flow_rate_pct', 'range'])
        columns = pd.Index(wbt_values, name='T_wb')
        return pd.DataFrame(rows, index=index, columns=columns)
