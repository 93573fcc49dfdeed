"""Sizing solvers for cooling towers.

Every solver balances the KaV/L a duty requires (see
`cooling_tower.transfer`) against the KaV/L the fill delivers (see
`cooling_tower.fill`) by moving a single trial value:

- `LiquidGasRatioSearch` moves the liquid-to-gas ratio N. This is used to
  rate a tower for cooling capacity or to size the water flow rate.
- `HotWaterTemperatureSearch` moves the hot-water temperature at a fixed
  range and N. This is used to predict the cold-water temperature.

The search itself (`converge`) is the one of the legacy selection program:
starting from an initial trial, the trial is stepped up or down and the step
is halved after every move, until required and delivered KaV/L agree within
`CONVERGENCE_TOLERANCE`. There is no bracketing, so the trial can only travel
a distance of twice the initial step. The cold-water solver therefore repeats
the search from several starting approaches before it gives up. When no
solution is found the solvers return 0.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from .constants import DEFAULT_CONSTANTS, STANDARD_PRESSURE_KPA, PsychrometricConstants
from .fill import FillCorrelation, FillFormula
from .transfer import (
    FlowConfiguration,
    required_transfer_coefficient,
    simplified_transfer_coefficient
)
from .logging import ModuleLogger


logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.WARNING)


CONVERGENCE_TOLERANCE = 0.000004
MAX_ITERATIONS_LIQUID_GAS_RATIO = 50
MAX_ITERATIONS_HOT_WATER_TEMPERATURE = 100
INITIAL_STEP = 1.0
INITIAL_LIQUID_GAS_RATIO = 2.0
DEFAULT_APPROACH_GUESS = 5.0
MIN_APPROACH = 2.0
# Further starting approaches of the hot-water search, tried when the search
# from the given guess doesn't converge.
APPROACH_GUESS_STEP = 3.0
MAX_APPROACH_GUESS = 30.0


@dataclass(frozen=True)
class TowerFamily:
    """Design family of a tower model.

    Attributes
    ----------
    fill:
        KaV/L-curve of the fill.
    c:
        Ratio between the water flow rate (m³/h) and the nominal capacity
        (RT) at N = 1.
    slope:
        Catalog slope factor.
    efficiency:
        Catalog efficiency factor.
    """
    fill: FillCorrelation
    c: float
    slope: float = 0.78
    efficiency: float = 0.98


TOWER_FAMILIES: dict[FlowConfiguration, TowerFamily] = {
    FlowConfiguration.COUNTER: TowerFamily(
        fill=FillCorrelation(a=0.700303572, b=-1.311808, formula=FillFormula.DOUBLE),
        c=2.222
    ),
    FlowConfiguration.CROSS: TowerFamily(
        fill=FillCorrelation(a=1.8488, b=-0.8, formula=FillFormula.DOUBLE),
        c=1.772
    )
}


@dataclass
class ConvergenceState:
    trial: float
    step: float = INITIAL_STEP
    iterations: int = 0
    converged: bool = False
    degenerate: bool = False


class SolveKind(ABC):
    """Defines what is searched for by `converge`.

    `orientation` is +1 if the required KaV/L increases with the trial value
    and -1 if it decreases. A move that must lower the required KaV/L
    (because it exceeds what the fill delivers, or because it cannot be
    reached at all) goes against the orientation.
    """
    max_iterations: int
    orientation: int = 1
    tolerance: float = CONVERGENCE_TOLERANCE

    @abstractmethod
    def required(self, trial: float) -> float:
        ...

    @abstractmethod
    def delivered(self, trial: float) -> float:
        ...


class LiquidGasRatioSearch(SolveKind):
    max_iterations = MAX_ITERATIONS_LIQUID_GAS_RATIO
    orientation = 1

    def __init__(
        self,
        T_hot: float,
        T_cold: float,
        T_wb: float,
        fill: FillCorrelation,
        flow: FlowConfiguration,
        P: float = STANDARD_PRESSURE_KPA,
        simplified: bool = True,
        constants: PsychrometricConstants = DEFAULT_CONSTANTS
    ) -> None:
        self.T_hot = T_hot
        self.T_cold = T_cold
        self.T_wb = T_wb
        self.fill = fill
        self.flow = flow
        self.P = P
        self.simplified = simplified
        self.constants = constants

    def required(self, trial: float) -> float:
        if self.simplified:
            return simplified_transfer_coefficient(
                self.T_hot, self.T_cold, self.T_wb, trial, self.flow
            )
        return required_transfer_coefficient(
            self.T_hot, self.T_cold, self.T_wb, trial,
            self.flow, self.P, self.constants
        )

    def delivered(self, trial: float) -> float:
        return self.fill.delivered(trial)


class HotWaterTemperatureSearch(SolveKind):
    max_iterations = MAX_ITERATIONS_HOT_WATER_TEMPERATURE
    orientation = -1

    def __init__(
        self,
        T_wb: float,
        R: float,
        N: float,
        fill: FillCorrelation,
        flow: FlowConfiguration,
        P: float = STANDARD_PRESSURE_KPA,
        constants: PsychrometricConstants = DEFAULT_CONSTANTS
    ) -> None:
        self.T_wb = T_wb
        self.R = R
        self.N = N
        self.fill = fill
        self.flow = flow
        self.P = P
        self.constants = constants

    def required(self, trial: float) -> float:
        return required_transfer_coefficient(
            trial, trial - self.R, self.T_wb, self.N,
            self.flow, self.P, self.constants
        )

    def delivered(self, trial: float) -> float:
        # N is fixed: the delivered KaV/L doesn't depend on the trial.
        return self.fill.delivered(self.N)


def converge(
    kind: SolveKind,
    initial_trial: float,
    initial_step: float = INITIAL_STEP
) -> ConvergenceState:
    """Searches the trial value at which the required and delivered KaV/L
    of `kind` are equal.

    Returns the final `ConvergenceState`. Its `converged` flag is only set
    when the tolerance was met within `kind.max_iterations` iterations. If
    the fill delivers nothing at the current trial, the search stops at once
    and `degenerate` is set.
    """
    state = ConvergenceState(trial=initial_trial, step=initial_step)
    name = type(kind).__name__
    while state.iterations < kind.max_iterations:
        required = kind.required(state.trial)
        delivered = kind.delivered(state.trial)
        if delivered == 0.0:
            state.degenerate = True
            logger.debug(
                f"{name}: fill delivers nothing at trial {state.trial:.6g}, "
                f"search aborted."
            )
            return state
        state.iterations += 1
        logger.debug(
            f"{name} {state.iterations}. trial = {state.trial:.6g} -> "
            f"required = {required:.6g}, delivered = {delivered:.6g}"
        )
        if required == 0.0:
            state.trial -= kind.orientation * state.step
            state.step /= 2
            continue
        if abs(required - delivered) <= kind.tolerance:
            state.converged = True
            return state
        if required > delivered:
            state.trial -= kind.orientation * state.step
        else:
            state.trial += kind.orientation * state.step
        state.step /= 2
    logger.debug(
        f"{name}: no convergence after {state.iterations} iterations "
        f"(last trial = {state.trial:.6g})."
    )
    return state


def get_flow_configuration(flow: FlowConfiguration | str) -> FlowConfiguration:
    flow_config = FlowConfiguration.parse(flow)
    if flow_config is None:
        raise ValueError(
            f"Unknown flow configuration {flow!r}: expected "
            f"'COUNTER' or 'CROSS'."
        )
    return flow_config


def solve_liquid_gas_ratio(
    T_hot: float,
    T_cold: float,
    T_wb: float,
    flow: FlowConfiguration | str,
    fill: FillCorrelation | None = None,
    P: float = STANDARD_PRESSURE_KPA,
    simplified: bool = True,
    constants: PsychrometricConstants = DEFAULT_CONSTANTS
) -> float:
    """Returns the liquid-to-gas ratio N at which the fill delivers the KaV/L
    required to cool water from `T_hot` to `T_cold` at wet-bulb temperature
    `T_wb` (all in °C).

    If `fill` is None, the fill of the flow configuration's tower family in
    `TOWER_FAMILIES` is used. With `simplified` True (default) the legacy
    simplified transfer coefficient is used, otherwise the full one at
    pressure `P` (kPa).

    Returns 0 if no N could be found, or if the temperatures are not in the
    order `T_hot > T_cold > T_wb + MIN_APPROACH`.

    Raises
    ------
    ValueError
        If `flow` is not a known flow configuration.
    """
    flow_config = get_flow_configuration(flow)
    if not T_hot > T_cold > T_wb + MIN_APPROACH:
        logger.warning(
            f"No solution: temperatures must satisfy hot ({T_hot} °C) > "
            f"cold ({T_cold} °C) > wet bulb ({T_wb} °C) + {MIN_APPROACH} K."
        )
        return 0.0
    fill = fill or TOWER_FAMILIES[flow_config].fill
    kind = LiquidGasRatioSearch(
        T_hot, T_cold, T_wb, fill, flow_config,
        P, simplified, constants
    )
    state = converge(kind, INITIAL_LIQUID_GAS_RATIO)
    if not state.converged:
        return 0.0
    return state.trial


def cooling_capacity(
    T_hot: float,
    T_cold: float,
    T_wb: float,
    flow_rate: float,
    flow: FlowConfiguration | str,
    family: TowerFamily | None = None
) -> float:
    """Returns the cooling capacity in RT of a tower that cools `flow_rate`
    (m³/h) of water from `T_hot` to `T_cold` at wet-bulb temperature `T_wb`.

    Returns 0 if no liquid-to-gas ratio can be found for the duty.
    """
    flow_config = get_flow_configuration(flow)
    family = family or TOWER_FAMILIES[flow_config]
    N = solve_liquid_gas_ratio(T_hot, T_cold, T_wb, flow_config, family.fill)
    if N == 0.0:
        return 0.0
    return flow_rate / (N / family.c) / family.slope * family.efficiency


def required_flow_rate(
    T_hot: float,
    T_cold: float,
    T_wb: float,
    capacity: float,
    flow: FlowConfiguration | str,
    family: TowerFamily | None = None
) -> float:
    """Returns the water flow rate in m³/h that a tower with nominal
    cooling capacity `capacity` (RT) can cool from `T_hot` to `T_cold` at
    wet-bulb temperature `T_wb`. This is the inverse of `cooling_capacity`.

    Returns 0 if no liquid-to-gas ratio can be found for the duty.
    """
    flow_config = get_flow_configuration(flow)
    family = family or TOWER_FAMILIES[flow_config]
    N = solve_liquid_gas_ratio(T_hot, T_cold, T_wb, flow_config, family.fill)
    if N == 0.0:
        return 0.0
    return capacity * (N / family.c) * family.slope / family.efficiency


def _approach_guesses(first: float):
    yield first
    reach = 2 * INITIAL_STEP
    k = 1
    while True:
        up = first + k * APPROACH_GUESS_STEP
        down = first - k * APPROACH_GUESS_STEP
        # A search from `down` still reaches approaches just above zero.
        up_valid, down_valid = up <= MAX_APPROACH_GUESS, down + reach > 0.0
        if not (up_valid or down_valid):
            return
        if up_valid:
            yield up
        if down_valid:
            yield down
        k += 1


def solve_cold_water_temperature(
    T_wb: float,
    R: float,
    flow: FlowConfiguration | str,
    N: float | None = None,
    fill: FillCorrelation | None = None,
    P: float = STANDARD_PRESSURE_KPA,
    flow_rate_pct: float = 100.0,
    approach_guess: float = DEFAULT_APPROACH_GUESS,
    constants: PsychrometricConstants = DEFAULT_CONSTANTS
) -> float:
    """Returns the cold-water temperature (°C) a tower produces at wet-bulb
    temperature `T_wb` (°C) and cooling range `R` (K).

    Parameters
    ----------
    T_wb:
        Wet-bulb temperature of the entering air.
    R:
        Cooling range, hot minus cold water temperature.
    flow:
        Counterflow or crossflow tower.
    N: optional
        Liquid-to-gas ratio at 100 % water flow. Defaults to
        `constants.liquid_gas_ratio`.
    fill: optional
        KaV/L-curve of the fill. Defaults to the fill of the flow
        configuration's tower family in `TOWER_FAMILIES`.
    P:
        Atmospheric pressure, kPa.
    flow_rate_pct:
        Water flow rate as a percentage of the flow rate at which `N`
        applies. The liquid-to-gas ratio scales proportionally.
    approach_guess:
        Approach (K) from which the search starts. A single search only
        covers the hot-water temperatures within 2 K of
        `T_wb + approach_guess + R`. If it fails, the search is repeated from
        approaches `APPROACH_GUESS_STEP` apart around `approach_guess`, up to
        `MAX_APPROACH_GUESS`.
    constants:
        Physical constants.

    Returns
    -------
    float
        The cold-water temperature, or 0 if no solution was found or if the
        range is not positive.

    Raises
    ------
    ValueError
        If `flow` is not a known flow configuration.
    """
    flow_config = get_flow_configuration(flow)
    if R <= 0.0:
        logger.warning(f"No solution: range must be positive, got {R} K.")
        return 0.0
    N = constants.liquid_gas_ratio if N is None else N
    N *= flow_rate_pct / 100.0
    fill = fill or TOWER_FAMILIES[flow_config].fill
    kind = HotWaterTemperatureSearch(T_wb, R, N, fill, flow_config, P, constants)
    for approach in _approach_guesses(approach_guess):
        state = converge(kind, T_wb + approach + R)
        if state.converged:
            return state.trial - R
        if state.degenerate:
            break
    return 0.0
