import math
import pytest
from cooling_tower.solver import (
    CONVERGENCE_TOLERANCE,
    MIN_APPROACH,
    DEFAULT_APPROACH_GUESS,
    TOWER_FAMILIES,
    SolveKind,
    LiquidGasRatioSearch,
    HotWaterTemperatureSearch,
    converge,
    solve_liquid_gas_ratio,
    cooling_capacity,
    required_flow_rate,
    solve_cold_water_temperature
)
from cooling_tower.fill import FillCorrelation, FillFormula
from cooling_tower.transfer import FlowConfiguration, required_transfer_coefficient


class LinearKind(SolveKind):
    max_iterations = 50

    def __init__(self, required, delivered, orientation=1):
        self._required = required
        self._delivered = delivered
        self.orientation = orientation

    def required(self, trial):
        return self._required(trial)

    def delivered(self, trial):
        return self._delivered(trial)


class TestConverge:

    def test_halving_steps(self):
        kind = LinearKind(lambda t: t, lambda t: 1.5)
        state = converge(kind, 2.0)
        # 2.0 -> 1.0 -> 1.5
        assert state.converged
        assert state.trial == 1.5
        assert state.iterations == 3
        assert state.step == 0.25

    def test_decreasing_orientation(self):
        kind = LinearKind(lambda t: 10.0 - t, lambda t: 7.5, orientation=-1)
        state = converge(kind, 3.0)
        # 3.0 -> 2.0 -> 2.5
        assert state.converged
        assert state.trial == 2.5

    def test_unreachable_required_retreats(self):
        kind = LinearKind(lambda t: 0.0 if t > 1.0 else t, lambda t: 0.75)
        state = converge(kind, 2.0)
        # 2.0 (unreachable) -> 1.0 -> 0.5 -> 0.75
        assert state.converged
        assert state.trial == 0.75
        assert state.iterations == 4

    def test_iteration_cap(self):
        kind = LinearKind(lambda t: 0.0, lambda t: 1.0)
        state = converge(kind, 2.0)
        assert not state.converged
        assert not state.degenerate
        assert state.iterations == kind.max_iterations

    def test_out_of_reach(self):
        # The trial can travel at most twice the initial step.
        kind = LinearKind(lambda t: t, lambda t: 5.0)
        state = converge(kind, 2.0)
        assert not state.converged
        assert state.trial < 4.0

    def test_degenerate_fill(self):
        kind = LinearKind(lambda t: t, lambda t: 0.0)
        state = converge(kind, 2.0)
        assert state.degenerate
        assert not state.converged
        assert state.iterations == 0

    def test_tolerance(self):
        kind = LinearKind(lambda t: t, lambda t: 2.0 + 0.9 * CONVERGENCE_TOLERANCE)
        state = converge(kind, 2.0)
        assert state.converged
        assert state.iterations == 1


def test_solve_kind_constants():
    assert CONVERGENCE_TOLERANCE == 0.000004
    assert LiquidGasRatioSearch.max_iterations == 50
    assert HotWaterTemperatureSearch.max_iterations == 100
    assert LiquidGasRatioSearch.orientation == 1
    assert HotWaterTemperatureSearch.orientation == -1


def test_tower_families():
    counter = TOWER_FAMILIES[FlowConfiguration.COUNTER]
    cross = TOWER_FAMILIES[FlowConfiguration.CROSS]
    assert counter.fill == FillCorrelation(0.700303572, -1.311808, FillFormula.DOUBLE)
    assert cross.fill == FillCorrelation(1.8488, -0.8, FillFormula.DOUBLE)
    assert (counter.c, cross.c) == (2.222, 1.772)
    assert counter.slope == cross.slope == 0.78
    assert counter.efficiency == cross.efficiency == 0.98


class TestLiquidGasRatio:

    def test_fill_meets_duty(self, design_point, flow):
        N = solve_liquid_gas_ratio(*design_point, flow, simplified=False)
        fill = TOWER_FAMILIES[flow].fill
        assert 0.0 < N < 4.0
        required = required_transfer_coefficient(*design_point, N, flow)
        assert required == pytest.approx(fill.delivered(N), abs=CONVERGENCE_TOLERANCE)

    @pytest.mark.parametrize('T_hot, T_cold, T_wb', [
        (32.0, 37.0, 27.0),
        (37.0, 32.0, 33.0),
        (37.0, 32.0, 32.0),
        (37.0, 37.0, 27.0),
        (37.0, 27.5, 27.0),
        (37.0, 28.0, 27.0),
        (37.0, 29.0, 27.0)
    ])
    def test_ordering_violations(self, T_hot, T_cold, T_wb, flow):
        assert solve_liquid_gas_ratio(T_hot, T_cold, T_wb, flow) == 0.0
        assert cooling_capacity(T_hot, T_cold, T_wb, 78.0, flow) == 0.0
        assert required_flow_rate(T_hot, T_cold, T_wb, 200.0, flow) == 0.0

    def test_minimum_approach(self, flow):
        assert MIN_APPROACH == 2.0
        assert solve_liquid_gas_ratio(37.0, 29.0, 27.0, flow) == 0.0
        assert solve_liquid_gas_ratio(37.0, 29.1, 27.0, flow) > 0.0

    def test_unknown_flow_configuration(self, design_point):
        with pytest.raises(ValueError):
            solve_liquid_gas_ratio(*design_point, 'PARALLEL')
        with pytest.raises(ValueError):
            cooling_capacity(*design_point, 78.0, 'PARALLEL')


class TestCoolingCapacity:

    def test_design_point(self, design_point):
        Q = cooling_capacity(*design_point, 78.0, 'COUNTER')
        assert math.isfinite(Q)
        assert 100.0 < Q < 400.0

    def test_flow_configuration_spelling(self, design_point):
        assert (
            cooling_capacity(*design_point, 78.0, 'COUNTERFLOW')
            == cooling_capacity(*design_point, 78.0, FlowConfiguration.COUNTER)
        )

    def test_proportional_to_flow_rate(self, design_point, flow):
        Q1 = cooling_capacity(*design_point, 78.0, flow)
        Q2 = cooling_capacity(*design_point, 156.0, flow)
        assert Q2 == pytest.approx(2 * Q1)

    def test_continuous_in_wet_bulb(self, flow):
        Q = cooling_capacity(37.0, 32.0, 27.0, 78.0, flow)
        Q_up = cooling_capacity(37.0, 32.0, 27.01, 78.0, flow)
        Q_down = cooling_capacity(37.0, 32.0, 26.99, 78.0, flow)
        assert Q > 0.0
        assert Q_up == pytest.approx(Q, rel=1e-2)
        assert Q_down == pytest.approx(Q, rel=1e-2)
        # A warmer wet bulb needs a larger tower for the same water flow.
        assert Q_down < Q < Q_up

    def test_flow_rate_inverts_capacity(self, design_point, flow):
        Q = cooling_capacity(*design_point, 78.0, flow)
        V_dot = required_flow_rate(*design_point, Q, flow)
        assert V_dot == pytest.approx(78.0)

    @pytest.mark.parametrize('T_hot, T_cold, T_wb', [
        (35.0, 30.0, 25.0),
        (40.0, 32.0, 28.0),
        (45.0, 35.0, 30.0),
        (30.0, 26.0, 20.0),
        (37.0, 31.0, 29.0)
    ])
    def test_terminates(self, T_hot, T_cold, T_wb, flow):
        Q = cooling_capacity(T_hot, T_cold, T_wb, 100.0, flow)
        assert Q >= 0.0
        assert math.isfinite(Q)


class TestColdWaterTemperature:

    def test_round_trip(self, design_point, flow):
        T_hot, T_cold, T_wb = design_point
        N = solve_liquid_gas_ratio(T_hot, T_cold, T_wb, flow, simplified=False)
        assert N > 0.0
        T = solve_cold_water_temperature(
            T_wb, T_hot - T_cold, flow, N=N, approach_guess=4.0
        )
        assert T == pytest.approx(T_cold, abs=0.01)

    def test_follows_wet_bulb(self, design_point):
        T_hot, T_cold, T_wb = design_point
        N = solve_liquid_gas_ratio(T_hot, T_cold, T_wb, 'COUNTER', simplified=False)
        T_27 = solve_cold_water_temperature(27.0, 5.0, 'COUNTER', N=N)
        T_28 = solve_cold_water_temperature(28.0, 5.0, 'COUNTER', N=N)
        assert T_27 > 27.0
        assert T_28 > T_27

    def test_more_water_is_warmer(self, design_point):
        T_hot, T_cold, T_wb = design_point
        N = solve_liquid_gas_ratio(T_hot, T_cold, T_wb, 'COUNTER', simplified=False)
        T_100 = solve_cold_water_temperature(27.0, 5.0, 'COUNTER', N=N)
        T_110 = solve_cold_water_temperature(27.0, 5.0, 'COUNTER', N=N, flow_rate_pct=110.0)
        assert T_110 > T_100

    def test_solution_beyond_reach_of_first_guess(self, design_point):
        T_hot, T_cold, T_wb = design_point
        N = solve_liquid_gas_ratio(T_hot, T_cold, T_wb, 'COUNTER', simplified=False)
        T_near = solve_cold_water_temperature(20.0, 5.0, 'COUNTER', N=N, approach_guess=7.0)
        assert T_near > 20.0
        # The approach at 20 °C WB lies more than 2 K away from the first guess.
        assert T_near - 20.0 > DEFAULT_APPROACH_GUESS + 2.0
        T = solve_cold_water_temperature(20.0, 5.0, 'COUNTER', N=N)
        assert T == pytest.approx(T_near, abs=1e-3)

    @pytest.mark.parametrize('approach_guess', [0.5, 15.0, 29.0])
    def test_independent_of_approach_guess(self, design_point, approach_guess):
        T_hot, T_cold, T_wb = design_point
        N = solve_liquid_gas_ratio(T_hot, T_cold, T_wb, 'COUNTER', simplified=False)
        T = solve_cold_water_temperature(
            T_wb, T_hot - T_cold, 'COUNTER', N=N, approach_guess=approach_guess
        )
        assert T == pytest.approx(T_cold, abs=0.01)

    @pytest.mark.parametrize('R', [0.0, -3.0])
    def test_non_positive_range(self, R, flow):
        assert solve_cold_water_temperature(27.0, R, flow) == 0.0

    def test_degenerate_liquid_gas_ratio(self, flow):
        assert solve_cold_water_temperature(27.0, 5.0, flow, N=0.0) == 0.0

    def test_unknown_flow_configuration(self):
        with pytest.raises(ValueError):
            solve_cold_water_temperature(27.0, 5.0, 'PARALLEL')

    @pytest.mark.parametrize('T_wb', [10.0, 20.0, 27.0, 30.0])
    @pytest.mark.parametrize('N', [0.5, 1.0, 2.0])
    def test_terminates(self, T_wb, N, flow):
        T = solve_cold_water_temperature(T_wb, 5.0, flow, N=N)
        assert T == 0.0 or T > T_wb
