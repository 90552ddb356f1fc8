import pytest

from options_payoff.options import (
    UNBOUNDED,
    BoundaryMethod,
    LegAction,
    Metrics,
    OptionLeg,
    OptionType,
    PayoffError,
    PayoffPoint,
    PriceWindow,
    compute_metrics,
    compute_metrics_analytic,
    exact_breakevens,
    find_breakevens,
    is_unbounded,
    net_cost,
    payoff_curve,
    tail_slopes,
)

CALL, PUT = OptionType.CALL, OptionType.PUT
BUY, SELL = LegAction.BUY, LegAction.SELL


def _leg(option_type, action, strike, premium, quantity=1.0):
    return OptionLeg(option_type, action, strike, quantity, premium)


LONG_CALL = [_leg(CALL, BUY, 100.0, 2.5)]
BULL_CALL_SPREAD = [_leg(CALL, BUY, 100.0, 5.0), _leg(CALL, SELL, 105.0, 2.0)]
SHORT_STRADDLE = [_leg(CALL, SELL, 100.0, 4.0), _leg(PUT, SELL, 100.0, 4.0)]


def test_net_cost_debit_and_credit():
    assert net_cost([_leg(CALL, BUY, 100.0, 2.5)]) == pytest.approx(2.5)
    assert net_cost([_leg(CALL, SELL, 100.0, 2.5)]) == pytest.approx(-2.5)
    assert net_cost([_leg(PUT, SELL, 90.0, 1.5, quantity=2)]) == pytest.approx(-3.0)
    assert net_cost([]) == 0.0


def test_long_call_metrics_over_default_window():
    window = PriceWindow.around(100.0)
    metrics = compute_metrics(LONG_CALL, payoff_curve(LONG_CALL, window))

    assert metrics.cost == pytest.approx(2.5)
    assert metrics.max_loss == pytest.approx(-2.5)
    # still rising at the top of the window
    assert metrics.max_profit is UNBOUNDED
    assert len(metrics.breakevens) == 1
    assert metrics.breakevens[0] == pytest.approx(102.5, abs=1.0)


def test_long_call_profit_unbounded_once_window_reaches_threshold():
    points = payoff_curve(LONG_CALL, [50.0, 100.0, 150.0, 200_000.0])
    metrics = compute_metrics(LONG_CALL, points)

    assert metrics.max_profit is UNBOUNDED
    assert metrics.max_loss == pytest.approx(-2.5)


def test_bull_call_spread_metrics():
    window = PriceWindow.around(100.0)
    metrics = compute_metrics(BULL_CALL_SPREAD, payoff_curve(BULL_CALL_SPREAD, window))

    assert metrics.cost == pytest.approx(3.0)
    assert metrics.max_profit == pytest.approx(2.0)
    assert metrics.max_loss == pytest.approx(-3.0)
    assert len(metrics.breakevens) == 1
    assert metrics.breakevens[0] == pytest.approx(103.0, abs=1.0)


def test_short_straddle_loss_unbounded_with_wide_sampling():
    points = payoff_curve(SHORT_STRADDLE, [50.0, 100.0, 150.0, 300_000.0])
    metrics = compute_metrics(SHORT_STRADDLE, points)

    assert metrics.cost == pytest.approx(-8.0)
    assert metrics.max_profit == pytest.approx(8.0)
    assert metrics.max_loss is UNBOUNDED


def test_threshold_is_configurable():
    points = payoff_curve(BULL_CALL_SPREAD, PriceWindow.around(100.0))

    assert compute_metrics(BULL_CALL_SPREAD, points).max_loss == pytest.approx(-3.0)
    tight = compute_metrics(BULL_CALL_SPREAD, points, threshold=2.5)
    assert tight.max_loss is UNBOUNDED
    assert tight.max_profit == pytest.approx(2.0)


def test_zero_leg_metrics():
    points = payoff_curve([], PriceWindow.around(100.0))
    metrics = compute_metrics([], points)

    assert metrics == Metrics(cost=0.0, max_profit=0.0, max_loss=0.0, breakevens=())


def test_compute_metrics_rejects_empty_curve():
    with pytest.raises(PayoffError):
        compute_metrics(LONG_CALL, [])


def test_find_breakevens_records_second_point_rounded():
    points = [
        PayoffPoint(1.0, -1.0),
        PayoffPoint(2.004, 0.0),
        PayoffPoint(3.0, 1.0),
        PayoffPoint(4.126, -0.5),
    ]

    # the crossing into the last sample is interpolated, not snapped to the edge
    assert find_breakevens(points) == (2.0, 3.75)


def test_find_breakevens_drops_root_on_the_last_sample():
    points = [PayoffPoint(1.0, -1.0), PayoffPoint(2.0, 1.0), PayoffPoint(3.0, 0.0)]
    assert find_breakevens(points) == (2.0,)


def test_find_breakevens_ignores_curves_without_sign_change():
    points = [PayoffPoint(float(p), 0.0) for p in range(5)]
    assert find_breakevens(points) == ()


def test_breakevens_strictly_increasing_inside_window():
    window = PriceWindow.around(100.0)
    metrics = compute_metrics(SHORT_STRADDLE, payoff_curve(SHORT_STRADDLE, window))

    assert len(metrics.breakevens) == 2
    assert all(b > a for a, b in zip(metrics.breakevens, metrics.breakevens[1:]))
    assert all(window.lower < b < window.upper for b in metrics.breakevens)
    assert metrics.breakevens[0] == pytest.approx(92.0, abs=1.0)
    assert metrics.breakevens[1] == pytest.approx(108.0, abs=1.0)


@pytest.mark.parametrize(
    "legs",
    [SHORT_STRADDLE, [_leg(CALL, SELL, 105.0, 2.0)]],
    ids=["short-straddle", "naked-call"],
)
def test_short_call_exposure_unbounded_over_default_window(legs):
    window = PriceWindow.around(100.0)
    metrics = compute_metrics(legs, payoff_curve(legs, window))

    assert metrics.max_loss is UNBOUNDED
    assert not is_unbounded(metrics.max_profit)


def test_offsetting_fractional_calls_stay_bounded():
    legs = [
        _leg(CALL, BUY, 100.0, 1.0, quantity=0.1),
        _leg(CALL, BUY, 100.0, 1.0, quantity=0.2),
        _leg(CALL, SELL, 100.0, 1.0, quantity=0.3),
    ]
    metrics = compute_metrics(legs, payoff_curve(legs, PriceWindow.around(100.0)))

    assert metrics.max_profit == pytest.approx(0.0)
    assert metrics.max_loss == pytest.approx(0.0)


def test_breakeven_near_upper_edge_is_interpolated_inside_window():
    legs = [_leg(CALL, BUY, 127.0, 2.5)]
    window = PriceWindow.around(100.0)

    breakevens = compute_metrics(legs, payoff_curve(legs, window)).breakevens

    assert breakevens == (129.5,)
    assert all(window.lower < b < window.upper for b in breakevens)
    assert compute_metrics_analytic(legs, window).breakevens == (129.5,)


def test_exact_breakevens_exclude_roots_on_the_window_edges():
    at_upper = [_leg(CALL, BUY, 127.0, 3.0)]
    at_lower = [_leg(PUT, BUY, 73.0, 3.0)]

    assert exact_breakevens(at_upper, 70.0, 130.0) == ()
    assert exact_breakevens(at_lower, 70.0, 130.0) == ()


def test_metrics_are_deterministic():
    window = PriceWindow.around(100.0)
    first = compute_metrics(SHORT_STRADDLE, payoff_curve(SHORT_STRADDLE, window))
    second = compute_metrics(SHORT_STRADDLE, payoff_curve(SHORT_STRADDLE, window))
    assert first == second


def test_metrics_to_dict_and_back():
    metrics = Metrics(cost=-8.0, max_profit=8.0, max_loss=UNBOUNDED, breakevens=(92.0, 108.0))

    data = metrics.to_dict()

    assert data == {
        "cost": -8.0,
        "maxProfit": 8.0,
        "maxLoss": "unbounded",
        "breakevens": [92.0, 108.0],
    }
    assert Metrics.from_dict(data) == metrics


def test_metrics_from_dict_accepts_legacy_label():
    metrics = Metrics.from_dict(
        {"cost": 2.5, "maxProfit": "Ilimitado", "maxLoss": -2.5, "breakevens": [103.0]}
    )
    assert is_unbounded(metrics.max_profit)
    assert metrics.max_loss == -2.5

    with pytest.raises(ValueError, match="maxLoss"):
        Metrics.from_dict({"cost": 0, "maxProfit": 0, "maxLoss": "lots"})


def test_tail_slopes():
    assert tail_slopes(LONG_CALL) == (0.0, 1.0)
    assert tail_slopes(SHORT_STRADDLE) == (1.0, -1.0)
    assert tail_slopes(BULL_CALL_SPREAD) == (0.0, 0.0)


def test_exact_breakevens_solve_segment_roots():
    assert exact_breakevens(LONG_CALL, 70.0, 130.0) == (102.5,)
    assert exact_breakevens(BULL_CALL_SPREAD, 70.0, 130.0) == (103.0,)
    assert exact_breakevens(SHORT_STRADDLE, 70.0, 130.0) == (92.0, 108.0)


def test_exact_breakevens_skip_touch_points_and_outside_roots():
    # max profit of exactly zero at the strike: touches, never crosses
    touching = [_leg(CALL, SELL, 100.0, 0.0), _leg(PUT, SELL, 100.0, 0.0)]
    assert exact_breakevens(touching, 70.0, 130.0) == ()
    assert exact_breakevens(SHORT_STRADDLE, 95.0, 105.0) == ()


def test_analytic_metrics_resolve_bounds_without_wide_window():
    window = PriceWindow.around(100.0)

    long_call = compute_metrics_analytic(LONG_CALL, window)
    assert long_call.method is BoundaryMethod.ANALYTIC
    assert long_call.max_profit is UNBOUNDED
    assert long_call.max_loss == pytest.approx(-2.5)
    assert long_call.breakevens == (102.5,)

    straddle = compute_metrics_analytic(SHORT_STRADDLE, window)
    assert straddle.max_profit == pytest.approx(8.0)
    assert straddle.max_loss is UNBOUNDED

    spread = compute_metrics_analytic(BULL_CALL_SPREAD, window)
    assert spread.max_profit == pytest.approx(2.0)
    assert spread.max_loss == pytest.approx(-3.0)
    assert spread.breakevens == (103.0,)


def test_analytic_short_put_loss_is_bounded_by_zero_spot():
    short_put = [_leg(PUT, SELL, 95.0, 2.0)]
    metrics = compute_metrics_analytic(short_put, PriceWindow.around(100.0))

    assert metrics.max_profit == pytest.approx(2.0)
    assert metrics.max_loss == pytest.approx(-93.0)


def test_analytic_zero_legs():
    metrics = compute_metrics_analytic([], PriceWindow.around(100.0))
    assert metrics.cost == 0.0
    assert metrics.max_profit == 0.0
    assert metrics.max_loss == 0.0
    assert metrics.breakevens == ()
