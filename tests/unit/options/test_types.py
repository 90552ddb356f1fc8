import math

import pytest

from options_payoff.options import (
    LegAction,
    LegValidationError,
    OptionLeg,
    OptionType,
    PriceMarkers,
    PriceRangeError,
    PriceWindow,
    Strategy,
)


def test_option_leg_normalizes_boundary_labels():
    leg = OptionLeg(option_type="Call", action="Sell", strike=100, quantity=2, premium=1)

    assert leg.option_type is OptionType.CALL
    assert leg.action is LegAction.SELL
    assert isinstance(leg.strike, float)
    assert leg.is_short


@pytest.mark.parametrize(
    ("field", "kwargs"),
    [
        ("strike", {"strike": 0.0}),
        ("strike", {"strike": -5.0}),
        ("quantity", {"quantity": 0.0}),
        ("premium", {"premium": -0.01}),
        ("strike", {"strike": math.nan}),
        ("premium", {"premium": math.inf}),
        ("quantity", {"quantity": "1"}),
        ("strike", {"strike": True}),
        ("option_type", {"option_type": "straddle"}),
        ("action", {"action": "hold"}),
    ],
)
def test_option_leg_rejects_invalid_fields(field, kwargs):
    base = {
        "option_type": OptionType.PUT,
        "action": LegAction.BUY,
        "strike": 100.0,
        "quantity": 1.0,
        "premium": 2.0,
    }
    base.update(kwargs)

    with pytest.raises(LegValidationError) as exc_info:
        OptionLeg(**base)

    assert exc_info.value.field == field
    assert field in str(exc_info.value)


def test_option_leg_allows_fractional_quantity_and_zero_premium():
    leg = OptionLeg(OptionType.PUT, LegAction.BUY, strike=50.0, quantity=0.5, premium=0.0)
    assert leg.quantity == pytest.approx(0.5)
    assert leg.premium == 0.0


def test_with_changes_returns_new_validated_leg():
    leg = OptionLeg(OptionType.CALL, LegAction.BUY, strike=100.0, premium=2.5)

    moved = leg.with_changes(strike=105.0)

    assert moved.strike == 105.0
    assert leg.strike == 100.0
    with pytest.raises(LegValidationError):
        leg.with_changes(quantity=-1)


def test_leg_dict_roundtrip_uses_saved_shape():
    leg = OptionLeg(OptionType.PUT, LegAction.SELL, strike=95.0, quantity=1, premium=2.0)

    data = leg.to_dict()

    assert data == {
        "type": "Put",
        "action": "Sell",
        "strike": 95.0,
        "quantity": 1.0,
        "price": 2.0,
    }
    assert OptionLeg.from_mapping(data) == leg


def test_from_mapping_accepts_premium_alias_and_reports_missing_fields():
    leg = OptionLeg.from_mapping(
        {"option_type": "P", "action": "short", "strike": 90, "premium": 1.5}
    )
    assert leg.premium == 1.5
    assert leg.quantity == 1.0

    with pytest.raises(LegValidationError, match="strike is required"):
        OptionLeg.from_mapping({"type": "Call", "action": "Buy"})


def test_strategy_from_legs_tags_offending_leg_index():
    legs = [
        {"type": "Call", "action": "Buy", "strike": 100, "quantity": 1, "price": 5},
        {"type": "Call", "action": "Sell", "strike": 105, "quantity": 0, "price": 2},
    ]

    with pytest.raises(LegValidationError) as exc_info:
        Strategy.from_legs(legs)

    assert exc_info.value.index == 1
    assert exc_info.value.field == "quantity"
    assert "leg[1].quantity" in str(exc_info.value)


def test_strategy_exposes_strikes_and_short_flag():
    strategy = Strategy.from_legs(
        [
            OptionLeg(OptionType.CALL, LegAction.BUY, 105.0),
            OptionLeg(OptionType.PUT, LegAction.BUY, 95.0),
            OptionLeg(OptionType.CALL, LegAction.BUY, 105.0),
        ]
    )

    assert len(strategy) == 3
    assert strategy.strikes == (95.0, 105.0)
    assert strategy.has_short_legs is False
    assert Strategy().legs == ()


def test_price_window_around_spot_is_inclusive():
    window = PriceWindow.around(100.0)
    prices = window.prices()

    assert len(prices) == 101
    assert prices[0] == pytest.approx(70.0)
    assert prices[-1] == pytest.approx(130.0)
    assert window.step == pytest.approx(0.6)
    assert all(b > a for a, b in zip(prices, prices[1:]))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lower": 100.0, "upper": 100.0},
        {"lower": 120.0, "upper": 80.0},
        {"lower": -1.0, "upper": 80.0},
        {"lower": 0.0, "upper": math.inf},
        {"lower": 10.0, "upper": 20.0, "samples": 1},
        {"lower": 10.0, "upper": 20.0, "samples": 50.5},
        {"lower": 10.0, "upper": 20.0, "samples": True},
    ],
)
def test_price_window_rejects_degenerate_ranges(kwargs):
    with pytest.raises(PriceRangeError):
        PriceWindow(**kwargs)


def test_price_window_around_rejects_non_positive_spot():
    with pytest.raises(PriceRangeError):
        PriceWindow.around(0.0)


def test_price_window_contains_and_markers_dict():
    window = PriceWindow(lower=90.0, upper=110.0, samples=5)

    assert window.prices() == (90.0, 95.0, 100.0, 105.0, 110.0)
    assert window.contains(90.0)
    assert window.contains(110.0)
    assert not window.contains(110.01)

    markers = PriceMarkers(reference_spot=100.0, breakevens=(95.5,))
    assert markers.to_dict() == {"referenceSpot": 100.0, "breakevens": [95.5]}
