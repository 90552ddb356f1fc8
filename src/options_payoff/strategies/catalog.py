"""Catalog of the 45 predefined option strategy templates.

Strikes are fixed percentages of the reference spot and premiums are static
illustrative values, so every template can be generated for any spot.
"""

from __future__ import annotations

import difflib

from options_payoff.options.types import LegAction
from options_payoff.strategies.templates import (
    StrategyCategory,
    StrategyTemplate,
    call,
    put,
)

BUY = LegAction.BUY
SELL = LegAction.SELL

_BULL = StrategyCategory.BULLISH
_BEAR = StrategyCategory.BEARISH
_VOL = StrategyCategory.VOLATILITY
_INCOME = StrategyCategory.INCOME
_HEDGE = StrategyCategory.HEDGE


CATALOG: tuple[StrategyTemplate, ...] = (
    # --- Bullish ---
    StrategyTemplate(
        1, "Long Call", _BULL,
        "Naked long call. Simple directional bet on a rally with limited risk.",
        (call(BUY, 1.00, 1, 2.5),),
    ),
    StrategyTemplate(
        2, "Short Put (Naked Put)", _BULL,
        "Naked short put. Takes on the obligation to buy the underlying; positive theta.",
        (put(SELL, 0.95, 1, 2.0),),
    ),
    StrategyTemplate(
        3, "Bull Call Spread", _BULL,
        "Buy an ATM call, sell an OTM call. Cheaper entry, capped profit.",
        (call(BUY, 1.00, 1, 5.0), call(SELL, 1.05, 1, 2.0)),
    ),
    StrategyTemplate(
        4, "Bull Put Spread", _BULL,
        "Credit spread: sell an ATM/OTM put, buy a lower OTM put.",
        (put(SELL, 0.95, 1, 3.0), put(BUY, 0.90, 1, 1.0)),
    ),
    StrategyTemplate(
        5, "Call Ratio Spread (1x2)", _BULL,
        "Buy 1 ATM call, sell 2 OTM calls. Profits on a moderate rally, exposed to a sharp one.",
        (call(BUY, 1.00, 1, 5.0), call(SELL, 1.05, 2, 2.0)),
    ),
    StrategyTemplate(
        6, "Risk Reversal (Collar)", _BULL,
        "Finance an OTM call with an OTM put sale. Zero-cost collar.",
        (call(BUY, 1.05, 1, 3.0), put(SELL, 0.95, 1, 3.0)),
    ),
    StrategyTemplate(
        7, "Call Backspread", _BULL,
        "Sell 1 ATM call, buy 2 OTM calls. Profits from a strong move, mostly upward.",
        (call(SELL, 1.00, 1, 5.0), call(BUY, 1.05, 2, 2.0)),
    ),
    StrategyTemplate(
        8, "Bull Call Ladder", _BULL,
        "Ratio variant: buy 1 ATM call, sell 1 OTM call and 1 further OTM call.",
        (call(BUY, 1.00, 1, 5.0), call(SELL, 1.05, 1, 2.0), call(SELL, 1.10, 1, 1.0)),
    ),
    StrategyTemplate(
        9, "Synthetic Long Stock", _BULL,
        "Buy an ATM call and sell an ATM put. Replicates holding the underlying.",
        (call(BUY, 1.00, 1, 4.0), put(SELL, 1.00, 1, 4.0)),
    ),
    # --- Bearish ---
    StrategyTemplate(
        10, "Long Put", _BEAR,
        "Naked long put. Directional bet on a decline or portfolio insurance.",
        (put(BUY, 1.00, 1, 2.5),),
    ),
    StrategyTemplate(
        11, "Short Call (Naked Call)", _BEAR,
        "Naked short call. Unlimited risk on a rally; positive theta.",
        (call(SELL, 1.05, 1, 2.0),),
    ),
    StrategyTemplate(
        12, "Bear Put Spread", _BEAR,
        "Buy an ATM put, sell an OTM put.",
        (put(BUY, 1.00, 1, 5.0), put(SELL, 0.95, 1, 2.0)),
    ),
    StrategyTemplate(
        13, "Bear Call Spread", _BEAR,
        "Credit spread: sell an ATM/OTM call, buy a higher OTM call.",
        (call(SELL, 1.05, 1, 3.0), call(BUY, 1.10, 1, 1.0)),
    ),
    StrategyTemplate(
        14, "Put Ratio Spread (1x2)", _BEAR,
        "Buy 1 ATM put, sell 2 OTM puts. Profits on a moderate decline.",
        (put(BUY, 1.00, 1, 5.0), put(SELL, 0.90, 2, 1.5)),
    ),
    StrategyTemplate(
        15, "Put Backspread", _BEAR,
        "Sell 1 ATM put, buy 2 OTM puts. Hedge against a severe crash.",
        (put(SELL, 1.00, 1, 5.0), put(BUY, 0.90, 2, 2.0)),
    ),
    StrategyTemplate(
        16, "Bear Put Ladder", _BEAR,
        "Buy 1 ATM put, sell 1 OTM put and 1 further OTM put.",
        (put(BUY, 1.00, 1, 5.0), put(SELL, 0.95, 1, 2.0), put(SELL, 0.90, 1, 1.0)),
    ),
    StrategyTemplate(
        17, "Synthetic Short Stock", _BEAR,
        "Sell an ATM call and buy an ATM put. Replicates a short sale of the underlying.",
        (call(SELL, 1.00, 1, 4.0), put(BUY, 1.00, 1, 4.0)),
    ),
    StrategyTemplate(
        18, "Synthetic Put", _BEAR,
        "Long put built from a long OTM call on top of a synthetic short stock.",
        (call(BUY, 1.05, 1, 2.0), call(SELL, 1.00, 1, 4.0), put(BUY, 1.00, 1, 4.0)),
    ),
    # --- Volatility ---
    StrategyTemplate(
        19, "Long Straddle", _VOL,
        "Buy a call and a put at the same strike. Bets on a large move either way.",
        (call(BUY, 1.00, 1, 4.0), put(BUY, 1.00, 1, 4.0)),
    ),
    StrategyTemplate(
        20, "Long Strangle", _VOL,
        "Buy an OTM put and an OTM call. Cheaper than a straddle, needs a bigger move.",
        (put(BUY, 0.95, 1, 2.5), call(BUY, 1.05, 1, 2.5)),
    ),
    StrategyTemplate(
        21, "Strip", _VOL,
        "Bearish straddle: 2 long puts + 1 long call.",
        (put(BUY, 1.00, 2, 4.0), call(BUY, 1.00, 1, 4.0)),
    ),
    StrategyTemplate(
        22, "Strap", _VOL,
        "Bullish straddle: 2 long calls + 1 long put.",
        (call(BUY, 1.00, 2, 4.0), put(BUY, 1.00, 1, 4.0)),
    ),
    StrategyTemplate(
        23, "Guts", _VOL,
        "Buy an ITM call and an ITM put. Expensive, high immediate delta.",
        (call(BUY, 0.95, 1, 6.0), put(BUY, 1.05, 1, 6.0)),
    ),
    StrategyTemplate(
        24, "Short Iron Condor (Reverse)", _VOL,
        "Debit structure betting on a breakout: buy the body, sell the wings.",
        (
            put(SELL, 0.90, 1, 1.0),
            put(BUY, 0.95, 1, 3.0),
            call(BUY, 1.05, 1, 3.0),
            call(SELL, 1.10, 1, 1.0),
        ),
    ),
    StrategyTemplate(
        25, "Short Butterfly (Call)", _VOL,
        "Sell the wings, buy the body. Profits when price runs away from the center.",
        (call(SELL, 0.95, 1, 6.0), call(BUY, 1.00, 2, 3.5), call(SELL, 1.05, 1, 1.5)),
    ),
    StrategyTemplate(
        26, "Short Butterfly (Put)", _VOL,
        "Put version: sell the wings, buy the body.",
        (put(SELL, 0.95, 1, 6.0), put(BUY, 1.00, 2, 3.5), put(SELL, 1.05, 1, 1.5)),
    ),
    StrategyTemplate(
        27, "Double Ratio", _VOL,
        "Call 1x2 plus put 1x2 ratio spreads. Bets on stability with open tails.",
        (
            call(BUY, 1.02, 1, 3.0),
            call(SELL, 1.05, 2, 1.5),
            put(BUY, 0.98, 1, 3.0),
            put(SELL, 0.95, 2, 1.5),
        ),
    ),
    # --- Income ---
    StrategyTemplate(
        28, "Short Straddle", _INCOME,
        "Sell a call and a put at the same strike. Maximum profit if price stays put.",
        (call(SELL, 1.00, 1, 4.0), put(SELL, 1.00, 1, 4.0)),
    ),
    StrategyTemplate(
        29, "Short Strangle", _INCOME,
        "Sell an OTM put and an OTM call. High win rate, unlimited tail risk.",
        (put(SELL, 0.90, 1, 2.0), call(SELL, 1.10, 1, 2.0)),
    ),
    StrategyTemplate(
        30, "Iron Condor", _INCOME,
        "Short strangle with long wings capping the risk (bull put + bear call).",
        (
            put(BUY, 0.90, 1, 1.0),
            put(SELL, 0.95, 1, 3.0),
            call(SELL, 1.05, 1, 3.0),
            call(BUY, 1.10, 1, 1.0),
        ),
    ),
    StrategyTemplate(
        31, "Iron Butterfly", _INCOME,
        "Short ATM straddle with long wings capping the risk.",
        (
            put(BUY, 0.95, 1, 2.0),
            put(SELL, 1.00, 1, 5.0),
            call(SELL, 1.00, 1, 5.0),
            call(BUY, 1.05, 1, 2.0),
        ),
    ),
    StrategyTemplate(
        32, "Butterfly (Call)", _INCOME,
        "Classic butterfly. Maximum profit at the body, limited risk.",
        (call(BUY, 0.95, 1, 6.0), call(SELL, 1.00, 2, 3.5), call(BUY, 1.05, 1, 1.5)),
    ),
    StrategyTemplate(
        33, "Butterfly (Put)", _INCOME,
        "Put butterfly with the same payoff profile as the call butterfly.",
        (put(BUY, 0.95, 1, 1.5), put(SELL, 1.00, 2, 3.5), put(BUY, 1.05, 1, 6.0)),
    ),
    StrategyTemplate(
        34, "Broken Wing Butterfly (Call)", _INCOME,
        "Asymmetric butterfly; the far wing is moved out to collect a credit.",
        (call(BUY, 0.95, 1, 6.0), call(SELL, 1.00, 2, 3.5), call(BUY, 1.10, 1, 0.5)),
    ),
    StrategyTemplate(
        35, "Broken Wing Butterfly (Put)", _INCOME,
        "Asymmetric put butterfly, usually opened for a credit.",
        (put(BUY, 0.90, 1, 0.5), put(SELL, 1.00, 2, 3.5), put(BUY, 1.05, 1, 6.0)),
    ),
    StrategyTemplate(
        36, "Christmas Tree (Call)", _INCOME,
        "Butterfly variant with progressive strikes (1-1-1 instead of 1-2-1).",
        (call(BUY, 0.95, 1, 6.0), call(SELL, 1.00, 1, 3.5), call(SELL, 1.05, 1, 1.5)),
    ),
    StrategyTemplate(
        37, "Christmas Tree (Put)", _INCOME,
        "Put butterfly variant with progressive strikes.",
        (put(SELL, 0.95, 1, 1.5), put(SELL, 1.00, 1, 3.5), put(BUY, 1.05, 1, 6.0)),
    ),
    StrategyTemplate(
        38, "Condor", _INCOME,
        "Like the iron condor but built from calls only.",
        (
            call(BUY, 0.90, 1, 9.0),
            call(SELL, 0.95, 1, 6.0),
            call(SELL, 1.05, 1, 2.0),
            call(BUY, 1.10, 1, 0.5),
        ),
    ),
    # --- Hedge / exotic ---
    StrategyTemplate(
        39, "Jade Lizard", _HEDGE,
        "Short OTM put plus a bear call spread. Large credit with no upside risk.",
        (put(SELL, 0.90, 1, 4.0), call(SELL, 1.05, 1, 2.5), call(BUY, 1.10, 1, 1.0)),
    ),
    StrategyTemplate(
        40, "Twisted Sister (Call Lizard)", _HEDGE,
        "Mirror of the jade lizard: short OTM call plus a bull put spread.",
        (call(SELL, 1.10, 1, 2.0), put(SELL, 0.95, 1, 3.0), put(BUY, 0.90, 1, 1.0)),
    ),
    StrategyTemplate(
        41, "Seagull", _HEDGE,
        "Bull call spread financed by a short put.",
        (call(BUY, 1.00, 1, 5.0), call(SELL, 1.05, 1, 2.0), put(SELL, 0.90, 1, 3.0)),
    ),
    StrategyTemplate(
        42, "Box Spread", _HEDGE,
        "Bull call spread plus bear put spread. Flat payoff (synthetic bond).",
        (
            call(BUY, 0.95, 1, 6.0),
            call(SELL, 1.05, 1, 2.0),
            put(BUY, 1.05, 1, 6.0),
            put(SELL, 0.95, 1, 2.0),
        ),
    ),
    StrategyTemplate(
        43, "Fence", _HEDGE,
        "Range structure: sell an OTM put, buy an ATM call, sell an OTM call.",
        (put(SELL, 0.90, 1, 3.0), call(BUY, 1.00, 1, 5.0), call(SELL, 1.10, 1, 1.0)),
    ),
    StrategyTemplate(
        44, "Ratio Call Write", _HEDGE,
        "Synthetic long stock plus 2 short OTM calls (leveraged covered call).",
        (call(BUY, 1.00, 1, 4.0), put(SELL, 1.00, 1, 4.0), call(SELL, 1.05, 2, 2.0)),
    ),
    StrategyTemplate(
        45, "Synthetic Collar", _HEDGE,
        "Synthetic long stock (long ATM call + short ATM put) with a long put and a short call.",
        (
            call(BUY, 1.00, 1, 4.0),
            put(SELL, 1.00, 1, 4.0),
            put(BUY, 0.90, 1, 1.5),
            call(SELL, 1.10, 1, 1.0),
        ),
    ),
)


def _index() -> dict[str, StrategyTemplate]:
    index: dict[str, StrategyTemplate] = {}
    for template in CATALOG:
        for key in (template.name, template.label, template.slug, str(template.number)):
            index[key.strip().lower()] = template
    return index


_INDEX = _index()


def get_template(name: str | int) -> StrategyTemplate:
    """Look up a template by name, `"N. Name"` label, slug or number.

    Matching is case-insensitive. Unknown names raise `KeyError` listing the
    closest known names.
    """
    key = str(name).strip().lower()
    try:
        return _INDEX[key]
    except KeyError:
        names = [t.name for t in CATALOG]
        close = difflib.get_close_matches(str(name), names, n=3, cutoff=0.5)
        hint = f" Did you mean: {', '.join(close)}?" if close else ""
        raise KeyError(f"Unknown strategy template: {name!r}.{hint}") from None


def list_templates(
    category: StrategyCategory | str | None = None,
) -> tuple[StrategyTemplate, ...]:
    """All templates in catalog order, optionally filtered by category."""
    if category is None:
        return CATALOG
    wanted = StrategyCategory(str(category).lower())
    return tuple(t for t in CATALOG if t.category == wanted)
