"""
Tests for display rounding.
"""

from vestlab.core.currency import RoundingPolicy, quantize, round_cents, round_whole


def test_quantize_rounds_decimal_halves_up():
    assert quantize(2.675) == 2.68
    assert quantize(10.005) == 10.01


def test_round_cents_uses_binary_value():
    assert round_cents(46.273255) == 46.27
    # 1.005 is stored as 1.00499...
    assert round_cents(1.005) == 1.0
    assert round_cents(2.5) == 2.5


def test_round_whole_returns_int():
    value = round_whole(12345.5)
    assert value == 12346
    assert isinstance(value, int)


def test_bankers_policy():
    assert quantize(2.5, decimals=0, rounding=RoundingPolicy.BANKERS) == 2.0
    assert quantize(3.5, decimals=0, rounding=RoundingPolicy.BANKERS) == 4.0


def test_negative_half_rounds_toward_positive():
    assert round_whole(-0.5) == 0
    assert round_whole(-1.5) == -1
    assert round_whole(-1.4) == -1
    assert round_whole(-1.6) == -2
    assert round_cents(-0.125) == -0.12
