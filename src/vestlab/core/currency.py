"""
Display rounding for VestLab amounts.

Engine results are carried as plain floats. Only the projection engine rounds,
and only for presentation (prices and interest to cents, values to whole
units). Projection rounding sends a half toward positive infinity, so
``-0.5`` becomes ``0`` and ``1.005`` (stored as ``1.00499...``) becomes
``1.0``. ``quantize`` is the exact decimal alternative for callers that want
``x.5`` rounded the way it reads.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from enum import Enum


class RoundingPolicy(Enum):
    """Rounding policies for displayed amounts."""

    BANKERS = ROUND_HALF_EVEN
    HALF_UP = ROUND_HALF_UP


def quantize(
    value: float,
    decimals: int = 2,
    rounding: RoundingPolicy = RoundingPolicy.HALF_UP,
) -> float:
    """
    Round ``value`` to ``decimals`` places.

    The float is converted through ``repr`` so that ``2.675`` rounds the way
    it reads (to ``2.68``) rather than the way it is stored in binary.

    **Example:**
        ```python
        from vestlab.core.currency import quantize

        quantize(10.005)               # 10.01
        quantize(12345.5, decimals=0)  # 12346.0
        quantize(2.5, rounding=RoundingPolicy.BANKERS, decimals=0)  # 2.0
        ```
    """
    quantum = Decimal("1").scaleb(-decimals)  # e.g. 0.01 for 2 dp, 1 for 0 dp
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=rounding.value))


def round_cents(value: float) -> float:
    """Round to two decimals on the binary value, halves toward +inf."""
    return math.floor(value * 100 + 0.5) / 100


def round_whole(value: float) -> int:
    """Round to a whole unit, halves toward +inf (``-0.5`` -> ``0``)."""
    return math.floor(value + 0.5)
