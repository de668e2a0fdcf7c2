"""
Persona score computation: rules and aggregation.

Responsibilities:
- Compute risk appetite, loyalty and activity (each 1–100) from a SignalRecord.
- Each factor is weighted and capped on its own before summation.
- Expose the per-factor breakdown for logging and explainability.

No ML; fully explainable and deterministic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from persona_protocol.analysis_engine.signals import SignalRecord

MIN_SCORE = 1
MAX_SCORE = 100

RISK_BASE = 50.0
LOYALTY_BASE = 50.0
ACTIVITY_BASE = 30.0

# (weight per unit, cap) for each factor
RISK_SWAP = (5.0, 30.0)
RISK_NEW_PROTOCOL = (10.0, 20.0)
RISK_VOLATILE_LP = (8.0, 20.0)
RISK_BLUE_CHIP_HOLD = (10.0, 30.0)
RISK_ESTABLISHED_STAKE = (8.0, 20.0)

LOYALTY_HOLD_DAY = (0.1, 30.0)
LOYALTY_GOVERNANCE_VOTE = (8.0, 20.0)
LOYALTY_REPEATED_PROTOCOL = (5.0, 20.0)
LOYALTY_AIRDROP_FLIP = (15.0, 30.0)
LOYALTY_SHORT_HOLD_DAY = (0.5, 20.0)
SHORT_HOLD_DAYS = 7.0

ACTIVITY_TRANSACTION = (1.0, 40.0)
ACTIVITY_RECENT = (2.0, 30.0)
ACTIVITY_DORMANCY = (5.0, 20.0)
LONG_DORMANCY_DAYS = 90.0


@dataclass(frozen=True)
class Scores:
    """The three persona scores, each an integer in [MIN_SCORE, MAX_SCORE]."""

    risk_appetite: int
    loyalty: int
    activity: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "riskAppetite": self.risk_appetite,
            "loyalty": self.loyalty,
            "activity": self.activity,
        }


def _capped(units: float, factor: tuple[float, float]) -> float:
    weight, cap = factor
    return min(units * weight, cap)


def _finalize(score: float) -> int:
    """Round half up, then clamp to [MIN_SCORE, MAX_SCORE]."""
    rounded = math.floor(score + 0.5)
    return max(MIN_SCORE, min(MAX_SCORE, rounded))


def _risk_factors(signals: SignalRecord) -> dict[str, float]:
    volatile_lps = sum(1 for lp in signals.liquidity_provisions if lp.is_volatile)
    established = sum(1 for stake in signals.stable_stakes if stake.is_established)
    return {
        "swaps": _capped(signals.swap_frequency, RISK_SWAP),
        "new_protocols": _capped(signals.new_protocol_interactions, RISK_NEW_PROTOCOL),
        "volatile_liquidity": _capped(volatile_lps, RISK_VOLATILE_LP),
        "blue_chip_holdings": -_capped(len(signals.blue_chip_holdings), RISK_BLUE_CHIP_HOLD),
        "established_stakes": -_capped(established, RISK_ESTABLISHED_STAKE),
    }


def _loyalty_factors(signals: SignalRecord) -> dict[str, float]:
    durations = list(signals.hold_durations.values())
    total_hold_days = sum(durations)
    short_hold_days = sum(d for d in durations if d < SHORT_HOLD_DAYS)
    repeated = sum(1 for count in signals.protocol_frequency.values() if count > 1)
    return {
        "hold_days": _capped(total_hold_days, LOYALTY_HOLD_DAY),
        "governance_votes": _capped(len(signals.governance_votes), LOYALTY_GOVERNANCE_VOTE),
        "repeated_protocols": _capped(repeated, LOYALTY_REPEATED_PROTOCOL),
        "airdrop_flips": -_capped(len(signals.airdrop_flips), LOYALTY_AIRDROP_FLIP),
        "short_holds": -_capped(short_hold_days, LOYALTY_SHORT_HOLD_DAY),
    }


def _activity_factors(signals: SignalRecord) -> dict[str, float]:
    long_dormancy = sum(1 for days in signals.dormancy_periods if days > LONG_DORMANCY_DAYS)
    return {
        "transactions": _capped(signals.total_transactions, ACTIVITY_TRANSACTION),
        "recent_activity": _capped(signals.recent_activity_count, ACTIVITY_RECENT),
        "dormancy": -_capped(long_dormancy, ACTIVITY_DORMANCY),
    }


def calculate_risk_appetite(signals: SignalRecord) -> int:
    """
    Risk appetite (1–100). Higher means riskier behavior.

    Swaps, new protocols and volatile liquidity raise it; blue-chip holds and
    stablecoin/blue-chip stakes on established protocols lower it.
    """
    return _finalize(RISK_BASE + sum(_risk_factors(signals).values()))


def calculate_loyalty(signals: SignalRecord) -> int:
    """
    Loyalty (1–100). Higher means longer-term, committed behavior.

    Hold days, governance votes and repeated protocol use raise it; airdrop
    flips and short holds (< 7 days per token) lower it.
    """
    return _finalize(LOYALTY_BASE + sum(_loyalty_factors(signals).values()))


def calculate_activity(signals: SignalRecord) -> int:
    """Activity (1–100): transaction count and recent activity raise it; long dormancy lowers it."""
    return _finalize(ACTIVITY_BASE + sum(_activity_factors(signals).values()))


def compute_scores(signals: SignalRecord) -> Scores:
    return Scores(
        risk_appetite=calculate_risk_appetite(signals),
        loyalty=calculate_loyalty(signals),
        activity=calculate_activity(signals),
    )


def score_breakdown(signals: SignalRecord) -> dict[str, dict[str, float]]:
    """
    Capped contribution of every factor, keyed by score then factor.

    Includes the base under "base". Penalties are negative. Unrounded, so the
    sum of a score's entries is its pre-clamp value.
    """
    return {
        "risk_appetite": {"base": RISK_BASE, **_risk_factors(signals)},
        "loyalty": {"base": LOYALTY_BASE, **_loyalty_factors(signals)},
        "activity": {"base": ACTIVITY_BASE, **_activity_factors(signals)},
    }
