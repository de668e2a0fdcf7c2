"""
Behavioral signal extraction from wallet transaction history.

Converts a list of validated transactions (for one wallet) into a flat,
immutable SignalRecord: counts, per-token hold durations, protocol usage,
airdrop flips and dormancy gaps. No scoring logic; output feeds the score
engine and the persona composer.

The evaluation instant ("now") is an explicit argument so a run is
reproducible with a fixed clock.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any

from persona_protocol.analysis_engine.models import (
    SECONDS_PER_DAY,
    UNKNOWN,
    Transaction,
    TransactionType,
    parse_timestamp,
)
from persona_protocol.persona_logging import get_logger

logger = get_logger(__name__)

BLUE_CHIP_TOKENS = frozenset({"ETH", "WETH", "WBTC", "BTC"})
STABLECOINS = frozenset({"USDC", "USDT", "DAI", "BUSD"})
ESTABLISHED_PROTOCOLS = frozenset({"Uniswap", "Aave", "Lido", "Compound", "MakerDAO"})
# Liquidity legs in this set are not considered volatile.
NON_VOLATILE_TOKENS = STABLECOINS | BLUE_CHIP_TOKENS

RECENT_ACTIVITY_DAYS = 30
DORMANCY_THRESHOLD_DAYS = 90
AIRDROP_FLIP_WINDOW = timedelta(hours=24)

# Sort key for transactions whose timestamp cannot be parsed: they go first.
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class LiquidityProvision:
    token1: str
    token2: str
    protocol: str
    is_volatile: bool
    """True unless both legs are stablecoins or blue chips."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "token1": self.token1,
            "token2": self.token2,
            "protocol": self.protocol,
            "is_volatile": self.is_volatile,
        }


@dataclass(frozen=True)
class TokenHolding:
    token: str
    duration_days: float
    is_blue_chip: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "duration_days": self.duration_days,
            "is_blue_chip": self.is_blue_chip,
        }


@dataclass(frozen=True)
class StakeInfo:
    token: str
    protocol: str
    is_established: bool

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "protocol": self.protocol, "is_established": self.is_established}


@dataclass(frozen=True)
class GovernanceVote:
    protocol: str
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        return {"protocol": self.protocol, "timestamp": self.timestamp}


@dataclass(frozen=True)
class AirdropFlip:
    """An airdropped token swapped away within AIRDROP_FLIP_WINDOW."""

    token: str
    received_at: str
    swapped_at: str
    time_delta: timedelta

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "received_at": self.received_at,
            "swapped_at": self.swapped_at,
            "time_delta_seconds": self.time_delta.total_seconds(),
        }


@dataclass(frozen=True)
class SignalRecord:
    """
    Behavioral signals for one wallet over the supplied transactions.

    Produced once per analysis run. Sequences are tuples and maps are
    read-only so no later stage can mutate them.
    """

    swap_frequency: int
    new_protocol_interactions: int
    liquidity_provisions: tuple[LiquidityProvision, ...]
    blue_chip_holdings: tuple[TokenHolding, ...]
    stable_stakes: tuple[StakeInfo, ...]
    hold_durations: Mapping[str, float]
    """Token -> cumulative hold days across all token_hold transactions."""
    governance_votes: tuple[GovernanceVote, ...]
    airdrop_flips: tuple[AirdropFlip, ...]
    protocol_frequency: Mapping[str, int]
    """Protocol -> transaction count; keys in order of first chronological appearance."""
    nft_transactions: int
    recent_activity_count: int
    total_transactions: int
    dormancy_periods: tuple[float, ...]
    """Gaps (days) >= DORMANCY_THRESHOLD_DAYS between consecutive transactions."""

    @property
    def unique_airdrop_flip_tokens(self) -> int:
        return len({flip.token for flip in self.airdrop_flips})

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view; stable key order for logging and debugging."""
        return {
            "swap_frequency": self.swap_frequency,
            "new_protocol_interactions": self.new_protocol_interactions,
            "liquidity_provisions": [lp.to_dict() for lp in self.liquidity_provisions],
            "blue_chip_holdings": [h.to_dict() for h in self.blue_chip_holdings],
            "stable_stakes": [s.to_dict() for s in self.stable_stakes],
            "hold_durations": dict(self.hold_durations),
            "governance_votes": [v.to_dict() for v in self.governance_votes],
            "airdrop_flips": [f.to_dict() for f in self.airdrop_flips],
            "protocol_frequency": dict(self.protocol_frequency),
            "nft_transactions": self.nft_transactions,
            "recent_activity_count": self.recent_activity_count,
            "total_transactions": self.total_transactions,
            "dormancy_periods": list(self.dormancy_periods),
        }


def _as_utc(now: datetime) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _duration_days(start: datetime | None, end: datetime | None) -> float:
    """Days from start to end, floored at 0; 0 when either bound is unknown."""
    if start is None or end is None:
        return 0.0
    return max(0.0, (end - start).total_seconds() / SECONDS_PER_DAY)


def _hold_duration(tx: Transaction, occurred_at: datetime | None, now: datetime) -> float:
    details = tx.details
    start = parse_timestamp(details.start_date) if details.start_date else occurred_at
    end = parse_timestamp(details.end_date) if details.end_date else now
    return _duration_days(start, end)


def _find_airdrop_flips(
    airdrops: list[tuple[Transaction, datetime | None]],
    swaps: list[tuple[Transaction, datetime | None]],
) -> list[AirdropFlip]:
    """
    Match each airdrop to the earliest later swap of the same token.

    Searches are independent per airdrop: one swap may match several airdrops.
    A match counts as a flip only when it lands within AIRDROP_FLIP_WINDOW.
    """
    flips: list[AirdropFlip] = []
    for airdrop, received in airdrops:
        if received is None:
            continue
        token = airdrop.details.token or UNKNOWN
        for swap, swapped in swaps:
            if swapped is None or swapped <= received:
                continue
            if swap.details.swapped_token != token:
                continue
            delta = swapped - received
            if delta <= AIRDROP_FLIP_WINDOW:
                flips.append(
                    AirdropFlip(
                        token=token,
                        received_at=airdrop.timestamp,
                        swapped_at=swap.timestamp,
                        time_delta=delta,
                    )
                )
            break
    return flips


def _find_dormancy_periods(timeline: list[tuple[Transaction, datetime | None]]) -> list[float]:
    """Gaps between chronologically adjacent transactions of at least DORMANCY_THRESHOLD_DAYS."""
    periods: list[float] = []
    for (_, prev), (_, curr) in zip(timeline, timeline[1:]):
        if prev is None or curr is None:
            continue
        gap_days = (curr - prev).total_seconds() / SECONDS_PER_DAY
        if gap_days >= DORMANCY_THRESHOLD_DAYS:
            periods.append(gap_days)
    return periods


def extract_signals(transactions: Sequence[Transaction], *, now: datetime) -> SignalRecord:
    """
    Convert wallet transaction history into a SignalRecord.

    Works on a chronologically sorted copy (stable for equal timestamps); the
    caller's sequence is never modified. Missing detail fields degrade to
    "UNKNOWN" placeholders and malformed timestamps are skipped by every
    time-based signal, so this never raises on data.

    Args:
        transactions: Validated transactions for one wallet; may be empty.
        now: Evaluation instant for recent activity and open-ended holds.

    Returns:
        SignalRecord with all 13 signals populated.
    """
    now = _as_utc(now)
    recent_cutoff = now - timedelta(days=RECENT_ACTIVITY_DAYS)
    timeline = sorted(
        ((tx, tx.occurred_at) for tx in transactions),
        key=lambda pair: pair[1] or _EARLIEST,
    )

    swap_frequency = 0
    new_protocol_interactions = 0
    nft_transactions = 0
    recent_activity_count = 0
    liquidity: list[LiquidityProvision] = []
    blue_chips: list[TokenHolding] = []
    stakes: list[StakeInfo] = []
    hold_durations: dict[str, float] = {}
    votes: list[GovernanceVote] = []
    protocol_frequency: dict[str, int] = {}
    airdrops: list[tuple[Transaction, datetime | None]] = []
    swaps: list[tuple[Transaction, datetime | None]] = []

    for tx, occurred_at in timeline:
        details = tx.details
        if details.is_new_protocol:
            new_protocol_interactions += 1
        if details.protocol:
            protocol_frequency[details.protocol] = protocol_frequency.get(details.protocol, 0) + 1
        if occurred_at is not None and occurred_at >= recent_cutoff:
            recent_activity_count += 1

        if tx.type == TransactionType.SWAP:
            swap_frequency += 1
            swaps.append((tx, occurred_at))
        elif tx.type == TransactionType.NFT_MINT:
            nft_transactions += 1
        elif tx.type == TransactionType.PROVIDE_LIQUIDITY:
            token1 = details.first_leg or UNKNOWN
            token2 = details.second_leg or UNKNOWN
            liquidity.append(
                LiquidityProvision(
                    token1=token1,
                    token2=token2,
                    protocol=details.protocol or UNKNOWN,
                    is_volatile=not (token1 in NON_VOLATILE_TOKENS and token2 in NON_VOLATILE_TOKENS),
                )
            )
        elif tx.type == TransactionType.STAKE:
            token = details.token or UNKNOWN
            protocol = details.protocol or UNKNOWN
            if protocol in ESTABLISHED_PROTOCOLS and token in NON_VOLATILE_TOKENS:
                stakes.append(StakeInfo(token=token, protocol=protocol, is_established=True))
        elif tx.type == TransactionType.TOKEN_HOLD:
            token = details.token or UNKNOWN
            duration = _hold_duration(tx, occurred_at, now)
            hold_durations[token] = hold_durations.get(token, 0.0) + duration
            if token in BLUE_CHIP_TOKENS:
                blue_chips.append(TokenHolding(token=token, duration_days=duration))
        elif tx.type == TransactionType.GOVERNANCE_VOTE:
            votes.append(GovernanceVote(protocol=details.protocol or UNKNOWN, timestamp=tx.timestamp))
        elif tx.type == TransactionType.RECEIVE_AIRDROP:
            airdrops.append((tx, occurred_at))

    flips = _find_airdrop_flips(airdrops, swaps)
    dormancy = _find_dormancy_periods(timeline)

    record = SignalRecord(
        swap_frequency=swap_frequency,
        new_protocol_interactions=new_protocol_interactions,
        liquidity_provisions=tuple(liquidity),
        blue_chip_holdings=tuple(blue_chips),
        stable_stakes=tuple(stakes),
        hold_durations=MappingProxyType(hold_durations),
        governance_votes=tuple(votes),
        airdrop_flips=tuple(flips),
        protocol_frequency=MappingProxyType(protocol_frequency),
        nft_transactions=nft_transactions,
        recent_activity_count=recent_activity_count,
        total_transactions=len(transactions),
        dormancy_periods=tuple(dormancy),
    )
    logger.debug(
        "signals_extracted",
        tx_count=record.total_transactions,
        protocols=len(protocol_frequency),
        airdrop_flips=len(flips),
        dormancy_periods=len(dormancy),
    )
    return record
