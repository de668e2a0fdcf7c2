"""
Property tests for the analysis pipeline: output invariants hold for any
generated history, scores move in the right direction, runs are repeatable.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime, timedelta, timezone
from types import MappingProxyType

from hypothesis import given, settings
from hypothesis import strategies as st

from persona_protocol.analysis_engine import analyze, extract_signals
from persona_protocol.analysis_engine.models import Transaction, TransactionDetails, TransactionType
from persona_protocol.analysis_engine.persona import PERSONA_TITLES
from persona_protocol.analysis_engine.scorer import (
    calculate_activity,
    calculate_loyalty,
    calculate_risk_appetite,
)
from persona_protocol.analysis_engine.signals import AirdropFlip, GovernanceVote, TokenHolding
from persona_protocol.output import format_persona

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
WALLET = "0xproperty"

_details = st.fixed_dictionaries(
    {},
    optional={
        "protocol": st.sampled_from(["Uniswap", "Aave", "Lido", "Curve", "Blur", "Opti.mism"]),
        "token": st.sampled_from(["ETH", "USDC", "PEPE", "ARB", "WBTC"]),
        "token1": st.sampled_from(["ETH", "USDC", "PEPE"]),
        "token2": st.sampled_from(["DAI", "WETH", "SHIB"]),
        "token_from": st.sampled_from(["ARB", "OP", "USDC"]),
        "is_new_protocol": st.booleans(),
    },
)

_timestamps = st.datetimes(
    min_value=datetime(2022, 1, 1),
    max_value=datetime(2024, 6, 1),
    timezones=st.just(timezone.utc),
)


@st.composite
def transactions(draw, tx_type=None, **pinned):
    """Random transaction; pinned keyword args override the drawn details."""
    kind = tx_type or draw(st.sampled_from(list(TransactionType)))
    return Transaction(
        hash=f"0x{draw(st.integers(min_value=0, max_value=2**64)):x}",
        timestamp=draw(_timestamps).isoformat(),
        type=TransactionType(kind),
        details=TransactionDetails.from_mapping({**draw(_details), **pinned}),
    )


histories = st.lists(transactions(), max_size=40)


@settings(max_examples=60, deadline=None)
@given(histories)
def test_output_invariants_hold(txs):
    result = analyze(WALLET, txs, now=NOW)
    for value in result.scores.to_dict().values():
        assert isinstance(value, int)
        assert 1 <= value <= 100
    assert result.persona_title in PERSONA_TITLES
    assert 3 <= len(result.key_traits) <= 5
    assert len(set(result.key_traits)) == len(result.key_traits)
    assert len(result.notable_protocols) <= 5
    assert sum(result.summary.count(c) for c in ".!?") in (2, 3)


@settings(max_examples=60, deadline=None)
@given(histories)
def test_notable_protocols_follow_frequency(txs):
    signals = extract_signals(txs, now=NOW)
    result = analyze(WALLET, txs, now=NOW)
    counts = [signals.protocol_frequency[p] for p in result.notable_protocols]
    assert counts == sorted(counts, reverse=True)
    if len(signals.protocol_frequency) < 3:
        assert set(result.notable_protocols) == set(signals.protocol_frequency)


@settings(max_examples=40, deadline=None)
@given(histories)
def test_runs_are_repeatable(txs):
    assert format_persona(analyze(WALLET, txs, now=NOW)) == format_persona(analyze(WALLET, txs, now=NOW))


@settings(max_examples=40, deadline=None)
@given(histories)
def test_signals_stay_consistent(txs):
    signals = extract_signals(txs, now=NOW)
    assert signals.total_transactions == len(txs)
    assert len(signals.dormancy_periods) <= max(0, len(txs) - 1)
    assert all(days >= 0 for days in signals.hold_durations.values())
    assert signals.recent_activity_count <= signals.total_transactions


@settings(max_examples=40, deadline=None)
@given(histories, st.lists(transactions(TransactionType.SWAP), min_size=1, max_size=10))
def test_more_swaps_never_lower_risk(txs, extra):
    before = calculate_risk_appetite(extract_signals(txs, now=NOW))
    after = calculate_risk_appetite(extract_signals(txs + extra, now=NOW))
    assert after >= before


@settings(max_examples=40, deadline=None)
@given(histories, st.integers(min_value=1, max_value=10))
def test_blue_chip_holds_never_raise_risk(txs, n):
    signals = extract_signals(txs, now=NOW)
    more = dataclasses.replace(
        signals,
        blue_chip_holdings=signals.blue_chip_holdings + (TokenHolding("ETH", 30.0),) * n,
    )
    assert calculate_risk_appetite(more) <= calculate_risk_appetite(signals)


@settings(max_examples=40, deadline=None)
@given(histories, st.integers(min_value=1, max_value=10), st.floats(min_value=7.0, max_value=1000.0))
def test_loyal_signals_never_lower_loyalty(txs, votes, hold_days):
    signals = extract_signals(txs, now=NOW)
    more = dataclasses.replace(
        signals,
        governance_votes=signals.governance_votes + (GovernanceVote("Aave", "2024-01-01T00:00:00Z"),) * votes,
        hold_durations=MappingProxyType({**signals.hold_durations, "__long_hold__": hold_days}),
    )
    assert calculate_loyalty(more) >= calculate_loyalty(signals)


@settings(max_examples=40, deadline=None)
@given(histories, st.integers(min_value=1, max_value=10))
def test_airdrop_flips_never_raise_loyalty(txs, n):
    signals = extract_signals(txs, now=NOW)
    flip = AirdropFlip("ARB", "", "", timedelta(hours=1))
    more = dataclasses.replace(signals, airdrop_flips=signals.airdrop_flips + (flip,) * n)
    assert calculate_loyalty(more) <= calculate_loyalty(signals)


@settings(max_examples=40, deadline=None)
@given(histories, st.integers(min_value=1, max_value=50), st.integers(min_value=1, max_value=5))
def test_activity_direction(txs, extra_tx, gaps):
    signals = extract_signals(txs, now=NOW)
    busier = dataclasses.replace(
        signals,
        total_transactions=signals.total_transactions + extra_tx,
        recent_activity_count=signals.recent_activity_count + extra_tx,
    )
    sleepier = dataclasses.replace(signals, dormancy_periods=signals.dormancy_periods + (180.0,) * gaps)
    assert calculate_activity(busier) >= calculate_activity(signals)
    assert calculate_activity(sleepier) <= calculate_activity(signals)


def _volatile_lps(signals) -> int:
    return sum(1 for lp in signals.liquidity_provisions if lp.is_volatile)


def _repeated_protocols(signals) -> int:
    return sum(1 for count in signals.protocol_frequency.values() if count > 1)


@settings(max_examples=40, deadline=None)
@given(histories, st.lists(transactions(TransactionType.SWAP, is_new_protocol=True), min_size=1, max_size=5))
def test_new_protocols_never_lower_risk(txs, extra):
    before = extract_signals(txs, now=NOW)
    after = extract_signals(txs + extra, now=NOW)
    assert after.new_protocol_interactions == before.new_protocol_interactions + len(extra)
    assert calculate_risk_appetite(after) >= calculate_risk_appetite(before)


@settings(max_examples=40, deadline=None)
@given(
    histories,
    st.lists(
        transactions(TransactionType.PROVIDE_LIQUIDITY, token1="PEPE", token2="SHIB"),
        min_size=1,
        max_size=5,
    ),
)
def test_volatile_liquidity_never_lowers_risk(txs, extra):
    before = extract_signals(txs, now=NOW)
    after = extract_signals(txs + extra, now=NOW)
    assert _volatile_lps(after) == _volatile_lps(before) + len(extra)
    assert calculate_risk_appetite(after) >= calculate_risk_appetite(before)


@settings(max_examples=40, deadline=None)
@given(
    histories,
    st.lists(
        transactions(TransactionType.STAKE, protocol="Lido", token="ETH", is_new_protocol=False),
        min_size=1,
        max_size=5,
    ),
)
def test_established_stakes_never_raise_risk(txs, extra):
    before = extract_signals(txs, now=NOW)
    after = extract_signals(txs + extra, now=NOW)
    assert len(after.stable_stakes) == len(before.stable_stakes) + len(extra)
    assert calculate_risk_appetite(after) <= calculate_risk_appetite(before)


@settings(max_examples=40, deadline=None)
@given(
    histories,
    st.lists(transactions(TransactionType.NFT_MINT, protocol="Zora"), min_size=2, max_size=6),
)
def test_repeated_protocol_use_never_lowers_loyalty(txs, extra):
    """A protocol used more than once adds to loyalty; nothing else moves."""
    before = extract_signals(txs, now=NOW)
    after = extract_signals(txs + extra, now=NOW)
    assert _repeated_protocols(after) == _repeated_protocols(before) + 1
    assert calculate_loyalty(after) >= calculate_loyalty(before)
