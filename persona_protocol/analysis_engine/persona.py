"""
Persona generation: title, summary, key traits and notable protocols.

Rule-based and deterministic: every branch is a threshold on the scores or on
the SignalRecord, so the same inputs always produce the same persona. Where a
category has several titles, a secondary threshold picks one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from persona_protocol.analysis_engine.scorer import Scores
from persona_protocol.analysis_engine.signals import SignalRecord

# Title vocabulary
TITLE_NFT_TRADER = "NFT Trader"
TITLE_DIGITAL_ART_COLLECTOR = "Digital Art Collector"
TITLE_NFT_ENTHUSIAST = "NFT Enthusiast"
TITLE_NFT_CONNOISSEUR = "NFT Connoisseur"
TITLE_DEFI_DEGEN = "DeFi Degen"
TITLE_ACTIVE_TRADER = "Active Trader"
TITLE_DIAMOND_HANDS_INVESTOR = "Diamond Hands Investor"
TITLE_STEADY_STAKER = "Steady Staker"
TITLE_BLUE_CHIP_BELIEVER = "Blue-Chip Believer"
TITLE_LONG_TERM_HOLDER = "Long-Term Holder"
TITLE_DORMANT_HOLDER = "Dormant Holder"
TITLE_INACTIVE_WALLET = "Inactive Wallet"
TITLE_ADVENTUROUS_INVESTOR = "Adventurous Investor"
TITLE_COMMITTED_PARTICIPANT = "Committed Participant"
TITLE_ACTIVE_PARTICIPANT = "Active Participant"
TITLE_BALANCED_INVESTOR = "Balanced Investor"

PERSONA_TITLES = frozenset(
    {
        TITLE_NFT_TRADER,
        TITLE_DIGITAL_ART_COLLECTOR,
        TITLE_NFT_ENTHUSIAST,
        TITLE_NFT_CONNOISSEUR,
        TITLE_DEFI_DEGEN,
        TITLE_ACTIVE_TRADER,
        TITLE_DIAMOND_HANDS_INVESTOR,
        TITLE_STEADY_STAKER,
        TITLE_BLUE_CHIP_BELIEVER,
        TITLE_LONG_TERM_HOLDER,
        TITLE_DORMANT_HOLDER,
        TITLE_INACTIVE_WALLET,
        TITLE_ADVENTUROUS_INVESTOR,
        TITLE_COMMITTED_PARTICIPANT,
        TITLE_ACTIVE_PARTICIPANT,
        TITLE_BALANCED_INVESTOR,
    }
)

# Traits
TRAIT_AIRDROP_HUNTER = "Airdrop Hunter"
TRAIT_EARLY_ADOPTER = "Early Adopter"
TRAIT_DIAMOND_HANDS = "Diamond Hands"
TRAIT_PROTOCOL_SPECIALIST = "Protocol Specialist"
TRAIT_GOVERNANCE_PARTICIPANT = "Governance Participant"
TRAIT_NFT_ENTHUSIAST = "NFT Enthusiast"
TRAIT_ACTIVE_TRADER = "Active Trader"
TRAIT_LIQUIDITY_PROVIDER = "Liquidity Provider"
TRAIT_RISK_TAKER = "Risk Taker"
TRAIT_PASSIVE_HOLDER = "Passive Holder"
FILLER_TRAITS = ("Web3 User", "Blockchain Participant", "DeFi Explorer")

MIN_TRAITS = 3
MAX_TRAITS = 5
MIN_NOTABLE_PROTOCOLS = 3
MAX_NOTABLE_PROTOCOLS = 5

# Thresholds
HIGH_SCORE = 70
LOW_RISK = 40
LOW_ACTIVITY = 30
LEANING_SCORE = 60
DEGEN_RISK = 85
DIAMOND_HANDS_INVESTOR_LOYALTY = 90
DIAMOND_HANDS_LOYALTY = 85
RISK_TAKER_RISK = 75
NFT_DOMINANT_SHARE = 0.5
NFT_ENTHUSIAST_SHARE = 0.3
SPECIALIST_SHARE = 0.6
AIRDROP_HUNTER_MIN = 5
ACTIVE_TRADER_SWAPS = 10
LIQUIDITY_PROVIDER_MIN = 3
EXPLORER_NEW_PROTOCOLS = 3
INTERMITTENT_DORMANCY_PERIODS = 2

_SENTENCE_END = re.compile(r"[.!?]")

SENTENCE_ACTIVE = "This wallet exhibits highly active trading behavior with a strong appetite for risk."
SENTENCE_STABLE = (
    "This wallet demonstrates a conservative, long-term holding strategy "
    "with strong loyalty to established protocols."
)
SENTENCE_NFT = (
    "This wallet is primarily focused on NFT activities, "
    "with the majority of transactions involving digital collectibles."
)
SENTENCE_DORMANT = "This wallet shows minimal recent activity, suggesting a passive or dormant investment approach."
SENTENCE_BALANCED = "This wallet maintains a balanced approach to DeFi participation across various activities."

BEHAVIOR_TEMPLATES = {
    "swap": "The wallet frequently swaps tokens, with notable activity on {protocols}.",
    "nft_mint": "NFT minting and trading dominate the transaction history, with engagement across {protocols}.",
    "stake": "Staking activities are prominent, particularly on {protocols}.",
    "provide_liquidity": "The wallet actively provides liquidity to pools on {protocols}.",
}

CONTEXT_GOVERNANCE = "Active participation in governance demonstrates commitment to protocol development."
CONTEXT_AIRDROPS = "The wallet shows strategic positioning for airdrops across multiple protocols."
CONTEXT_EXPLORER = "Early adoption of new protocols indicates a willingness to explore emerging opportunities."
CONTEXT_DORMANCY = "Extended periods of inactivity suggest intermittent engagement with the ecosystem."


@dataclass(frozen=True)
class PersonaFields:
    """Composer output handed to the result assembler."""

    title: str
    summary: str
    key_traits: tuple[str, ...]
    notable_protocols: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "summary": self.summary,
            "key_traits": list(self.key_traits),
            "notable_protocols": list(self.notable_protocols),
        }


def _nft_share(signals: SignalRecord) -> float:
    if signals.total_transactions == 0:
        return 0.0
    return signals.nft_transactions / signals.total_transactions


def _is_active_trader(scores: Scores) -> bool:
    return scores.risk_appetite > HIGH_SCORE and scores.activity > HIGH_SCORE


def _is_stable_holder(scores: Scores) -> bool:
    return scores.loyalty > HIGH_SCORE and scores.risk_appetite < LOW_RISK


def _airdrop_hunter_score(signals: SignalRecord) -> int:
    """Unique flipped airdrop tokens plus half the governance votes (rounded down)."""
    return signals.unique_airdrop_flip_tokens + len(signals.governance_votes) // 2


# -----------------------------------------------------------------------------
# Title
# -----------------------------------------------------------------------------


def _nft_title(scores: Scores) -> str:
    if scores.activity > LEANING_SCORE:
        return TITLE_NFT_TRADER
    if scores.loyalty > LEANING_SCORE:
        return TITLE_DIGITAL_ART_COLLECTOR
    if scores.activity >= LOW_ACTIVITY:
        return TITLE_NFT_ENTHUSIAST
    return TITLE_NFT_CONNOISSEUR


def _stable_holder_title(scores: Scores, signals: SignalRecord) -> str:
    if scores.loyalty > DIAMOND_HANDS_INVESTOR_LOYALTY:
        return TITLE_DIAMOND_HANDS_INVESTOR
    if len(signals.stable_stakes) > len(signals.blue_chip_holdings):
        return TITLE_STEADY_STAKER
    if signals.blue_chip_holdings:
        return TITLE_BLUE_CHIP_BELIEVER
    return TITLE_LONG_TERM_HOLDER


def _balanced_title(scores: Scores) -> str:
    if scores.risk_appetite > LEANING_SCORE:
        return TITLE_ADVENTUROUS_INVESTOR
    if scores.loyalty > LEANING_SCORE:
        return TITLE_COMMITTED_PARTICIPANT
    if scores.activity > LEANING_SCORE:
        return TITLE_ACTIVE_PARTICIPANT
    return TITLE_BALANCED_INVESTOR


def generate_title(scores: Scores, signals: SignalRecord) -> str:
    """
    Pick the persona title; first matching rule wins.

    1. NFT mints are more than half of all transactions.
    2. High risk and high activity (active trader).
    3. High loyalty and low risk (stable holder).
    4. Low activity (dormant).
    5. Balanced, leaning towards whichever of risk/loyalty/activity exceeds 60.
    """
    if _nft_share(signals) > NFT_DOMINANT_SHARE:
        return _nft_title(scores)
    if _is_active_trader(scores):
        return TITLE_DEFI_DEGEN if scores.risk_appetite > DEGEN_RISK else TITLE_ACTIVE_TRADER
    if _is_stable_holder(scores):
        return _stable_holder_title(scores, signals)
    if scores.activity < LOW_ACTIVITY:
        return TITLE_DORMANT_HOLDER if scores.loyalty > LEANING_SCORE else TITLE_INACTIVE_WALLET
    return _balanced_title(scores)


# -----------------------------------------------------------------------------
# Summary
# -----------------------------------------------------------------------------


def _characterization_sentence(scores: Scores, signals: SignalRecord) -> str:
    if _is_active_trader(scores):
        return SENTENCE_ACTIVE
    if _is_stable_holder(scores):
        return SENTENCE_STABLE
    if _nft_share(signals) > NFT_DOMINANT_SHARE:
        return SENTENCE_NFT
    if scores.activity < LOW_ACTIVITY:
        return SENTENCE_DORMANT
    return SENTENCE_BALANCED


def _dominant_behavior(signals: SignalRecord) -> str:
    """Largest category wins; ties keep the earlier one and swap is the default."""
    behaviors = (
        ("swap", signals.swap_frequency),
        ("nft_mint", signals.nft_transactions),
        ("stake", len(signals.stable_stakes)),
        ("provide_liquidity", len(signals.liquidity_provisions)),
    )
    dominant, max_count = "swap", 0
    for behavior, count in behaviors:
        if count > max_count:
            dominant, max_count = behavior, count
    return dominant


def _behavior_sentence(signals: SignalRecord) -> str:
    # Protocol names must not add sentence terminators to the summary;
    # names left empty by that are skipped.
    cleaned = (_SENTENCE_END.sub("", p).strip() for p in notable_protocols(signals))
    names = [name for name in cleaned if name][:2]
    mention = " and ".join(names) if names else "various protocols"
    return BEHAVIOR_TEMPLATES[_dominant_behavior(signals)].format(protocols=mention)


def _context_sentence(signals: SignalRecord) -> str | None:
    if signals.governance_votes:
        return CONTEXT_GOVERNANCE
    if _airdrop_hunter_score(signals) >= AIRDROP_HUNTER_MIN:
        return CONTEXT_AIRDROPS
    if signals.new_protocol_interactions > EXPLORER_NEW_PROTOCOLS:
        return CONTEXT_EXPLORER
    if len(signals.dormancy_periods) > INTERMITTENT_DORMANCY_PERIODS:
        return CONTEXT_DORMANCY
    return None


def generate_summary(scores: Scores, signals: SignalRecord) -> str:
    """Two or three sentences: characterization, dominant behavior, optional context."""
    sentences = [_characterization_sentence(scores, signals), _behavior_sentence(signals)]
    context = _context_sentence(signals)
    if context:
        sentences.append(context)
    return " ".join(sentences)


# -----------------------------------------------------------------------------
# Traits
# -----------------------------------------------------------------------------


def _has_specialist_protocol(signals: SignalRecord) -> bool:
    if signals.total_transactions == 0 or not signals.protocol_frequency:
        return False
    top = max(signals.protocol_frequency.values())
    return top > signals.total_transactions * SPECIALIST_SHARE


def generate_traits(scores: Scores, signals: SignalRecord) -> list[str]:
    """
    Select 3–5 key traits.

    Qualifying traits are ranked by priority (ties keep declaration order),
    the top five are kept, and generic fillers pad the list to three.
    """
    candidates: list[tuple[str, int, bool]] = [
        (TRAIT_AIRDROP_HUNTER, 10, _airdrop_hunter_score(signals) >= AIRDROP_HUNTER_MIN),
        (TRAIT_EARLY_ADOPTER, 9, signals.new_protocol_interactions > 0),
        (TRAIT_DIAMOND_HANDS, 10, scores.loyalty > DIAMOND_HANDS_LOYALTY),
        (TRAIT_PROTOCOL_SPECIALIST, 8, _has_specialist_protocol(signals)),
        (TRAIT_GOVERNANCE_PARTICIPANT, 7, bool(signals.governance_votes)),
        (
            TRAIT_NFT_ENTHUSIAST,
            6,
            signals.nft_transactions > signals.total_transactions * NFT_ENTHUSIAST_SHARE,
        ),
        (TRAIT_ACTIVE_TRADER, 5, signals.swap_frequency > ACTIVE_TRADER_SWAPS),
        (TRAIT_LIQUIDITY_PROVIDER, 5, len(signals.liquidity_provisions) > LIQUIDITY_PROVIDER_MIN),
        (TRAIT_RISK_TAKER, 4, scores.risk_appetite > RISK_TAKER_RISK),
        (TRAIT_PASSIVE_HOLDER, 3, scores.activity < LOW_ACTIVITY),
    ]
    qualified = [(name, priority) for name, priority, ok in candidates if ok]
    qualified.sort(key=lambda item: item[1], reverse=True)
    traits = [name for name, _ in qualified[:MAX_TRAITS]]

    for filler in FILLER_TRAITS:
        if len(traits) >= MIN_TRAITS:
            break
        if filler not in traits:
            traits.append(filler)
    return traits


# -----------------------------------------------------------------------------
# Notable protocols
# -----------------------------------------------------------------------------


def notable_protocols(signals: SignalRecord) -> list[str]:
    """
    Most-used protocols, by descending count.

    Ties keep first chronological appearance. Returns at most five; when fewer
    than three distinct protocols exist, all of them are returned.
    """
    ranked = sorted(signals.protocol_frequency.items(), key=lambda item: item[1], reverse=True)
    if len(ranked) < MIN_NOTABLE_PROTOCOLS:
        return [protocol for protocol, _ in ranked]
    return [protocol for protocol, _ in ranked[:MAX_NOTABLE_PROTOCOLS]]


def compose_persona(scores: Scores, signals: SignalRecord) -> PersonaFields:
    return PersonaFields(
        title=generate_title(scores, signals),
        summary=generate_summary(scores, signals),
        key_traits=tuple(generate_traits(scores, signals)),
        notable_protocols=tuple(notable_protocols(signals)),
    )
