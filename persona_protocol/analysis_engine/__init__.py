"""
Analysis engine package: wallet persona analysis.

Consumes validated transactions, extracts behavioral signals, computes
risk appetite / loyalty / activity scores and composes a persona
(title, summary, traits, notable protocols). Pure; performs no I/O.
"""

from persona_protocol.analysis_engine.models import (
    Transaction,
    TransactionDetails,
    TransactionType,
    WalletInput,
    parse_timestamp,
)
from persona_protocol.analysis_engine.signals import (
    AirdropFlip,
    GovernanceVote,
    LiquidityProvision,
    SignalRecord,
    StakeInfo,
    TokenHolding,
    extract_signals,
)
from persona_protocol.analysis_engine.scorer import (
    Scores,
    calculate_activity,
    calculate_loyalty,
    calculate_risk_appetite,
    compute_scores,
    score_breakdown,
)
from persona_protocol.analysis_engine.persona import (
    PersonaFields,
    compose_persona,
    generate_summary,
    generate_title,
    generate_traits,
    notable_protocols,
)
from persona_protocol.analysis_engine.assembler import PersonaResult, assemble
from persona_protocol.analysis_engine.pipeline import analyze

__all__ = [
    "Transaction",
    "TransactionDetails",
    "TransactionType",
    "WalletInput",
    "parse_timestamp",
    "AirdropFlip",
    "GovernanceVote",
    "LiquidityProvision",
    "SignalRecord",
    "StakeInfo",
    "TokenHolding",
    "extract_signals",
    "Scores",
    "calculate_activity",
    "calculate_loyalty",
    "calculate_risk_appetite",
    "compute_scores",
    "score_breakdown",
    "PersonaFields",
    "compose_persona",
    "generate_summary",
    "generate_title",
    "generate_traits",
    "notable_protocols",
    "PersonaResult",
    "assemble",
    "analyze",
]
