"""
Analysis pipeline: transactions -> signals -> scores -> persona -> result.

Each stage is a pure function of the previous stage's output. The evaluation
instant is captured once here and threaded through, so one call is internally
consistent and a fixed `now` makes it reproducible.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from persona_protocol.analysis_engine.assembler import PersonaResult, assemble
from persona_protocol.analysis_engine.models import Transaction
from persona_protocol.analysis_engine.persona import compose_persona
from persona_protocol.analysis_engine.scorer import compute_scores, score_breakdown
from persona_protocol.analysis_engine.signals import extract_signals
from persona_protocol.persona_logging import bind_wallet


def analyze(
    wallet_address: str,
    transactions: Sequence[Transaction],
    *,
    now: datetime | None = None,
) -> PersonaResult:
    """
    Run the full persona analysis for one wallet.

    Args:
        wallet_address: Passed through to the result.
        transactions: Validated transactions; may be empty.
        now: Evaluation instant; defaults to the current UTC time.

    Returns:
        A validated PersonaResult.

    Raises:
        PersonaContractError: if the assembled result breaks an output invariant.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    log = bind_wallet(wallet_address)

    signals = extract_signals(transactions, now=now)
    scores = compute_scores(signals)
    log.debug("scores_computed", scores=scores.to_dict(), breakdown=score_breakdown(signals))

    fields = compose_persona(scores, signals)
    result = assemble(wallet_address, scores, fields)
    log.info(
        "persona_assembled",
        tx_count=signals.total_transactions,
        title=result.persona_title,
        risk_appetite=scores.risk_appetite,
        loyalty=scores.loyalty,
        activity=scores.activity,
        traits=list(result.key_traits),
    )
    return result
