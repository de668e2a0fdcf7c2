"""
Result assembly: combine wallet id, scores and persona fields into the final
PersonaResult, checking output invariants on the way.

A failed check means an upstream stage broke its contract. It is raised as
PersonaContractError naming the field; values are never clamped or dropped here.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from persona_protocol.analysis_engine.persona import (
    MAX_NOTABLE_PROTOCOLS,
    MAX_TRAITS,
    MIN_TRAITS,
    PersonaFields,
)
from persona_protocol.analysis_engine.scorer import MAX_SCORE, MIN_SCORE, Scores
from persona_protocol.errors import PersonaContractError
from persona_protocol.persona_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PersonaResult:
    """
    Final persona for one wallet.

    to_dict() gives the wire shape: six camelCase keys in a fixed order.
    """

    wallet_address: str
    persona_title: str
    summary: str
    scores: Scores
    key_traits: tuple[str, ...]
    notable_protocols: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "walletAddress": self.wallet_address,
            "personaTitle": self.persona_title,
            "summary": self.summary,
            "scores": self.scores.to_dict(),
            "keyTraits": list(self.key_traits),
            "notableProtocols": list(self.notable_protocols),
        }


def _fail(field: str, message: str) -> PersonaContractError:
    logger.error("persona_contract_violation", field=field, reason=message)
    return PersonaContractError(field, message)


def _check_non_empty_str(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise _fail(field, "must be a non-empty string")


def _check_score(field: str, value: Any) -> None:
    # bool is an int subclass but never a valid score
    if isinstance(value, bool) or not isinstance(value, int) or not MIN_SCORE <= value <= MAX_SCORE:
        raise _fail(field, f"must be an integer between {MIN_SCORE} and {MAX_SCORE}, got {value!r}")


def _check_str_list(field: str, value: Any) -> None:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise _fail(field, "must be an array")
    if not all(isinstance(item, str) for item in value):
        raise _fail(field, "must contain only strings")


def validate_result(result: PersonaResult) -> None:
    """Raise PersonaContractError for the first violated output invariant."""
    _check_non_empty_str("walletAddress", result.wallet_address)
    _check_non_empty_str("personaTitle", result.persona_title)
    _check_non_empty_str("summary", result.summary)
    if not isinstance(result.scores, Scores):
        raise _fail("scores", "must be a Scores object")
    _check_score("riskAppetite", result.scores.risk_appetite)
    _check_score("loyalty", result.scores.loyalty)
    _check_score("activity", result.scores.activity)

    _check_str_list("keyTraits", result.key_traits)
    if not MIN_TRAITS <= len(result.key_traits) <= MAX_TRAITS:
        raise _fail(
            "keyTraits",
            f"must contain between {MIN_TRAITS} and {MAX_TRAITS} items, got {len(result.key_traits)}",
        )
    if len(set(result.key_traits)) != len(result.key_traits):
        raise _fail("keyTraits", "must not contain duplicates")

    _check_str_list("notableProtocols", result.notable_protocols)
    if len(result.notable_protocols) > MAX_NOTABLE_PROTOCOLS:
        raise _fail(
            "notableProtocols",
            f"must contain at most {MAX_NOTABLE_PROTOCOLS} items, got {len(result.notable_protocols)}",
        )


def assemble(wallet_address: str, scores: Scores, fields: PersonaFields) -> PersonaResult:
    """
    Build and validate the final PersonaResult.

    Raises:
        PersonaContractError: if any output invariant does not hold.
    """
    result = PersonaResult(
        wallet_address=wallet_address,
        persona_title=fields.title,
        summary=fields.summary,
        scores=scores,
        key_traits=fields.key_traits,
        notable_protocols=fields.notable_protocols,
    )
    validate_result(result)
    return replace(
        result,
        key_traits=tuple(result.key_traits),
        notable_protocols=tuple(result.notable_protocols),
    )
