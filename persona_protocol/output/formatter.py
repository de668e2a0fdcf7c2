"""
Persona JSON output.

Renders a PersonaResult as a compact JSON object with exactly six top-level
keys in a fixed order (walletAddress, personaTitle, summary, scores,
keyTraits, notableProtocols) and nothing before or after it.
"""

from __future__ import annotations

import json

from persona_protocol.analysis_engine.assembler import PersonaResult, validate_result

OUTPUT_KEYS = (
    "walletAddress",
    "personaTitle",
    "summary",
    "scores",
    "keyTraits",
    "notableProtocols",
)


def format_persona(result: PersonaResult, *, indent: int | None = None) -> str:
    """
    Serialize a PersonaResult.

    The result is re-validated first, so a hand-built PersonaResult that breaks
    an invariant raises PersonaContractError instead of being emitted.
    Compact separators unless indent is given.
    """
    validate_result(result)
    payload = result.to_dict()
    if indent is None:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(payload, ensure_ascii=False, indent=indent)
