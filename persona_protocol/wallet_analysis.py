"""
End-to-end wallet analysis: raw JSON text in, persona JSON text out.

Wires the ingest parser, the analysis pipeline and the output formatter.
Used by the CLI; the HTTP server calls the stages itself so it can map
validation errors to 400 responses.
"""

from __future__ import annotations

from datetime import datetime

from persona_protocol.analysis_engine import analyze
from persona_protocol.errors import WalletAnalysisError
from persona_protocol.ingest import parse_wallet_input
from persona_protocol.output import format_persona


def analyze_wallet(
    input_json: str | bytes,
    *,
    now: datetime | None = None,
    indent: int | None = None,
) -> str:
    """
    Validate the input document, analyze the wallet and return the persona JSON.

    Raises:
        WalletAnalysisError: "Wallet analysis failed: <reason>", chaining the
            underlying InputValidationError or PersonaContractError.
    """
    try:
        wallet = parse_wallet_input(input_json)
        result = analyze(wallet.wallet_address, wallet.transactions, now=now)
        return format_persona(result, indent=indent)
    except Exception as e:
        raise WalletAnalysisError(f"Wallet analysis failed: {e}") from e
