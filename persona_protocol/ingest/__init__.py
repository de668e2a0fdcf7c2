"""
Ingest package: validation and parsing of raw wallet input.

Turns a JSON document (or decoded mapping) into a WalletInput for the
analysis engine, rejecting malformed input with every violation listed.
"""

from persona_protocol.ingest.parser import parse_wallet_input, validate_wallet_input

__all__ = ["parse_wallet_input", "validate_wallet_input"]
