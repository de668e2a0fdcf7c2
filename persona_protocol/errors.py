"""
Exception hierarchy for Persona Protocol.

Two failure classes matter to callers: bad raw input (InputValidationError,
reported with every violation found) and broken internal contracts
(PersonaContractError, never coerced away). Sparse data is not an error.
"""

from __future__ import annotations


class PersonaProtocolError(Exception):
    """Base class for all Persona Protocol errors."""


class InputValidationError(PersonaProtocolError, ValueError):
    """Raw wallet input is malformed. errors lists every violation, in input order."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors: list[str] = list(errors or [])


class PersonaContractError(PersonaProtocolError, RuntimeError):
    """An output invariant was violated; indicates a bug upstream of the assembler."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"Invalid output: {field} {message}")
        self.field = field


class WalletAnalysisError(PersonaProtocolError):
    """End-to-end analysis failed. The original error is chained as __cause__."""
