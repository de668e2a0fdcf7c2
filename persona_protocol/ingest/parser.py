"""
Wallet input parser: raw JSON payloads to validated WalletInput.

Checks the whole payload and reports every violation found (not just the
first), then builds immutable Transaction records for the analysis engine.
Purely structural; no scoring or persona logic.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from persona_protocol.analysis_engine.models import (
    TRANSACTION_TYPES,
    Transaction,
    WalletInput,
    parse_timestamp,
)
from persona_protocol.config import get_settings
from persona_protocol.errors import InputValidationError
from persona_protocol.persona_logging import get_logger

logger = get_logger(__name__)

REQUIRED_TRANSACTION_FIELDS = ("hash", "timestamp", "type", "details")


def _validate_transaction(tx: Any, index: int) -> list[str]:
    """Return every structural problem with one transaction entry."""
    prefix = f"Transaction at index {index}"
    if not isinstance(tx, Mapping):
        return [f"{prefix} must be an object"]

    errors: list[str] = []
    missing = [name for name in REQUIRED_TRANSACTION_FIELDS if name not in tx]
    errors.extend(f"{prefix} missing required field: {name}" for name in missing)

    if "hash" in tx and not isinstance(tx["hash"], str):
        errors.append(f"{prefix}: hash must be a string")

    if "timestamp" in tx:
        ts = tx["timestamp"]
        if not isinstance(ts, str):
            errors.append(f"{prefix}: timestamp must be a string")
        elif parse_timestamp(ts) is None:
            errors.append(f'{prefix}: timestamp "{ts}" is not a valid ISO-8601 date')

    if "type" in tx:
        tx_type = tx["type"]
        if not isinstance(tx_type, str):
            errors.append(f"{prefix}: type must be a string")
        elif tx_type not in TRANSACTION_TYPES:
            errors.append(
                f'{prefix}: invalid type "{tx_type}". '
                f"Must be one of: {', '.join(TRANSACTION_TYPES)}"
            )

    if "details" in tx and not isinstance(tx["details"], Mapping):
        errors.append(f"{prefix}: details must be an object")
    return errors


def validate_wallet_input(data: Any, *, max_transactions: int | None = None) -> list[str]:
    """
    Validate a decoded wallet payload.

    Args:
        data: Decoded JSON value; expected {"walletAddress": str, "transactions": [...]}.
        max_transactions: Upper bound on list size; defaults to settings.max_transactions.

    Returns:
        All violations in input order; empty when the payload is valid.
    """
    if not isinstance(data, Mapping):
        return ["Input must be a valid object"]
    if max_transactions is None:
        max_transactions = get_settings().max_transactions

    errors: list[str] = []
    if "walletAddress" not in data:
        errors.append("Missing required field: walletAddress")
    elif not isinstance(data["walletAddress"], str):
        errors.append("walletAddress must be a string")
    elif not data["walletAddress"].strip():
        errors.append("walletAddress cannot be empty")

    if "transactions" not in data:
        errors.append("Missing required field: transactions")
    elif not isinstance(data["transactions"], list):
        errors.append("transactions must be an array")
    else:
        transactions = data["transactions"]
        if len(transactions) > max_transactions:
            errors.append(
                f"transactions must contain at most {max_transactions} items, got {len(transactions)}"
            )
        for index, tx in enumerate(transactions):
            errors.extend(_validate_transaction(tx, index))
    return errors


def parse_wallet_input(raw: str | bytes | Mapping[str, Any]) -> WalletInput:
    """
    Decode (if needed), validate and convert a wallet payload.

    Raises:
        InputValidationError: on invalid JSON or any structural violation;
            .errors holds the full list.
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InputValidationError(f"Invalid JSON: {e}", [f"Invalid JSON: {e}"]) from e
    else:
        data = raw

    errors = validate_wallet_input(data)
    if errors:
        logger.warning("wallet_input_rejected", error_count=len(errors), first_error=errors[0])
        raise InputValidationError(f"Validation failed: {'; '.join(errors)}", errors)

    return WalletInput(
        wallet_address=data["walletAddress"],
        transactions=tuple(Transaction.from_dict(tx) for tx in data["transactions"]),
    )
