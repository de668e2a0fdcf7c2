"""
Data models for analysis engine input.

Responsibilities:
- Define the transaction record handed to the signal extractor.
- Keep the open-ended details map typed for the keys the extractor reads,
  while carrying every other key through untouched.
- Parse ISO-8601 timestamps leniently (None instead of raising).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any

SECONDS_PER_DAY = 86400

# Placeholder used wherever a token or protocol name is missing from details.
UNKNOWN = "UNKNOWN"


class TransactionType(str, Enum):
    SWAP = "swap"
    NFT_MINT = "nft_mint"
    STAKE = "stake"
    PROVIDE_LIQUIDITY = "provide_liquidity"
    RECEIVE_AIRDROP = "receive_airdrop"
    GOVERNANCE_VOTE = "governance_vote"
    TOKEN_HOLD = "token_hold"


TRANSACTION_TYPES: tuple[str, ...] = tuple(t.value for t in TransactionType)

KNOWN_DETAIL_KEYS = frozenset(
    {
        "protocol",
        "is_new_protocol",
        "token",
        "token1",
        "token2",
        "start_date",
        "end_date",
        "token_from",
    }
)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into an aware UTC-comparable datetime.

    Accepts a trailing 'Z'. Values without an offset are read as UTC.
    Returns None for anything that cannot be parsed.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text[-1] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _text(value: Any) -> str | None:
    """Non-empty string or None; other primitive types count as missing."""
    if isinstance(value, str) and value:
        return value
    return None


@dataclass(frozen=True)
class TransactionDetails:
    """
    Key/value details of a transaction.

    Known keys are exposed as typed attributes (None when absent, empty or not
    a string). Any other key, including the legacy aliases tokenA/tokenB/tokenFrom,
    is kept in extra.
    """

    protocol: str | None = None
    is_new_protocol: bool = False
    """True only when the raw value is the boolean True."""
    token: str | None = None
    token1: str | None = None
    token2: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    token_from: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> TransactionDetails:
        raw = raw or {}
        return cls(
            protocol=_text(raw.get("protocol")),
            is_new_protocol=raw.get("is_new_protocol") is True,
            token=_text(raw.get("token")),
            token1=_text(raw.get("token1")),
            token2=_text(raw.get("token2")),
            start_date=_text(raw.get("start_date")),
            end_date=_text(raw.get("end_date")),
            token_from=_text(raw.get("token_from")),
            extra=MappingProxyType(
                {k: v for k, v in raw.items() if k not in KNOWN_DETAIL_KEYS}
            ),
        )

    @property
    def first_leg(self) -> str | None:
        return self.token1 or _text(self.extra.get("tokenA"))

    @property
    def second_leg(self) -> str | None:
        return self.token2 or _text(self.extra.get("tokenB"))

    @property
    def swapped_token(self) -> str | None:
        """Token given away in a swap (token_from, or legacy tokenFrom)."""
        return self.token_from or _text(self.extra.get("tokenFrom"))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key in (
            "protocol",
            "token",
            "token1",
            "token2",
            "start_date",
            "end_date",
            "token_from",
        ):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        if self.is_new_protocol:
            out["is_new_protocol"] = True
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class Transaction:
    """
    One labeled, timestamped wallet event.

    Constructed once by the ingest layer (or directly by tests) and read-only
    thereafter. timestamp keeps the caller's ISO-8601 text; occurred_at is the
    parsed instant or None when the text is malformed.
    """

    hash: str
    timestamp: str
    type: TransactionType
    details: TransactionDetails = field(default_factory=TransactionDetails)

    @property
    def occurred_at(self) -> datetime | None:
        return parse_timestamp(self.timestamp)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Transaction:
        """Build from a structurally valid mapping; raises ValueError on an unknown type."""
        details = raw.get("details")
        return cls(
            hash=raw["hash"],
            timestamp=raw["timestamp"],
            type=TransactionType(raw["type"]),
            details=TransactionDetails.from_mapping(details if isinstance(details, Mapping) else None),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "timestamp": self.timestamp,
            "type": self.type.value,
            "details": self.details.to_dict(),
        }


@dataclass(frozen=True)
class WalletInput:
    """Validated request: one wallet address and its transaction history."""

    wallet_address: str
    transactions: tuple[Transaction, ...]
