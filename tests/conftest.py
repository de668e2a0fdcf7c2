"""
Pytest fixtures for Persona Protocol tests. A fixed evaluation instant keeps
every time-based signal reproducible.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest

from persona_protocol.analysis_engine.models import (
    Transaction,
    TransactionDetails,
    TransactionType,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def iso(dt: datetime) -> str:
    """ISO-8601 with a trailing Z, as wallet exports usually carry it."""
    return dt.isoformat().replace("+00:00", "Z")


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_tx():
    """
    Factory for Transaction records: make_tx("swap", when, protocol="Uniswap").
    when is a datetime or a raw timestamp string; details go in as keyword args.
    """
    counter = itertools.count()

    def _make(tx_type: str, when: datetime | str, **details) -> Transaction:
        timestamp = when if isinstance(when, str) else iso(when)
        return Transaction(
            hash=f"0x{next(counter):064x}",
            timestamp=timestamp,
            type=TransactionType(tx_type),
            details=TransactionDetails.from_mapping(details),
        )

    return _make


@pytest.fixture
def wallet_payload() -> dict:
    """Raw request body with a small but varied history."""
    return {
        "walletAddress": "0x742d35Cc6634C0532925a3b844Bc454e4438f44e",
        "transactions": [
            {
                "hash": "0xaaa1",
                "timestamp": "2024-05-20T10:00:00Z",
                "type": "swap",
                "details": {"protocol": "Uniswap", "token_from": "USDC", "token_to": "ETH"},
            },
            {
                "hash": "0xaaa2",
                "timestamp": "2024-05-22T10:00:00Z",
                "type": "stake",
                "details": {"protocol": "Lido", "token": "ETH"},
            },
            {
                "hash": "0xaaa3",
                "timestamp": "2023-01-01T00:00:00Z",
                "type": "token_hold",
                "details": {"token": "ETH", "start_date": "2023-01-01", "end_date": "2024-01-01"},
            },
            {
                "hash": "0xaaa4",
                "timestamp": "2024-05-25T09:30:00Z",
                "type": "governance_vote",
                "details": {"protocol": "Uniswap", "proposal_id": 42},
            },
        ],
    }


@pytest.fixture
def client():
    """FastAPI TestClient for the persona API."""
    from fastapi.testclient import TestClient

    from persona_protocol.api_server.server import app

    return TestClient(app)
