"""
FastAPI server: HTTP wrapper around the persona analysis pipeline.

Exposes GET /api/health and POST /api/analyze. Stateless: every request is
validated, analyzed and answered in-process; nothing is stored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from persona_protocol import __version__
from persona_protocol.analysis_engine import analyze
from persona_protocol.errors import InputValidationError, PersonaContractError
from persona_protocol.ingest import parse_wallet_input
from persona_protocol.persona_logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /api/health response."""

    status: str = Field(..., description="Always 'healthy' when the process serves requests")
    version: str = Field(..., description="Package version")
    timestamp: str = Field(..., description="Server time (ISO 8601, UTC)")


class ScoresResponse(BaseModel):
    riskAppetite: int = Field(..., ge=1, le=100, description="Risk appetite (1–100)")
    loyalty: int = Field(..., ge=1, le=100, description="Loyalty (1–100)")
    activity: int = Field(..., ge=1, le=100, description="Activity (1–100)")


class PersonaResponse(BaseModel):
    """POST /api/analyze response: the persona, keys in fixed order."""

    walletAddress: str = Field(..., description="Wallet address from the request")
    personaTitle: str = Field(..., description="Categorical persona title")
    summary: str = Field(..., description="Two or three sentence description")
    scores: ScoresResponse
    keyTraits: list[str] = Field(..., min_length=3, max_length=5, description="Key behavioral traits")
    notableProtocols: list[str] = Field(
        default_factory=list, max_length=5, description="Most-used protocols, most frequent first"
    )


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error summary")
    errors: list[str] = Field(default_factory=list, description="Every validation violation found")


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

router = APIRouter(tags=["Persona"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.post(
    "/analyze",
    response_model=PersonaResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def analyze_wallet_endpoint(payload: Any = Body(...)) -> Any:
    """
    Analyze one wallet: body {"walletAddress": str, "transactions": [...]}.

    Returns 400 with every violation when the body is malformed, and 500 when
    the assembled persona breaks an output invariant.
    """
    try:
        wallet = parse_wallet_input(payload)
    except InputValidationError as e:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Validation failed", errors=e.errors).model_dump(),
        )

    logger.info(
        "api_analyze_request",
        wallet_id=wallet.wallet_address,
        tx_count=len(wallet.transactions),
    )
    try:
        result = analyze(wallet.wallet_address, wallet.transactions)
    except PersonaContractError as e:
        logger.exception("api_analyze_contract_error", wallet_id=wallet.wallet_address)
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())
    return PersonaResponse.model_validate(result.to_dict())


# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Persona Protocol API",
    description="Wallet persona analysis: scores, title, summary, traits and notable protocols.",
    version=__version__,
)

app.include_router(router, prefix="/api")
