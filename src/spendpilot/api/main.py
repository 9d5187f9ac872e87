"""
SpendPilot API

Corporate spend policy checks over HTTP.

Endpoints:
    POST /policy/evaluate - Evaluate a scenario
    POST /policy/diff     - Compare two attempts
    POST /policy/apply    - Apply a patch and re-evaluate
    GET  /policy/config   - Active policy configuration
    GET  /health          - Liveness probe
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import spendpilot
from spendpilot.api.routes import policy
from spendpilot.config import load_config_from_env
from spendpilot.engine import SpendPolicyEngine

# =============================================================================
# Configuration
# =============================================================================

SP_LOG_LEVEL = os.getenv("SP_LOG_LEVEL", "INFO")
SP_DOCS_ENABLED = os.getenv("SP_DOCS_ENABLED", "true").lower() == "true"
SP_CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("SP_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


# =============================================================================
# Logging Setup (Structured JSON)
# =============================================================================

_EXTRA_FIELDS = ("spend_module", "outcome", "reason_codes", "error_code", "fingerprint")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Add extra fields if present
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        return json.dumps(log_entry)


logger = logging.getLogger("spendpilot")
logger.setLevel(getattr(logging, SP_LOG_LEVEL.upper(), logging.INFO))
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)


# =============================================================================
# App
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the policy configuration on startup."""
    config = load_config_from_env()
    app.state.engine = SpendPolicyEngine(config)
    policy.set_engine(app.state.engine)
    logger.info(
        "SpendPilot %s ready with policy %s v%s",
        spendpilot.__version__,
        config.name,
        config.version,
        extra={"fingerprint": config.fingerprint()[:16]},
    )

    yield

    logger.info("SpendPilot shutting down")


app = FastAPI(
    title="SpendPilot API",
    description="""
**Corporate spend policy decision engine.**

Decides whether a proposed transaction may proceed on CorporatePay,
requires approval, or is blocked, and explains why with corrective
alternatives and coaching tips.

## Quick Start

1. `POST /policy/evaluate` - Check a scenario
2. `POST /policy/apply` - Apply a suggested alternative
3. `POST /policy/diff` - Compare with a previous attempt
    """,
    version=spendpilot.__version__,
    lifespan=lifespan,
    docs_url="/docs" if SP_DOCS_ENABLED else None,
    redoc_url="/redoc" if SP_DOCS_ENABLED else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SP_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(policy.router)


@app.get("/health", tags=["Health"])
async def health():
    """Health check endpoint."""
    engine = getattr(app.state, "engine", None)
    return {
        "healthy": engine is not None,
        "version": spendpilot.__version__,
        "policy": engine.config.name if engine else None,
        "policy_fingerprint": engine.config.fingerprint() if engine else None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
