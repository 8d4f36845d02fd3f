"""
Design Planner API Server - REST API for the scheduling board.
"""

import logging
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.response_models import ErrorResponse, HealthResponse
from planner import __version__
from planner import config
from planner import db as db_module
from planner.contracts import InvariantViolation
from planner.observability import CorrelationIdMiddleware, configure_logging
from planner.slot_layout import AssignmentNotFound, DropRejected

logger = logging.getLogger(__name__)

settings = config.load_settings()

# FastAPI app initialization
app = FastAPI(
    title="Design Planner API",
    description="Half-day slot layout for the team scheduling board",
    version=__version__,
)

# CORS middleware - configurable via CORS_ORIGINS env var or planner.yaml
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(settings["cors_origins"]),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

# ==== Routers ====
from api.layout_router import layout_router  # noqa: E402, I001
from api.slot_router import slot_router  # noqa: E402

app.include_router(layout_router, prefix="/api/layout")
app.include_router(slot_router, prefix="/api")


# ==== DB Startup ====
@app.on_event("startup")
async def ensure_schema_on_startup():
    """Create the assignments table if missing and log DB info."""
    db_path = db_module.get_db_path()
    logger.info("=== Design Planner Startup ===")
    logger.info("DB path: %s", db_path)
    version = db_module.ensure_schema(db_path)
    logger.info("DB schema version (user_version): %d", version)


# ==== Error envelopes ====


def _error(status_code: int, error: str, error_code: str) -> JSONResponse:
    body = ErrorResponse(error=error, error_code=error_code)
    return JSONResponse(content=body.model_dump(), status_code=status_code)


@app.exception_handler(DropRejected)
async def drop_rejected_handler(request: Request, exc: DropRejected):
    logger.info("Drop rejected on %s: %s", request.url.path, exc.reason)
    return _error(409, exc.reason, exc.code)


@app.exception_handler(AssignmentNotFound)
async def assignment_not_found_handler(request: Request, exc: AssignmentNotFound):
    return _error(404, str(exc), "not_found")


@app.exception_handler(InvariantViolation)
async def invariant_violation_handler(request: Request, exc: InvariantViolation):
    logger.error("Refusing arrangement on %s: %s", request.url.path, exc)
    return _error(500, str(exc), "invariant_violation")


# ==== Health ====


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Liveness check."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now().isoformat(),
    )


# ==== Main ====


def main():
    """Run the server."""
    configure_logging(settings["log_level"], settings["json_logs"])
    uvicorn.run(app, host=settings["api_host"], port=settings["api_port"])


if __name__ == "__main__":
    main()
