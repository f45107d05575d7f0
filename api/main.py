# api/main.py
"""
FastAPI backend for the moment distribution solver - exposes momentdist as REST API.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional
import logging
import sys
from pathlib import Path

# Add project root to path to import momentdist
sys.path.insert(0, str(Path(__file__).parent.parent))

from momentdist.config import CONFIG
from momentdist.export import history_to_csv, history_to_json
from momentdist.results import ResultHistory
from momentdist.run import SolveOutcome, solve_payload
from momentdist.validate import RawPayload, ValidationFailure

logger = logging.getLogger("momentdist.api")


app = FastAPI(
    title="Moment Distribution API",
    description="Iterative moment distribution for continuous beams and rigid frames",
    version="0.1.0"
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Request/Response Models
# =============================================================================

class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SolveRequest(CamelModel):
    """Input tables as typed into the UI. Cells stay raw so bad ones can be pinpointed."""
    number_of_joints: int = Field(..., ge=CONFIG.min_joints, le=CONFIG.max_joints,
                                  description="Number of joints")
    labels: Optional[List[str]] = Field(None, description="Joint labels (default A, B, C, ...)")
    connections: List[List[bool]] = Field(..., description="N×N member flags")
    distribution_factor: List[List[Any]] = Field(..., description="N×N, DF[i][j] from joint j into member ij")
    carry_over_factor: List[List[Any]] = Field(..., description="N×N, COF[i][j] from joint j to far end i")
    initial_moment: List[List[Any]] = Field(..., description="N×N fixed-end moments")
    applied_moment: List[Any] = Field(..., description="Moment applied at each joint")
    max_iterations: int = Field(CONFIG.default_max_iterations, ge=CONFIG.min_iterations,
                                le=CONFIG.max_iterations, description="Maximum passes")
    min_error_percent: float = Field(CONFIG.default_min_error_percent, gt=0,
                                     description="Stop when the max error (%) drops below this")

    def to_payload(self) -> RawPayload:
        return RawPayload(
            n_joints=self.number_of_joints,
            connections=self.connections,
            distribution_factor=self.distribution_factor,
            carry_over_factor=self.carry_over_factor,
            initial_moment=self.initial_moment,
            applied_moment=self.applied_moment,
            max_iterations=self.max_iterations,
            min_error_percent=self.min_error_percent,
            labels=self.labels,
        )


class FailureData(CamelModel):
    """Which joint or cell is wrong."""
    kind: str
    message: str
    field: Optional[str] = None
    table: Optional[str] = None
    row: Optional[int] = None
    col: Optional[int] = None
    joint: Optional[int] = None


class RecordData(CamelModel):
    """One relaxation pass."""
    balance: List[List[float]]
    carry_over: List[List[float]]
    total: List[List[float]]
    max_error_percent: Optional[float] = None


class SolveResponse(CamelModel):
    """Complete solve result."""
    success: bool
    error: Optional[str] = None
    failure: Optional[FailureData] = None
    iteration_count: int = 0
    converged: bool = False
    labels: Optional[List[str]] = None
    records: List[RecordData] = []
    final_total: Optional[List[List[float]]] = None


# =============================================================================
# Conversion
# =============================================================================

def failure_data(failure: ValidationFailure) -> FailureData:
    return FailureData(
        kind=failure.kind,
        message=failure.message,
        field=getattr(failure, "field", None),
        table=getattr(failure, "table", None),
        row=getattr(failure, "row", None),
        col=getattr(failure, "col", None),
        joint=getattr(failure, "joint", None),
    )


def history_response(history: ResultHistory) -> SolveResponse:
    return SolveResponse(
        success=True,
        iteration_count=history.iteration_count,
        converged=history.converged,
        labels=list(history.labels),
        records=[
            RecordData(
                balance=r.balance.tolist(),
                carry_over=r.carry_over.tolist(),
                total=r.total.tolist(),
                max_error_percent=r.max_error_percent,
            )
            for r in history.records
        ],
        final_total=history.final_total.tolist(),
    )


def run_request(request: SolveRequest) -> SolveOutcome:
    """Validate and solve. Returns the outcome even if validation fails."""
    return solve_payload(request.to_payload())


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "service": "Moment Distribution API"}


@app.post("/api/solve", response_model=SolveResponse)
async def solve_structure(request: SolveRequest):
    """Run the moment distribution method."""
    outcome = run_request(request)
    if not outcome.success:
        logger.info("Solve request rejected: %s", outcome.error)
        return SolveResponse(success=False, error=outcome.error,
                             failure=failure_data(outcome.failure))
    return history_response(outcome.history)


@app.post("/api/export/csv")
async def export_csv(request: SolveRequest):
    """Export the distribution table as CSV."""
    outcome = run_request(request)

    if not outcome.success:
        raise HTTPException(status_code=400, detail=outcome.error)

    return StreamingResponse(
        iter([history_to_csv(outcome.history)]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=moment_distribution.csv"}
    )


@app.post("/api/export/json")
async def export_json(request: SolveRequest):
    """Export inputs and results as JSON."""
    outcome = run_request(request)

    if not outcome.success:
        raise HTTPException(status_code=400, detail=outcome.error)

    return StreamingResponse(
        iter([history_to_json(outcome.history)]),
        media_type="application/json",
        headers={"Content-Disposition": "attachment; filename=moment_distribution.json"}
    )


if __name__ == "__main__":
    import uvicorn
    from momentdist.logging_config import setup_logging

    setup_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
