"""Function API routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from funcstack.deployment_pass import DeploymentPass
from funcstack.functions.schemas import FunctionSummary

router = APIRouter(prefix="/functions", tags=["functions"])

_pass: DeploymentPass | None = None


def init_pass(deployment_pass: DeploymentPass) -> None:
    global _pass
    _pass = deployment_pass


def _get_pass() -> DeploymentPass:
    if _pass is None:
        raise HTTPException(status_code=503, detail="Deployment pass not initialized")
    return _pass


@router.get("", response_model=list[FunctionSummary])
async def list_functions(
    runtime: Optional[str] = Query(None, description="Filter by runtime"),
    search: Optional[str] = Query(None, description="Search in handler paths"),
) -> list[FunctionSummary]:
    """List all declared functions with optional filtering."""
    summaries = _get_pass().functions.list_summaries()

    if runtime:
        summaries = [s for s in summaries if s.runtime == runtime]
    if search:
        query_lower = search.lower()
        summaries = [s for s in summaries if query_lower in (s.handler or "").lower()]

    return summaries


@router.get("/{address}", response_model=FunctionSummary)
async def get_function(address: str) -> FunctionSummary:
    """Get a declared function by construct address."""
    props = _get_pass().functions.lookup(address)
    if props is None:
        raise HTTPException(
            status_code=404,
            detail=f"Function not found: {address}",
        )
    return FunctionSummary.from_props(address, props)
