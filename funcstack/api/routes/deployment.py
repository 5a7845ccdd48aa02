"""Deployment pass status route."""

from fastapi import APIRouter

from funcstack.api.routes.functions import _get_pass

router = APIRouter(prefix="/pass", tags=["pass"])


@router.get("")
async def get_pass_status() -> dict:
    """Status of the active deployment pass."""
    deployment_pass = _get_pass()
    return {
        "pass_id": deployment_pass.pass_id,
        "finished": deployment_pass.finished,
        "pending_tasks": deployment_pass.tasks.pending_count(),
        "function_count": deployment_pass.functions.count(),
    }
