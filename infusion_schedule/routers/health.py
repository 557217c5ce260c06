"""Health check endpoints for container orchestration.

The service keeps no connections to other systems, so health and liveness
only confirm the process is up and report the active bag policy.
"""

from typing import Any

from fastapi import APIRouter, Depends

from infusion_schedule.config import get_policy_flags
from infusion_schedule.core.bag_schedule import PolicyFlags

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    policy: PolicyFlags = Depends(get_policy_flags),
) -> dict[str, Any]:
    """
    Health check endpoint.

    Returns {"status": "healthy", "policy": {...}} so a deploy can be
    checked for the expected 5/6-day bag settings.
    """
    return {"status": "healthy", "policy": policy.model_dump()}


@router.get("/health/live")
async def liveness_probe() -> dict[str, Any]:
    """
    Kubernetes liveness probe.

    Returns success if the application process is running.
    """
    return {"status": "alive"}
