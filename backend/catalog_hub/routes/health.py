"""
Health routes — liveness probe.
Version: 1.0.0
"""
from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    return {"status": "healthy"}
