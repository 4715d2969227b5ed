"""
Health check route.
"""
from fastapi import APIRouter, Request
from app.models import HealthCheck

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
def health_check(request: Request) -> HealthCheck:
    """
    Health check endpoint.
    Returns 200 with ok=true if the key-value store answers.
    """
    return HealthCheck(ok=request.app.state.store.is_healthy())
