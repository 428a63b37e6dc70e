"""
Health Routes - Health check endpoints
"""
from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "message": "Server is alive"}
