"""
Health check API
"""
from fastapi import APIRouter

from core.cluster import list_clusters

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health_check():
    """API 헬스체크"""
    return {"status": "healthy", "service": "app-console", "clusters": len(list_clusters())}
