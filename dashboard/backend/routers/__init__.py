"""
API Routers

- apps   : 앱 목록 및 라이프사이클 작업 중계
- health : 헬스체크
"""
from .apps import router as apps_router
from .health import router as health_router

__all__ = [
    'apps_router',
    'health_router',
]
