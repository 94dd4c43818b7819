"""
앱 콘솔 백엔드 API

API 구조:
- /api/clusters                  - 접근 가능한 클러스터
- /api/apps                      - 앱 목록
- /api/{delete,restart,reload,start,stop}/{appid}
- /api/publish                   - 앱 패키지 배포
- /api/clean_exit_record/{appid} - 종료 기록 정리
- /api/health                    - 헬스체크
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from routers import apps_router, health_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)

# 세션 쿠키 (로그인 서비스가 발급)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    session_cookie=settings.SESSION_COOKIE,
    same_site="lax",
)

register_exception_handlers(app)

# ============================================
# 라우터 등록
# ============================================
app.include_router(apps_router)
app.include_router(health_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
