"""
앱 콘솔 에러 정의 및 FastAPI 예외 핸들러

모든 에러는 {code, message} 형태로 응답한다.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppApiError(Exception):
    """API 에러 기본 클래스"""

    status_code: int = 500
    default_code: str = "ERROR"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class Unauthorized(AppApiError):
    """클러스터 / 앱 ACL 거부"""
    status_code = 403


class NotLoggedIn(AppApiError):
    """세션 사용자 없음"""
    status_code = 401
    default_code = "ERROR_NOT_LOGIN"


class ClusterConfigError(AppApiError):
    """알 수 없는 클러스터 코드"""
    status_code = 400


class ClusterRegistryError(AppApiError):
    """클러스터 정의(CLUSTERS / CLUSTERS_FILE) 형식 오류"""
    status_code = 500
    default_code = "ERROR_CLUSTER_CONFIG"


class BadRequest(AppApiError):
    """요청 본문 형식 오류"""
    status_code = 400


class UploadError(AppApiError):
    """앱 패키지 업로드 실패"""
    status_code = 400
    default_code = "ERROR_UPLOAD_APP_PACKAGE_FAILED"


class RemoteCallError(AppApiError):
    """원격 호출 전송 실패 (네트워크, 타임아웃, 잘못된 응답)

    code가 없을 수 있다. 정규화 단계에서 결과 code 또는 'ERROR'로 대체된다.
    """
    status_code = 502

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message, code)
        # 전송 에러는 code를 비워둘 수 있음
        self.code = code


class RemoteOperationError(AppApiError):
    """원격 API가 SUCCESS가 아닌 code를 반환"""
    status_code = 500


async def app_api_error_handler(request: Request, exc: AppApiError) -> JSONResponse:
    """AppApiError -> {code, message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code or "ERROR", "message": exc.message},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """프레임워크 HTTPException (404, 405, 잘못된 multipart 등) -> {code, message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": "ERROR", "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """앱에 공통 예외 핸들러 등록"""
    app.add_exception_handler(AppApiError, app_api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
