"""
App lifecycle API

원격 클러스터 관리 API로 앱 작업을 중계한다.
에러는 공통 예외 핸들러에서 {code, message}로 변환된다.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from core.cluster import list_clusters
from core.exceptions import BadRequest
from core.session import get_session_user
from models.session import SessionUser
from services import app_ops
from services.acl import visible_clusters
from services.audit import client_id_from_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["apps"])


def _bad_body(request: Request, message: str) -> BadRequest:
    logger.warning(f"{request.method} {request.url.path} failed: {message}")
    return BadRequest(message)


async def get_body_cluster_code(request: Request) -> Optional[str]:
    """본문(JSON 또는 form)의 clusterCode

    Raises:
        BadRequest: 본문을 해석할 수 없거나 clusterCode가 문자열이 아님
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise _bad_body(request, "invalid JSON body")
        value = body.get("clusterCode") if isinstance(body, dict) else None
    elif "form" in content_type:
        try:
            form = await request.form()
        except Exception as e:
            raise _bad_body(request, f"invalid form body: {e}") from e
        value = form.get("clusterCode")
    else:
        return None

    if value is not None and not isinstance(value, str):
        raise _bad_body(request, "clusterCode must be a string")
    return value


@router.get("/clusters")
async def get_clusters(user: SessionUser = Depends(get_session_user)):
    """세션 사용자가 접근 가능한 클러스터 목록"""
    return visible_clusters(user, list_clusters())


@router.get("/apps")
async def get_apps(
    clusterCode: Optional[str] = Query(None),
    user: SessionUser = Depends(get_session_user),
):
    """앱 목록 (호스트별 병합)"""
    return await app_ops.list_apps(user, clusterCode)


@router.post("/delete/{appid}")
async def delete_app(appid: str, request: Request, user: SessionUser = Depends(get_session_user)):
    cluster_code = await get_body_cluster_code(request)
    return await app_ops.delete_app(user, cluster_code, appid, client_id_from_request(request))


@router.post("/restart/{appid}")
async def restart_app(appid: str, request: Request, user: SessionUser = Depends(get_session_user)):
    cluster_code = await get_body_cluster_code(request)
    return await app_ops.restart_app(user, cluster_code, appid, client_id_from_request(request))


@router.post("/reload/{appid}")
async def reload_app(appid: str, request: Request, user: SessionUser = Depends(get_session_user)):
    cluster_code = await get_body_cluster_code(request)
    return await app_ops.reload_app(user, cluster_code, appid, client_id_from_request(request))


@router.post("/start/{appid}")
async def start_app(appid: str, request: Request, user: SessionUser = Depends(get_session_user)):
    cluster_code = await get_body_cluster_code(request)
    return await app_ops.start_app(user, cluster_code, appid, client_id_from_request(request))


@router.post("/stop/{appid}")
async def stop_app(appid: str, request: Request, user: SessionUser = Depends(get_session_user)):
    cluster_code = await get_body_cluster_code(request)
    return await app_ops.stop_app(user, cluster_code, appid, client_id_from_request(request))


@router.post("/publish")
async def publish_app(
    request: Request,
    clusterCode: Optional[str] = Query(None),
    user: SessionUser = Depends(get_session_user),
):
    """앱 패키지 업로드 후 배포 (multipart, 파일 필드 pkg)"""
    return await app_ops.publish_app(request, user, clusterCode, client_id_from_request(request))


@router.delete("/clean_exit_record/{appid}")
async def clean_app_exit_record(appid: str, request: Request, user: SessionUser = Depends(get_session_user)):
    cluster_code = await get_body_cluster_code(request)
    return await app_ops.clean_app_exit_record(user, cluster_code, appid, client_id_from_request(request))
