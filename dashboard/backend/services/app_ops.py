"""
앱 라이프사이클 작업 (조회, 시작/중지/재시작/리로드, 삭제, 배포, 종료기록 정리)

모든 작업은 같은 순서로 진행된다:
    권한 확인 -> 클러스터 설정 조회 -> 감사 기록(변경 작업) -> 원격 호출 -> 결과 정규화
재시도는 하지 않으며 실패는 {code, message} 에러로 그대로 올라간다.
"""
import logging
from contextlib import contextmanager
from typing import Any, List, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from core.cluster import get_cluster_cfg_by_code
from core.exceptions import (
    AppApiError,
    RemoteCallError,
    RemoteOperationError,
    UploadError,
)
from models.audit import RiskLevel
from models.remote import RemoteOptions
from models.session import SessionUser
from services.acl import check_app_access, check_cluster_access, filter_apps
from services.audit import oplog
from services.remote import call_remote
from utils.apps import merge_app_info

logger = logging.getLogger(__name__)

RESTART_TIMEOUT = 30000
RELOAD_TIMEOUT = 60000
STOP_TIMEOUT = 30000
PUBLISH_TIMEOUT = 120000

# 버전 접미사(8자)를 떼고 넘겨야 하는 시스템 앱
SYSTEM_APP_IDS = ("__PROXY___0.0.0_0", "__ADMIN___0.0.0_0")
SYSTEM_APP_SUFFIX_LEN = 8

UNKNOWN_FILE_NAME = "UNKNOWN_FILE_NAME"


def normalize_remote_result(result: Any, error: Optional[AppApiError] = None) -> Any:
    """원격 호출 결과 정규화

    성공(에러 없음 + code == SUCCESS)이면 data를 돌려준다.
    그 외에는 message = 에러 message > 결과 message,
    code = 에러 code > 결과 code > 'ERROR' 순으로 골라 예외를 던진다.
    """
    result = result if isinstance(result, dict) else {}
    if error is None and result.get("code") == "SUCCESS":
        return result.get("data")

    message = (error.message if error else None) or result.get("message")
    code = (error.code if error else None) or result.get("code") or "ERROR"
    if error is not None:
        raise RemoteCallError(message, code=code)
    raise RemoteOperationError(message, code=code)


@contextmanager
def log_failure(label: str):
    """블록 안에서 발생한 AppApiError를 작업명과 함께 로그 후 전파"""
    try:
        yield
    except AppApiError as e:
        logger.error(f"{label} failed: [{e.code}] {e.message}")
        raise


async def forward(label: str, path: str, options: RemoteOptions) -> Any:
    """원격 호출 + 정규화, 실패 시 로그 후 전파"""
    result, error = None, None
    try:
        result = await call_remote(path, options)
    except RemoteCallError as e:
        error = e

    with log_failure(label):
        data = normalize_remote_result(result, error)

    logger.debug(f"{label} results: {result}")
    return data


async def list_apps(user: SessionUser, cluster_code: Optional[str]) -> dict:
    """클러스터의 앱 목록 조회 (ACL 필터 후 호스트별 병합)

    Returns:
        {"success": 병합된 앱 목록, "error": 응답 실패 호스트 목록}
    """
    with log_failure(f"list apps of {cluster_code}"):
        check_cluster_access(user, cluster_code)
        cfg = get_cluster_cfg_by_code(cluster_code)

    data = await forward(
        "get apps from servers",
        "/api/apps",
        RemoteOptions.from_cluster(cfg, method="GET"),
    ) or {}

    ips: List[str] = []
    apps: List[dict] = []
    for item in data.get("success") or []:
        ips.append(item.get("ip"))
        apps.extend(item.get("apps") or [])

    apps = filter_apps(user, cluster_code, apps)
    return {
        "success": merge_app_info(ips, apps),
        "error": data.get("error") or [],
    }


async def run_app_operation(
    user: SessionUser,
    cluster_code: Optional[str],
    appid: str,
    op_name: str,
    risk: RiskLevel,
    path: str,
    method: str = "POST",
    timeout: Optional[int] = None,
    client_id: str = "-",
) -> Any:
    """단일 앱 변경 작업 공통 흐름"""
    label = f"{op_name.lower()} {appid}"
    with log_failure(label):
        check_app_access(user, cluster_code, appid)
        cfg = get_cluster_cfg_by_code(cluster_code)

    oplog(op_name, risk, appid, client_id=client_id, user=user.name, cluster_code=cluster_code)

    overrides = {"method": method}
    if timeout is not None:
        overrides["timeout"] = timeout
    options = RemoteOptions.from_cluster(cfg, **overrides)

    return await forward(label, path, options)


async def delete_app(user: SessionUser, cluster_code: Optional[str], appid: str, client_id: str = "-") -> Any:
    return await run_app_operation(
        user, cluster_code, appid, "DELETE_APP", RiskLevel.RISKY,
        f"/api/delete/{appid}", client_id=client_id,
    )


async def restart_app(user: SessionUser, cluster_code: Optional[str], appid: str, client_id: str = "-") -> Any:
    return await run_app_operation(
        user, cluster_code, appid, "RESTART_APP", RiskLevel.LIMIT,
        f"/api/restart/{appid}", timeout=RESTART_TIMEOUT, client_id=client_id,
    )


async def reload_app(user: SessionUser, cluster_code: Optional[str], appid: str, client_id: str = "-") -> Any:
    return await run_app_operation(
        user, cluster_code, appid, "RELOAD_APP", RiskLevel.LIMIT,
        f"/api/reload/{appid}", timeout=RELOAD_TIMEOUT, client_id=client_id,
    )


async def start_app(user: SessionUser, cluster_code: Optional[str], appid: str, client_id: str = "-") -> Any:
    return await run_app_operation(
        user, cluster_code, appid, "START_APP", RiskLevel.LIMIT,
        f"/api/start/{appid}", client_id=client_id,
    )


async def stop_app(user: SessionUser, cluster_code: Optional[str], appid: str, client_id: str = "-") -> Any:
    return await run_app_operation(
        user, cluster_code, appid, "STOP_APP", RiskLevel.RISKY,
        f"/api/stop/{appid}", timeout=STOP_TIMEOUT, client_id=client_id,
    )


def strip_system_app_suffix(appid: str) -> str:
    """__PROXY__/__ADMIN__ 시스템 앱은 버전 접미사 없이 전달"""
    if appid in SYSTEM_APP_IDS:
        return appid[:-SYSTEM_APP_SUFFIX_LEN]
    return appid


async def clean_app_exit_record(
    user: SessionUser, cluster_code: Optional[str], appid: str, client_id: str = "-"
) -> Any:
    """앱 종료 기록 정리 (감사 기록에는 원래 appid를 남긴다)"""
    target = strip_system_app_suffix(appid)
    return await run_app_operation(
        user, cluster_code, appid, "CLEAN_APP_EXIT_RECORD", RiskLevel.NORMAL,
        f"/api/clean_exit_record/{target}", method="DELETE", client_id=client_id,
    )


async def parse_app_package(request: Request) -> Tuple[Optional[UploadFile], Optional[UploadError]]:
    """multipart 요청에서 pkg 파일 추출

    Returns:
        (파일, 에러) 중 하나만 채워진다.
    """
    try:
        form = await request.form()
    except Exception as e:
        logger.warning(f"parse upload form failed: {e}")
        return None, UploadError(f"upload app package failed: {e}")

    pkg = form.get("pkg")
    if not isinstance(pkg, UploadFile):
        return None, UploadError("app package empty", code="ERROR_APP_PACKAGE_EMPTY")
    return pkg, None


async def publish_app(
    request: Request,
    user: SessionUser,
    cluster_code: Optional[str],
    client_id: str = "-",
) -> Any:
    """앱 패키지 배포

    1단계: 업로드 파싱 (성공/실패와 무관하게 감사 기록)
    2단계: 클러스터 설정 조회 후 pkg 파일을 원격 /api/publish 로 스트리밍
    """
    with log_failure("publish app"):
        check_cluster_access(user, cluster_code)

    pkg, error = await parse_app_package(request)
    file_name = (pkg.filename if pkg else None) or UNKNOWN_FILE_NAME
    oplog("PUBLISH_APP", RiskLevel.NORMAL, file_name, client_id=client_id, user=user.name, cluster_code=cluster_code)
    if error is not None:
        logger.error(f"publish app failed: [{error.code}] {error.message}")
        raise error

    try:
        with log_failure("publish app"):
            cfg = get_cluster_cfg_by_code(cluster_code)
        logger.info(f'publish "{file_name}" to server: {cfg.endpoint}')

        options = RemoteOptions.from_cluster(
            cfg,
            method="POST",
            timeout=PUBLISH_TIMEOUT,
            files={"pkg": (file_name, pkg.file, pkg.content_type or "application/octet-stream")},
        )
        return await forward("publish app", "/api/publish", options)
    finally:
        await pkg.close()
