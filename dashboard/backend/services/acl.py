"""
클러스터 / 앱 접근 제어

앱 필터 결정표 (role, isAdmin, acl 비어있음, '*' 포함):

    role  isAdmin  empty  wildcard  ->  결과
    Y     -        -      -             전체 허용
    N     Y        -      -             전체 허용
    N     N        Y      -             전체 거부 (fail closed)
    N     N        N      Y             전체 허용
    N     N        N      N             acl에 이름이 있는 앱만
"""
from enum import Enum
from typing import Iterable, List, Optional

from core.exceptions import Unauthorized
from models.cluster import ClusterConfig, ClusterSummary
from models.session import ClusterAcl, SessionUser

WILDCARD = "*"


class AppAccess(str, Enum):
    ALL = "all"
    NONE = "none"
    LISTED = "listed"


def decide_app_access(role: bool, is_admin: bool, acl_empty: bool, has_wildcard: bool) -> AppAccess:
    """앱 필터 결정표"""
    if role or is_admin:
        return AppAccess.ALL
    if acl_empty:
        return AppAccess.NONE
    if has_wildcard:
        return AppAccess.ALL
    return AppAccess.LISTED


def get_cluster_acl(user: SessionUser, cluster_code: Optional[str]) -> Optional[ClusterAcl]:
    return user.clusterAcl.get(cluster_code or "")


def check_cluster_access(user: SessionUser, cluster_code: Optional[str]) -> None:
    """클러스터 접근 권한 확인

    Raises:
        Unauthorized: role도 없고 해당 클러스터 ACL 항목도 없음
    """
    if not user.role and get_cluster_acl(user, cluster_code) is None:
        raise Unauthorized("Cluster unauthorized")


def _app_access(user: SessionUser, cluster_code: Optional[str]) -> AppAccess:
    acl = get_cluster_acl(user, cluster_code) or ClusterAcl()
    return decide_app_access(
        role=user.role,
        is_admin=acl.isAdmin,
        acl_empty=not acl.apps,
        has_wildcard=WILDCARD in acl.apps,
    )


def filter_apps(user: SessionUser, cluster_code: Optional[str], apps: Iterable[dict]) -> List[dict]:
    """사용자가 볼 수 있는 앱만 남긴다"""
    apps = list(apps)
    access = _app_access(user, cluster_code)
    if access == AppAccess.ALL:
        return apps
    if access == AppAccess.NONE:
        return []
    allowed = set(get_cluster_acl(user, cluster_code).apps)
    return [app for app in apps if app.get("name") in allowed]


def app_name_from_id(appid: str) -> str:
    """appid (<name>_<version>_<buildNum>) -> 앱 이름"""
    parts = appid.rsplit("_", 2)
    return parts[0] if len(parts) == 3 else appid


def check_app_access(user: SessionUser, cluster_code: Optional[str], appid: str) -> None:
    """단일 앱 변경 권한 확인 (클러스터 권한 포함)"""
    check_cluster_access(user, cluster_code)
    if not filter_apps(user, cluster_code, [{"name": app_name_from_id(appid)}]):
        raise Unauthorized(f"App unauthorized: {appid}")


def visible_clusters(user: SessionUser, clusters: Iterable[ClusterConfig]) -> List[ClusterSummary]:
    """사용자에게 보이는 클러스터 목록"""
    result = []
    for cfg in clusters:
        acl = get_cluster_acl(user, cfg.code)
        if not user.role and acl is None:
            continue
        result.append(ClusterSummary(
            code=cfg.code,
            name=cfg.name,
            isAdmin=user.role or acl.isAdmin,
        ))
    return result
