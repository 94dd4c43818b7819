"""
클러스터 설정 조회

클러스터 코드 -> 접속 정보(endpoint, 기본 timeout, token)
settings.CLUSTERS (JSON 문자열)가 있으면 우선 사용하고, 없으면 CLUSTERS_FILE을 읽는다.
"""
import os
import json
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from core.config import settings
from core.exceptions import ClusterConfigError, ClusterRegistryError
from models.cluster import ClusterConfig

logger = logging.getLogger(__name__)

# 로드된 클러스터 레지스트리 캐싱
_clusters: Optional[Dict[str, ClusterConfig]] = None


def _read_cluster_source() -> dict:
    """클러스터 정의 원본(dict) 로드"""
    if settings.CLUSTERS:
        return json.loads(settings.CLUSTERS)

    path = settings.CLUSTERS_FILE
    if path and os.path.exists(path):
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    logger.warning(f"No cluster definitions found (CLUSTERS unset, {path} missing)")
    return {}


def load_clusters() -> Dict[str, ClusterConfig]:
    """클러스터 레지스트리 로드 (최초 1회)"""
    global _clusters

    if _clusters is not None:
        return _clusters

    try:
        source = _read_cluster_source()
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read cluster definitions: {e}")
        raise ClusterRegistryError(f"invalid cluster definitions: {e}") from e

    if not isinstance(source, dict):
        logger.error(f"Cluster definitions must be a JSON object, got {type(source).__name__}")
        raise ClusterRegistryError("invalid cluster definitions: expected a JSON object")

    clusters = {}
    for code, cfg in source.items():
        if not isinstance(cfg, dict):
            logger.error(f"Cluster {code}: definition must be a JSON object")
            raise ClusterRegistryError(f"invalid cluster definition: {code}")
        cfg = dict(cfg)
        cfg.setdefault("code", code)
        cfg.setdefault("timeout", settings.DEFAULT_REMOTE_TIMEOUT)
        try:
            clusters[code] = ClusterConfig(**cfg)
        except ValidationError as e:
            logger.error(f"Cluster {code}: {e}")
            raise ClusterRegistryError(
                f"invalid cluster definition: {code} ({e.error_count()} error(s))"
            ) from e

    _clusters = clusters
    logger.info(f"Loaded {len(clusters)} cluster(s): {', '.join(clusters) or '-'}")
    return _clusters


def reload_clusters() -> Dict[str, ClusterConfig]:
    """캐시를 비우고 다시 로드"""
    global _clusters
    _clusters = None
    return load_clusters()


def list_clusters() -> List[ClusterConfig]:
    return list(load_clusters().values())


def get_cluster_cfg_by_code(cluster_code: Optional[str]) -> ClusterConfig:
    """클러스터 코드로 접속 정보 조회

    Returns:
        ClusterConfig: 레지스트리 항목의 복사본 (호출자가 수정해도 안전)

    Raises:
        ClusterConfigError: 등록되지 않은 클러스터 코드
    """
    cfg = load_clusters().get(cluster_code or "")
    if cfg is None:
        raise ClusterConfigError(f"cluster config not found: {cluster_code}")
    return cfg.model_copy(deep=True)
