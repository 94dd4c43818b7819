# Core module - configuration, cluster registry, errors, session
from .config import settings
from .cluster import get_cluster_cfg_by_code, list_clusters

__all__ = [
    'settings',
    'get_cluster_cfg_by_code',
    'list_clusters',
]
