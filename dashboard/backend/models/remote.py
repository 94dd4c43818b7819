"""
원격 클러스터 API 호출 옵션
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

from models.cluster import ClusterConfig


class RemoteOptions(BaseModel):
    """원격 호출 옵션 (클러스터 설정 + 작업별 override)"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    endpoint: str
    method: str = "GET"
    timeout: int = 10000  # ms
    headers: Dict[str, str] = Field(default_factory=dict)
    token: Optional[str] = None
    # multipart 업로드: {"pkg": (filename, fileobj, content_type)}
    files: Optional[Dict[str, Any]] = None

    @classmethod
    def from_cluster(cls, cfg: ClusterConfig, **overrides) -> "RemoteOptions":
        opts = cls(endpoint=cfg.endpoint, timeout=cfg.timeout, token=cfg.token)
        return opts.model_copy(update=overrides)
