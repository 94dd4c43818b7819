"""
Cluster related Pydantic models
"""
from typing import Optional
from pydantic import BaseModel


class ClusterConfig(BaseModel):
    """클러스터 접속 정보"""
    code: str
    name: Optional[str] = None
    endpoint: str
    timeout: int = 10000  # ms
    token: Optional[str] = None  # 원격 API Bearer 토큰


class ClusterSummary(BaseModel):
    """세션 사용자에게 노출되는 클러스터 정보"""
    code: str
    name: Optional[str] = None
    isAdmin: bool = False
