"""
세션 사용자 및 클러스터 ACL 모델
"""
from typing import Dict, List
from pydantic import BaseModel, Field


class ClusterAcl(BaseModel):
    """클러스터 단위 권한"""
    isAdmin: bool = False
    apps: List[str] = Field(default_factory=list, description="허용 앱 이름 목록 ('*' = 전체)")


class SessionUser(BaseModel):
    """세션에 저장된 로그인 사용자"""
    name: str = ""
    role: bool = Field(default=False, description="슈퍼유저 여부")
    clusterAcl: Dict[str, ClusterAcl] = Field(default_factory=dict)
