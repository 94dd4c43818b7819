"""
감사(audit) 로그 모델
"""
from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    """작업 위험도"""
    RISKY = "RISKY"
    LIMIT = "LIMIT"
    NORMAL = "NORMAL"


class AuditRecord(BaseModel):
    """변경 작업 1건의 감사 기록"""
    clientId: str = "-"
    user: Optional[str] = None
    opName: str
    opType: str = "PAGE_MODEL"
    opLogLevel: RiskLevel
    opItem: str = "APP"
    opItemId: str
    clusterCode: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)
