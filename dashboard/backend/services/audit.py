"""
감사(audit) 로그 기록

변경 작업마다 'audit' 로거로 JSON 한 줄을 남긴다. 저장 형식/보관은 로그 수집기 책임.
"""
import logging
from typing import Optional

from fastapi import Request

from models.audit import AuditRecord, RiskLevel

audit_logger = logging.getLogger("audit")


def client_id_from_request(request: Request) -> str:
    """프록시 체인(X-Forwarded-For) 기준 클라이언트 식별자"""
    forwarded = request.headers.get("x-forwarded-for", "")
    ips = [ip.strip() for ip in forwarded.split(",") if ip.strip()]
    if ips:
        return ",".join(ips)
    return "-"


def oplog(
    op_name: str,
    risk: RiskLevel,
    item_id: str,
    client_id: str = "-",
    user: Optional[str] = None,
    cluster_code: Optional[str] = None,
) -> AuditRecord:
    """감사 기록 1건 작성"""
    record = AuditRecord(
        clientId=client_id or "-",
        user=user,
        opName=op_name,
        opLogLevel=risk,
        opItemId=item_id,
        clusterCode=cluster_code,
    )
    audit_logger.info(record.model_dump_json())
    return record
