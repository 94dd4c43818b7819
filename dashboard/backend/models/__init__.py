# Pydantic models
from .cluster import ClusterConfig, ClusterSummary
from .session import ClusterAcl, SessionUser
from .remote import RemoteOptions
from .audit import AuditRecord, RiskLevel

__all__ = [
    # Cluster
    'ClusterConfig', 'ClusterSummary',
    # Session
    'ClusterAcl', 'SessionUser',
    # Remote
    'RemoteOptions',
    # Audit
    'AuditRecord', 'RiskLevel',
]
