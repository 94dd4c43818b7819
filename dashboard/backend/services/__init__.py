# Business logic services
from . import acl, app_ops, audit, remote

__all__ = ['acl', 'app_ops', 'audit', 'remote']
