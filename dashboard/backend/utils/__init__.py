# Utility functions
from .apps import app_version_key, merge_app_info

__all__ = ['app_version_key', 'merge_app_info']
