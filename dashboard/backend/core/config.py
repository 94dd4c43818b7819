"""
Application configuration settings
"""
import os
from typing import List, Optional


class Settings:
    """Application settings"""

    # App
    APP_TITLE: str = "App Console API"
    APP_VERSION: str = "1.0.0"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["*"]
    CORS_HEADERS: List[str] = ["*"]

    # Session (쿠키 기반, 로그인은 별도 서비스에서 처리)
    SESSION_SECRET: str = os.getenv("SESSION_SECRET", "app-console-secret")
    SESSION_COOKIE: str = os.getenv("SESSION_COOKIE", "app_console_session")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Remote cluster API
    DEFAULT_REMOTE_TIMEOUT: int = int(os.getenv("DEFAULT_REMOTE_TIMEOUT", "10000"))  # ms

    # 클러스터 정의: JSON 문자열 또는 JSON 파일 경로
    # 예: {"c1": {"name": "prod", "endpoint": "http://10.0.0.1:9999", "token": "..."}}
    CLUSTERS: Optional[str] = os.getenv("CLUSTERS")
    CLUSTERS_FILE: str = os.getenv("CLUSTERS_FILE", "/data/clusters.json")


settings = Settings()
