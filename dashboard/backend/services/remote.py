"""
원격 클러스터 API 호출

클러스터 endpoint + path 로 HTTP 요청을 보내고 JSON 응답을 그대로 돌려준다.
응답의 code(SUCCESS 여부) 판단은 호출자(app_ops) 책임.
"""
import logging
from typing import Optional

import httpx

from core.exceptions import RemoteCallError
from models.remote import RemoteOptions

logger = logging.getLogger(__name__)


def build_url(endpoint: str, path: str) -> str:
    return endpoint.rstrip("/") + "/" + path.lstrip("/")


def build_headers(options: RemoteOptions) -> dict:
    headers = dict(options.headers)
    if options.token:
        headers.setdefault("Authorization", f"Bearer {options.token}")
    return headers


async def call_remote(
    path: str,
    options: RemoteOptions,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict:
    """원격 API 호출

    Args:
        path: 원격 API 경로 (예: /api/restart/app1_1.0.0_1)
        options: endpoint, method, timeout(ms), headers, files
        transport: 테스트용 httpx transport

    Returns:
        dict: 원격 응답 JSON ({code, message, data})

    Raises:
        RemoteCallError: 네트워크 오류, 타임아웃, JSON이 아닌 응답
    """
    url = build_url(options.endpoint, path)
    timeout = options.timeout / 1000

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.request(
                options.method,
                url,
                headers=build_headers(options),
                files=options.files,
            )
    except httpx.TimeoutException as e:
        logger.warning(f"{options.method} {url} timed out after {options.timeout}ms")
        raise RemoteCallError(f"request timeout: {url}", code="TIMEOUT") from e
    except httpx.RequestError as e:
        logger.warning(f"{options.method} {url} failed: {e}")
        raise RemoteCallError(f"remote request failed: {e}") from e

    logger.debug(f"{options.method} {url} -> {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise RemoteCallError(
            f"invalid response from {url} (HTTP {response.status_code})"
        ) from e
