"""
세션 사용자 의존성

로그인은 별도 서비스가 처리하고, 여기서는 서명된 세션 쿠키의 user 항목만 읽는다.
"""
from fastapi import Request
from pydantic import ValidationError

from core.exceptions import NotLoggedIn
from models.session import SessionUser


def get_session_user(request: Request) -> SessionUser:
    """세션에서 로그인 사용자 조회

    Raises:
        NotLoggedIn: 세션에 user가 없거나 형식이 잘못됨
    """
    user = request.session.get("user")
    if not user:
        raise NotLoggedIn("not login")
    try:
        return SessionUser.model_validate(user)
    except ValidationError as e:
        raise NotLoggedIn(f"invalid session user: {e.error_count()} error(s)") from e
