"""
애플리케이션 예외 정의

서비스/리포지토리/가드에서 발생시키고 main.py의 예외 핸들러가
{"error": ..., "status": ...} 형태로 응답한다.
"""

from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """모든 애플리케이션 예외의 기반 클래스"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "서버 내부 오류가 발생했습니다."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message, "status": self.status_code}
        body.update(self.details)
        return body


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "잘못된 요청입니다."


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "인증이 필요합니다."


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "권한이 없습니다."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "요청한 리소스를 찾을 수 없습니다."


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "이미 존재하는 리소스입니다."


class InternalServerError(AppError):
    """내부 원인은 로그에만 남기고 호출자에게는 일반 메시지만 보낸다."""


# ---- 토큰 검증 실패 ----
class TokenError(UnauthorizedError):
    default_message = "유효하지 않은 토큰입니다."


class MalformedTokenError(TokenError):
    pass


class InvalidSignatureError(TokenError):
    pass


class TokenExpiredError(TokenError):
    default_message = "만료된 토큰입니다."


class WrongTokenTypeError(TokenError):
    pass
