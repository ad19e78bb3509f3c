# services/errors.py
from typing import Any, Optional


class ServiceError(Exception):
    """컴포넌트 레벨 오류. 라우터 경계에서 ApiError 로 변환된다."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ServiceError):
    pass


class AnalysisProviderError(ServiceError):
    pass


class TranscriptionError(AnalysisProviderError):
    pass


class ParseError(ServiceError):
    pass


class PersistenceError(ServiceError):
    pass


class ApiError(Exception):
    """
    HTTP 응답으로 그대로 나가는 오류.
    body: {"error": ..., "details"?: ...}
    """

    def __init__(self, status_code: int, error: str, details: Optional[Any] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_body(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body
