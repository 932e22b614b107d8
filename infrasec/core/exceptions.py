"""
infrasec/core/exceptions.py - 통합 예외 계층 구조

애플리케이션 전체에서 사용되는 예외 클래스들을 정의합니다.

예외 계층 구조:
    InfraSecError (베이스)
    ├── RuleCatalogError (규칙 카탈로그 파싱)
    ├── ToolExecutionError (도구 실행)
    │   └── APICallError (AWS API 호출)
    ├── AnalysisError (분석 실패 - 부분 결과 없음)
    └── ValidationError (입력 검증)

Usage:
    from infrasec.core.exceptions import APICallError

    try:
        ec2.describe_security_groups()
    except ClientError as e:
        raise APICallError.from_client_error("ec2", "describe_security_groups", e) from e
"""

from __future__ import annotations

from typing import Any

# EC2는 IAM 거부 시 UnauthorizedOperation 코드를 사용
ACCESS_DENIED_CODES = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "UnauthorizedAccess",
        "UnauthorizedOperation",
    }
)

CONNECTION_ERROR_NAMES = frozenset(
    {
        "EndpointConnectionError",
        "ConnectTimeoutError",
        "ReadTimeoutError",
        "ConnectionClosedError",
    }
)


# =============================================================================
# 베이스 예외
# =============================================================================


class InfraSecError(Exception):
    """infrasec 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 규칙 카탈로그
# =============================================================================


class RuleCatalogError(InfraSecError):
    """규칙 카탈로그 형식 오류"""

    def __init__(self, path: str, reason: str, cause: Exception | None = None):
        super().__init__(f"규칙 카탈로그 오류 [{path}]: {reason}", cause)
        self.path = path
        self.reason = reason
        self.details["path"] = path


# =============================================================================
# 도구 실행 / AWS API
# =============================================================================


class ToolExecutionError(InfraSecError):
    """도구 실행 관련 예외"""

    def __init__(self, tool_name: str, message: str, cause: Exception | None = None):
        super().__init__(f"도구 실행 오류 [{tool_name}]: {message}", cause)
        self.tool_name = tool_name
        self.details["tool_name"] = tool_name


class APICallError(ToolExecutionError):
    """AWS API 호출 관련 예외

    botocore의 ClientError / BotoCoreError를 래핑합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: str | None = None,
        error_message: str | None = None,
        cause: Exception | None = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(tool_name=service, message=message, cause=cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    @classmethod
    def from_client_error(cls, service: str, operation: str, client_error: Exception) -> APICallError:
        """botocore.exceptions.ClientError로부터 생성"""
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )

    @classmethod
    def from_botocore_error(cls, service: str, operation: str, error: Exception) -> APICallError:
        """BotoCoreError(네트워크, 자격 증명 등)로부터 생성. 에러 코드는 예외 클래스명."""
        return cls(
            service=service,
            operation=operation,
            error_code=type(error).__name__,
            error_message=str(error),
            cause=error,
        )


# =============================================================================
# 분석 / 입력 검증
# =============================================================================


class AnalysisError(InfraSecError):
    """분석 전체 실패

    데이터 수집 실패 시 분석을 중단하며 부분 결과는 반환하지 않습니다.
    """

    def __init__(self, analysis_type: str, cause: Exception | None = None):
        if cause is not None:
            reason = str(cause)
        else:
            reason = "Unknown error"
        super().__init__(f"{analysis_type} analysis failed: {reason}")
        self.cause = cause
        self.analysis_type = analysis_type
        self.details["analysis_type"] = analysis_type

    def __str__(self) -> str:
        return self.message


class ValidationError(InfraSecError):
    """입력 검증 오류"""

    def __init__(self, field: str, value: Any, expected: str):
        super().__init__(f"검증 오류 [{field}]: 예상값 '{expected}', 실제값 '{value}'")
        self.field = field
        self.value = value
        self.expected = expected
        self.details.update({"field": field, "value": str(value), "expected": expected})


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def _error_code(error: Exception) -> str | None:
    if isinstance(error, APICallError):
        return error.error_code
    if hasattr(error, "response"):
        return error.response.get("Error", {}).get("Code")
    return None


def _root_cause(error: Exception) -> Exception:
    while isinstance(error, InfraSecError) and error.cause is not None:
        error = error.cause
    return error


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인 (래핑된 원인 포함)"""
    if _error_code(error) in ACCESS_DENIED_CODES:
        return True
    return _error_code(_root_cause(error)) in ACCESS_DENIED_CODES


def is_connection_error(error: Exception) -> bool:
    """네트워크 연결/타임아웃 오류인지 확인 (래핑된 원인 포함)"""
    if isinstance(error, APICallError) and error.error_code in CONNECTION_ERROR_NAMES:
        return True
    return type(_root_cause(error)).__name__ in CONNECTION_ERROR_NAMES


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅"""
    if is_access_denied(error):
        return f"AWS Permission Denied: {error}"
    if is_connection_error(error):
        return f"AWS Connection Error: {error}"

    if isinstance(error, InfraSecError):
        return str(error)

    if hasattr(error, "response"):
        error_info = error.response.get("Error", {})
        code = error_info.get("Code", "UnknownError")
        message = error_info.get("Message", str(error))

        friendly_messages = {
            "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 로그인하세요.",
            "AuthFailure": "잘못된 자격 증명입니다.",
            "InvalidClientTokenId": "잘못된 자격 증명입니다.",
            "RequestLimitExceeded": "요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
        }
        return friendly_messages.get(code, f"{code}: {message}")

    return str(error)
