"""
infrasec/tools/base.py - 분석 도구 공통 베이스

각 도구는 name / description / input_schema 메타데이터와 execute(args)를
제공합니다. execute는 입력을 검증한 뒤 데이터를 수집하고 분석 결과를
JSON 직렬화 가능한 딕셔너리로 반환합니다.

오류 정책:
    - 입력 검증 실패 → ValidationError
    - 수집/분석 실패 → AnalysisError (부분 결과 없음)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, ClassVar

from infrasec.core.client import AWSClientService, get_aws_client
from infrasec.core.exceptions import ValidationError

_JSON_TYPES: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "boolean": bool,
    "array": (list, tuple),
}


class AnalysisTool(ABC):
    """분석 도구 베이스 클래스

    Args:
        aws_client: 사용할 AWSClientService (None이면 리전별 캐시에서 조회)
    """

    name: ClassVar[str]
    description: ClassVar[str]
    input_schema: ClassVar[dict[str, Any]]

    def __init__(self, aws_client: AWSClientService | None = None):
        self._aws_client = aws_client

    @abstractmethod
    def execute(self, args: dict[str, Any] | None = None) -> dict[str, Any]:
        """도구 실행"""

    def metadata(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

    def resolve_client(self, region: str | None) -> AWSClientService:
        if self._aws_client is not None:
            return self._aws_client
        return get_aws_client(region=region)

    def validate_input(self, args: dict[str, Any] | None) -> dict[str, Any]:
        """input_schema 기준 입력 검증 및 기본값 적용

        Raises:
            ValidationError: 알 수 없는 필드, 타입 불일치
        """
        if args is None:
            args = {}
        if not isinstance(args, dict):
            raise ValidationError("args", args, "object")

        properties: dict[str, Any] = self.input_schema.get("properties", {})
        validated: dict[str, Any] = {}

        for key, value in args.items():
            if key not in properties:
                raise ValidationError(key, value, "known field")
            if value is None:
                continue
            validated[key] = _check_type(key, value, properties[key])

        for key, prop in properties.items():
            if key not in validated and "default" in prop:
                validated[key] = prop["default"]

        return validated


def _check_type(key: str, value: Any, prop: dict[str, Any]) -> Any:
    expected = prop.get("type", "string")
    if not isinstance(value, _JSON_TYPES[expected]):
        raise ValidationError(key, value, expected)

    if expected == "string" and not value.strip():
        raise ValidationError(key, value, "non-empty string")

    if expected == "array":
        item_type = prop.get("items", {}).get("type", "string")
        for item in value:
            _check_type(f"{key}[]", item, {"type": item_type})
        return list(value)

    return value


def utc_timestamp() -> str:
    """ISO-8601 UTC 타임스탬프"""
    return datetime.now(timezone.utc).isoformat()
