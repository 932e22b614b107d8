"""
infrasec/rules/models.py - 보안 규칙 타입

카탈로그의 각 규칙은 평가 방식에 따라 다음 종류로 구분됩니다.

    PointPortRule     단일 포트 노출 규칙 (port/protocol/source 보유)
    WideRangeRule     넓은 포트 범위 규칙 (sg-wide-port-range)
    AllTrafficRule    전체 트래픽 허용 규칙 (sg-all-traffic)
    UnusedGroupRule   미사용 Security Group 규칙 (sg-unused)
    SecurityRule      그 외 정보성 규칙 (평가기에서 사용하지 않음)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# 카탈로그의 지정 규칙 ID
WIDE_PORT_RANGE_RULE_ID = "sg-wide-port-range"
ALL_TRAFFIC_RULE_ID = "sg-all-traffic"
UNUSED_GROUP_RULE_ID = "sg-unused"


class Severity(str, Enum):
    """Finding 심각도 (3단계 고정)"""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SecurityRule:
    """카탈로그 규칙 공통 필드

    Attributes:
        id: 규칙 고유 ID (예: sg-ssh-world)
        name: 표시 이름
        description: Finding 설명
        severity: 심각도
        recommendation: Finding 권장 조치
    """

    id: str
    name: str
    description: str
    severity: Severity
    recommendation: str

    @property
    def kind(self) -> str:
        return "generic"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "severity": self.severity.value,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class PointPortRule(SecurityRule):
    """단일 포트가 source 대역에 열려 있을 때 적용되는 규칙"""

    port: int = 0
    protocol: str | None = None
    source: str | None = None

    @property
    def kind(self) -> str:
        return "point-port"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({"port": self.port, "protocol": self.protocol, "source": self.source})
        return data


@dataclass(frozen=True)
class WideRangeRule(SecurityRule):
    @property
    def kind(self) -> str:
        return "wide-range"


@dataclass(frozen=True)
class AllTrafficRule(SecurityRule):
    @property
    def kind(self) -> str:
        return "all-traffic"


@dataclass(frozen=True)
class UnusedGroupRule(SecurityRule):
    @property
    def kind(self) -> str:
        return "unused-group"


_DESIGNATED_RULE_TYPES: dict[str, type[SecurityRule]] = {
    WIDE_PORT_RANGE_RULE_ID: WideRangeRule,
    ALL_TRAFFIC_RULE_ID: AllTrafficRule,
    UNUSED_GROUP_RULE_ID: UnusedGroupRule,
}


def rule_from_dict(data: dict[str, Any]) -> SecurityRule:
    """카탈로그 JSON 항목을 규칙 객체로 변환

    지정 ID면 해당 규칙 타입 (port가 있어도 무시), port가 있으면 PointPortRule,
    그 외는 SecurityRule. protocol이 없는 PointPortRule은 어떤 인바운드 규칙과도 매칭되지 않습니다.

    Raises:
        KeyError: 필수 필드 누락
        ValueError: severity/port 값 오류
    """
    common = {
        "id": str(data["id"]),
        "name": str(data.get("name", data["id"])),
        "description": str(data["description"]),
        "severity": Severity(data["severity"]),
        "recommendation": str(data["recommendation"]),
    }

    designated_type = _DESIGNATED_RULE_TYPES.get(common["id"])
    if designated_type is not None:
        return designated_type(**common)

    port = data.get("port")
    if port is not None:
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError(f"port must be an integer: {port!r}")
        return PointPortRule(
            **common,
            port=port,
            protocol=data.get("protocol"),
            source=data.get("source"),
        )

    return SecurityRule(**common)
