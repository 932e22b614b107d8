"""
infrasec/analyzers/critical_ports.py - 위험 포트 정의

인터넷에 노출되면 항상 HIGH 위험으로 분류되는 관리/DB 포트와
위험도 판정 임계값을 정의합니다.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

# 포트 번호 → 서비스명
CRITICAL_PORT_MAP: dict[int, str] = {
    22: "SSH",
    3389: "RDP",
    3306: "MySQL",
    5432: "PostgreSQL",
    1433: "SQL Server",
    6379: "Redis",
    27017: "MongoDB",
    5984: "CouchDB",
}

DANGEROUS_PORTS: frozenset[int] = frozenset(CRITICAL_PORT_MAP)

# to_port - from_port 가 이 값을 넘으면 넓은 포트 범위
PORT_RANGE_THRESHOLD = 100

# 노출 포트 수가 이 값을 넘으면 MEDIUM
EXPOSED_PORTS_MEDIUM_THRESHOLD = 5


@dataclass(frozen=True)
class CriticalPort:
    """노출된 위험 포트와 서비스명"""

    port: int
    service: str

    def to_dict(self) -> dict[str, Any]:
        return {"port": self.port, "service": self.service}


def get_dangerous_ports(ports: Iterable[int]) -> list[int]:
    """입력 순서를 유지한 위험 포트 목록"""
    return [port for port in ports if port in DANGEROUS_PORTS]


def get_critical_ports(ports: Iterable[int]) -> list[CriticalPort]:
    """위험 포트를 서비스명과 함께 반환"""
    return [CriticalPort(port, CRITICAL_PORT_MAP[port]) for port in get_dangerous_ports(ports)]
