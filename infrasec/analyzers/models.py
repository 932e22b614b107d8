"""
infrasec/analyzers/models.py - 분석 입력/출력 데이터 구조

입력 레코드는 수집기(EC2Collector)가 EC2 API 응답에서 생성하며,
출력(Finding, InstanceExposure)은 분석 호출마다 새로 생성됩니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from infrasec.core.config import settings
from infrasec.rules import Severity

# =============================================================================
# 입력 레코드
# =============================================================================


@dataclass(frozen=True)
class PermissionRecord:
    """Security Group 인바운드 규칙 1건 (IpPermission)

    Attributes:
        protocol: 프로토콜 (tcp, udp, icmp, "-1" = 전체)
        from_port: 시작 포트 (전체 프로토콜이면 None)
        to_port: 끝 포트
        ipv4_ranges: 허용 IPv4 CIDR 목록 (API 응답 순서)
        ipv6_ranges: 허용 IPv6 CIDR 목록 (API 응답 순서)
    """

    protocol: str
    from_port: int | None = None
    to_port: int | None = None
    ipv4_ranges: tuple[str, ...] = ()
    ipv6_ranges: tuple[str, ...] = ()

    @property
    def public_ipv4(self) -> bool:
        return settings.PUBLIC_IPV4_CIDR in self.ipv4_ranges

    @property
    def public_ipv6(self) -> bool:
        return settings.PUBLIC_IPV6_CIDR in self.ipv6_ranges

    @property
    def is_public(self) -> bool:
        """인터넷 전체(0.0.0.0/0 또는 ::/0)에 열려 있는지"""
        return self.public_ipv4 or self.public_ipv6

    @property
    def public_source(self) -> str | None:
        """매칭된 퍼블릭 CIDR (IPv4 우선)"""
        if self.public_ipv4:
            return settings.PUBLIC_IPV4_CIDR
        if self.public_ipv6:
            return settings.PUBLIC_IPV6_CIDR
        return None

    @property
    def has_port_range(self) -> bool:
        """포트 범위가 정의되어 있는지 (ICMP의 -1 등은 제외)"""
        return (
            self.from_port is not None
            and self.to_port is not None
            and self.from_port >= 0
            and self.to_port >= 0
        )

    @property
    def is_all_traffic(self) -> bool:
        return self.protocol == settings.ALL_PROTOCOLS


@dataclass(frozen=True)
class SecurityGroupRecord:
    """Security Group 1건"""

    group_id: str
    group_name: str
    permissions: tuple[PermissionRecord, ...] = ()
    vpc_id: str = ""

    @property
    def is_default(self) -> bool:
        return self.group_name == settings.DEFAULT_SG_NAME


@dataclass(frozen=True)
class InstanceRecord:
    """EC2 인스턴스 1건

    Attributes:
        instance_id: 인스턴스 ID
        public_ip: 퍼블릭 IP (없으면 None)
        state: 인스턴스 상태 (running, stopped 등)
        group_ids: 연결된 Security Group ID (연결 순서)
    """

    instance_id: str
    public_ip: str | None
    state: str
    group_ids: tuple[str, ...] = ()

    @property
    def is_public(self) -> bool:
        """퍼블릭 IP가 있고 실행 중인 인스턴스"""
        return bool(self.public_ip) and self.state == "running"


# =============================================================================
# 출력
# =============================================================================


@dataclass(frozen=True)
class AffectedRule:
    """Finding을 유발한 규칙 정보

    port는 단일 포트 규칙이면 int, 범위면 "from-to", 전체 트래픽이면 "all".
    """

    port: int | str
    protocol: str
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {"port": self.port, "protocol": self.protocol, "source": self.source}


@dataclass(frozen=True)
class Finding:
    """보안 점검 결과 1건"""

    group_id: str
    group_name: str
    rule_id: str
    severity: Severity
    description: str
    recommendation: str
    affected_rule: AffectedRule | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "security_group_id": self.group_id,
            "security_group_name": self.group_name,
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "description": self.description,
            "recommendation": self.recommendation,
        }
        if self.affected_rule is not None:
            data["affected_rule"] = self.affected_rule.to_dict()
        return data


@dataclass(frozen=True)
class InstanceExposure:
    """퍼블릭 인스턴스의 노출 포트와 위험도

    Attributes:
        instance_id: 인스턴스 ID
        public_ip: 퍼블릭 IP
        group_ids: 연결된 Security Group ID
        exposed_ports: 인터넷에 노출된 포트 (오름차순, 중복 없음)
        risk_level: exposed_ports로부터 결정된 위험도
        recommendations: 인스턴스별 권장사항
    """

    instance_id: str
    public_ip: str
    group_ids: tuple[str, ...]
    exposed_ports: tuple[int, ...]
    risk_level: Severity
    recommendations: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "public_ip": self.public_ip,
            "security_groups": list(self.group_ids),
            "exposed_ports": list(self.exposed_ports),
            "risk_level": self.risk_level.value,
            "recommendations": list(self.recommendations),
        }
