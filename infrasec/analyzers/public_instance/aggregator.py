"""
infrasec/analyzers/public_instance/aggregator.py - 인스턴스 노출 포트 집계

인스턴스에 연결된 모든 SG의 퍼블릭 인바운드 규칙에서 포트를 모아
하나의 노출 포트 집합을 만들고 위험도를 분류합니다.

위험도 분류:
    HIGH   - 위험 포트(SSH, RDP, DB 등)가 하나라도 노출
    MEDIUM - 노출 포트가 5개 초과
    LOW    - 그 외
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from infrasec.rules import Severity

from ..critical_ports import DANGEROUS_PORTS, EXPOSED_PORTS_MEDIUM_THRESHOLD
from ..models import InstanceExposure, InstanceRecord, SecurityGroupRecord
from ..recommendations import instance_recommendations


def collect_exposed_ports(groups: Iterable[SecurityGroupRecord]) -> tuple[int, ...]:
    """퍼블릭 규칙의 포트 합집합 (오름차순)

    프로토콜은 구분하지 않습니다. TCP/UDP 같은 번호는 하나로 집계됩니다.
    """
    ports: set[int] = set()
    for group in groups:
        for permission in group.permissions:
            if permission.is_public and permission.has_port_range:
                ports.update(range(permission.from_port, permission.to_port + 1))
    return tuple(sorted(ports))


def assess_risk(exposed_ports: Sequence[int]) -> Severity:
    """노출 포트로부터 위험도 결정"""
    if any(port in DANGEROUS_PORTS for port in exposed_ports):
        return Severity.HIGH
    if len(exposed_ports) > EXPOSED_PORTS_MEDIUM_THRESHOLD:
        return Severity.MEDIUM
    return Severity.LOW


class ExposureAggregator:
    """인스턴스별 노출 집계기 (상태 없음)"""

    def aggregate(self, instance: InstanceRecord, attached_groups: Sequence[SecurityGroupRecord]) -> InstanceExposure:
        """인스턴스 1대의 노출 정보 생성

        Args:
            instance: 대상 인스턴스
            attached_groups: 인스턴스에 연결된 SG 레코드
        """
        exposed_ports = collect_exposed_ports(attached_groups)
        return InstanceExposure(
            instance_id=instance.instance_id,
            public_ip=instance.public_ip or "",
            group_ids=tuple(dict.fromkeys(instance.group_ids)),
            exposed_ports=exposed_ports,
            risk_level=assess_risk(exposed_ports),
            recommendations=tuple(instance_recommendations(exposed_ports)),
        )
