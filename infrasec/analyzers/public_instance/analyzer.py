"""
infrasec/analyzers/public_instance/analyzer.py - 퍼블릭 인스턴스 분석

실행 중이면서 퍼블릭 IP가 있는 인스턴스만 대상으로 ExposureAggregator를
적용하고, 인스턴스 수/노출 포트 수와 위험도 분포를 집계합니다.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from infrasec.rules import Severity

from ..critical_ports import get_critical_ports
from ..models import InstanceExposure, InstanceRecord, SecurityGroupRecord
from .aggregator import ExposureAggregator


@dataclass(frozen=True)
class PublicInstanceSummary:
    """퍼블릭 인스턴스 집계"""

    total_instances: int
    public_instances: int
    total_exposed_ports: int

    @property
    def public_exposure_rate(self) -> str:
        """퍼블릭 인스턴스 비율 ("NN%")"""
        if self.total_instances == 0:
            return "0%"
        return f"{_round_half_up(self.public_instances * 100 / self.total_instances)}%"

    @property
    def average_exposed_ports(self) -> int:
        """퍼블릭 인스턴스당 평균 노출 포트 수 (반올림)"""
        if self.public_instances == 0:
            return 0
        return _round_half_up(self.total_exposed_ports / self.public_instances)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_instances": self.total_instances,
            "public_instances": self.public_instances,
            "total_exposed_ports": self.total_exposed_ports,
            "public_exposure_rate": self.public_exposure_rate,
            "average_exposed_ports": self.average_exposed_ports,
        }


@dataclass(frozen=True)
class RiskAssessment:
    """위험도 분포"""

    high_risk: int
    medium_risk: int
    low_risk: int
    critical_service_exposures: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "high_risk": self.high_risk,
            "medium_risk": self.medium_risk,
            "low_risk": self.low_risk,
            "critical_service_exposures": self.critical_service_exposures,
        }


@dataclass(frozen=True)
class PublicInstanceAnalysisResult:
    """퍼블릭 인스턴스 분석 결과"""

    summary: PublicInstanceSummary
    instances: list[InstanceExposure] = field(default_factory=list)


class PublicInstanceAnalyzer:
    """퍼블릭 인스턴스 노출 분석기

    Args:
        aggregator: 인스턴스 노출 집계기 (기본: ExposureAggregator())
    """

    def __init__(self, aggregator: ExposureAggregator | None = None):
        self.aggregator = aggregator or ExposureAggregator()

    def analyze(
        self,
        instances: Sequence[InstanceRecord],
        groups: Sequence[SecurityGroupRecord],
    ) -> PublicInstanceAnalysisResult:
        """인스턴스 목록 분석

        Args:
            instances: 전체 인스턴스 (수집 순서)
            groups: 인스턴스에 연결된 SG 레코드 (ID로 매칭, 목록에 없는 SG는 무시)
        """
        groups_by_id = {group.group_id: group for group in groups}
        exposures: list[InstanceExposure] = []

        for instance in instances:
            if not instance.is_public:
                continue
            attached = [groups_by_id[gid] for gid in dict.fromkeys(instance.group_ids) if gid in groups_by_id]
            exposures.append(self.aggregator.aggregate(instance, attached))

        return PublicInstanceAnalysisResult(
            summary=PublicInstanceSummary(
                total_instances=len(instances),
                public_instances=len(exposures),
                total_exposed_ports=sum(len(e.exposed_ports) for e in exposures),
            ),
            instances=exposures,
        )


def assess_instances(exposures: Sequence[InstanceExposure]) -> RiskAssessment:
    """위험도별 인스턴스 수와 노출된 위험 서비스 포트 총계"""
    return RiskAssessment(
        high_risk=sum(1 for e in exposures if e.risk_level is Severity.HIGH),
        medium_risk=sum(1 for e in exposures if e.risk_level is Severity.MEDIUM),
        low_risk=sum(1 for e in exposures if e.risk_level is Severity.LOW),
        critical_service_exposures=sum(len(get_critical_ports(e.exposed_ports)) for e in exposures),
    )


def _round_half_up(value: float) -> int:
    return int(value + 0.5)
