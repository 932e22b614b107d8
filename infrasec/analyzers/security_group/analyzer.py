"""
infrasec/analyzers/security_group/analyzer.py - Security Group 위험 분석 엔진

PermissionEvaluator와 UnusedGroupDetector를 조합하여 SG 목록 전체의
Finding과 심각도별 집계를 생성합니다. 입력 순서대로 평가하므로 동일 입력에
대해 항상 같은 순서의 결과를 반환합니다.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from typing import Any

from infrasec.rules import SecurityRule, Severity

from ..models import Finding, SecurityGroupRecord
from .evaluator import PermissionEvaluator
from .unused import UnusedGroupDetector


@dataclass(frozen=True)
class SecurityGroupSummary:
    """SG 분석 집계"""

    total_groups: int
    high_risk_findings: int
    medium_risk_findings: int
    low_risk_findings: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_groups": self.total_groups,
            "high_risk_findings": self.high_risk_findings,
            "medium_risk_findings": self.medium_risk_findings,
            "low_risk_findings": self.low_risk_findings,
        }


@dataclass(frozen=True)
class SecurityGroupAnalysisResult:
    """SG 분석 결과"""

    summary: SecurityGroupSummary
    findings: list[Finding] = field(default_factory=list)


class SecurityGroupRiskEngine:
    """SG 위험 분석 엔진

    Args:
        rules: 규칙 카탈로그 (RuleRepository.load() 결과)
        evaluator: 규칙 평가기 (기본: PermissionEvaluator())
        detector: 미사용 SG 탐지기 (기본: UnusedGroupDetector())
    """

    def __init__(
        self,
        rules: Sequence[SecurityRule],
        evaluator: PermissionEvaluator | None = None,
        detector: UnusedGroupDetector | None = None,
    ):
        self.rules = tuple(rules)
        self.evaluator = evaluator or PermissionEvaluator()
        self.detector = detector or UnusedGroupDetector()

    def analyze(
        self,
        groups: Sequence[SecurityGroupRecord],
        active_group_ids: Collection[str],
        include_unused: bool = True,
    ) -> SecurityGroupAnalysisResult:
        """SG 목록 분석

        Args:
            groups: 분석 대상 SG 목록
            active_group_ids: 인스턴스에 연결된 SG ID 집합
            include_unused: 미사용 SG 탐지 포함 여부

        Returns:
            SecurityGroupAnalysisResult (규칙 Finding → 미사용 Finding 순서)
        """
        findings: list[Finding] = []

        for group in groups:
            for permission in group.permissions:
                findings.extend(self.evaluator.evaluate(permission, group.group_id, group.group_name, self.rules))

        if include_unused:
            findings.extend(self.detector.detect(groups, active_group_ids, self.rules))

        return SecurityGroupAnalysisResult(
            summary=summarize_findings(findings, len(groups)),
            findings=findings,
        )


def summarize_findings(findings: Sequence[Finding], total_groups: int) -> SecurityGroupSummary:
    """심각도별 Finding 수 집계"""
    return SecurityGroupSummary(
        total_groups=total_groups,
        high_risk_findings=sum(1 for f in findings if f.severity is Severity.HIGH),
        medium_risk_findings=sum(1 for f in findings if f.severity is Severity.MEDIUM),
        low_risk_findings=sum(1 for f in findings if f.severity is Severity.LOW),
    )
