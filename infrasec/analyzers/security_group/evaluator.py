"""
infrasec/analyzers/security_group/evaluator.py - 인바운드 규칙 평가

하나의 PermissionRecord를 규칙 카탈로그와 대조하여 Finding을 생성합니다.

점검 항목 (퍼블릭 노출 규칙만 대상):
    1. 위험 포트: 단일 포트 규칙의 port가 [from_port, to_port] 범위에 포함
    2. 넓은 포트 범위: to_port - from_port > 임계값 (sg-wide-port-range)
    3. 전체 트래픽: 프로토콜 "-1" (sg-all-traffic)

카탈로그에 지정 규칙(sg-wide-port-range, sg-all-traffic)이 없으면 해당 점검은
실행되지 않습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from infrasec.core.config import settings
from infrasec.rules import (
    AllTrafficRule,
    PointPortRule,
    SecurityRule,
    WideRangeRule,
)

from ..critical_ports import PORT_RANGE_THRESHOLD
from ..models import AffectedRule, Finding, PermissionRecord

logger = logging.getLogger(__name__)


class PermissionEvaluator:
    """PermissionRecord → Finding 평가기 (상태 없음)

    Args:
        port_range_threshold: 넓은 포트 범위 판정 임계값
    """

    def __init__(self, port_range_threshold: int = PORT_RANGE_THRESHOLD):
        self.port_range_threshold = port_range_threshold

    def evaluate(
        self,
        permission: PermissionRecord,
        group_id: str,
        group_name: str,
        rules: Sequence[SecurityRule],
    ) -> list[Finding]:
        """규칙 1건 평가

        Returns:
            위험 포트 → 넓은 범위 → 전체 트래픽 순서의 Finding 목록
        """
        if not permission.is_public:
            return []

        findings: list[Finding] = []
        findings.extend(self._check_dangerous_ports(permission, group_id, group_name, rules))
        findings.extend(self._check_wide_port_range(permission, group_id, group_name, rules))
        findings.extend(self._check_all_traffic(permission, group_id, group_name, rules))
        return findings

    def _check_dangerous_ports(
        self,
        permission: PermissionRecord,
        group_id: str,
        group_name: str,
        rules: Sequence[SecurityRule],
    ) -> list[Finding]:
        if not permission.has_port_range:
            return []

        from_port = permission.from_port
        to_port = permission.to_port
        source = permission.public_source or "unknown"
        findings = []

        for rule in rules:
            if not isinstance(rule, PointPortRule):
                continue
            if rule.source not in settings.PUBLIC_CIDRS or rule.protocol != permission.protocol:
                continue
            if from_port <= rule.port <= to_port:
                findings.append(
                    Finding(
                        group_id=group_id,
                        group_name=group_name,
                        rule_id=rule.id,
                        severity=rule.severity,
                        description=rule.description,
                        recommendation=rule.recommendation,
                        affected_rule=AffectedRule(port=rule.port, protocol=permission.protocol, source=source),
                    )
                )

        return findings

    def _check_wide_port_range(
        self,
        permission: PermissionRecord,
        group_id: str,
        group_name: str,
        rules: Sequence[SecurityRule],
    ) -> list[Finding]:
        if not permission.has_port_range:
            return []
        if permission.to_port - permission.from_port <= self.port_range_threshold:
            return []

        rule = _find_rule(rules, WideRangeRule)
        if rule is None:
            logger.debug(f"넓은 포트 범위 규칙 없음 - 점검 생략 ({group_id})")
            return []

        span = f"{permission.from_port}-{permission.to_port}"
        if permission.ipv4_ranges:
            source = permission.ipv4_ranges[0]
        elif permission.ipv6_ranges:
            source = permission.ipv6_ranges[0]
        else:
            source = "unknown"

        return [
            Finding(
                group_id=group_id,
                group_name=group_name,
                rule_id=rule.id,
                severity=rule.severity,
                description=f"{rule.description} ({span})",
                recommendation=rule.recommendation,
                affected_rule=AffectedRule(port=span, protocol=permission.protocol, source=source),
            )
        ]

    def _check_all_traffic(
        self,
        permission: PermissionRecord,
        group_id: str,
        group_name: str,
        rules: Sequence[SecurityRule],
    ) -> list[Finding]:
        if not permission.is_all_traffic:
            return []

        rule = _find_rule(rules, AllTrafficRule)
        if rule is None:
            logger.debug(f"전체 트래픽 규칙 없음 - 점검 생략 ({group_id})")
            return []

        return [
            Finding(
                group_id=group_id,
                group_name=group_name,
                rule_id=rule.id,
                severity=rule.severity,
                description=rule.description,
                recommendation=rule.recommendation,
                affected_rule=AffectedRule(port="all", protocol="all", source=permission.public_source or "unknown"),
            )
        ]


def _find_rule(rules: Sequence[SecurityRule], rule_type: type[SecurityRule]) -> SecurityRule | None:
    return next((rule for rule in rules if isinstance(rule, rule_type)), None)
