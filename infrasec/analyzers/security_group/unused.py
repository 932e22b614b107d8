"""
infrasec/analyzers/security_group/unused.py - 미사용 Security Group 탐지

판단 기준:
- 어떤 인스턴스에도 연결되지 않은 SG
- VPC 기본 SG("default")는 삭제할 수 없으므로 제외
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence

from infrasec.rules import SecurityRule, UnusedGroupRule

from ..models import Finding, SecurityGroupRecord

logger = logging.getLogger(__name__)


class UnusedGroupDetector:
    """미사용 SG 탐지기"""

    def detect(
        self,
        catalog_groups: Sequence[SecurityGroupRecord],
        active_group_ids: Collection[str],
        rules: Sequence[SecurityRule],
    ) -> list[Finding]:
        """미사용 SG마다 LOW Finding 1건 생성

        Args:
            catalog_groups: 분석 대상 SG 목록
            active_group_ids: 인스턴스에 연결된 SG ID 집합
            rules: 규칙 카탈로그 (sg-unused 규칙이 없으면 결과 없음)
        """
        rule = next((r for r in rules if isinstance(r, UnusedGroupRule)), None)
        if rule is None:
            logger.debug("미사용 SG 규칙 없음 - 점검 생략")
            return []

        findings = []
        reported: set[str] = set()
        for group in catalog_groups:
            if group.group_id in active_group_ids or group.is_default:
                continue
            if group.group_id in reported:
                continue
            reported.add(group.group_id)
            findings.append(
                Finding(
                    group_id=group.group_id,
                    group_name=group.group_name,
                    rule_id=rule.id,
                    severity=rule.severity,
                    description=rule.description,
                    recommendation=rule.recommendation,
                )
            )

        return findings
