"""
infrasec/tools/security_groups.py - Security Group 분석 도구

처리 순서:
    1. 입력 검증 (region, group_ids, include_unused)
    2. SG 수집 → 인스턴스의 SG 연결 수집 (순차)
    3. SecurityGroupRiskEngine 분석
    4. 출력 구성 (summary, findings, recommendations)
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from botocore.exceptions import BotoCoreError

from infrasec.analyzers import EC2Collector
from infrasec.analyzers.recommendations import security_group_recommendations
from infrasec.analyzers.security_group import SecurityGroupRiskEngine
from infrasec.core.client import AWSClientService
from infrasec.core.exceptions import AnalysisError, InfraSecError
from infrasec.rules import RuleRepository

from .base import AnalysisTool, utc_timestamp

logger = logging.getLogger(__name__)


class SecurityGroupTool(AnalysisTool):
    """Security Group 보안 점검 도구

    Args:
        aws_client: AWSClientService (None이면 입력 리전으로 생성)
        repository: 규칙 저장소 (None이면 기본 카탈로그)
        engine: 분석 엔진 (None이면 repository 규칙으로 생성)
    """

    name: ClassVar[str] = "analyze_security_groups"
    description: ClassVar[str] = (
        "Analyze AWS Security Groups for potential security misconfigurations and vulnerabilities"
    )
    input_schema: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "region": {"type": "string", "description": "AWS region to analyze"},
            "group_ids": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Specific security group IDs to analyze",
            },
            "include_unused": {
                "type": "boolean",
                "description": "Include unused security groups",
                "default": True,
            },
        },
        "required": [],
    }

    def __init__(
        self,
        aws_client: AWSClientService | None = None,
        repository: RuleRepository | None = None,
        engine: SecurityGroupRiskEngine | None = None,
    ):
        super().__init__(aws_client)
        self.repository = repository or RuleRepository()
        self._engine = engine

    @property
    def engine(self) -> SecurityGroupRiskEngine:
        if self._engine is None:
            self._engine = SecurityGroupRiskEngine(self.repository.load())
        return self._engine

    def execute(self, args: dict[str, Any] | None = None) -> dict[str, Any]:
        validated = self.validate_input(args)

        try:
            client = self.resolve_client(validated.get("region"))
            region = validated.get("region") or client.region

            collector = EC2Collector(client.get_ec2_client())
            groups = collector.collect_security_groups(validated.get("group_ids"))
            active_group_ids = collector.collect_active_group_ids()

            result = self.engine.analyze(groups, active_group_ids, include_unused=validated["include_unused"])
        except (InfraSecError, BotoCoreError) as e:
            logger.error(f"Security Group 분석 실패: {e}")
            raise AnalysisError("Security group", cause=e) from e

        summary = result.summary.to_dict()
        summary["risk_distribution"] = {
            "high": result.summary.high_risk_findings,
            "medium": result.summary.medium_risk_findings,
            "low": result.summary.low_risk_findings,
        }

        return {
            "analysis_type": "security-group",
            "region": region,
            "timestamp": utc_timestamp(),
            "summary": summary,
            "findings": [finding.to_dict() for finding in result.findings],
            "recommendations": security_group_recommendations(result.findings),
        }
