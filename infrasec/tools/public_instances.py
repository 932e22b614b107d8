"""
infrasec/tools/public_instances.py - 퍼블릭 인스턴스 노출 분석 도구

처리 순서:
    1. 입력 검증 (region, include_security_groups)
    2. 인스턴스 수집 → 퍼블릭 인스턴스에 연결된 SG 일괄 수집 (순차)
    3. PublicInstanceAnalyzer 분석
    4. 출력 구성 (summary, instances + critical_ports, risk_assessment, recommendations)

include_security_groups가 False이면 SG를 조회하지 않으므로 노출 포트는
비어 있고 모든 퍼블릭 인스턴스는 LOW로 분류됩니다.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from botocore.exceptions import BotoCoreError

from infrasec.analyzers import EC2Collector
from infrasec.analyzers.critical_ports import get_critical_ports
from infrasec.analyzers.public_instance import PublicInstanceAnalyzer, assess_instances
from infrasec.analyzers.recommendations import public_instance_recommendations
from infrasec.core.client import AWSClientService
from infrasec.core.exceptions import AnalysisError, InfraSecError

from .base import AnalysisTool, utc_timestamp

logger = logging.getLogger(__name__)


class PublicInstanceTool(AnalysisTool):
    """퍼블릭 EC2 인스턴스 노출 분석 도구"""

    name: ClassVar[str] = "analyze_public_instances"
    description: ClassVar[str] = "Analyze EC2 instances for public IP exposure and associated security risks"
    input_schema: ClassVar[dict[str, Any]] = {
        "type": "object",
        "properties": {
            "region": {"type": "string", "description": "AWS region to scan"},
            "include_security_groups": {
                "type": "boolean",
                "description": "Include security group analysis",
                "default": True,
            },
        },
        "required": [],
    }

    def __init__(
        self,
        aws_client: AWSClientService | None = None,
        analyzer: PublicInstanceAnalyzer | None = None,
    ):
        super().__init__(aws_client)
        self.analyzer = analyzer or PublicInstanceAnalyzer()

    def execute(self, args: dict[str, Any] | None = None) -> dict[str, Any]:
        validated = self.validate_input(args)

        try:
            client = self.resolve_client(validated.get("region"))
            region = validated.get("region") or client.region

            collector = EC2Collector(client.get_ec2_client())
            instances = collector.collect_instances()

            groups = []
            if validated["include_security_groups"]:
                group_ids = list(
                    dict.fromkeys(gid for instance in instances if instance.is_public for gid in instance.group_ids)
                )
                if group_ids:
                    groups = collector.collect_security_groups(group_ids)

            result = self.analyzer.analyze(instances, groups)
        except (InfraSecError, BotoCoreError) as e:
            logger.error(f"퍼블릭 인스턴스 분석 실패: {e}")
            raise AnalysisError("Public instance", cause=e) from e

        risk_assessment = assess_instances(result.instances)

        instances_output = []
        for exposure in result.instances:
            data = exposure.to_dict()
            data["critical_ports"] = [cp.to_dict() for cp in get_critical_ports(exposure.exposed_ports)]
            instances_output.append(data)

        return {
            "analysis_type": "public-instance",
            "region": region,
            "timestamp": utc_timestamp(),
            "summary": result.summary.to_dict(),
            "instances": instances_output,
            "risk_assessment": risk_assessment.to_dict(),
            "recommendations": public_instance_recommendations(
                result.summary.public_instances,
                risk_assessment.high_risk,
                risk_assessment.critical_service_exposures,
            ),
        }
