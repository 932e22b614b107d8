"""
infrasec/analyzers/collector.py - EC2 데이터 수집기

수집 항목:
- Security Groups (인바운드 규칙)
- EC2 Instances (퍼블릭 IP, 상태, 연결된 SG)

수집은 호출 순서대로 순차 실행되며, API 오류는 APICallError로 래핑되어
상위 분석 도구에서 분석 전체 실패로 처리됩니다.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from infrasec.core.exceptions import APICallError

from .models import InstanceRecord, PermissionRecord, SecurityGroupRecord

logger = logging.getLogger(__name__)


class EC2Collector:
    """EC2 API 기반 Security Group / 인스턴스 수집기

    Args:
        ec2: boto3 EC2 client
    """

    def __init__(self, ec2: Any):
        self.ec2 = ec2

    def collect_security_groups(self, group_ids: list[str] | None = None) -> list[SecurityGroupRecord]:
        """Security Group 목록 수집

        Args:
            group_ids: 특정 SG ID만 조회 (None이면 전체)

        Returns:
            API 응답 순서의 SecurityGroupRecord 목록

        Raises:
            APICallError: describe_security_groups 실패
        """
        params: dict[str, Any] = {}
        if group_ids:
            params["GroupIds"] = list(group_ids)

        groups: list[SecurityGroupRecord] = []
        try:
            paginator = self.ec2.get_paginator("describe_security_groups")
            for page in paginator.paginate(**params):
                for sg in page.get("SecurityGroups", []):
                    groups.append(parse_security_group(sg))
        except ClientError as e:
            logger.warning(f"Security Group 수집 실패: {e}")
            raise APICallError.from_client_error("ec2", "describe_security_groups", e) from e
        except BotoCoreError as e:
            logger.warning(f"Security Group 수집 실패: {e}")
            raise APICallError.from_botocore_error("ec2", "describe_security_groups", e) from e

        logger.debug(f"Security Group {len(groups)}개 수집")
        return groups

    def collect_instances(self) -> list[InstanceRecord]:
        """EC2 인스턴스 목록 수집

        Raises:
            APICallError: describe_instances 실패
        """
        instances: list[InstanceRecord] = []
        try:
            paginator = self.ec2.get_paginator("describe_instances")
            for page in paginator.paginate():
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        instances.append(parse_instance(instance))
        except ClientError as e:
            logger.warning(f"EC2 인스턴스 수집 실패: {e}")
            raise APICallError.from_client_error("ec2", "describe_instances", e) from e
        except BotoCoreError as e:
            logger.warning(f"EC2 인스턴스 수집 실패: {e}")
            raise APICallError.from_botocore_error("ec2", "describe_instances", e) from e

        logger.debug(f"EC2 인스턴스 {len(instances)}개 수집")
        return instances

    def collect_active_group_ids(self) -> set[str]:
        """인스턴스에 연결된 모든 Security Group ID (상태 무관)"""
        active: set[str] = set()
        for instance in self.collect_instances():
            active.update(instance.group_ids)
        return active


# =============================================================================
# API 응답 파싱
# =============================================================================


def parse_permission(permission: dict[str, Any]) -> PermissionRecord:
    """IpPermission 딕셔너리를 PermissionRecord로 변환"""
    return PermissionRecord(
        protocol=str(permission.get("IpProtocol", "-1")),
        from_port=permission.get("FromPort"),
        to_port=permission.get("ToPort"),
        ipv4_ranges=tuple(r["CidrIp"] for r in permission.get("IpRanges", []) if r.get("CidrIp")),
        ipv6_ranges=tuple(r["CidrIpv6"] for r in permission.get("Ipv6Ranges", []) if r.get("CidrIpv6")),
    )


def parse_security_group(sg: dict[str, Any]) -> SecurityGroupRecord:
    """SecurityGroup 딕셔너리를 SecurityGroupRecord로 변환 (인바운드 규칙만)"""
    return SecurityGroupRecord(
        group_id=sg.get("GroupId", "unknown"),
        group_name=sg.get("GroupName", "unknown"),
        permissions=tuple(parse_permission(p) for p in sg.get("IpPermissions", [])),
        vpc_id=sg.get("VpcId", ""),
    )


def parse_instance(instance: dict[str, Any]) -> InstanceRecord:
    """Instance 딕셔너리를 InstanceRecord로 변환"""
    group_ids = tuple(sg["GroupId"] for sg in instance.get("SecurityGroups", []) if sg.get("GroupId"))
    return InstanceRecord(
        instance_id=instance.get("InstanceId", "unknown"),
        public_ip=instance.get("PublicIpAddress"),
        state=instance.get("State", {}).get("Name", ""),
        group_ids=group_ids,
    )
