"""
tests/conftest.py - pytest 공통 픽스처

규칙 카탈로그, EC2 API 모킹, 레코드 생성 헬퍼를 제공합니다.

Usage:
    def test_something(sample_rules, mock_ec2_client):
        # sample_rules: 테스트용 규칙 카탈로그 (튜플)
        # mock_ec2_client: 페이지네이터가 설정된 EC2 client 모킹
        pass
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from infrasec.analyzers.models import (  # noqa: E402
    InstanceRecord,
    PermissionRecord,
    SecurityGroupRecord,
)
from infrasec.rules import parse_catalog  # noqa: E402

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정"""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("INFRASEC_RULES_PATH", raising=False)
    monkeypatch.delenv("INFRASEC_API_MAX_ATTEMPTS", raising=False)
    monkeypatch.delenv("INFRASEC_DEBUG", raising=False)

    yield

    from infrasec.core.client import reset_aws_clients

    reset_aws_clients()

    # CLI --debug가 설정한 핸들러 정리
    infrasec_logger = logging.getLogger("infrasec")
    for handler in list(infrasec_logger.handlers):
        infrasec_logger.removeHandler(handler)
    infrasec_logger.propagate = True
    infrasec_logger.setLevel(logging.NOTSET)


# =============================================================================
# 규칙 카탈로그 픽스처
# =============================================================================

SAMPLE_CATALOG: Dict[str, Any] = {
    "rules": [
        {
            "id": "sg-ssh-world",
            "name": "SSH Open to World",
            "description": "SSH port 22 is accessible from anywhere on the internet",
            "severity": "HIGH",
            "port": 22,
            "protocol": "tcp",
            "source": "0.0.0.0/0",
            "recommendation": "Restrict SSH access",
        },
        {
            "id": "sg-rdp-world",
            "name": "RDP Open to World",
            "description": "RDP port 3389 is accessible from anywhere on the internet",
            "severity": "HIGH",
            "port": 3389,
            "protocol": "tcp",
            "source": "0.0.0.0/0",
            "recommendation": "Restrict RDP access",
        },
        {
            "id": "sg-mysql-world",
            "name": "MySQL Open to World",
            "description": "MySQL port 3306 is accessible from anywhere on the internet",
            "severity": "HIGH",
            "port": 3306,
            "protocol": "tcp",
            "source": "0.0.0.0/0",
            "recommendation": "Restrict database access",
        },
        {
            "id": "sg-all-traffic",
            "name": "All Traffic Allowed",
            "description": "Security group allows all traffic",
            "severity": "HIGH",
            "recommendation": "Remove the all-traffic rule",
        },
        {
            "id": "sg-wide-port-range",
            "name": "Wide Port Range",
            "description": "Security group rule opens a wide port range",
            "severity": "MEDIUM",
            "recommendation": "Open only required ports",
        },
        {
            "id": "sg-unused",
            "name": "Unused Security Group",
            "description": "Security group is not attached to any instance",
            "severity": "LOW",
            "recommendation": "Remove unused security groups",
        },
    ]
}


@pytest.fixture
def sample_catalog() -> Dict[str, Any]:
    """테스트용 카탈로그 딕셔너리 (수정해도 다른 테스트에 영향 없음)"""
    return json.loads(json.dumps(SAMPLE_CATALOG))


@pytest.fixture
def sample_rules(sample_catalog):
    """테스트용 규칙 튜플"""
    return parse_catalog(json.dumps(sample_catalog), "sample")


@pytest.fixture
def catalog_file(tmp_path, sample_catalog) -> Path:
    """tmp_path에 기록된 카탈로그 파일"""
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(sample_catalog), encoding="utf-8")
    return path


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


def make_paginated_client(
    security_groups: Optional[List[Dict[str, Any]]] = None,
    instances: Optional[List[Dict[str, Any]]] = None,
) -> MagicMock:
    """describe_security_groups / describe_instances 페이지네이터가 설정된 EC2 client"""
    client = MagicMock()

    sg_paginator = MagicMock()
    sg_paginator.paginate.return_value = [{"SecurityGroups": security_groups or []}]

    instance_paginator = MagicMock()
    instance_paginator.paginate.return_value = [{"Reservations": [{"Instances": instances or []}]}]

    paginators = {
        "describe_security_groups": sg_paginator,
        "describe_instances": instance_paginator,
    }
    client.get_paginator.side_effect = lambda name: paginators[name]
    return client


@pytest.fixture
def mock_ec2_client():
    """EC2 클라이언트 모킹 (SG 1개, 퍼블릭 인스턴스 1개)"""
    return make_paginated_client(
        security_groups=[
            {
                "GroupId": "sg-web",
                "GroupName": "web",
                "VpcId": "vpc-1",
                "IpPermissions": [
                    {
                        "IpProtocol": "tcp",
                        "FromPort": 22,
                        "ToPort": 22,
                        "IpRanges": [{"CidrIp": "0.0.0.0/0"}],
                        "Ipv6Ranges": [],
                    }
                ],
            }
        ],
        instances=[
            {
                "InstanceId": "i-1234567890abcdef0",
                "PublicIpAddress": "54.1.2.3",
                "State": {"Name": "running"},
                "SecurityGroups": [{"GroupId": "sg-web", "GroupName": "web"}],
            }
        ],
    )


@pytest.fixture
def mock_aws_client(mock_ec2_client):
    """AWSClientService 모킹"""
    service = MagicMock()
    service.region = "ap-northeast-2"
    service.get_ec2_client.return_value = mock_ec2_client
    return service


# =============================================================================
# 유틸리티 함수
# =============================================================================


def public_permission(
    from_port: Optional[int],
    to_port: Optional[int],
    protocol: str = "tcp",
    ipv6: bool = False,
) -> PermissionRecord:
    """인터넷 전체에 열린 PermissionRecord 생성 헬퍼"""
    if ipv6:
        return PermissionRecord(protocol, from_port, to_port, ipv6_ranges=("::/0",))
    return PermissionRecord(protocol, from_port, to_port, ipv4_ranges=("0.0.0.0/0",))


def make_group(group_id: str, *permissions: PermissionRecord, name: Optional[str] = None) -> SecurityGroupRecord:
    """SecurityGroupRecord 생성 헬퍼"""
    return SecurityGroupRecord(group_id=group_id, group_name=name or group_id, permissions=tuple(permissions))


def make_instance(
    instance_id: str,
    *group_ids: str,
    public_ip: Optional[str] = "54.0.0.1",
    state: str = "running",
) -> InstanceRecord:
    """InstanceRecord 생성 헬퍼"""
    return InstanceRecord(instance_id=instance_id, public_ip=public_ip, state=state, group_ids=tuple(group_ids))


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation,
    )


# =============================================================================
# moto 통합 (선택적)
# =============================================================================

try:
    import moto

    @pytest.fixture
    def aws_credentials(monkeypatch):
        """moto 사용 시 AWS 자격 증명 설정"""
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
        monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-northeast-2")

    @pytest.fixture
    def moto_ec2(aws_credentials):
        """moto를 사용한 EC2 모킹 (VPC 1개)"""
        with moto.mock_aws():
            import boto3

            ec2 = boto3.client("ec2", region_name="ap-northeast-2")

            vpc = ec2.create_vpc(CidrBlock="10.0.0.0/16")
            vpc_id = vpc["Vpc"]["VpcId"]

            yield ec2, vpc_id

except ImportError:
    # moto가 설치되지 않은 경우 더미 픽스처
    @pytest.fixture
    def moto_ec2():
        pytest.skip("moto not installed")
