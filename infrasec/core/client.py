"""
infrasec/core/client.py - boto3 session/client 헬퍼

Retry(adaptive 모드) + 타임아웃이 설정된 boto3 client를 생성하고,
리전/자격 증명별 AWSClientService를 캐싱합니다.

자격 증명 우선순위:
    1. 명시적으로 전달된 access key / secret key
    2. AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY 환경변수
    3. boto3 기본 자격 증명 체인 (프로파일, 인스턴스 역할 등)

Example:
    from infrasec.core.client import get_aws_client

    service = get_aws_client(region="ap-northeast-2")
    ec2 = service.get_ec2_client()
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any, Literal, cast

from botocore.exceptions import BotoCoreError, ClientError

from infrasec.core.config import get_api_max_attempts, get_default_region, settings

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

RetryMode = Literal["legacy", "standard", "adaptive"]

DEFAULT_RETRY_MODE: RetryMode = "adaptive"


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    max_attempts: int | None = None,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = settings.API_CONNECT_TIMEOUT,
    read_timeout: int = settings.API_READ_TIMEOUT,
    **kwargs: Any,
) -> Any:
    """Retry가 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (ec2 등)
        region_name: 리전 (None이면 세션 기본값)
        max_attempts: 최대 시도 횟수 (None이면 설정값)
        retry_mode: 재시도 모드
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client
    """
    from botocore.config import Config

    if max_attempts is None:
        max_attempts = get_api_max_attempts()

    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )

    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )


class AWSClientService:
    """리전 단위 boto3 세션과 EC2 client 보관

    Attributes:
        region: 분석 대상 리전
        session: boto3 Session
    """

    def __init__(
        self,
        region: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
    ):
        import boto3

        self.region = region or get_default_region()

        session_kwargs: dict[str, Any] = {"region_name": self.region}
        if access_key_id and secret_access_key:
            session_kwargs["aws_access_key_id"] = access_key_id
            session_kwargs["aws_secret_access_key"] = secret_access_key
        elif os.environ.get("AWS_ACCESS_KEY_ID") and os.environ.get("AWS_SECRET_ACCESS_KEY"):
            session_kwargs["aws_access_key_id"] = os.environ["AWS_ACCESS_KEY_ID"]
            session_kwargs["aws_secret_access_key"] = os.environ["AWS_SECRET_ACCESS_KEY"]

        self.session = boto3.Session(**session_kwargs)
        self._ec2_client: Any = None

    def get_ec2_client(self) -> Any:
        """EC2 client (최초 호출 시 생성)"""
        if self._ec2_client is None:
            self._ec2_client = get_client(self.session, "ec2", region_name=self.region)
        return self._ec2_client

    def test_connection(self) -> bool:
        """DescribeRegions 호출로 자격 증명/네트워크 확인"""
        try:
            self.get_ec2_client().describe_regions()
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"AWS 연결 테스트 실패 [{self.region}]: {e}")
            return False


_clients_by_key: dict[str, AWSClientService] = {}


def get_aws_client(
    region: str | None = None,
    access_key_id: str | None = None,
    secret_access_key: str | None = None,
) -> AWSClientService:
    """리전/access key 조합별로 캐싱된 AWSClientService 반환"""
    key = json.dumps(
        {
            "region": region or get_default_region(),
            "access_key_id": access_key_id or os.environ.get("AWS_ACCESS_KEY_ID", ""),
        },
        sort_keys=True,
    )

    service = _clients_by_key.get(key)
    if service is None:
        service = AWSClientService(region, access_key_id, secret_access_key)
        _clients_by_key[key] = service
    return service


def reset_aws_clients() -> None:
    """AWSClientService 캐시 초기화"""
    _clients_by_key.clear()
