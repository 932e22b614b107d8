"""
infrasec/core/config.py - 중앙 설정 관리

불변 Settings 객체와 환경변수 헬퍼를 제공합니다.

환경변수:
    AWS_REGION / AWS_DEFAULT_REGION: 분석 대상 기본 리전
    INFRASEC_RULES_PATH: 보안 규칙 카탈로그 경로 (기본: 패키지 내장 카탈로그)
    INFRASEC_API_MAX_ATTEMPTS: boto3 재시도 횟수
    INFRASEC_DEBUG: CLI 디버그 로그 활성화 (--debug와 동일)

Usage:
    from infrasec.core.config import settings, get_default_region, get_rules_path

    region = get_default_region()  # "us-east-1"
    if cidr == settings.PUBLIC_IPV4_CIDR:
        ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# 패키지 내장 규칙 카탈로그
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_RULES_PATH = _PACKAGE_ROOT / "rules" / "data" / "security-rules.json"


@dataclass(frozen=True)
class Settings:
    """애플리케이션 전역 설정 (불변)

    Attributes:
        DEFAULT_REGION: 리전 환경변수가 없을 때 사용하는 리전
        PUBLIC_IPV4_CIDR: 무제한 IPv4 대역
        PUBLIC_IPV6_CIDR: 무제한 IPv6 대역
        ALL_PROTOCOLS: EC2 API의 "모든 프로토콜" 값
        DEFAULT_SG_NAME: VPC 기본 Security Group 이름 (미사용 판정 제외)
        API_MAX_ATTEMPTS: boto3 최대 재시도 횟수
        API_CONNECT_TIMEOUT: 연결 타임아웃 (초)
        API_READ_TIMEOUT: 읽기 타임아웃 (초)
    """

    DEFAULT_REGION: str = "us-east-1"
    PUBLIC_IPV4_CIDR: str = "0.0.0.0/0"
    PUBLIC_IPV6_CIDR: str = "::/0"
    ALL_PROTOCOLS: str = "-1"
    DEFAULT_SG_NAME: str = "default"

    API_MAX_ATTEMPTS: int = 5
    API_CONNECT_TIMEOUT: int = 10
    API_READ_TIMEOUT: int = 30

    @property
    def PUBLIC_CIDRS(self) -> frozenset[str]:
        return frozenset({self.PUBLIC_IPV4_CIDR, self.PUBLIC_IPV6_CIDR})


settings = Settings()


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_env_bool(name: str, default: bool = False) -> bool:
    """불리언 환경변수 조회 ("1", "true", "yes", "on"이면 True)"""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_env_int(name: str, default: int) -> int:
    """정수 환경변수 조회 (파싱 실패 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_default_region() -> str:
    """기본 리전 반환

    AWS_REGION → AWS_DEFAULT_REGION → Settings.DEFAULT_REGION 순서로 결정합니다.
    """
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or settings.DEFAULT_REGION


def get_rules_path() -> Path:
    """보안 규칙 카탈로그 기본 경로

    INFRASEC_RULES_PATH 환경변수가 있으면 해당 경로, 없으면 패키지 내장 카탈로그.
    """
    override = os.environ.get("INFRASEC_RULES_PATH")
    if override:
        return Path(override)
    return DEFAULT_RULES_PATH


def get_api_max_attempts() -> int:
    """boto3 재시도 횟수 (INFRASEC_API_MAX_ATTEMPTS로 조정)"""
    return get_env_int("INFRASEC_API_MAX_ATTEMPTS", settings.API_MAX_ATTEMPTS)


def is_debug_enabled() -> bool:
    """INFRASEC_DEBUG 환경변수로 디버그 로그 활성화 여부"""
    return get_env_bool("INFRASEC_DEBUG")


def get_version() -> str:
    """패키지 버전 문자열"""
    from infrasec import __version__

    return __version__
