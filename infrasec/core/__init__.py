# infrasec/core/__init__.py
"""
infrasec.core - 공통 인프라

설정(config), 통합 예외 계층(exceptions), boto3 client 헬퍼(client)를 제공합니다.

Usage:
    from infrasec.core.config import settings, get_default_region
    from infrasec.core.exceptions import AnalysisError, is_access_denied
    from infrasec.core.client import get_aws_client
"""

from infrasec.core import client, config, exceptions

__all__: list[str] = [
    "client",
    "config",
    "exceptions",
]
