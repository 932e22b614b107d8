"""
infrasec/analyzers - 보안 분석 엔진

두 개의 독립된 분석 파이프라인으로 구성됩니다.

    SG 목록 + 활성 SG ID   → SecurityGroupRiskEngine → Finding + 심각도 집계
    인스턴스 + SG 목록      → PublicInstanceAnalyzer  → 인스턴스별 노출 포트 + 위험도

공통:
    - EC2Collector: EC2 API 응답 → 분석 입력 레코드
    - critical_ports: 위험 포트 정의 및 임계값
    - recommendations: 권장사항 생성
"""

from .collector import EC2Collector
from .models import (
    AffectedRule,
    Finding,
    InstanceExposure,
    InstanceRecord,
    PermissionRecord,
    SecurityGroupRecord,
)

__all__: list[str] = [
    "EC2Collector",
    "AffectedRule",
    "Finding",
    "InstanceExposure",
    "InstanceRecord",
    "PermissionRecord",
    "SecurityGroupRecord",
]
