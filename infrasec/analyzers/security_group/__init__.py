"""
infrasec/analyzers/security_group - Security Group 위험 분석

구성 요소:
    - PermissionEvaluator: 인바운드 규칙 1건 평가 (위험 포트, 넓은 범위, 전체 트래픽)
    - UnusedGroupDetector: 미사용 SG 탐지
    - SecurityGroupRiskEngine: 위 두 평가를 조합하고 심각도별로 집계
"""

from .analyzer import (
    SecurityGroupAnalysisResult,
    SecurityGroupRiskEngine,
    SecurityGroupSummary,
    summarize_findings,
)
from .evaluator import PermissionEvaluator
from .unused import UnusedGroupDetector

__all__: list[str] = [
    "PermissionEvaluator",
    "UnusedGroupDetector",
    "SecurityGroupRiskEngine",
    "SecurityGroupAnalysisResult",
    "SecurityGroupSummary",
    "summarize_findings",
]
