"""
infrasec/analyzers/public_instance - 퍼블릭 인스턴스 노출 분석
"""

from .aggregator import ExposureAggregator, assess_risk, collect_exposed_ports
from .analyzer import (
    PublicInstanceAnalysisResult,
    PublicInstanceAnalyzer,
    PublicInstanceSummary,
    RiskAssessment,
    assess_instances,
)

__all__: list[str] = [
    "ExposureAggregator",
    "PublicInstanceAnalyzer",
    "PublicInstanceAnalysisResult",
    "PublicInstanceSummary",
    "RiskAssessment",
    "assess_instances",
    "assess_risk",
    "collect_exposed_ports",
]
