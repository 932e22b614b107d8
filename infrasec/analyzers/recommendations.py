"""
infrasec/analyzers/recommendations.py - 개선 권장사항 생성

Finding/노출 집계로부터 권장사항 문자열 목록을 만드는 순수 함수 모음.
순서: HIGH 관련 → MEDIUM 관련 → 일반 모범 사례.
"""

from __future__ import annotations

from collections.abc import Sequence

from infrasec.rules import Severity

from .critical_ports import EXPOSED_PORTS_MEDIUM_THRESHOLD, get_dangerous_ports
from .models import Finding

SECURITY_GROUP_BEST_PRACTICES = (
    "Regular security group audits should be performed",
    "Consider using AWS Config for continuous compliance monitoring",
    "Implement Infrastructure as Code (IaC) for consistent security group management",
)

PUBLIC_INSTANCE_BEST_PRACTICES = (
    "Implement Infrastructure as Code for consistent security configurations",
    "Set up CloudWatch alerts for new public instance creation",
    "Regular security assessments should be automated",
)


def security_group_recommendations(findings: Sequence[Finding]) -> list[str]:
    """SG Finding 목록에 대한 권장사항"""
    recommendations: list[str] = []
    high_count = sum(1 for f in findings if f.severity is Severity.HIGH)
    medium_count = sum(1 for f in findings if f.severity is Severity.MEDIUM)

    if high_count > 0:
        recommendations.append(f"Address {high_count} HIGH severity findings immediately")
        recommendations.append("Implement principle of least privilege for security group rules")
        recommendations.append("Use specific IP ranges instead of 0.0.0.0/0 where possible")

    if medium_count > 0:
        recommendations.append(f"Review {medium_count} MEDIUM severity findings")
        recommendations.append("Consider implementing a security group naming convention")

    recommendations.extend(SECURITY_GROUP_BEST_PRACTICES)
    return recommendations


def instance_recommendations(exposed_ports: Sequence[int]) -> list[str]:
    """인스턴스 1대의 노출 포트에 대한 권장사항"""
    recommendations: list[str] = []
    dangerous = get_dangerous_ports(exposed_ports)

    if dangerous:
        recommendations.append(f"Restrict access to dangerous ports: {', '.join(str(p) for p in dangerous)}")

    if len(exposed_ports) > EXPOSED_PORTS_MEDIUM_THRESHOLD:
        recommendations.append("Consider reducing the number of exposed ports")

    if exposed_ports:
        recommendations.append("Use Application Load Balancer or NAT Gateway for controlled access")
        recommendations.append("Consider moving to private subnet with VPN access")

    return recommendations


def public_instance_recommendations(
    public_instances: int,
    high_risk: int,
    critical_service_exposures: int,
) -> list[str]:
    """퍼블릭 인스턴스 분석 전체에 대한 권장사항

    Args:
        public_instances: 퍼블릭 인스턴스 수
        high_risk: HIGH 위험 인스턴스 수
        critical_service_exposures: 노출된 위험 서비스 포트 총계
    """
    if public_instances == 0:
        return [
            "No public instances detected - good security posture",
            "Continue regular monitoring for new public instances",
        ]

    recommendations: list[str] = []

    if high_risk > 0:
        recommendations.append(f"{high_risk} high-risk public instances require immediate attention")
        recommendations.append("Consider moving critical services to private subnets")
        recommendations.append("Implement bastion hosts or VPN for administrative access")

    if critical_service_exposures > 0:
        recommendations.append(f"{critical_service_exposures} critical service ports exposed")
        recommendations.append("Use Application Load Balancers to reduce direct instance exposure")
        recommendations.append("Consider CloudFront for web applications")

    recommendations.extend(PUBLIC_INSTANCE_BEST_PRACTICES)
    return recommendations
