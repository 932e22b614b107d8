# infrasec/__init__.py
"""
infrasec - AWS 인프라 보안 분석 도구

Security Group 규칙과 퍼블릭 EC2 인스턴스의 노출 상태를 읽기 전용으로
분석하여 위험도별 Finding과 개선 권장사항을 생성합니다.

아키텍처:
    infrasec/
    ├── core/           # 설정, 예외 계층, boto3 client 헬퍼
    ├── rules/          # 보안 규칙 카탈로그 (RuleRepository)
    ├── analyzers/      # 평가 엔진 (SG 위험 분석, 인스턴스 노출 집계)
    ├── tools/          # 분석 도구 (입력 검증 + 수집 + 분석 + 출력 구성)
    └── cli/            # Click CLI, Rich 출력

Usage:
    from infrasec.rules import RuleRepository
    from infrasec.analyzers.security_group import SecurityGroupRiskEngine

    engine = SecurityGroupRiskEngine(RuleRepository().load())
    result = engine.analyze(groups, active_group_ids)
"""

__version__ = "1.0.0"

__all__: list[str] = ["__version__"]
