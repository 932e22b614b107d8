"""
infrasec/rules - 보안 규칙 카탈로그

구성 요소:
    - RuleRepository: 카탈로그 로드 및 캐싱
    - SecurityRule 계열: 규칙 종류별 불변 타입
    - get_rule_by_id / get_rules_by_port / get_rules_by_severity: 순수 필터
"""

from .models import (
    ALL_TRAFFIC_RULE_ID,
    UNUSED_GROUP_RULE_ID,
    WIDE_PORT_RANGE_RULE_ID,
    AllTrafficRule,
    PointPortRule,
    SecurityRule,
    Severity,
    UnusedGroupRule,
    WideRangeRule,
    rule_from_dict,
)
from .repository import (
    RuleRepository,
    get_rule_by_id,
    get_rules_by_port,
    get_rules_by_severity,
    parse_catalog,
)

__all__: list[str] = [
    "RuleRepository",
    "SecurityRule",
    "PointPortRule",
    "WideRangeRule",
    "AllTrafficRule",
    "UnusedGroupRule",
    "Severity",
    "WIDE_PORT_RANGE_RULE_ID",
    "ALL_TRAFFIC_RULE_ID",
    "UNUSED_GROUP_RULE_ID",
    "rule_from_dict",
    "parse_catalog",
    "get_rule_by_id",
    "get_rules_by_port",
    "get_rules_by_severity",
]
