"""
tests/analyzers/test_permission_evaluator.py - 인바운드 규칙 평가 테스트
"""

from collections import Counter

import pytest
from conftest import public_permission

from infrasec.analyzers.models import AffectedRule, PermissionRecord
from infrasec.analyzers.security_group import PermissionEvaluator
from infrasec.rules import Severity, rule_from_dict


@pytest.fixture
def evaluator():
    return PermissionEvaluator()


def _evaluate(evaluator, permission, rules):
    return evaluator.evaluate(permission, "sg-1", "web", rules)


# =============================================================================
# 위험 포트 점검
# =============================================================================


class TestDangerousPorts:
    """단일 포트 규칙 매칭 테스트"""

    def test_ssh_open_to_world(self, evaluator, sample_rules):
        """tcp 22 0.0.0.0/0 → sg-ssh-world HIGH 1건"""
        findings = _evaluate(evaluator, public_permission(22, 22), sample_rules)

        assert len(findings) == 1
        finding = findings[0]
        assert finding.rule_id == "sg-ssh-world"
        assert finding.severity is Severity.HIGH
        assert finding.group_id == "sg-1"
        assert finding.group_name == "web"
        assert finding.affected_rule == AffectedRule(port=22, protocol="tcp", source="0.0.0.0/0")

    def test_range_covering_multiple_rules(self, evaluator, sample_rules):
        """범위 안의 모든 단일 포트 규칙이 카탈로그 순서로 매칭"""
        findings = _evaluate(evaluator, public_permission(20, 3400), sample_rules)

        port_findings = [f for f in findings if f.rule_id != "sg-wide-port-range"]
        assert [f.rule_id for f in port_findings] == ["sg-ssh-world", "sg-rdp-world", "sg-mysql-world"]

    def test_ipv6_source(self, evaluator, sample_rules):
        """::/0 만 열린 경우 source는 ::/0"""
        findings = _evaluate(evaluator, public_permission(22, 22, ipv6=True), sample_rules)

        assert [f.rule_id for f in findings] == ["sg-ssh-world"]
        assert findings[0].affected_rule.source == "::/0"

    def test_ipv4_preferred_when_both_public(self, evaluator, sample_rules):
        permission = PermissionRecord("tcp", 22, 22, ipv4_ranges=("0.0.0.0/0",), ipv6_ranges=("::/0",))

        findings = _evaluate(evaluator, permission, sample_rules)

        assert findings[0].affected_rule.source == "0.0.0.0/0"

    def test_protocol_mismatch(self, evaluator, sample_rules):
        """udp 22는 tcp 규칙과 매칭되지 않음"""
        assert _evaluate(evaluator, public_permission(22, 22, protocol="udp"), sample_rules) == []

    def test_port_outside_range(self, evaluator, sample_rules):
        assert _evaluate(evaluator, public_permission(80, 80), sample_rules) == []

    def test_icmp_has_no_port_range(self, evaluator, sample_rules):
        """ICMP(-1) 포트는 점검 대상 아님"""
        assert _evaluate(evaluator, public_permission(-1, -1, protocol="icmp"), sample_rules) == []

    def test_rule_with_private_source_ignored(self, evaluator, sample_rules):
        """source가 퍼블릭 CIDR이 아닌 규칙은 평가하지 않음"""
        from infrasec.rules import PointPortRule

        private_rule = PointPortRule(
            id="sg-http-internal",
            name="HTTP internal",
            description="d",
            severity=Severity.LOW,
            recommendation="r",
            port=80,
            protocol="tcp",
            source="10.0.0.0/8",
        )

        assert _evaluate(evaluator, public_permission(80, 80), (private_rule,)) == []

    def test_rule_without_protocol_never_matches(self, evaluator):
        """카탈로그에 protocol이 없는 규칙은 tcp 22에도 매칭되지 않음"""
        rule = rule_from_dict(
            {
                "id": "x-ssh",
                "description": "d",
                "severity": "HIGH",
                "recommendation": "r",
                "port": 22,
                "source": "0.0.0.0/0",
            }
        )

        assert _evaluate(evaluator, public_permission(22, 22), (rule,)) == []


# =============================================================================
# 퍼블릭 여부
# =============================================================================


class TestNonPublic:
    """퍼블릭이 아닌 규칙은 어떤 Finding도 생성하지 않음"""

    @pytest.mark.parametrize(
        "permission",
        [
            PermissionRecord("tcp", 22, 22, ipv4_ranges=("10.0.0.0/8",)),
            PermissionRecord("tcp", 0, 65535, ipv4_ranges=("192.168.0.0/16",)),
            PermissionRecord("-1", ipv4_ranges=("10.0.0.0/8",)),
            PermissionRecord("-1"),
        ],
    )
    def test_no_findings(self, evaluator, sample_rules, permission):
        assert _evaluate(evaluator, permission, sample_rules) == []


# =============================================================================
# 넓은 포트 범위 / 전체 트래픽
# =============================================================================


class TestWidePortRange:
    """넓은 포트 범위 점검 테스트"""

    def test_full_range(self, evaluator, sample_rules):
        """tcp 0-65535 → 위험 포트 3건 + 넓은 범위 1건 (위험 포트 먼저)"""
        findings = _evaluate(evaluator, public_permission(0, 65535), sample_rules)

        assert [f.rule_id for f in findings] == [
            "sg-ssh-world",
            "sg-rdp-world",
            "sg-mysql-world",
            "sg-wide-port-range",
        ]
        wide = findings[-1]
        assert wide.severity is Severity.MEDIUM
        assert wide.description == "Security group rule opens a wide port range (0-65535)"
        assert wide.affected_rule == AffectedRule(port="0-65535", protocol="tcp", source="0.0.0.0/0")

    def test_range_without_dangerous_ports(self, evaluator, sample_rules):
        """tcp 1000-2000 → 넓은 범위 1건만"""
        findings = _evaluate(evaluator, public_permission(1000, 2000), sample_rules)

        assert len(findings) == 1
        assert findings[0].rule_id == "sg-wide-port-range"
        assert findings[0].description == "Security group rule opens a wide port range (1000-2000)"
        assert findings[0].affected_rule == AffectedRule(port="1000-2000", protocol="tcp", source="0.0.0.0/0")

    def test_designated_rule_with_port_field(self, evaluator):
        """port 필드가 있어도 sg-wide-port-range는 넓은 범위 규칙으로 평가"""
        rule = rule_from_dict(
            {
                "id": "sg-wide-port-range",
                "description": "Security group rule opens a wide port range",
                "severity": "MEDIUM",
                "recommendation": "r",
                "port": 0,
            }
        )

        findings = _evaluate(evaluator, public_permission(1000, 2000), (rule,))

        assert [f.rule_id for f in findings] == ["sg-wide-port-range"]

    def test_threshold_boundary(self, evaluator, sample_rules):
        """to - from == 100 이면 넓은 범위 아님, 101 이면 해당"""
        at_threshold = _evaluate(evaluator, public_permission(8000, 8100), sample_rules)
        over_threshold = _evaluate(evaluator, public_permission(8000, 8101), sample_rules)

        assert at_threshold == []
        assert [f.rule_id for f in over_threshold] == ["sg-wide-port-range"]

    def test_source_is_first_listed_range(self, evaluator, sample_rules):
        """넓은 범위 Finding의 source는 첫 번째 CIDR"""
        permission = PermissionRecord("tcp", 8000, 9000, ipv4_ranges=("10.0.0.0/8", "0.0.0.0/0"))

        findings = _evaluate(evaluator, permission, sample_rules)

        assert findings[0].affected_rule.source == "10.0.0.0/8"

    def test_custom_threshold(self, sample_rules):
        evaluator = PermissionEvaluator(port_range_threshold=10)

        findings = evaluator.evaluate(public_permission(8000, 8011), "sg-1", "web", sample_rules)

        assert [f.rule_id for f in findings] == ["sg-wide-port-range"]

    def test_missing_designated_rule_disables_check(self, evaluator, sample_rules):
        """카탈로그에 sg-wide-port-range가 없으면 점검 생략"""
        rules = tuple(r for r in sample_rules if r.id != "sg-wide-port-range")

        assert _evaluate(evaluator, public_permission(8000, 9000), rules) == []


class TestAllTraffic:
    """전체 트래픽 점검 테스트"""

    def test_all_traffic(self, evaluator, sample_rules):
        """프로토콜 -1, 0.0.0.0/0 → sg-all-traffic HIGH 1건"""
        findings = _evaluate(evaluator, public_permission(None, None, protocol="-1"), sample_rules)

        assert len(findings) == 1
        assert findings[0].rule_id == "sg-all-traffic"
        assert findings[0].severity is Severity.HIGH
        assert findings[0].affected_rule == AffectedRule(port="all", protocol="all", source="0.0.0.0/0")

    def test_all_traffic_ipv6(self, evaluator, sample_rules):
        findings = _evaluate(evaluator, public_permission(None, None, protocol="-1", ipv6=True), sample_rules)

        assert findings[0].affected_rule.source == "::/0"

    def test_missing_designated_rule_disables_check(self, evaluator, sample_rules):
        rules = tuple(r for r in sample_rules if r.id != "sg-all-traffic")

        assert _evaluate(evaluator, public_permission(None, None, protocol="-1"), rules) == []

    def test_empty_catalog(self, evaluator):
        """빈 카탈로그면 Finding 없음"""
        assert _evaluate(evaluator, public_permission(0, 65535), ()) == []
        assert _evaluate(evaluator, public_permission(None, None, protocol="-1"), ()) == []


# =============================================================================
# 평가 순서
# =============================================================================


class TestPermissionOrder:
    """인바운드 규칙 순서와 무관한 결과"""

    def test_reversed_permissions_yield_same_findings(self, evaluator, sample_rules):
        permissions = [
            public_permission(22, 22),
            public_permission(0, 65535),
            public_permission(None, None, protocol="-1"),
            PermissionRecord("tcp", 3306, 3306, ipv4_ranges=("10.0.0.0/8",)),
            public_permission(1000, 2000, ipv6=True),
        ]

        def collect(ordered):
            return Counter(
                (f.rule_id, f.affected_rule)
                for permission in ordered
                for f in _evaluate(evaluator, permission, sample_rules)
            )

        forward = collect(permissions)
        backward = collect(reversed(permissions))

        assert forward == backward
        assert sum(forward.values()) == 7
