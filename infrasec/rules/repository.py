"""
infrasec/rules/repository.py - 보안 규칙 카탈로그 로더

카탈로그 형식:
    {"rules": [{"id": ..., "name": ..., "description": ..., "severity": "HIGH",
                "port": 22, "protocol": "tcp", "source": "0.0.0.0/0",
                "recommendation": ...}]}

로드 정책:
    - 기본 경로 로드 결과는 RuleRepository 인스턴스에 캐싱
    - 명시적 경로는 캐시를 사용하지도, 채우지도 않음
    - 파일이 없거나 형식이 잘못되면 에러 로그 후 빈 목록 반환 (예외 없음)

Usage:
    repository = RuleRepository()
    rules = repository.load()
    ssh_rules = get_rules_by_port(rules, 22)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from infrasec.core.config import get_rules_path
from infrasec.core.exceptions import RuleCatalogError

from .models import PointPortRule, SecurityRule, Severity, rule_from_dict

logger = logging.getLogger(__name__)


def parse_catalog(raw: str, path: str) -> tuple[SecurityRule, ...]:
    """카탈로그 JSON 문자열을 규칙 튜플로 파싱

    Raises:
        RuleCatalogError: JSON 오류, rules 배열 누락, 필드 오류, ID 중복
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RuleCatalogError(path, "JSON 파싱 실패", cause=e) from e

    if not isinstance(data, dict) or not isinstance(data.get("rules"), list):
        raise RuleCatalogError(path, "'rules' 배열이 없습니다")

    rules: list[SecurityRule] = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(data["rules"]):
        if not isinstance(entry, dict):
            raise RuleCatalogError(path, f"rules[{index}]: 객체가 아닙니다")
        try:
            rule = rule_from_dict(entry)
        except KeyError as e:
            raise RuleCatalogError(path, f"rules[{index}]: 필수 필드 누락 {e}", cause=e) from e
        except ValueError as e:
            raise RuleCatalogError(path, f"rules[{index}]: {e}", cause=e) from e

        if rule.id in seen_ids:
            raise RuleCatalogError(path, f"rules[{index}]: 중복 ID '{rule.id}'")
        seen_ids.add(rule.id)
        rules.append(rule)

    return tuple(rules)


class RuleRepository:
    """불변 규칙 카탈로그 저장소

    분석 엔진에 인스턴스 단위로 전달합니다. 캐시를 비우려면 reset_cache()를
    호출하거나 새 인스턴스를 생성합니다.

    Attributes:
        default_path: 기본 카탈로그 경로 (None이면 설정값)
    """

    def __init__(self, default_path: str | Path | None = None):
        self.default_path = Path(default_path) if default_path else get_rules_path()
        self._cached_rules: tuple[SecurityRule, ...] | None = None

    def load(self, source_path: str | Path | None = None) -> tuple[SecurityRule, ...]:
        """규칙 카탈로그 로드

        Args:
            source_path: 명시적 카탈로그 경로 (캐시 우회)

        Returns:
            규칙 튜플. 로드 실패 시 빈 튜플.
        """
        if source_path is None and self._cached_rules is not None:
            return self._cached_rules

        path = Path(source_path) if source_path is not None else self.default_path

        if not path.exists():
            logger.error(f"보안 규칙 파일을 찾을 수 없습니다: {path}")
            return ()

        try:
            rules = parse_catalog(path.read_text(encoding="utf-8"), str(path))
        except (OSError, RuleCatalogError) as e:
            logger.error(f"보안 규칙 로드 실패: {e}")
            return ()

        logger.debug(f"보안 규칙 {len(rules)}개 로드: {path}")

        if source_path is None:
            self._cached_rules = rules
        return rules

    def reset_cache(self) -> None:
        """기본 경로 캐시 초기화 (다음 load()에서 다시 읽음)"""
        self._cached_rules = None

    def lookup_by_id(self, rule_id: str) -> SecurityRule | None:
        return get_rule_by_id(self.load(), rule_id)

    def lookup_by_port(self, port: int) -> list[PointPortRule]:
        return get_rules_by_port(self.load(), port)

    def lookup_by_severity(self, severity: Severity | str) -> list[SecurityRule]:
        return get_rules_by_severity(self.load(), severity)


# =============================================================================
# 규칙 필터 (순수 함수)
# =============================================================================


def get_rule_by_id(rules: Sequence[SecurityRule], rule_id: str) -> SecurityRule | None:
    """ID로 규칙 조회 (없으면 None)"""
    return next((rule for rule in rules if rule.id == rule_id), None)


def get_rules_by_port(rules: Sequence[SecurityRule], port: int) -> list[PointPortRule]:
    """지정 포트의 단일 포트 규칙 목록"""
    return [rule for rule in rules if isinstance(rule, PointPortRule) and rule.port == port]


def get_rules_by_severity(rules: Sequence[SecurityRule], severity: Severity | str) -> list[SecurityRule]:
    """심각도별 규칙 목록"""
    severity = Severity(severity)
    return [rule for rule in rules if rule.severity is severity]
