"""
infrasec/cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    infrasec --version                          # 버전 표시
    infrasec security-groups -r ap-northeast-2  # Security Group 점검
    infrasec public-instances -r ap-northeast-2 # 퍼블릭 인스턴스 노출 분석
    infrasec rules --severity HIGH              # 규칙 카탈로그 조회
    infrasec tools --json                       # 등록된 분석 도구 목록

Usage:
    $ infrasec security-groups -r ap-northeast-2 -f json -o sg.json
    $ python -m infrasec public-instances
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click

from infrasec.core.config import get_version, is_debug_enabled
from infrasec.core.exceptions import InfraSecError, format_error_for_user
from infrasec.rules import RuleRepository, get_rules_by_severity
from infrasec.tools import get_tool, list_tools

from .console import console, print_error, print_success, print_warning, setup_logging
from .render import render_public_instance_report, render_rules, render_security_group_report

# WARNING 레벨로 설정하여 INFO 로그가 도구 출력에 섞이지 않도록 함
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

VERSION = get_version()

OUTPUT_FORMATS = ["console", "json"]


def _run_tool(name: str, args: dict[str, Any], **deps: Any) -> dict[str, Any]:
    """도구 실행 (InfraSecError는 사용자 메시지로 변환 후 종료 코드 1)"""
    try:
        return get_tool(name, **deps).execute(args)
    except InfraSecError as e:
        logger.debug(f"{name} 실행 실패: {e!r}")
        print_error(format_error_for_user(e))
        raise SystemExit(1) from e


def _emit(output: dict[str, Any], output_format: str, output_path: str | None, renderer) -> None:
    """결과 출력 (console: Rich 테이블, json: 표준 출력) 및 선택적 파일 저장"""
    text = json.dumps(output, ensure_ascii=False, indent=2)

    if output_format == "json":
        click.echo(text)
    else:
        renderer(console, output)

    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        if output_format != "json":
            print_success(f"결과 저장: {path}")


@click.group()
@click.version_option(VERSION, prog_name="infrasec")
@click.option("--debug", is_flag=True, help="디버그 로그 출력 (INFRASEC_DEBUG=1과 동일)")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """AWS Security Group / 퍼블릭 인스턴스 보안 점검 도구"""
    debug = debug or is_debug_enabled()
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    setup_logging(debug)


@cli.command("security-groups")
@click.option("-r", "--region", default=None, help="분석할 리전 (기본: AWS_REGION 또는 us-east-1)")
@click.option("-g", "--group-id", "group_ids", multiple=True, help="분석할 Security Group ID (다중 가능)")
@click.option("--no-unused", is_flag=True, help="미사용 Security Group 점검 제외")
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="console")
@click.option("-o", "--output", "output_path", default=None, help="JSON 결과 파일 경로")
@click.option("--rules", "rules_path", default=None, type=click.Path(dir_okay=False), help="보안 규칙 카탈로그 경로")
def security_groups_command(
    region: str | None,
    group_ids: tuple[str, ...],
    no_unused: bool,
    output_format: str,
    output_path: str | None,
    rules_path: str | None,
) -> None:
    """Security Group 보안 점검

    \b
    Examples:
        infrasec security-groups -r ap-northeast-2
        infrasec security-groups -g sg-0123 -g sg-0456 --no-unused
        infrasec security-groups -f json -o sg.json
    """
    args: dict[str, Any] = {"region": region, "include_unused": not no_unused}
    if group_ids:
        args["group_ids"] = list(group_ids)

    deps: dict[str, Any] = {}
    if rules_path:
        deps["repository"] = RuleRepository(rules_path)

    output = _run_tool("analyze_security_groups", args, **deps)
    _emit(output, output_format, output_path, render_security_group_report)


@cli.command("public-instances")
@click.option("-r", "--region", default=None, help="분석할 리전 (기본: AWS_REGION 또는 us-east-1)")
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="console")
@click.option("-o", "--output", "output_path", default=None, help="JSON 결과 파일 경로")
def public_instances_command(region: str | None, output_format: str, output_path: str | None) -> None:
    """퍼블릭 IP를 가진 실행 중 인스턴스의 노출 분석

    \b
    Examples:
        infrasec public-instances -r ap-northeast-2
        infrasec public-instances -f json
    """
    output = _run_tool("analyze_public_instances", {"region": region})
    _emit(output, output_format, output_path, render_public_instance_report)


@cli.command("rules")
@click.option("--rules", "rules_path", default=None, type=click.Path(dir_okay=False), help="보안 규칙 카탈로그 경로")
@click.option(
    "--severity",
    type=click.Choice(["HIGH", "MEDIUM", "LOW"], case_sensitive=False),
    default=None,
    help="심각도 필터",
)
def rules_command(rules_path: str | None, severity: str | None) -> None:
    """보안 규칙 카탈로그 조회"""
    rules = RuleRepository(rules_path).load()
    if not rules:
        print_warning("보안 규칙을 로드하지 못했습니다.")
        raise SystemExit(1)

    if severity:
        rules = tuple(get_rules_by_severity(rules, severity.upper()))

    render_rules(console, rules)


@cli.command("tools")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
def tools_command(as_json: bool) -> None:
    """사용 가능한 분석 도구 목록"""
    tools = list_tools()

    if as_json:
        click.echo(json.dumps(tools, ensure_ascii=False, indent=2))
        return

    from rich.table import Table

    table = Table(title="분석 도구", show_header=True)
    table.add_column("이름", style="cyan", no_wrap=True)
    table.add_column("설명", style="white")
    for tool in tools:
        table.add_row(tool["name"], tool["description"])
    console.print(table)


def main() -> None:
    """Entry point for the infrasec CLI."""
    cli()


if __name__ == "__main__":
    main()
