"""
infrasec/cli/render.py - 분석 결과 콘솔 출력

도구 출력 딕셔너리를 Rich Table로 렌더링합니다.
SG 이름, 설명 등 AWS/카탈로그에서 온 문자열은 markup으로 해석되지 않도록 escape합니다.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from infrasec.rules import SecurityRule

from .console import severity_text


def _print_recommendations(console: Console, recommendations: Sequence[str]) -> None:
    if not recommendations:
        return
    console.print("\n[bold]권장사항[/bold]")
    for index, text in enumerate(recommendations, 1):
        console.print(f"  {index}. {escape(text)}")


def render_security_group_report(console: Console, output: dict[str, Any]) -> None:
    """Security Group 분석 결과 출력"""
    summary = output["summary"]

    console.print(f"\n[bold]Security Group 보안 점검[/bold] [dim]({output['region']}, {output['timestamp']})[/dim]")
    console.print(f"  - 분석 SG: {summary['total_groups']}개")
    console.print(f"  - [red bold]HIGH: {summary['high_risk_findings']}건[/red bold]")
    console.print(f"  - [yellow]MEDIUM: {summary['medium_risk_findings']}건[/yellow]")
    console.print(f"  - [dim]LOW: {summary['low_risk_findings']}건[/dim]")

    findings = output["findings"]
    if findings:
        table = Table(title="Findings")
        table.add_column("SG ID", style="cyan", no_wrap=True)
        table.add_column("SG 이름")
        table.add_column("규칙", no_wrap=True)
        table.add_column("심각도", justify="center")
        table.add_column("포트")
        table.add_column("소스")
        table.add_column("설명")

        for finding in findings:
            affected = finding.get("affected_rule") or {}
            table.add_row(
                escape(finding["security_group_id"]),
                escape(finding["security_group_name"]),
                escape(finding["rule_id"]),
                severity_text(finding["severity"]),
                str(affected.get("port", "-")),
                escape(affected.get("source", "-")),
                escape(finding["description"]),
            )
        console.print(table)
    else:
        console.print("[green]발견된 문제가 없습니다.[/green]")

    _print_recommendations(console, output["recommendations"])


def render_public_instance_report(console: Console, output: dict[str, Any]) -> None:
    """퍼블릭 인스턴스 분석 결과 출력"""
    summary = output["summary"]
    risk = output["risk_assessment"]

    console.print(f"\n[bold]퍼블릭 인스턴스 노출 분석[/bold] [dim]({output['region']}, {output['timestamp']})[/dim]")
    console.print(
        f"  - 전체 인스턴스: {summary['total_instances']}개, "
        f"퍼블릭: {summary['public_instances']}개 ({summary['public_exposure_rate']})"
    )
    console.print(f"  - 평균 노출 포트: {summary['average_exposed_ports']}개")
    console.print(
        f"  - 위험도: [red bold]HIGH {risk['high_risk']}[/red bold] / "
        f"[yellow]MEDIUM {risk['medium_risk']}[/yellow] / [dim]LOW {risk['low_risk']}[/dim]"
    )

    instances = output["instances"]
    if instances:
        table = Table(title="Public Instances")
        table.add_column("Instance ID", style="cyan", no_wrap=True)
        table.add_column("Public IP", no_wrap=True)
        table.add_column("Security Groups")
        table.add_column("노출 포트")
        table.add_column("위험 서비스")
        table.add_column("위험도", justify="center")

        for instance in instances:
            table.add_row(
                escape(instance["instance_id"]),
                escape(instance["public_ip"]),
                escape(", ".join(instance["security_groups"])),
                _format_ports(instance["exposed_ports"]),
                ", ".join(f"{cp['service']}({cp['port']})" for cp in instance["critical_ports"]) or "-",
                severity_text(instance["risk_level"]),
            )
        console.print(table)

    _print_recommendations(console, output["recommendations"])


def render_rules(console: Console, rules: Sequence[SecurityRule]) -> None:
    """규칙 카탈로그 출력"""
    table = Table(title=f"보안 규칙 ({len(rules)}개)")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("이름")
    table.add_column("종류", no_wrap=True)
    table.add_column("심각도", justify="center")
    table.add_column("포트", justify="right")
    table.add_column("소스")

    for rule in rules:
        data = rule.to_dict()
        table.add_row(
            escape(rule.id),
            escape(rule.name),
            rule.kind,
            severity_text(rule.severity.value),
            str(data.get("port", "-")),
            escape(data.get("source") or "-"),
        )
    console.print(table)


def _format_ports(ports: Sequence[int], limit: int = 20) -> str:
    """노출 포트 표시 (많으면 일부만)"""
    if not ports:
        return "-"
    text = ", ".join(str(p) for p in ports[:limit])
    if len(ports) > limit:
        text += f" ... 외 {len(ports) - limit}개"
    return text
