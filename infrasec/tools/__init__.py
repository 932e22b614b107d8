"""
infrasec/tools - 분석 도구 레지스트리

Usage:
    from infrasec.tools import get_tool

    tool = get_tool("analyze_security_groups", repository=repository)
    output = tool.execute({"region": "ap-northeast-2"})
"""

from __future__ import annotations

from typing import Any

from infrasec.core.exceptions import ToolExecutionError

from .base import AnalysisTool
from .public_instances import PublicInstanceTool
from .security_groups import SecurityGroupTool

TOOLS: dict[str, type[AnalysisTool]] = {
    SecurityGroupTool.name: SecurityGroupTool,
    PublicInstanceTool.name: PublicInstanceTool,
}


def list_tools() -> list[dict[str, Any]]:
    """등록된 도구 메타데이터 목록"""
    return [
        {"name": cls.name, "description": cls.description, "input_schema": cls.input_schema}
        for cls in TOOLS.values()
    ]


def get_tool(name: str, **deps: Any) -> AnalysisTool:
    """이름으로 도구 인스턴스 생성

    Args:
        name: 도구 이름
        **deps: 도구 생성자에 전달할 의존성 (aws_client, repository 등)

    Raises:
        ToolExecutionError: 등록되지 않은 도구
    """
    tool_cls = TOOLS.get(name)
    if tool_cls is None:
        raise ToolExecutionError(name, f"Unknown tool: {name}")
    return tool_cls(**deps)


__all__: list[str] = [
    "AnalysisTool",
    "SecurityGroupTool",
    "PublicInstanceTool",
    "TOOLS",
    "get_tool",
    "list_tools",
]
