"""
infrasec/cli/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 로깅 설정을 위한 함수들
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# botocore 노이즈 로그 제한
logging.getLogger("botocore.httpchecksum").setLevel(logging.WARNING)
logging.getLogger("botocore.credentials").setLevel(logging.WARNING)
logging.getLogger("botocore.loaders").setLevel(logging.WARNING)
logging.getLogger("botocore.session").setLevel(logging.WARNING)

# 전역 콘솔 인스턴스
console = Console()
err_console = Console(stderr=True)

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"

SEVERITY_STYLES = {
    "HIGH": "red bold",
    "MEDIUM": "yellow",
    "LOW": "dim",
}


def setup_logging(debug: bool = False) -> logging.Logger:
    """infrasec 로거 설정

    기본은 WARNING 이상만 출력하여 도구 출력과 섞이지 않도록 하고,
    debug 모드에서는 RichHandler로 DEBUG 로그를 stderr에 출력합니다.
    """
    logger = logging.getLogger("infrasec")
    if debug:
        logger.setLevel(logging.DEBUG)
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            handler = RichHandler(console=err_console, rich_tracebacks=True)
            handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
            logger.addHandler(handler)
            logger.propagate = False
    else:
        logger.setLevel(logging.WARNING)
    return logger


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_warning(message: str) -> None:
    """경고 메시지 출력"""
    err_console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (stderr)"""
    err_console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]", highlight=False)


def severity_text(severity: str) -> str:
    """심각도 문자열에 Rich 스타일 적용"""
    style = SEVERITY_STYLES.get(severity, "")
    if not style:
        return severity
    return f"[{style}]{severity}[/{style}]"
