"""
infrasec/cli - Click 기반 명령줄 인터페이스
"""

from .app import cli, main

__all__: list[str] = ["cli", "main"]
