"""
Platform-dependent console and output behavior.

The policy is selected once at startup. On Windows the result file is written
in the legacy Cyrillic code page so that spreadsheet tools open it directly,
and the console window waits for Enter before closing. Everywhere else output
is UTF-8 and the program exits immediately.
"""

import sys
from abc import ABC, abstractmethod
from typing import Callable, Optional


class PlatformPolicy(ABC):
    """Abstract interface for platform-specific behavior."""

    @property
    @abstractmethod
    def output_encoding(self) -> str:
        """Text encoding for the result file."""
        pass

    @abstractmethod
    def on_exit(self) -> None:
        """Run just before the program exits."""
        pass


class PassthroughPolicy(PlatformPolicy):
    """Default policy: UTF-8 output, no interaction."""

    @property
    def output_encoding(self) -> str:
        return "utf-8"

    def on_exit(self) -> None:
        pass


class LegacyConsolePolicy(PlatformPolicy):
    """Windows policy: cp1251 output and a pause before the console closes."""

    EXIT_PROMPT = "Нажмите Enter для выхода..."

    def __init__(self, input_func: Callable[[], str] = input, output_func: Callable[[str], None] = print):
        self._input = input_func
        self._output = output_func

    @property
    def output_encoding(self) -> str:
        return "cp1251"

    def on_exit(self) -> None:
        self._output(self.EXIT_PROMPT)
        try:
            self._input()
        except EOFError:
            # stdin closed or redirected
            pass


def select_platform_policy(platform: Optional[str] = None) -> PlatformPolicy:
    """
    Choose the policy for the running platform.

    Args:
        platform: Platform identifier (defaults to sys.platform)
    """
    platform = platform if platform is not None else sys.platform
    if platform.lower().startswith("win"):
        return LegacyConsolePolicy()
    return PassthroughPolicy()
