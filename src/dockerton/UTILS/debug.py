"""
Debug tracing gated by the DEBUG_DOCKERTON setting.
"""
import sys
from typing import Any, Optional, TextIO

from .config import get_settings


class DebugLogger:
    """
    Prints trace lines when enabled, does nothing otherwise.

    When `enabled` is None the switch is read from the settings on the
    first call, so importing dockerton never touches the environment.
    """
    def __init__(self, enabled: Optional[bool] = None, stream: Optional[TextIO] = None):
        self.enabled = enabled
        self.stream = stream

    def __call__(self, message: str, *args: Any) -> None:
        if self.enabled is None:
            self.enabled = get_settings().debug
        if not self.enabled:
            return
        if args:
            message = message % args
        print(f"[dockerton] {message}", file=self.stream or sys.stderr)


debug = DebugLogger()
