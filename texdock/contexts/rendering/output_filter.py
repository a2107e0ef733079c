"""
Compiler output filtering.

Some compiler diagnostics are harmless and noisy (xdvipdfmx prints a ToUnicode
CMap warning for nearly every OpenType font). Lines matching a filter are
hidden from the console but never change whether a build succeeded.
"""

import re
from typing import Iterable, List

from texdock.exceptions import ConfigError


class OutputFilter:
    """
    List of regular expressions for output lines to hide.

    Examples:
        >>> output_filter = OutputFilter([r"xdvipdfmx:warning:.*ToUnicode CMap"])
        >>> output_filter.is_suppressed("xdvipdfmx:warning: Failed to load ToUnicode CMap")
        True
    """

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns: List[str] = list(patterns)
        self._compiled = []
        for pattern in self.patterns:
            try:
                self._compiled.append(re.compile(pattern))
            except re.error as e:
                raise ConfigError(f"Invalid warning filter {pattern!r}: {e}") from e

    def is_suppressed(self, line: str) -> bool:
        """Return True if the line matches any filter."""
        return any(regex.search(line) for regex in self._compiled)

    def __len__(self) -> int:
        return len(self._compiled)
