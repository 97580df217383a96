"""
Base parser class for line-oriented rule files.
"""
from abc import ABC, abstractmethod
from typing import Any, List
import logging

from hba_checker.core.errors import ParseError

logger = logging.getLogger(__name__)


class LineParseError(Exception):
    """Wraps a ParseError with the 1-based line number it occurred on."""

    def __init__(self, line_number: int, line: str, cause: ParseError):
        super().__init__(f"line {line_number}: {cause}")
        self.line_number = line_number
        self.line = line
        self.cause = cause


class BaseParser(ABC):
    """Base class for rule file parsers."""

    def __init__(self, config_content: str):
        """
        Initialize parser with config content.

        Args:
            config_content: The rule file content as string
        """
        self.config_content = config_content
        lines = config_content.split('\n')
        # Final newline does not start another line
        if lines and lines[-1] == "":
            lines.pop()
        self.lines = [line[:-1] if line.endswith('\r') else line for line in lines]

    @abstractmethod
    def parse_line(self, line: str) -> Any:
        """Parse a single line into an entry, raising ParseError on failure."""
        pass

    def parse_all(self) -> List[Any]:
        """
        Parse every line in order.

        Stops at the first line that fails and discards everything parsed
        so far; callers get either all entries or a LineParseError.

        Returns:
            List of entries, one per line
        """
        entries = []
        for line_number, line in enumerate(self.lines, start=1):
            try:
                entries.append(self.parse_line(line))
            except ParseError as e:
                logger.debug(f"Parse failure on line {line_number}: {e}")
                raise LineParseError(line_number, line, e) from e
        return entries
