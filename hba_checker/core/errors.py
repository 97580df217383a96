"""
Error types raised while reading rule files and handling command-line input.
"""
from pathlib import Path
from typing import Optional, Union


class ArgumentError(Exception):
    """Invalid or missing command-line input."""

    def __init__(self, message: str, exit_code: int = 2):
        super().__init__(message)
        self.exit_code = exit_code


class ParseError(ValueError):
    """A single rule-file line could not be turned into an entry."""

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class UnsupportedSyntaxError(ParseError):
    """Quoted tokens, role lists (+) or file inclusions (@)."""


class UnknownRuleTypeError(ParseError):
    """First token is not local, host, hostssl or hostnossl."""


class TooFewFieldsError(ParseError):
    pass


class InvalidMethodError(ParseError):
    pass


class InvalidAddressError(ParseError):
    pass


class LoadError(Exception):
    """A rule file could not be loaded into a store."""

    def __init__(self, message: str, path: Union[str, Path]):
        super().__init__(message)
        self.path = Path(path)


class RuleFileIOError(LoadError):
    """Rule file is missing or unreadable."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        super().__init__(f"Cannot read rule file {path}: {cause}", path)
        self.cause = cause


class UnparseableFileError(LoadError):
    """A line of the rule file failed to parse; the whole file is rejected."""

    def __init__(
        self,
        path: Union[str, Path],
        line_number: int,
        offending_line: str,
        cause: ParseError,
    ):
        super().__init__(
            f"Cannot parse rule file {path}, line {line_number}: {cause} "
            f"({offending_line.strip()!r})",
            path,
        )
        self.line_number = line_number
        self.offending_line = offending_line
        self.cause = cause
