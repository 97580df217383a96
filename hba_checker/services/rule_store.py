"""
Service for loading a pg_hba.conf file into an immutable rule store.
"""
import logging
from pathlib import Path
from typing import Iterator, Tuple, Union

from hba_checker.core.errors import RuleFileIOError, UnparseableFileError
from hba_checker.models.rule_entry import CommentEntry, RuleEntry
from hba_checker.utils.parsers.base_parser import LineParseError
from hba_checker.utils.parsers.hba_parser import HBAParser

logger = logging.getLogger(__name__)


class RuleStore:
    """Ordered entries of one rule file, in file order."""

    def __init__(self, entries: Tuple[RuleEntry, ...], path: Union[str, Path, None] = None):
        self._entries = tuple(entries)
        self.path = Path(path) if path is not None else None

    @property
    def entries(self) -> Tuple[RuleEntry, ...]:
        return self._entries

    @property
    def rules(self) -> Tuple[RuleEntry, ...]:
        """Entries that take part in matching (everything but comments)."""
        return tuple(e for e in self._entries if not isinstance(e, CommentEntry))

    def __iter__(self) -> Iterator[RuleEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<RuleStore {self.path or '-'} entries={len(self._entries)}>"


def load(path: Union[str, Path]) -> RuleStore:
    """
    Read and parse a rule file.

    Args:
        path: Path to the pg_hba.conf file

    Returns:
        RuleStore with one entry per line

    Raises:
        RuleFileIOError: file missing, unreadable or not valid UTF-8
        UnparseableFileError: a line failed to parse; nothing is returned
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fo:
            content = fo.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read rule file {path}: {e}")
        raise RuleFileIOError(path, e) from e

    try:
        entries = HBAParser(content).parse_all()
    except LineParseError as e:
        logger.error(f"Rejecting rule file {path}: {e}")
        raise UnparseableFileError(path, e.line_number, e.line, e.cause) from e.cause

    store = RuleStore(tuple(entries), path=path)
    logger.info(f"Loaded {len(store.rules)} rules from {path}")
    return store
