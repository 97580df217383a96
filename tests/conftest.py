"""
Pytest configuration and fixtures.
"""
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from hba_checker.services.rule_store import RuleStore
from hba_checker.utils.parsers.hba_parser import parse_line


@pytest.fixture(scope="function")
def make_store():
    """Build a RuleStore from rule lines without touching the filesystem."""
    def _make_store(*lines):
        return RuleStore(tuple(parse_line(line) for line in lines))
    return _make_store


@pytest.fixture(scope="function")
def write_hba(tmp_path):
    """Write the given lines to a pg_hba.conf under tmp_path and return its path."""
    def _write_hba(*lines, name="pg_hba.conf"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write_hba


@pytest.fixture(scope="function")
def cluster_root(tmp_path):
    """
    Point CLUSTER_CONF_ROOT at a temporary tree containing cluster 8.1/main.

    Yields the cluster's configuration directory.
    """
    root = tmp_path / "etc-postgresql"
    cluster_dir = root / "8.1" / "main"
    cluster_dir.mkdir(parents=True)
    with patch("hba_checker.core.config.settings.CLUSTER_CONF_ROOT", str(root)):
        yield cluster_dir


@pytest.fixture(scope="function")
def cluster_hba(cluster_root):
    """Write lines to the 8.1/main cluster's pg_hba.conf."""
    def _cluster_hba(*lines):
        path: Path = cluster_root / "pg_hba.conf"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _cluster_hba


@pytest.fixture(scope="function")
def restore_root_logger():
    """Undo handler and level changes made by setup_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
