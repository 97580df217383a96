"""
Resolve a ``<version>/<name>`` cluster reference to its rule file.
"""
import logging
import re
from pathlib import Path
from typing import Optional

from hba_checker.core.config import settings
from hba_checker.core.errors import ArgumentError
from hba_checker.models.cluster import ClusterConfig

logger = logging.getLogger(__name__)

_CLUSTER_RE = re.compile(r"^(?P<version>[0-9]+(?:\.[0-9]+)?)/(?P<name>[^/\s]+)$")
# hba_file = '/path/to/pg_hba.conf'   # optional trailing comment
_HBA_FILE_RE = re.compile(
    r"""^\s*hba_file(?:\s*=\s*|\s+)(?:'(?P<quoted>[^']*)'|(?P<bare>[^\s#']+))""",
)

POSTGRESQL_CONF = "postgresql.conf"
DEFAULT_HBA_FILE = "pg_hba.conf"


def _read_hba_setting(conf_path: Path) -> Optional[str]:
    """Return the last hba_file value set in postgresql.conf, if any."""
    try:
        lines = conf_path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Cannot read {conf_path}, assuming default rule file: {e}")
        return None

    value = None
    for line in lines:
        match = _HBA_FILE_RE.match(line)
        if match:
            value = match.group("quoted") if match.group("quoted") is not None else match.group("bare")
    return value


def resolve_cluster(cluster: str) -> ClusterConfig:
    """
    Look up a cluster's configuration directory and rule file.

    Args:
        cluster: Cluster reference of the form ``<version>/<name>``, e.g. ``8.1/main``

    Returns:
        ClusterConfig for the cluster

    Raises:
        ArgumentError: malformed reference or unknown cluster
    """
    match = _CLUSTER_RE.match(cluster or "")
    if not match:
        raise ArgumentError(f"Invalid --cluster value '{cluster}', expected <version>/<name>")

    version, name = match.group("version"), match.group("name")
    if name in (".", ".."):
        raise ArgumentError(f"Invalid --cluster value '{cluster}', expected <version>/<name>")
    config_dir = settings.cluster_conf_root / version / name
    if not config_dir.is_dir():
        raise ArgumentError(f"Cluster {version}/{name} does not exist ({config_dir} not found)")

    hba_setting = _read_hba_setting(config_dir / POSTGRESQL_CONF)
    if hba_setting:
        hba_file = Path(hba_setting)
        if not hba_file.is_absolute():
            hba_file = config_dir / hba_file
    else:
        hba_file = config_dir / DEFAULT_HBA_FILE

    resolved = ClusterConfig(version=version, name=name, config_dir=config_dir, hba_file=hba_file)
    logger.debug(f"Cluster {resolved.label} uses rule file {resolved.hba_file}")
    return resolved
