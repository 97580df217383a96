"""Cluster configuration value resolved from --cluster."""
from pathlib import Path

from pydantic import BaseModel


class ClusterConfig(BaseModel):
    """Location of a cluster's configuration and its rule file."""
    version: str
    name: str
    config_dir: Path
    hba_file: Path

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.version}/{self.name}"
