"""
Connection hypothesis evaluated against a rule store.
"""
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Union

from pydantic import BaseModel, Field


class Query(BaseModel):
    """A connection attempt described by the command line."""
    address: Optional[Union[IPv4Address, IPv6Address]] = Field(
        None, description="Client address; None for a Unix-domain socket connection"
    )
    force_ssl: bool = False
    method: str = Field(..., min_length=1, description="Method token sequence, e.g. 'ident sameuser'")
    database: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)

    model_config = {"frozen": True}

    @property
    def is_local(self) -> bool:
        return self.address is None
