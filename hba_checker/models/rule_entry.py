"""
Pydantic models for parsed pg_hba.conf entries.
"""
import enum
from ipaddress import IPv4Network, IPv6Network
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

WILDCARD = "all"


class RuleType(str, enum.Enum):
    """Connection types understood in the first column."""
    LOCAL = "local"
    HOST = "host"
    HOSTSSL = "hostssl"
    HOSTNOSSL = "hostnossl"


class AuthMethod(str, enum.Enum):
    """Supported authentication methods."""
    TRUST = "trust"
    REJECT = "reject"
    MD5 = "md5"
    CRYPT = "crypt"
    PASSWORD = "password"
    KRB5 = "krb5"
    IDENT = "ident"
    PAM = "pam"


# Methods that accept a single option token (ident map, PAM service name)
OPTION_METHODS = frozenset({AuthMethod.IDENT, AuthMethod.PAM})


class CommentEntry(BaseModel):
    """Blank or comment line, kept only for pass-through."""
    kind: Literal["comment"] = "comment"
    raw_line: str

    model_config = {"frozen": True}


class _AuthRule(BaseModel):
    database: str
    role: str
    auth_method: AuthMethod
    auth_options: Optional[str] = None
    raw_line: str

    model_config = {"frozen": True}

    @property
    def method(self) -> str:
        """Full method token sequence, e.g. ``ident sameuser``."""
        if self.auth_options:
            return f"{self.auth_method.value} {self.auth_options}"
        return self.auth_method.value

    def matches_database(self, database: str) -> bool:
        return self.database == WILDCARD or self.database == database

    def matches_role(self, role: str) -> bool:
        return self.role == WILDCARD or self.role == role


class LocalEntry(_AuthRule):
    """Rule for Unix-domain socket connections."""
    kind: Literal["local"] = "local"

    @property
    def rule_type(self) -> RuleType:
        return RuleType.LOCAL


class NetworkEntry(_AuthRule):
    """Rule for TCP connections from an address block."""
    kind: Literal["network"] = "network"
    rule_type: RuleType
    network: Union[IPv4Network, IPv6Network]

    @field_validator("rule_type")
    @classmethod
    def validate_rule_type(cls, v: RuleType) -> RuleType:
        """Network entries are host, hostssl or hostnossl."""
        if v == RuleType.LOCAL:
            raise ValueError("local is not a network rule type")
        return v


RuleEntry = Annotated[
    Union[CommentEntry, LocalEntry, NetworkEntry],
    Field(discriminator="kind"),
]
