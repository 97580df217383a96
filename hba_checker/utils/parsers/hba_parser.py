"""
pg_hba.conf line parser.
"""
import ipaddress
import logging
import re
from typing import List, Sequence, Tuple, Union

from hba_checker.core.errors import (
    InvalidAddressError,
    InvalidMethodError,
    TooFewFieldsError,
    UnknownRuleTypeError,
    UnsupportedSyntaxError,
)
from hba_checker.models.rule_entry import (
    OPTION_METHODS,
    AuthMethod,
    CommentEntry,
    LocalEntry,
    NetworkEntry,
    RuleEntry,
    RuleType,
)
from hba_checker.utils.parsers.base_parser import BaseParser

logger = logging.getLogger(__name__)

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

_COMMENT_RE = re.compile(r"^\s*($|#)")
_PREFIX_RE = re.compile(r"^[0-9]+$")
# Quoted identifiers, +role lists and @file inclusions
_UNSUPPORTED_CHARS = ('"', "+", "@")

_MIN_FIELDS = 4


def parse_method(tokens: Sequence[str], line: str = None) -> Tuple[AuthMethod, str]:
    """
    Validate the method column and whatever follows it.

    Args:
        tokens: Tokens after the address (or after the role for local rules)
        line: Original line, attached to the error

    Returns:
        (method, options) where options is None when absent
    """
    if not tokens:
        raise InvalidMethodError("Missing authentication method", line)
    try:
        method = AuthMethod(tokens[0])
    except ValueError:
        raise InvalidMethodError(f"Unknown authentication method '{tokens[0]}'", line) from None

    options = list(tokens[1:])
    if not options:
        return method, None
    if method not in OPTION_METHODS:
        raise InvalidMethodError(
            f"Method '{method.value}' takes no options, got '{' '.join(options)}'", line
        )
    if len(options) > 1:
        raise InvalidMethodError(
            f"Method '{method.value}' takes a single option, got '{' '.join(options)}'", line
        )
    return method, options[0]


def _parse_ip(token: str, line: str) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
    try:
        return ipaddress.ip_address(token)
    except ValueError:
        raise InvalidAddressError(f"Invalid IP address '{token}'", line) from None


def _netmask_to_prefix(mask: Union[ipaddress.IPv4Address, ipaddress.IPv6Address], line: str) -> int:
    """Convert a contiguous netmask such as 255.255.255.0 to a prefix length."""
    bits = mask.max_prefixlen
    mask_int = int(mask)
    prefix = bin(mask_int).count("1")
    expected = ((1 << prefix) - 1) << (bits - prefix)
    if mask_int != expected:
        raise InvalidAddressError(f"Non-contiguous netmask '{mask}'", line)
    return prefix


def parse_network(tokens: Sequence[str], line: str = None) -> Tuple[IPNetwork, int]:
    """
    Parse the address column of a host rule.

    Accepts either ``address/prefixlen`` or ``address netmask``.

    Returns:
        (network, number of tokens consumed)
    """
    if not tokens:
        raise InvalidAddressError("Missing address", line)

    first = tokens[0]
    if "/" in first:
        addr_str, prefix_str = first.split("/", 1)
        address = _parse_ip(addr_str, line)
        if not _PREFIX_RE.match(prefix_str):
            raise InvalidAddressError(f"Invalid prefix length '{prefix_str}'", line)
        prefix = int(prefix_str)
        if prefix > address.max_prefixlen:
            raise InvalidAddressError(
                f"Prefix length {prefix} too long for IPv{address.version} address", line
            )
        consumed = 1
    else:
        address = _parse_ip(first, line)
        if len(tokens) < 2:
            raise InvalidAddressError(f"Missing netmask after '{first}'", line)
        mask = _parse_ip(tokens[1], line)
        if mask.version != address.version:
            raise InvalidAddressError(
                f"Netmask '{tokens[1]}' does not match address family of '{first}'", line
            )
        prefix = _netmask_to_prefix(mask, line)
        consumed = 2

    try:
        network = ipaddress.ip_network(f"{address}/{prefix}", strict=False)
    except ValueError as e:
        raise InvalidAddressError(f"Invalid network '{first}': {e}", line) from None
    return network, consumed


def parse_line(line: str) -> RuleEntry:
    """
    Parse one pg_hba.conf line.

    Args:
        line: Line without its trailing newline

    Returns:
        CommentEntry, LocalEntry or NetworkEntry

    Raises:
        ParseError subclass describing why the line is not supported
    """
    if _COMMENT_RE.match(line):
        return CommentEntry(raw_line=line)

    if any(ch in line for ch in _UNSUPPORTED_CHARS):
        raise UnsupportedSyntaxError(
            "Quoted names, '+' role lists and '@' file inclusions are not supported", line
        )

    tokens: List[str] = line.split()
    try:
        rule_type = RuleType(tokens[0])
    except ValueError:
        raise UnknownRuleTypeError(f"Unknown rule type '{tokens[0]}'", line) from None

    if len(tokens) < _MIN_FIELDS:
        raise TooFewFieldsError(
            f"Expected at least {_MIN_FIELDS} fields, got {len(tokens)}", line
        )

    database, role = tokens[1], tokens[2]

    if rule_type == RuleType.LOCAL:
        method, options = parse_method(tokens[3:], line)
        return LocalEntry(
            database=database,
            role=role,
            auth_method=method,
            auth_options=options,
            raw_line=line,
        )

    network, consumed = parse_network(tokens[3:], line)
    method, options = parse_method(tokens[3 + consumed:], line)
    return NetworkEntry(
        rule_type=rule_type,
        database=database,
        role=role,
        network=network,
        auth_method=method,
        auth_options=options,
        raw_line=line,
    )


class HBAParser(BaseParser):
    """Parser for pg_hba.conf files."""

    def parse_line(self, line: str) -> RuleEntry:
        return parse_line(line)
