"""
Build the pg_hba.conf line that would authorize a query.
"""
import ipaddress

from hba_checker.core.errors import ParseError
from hba_checker.models.query import Query
from hba_checker.models.rule_entry import RuleType
from hba_checker.utils.parsers.hba_parser import parse_line

# Stock pg_hba.conf column widths: TYPE DATABASE USER ADDRESS
COLUMN_WIDTHS = (8, 16, 16, 24)


def _format_columns(*fields: str) -> str:
    parts = []
    for field, width in zip(fields, COLUMN_WIDTHS):
        parts.append(f"{field:<{width - 1}} ")
    parts.append(fields[-1])
    return "".join(parts)


def synthesize(query: Query) -> str:
    """
    Render the rule line encoding *query*.

    Network queries produce a ``host``/``hostssl`` line for the single
    address (/32 or /128); local queries leave the address column blank.
    """
    if query.is_local:
        return _format_columns(
            RuleType.LOCAL.value, query.database, query.role, "", query.method
        )

    rule_type = RuleType.HOSTSSL if query.force_ssl else RuleType.HOST
    network = ipaddress.ip_network(query.address)
    return _format_columns(
        rule_type.value, query.database, query.role, str(network), query.method
    )


def ensure_expressible(query: Query) -> str:
    """
    Synthesize the rule line for *query* and check that it reads back.

    Names with whitespace, quotes, ``+`` or ``@`` cannot be written as a
    plain rule line.

    Returns:
        The synthesized line

    Raises:
        ParseError: the line fails to parse or parses to different values
    """
    line = synthesize(query)
    entry = parse_line(line)
    expected = (query.database, query.role, query.method)
    parsed = (getattr(entry, "database", None), getattr(entry, "role", None), getattr(entry, "method", None))
    if parsed != expected:
        raise ParseError(f"Query would read back as {' '.join(line.split())!r}", line)
    return line
