"""
Decide whether a rule store authorizes a connection query.

Authorization here is an existence test: a query is authorized when *some*
rule matches it completely, method included. The server itself consults
only the first rule whose connection type, database, role and address
match; ``first_connection_match`` returns that rule so callers can report
when the two answers differ.
"""
import logging
from typing import Iterator, Optional

from hba_checker.models.query import Query
from hba_checker.models.rule_entry import LocalEntry, NetworkEntry, RuleEntry, RuleType
from hba_checker.services.rule_store import RuleStore
from hba_checker.utils.address_matcher import contains

logger = logging.getLogger(__name__)


def _connection_matches(entry: RuleEntry, query: Query) -> bool:
    """Connection type, database, role and address, ignoring the method."""
    if query.is_local:
        if not isinstance(entry, LocalEntry):
            return False
    else:
        if not isinstance(entry, NetworkEntry):
            return False
        if query.force_ssl and entry.rule_type != RuleType.HOSTSSL:
            return False
        if not contains(query.address, entry.network):
            return False
    return entry.matches_database(query.database) and entry.matches_role(query.role)


def _iter_connection_matches(store: RuleStore, query: Query) -> Iterator[RuleEntry]:
    for entry in store:
        # Comments are neither LocalEntry nor NetworkEntry
        if _connection_matches(entry, query):
            yield entry


def find_authorizing_entry(store: RuleStore, query: Query) -> Optional[RuleEntry]:
    """Return the first entry that matches *query* including its method."""
    for entry in _iter_connection_matches(store, query):
        if entry.method == query.method:
            logger.debug(f"Query matched rule: {entry.raw_line.strip()}")
            return entry
    return None


def authorizes(store: RuleStore, query: Query) -> bool:
    """True if any rule in *store* authorizes *query* exactly."""
    return find_authorizing_entry(store, query) is not None


def first_connection_match(store: RuleStore, query: Query) -> Optional[RuleEntry]:
    """Return the first entry the server would pick for this connection."""
    return next(_iter_connection_matches(store, query), None)
