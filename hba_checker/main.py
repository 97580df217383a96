"""
Command-line entry point.

    hba-check connect <database> <role> --cluster=<version>/<name>
              [--ip=<address>] [--method=<method>] [--force-ssl]

Exit status: 0 authorized, 1 not authorized (the missing rule line is
printed on stdout), 2 invalid input or unloadable rule file, 3 bad
command-line syntax.
"""
import argparse
import ipaddress
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from hba_checker.core.config import settings
from hba_checker.core.errors import ArgumentError, LoadError, ParseError
from hba_checker.core.logging_config import setup_logging
from hba_checker.models.query import Query
from hba_checker.services import matcher_service, rule_store
from hba_checker.services.cluster_service import resolve_cluster
from hba_checker.services.line_synthesizer import ensure_expressible, synthesize
from hba_checker.utils.parsers.hba_parser import parse_method

logger = logging.getLogger(__name__)

MODES = ("connect",)

EXIT_AUTHORIZED = 0
EXIT_NOT_AUTHORIZED = 1
EXIT_ERROR = 2
EXIT_USAGE = 3


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting, with our usage exit code."""

    def error(self, message):
        raise ArgumentError(f"{self.prog}: {message}", exit_code=EXIT_USAGE)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=settings.APP_NAME,
        description="Check whether pg_hba.conf authorizes a connection.",
    )
    parser.add_argument("mode", help=f"one of: {', '.join(MODES)}")
    parser.add_argument("database")
    parser.add_argument("role")
    parser.add_argument("--cluster", help="cluster as <version>/<name>")
    parser.add_argument("--ip", help="client address; omit for a local-socket connection")
    parser.add_argument("--method", help="authentication method, e.g. md5 or 'ident sameuser'")
    parser.add_argument("--force-ssl", action="store_true", help="require a hostssl rule")
    return parser


def build_query(args: argparse.Namespace) -> Query:
    """
    Validate parsed arguments and build the query.

    Raises:
        ArgumentError: invalid address or method, or names that cannot
            appear unquoted in a rule line
    """
    address = None
    if args.ip is not None:
        try:
            address = ipaddress.ip_address(args.ip)
        except ValueError:
            raise ArgumentError(f"Invalid IP address '{args.ip}'") from None

    if args.method is not None:
        method = args.method
    elif address is None:
        method = settings.DEFAULT_LOCAL_METHOD
    else:
        method = settings.DEFAULT_NETWORK_METHOD

    try:
        auth_method, options = parse_method(method.split())
    except ParseError as e:
        raise ArgumentError(f"Invalid --method '{method}': {e}") from None
    method = auth_method.value if options is None else f"{auth_method.value} {options}"

    try:
        query = Query(
            address=address,
            force_ssl=args.force_ssl,
            method=method,
            database=args.database,
            role=args.role,
        )
    except ValidationError as e:
        raise ArgumentError(f"Invalid query: {e.errors()[0]['msg']}") from None

    try:
        ensure_expressible(query)
    except ParseError as e:
        raise ArgumentError(
            f"Database '{query.database}', role '{query.role}' and method '{query.method}' "
            f"cannot be written as a rule line: {e}"
        ) from None
    return query


def run(argv: Optional[List[str]] = None) -> int:
    """Run the checker and return the process exit status."""
    try:
        args = build_arg_parser().parse_args(argv)
        if args.mode not in MODES:
            raise ArgumentError(f"Unknown mode '{args.mode}' (expected one of: {', '.join(MODES)})")
        if not args.cluster:
            raise ArgumentError("Missing required option --cluster=<version>/<name>")
        cluster = resolve_cluster(args.cluster)
        query = build_query(args)
    except ArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    try:
        store = rule_store.load(cluster.hba_file)
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    entry = matcher_service.find_authorizing_entry(store, query)
    if entry is None:
        logger.info(f"No rule in cluster {cluster.label} ({cluster.hba_file}) authorizes {query}")
        print(synthesize(query))
        return EXIT_NOT_AUTHORIZED

    first = matcher_service.first_connection_match(store, query)
    if first is not entry:
        logger.warning(
            f"Authorized by '{entry.raw_line.strip()}', but the server picks the earlier "
            f"rule '{first.raw_line.strip()}' for this connection"
        )
    return EXIT_AUTHORIZED


def main():
    setup_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
