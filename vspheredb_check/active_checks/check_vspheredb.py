#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_vspheredb - Monitor vSphere hosts and datastores via the vSphereDB database

The vSphereDB module of Icinga Web 2 collects lots of performance data from the
vCenters it queries. This check reads the collected data from the module's
database tables and alerts on it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from typing import Annotated, NoReturn

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.engine import URL

from vspheredb_check import __version__
from vspheredb_check.checkengine.checkresults import CheckResult, output_check_result, State
from vspheredb_check.exceptions import (
    DatabaseConnectionError,
    PasswordStoreError,
    QueryExecutionError,
)
from vspheredb_check.utils import password_store
from vspheredb_check.utils.log import set_up_logging
from vspheredb_check.utils.statename import short_service_state_name
from vspheredb_check.vspheredb import (
    build_query,
    CHECK_KINDS,
    CheckSpec,
    Datastore,
    interpret,
    QuerySource,
    SQLAlchemyQuerySource,
)
from vspheredb_check.vspheredb.datasource import database_url

LOGGER = logging.getLogger(__name__)

DEFAULT_PASSWORD = "vspheredb"

_CHECK_HELP = {
    "cpu": ("checks CPU usage", "%%"),
    "memory": ("checks memory usage", "%%"),
    "temperature": ("checks temperature", "°C"),
    "nic": ("checks attached NICs", ""),
    "hba": ("checks attached HBAs", ""),
    "datastore": ("checks all datastores or a singular, specified datastore", "%%"),
}


class Args(BaseModel):
    check: str
    machine: str
    driver: str
    host: str
    port: Annotated[int, Field(gt=0, lt=65536)]
    database: str
    user: str
    password: None | str
    password_reference: None | str
    timeout: Annotated[int, Field(gt=0)]
    warning: None | Annotated[int, Field(ge=0)]
    critical: None | Annotated[int, Field(ge=0)]
    store: None | str = None
    verbose: int
    debug: bool

    def resolve_secret(self) -> str:
        if self.password_reference is not None:
            password_id, file = password_store.parse_reference(self.password_reference)
            return password_store.lookup(file, password_id)
        if self.password is not None:
            return self.password
        return DEFAULT_PASSWORD

    def database_url(self) -> URL:
        return database_url(
            driver=self.driver,
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=self.resolve_secret(),
        )

    def check_spec(self) -> CheckSpec:
        check_kind = CHECK_KINDS[self.check]
        if check_kind is Datastore:
            return Datastore(warning=self.warning, critical=self.critical, store=self.store)
        return check_kind(warning=self.warning, critical=self.critical)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        # Make sure the monitoring core does not take a usage error for OK
        self.print_usage(sys.stderr)
        self.exit(int(State.UNKNOWN), f"{self.prog}: error: {message}\n")


def _connection_arguments() -> argparse.ArgumentParser:
    parser = _ArgumentParser(add_help=False)
    group = parser.add_argument_group("database connection")
    group.add_argument(
        "-H", "--host", default="localhost", help="Database host to connect to (default: localhost)"
    )
    group.add_argument(
        "-p", "--port", type=int, default=3306, help="Database port to connect to (default: 3306)"
    )
    group.add_argument(
        "-d", "--database", default="vspheredb", help="Database name (default: vspheredb)"
    )
    group.add_argument("-u", "--user", default="vspheredb", help="Database user (default: vspheredb)")

    secret = parser.add_mutually_exclusive_group()
    secret.add_argument(
        "-P",
        "--password",
        default=None,
        help=f"Database password (default: {DEFAULT_PASSWORD})",
    )
    secret.add_argument(
        "--password-reference",
        metavar="ID:FILE",
        default=None,
        help="Read the database password stored under ID from the password store FILE",
    )

    group.add_argument(
        "--driver",
        default="mysql+pymysql",
        help="SQLAlchemy driver name of the database (default: mysql+pymysql)",
    )
    group.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=10,
        help="Seconds before connecting or querying times out (default: 10)",
    )
    return parser


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = _ArgumentParser(
        prog="check_vspheredb",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-m",
        "--machine",
        required=True,
        help="Machine to be queried for: the host name, or the vCenter name for datastores",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Verbose mode (-vv for debug output)"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Debug mode: let Python exceptions come through."
    )

    connection = _connection_arguments()
    subparsers = parser.add_subparsers(dest="check", metavar="CHECK", required=True)
    for check, (title, unit) in _CHECK_HELP.items():
        default_warn, default_crit = CHECK_KINDS[check].DEFAULT_LEVELS
        subparser = subparsers.add_parser(check, parents=[connection], help=title, description=title)
        subparser.add_argument(
            "-w",
            "--warning",
            type=int,
            default=None,
            help=f"Warning threshold as integer (default: {default_warn}{unit})",
        )
        subparser.add_argument(
            "-c",
            "--critical",
            type=int,
            default=None,
            help=f"Critical threshold as integer (default: {default_crit}{unit})",
        )
        if check == "datastore":
            subparser.add_argument(
                "-s", "--store", default=None, help="Only check the datastore of this name"
            )

    return Args.model_validate(vars(parser.parse_args(argv)))


def _default_query_source(args: Args) -> QuerySource:
    return SQLAlchemyQuerySource(args.database_url(), timeout=args.timeout)


def check_vspheredb(
    args: Args,
    query_source_factory: Callable[[Args], QuerySource],
) -> CheckResult:
    check = args.check_spec()
    query = build_query(check, args.machine)
    LOGGER.info("Running %s check for %s", args.check, args.machine)

    try:
        rows = query_source_factory(args)(query)

    except DatabaseConnectionError as e:
        LOGGER.error("Could not connect to database: %s", e)
        return CheckResult(State.CRITICAL).set_info(f"Could not connect to database: {e}")

    except QueryExecutionError as e:
        LOGGER.error("Could not execute query: %s", e)
        return CheckResult(State.UNKNOWN).set_info(f"Could not execute query: {e}")

    except PasswordStoreError as e:
        LOGGER.error("%s", e)
        return CheckResult(State.UNKNOWN).set_info(str(e))

    result = interpret(check, rows)
    LOGGER.info("Result: %s", short_service_state_name(result.state))
    return result


def main(
    argv: Sequence[str] | None = None,
    query_source_factory: Callable[[Args], QuerySource] | None = None,
) -> int:
    try:
        args = parse_arguments(sys.argv[1:] if argv is None else argv)
    except ValidationError as e:
        return output_check_result(
            CheckResult(State.UNKNOWN).set_info(
                "Invalid arguments: %s"
                % ", ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
            )
        )

    set_up_logging(args.verbose)

    try:
        result = check_vspheredb(args, query_source_factory or _default_query_source)
    except Exception as e:
        if args.debug:
            raise
        LOGGER.exception("Unhandled exception")
        result = CheckResult(State.UNKNOWN).set_info(f"Unhandled exception: {e}")

    return output_check_result(result)
