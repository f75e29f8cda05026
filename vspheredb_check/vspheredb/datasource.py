#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import sqlalchemy
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from vspheredb_check.exceptions import DatabaseConnectionError, QueryExecutionError

from .checks import Query

LOGGER = logging.getLogger(__name__)

Row = Sequence[Any]
Rows = Sequence[Row]


class QuerySource(Protocol):
    def __call__(self, query: Query) -> Rows: ...


def database_url(
    *,
    driver: str,
    host: str,
    port: int,
    database: str,
    user: str,
    password: str | None,
) -> URL:
    """Credentials are escaped, so they may contain '@', ':' or '/'

    >>> database_url(driver="mysql+pymysql", host="db", port=3306, database="vspheredb",
    ...              user="icinga", password="p@ss").render_as_string(hide_password=False)
    'mysql+pymysql://icinga:p%40ss@db:3306/vspheredb'
    """
    return URL.create(
        drivername=driver,
        username=user,
        password=password,
        host=host,
        port=port,
        database=database,
    )


def _engine_kwargs(url: URL, timeout: int) -> dict[str, Any]:
    # One connection per check execution, nothing to pool.
    engine_kwargs: dict[str, Any] = {"poolclass": NullPool}
    match url.get_backend_name():
        case "mysql" | "mariadb":
            engine_kwargs["connect_args"] = {
                "connect_timeout": timeout,
                "read_timeout": timeout,
                "write_timeout": timeout,
            }
        case "postgresql":
            engine_kwargs["connect_args"] = {
                "connect_timeout": timeout,
                "options": f"-c statement_timeout={timeout * 1000}",
            }
        case _:
            pass
    return engine_kwargs


def _reason(e: Exception) -> str:
    # The DBAPI exception is much more to the point than SQLAlchemy's wrapper
    orig = getattr(e, "orig", None)
    return str(orig if orig is not None else e)


class SQLAlchemyQuerySource:
    """Executes exactly one statement on a connection of its own

    The connection is closed and the engine disposed on every exit path.
    """

    def __init__(self, url: URL | str, *, timeout: int = 10) -> None:
        self.url: URL = sqlalchemy.make_url(url)
        self.timeout = timeout

    def __call__(self, query: Query) -> Rows:
        LOGGER.info("Connecting to %s", self.url.render_as_string(hide_password=True))
        try:
            engine = sqlalchemy.create_engine(self.url, **_engine_kwargs(self.url, self.timeout))
        except (SQLAlchemyError, ImportError) as e:
            raise DatabaseConnectionError(_reason(e))

        try:
            return self._fetch(engine, query)
        finally:
            engine.dispose()

    @staticmethod
    def _fetch(engine: sqlalchemy.Engine, query: Query) -> Rows:
        try:
            connection = engine.connect()
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(_reason(e))

        with connection:
            LOGGER.debug("Executing %s with %r", query.text, dict(query.params))
            try:
                result = connection.execute(sqlalchemy.text(query.text), dict(query.params))
                rows = [tuple(row) for row in result.fetchall()]
            except SQLAlchemyError as e:
                raise QueryExecutionError(_reason(e))

        LOGGER.info("Query returned %d row(s)", len(rows))
        return rows
