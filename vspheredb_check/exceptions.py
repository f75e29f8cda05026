#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class MKVSphereDBError(Exception):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)

    def __str__(self) -> str:
        return self.reason


class DatabaseConnectionError(MKVSphereDBError):
    """The database could not be reached or refused the credentials"""


class QueryExecutionError(MKVSphereDBError):
    """The connection was established but the statement failed"""


class EmptyResultError(MKVSphereDBError):
    def __init__(self, reason: str = "Query returned no results.") -> None:
        super().__init__(reason)


class MissingColumnError(MKVSphereDBError):
    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Column '{column}' is missing in query result.")


class InvalidValueError(MKVSphereDBError):
    def __init__(self, column: str, value: object) -> None:
        self.column = column
        self.value = value
        super().__init__(f"Invalid value for column '{column}': {value!r}")


class PasswordStoreError(MKVSphereDBError):
    pass
