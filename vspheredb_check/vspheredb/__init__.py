#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Checks on the tables filled by the vSphereDB module of Icinga Web 2"""

from .checks import (
    build_query,
    CHECK_KINDS,
    CheckSpec,
    Cpu,
    Datastore,
    Hba,
    Memory,
    Nic,
    Query,
    Temperature,
)
from .datasource import QuerySource, Rows, SQLAlchemyQuerySource
from .interpretation import interpret

__all__ = [
    "build_query",
    "CHECK_KINDS",
    "CheckSpec",
    "Cpu",
    "Datastore",
    "Hba",
    "interpret",
    "Memory",
    "Nic",
    "Query",
    "QuerySource",
    "Rows",
    "SQLAlchemyQuerySource",
    "Temperature",
]
