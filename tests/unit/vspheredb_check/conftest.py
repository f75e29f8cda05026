#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Iterator
from pathlib import Path

import pytest
import sqlalchemy

from vspheredb_check.utils import log

# The subset of the vSphereDB schema the check reads from
_SCHEMA = (
    """CREATE TABLE host_system (
        uuid VARCHAR(16) PRIMARY KEY,
        host_name VARCHAR(255) NOT NULL,
        hardware_cpu_mhz INTEGER,
        hardware_cpu_cores INTEGER,
        hardware_memory_size_mb INTEGER,
        hardware_num_nic INTEGER,
        hardware_num_hba INTEGER
    )""",
    """CREATE TABLE host_quick_stats (
        uuid VARCHAR(16) PRIMARY KEY,
        overall_cpu_usage INTEGER,
        overall_memory_usage_mb INTEGER
    )""",
    """CREATE TABLE host_sensor (
        host_uuid VARCHAR(16) NOT NULL,
        name VARCHAR(255) NOT NULL,
        current_reading INTEGER
    )""",
    """CREATE TABLE vcenter (
        instance_uuid VARCHAR(16) PRIMARY KEY,
        name VARCHAR(255) NOT NULL
    )""",
    """CREATE TABLE object (
        uuid VARCHAR(16) PRIMARY KEY,
        object_name VARCHAR(255) NOT NULL
    )""",
    """CREATE TABLE datastore (
        uuid VARCHAR(16) PRIMARY KEY,
        vcenter_uuid VARCHAR(16) NOT NULL,
        maintenance_mode VARCHAR(32),
        capacity BIGINT,
        free_space BIGINT
    )""",
)

_DATA = (
    (
        "INSERT INTO host_system VALUES (:uuid, :name, :mhz, :cores, :mem, :nic, :hba)",
        [
            {"uuid": "h1", "name": "esx01", "mhz": 2000, "cores": 8, "mem": 262144, "nic": 4, "hba": 2},
            {"uuid": "h2", "name": "esx02", "mhz": 2400, "cores": 16, "mem": 524288, "nic": 1, "hba": 0},
        ],
    ),
    (
        "INSERT INTO host_quick_stats VALUES (:uuid, :cpu, :mem)",
        [
            {"uuid": "h1", "cpu": 51200, "mem": 131072},
            {"uuid": "h2", "cpu": None, "mem": None},
        ],
    ),
    (
        "INSERT INTO host_sensor VALUES (:uuid, :name, :reading)",
        [
            {"uuid": "h1", "name": "System Board 1 Inlet Temp", "reading": 2350},
            {"uuid": "h1", "name": "Processor 1 Temp", "reading": 6100},
        ],
    ),
    (
        "INSERT INTO vcenter VALUES (:uuid, :name)",
        [{"uuid": "vc1", "name": "vcenter01"}, {"uuid": "vc2", "name": "vcenter02"}],
    ),
    (
        "INSERT INTO object VALUES (:uuid, :name)",
        [
            {"uuid": "d1", "name": "datastore-a"},
            {"uuid": "d2", "name": "datastore-b"},
            {"uuid": "d3", "name": "datastore-c"},
        ],
    ),
    (
        "INSERT INTO datastore VALUES (:uuid, :vc, :mode, :capacity, :free)",
        [
            {"uuid": "d1", "vc": "vc1", "mode": "normal", "capacity": 1000, "free": 500},
            {"uuid": "d2", "vc": "vc1", "mode": "normal", "capacity": 1000, "free": 50},
            {"uuid": "d3", "vc": "vc2", "mode": "inMaintenance", "capacity": 1000, "free": 900},
        ],
    ),
)


@pytest.fixture(name="vspheredb_url")
def fixture_vspheredb_url(tmp_path: Path) -> Iterator[str]:
    url = f"sqlite:///{tmp_path / 'vspheredb.sqlite'}"
    engine = sqlalchemy.create_engine(url)
    with engine.begin() as connection:
        for statement in _SCHEMA:
            connection.execute(sqlalchemy.text(statement))
        for statement, rows in _DATA:
            connection.execute(sqlalchemy.text(statement), rows)
    engine.dispose()
    yield url


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    log.clear_console_logging()
