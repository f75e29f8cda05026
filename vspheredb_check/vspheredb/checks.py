#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""The check kinds and the statements fetching their data

Every check kind is a frozen dataclass carrying the user supplied levels.
The set of kinds is closed: code dispatching on them matches all of them and
ends with assert_never.

The machine name (and the datastore name) are bound as parameters of a LIKE
comparison. Wildcards given by the user keep working, quotes do not end up in
the statement.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import assert_never, ClassVar, Final

from vspheredb_check.utils.levels import Direction

TEMPERATURE_SENSOR: Final = "System Board 1 Inlet Temp"


@dataclasses.dataclass(frozen=True, kw_only=True)
class _Levels:
    DEFAULT_LEVELS: ClassVar[tuple[int, int]]
    DIRECTION: ClassVar[Direction] = Direction.UPPER

    warning: int | None = None
    critical: int | None = None

    @property
    def levels(self) -> tuple[int, int]:
        default_warn, default_crit = self.DEFAULT_LEVELS
        return (
            default_warn if self.warning is None else self.warning,
            default_crit if self.critical is None else self.critical,
        )

    @property
    def direction(self) -> Direction:
        return self.DIRECTION


@dataclasses.dataclass(frozen=True, kw_only=True)
class Cpu(_Levels):
    DEFAULT_LEVELS = (80, 90)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Memory(_Levels):
    DEFAULT_LEVELS = (80, 90)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Temperature(_Levels):
    DEFAULT_LEVELS = (50, 60)


# For the adapters fewer is worse: one left is a warning, none is critical.
@dataclasses.dataclass(frozen=True, kw_only=True)
class Nic(_Levels):
    DEFAULT_LEVELS = (1, 0)
    DIRECTION = Direction.LOWER


@dataclasses.dataclass(frozen=True, kw_only=True)
class Hba(_Levels):
    DEFAULT_LEVELS = (1, 0)
    DIRECTION = Direction.LOWER


@dataclasses.dataclass(frozen=True, kw_only=True)
class Datastore(_Levels):
    DEFAULT_LEVELS = (80, 90)

    store: str | None = None


CheckSpec = Cpu | Memory | Temperature | Nic | Hba | Datastore

CHECK_KINDS: Final[Mapping[str, type[CheckSpec]]] = {
    "cpu": Cpu,
    "memory": Memory,
    "temperature": Temperature,
    "nic": Nic,
    "hba": Hba,
    "datastore": Datastore,
}


@dataclasses.dataclass(frozen=True)
class Query:
    text: str
    params: Mapping[str, str]


_SQL_CPU: Final = """\
SELECT hqs.overall_cpu_usage, hs.hardware_cpu_mhz, hs.hardware_cpu_cores
FROM host_quick_stats hqs
INNER JOIN host_system hs ON hqs.uuid = hs.uuid
WHERE hs.host_name LIKE :machine"""

_SQL_MEMORY: Final = """\
SELECT hqs.overall_memory_usage_mb, hs.hardware_memory_size_mb
FROM host_quick_stats hqs
INNER JOIN host_system hs ON hqs.uuid = hs.uuid
WHERE hs.host_name LIKE :machine"""

_SQL_TEMPERATURE: Final = """\
SELECT se.current_reading
FROM host_sensor se
INNER JOIN host_system hs ON se.host_uuid = hs.uuid
WHERE hs.host_name LIKE :machine AND se.name LIKE :sensor"""

_SQL_NIC: Final = """\
SELECT hs.hardware_num_nic
FROM host_system hs
WHERE hs.host_name LIKE :machine"""

_SQL_HBA: Final = """\
SELECT hs.hardware_num_hba
FROM host_system hs
WHERE hs.host_name LIKE :machine"""

_SQL_DATASTORE: Final = """\
SELECT o.object_name, ds.maintenance_mode, ds.capacity, ds.free_space
FROM datastore ds
INNER JOIN vcenter vc ON ds.vcenter_uuid = vc.instance_uuid
INNER JOIN object o ON ds.uuid = o.uuid
WHERE vc.name LIKE :machine"""


def build_query(check: CheckSpec, machine: str) -> Query:
    """Return the statement and its parameters for the given check

    >>> build_query(Nic(), "esx01.example.com").params
    {'machine': 'esx01.example.com'}
    """
    match check:
        case Cpu():
            return Query(_SQL_CPU, {"machine": machine})
        case Memory():
            return Query(_SQL_MEMORY, {"machine": machine})
        case Temperature():
            return Query(_SQL_TEMPERATURE, {"machine": machine, "sensor": TEMPERATURE_SENSOR})
        case Nic():
            return Query(_SQL_NIC, {"machine": machine})
        case Hba():
            return Query(_SQL_HBA, {"machine": machine})
        case Datastore(store=None):
            return Query(f"{_SQL_DATASTORE} ORDER BY o.object_name", {"machine": machine})
        case Datastore(store=str(store)):
            return Query(
                f"{_SQL_DATASTORE} AND o.object_name LIKE :store ORDER BY o.object_name",
                {"machine": machine, "store": store},
            )
        case _:
            assert_never(check)
