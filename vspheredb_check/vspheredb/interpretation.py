#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Turn the rows fetched for a check into a check result

The rows are positional, in the order of the projection of the statement
built for the respective check kind.
"""

from __future__ import annotations

import logging
from typing import Any, assert_never

from vspheredb_check.checkengine.checkresults import CheckResult, Metric, PerfData, State
from vspheredb_check.exceptions import EmptyResultError, InvalidValueError, MissingColumnError
from vspheredb_check.utils.levels import evaluate, evaluate_result

from .checks import CheckSpec, Cpu, Datastore, Hba, Memory, Nic, Temperature
from .datasource import Row, Rows

LOGGER = logging.getLogger(__name__)

NO_PERFORMANCE_DATA = "No performance data found."


def interpret(check: CheckSpec, rows: Rows) -> CheckResult:
    """Exactly one result is returned, whatever the rows look like"""
    try:
        match check:
            case Cpu():
                return _interpret_cpu(check, _first_row(rows))
            case Memory():
                return _interpret_memory(check, _first_row(rows))
            case Temperature():
                return _interpret_temperature(check, _first_row(rows))
            case Nic():
                return _interpret_adapters(check, _first_row(rows), "hardware_num_nic", "nics", "NICs")
            case Hba():
                return _interpret_adapters(check, _first_row(rows), "hardware_num_hba", "hbas", "HBAs")
            case Datastore(store=None):
                return _interpret_datastores(check, rows)
            case Datastore(store=str(store)):
                return _interpret_datastore(check, store, _first_row(rows))
            case _:
                assert_never(check)

    except EmptyResultError as e:
        return CheckResult(State.UNKNOWN).set_info(str(e))
    except (MissingColumnError, InvalidValueError) as e:
        LOGGER.warning("%s", e)
        return CheckResult(State.UNKNOWN).set_info(str(e))
    except ArithmeticError as e:
        LOGGER.warning("Cannot compute percentage: %s", e)
        return CheckResult(State.UNKNOWN).set_info(f"Invalid performance data: {e}")


def _first_row(rows: Rows) -> Row:
    if not rows:
        raise EmptyResultError()
    if len(rows) > 1:
        LOGGER.warning("Query returned %d rows, using the first one", len(rows))
    return rows[0]


def _column(row: Row, index: int, name: str) -> Any:
    try:
        return row[index]
    except IndexError:
        raise MissingColumnError(name)


def _int_column(row: Row, index: int, name: str) -> int:
    value = _column(row, index, name)
    if value is None or isinstance(value, bool):
        raise InvalidValueError(name, value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidValueError(name, value)


def _truncating_div(dividend: int, divisor: int) -> int:
    """Integer division rounding toward zero

    >>> _truncating_div(2345, 100), _truncating_div(-2345, 100)
    (23, -23)
    """
    if divisor == 0:
        raise ZeroDivisionError("division by zero")
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


def _percentage(part: int, total: int, *, what: str) -> int:
    if total == 0:
        raise ZeroDivisionError(f"{what} is zero")
    return _truncating_div(part * 100, total)


def _interpret_cpu(check: Cpu, row: Row) -> CheckResult:
    warn, crit = check.levels
    try:
        usage = _int_column(row, 0, "overall_cpu_usage")
    except (MissingColumnError, InvalidValueError):
        return CheckResult(State.UNKNOWN).set_info(NO_PERFORMANCE_DATA)
    mhz = _int_column(row, 1, "hardware_cpu_mhz")
    cores = _int_column(row, 2, "hardware_cpu_cores")

    usage_percent = _percentage(usage, mhz * cores, what="CPU capacity (MHz x cores)")
    metrics = [
        Metric("usage", str(usage)),
        Metric("usage_percent", str(usage_percent), "%").warning(warn).critical(crit),
        Metric("mhz", str(mhz)),
        Metric("cores", str(cores)),
    ]
    return (
        evaluate_result(usage_percent, warn, crit, check.direction)
        .set_info(f"Total CPU usage is {usage // 1024}GHz ({usage_percent}%)")
        .set_perf_data(PerfData.from_metrics(metrics))
    )


def _interpret_memory(check: Memory, row: Row) -> CheckResult:
    warn, crit = check.levels
    try:
        usage = _int_column(row, 0, "overall_memory_usage_mb")
    except (MissingColumnError, InvalidValueError):
        return CheckResult(State.UNKNOWN).set_info(NO_PERFORMANCE_DATA)
    capacity = _int_column(row, 1, "hardware_memory_size_mb")

    usage_percent = _percentage(usage, capacity, what="memory capacity")
    metrics = [
        Metric("usage", str(usage), "MB"),
        Metric("usage_percent", str(usage_percent), "%").warning(warn).critical(crit),
        Metric("capacity", str(capacity), "MB"),
    ]
    return (
        evaluate_result(usage_percent, warn, crit, check.direction)
        .set_info(f"Total memory usage is {usage // 1024}GB ({usage_percent}%)")
        .set_perf_data(PerfData.from_metrics(metrics))
    )


def _interpret_temperature(check: Temperature, row: Row) -> CheckResult:
    warn, crit = check.levels
    # vSphere reports the reading in hundredths of a degree
    temperature = _truncating_div(_int_column(row, 0, "current_reading"), 100)
    return (
        evaluate_result(temperature, warn, crit, check.direction)
        .set_info(f"Temperature is {temperature}°C")
        .set_perf_data(
            PerfData.from_metrics([Metric("temp", str(temperature), "C").warning(warn).critical(crit)])
        )
    )


def _interpret_adapters(
    check: Nic | Hba, row: Row, column: str, metric_name: str, title: str
) -> CheckResult:
    warn, crit = check.levels
    count = _int_column(row, 0, column)
    return (
        evaluate_result(count, warn, crit, check.direction)
        .set_info(f"Number of {title}: {count}")
        .set_perf_data(
            PerfData.from_metrics([Metric(metric_name, str(count)).warning(warn).critical(crit)])
        )
    )


def _used_percent(row: Row) -> int:
    capacity = _int_column(row, 2, "capacity")
    free = _int_column(row, 3, "free_space")
    if free > capacity:
        raise ArithmeticError(f"free space ({free}) exceeds capacity ({capacity})")
    return _percentage(capacity - free, capacity, what="datastore capacity")


def _maintenance_mode(row: Row) -> str:
    mode = _column(row, 1, "maintenance_mode")
    return "unknown" if mode is None else str(mode)


def _interpret_datastore(check: Datastore, store: str, row: Row) -> CheckResult:
    warn, crit = check.levels
    mode = _maintenance_mode(row)
    used_percent = _used_percent(row)
    metrics = [
        Metric("used", str(used_percent)).warning(warn).critical(crit),
        Metric("maintenance_mode", mode),
    ]
    return (
        evaluate_result(used_percent, warn, crit, check.direction)
        .set_info(f"Used storage space for datastore {store} (mode: {mode}): {used_percent}%")
        .set_perf_data(PerfData.from_metrics(metrics))
    )


def _interpret_datastores(check: Datastore, rows: Rows) -> CheckResult:
    warn, crit = check.levels
    metrics: list[Metric] = []
    problems: list[str] = []
    invalid: list[str] = []
    states: list[State] = []

    for row in rows:
        name = str(_column(row, 0, "object_name"))
        mode = _maintenance_mode(row)
        try:
            used_percent = _used_percent(row)
        except (MissingColumnError, InvalidValueError, ArithmeticError) as e:
            LOGGER.warning("Datastore %s: %s", name, e)
            states.append(State.UNKNOWN)
            invalid.append(name)
            metrics.append(Metric(f"{name}_maintenance_mode", mode))
            continue

        state = evaluate(used_percent, warn, crit, check.direction)
        states.append(state)
        metrics.append(Metric(f"{name}_used", str(used_percent)).warning(warn).critical(crit))
        metrics.append(Metric(f"{name}_maintenance_mode", mode))
        if state not in (State.OK, State.UNKNOWN):
            problems.append(f"Datastore {name} (mode: {mode}) uses {used_percent}% of storage space!")

    if invalid:
        problems.append(f"Invalid performance data for datastore(s): {', '.join(invalid)}")

    result = CheckResult(State.worst(*states, default=State.OK))
    if problems:
        result.set_info("\n".join(problems))
    if metrics:
        result.set_perf_data(PerfData.from_metrics(metrics))
    return result
