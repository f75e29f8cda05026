#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Checking of values against warning and critical levels"""

from __future__ import annotations

import enum

from vspheredb_check.checkengine.checkresults import CheckResult, State

__all__ = ["Direction", "evaluate", "evaluate_result"]

Level = None | int | float


class Direction(enum.Enum):
    """Which side of the levels is bad"""

    UPPER = "upper"  # more is worse
    LOWER = "lower"  # fewer is worse


def evaluate(
    value: int | float,
    warning: Level,
    critical: Level,
    direction: Direction = Direction.UPPER,
) -> State:
    """Map a value to a state

    Upper levels are reached if the value is at or above them, lower levels
    if the value is at or below them. A level of None is never reached.

    >>> evaluate(85, 80, 90)
    <State.WARNING: 1>
    >>> evaluate(90, 80, 90)
    <State.CRITICAL: 2>
    >>> evaluate(79, 80, 90)
    <State.OK: 0>
    >>> evaluate(1, 1, 0, Direction.LOWER)
    <State.WARNING: 1>
    >>> evaluate(0, 1, 0, Direction.LOWER)
    <State.CRITICAL: 2>
    >>> evaluate(4, 1, 0, Direction.LOWER)
    <State.OK: 0>
    >>> evaluate(100, None, None)
    <State.OK: 0>
    """
    if direction is Direction.UPPER:
        if critical is not None and value >= critical:
            return State.CRITICAL
        if warning is not None and value >= warning:
            return State.WARNING
        return State.OK

    if critical is not None and value <= critical:
        return State.CRITICAL
    if warning is not None and value <= warning:
        return State.WARNING
    return State.OK


def evaluate_result(
    value: int | float,
    warning: Level,
    critical: Level,
    direction: Direction = Direction.UPPER,
) -> CheckResult:
    """Like evaluate, but return a CheckResult ready to take info and metrics"""
    return CheckResult(evaluate(value, warning, critical, direction))
