#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import dataclasses
import enum
import sys
from collections.abc import Iterable, Iterator, Sequence
from typing import Self

from vspheredb_check.utils.statename import service_state_name

__all__ = ["CheckResult", "Metric", "PerfData", "State", "output_check_result"]


class State(enum.IntEnum):
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @classmethod
    def worst(cls, *states: State, default: State) -> State:
        """Return the state with the highest ordinal

        >>> State.worst(State.OK, State.CRITICAL, State.WARNING, default=State.OK)
        <State.CRITICAL: 2>
        >>> State.worst(State.CRITICAL, State.UNKNOWN, default=State.OK)
        <State.UNKNOWN: 3>
        >>> State.worst(default=State.OK)
        <State.OK: 0>
        """
        return max(states, default=default)


@dataclasses.dataclass(frozen=True)
class Metric:
    name: str
    value: str
    uom: str = ""
    warn: str | None = None
    crit: str | None = None

    def warning(self, level: object) -> Metric:
        return dataclasses.replace(self, warn=str(level))

    def critical(self, level: object) -> Metric:
        return dataclasses.replace(self, crit=str(level))

    def as_text(self) -> str:
        """
        >>> Metric("usage_percent", "42", "%", "80", "90").as_text()
        'usage_percent=42%;80;90'
        >>> Metric("mhz", "2000").as_text()
        'mhz=2000;;'
        """
        return "{}={}{};{};{}".format(
            self._quote_name(self.name),
            self.value,
            self.uom,
            "" if self.warn is None else self.warn,
            "" if self.crit is None else self.crit,
        )

    @staticmethod
    def _quote_name(name: str) -> str:
        """Labels containing spaces or equal signs must be single quoted

        >>> Metric._quote_name("datastore 1_used")
        "'datastore 1_used'"
        >>> Metric._quote_name("it's")
        "'it''s'"
        """
        if not any(c in name for c in " ='"):
            return name
        return "'%s'" % name.replace("'", "''")


class PerfData(Sequence[Metric]):
    def __init__(self, metrics: Iterable[Metric] = ()) -> None:
        self._metrics: tuple[Metric, ...] = tuple(metrics)

    @classmethod
    def from_metrics(cls, metrics: Iterable[Metric]) -> Self:
        return cls(metrics)

    def __getitem__(self, index: int) -> Metric:  # type: ignore[override]
        return self._metrics[index]

    def __len__(self) -> int:
        return len(self._metrics)

    def __iter__(self) -> Iterator[Metric]:
        return iter(self._metrics)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PerfData):
            return NotImplemented
        return self._metrics == other._metrics

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._metrics)!r})"

    def as_text(self) -> str:
        return " ".join(m.as_text() for m in self._metrics)


class CheckResult:
    """Outcome of one check execution

    The state is set first, info text and performance data are attached
    afterwards. `render` is the terminal operation and yields what is written
    to stdout together with the exit code.
    """

    def __init__(self, state: State | int = State.OK) -> None:
        self._state = State(state)
        self._info: str | None = None
        self._perf_data: PerfData | None = None

    @property
    def state(self) -> State:
        return self._state

    @property
    def info(self) -> str | None:
        return self._info

    @property
    def perf_data(self) -> PerfData | None:
        return self._perf_data

    def set_state(self, state: State | int) -> Self:
        self._state = State(state)
        return self

    def set_info(self, info: str) -> Self:
        self._info = info
        return self

    def set_perf_data(self, perf_data: PerfData) -> Self:
        self._perf_data = perf_data
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CheckResult):
            return NotImplemented
        return (self._state, self._info, self._perf_data or PerfData()) == (
            other._state,
            other._info,
            other._perf_data or PerfData(),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r}, info={self._info!r}, perf_data={self._perf_data!r})"

    def render(self) -> tuple[str, int]:
        """Return the plug-in output and the exit code

        >>> CheckResult(State.WARNING).set_info("Number of NICs: 1").render()
        ('WARNING - Number of NICs: 1', 1)
        >>> CheckResult().render()
        ('OK', 0)
        """
        text = service_state_name(self._state)
        if self._info is not None:
            text += f" - {self._replace_pipe(self._info)}"
        if self._perf_data:
            text += f"\n| {self._perf_data.as_text()}"
        return text, int(self._state)

    @staticmethod
    def _replace_pipe(txt: str) -> str:
        """The vertical bar indicates end of service output and start of metrics.
        Replace the ones in the output by a Unicode "Light vertical bar"
        """
        return txt.replace("|", "\u2758")


def output_check_result(result: CheckResult) -> int:
    text, exitcode = result.render()
    sys.stdout.write("%s\n" % text)
    return exitcode
