#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.


def service_state_names() -> dict[int, str]:
    return {
        0: "OK",
        1: "WARNING",
        2: "CRITICAL",
        3: "UNKNOWN",
    }


def service_state_name(state_num: int, deflt: str = "UNKNOWN") -> str:
    return service_state_names().get(state_num, deflt)


def short_service_state_names() -> dict[int, str]:
    return {
        0: "OK",
        1: "WARN",
        2: "CRIT",
        3: "UNKN",
    }


def short_service_state_name(state_num: int, deflt: str = "") -> str:
    return short_service_state_names().get(state_num, deflt)
