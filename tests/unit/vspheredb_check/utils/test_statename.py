#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from vspheredb_check.utils.statename import service_state_name, short_service_state_name


@pytest.mark.parametrize(
    "state, name, short_name",
    [
        (0, "OK", "OK"),
        (1, "WARNING", "WARN"),
        (2, "CRITICAL", "CRIT"),
        (3, "UNKNOWN", "UNKN"),
    ],
)
def test_state_names(state: int, name: str, short_name: str) -> None:
    assert service_state_name(state) == name
    assert short_service_state_name(state) == short_name


def test_state_name_default() -> None:
    assert service_state_name(17) == "UNKNOWN"
    assert short_service_state_name(17, "?") == "?"
