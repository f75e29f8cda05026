#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""This package contains the check result model and its output protocol.

The typical sequence of events is

.. uml::

    actor Core
    participant CheckSpec
    participant QuerySource
    participant Interpreter

    Core -> CheckSpec : build_query()
    CheckSpec -> QuerySource : execute(Query)
    QuerySource --> QuerySource : I/O
    QuerySource -> Interpreter : interpret(Rows)
    Interpreter --> Core : CheckResult.render()

See Also:
    vspheredb_check.vspheredb for the check specific parts.

"""
