#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Lookup of database passwords in a password store file

Passing passwords on the command line makes them visible in the process
table. Instead, the check can be given a reference of the form ``ID:FILE``.
The file consists of lines ``ID:PASSWORD``, the password may itself contain
colons.
"""

import logging
from pathlib import Path

from vspheredb_check.exceptions import PasswordStoreError

LOGGER = logging.getLogger(__name__)


def parse_reference(reference: str) -> tuple[str, Path]:
    """
    >>> parse_reference("vspheredb:/etc/icinga2/passwords")
    ('vspheredb', PosixPath('/etc/icinga2/passwords'))
    """
    try:
        password_id, file = reference.split(":", 1)
    except ValueError:
        raise PasswordStoreError(f"Invalid password reference: {reference!r}")
    if not password_id or not file:
        raise PasswordStoreError(f"Invalid password reference: {reference!r}")
    return password_id, Path(file)


def load(file_path: Path) -> dict[str, str]:
    passwords = {}
    try:
        with file_path.open(encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                ident, password = line.rstrip("\r\n").split(":", 1)
                passwords[ident] = password
    except OSError as e:
        raise PasswordStoreError(f"Cannot read password store {file_path}: {e.strerror}")
    except ValueError:
        raise PasswordStoreError(f"Invalid line in password store {file_path}")
    return passwords


def lookup(file_path: Path, password_id: str) -> str:
    LOGGER.debug("Looking up password %r in %s", password_id, file_path)
    try:
        return load(file_path)[password_id]
    except KeyError:
        raise PasswordStoreError(f"Password '{password_id}' does not exist in {file_path}")
