# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/core/file_ops.py
"""
File writes with the permissions NetworkManager expects.

Keyfiles may hold Wi-Fi PSKs and 802.1X passwords, and NetworkManager ignores
keyfiles that are readable by group or other, so profiles are always written
owner-only.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

PRIVATE_FILE_MODE = 0o600


def write_private(path: Path, text: str, *, mode: int = PRIVATE_FILE_MODE) -> None:
    """
    Create or truncate `path` with `mode` and write `text`.

    os.open() only applies the mode (minus umask) when it creates the file,
    so an existing file is chmod'ed as well.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    os.chmod(path, mode)


@contextmanager
def atomic_write(target_path: Path, *, suffix: str = ".part") -> Iterator[Path]:
    """
    Yield a temp path next to `target_path`; on success it replaces the
    target, on any exception it is removed.

        with atomic_write(Path("/etc/systemd/system/nm-configurator.service")) as tmp:
            tmp.write_text(unit, encoding="utf-8")
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(suffix=suffix, prefix=f".{target_path.name}.", dir=target_path.parent)
    os.close(fd)
    tmp = Path(name)
    try:
        yield tmp
        os.replace(tmp, target_path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
