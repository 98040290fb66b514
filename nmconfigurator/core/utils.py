# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/core/utils.py
from __future__ import annotations

import json
import logging
import re
import shlex
import subprocess
from pathlib import Path
from shutil import which as _which
from typing import Any, List, Optional

import yaml

from .logger import Log

_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"


class MacSafeLoader(yaml.SafeLoader):
    """
    SafeLoader without the YAML 1.1 base-60 scalars.

    Under 1.1 an unquoted MAC whose groups are all <= 59 (52:54:00:12:34:56)
    resolves to an int. nmstate reads YAML 1.2, where it stays a string.
    """


MacSafeLoader.yaml_implicit_resolvers = {
    first: [(tag, rx) for tag, rx in resolvers if tag not in (_INT_TAG, _FLOAT_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
MacSafeLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(
        r"""^(?:[-+]?0b[0-1_]+
        |[-+]?0[0-7_]+
        |[-+]?(?:0|[1-9][0-9_]*)
        |[-+]?0x[0-9a-fA-F_]+)$""",
        re.X,
    ),
    list("-+0123456789"),
)
MacSafeLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"""^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+][0-9]+)?
        |\.[0-9][0-9_]*(?:[eE][-+][0-9]+)?
        |[-+]?\.(?:inf|Inf|INF)
        |\.(?:nan|NaN|NAN))$""",
        re.X,
    ),
    list("-+0123456789."),
)


class U:
    @staticmethod
    def ensure_dir(p: Path) -> None:
        p.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def which(prog: str) -> Optional[str]:
        return _which(prog)

    @staticmethod
    def yaml_load(text: str) -> Any:
        return yaml.load(text, Loader=MacSafeLoader)

    @staticmethod
    def json_dump(obj: Any) -> str:
        return json.dumps(obj, indent=2, sort_keys=True, default=str)

    @staticmethod
    def to_text(x: Any) -> str:
        if x is None:
            return ""
        if isinstance(x, bytes):
            return x.decode("utf-8", "replace")
        return str(x)

    @staticmethod
    def run_cmd(
        logger: logging.Logger,
        cmd: List[str],
        *,
        capture: bool = False,
        timeout: Optional[int] = None,
    ) -> subprocess.CompletedProcess:
        """
        Run `cmd` with check=True and text I/O.

        Failures are logged here (with whatever the tool printed) and the
        subprocess exception is re-raised for the caller to translate into
        a project error.
        """
        shown = " ".join(shlex.quote(x) for x in cmd)
        logger.debug("Running: %s", shown)

        try:
            cp = subprocess.run(cmd, check=True, capture_output=capture, text=True, timeout=timeout)
        except subprocess.CalledProcessError as e:
            detail = U.to_text(e.stderr).strip() or U.to_text(e.stdout).strip() or "no output"
            logger.error("Command failed (rc=%s): %s\n%s", e.returncode, shown, detail)
            raise
        except subprocess.TimeoutExpired:
            logger.error("Command timed out after %ss: %s", timeout, shown)
            raise
        except OSError as e:
            logger.error("Cannot execute %s: %s", shown, e)
            raise

        if capture:
            Log.trace(logger, "%s printed %d bytes", cmd[0], len(cp.stdout or ""))
        return cp
