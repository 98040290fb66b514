# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import sys
import traceback
from typing import Optional, Sequence

from .cli.commands import run_command
from .cli.parser import parse_args_with_config
from .core.exceptions import NmConfiguratorError, format_exception_for_cli
from .core.logger import Log


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = None

    # Phase 1: parse (config errors can happen here)
    try:
        args, _conf, logger = parse_args_with_config(argv)
    except NmConfiguratorError as e:
        if logger is None:
            _print_stderr(f"💥 ERROR    {e}")
        raise SystemExit(e.code)
    except KeyboardInterrupt:
        _print_stderr("Interrupted by user (Ctrl+C).")
        raise SystemExit(130)

    verbose = int(getattr(args, "verbose", 0) or 0)

    # Phase 2: run the command
    try:
        rc = run_command(args, logger)
    except NmConfiguratorError as e:
        Log.fail(logger, format_exception_for_cli(e, verbose=verbose))
        rc = e.code
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        # Unexpected exceptions must not fail silently.
        logger.error("💥 UNHANDLED %s: %s", type(e).__name__, e)
        logger.debug(traceback.format_exc())
        rc = 1

    raise SystemExit(rc)


if __name__ == "__main__":
    main()
