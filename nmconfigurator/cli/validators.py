# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/cli/validators.py
from __future__ import annotations

import argparse
from typing import Any, Dict

from ..core.exceptions import Fatal

KNOWN_COMMANDS = ("generate", "apply", "identify", "show", "generate-systemd")


def _require(args: argparse.Namespace, dest: str, flag: str) -> None:
    if not getattr(args, dest, None):
        raise Fatal(2, f"{args.cmd}: {flag} is required (CLI or config `{dest}:`)")


def _validate_cmd_generate(args: argparse.Namespace) -> None:
    _require(args, "config_dir", "--config-dir")
    _require(args, "output_dir", "--output-dir")


def _validate_cmd_apply(args: argparse.Namespace) -> None:
    _require(args, "source_dir", "--source-dir")
    _require(args, "destination_dir", "--destination-dir")


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    """Post-parse checks that argparse can't do because values may come from config."""
    cmd = getattr(args, "cmd", None)
    if not cmd:
        raise Fatal(2, f"No command given (one of: {', '.join(KNOWN_COMMANDS)})")
    if cmd not in KNOWN_COMMANDS:
        raise Fatal(2, f"Unknown command: {cmd}")
    if cmd == "generate":
        _validate_cmd_generate(args)
    elif cmd == "apply":
        _validate_cmd_apply(args)
    elif cmd in ("identify", "show"):
        _require(args, "source_dir", "--source-dir")
