# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/cli/__init__.py
from __future__ import annotations

from .commands import COMMANDS, run_command
from .parser import build_parser, parse_args_with_config
from .validators import validate_args

__all__ = ["COMMANDS", "build_parser", "parse_args_with_config", "run_command", "validate_args"]
