# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/modes/generate_mode.py
from __future__ import annotations

import logging
from pathlib import Path

from ..core.exceptions import Fatal
from ..network.engine import NmstateEngine
from ..network.generator import ConfigGenerator, GenerateResult


class GenerateMode:
    """
    generate mode:
      - read every network-state document under --config-dir
      - write profiles + host_config.yaml under --output-dir
    """

    def __init__(self, logger: logging.Logger, args, *, engine=None):
        self.logger = logger
        self.args = args
        self.engine = engine

    def run(self) -> GenerateResult:
        config_dir = getattr(self.args, "config_dir", None)
        output_dir = getattr(self.args, "output_dir", None)
        if not config_dir or not output_dir:
            raise Fatal(2, "generate: --config-dir and --output-dir are required")

        engine = self.engine or NmstateEngine(
            self.logger,
            binary=getattr(self.args, "nmstatectl", None) or "nmstatectl",
        )
        gen = ConfigGenerator(self.logger, engine)
        return gen.generate(Path(config_dir).expanduser(), Path(output_dir).expanduser())
