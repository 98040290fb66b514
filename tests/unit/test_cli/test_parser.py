# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import json
import logging

import pytest

from nmconfigurator.cli.parser import build_parser, parse_args_with_config
from nmconfigurator.core.exceptions import Fatal
from nmconfigurator.modes.apply_mode import DEFAULT_DESTINATION_DIR, DEFAULT_SOURCE_DIR


@pytest.mark.unit
class TestBuildParser:
    def test_generate(self):
        args = build_parser().parse_args(["generate", "--config-dir", "cfg", "--output-dir", "out"])
        assert args.cmd == "generate"
        assert (args.config_dir, args.output_dir, args.nmstatectl) == ("cfg", "out", "nmstatectl")

    def test_apply_defaults(self):
        args = build_parser().parse_args(["apply"])
        assert args.source_dir == DEFAULT_SOURCE_DIR
        assert args.destination_dir == DEFAULT_DESTINATION_DIR
        assert args.dry_run is False

    def test_identify_and_show(self):
        p = build_parser()
        assert p.parse_args(["identify", "--json"]).json is True
        assert p.parse_args(["show", "--source-dir", "/x"]).source_dir == "/x"

    def test_generate_systemd(self):
        args = build_parser().parse_args(["generate-systemd", "--output", "/tmp/u.service", "--extra-args=-vv"])
        assert args.output == "/tmp/u.service"
        assert args.extra_args == "-vv"

    def test_global_flags(self):
        args = build_parser().parse_args(["-vv", "--json-logs", "apply"])
        assert args.verbose == 2
        assert args.json_logs is True


@pytest.mark.unit
class TestParseArgsWithConfig:
    def test_config_file_supplies_defaults(self, tmp_path, logger):
        cfg = tmp_path / "nmc.yaml"
        cfg.write_text("source-dir: /srv/net\ndestination_dir: /tmp/nm\nbogus: 1\n", encoding="utf-8")

        args, conf, _ = parse_args_with_config(["--config", str(cfg), "apply"], logger=logger)

        assert args.source_dir == "/srv/net"
        assert args.destination_dir == "/tmp/nm"
        assert conf["bogus"] == 1

    def test_cli_overrides_config(self, tmp_path, logger):
        cfg = tmp_path / "nmc.yaml"
        cfg.write_text("source_dir: /srv/net\n", encoding="utf-8")

        args, _, _ = parse_args_with_config(
            ["--config", str(cfg), "apply", "--source-dir", "/cli/wins"], logger=logger
        )
        assert args.source_dir == "/cli/wins"

    def test_later_config_wins(self, tmp_path, logger):
        (tmp_path / "10-base.yaml").write_text("config_dir: /a\noutput_dir: /out\n", encoding="utf-8")
        (tmp_path / "20-site.json").write_text(json.dumps({"config_dir": "/b"}), encoding="utf-8")

        args, _, _ = parse_args_with_config(["--config", str(tmp_path), "generate"], logger=logger)

        assert args.config_dir == "/b"
        assert args.output_dir == "/out"

    def test_generate_requires_dirs(self, logger):
        with pytest.raises(Fatal, match="--config-dir is required") as ei:
            parse_args_with_config(["generate", "--output-dir", "out"], logger=logger)
        assert ei.value.code == 2

    def test_no_command(self, logger):
        with pytest.raises(Fatal, match="No command given"):
            parse_args_with_config([], logger=logger)

    def test_missing_config_file(self, tmp_path, logger):
        with pytest.raises(Fatal, match="Config file not found"):
            parse_args_with_config(["--config", str(tmp_path / "nope.yaml"), "apply"], logger=logger)

    def test_dump_config(self, tmp_path, logger, capsys):
        cfg = tmp_path / "nmc.yaml"
        cfg.write_text("source_dir: /srv/net\n", encoding="utf-8")

        with pytest.raises(SystemExit) as ei:
            parse_args_with_config(["--config", str(cfg), "--dump-config", "apply"], logger=logger)

        assert ei.value.code == 0
        assert json.loads(capsys.readouterr().out) == {"source_dir": "/srv/net"}

    def test_sets_up_project_logger(self):
        _, _, logger = parse_args_with_config(["-q", "show"])
        assert logger.name == "nmconfigurator"
        assert logger.level == logging.WARNING
