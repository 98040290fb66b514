# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/cli/parser.py
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ..config.config_loader import Config
from ..core.logger import Log, c
from ..core.utils import U
from ..modes.apply_mode import DEFAULT_DESTINATION_DIR, DEFAULT_SOURCE_DIR
from .help_texts import FEATURE_SUMMARY, NETWORK_STATE_EXAMPLE, YAML_EXAMPLE
from .validators import validate_args


class HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    """Combines raw description formatting with default value display in help."""


def _build_epilog() -> str:
    return (
        c("YAML config example:\n", "cyan", ["bold"])
        + c(YAML_EXAMPLE, "cyan")
        + "\n"
        + c("Network state example:\n", "cyan", ["bold"])
        + c(NETWORK_STATE_EXAMPLE, "cyan")
        + "\n"
        + c("Feature summary:\n", "cyan", ["bold"])
        + c(FEATURE_SUMMARY, "cyan")
    )


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # Two-phase parse relies on these.
    from .. import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file or directory (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -vv debug, -vvv trace")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less output: -q warnings, -qq errors")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit NDJSON log lines.")


def _add_source_dir(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--source-dir",
        dest="source_dir",
        default=DEFAULT_SOURCE_DIR,
        help="Directory holding host_config.yaml and the per-host profile directories.",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nmc",
        description=c("nmc: machine-specific NetworkManager configuration by MAC address", "green", ["bold"]),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(),
    )
    _add_global_config_logging(p)

    sub = p.add_subparsers(dest="cmd", metavar="<command>")

    pgen = sub.add_parser("generate", help="Generate profiles and host mapping from nmstate documents")
    pgen.add_argument("--config-dir", dest="config_dir", default=None, help="Directory of network-state YAML files.")
    pgen.add_argument("--output-dir", dest="output_dir", default=None, help="Where profiles and host_config.yaml go.")
    pgen.add_argument("--nmstatectl", dest="nmstatectl", default="nmstatectl", help="nmstatectl binary to use.")

    papply = sub.add_parser("apply", help="Identify this machine and install its connection profiles")
    _add_source_dir(papply)
    papply.add_argument(
        "--destination-dir",
        dest="destination_dir",
        default=DEFAULT_DESTINATION_DIR,
        help="NetworkManager keyfile directory.",
    )
    papply.add_argument("--dry-run", dest="dry_run", action="store_true", help="Identify and plan, write nothing.")

    pid = sub.add_parser("identify", help="Print which preconfigured host this machine is")
    _add_source_dir(pid)
    pid.add_argument("--json", action="store_true", help="Output in JSON format")

    pshow = sub.add_parser("show", help="Print the host mapping as a table")
    _add_source_dir(pshow)

    psys = sub.add_parser("generate-systemd", help="Generate the systemd unit running apply at boot")
    psys.add_argument("--output", default=None, help="Write unit here instead of stdout.")
    psys.add_argument("--exe", default="/usr/bin/nmc", help="Path of the nmc executable in the unit.")
    _add_source_dir(psys)
    psys.add_argument("--destination-dir", dest="destination_dir", default=DEFAULT_DESTINATION_DIR)
    psys.add_argument("--extra-args", dest="extra_args", default=None, help="Appended to ExecStart verbatim.")

    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--dump-config", action="store_true")
    pre.add_argument("--dump-args", action="store_true")
    return pre


def _load_merged_config(logger: Any, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    expanded = Config.expand_configs(logger, list(cfgs))
    return Config.load_many(logger, expanded)


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Any = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], Any]:
    """
    Config files are only known after a first look at argv, so:

      1. pre-parse --config and the logging flags, set up logging
      2. merge the config files and install them as parser defaults
      3. parse argv for real (explicit flags beat config values)
      4. run the checks argparse cannot express

    Returns (args, merged_config, logger).
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = build_parser()

    pre = _build_preparser()
    args0, _rest = pre.parse_known_args(argv)

    if logger is None:
        logger = Log.setup(
            args0.verbose,
            args0.log_file,
            quiet=args0.quiet,
            json_logs=args0.json_logs,
        )

    conf = _load_merged_config(logger, args0.config)

    if args0.dump_config:
        print(U.json_dump(conf))
        raise SystemExit(0)

    Config.apply_as_defaults(logger, parser, conf)

    args = parser.parse_args(argv)

    if args0.dump_args:
        print(U.json_dump(vars(args)))
        raise SystemExit(0)

    validate_args(args, conf)
    return args, conf, logger
