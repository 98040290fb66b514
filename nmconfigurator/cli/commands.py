# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/cli/commands.py
"""Subcommand dispatch. Every handler returns a process exit code."""
from __future__ import annotations

import argparse
import json
import logging
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from ..config.systemd_template import generate_systemd_unit
from ..modes.apply_mode import ApplyMode
from ..modes.generate_mode import GenerateMode
from ..network.model import Host


def hosts_table(hosts: List[Host], *, highlight: Optional[str] = None) -> Table:
    table = Table(title="Host mapping", show_lines=False)
    table.add_column("Hostname", style="bold")
    table.add_column("Interface")
    table.add_column("MAC address")
    table.add_column("Type", style="dim")

    for host in hosts:
        style = "green" if host.hostname == highlight else None
        if not host.interfaces:
            table.add_row(host.hostname, "-", "-", "-", style=style)
            continue
        for idx, i in enumerate(host.interfaces):
            table.add_row(
                host.hostname if idx == 0 else "",
                i.logical_name,
                i.mac_address or "-",
                i.interface_type or "-",
                style=style,
            )
    return table


def cmd_generate(args: argparse.Namespace, logger: logging.Logger) -> int:
    GenerateMode(logger, args).run()
    return 0


def cmd_apply(args: argparse.Namespace, logger: logging.Logger) -> int:
    ApplyMode(logger, args).run()
    return 0


def cmd_identify(args: argparse.Namespace, logger: logging.Logger) -> int:
    host, nics = ApplyMode(logger, args).identify()
    if getattr(args, "json", False):
        print(json.dumps(host.to_dict(), indent=2))
        return 0

    live = {n.mac_address: n.name for n in nics if n.mac_address}
    print(host.hostname)
    for i in host.interfaces:
        current = live.get(i.mac_address or "")
        suffix = f" -> {current}" if current and current != i.logical_name else ""
        print(f"  {i.logical_name} {i.mac_address or '-'}{suffix}")
    return 0


def cmd_show(args: argparse.Namespace, logger: logging.Logger) -> int:
    hosts = ApplyMode(logger, args).load_hosts()
    Console().print(hosts_table(hosts))
    return 0


def cmd_generate_systemd(args: argparse.Namespace, logger: logging.Logger) -> int:
    generate_systemd_unit(args, logger)
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, logging.Logger], int]] = {
    "generate": cmd_generate,
    "apply": cmd_apply,
    "identify": cmd_identify,
    "show": cmd_show,
    "generate-systemd": cmd_generate_systemd,
}


def run_command(args: argparse.Namespace, logger: logging.Logger) -> int:
    handler = COMMANDS[args.cmd]
    return handler(args, logger)
