# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import argparse
import json

import pytest
from rich.console import Console

from nmconfigurator.cli import commands
from nmconfigurator.cli.commands import hosts_table, run_command
from nmconfigurator.network.mapping import HostMappingStore
from nmconfigurator.network.model import Host, Interface, LiveInterface


def _write_mapping(source_dir):
    store = HostMappingStore.in_dir(source_dir)
    store.append(Host("node1", [Interface("eth0", "00:11:22:33:44:55", "ethernet"), Interface("bond0")]))
    store.append(Host("node2", [Interface("eth0", "00:11:22:33:44:66", "ethernet")]))


@pytest.fixture
def live_nics(monkeypatch):
    nics = [LiveInterface("ens3", "00:11:22:33:44:55")]
    monkeypatch.setattr("nmconfigurator.modes.apply_mode.discover_interfaces", lambda logger=None: nics)
    return nics


@pytest.mark.unit
def test_hosts_table_rows():
    hosts = [Host("node1", [Interface("eth0", "aa:bb:cc:dd:ee:ff", "ethernet"), Interface("bond0")]), Host("empty")]
    table = hosts_table(hosts, highlight="node1")

    assert [col.header for col in table.columns] == ["Hostname", "Interface", "MAC address", "Type"]
    assert table.row_count == 3

    console = Console(width=120, record=True)
    console.print(table)
    text = console.export_text()
    assert "aa:bb:cc:dd:ee:ff" in text and "bond0" in text and "empty" in text


@pytest.mark.unit
def test_identify_text(tmp_path, logger, live_nics, capsys):
    _write_mapping(tmp_path)
    rc = run_command(argparse.Namespace(cmd="identify", source_dir=str(tmp_path), json=False), logger)

    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert out[0] == "node1"
    assert out[1] == "  eth0 00:11:22:33:44:55 -> ens3"
    assert out[2] == "  bond0 -"


@pytest.mark.unit
def test_identify_json(tmp_path, logger, live_nics, capsys):
    _write_mapping(tmp_path)
    run_command(argparse.Namespace(cmd="identify", source_dir=str(tmp_path), json=True), logger)

    data = json.loads(capsys.readouterr().out)
    assert data["hostname"] == "node1"
    assert data["interfaces"][0]["mac_address"] == "00:11:22:33:44:55"


@pytest.mark.unit
def test_show(tmp_path, logger, capsys):
    _write_mapping(tmp_path)
    assert run_command(argparse.Namespace(cmd="show", source_dir=str(tmp_path)), logger) == 0

    out = capsys.readouterr().out
    assert "node1" in out and "node2" in out


@pytest.mark.unit
def test_dispatch_table_covers_known_commands():
    from nmconfigurator.cli.validators import KNOWN_COMMANDS

    assert set(commands.COMMANDS) == set(KNOWN_COMMANDS)
