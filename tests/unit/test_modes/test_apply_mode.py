# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import argparse

import pytest

from fakes.fake_engine import render_keyfile
from nmconfigurator.core.exceptions import HostNotFoundError, InputError
from nmconfigurator.modes.apply_mode import ApplyMode
from nmconfigurator.network.mapping import HostMappingStore
from nmconfigurator.network.model import Host, Interface, LiveInterface


def _args(source, dest, **kw):
    return argparse.Namespace(source_dir=str(source), destination_dir=str(dest), **kw)


def _host_profiles(source, host):
    host_dir = source / host.hostname
    host_dir.mkdir(parents=True)
    for i in host.interfaces:
        (host_dir / f"{i.logical_name}.nmconnection").write_text(
            render_keyfile(i.logical_name, i.interface_type or "ethernet"), encoding="utf-8"
        )


@pytest.fixture
def source(tmp_path):
    src = tmp_path / "config" / "network"
    src.mkdir(parents=True)
    node1 = Host("node1", [Interface("eth0", "AA:BB:CC:DD:EE:01", "ethernet")])
    node2 = Host(
        "node2",
        [Interface("eth0", "aa:bb:cc:dd:ee:02", "ethernet"), Interface("eth1", "aa:bb:cc:dd:ee:03", "ethernet")],
    )
    store = HostMappingStore.in_dir(src)
    for h in (node1, node2):
        store.append(h)
        _host_profiles(src, h)
    return src


@pytest.mark.unit
class TestApplyMode:
    def test_scenario_matching_host_with_rename(self, logger, source, tmp_path):
        dest = tmp_path / "nm"
        nics = [LiveInterface("ens3", "aa:bb:cc:dd:ee:02"), LiveInterface("eth1", "aa:bb:cc:dd:ee:03")]

        installed = ApplyMode(logger, _args(source, dest), interface_provider=lambda: nics).run()

        assert sorted(p.name for p in dest.iterdir()) == ["ens3.nmconnection", "eth1.nmconnection"]
        assert "interface-name=ens3" in (dest / "ens3.nmconnection").read_text(encoding="utf-8")
        assert [p.renamed_from for p in installed] == ["eth0", None]

    def test_scenario_no_match_creates_nothing(self, logger, source, tmp_path):
        dest = tmp_path / "nm"
        nics = [LiveInterface("eth0", "de:ad:be:ef:00:00")]

        with pytest.raises(HostNotFoundError):
            ApplyMode(logger, _args(source, dest), interface_provider=lambda: nics).run()
        assert not dest.exists()

    def test_missing_mapping(self, logger, tmp_path):
        with pytest.raises(InputError, match="Host mapping not found"):
            ApplyMode(logger, _args(tmp_path, tmp_path / "nm"), interface_provider=list).run()

    def test_unified_mode(self, logger, tmp_path):
        src = tmp_path / "src"
        (src / "_all").mkdir(parents=True)
        (src / "_all" / "eth0.nmconnection").write_text(render_keyfile("eth0", "ethernet"), encoding="utf-8")
        dest = tmp_path / "nm"

        def no_discovery():
            raise AssertionError("unified mode must not look at local NICs")

        installed = ApplyMode(logger, _args(src, dest), interface_provider=no_discovery).run()

        assert [p.destination for p in installed] == [dest / "eth0.nmconnection"]

    def test_mapping_wins_over_unified_dir(self, logger, source, tmp_path):
        (source / "_all").mkdir()
        dest = tmp_path / "nm"
        nics = [LiveInterface("eth0", "aa:bb:cc:dd:ee:01")]

        ApplyMode(logger, _args(source, dest), interface_provider=lambda: nics).run()

        assert [p.name for p in dest.iterdir()] == ["eth0.nmconnection"]

    def test_dry_run(self, logger, source, tmp_path):
        dest = tmp_path / "nm"
        nics = [LiveInterface("eth9", "aa:bb:cc:dd:ee:01")]

        installed = ApplyMode(logger, _args(source, dest, dry_run=True), interface_provider=lambda: nics).run()

        assert [p.destination.name for p in installed] == ["eth9.nmconnection"]
        assert not dest.exists()

    def test_identify(self, logger, source):
        nics = [LiveInterface("x", "AA:BB:CC:DD:EE:01")]
        host, seen = ApplyMode(logger, _args(source, "/unused"), interface_provider=lambda: nics).identify()

        assert host.hostname == "node1"
        assert seen == nics
