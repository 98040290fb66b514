# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import logging

import pytest

from nmconfigurator.core.exceptions import HostNotFoundError
from nmconfigurator.network.identifier import identify_host
from nmconfigurator.network.model import Host, Interface, LiveInterface


def _hosts():
    return [
        Host("node1", [Interface("eth0", "00:11:22:33:44:55", "ethernet")]),
        Host(
            "node2",
            [
                Interface("eth0", "00:11:22:33:44:56", "ethernet"),
                Interface("eth1", "00:11:22:33:44:57", "ethernet"),
                Interface("bond0"),
            ],
        ),
    ]


@pytest.mark.unit
class TestIdentifyHost:
    def test_matches_by_mac_not_name(self, logger):
        nics = [LiveInterface("enp1s0", "00:11:22:33:44:57"), LiveInterface("lo", "00:00:00:00:00:00")]
        assert identify_host(_hosts(), nics, logger).hostname == "node2"

    def test_case_insensitive(self, logger):
        hosts = [Host("node5", [Interface("eth0", "AA:BB:CC:DD:EE:0F", "ethernet")])]
        nics = [LiveInterface("eth0", "aa:bb:cc:dd:ee:0f")]
        assert identify_host(hosts, nics, logger).hostname == "node5"
        nics = [LiveInterface("eth0", "AA:bb:CC:dd:EE:0f")]
        assert identify_host(hosts, nics, logger).hostname == "node5"

    def test_deterministic(self, logger):
        nics = [LiveInterface("eth7", "00:11:22:33:44:56")]
        first = identify_host(_hosts(), nics, logger)
        for _ in range(5):
            assert identify_host(_hosts(), nics, logger) == first

    def test_no_match(self, logger):
        nics = [LiveInterface("eth0", "ff:ff:ff:ff:ff:ff"), LiveInterface("wg0", None)]
        with pytest.raises(HostNotFoundError, match="None of the preconfigured hosts match local NICs") as ei:
            identify_host(_hosts(), nics, logger)
        assert ei.value.code == 4
        assert ei.value.context == {"local_macs": ["ff:ff:ff:ff:ff:ff"]}

    def test_empty_store(self, logger):
        with pytest.raises(HostNotFoundError):
            identify_host([], [LiveInterface("eth0", "00:11:22:33:44:55")], logger)

    def test_mac_less_entries_never_match(self, logger):
        hosts = [Host("node3", [Interface("bond0")])]
        with pytest.raises(HostNotFoundError):
            identify_host(hosts, [LiveInterface("bond0", None)], logger)

    def test_shared_mac_first_host_wins_and_warns(self, logger, caplog):
        hosts = _hosts() + [Host("node9", [Interface("eth0", "00:11:22:33:44:55", "ethernet")])]
        nics = [LiveInterface("eth0", "00:11:22:33:44:55")]

        with caplog.at_level(logging.INFO, logger="tests.nmconfigurator"):
            host = identify_host(hosts, nics, logger)

        assert host.hostname == "node1"
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "node1" in warnings[0] and "node9" in warnings[0]
        assert any(r.getMessage() == "Identified host: node1" for r in caplog.records)
