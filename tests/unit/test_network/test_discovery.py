# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import socket
from collections import namedtuple

import psutil
import pytest

from nmconfigurator.network.discovery import discover_interfaces
from nmconfigurator.network.model import LiveInterface

snicaddr = namedtuple("snicaddr", "family address netmask broadcast ptp")


@pytest.mark.unit
def test_discover_interfaces(monkeypatch):
    fake = {
        "eth1": [
            snicaddr(socket.AF_INET, "10.0.0.2", "255.255.255.0", None, None),
            snicaddr(psutil.AF_LINK, "AA:BB:CC:DD:EE:01", None, "ff:ff:ff:ff:ff:ff", None),
        ],
        "eth0": [snicaddr(psutil.AF_LINK, "aa:bb:cc:dd:ee:00", None, None, None)],
        "wg0": [snicaddr(socket.AF_INET, "10.9.0.1", "255.255.255.0", None, None)],
    }
    monkeypatch.setattr(psutil, "net_if_addrs", lambda: fake)

    assert discover_interfaces() == [
        LiveInterface("eth0", "aa:bb:cc:dd:ee:00"),
        LiveInterface("eth1", "aa:bb:cc:dd:ee:01"),
        LiveInterface("wg0", None),
    ]
