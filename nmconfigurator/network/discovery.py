# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/discovery.py
"""Live NIC discovery on the running machine."""

from __future__ import annotations

import logging
from typing import List, Optional

import psutil

from .model import LiveInterface


def discover_interfaces(logger: Optional[logging.Logger] = None) -> List[LiveInterface]:
    """
    Return every local interface with its link-layer address, if it has one.

    psutil reports the MAC as an AF_LINK address; interfaces without one
    (tun, wireguard, ...) come back with mac_address=None.
    """
    logger = logger or logging.getLogger("nmconfigurator.discovery")

    out: List[LiveInterface] = []
    for name, addrs in sorted(psutil.net_if_addrs().items()):
        mac = next((a.address for a in addrs if a.family == psutil.AF_LINK and a.address), None)
        out.append(LiveInterface(name=name, mac_address=mac))

    logger.debug("Retrieved network interfaces: %s", out)
    return out
