# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/identifier.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..core.exceptions import HostNotFoundError
from ..core.logger import Log
from .model import Host, LiveInterface


def _matching_macs(host: Host, live_macs: set) -> List[str]:
    return [mac for mac in host.mac_addresses() if mac in live_macs]


def identify_host(
    hosts: Sequence[Host],
    network_interfaces: Sequence[LiveInterface],
    logger: Optional[logging.Logger] = None,
) -> Host:
    """
    Identify the preconfigured host by matching the MAC address of at least
    one of the local network interfaces. Logical names play no part here.

    Two hosts sharing a MAC is a broken mapping; the first one in file order
    wins and the collision is logged.
    """
    logger = logger or logging.getLogger("nmconfigurator.identifier")

    live_macs = {nic.mac_address for nic in network_interfaces if nic.mac_address}

    matches = [(h, _matching_macs(h, live_macs)) for h in hosts]
    matches = [(h, macs) for h, macs in matches if macs]
    for h, macs in matches:
        Log.trace(logger, "Host %s matches on %s", h.hostname, ", ".join(macs))

    if not matches:
        raise HostNotFoundError(context={"local_macs": sorted(live_macs)})

    if len(matches) > 1:
        logger.warning(
            "Multiple preconfigured hosts match local NICs: %s; using %r",
            ", ".join(f"{h.hostname} ({', '.join(macs)})" for h, macs in matches),
            matches[0][0].hostname,
        )

    host = matches[0][0]
    logger.info("Identified host: %s", host.hostname)
    return host
