# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# nmconfigurator/__init__.py
"""
nmconfigurator - machine-specific NetworkManager configuration for fleets of
near-identical hosts.

Build time: turn one nmstate document per host into .nmconnection profiles
plus a hostname -> (interface, MAC) mapping.
Boot time: find which host this machine is by NIC MAC address and install its
profiles, following the live interface names.

Usage as a library:

    from nmconfigurator import ConfigGenerator, ApplyMode

    ConfigGenerator().generate(Path("network-states"), Path("out"))
"""

__version__ = "0.3.0"

from .modes import ApplyMode, GenerateMode
from .network import (
    ConfigGenerator,
    ConnectionMaterializer,
    Host,
    HostMappingStore,
    Interface,
    LiveInterface,
    discover_interfaces,
    identify_host,
)

__all__ = [
    "__version__",
    "ApplyMode",
    "GenerateMode",
    "ConfigGenerator",
    "ConnectionMaterializer",
    "Host",
    "HostMappingStore",
    "Interface",
    "LiveInterface",
    "discover_interfaces",
    "identify_host",
]
