# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/model.py
"""
Data model shared by the build-time generator and the boot-time apply phase.

- Interface / Host: what ends up in the host mapping file
- LiveInterface: one NIC as reported by the running machine
- NetworkState: the bits of a network-state document we need to look at
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

CONNECTION_FILE_EXT = "nmconnection"
HOST_MAPPING_FILE = "host_config.yaml"
ALL_NODES_FILE = "_all.yaml"
ALL_NODES_DIR = "_all"
YAML_EXTENSIONS = ("yaml", "yml")


class InterfaceType(str, Enum):
    """Interface type tags as they appear in network-state documents."""

    ETHERNET = "ethernet"
    LOOPBACK = "loopback"
    LINUX_BRIDGE = "linux-bridge"
    BOND = "bond"
    VLAN = "vlan"
    UNKNOWN = "unknown"


def normalize_mac(mac: Optional[str]) -> Optional[str]:
    """Canonical form: stripped and lowercase. Empty strings become None."""
    if mac is None:
        return None
    mac = str(mac).strip().lower()
    return mac or None


@dataclass
class Interface:
    logical_name: str
    mac_address: Optional[str] = None
    interface_type: Optional[str] = None

    def __post_init__(self) -> None:
        self.mac_address = normalize_mac(self.mac_address)

    @property
    def is_ethernet(self) -> bool:
        return self.interface_type == InterfaceType.ETHERNET.value

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "logical_name": self.logical_name,
            "mac_address": self.mac_address,
        }
        if self.interface_type is not None:
            d["interface_type"] = self.interface_type
        return d


@dataclass
class Host:
    hostname: str
    interfaces: List[Interface] = field(default_factory=list)

    def interface_by_name(self, logical_name: str) -> Optional[Interface]:
        for interface in self.interfaces:
            if interface.logical_name == logical_name:
                return interface
        return None

    def mac_addresses(self) -> List[str]:
        return [i.mac_address for i in self.interfaces if i.mac_address]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hostname": self.hostname,
            "interfaces": [i.to_dict() for i in self.interfaces],
        }


@dataclass(frozen=True)
class LiveInterface:
    """A NIC on the running machine. Not every interface has a MAC (e.g. tun, wireguard)."""

    name: str
    mac_address: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "mac_address", normalize_mac(self.mac_address))


@dataclass
class StateInterface:
    """One entry of the `interfaces:` list of a network-state document."""

    name: str
    type: str = InterfaceType.UNKNOWN.value
    mac_address: Optional[str] = None

    @property
    def is_loopback(self) -> bool:
        return self.type == InterfaceType.LOOPBACK.value


@dataclass
class NetworkState:
    interfaces: List[StateInterface] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)
