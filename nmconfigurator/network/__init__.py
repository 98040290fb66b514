# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/__init__.py
"""
Host identification and connection-profile materialization.

Re-exports the public pieces so callers can do:

    from nmconfigurator.network import ConfigGenerator, HostMappingStore, identify_host
"""
from __future__ import annotations

from .discovery import discover_interfaces
from .engine import NmstateEngine, TranslationEngine
from .generator import ConfigGenerator, GenerateResult
from .identifier import identify_host
from .mapping import HostMappingStore
from .materializer import ConnectionMaterializer, InstalledProfile
from .model import Host, Interface, LiveInterface, NetworkState

__all__ = [
    "ConfigGenerator",
    "ConnectionMaterializer",
    "GenerateResult",
    "Host",
    "HostMappingStore",
    "InstalledProfile",
    "Interface",
    "LiveInterface",
    "NetworkState",
    "NmstateEngine",
    "TranslationEngine",
    "discover_interfaces",
    "identify_host",
]
