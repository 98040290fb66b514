# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/modes/apply_mode.py
"""
apply mode (runs on every boot, before NetworkManager starts):

  1. <source>/_all/ without a host mapping  -> install shared profiles as-is
  2. otherwise load host_config.yaml, match local MACs to a host and install
     that host's profiles, renaming interfaces where needed

Nothing is written (the destination directory is not even created) unless a
host was identified.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.exceptions import InputError
from ..core.logger import Log
from ..network.discovery import discover_interfaces
from ..network.identifier import identify_host
from ..network.mapping import HostMappingStore
from ..network.materializer import ConnectionMaterializer, InstalledProfile
from ..network.model import ALL_NODES_DIR, Host, LiveInterface

DEFAULT_SOURCE_DIR = "/config/network"
DEFAULT_DESTINATION_DIR = "/etc/NetworkManager/system-connections"

InterfaceProvider = Callable[[], Sequence[LiveInterface]]


class ApplyMode:
    def __init__(
        self,
        logger: logging.Logger,
        args,
        *,
        interface_provider: Optional[InterfaceProvider] = None,
    ):
        self.logger = logger
        self.args = args
        self.interface_provider = interface_provider or (lambda: discover_interfaces(logger))

    @property
    def source_dir(self) -> Path:
        return Path(getattr(self.args, "source_dir", None) or DEFAULT_SOURCE_DIR).expanduser()

    @property
    def destination_dir(self) -> Path:
        return Path(getattr(self.args, "destination_dir", None) or DEFAULT_DESTINATION_DIR).expanduser()

    def load_hosts(self) -> List[Host]:
        store = HostMappingStore.in_dir(self.source_dir, self.logger)
        if not store.exists():
            raise InputError(msg=f"Host mapping not found: {store.path}", context={"path": str(store.path)})
        hosts = store.load()
        self.logger.info("Loaded hosts config: %s", ", ".join(h.hostname for h in hosts) or "<empty>")
        return hosts

    def identify(self) -> Tuple[Host, List[LiveInterface]]:
        hosts = self.load_hosts()
        nics = list(self.interface_provider())
        return identify_host(hosts, nics, self.logger), nics

    def run(self) -> List[InstalledProfile]:
        dry_run = bool(getattr(self.args, "dry_run", False))
        materializer = ConnectionMaterializer(self.logger, dry_run=dry_run)

        unified_dir = self.source_dir / ALL_NODES_DIR
        if unified_dir.is_dir() and not HostMappingStore.in_dir(self.source_dir).exists():
            Log.step(self.logger, f"Applying unified config from {unified_dir}")
            installed = materializer.copy_unified_files(unified_dir, self.destination_dir)
        else:
            host, nics = self.identify()
            installed = materializer.copy_connection_files(host, nics, self.source_dir, self.destination_dir)

        renamed = sum(1 for p in installed if p.renamed_from)
        Log.ok(
            self.logger,
            f"Installed {len(installed)} connection profile(s) ({renamed} renamed)",
            destination=str(self.destination_dir),
            dry_run=dry_run,
        )
        return installed
