# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/materializer.py
"""
Install a host's connection profiles into the live NetworkManager directory.

Profiles are generated against the interface names assumed at build time.
The kernel may enumerate the same NIC under another name at boot, so for
every profile we look up the live NIC carrying the profile's MAC address and,
if its name differs, rewrite the profile (file name and every literal
occurrence of the old name in the content) to the live name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.exceptions import InputError, wrap_fatal
from ..core.file_ops import write_private
from ..core.logger import Log
from .model import CONNECTION_FILE_EXT, Host, Interface, LiveInterface


@dataclass(frozen=True)
class InstalledProfile:
    source: Path
    destination: Path
    renamed_from: Optional[str] = None


def resolve_live_name(interface: Interface, network_interfaces: Sequence[LiveInterface]) -> Optional[str]:
    """
    Name of the first live NIC carrying `interface`'s MAC under a name other
    than the logical one. None means "keep the logical name".
    """
    if not interface.mac_address:
        return None
    for nic in network_interfaces:
        if nic.mac_address == interface.mac_address and nic.name != interface.logical_name:
            return nic.name
    return None


def rename_in_profile(content: str, old: str, new: str) -> str:
    return content.replace(old, new)


class ConnectionMaterializer:
    """
    Usage:
      m = ConnectionMaterializer(logger)
      m.copy_connection_files(host, nics, Path("/config/network"), Path("/etc/NetworkManager/system-connections"))
    """

    def __init__(self, logger: Optional[logging.Logger] = None, *, dry_run: bool = False):
        self.logger = logger or logging.getLogger("nmconfigurator.materializer")
        self.dry_run = dry_run

    def _profile_entries(self, directory: Path) -> List[Path]:
        if not directory.is_dir():
            raise InputError(msg=f"Profile directory not found: {directory}", context={"path": str(directory)})

        out: List[Path] = []
        for path in sorted(directory.iterdir(), key=lambda p: p.name):
            if path.is_dir():
                Log.warn(self.logger, f"Ignoring unexpected directory: {path}")
                continue
            if path.suffix != f".{CONNECTION_FILE_EXT}":
                Log.warn(self.logger, f"Ignoring unexpected file: {path}")
                continue
            out.append(path)
        return out

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(msg=f"Reading {path} failed: {e}", cause=e) from e

    def _write(self, source: Path, destination: Path, content: str, renamed_from: Optional[str] = None) -> None:
        if self.dry_run:
            self.logger.info(
                "dry-run: %s -> %s (renamed: %s)",
                source,
                destination,
                f"from '{renamed_from}'" if renamed_from else "no",
            )
            return
        try:
            write_private(destination, content)
        except OSError as e:
            raise wrap_fatal(f"Writing file {destination} failed: {e}", e, path=str(destination)) from e
        self.logger.debug("Stored %s", destination)

    def _ensure_destination(self, destination_dir: Path) -> None:
        if self.dry_run:
            return
        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise wrap_fatal(f"Creating destination dir failed: {e}", e, path=str(destination_dir)) from e

    def copy_connection_files(
        self,
        host: Host,
        network_interfaces: Sequence[LiveInterface],
        source_dir: Path,
        destination_dir: Path,
    ) -> List[InstalledProfile]:
        """
        Copy all *.nmconnection files from <source_dir>/<hostname>/ into
        destination_dir, renaming interfaces where the live name differs.
        """
        host_dir = Path(source_dir) / host.hostname
        destination_dir = Path(destination_dir)
        log = Log.bind(self.logger, host=host.hostname)

        entries = self._profile_entries(host_dir)
        self._ensure_destination(destination_dir)

        installed: List[InstalledProfile] = []
        for path in entries:
            log.info("Copying file... %s", path)
            content = self._read(path)
            stem = path.stem

            name = stem
            renamed_from: Optional[str] = None

            interface = host.interface_by_name(stem)
            if interface is not None:
                live_name = resolve_live_name(interface, network_interfaces)
                if live_name is not None:
                    if any(
                        nic.name == interface.logical_name and nic.mac_address == interface.mac_address
                        for nic in network_interfaces
                    ):
                        log.warning(
                            "Live interface '%s' already carries MAC address '%s'; renaming to '%s' anyway",
                            interface.logical_name,
                            interface.mac_address,
                            live_name,
                        )
                    log.info(
                        "Using name '%s' for interface with MAC address '%s' instead of the preconfigured '%s'",
                        live_name,
                        interface.mac_address,
                        interface.logical_name,
                    )
                    content = rename_in_profile(content, interface.logical_name, live_name)
                    name = live_name
                    renamed_from = interface.logical_name

            destination = destination_dir / f"{name}.{CONNECTION_FILE_EXT}"
            self._write(path, destination, content, renamed_from)
            installed.append(InstalledProfile(source=path, destination=destination, renamed_from=renamed_from))

        return installed

    def copy_unified_files(self, unified_dir: Path, destination_dir: Path) -> List[InstalledProfile]:
        """Install the shared all-nodes profiles verbatim."""
        destination_dir = Path(destination_dir)
        entries = self._profile_entries(Path(unified_dir))
        self._ensure_destination(destination_dir)

        installed: List[InstalledProfile] = []
        for path in entries:
            self.logger.info("Copying file... %s", path)
            destination = destination_dir / path.name
            self._write(path, destination, self._read(path))
            installed.append(InstalledProfile(source=path, destination=destination))
        return installed
