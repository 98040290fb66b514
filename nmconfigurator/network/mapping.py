# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/mapping.py
"""
Host mapping file (host_config.yaml).

On disk this is a single YAML block sequence, one item per host:

    - hostname: node1
      interfaces:
      - logical_name: eth0
        mac_address: aa:bb:cc:dd:ee:ff
        interface_type: ethernet

The generator appends one item per host. Every append is emitted as a
block-sequence item ("- hostname: ..."), so the concatenation of appends is
still one top-level list. Before appending, the existing content is parsed and
checked to be such a list; a file written in any other shape is rejected
instead of being silently turned into a second YAML document.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional

import yaml

from ..core.exceptions import DuplicateHostError, MappingFormatError, wrap_fatal
from ..core.utils import U
from .model import HOST_MAPPING_FILE, Host, Interface


def _parse_interface(raw: Any, host_idx: int, if_idx: int) -> Interface:
    if not isinstance(raw, dict):
        raise MappingFormatError(msg=f"host #{host_idx}: interface #{if_idx} is not a mapping")
    name = raw.get("logical_name")
    if not isinstance(name, str) or not name:
        raise MappingFormatError(msg=f"host #{host_idx}: interface #{if_idx} has no logical_name")
    mac = raw.get("mac_address")
    if mac is not None and not isinstance(mac, str):
        raise MappingFormatError(msg=f"host #{host_idx}: interface {name!r} has a non-string mac_address")
    itype = raw.get("interface_type")
    return Interface(logical_name=name, mac_address=mac, interface_type=itype if isinstance(itype, str) else None)


def _parse_host(raw: Any, idx: int) -> Host:
    if not isinstance(raw, dict):
        raise MappingFormatError(msg=f"host #{idx} is not a mapping")
    hostname = raw.get("hostname")
    if not isinstance(hostname, str) or not hostname:
        raise MappingFormatError(msg=f"host #{idx} has no hostname")
    interfaces = raw.get("interfaces")
    if interfaces is None:
        interfaces = []
    if not isinstance(interfaces, list):
        raise MappingFormatError(msg=f"host {hostname!r}: interfaces is not a list")
    return Host(
        hostname=hostname,
        interfaces=[_parse_interface(i, idx, n) for n, i in enumerate(interfaces)],
    )


def parse_hosts(text: str) -> List[Host]:
    """
    Deserialize a whole mapping file. MAC addresses come back lowercased
    (Interface normalizes on construction), so matching never has to case-fold.
    """
    try:
        data = U.yaml_load(text)
    except yaml.YAMLError as e:
        raise MappingFormatError(msg=f"Invalid host mapping YAML: {e}", cause=e) from e

    if data is None:
        return []
    if not isinstance(data, list):
        raise MappingFormatError(msg=f"Host mapping must be a YAML sequence, got {type(data).__name__}")
    return [_parse_host(raw, idx) for idx, raw in enumerate(data)]


def dump_host(host: Host) -> str:
    """One host as a standalone block-sequence item."""
    return yaml.safe_dump([host.to_dict()], default_flow_style=False, sort_keys=False)


class HostMappingStore:
    """
    File-backed sequence of Host records.

    Usage:
      store = HostMappingStore(out_dir / HOST_MAPPING_FILE)
      store.reset()
      store.append(host)
      hosts = store.load()
    """

    def __init__(self, path: Path, logger: Optional[logging.Logger] = None):
        self.path = Path(path)
        self.logger = logger or logging.getLogger("nmconfigurator.mapping")

    @classmethod
    def in_dir(cls, directory: Path, logger: Optional[logging.Logger] = None) -> "HostMappingStore":
        return cls(Path(directory) / HOST_MAPPING_FILE, logger)

    def exists(self) -> bool:
        return self.path.is_file()

    def _read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise wrap_fatal(f"Reading host mapping failed: {e}", e, path=str(self.path)) from e

    def load(self) -> List[Host]:
        hosts = parse_hosts(self._read_text())
        self.logger.debug("Loaded %d host(s) from %s", len(hosts), self.path)
        return hosts

    def reset(self) -> None:
        """Drop the existing file so a generator run rebuilds the whole store."""
        if self.path.exists():
            self.logger.debug("Removing previous host mapping %s", self.path)
            self.path.unlink()

    def append(self, host: Host) -> None:
        existing = ""
        if self.path.exists():
            existing = self._read_text()
            current = parse_hosts(existing)
            if any(h.hostname == host.hostname for h in current):
                raise DuplicateHostError(
                    msg=f"Host {host.hostname!r} is already present in {self.path.name}",
                    context={"path": str(self.path)},
                )
            first = next(
                (ln.strip() for ln in existing.splitlines() if ln.strip() and not ln.lstrip().startswith("#")),
                "",
            )
            if first and not first.startswith("-"):
                # A flow-style list ("[...]") cannot be continued by appending items.
                raise MappingFormatError(
                    msg=f"{self.path.name} is not a block-style YAML sequence; cannot append",
                    context={"path": str(self.path)},
                )

        chunk = dump_host(host)
        if existing and not existing.endswith("\n"):
            chunk = "\n" + chunk

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(chunk)
        except OSError as e:
            raise wrap_fatal(f"Writing host mapping failed: {e}", e, path=str(self.path)) from e

        self.logger.debug("Appended host %s (%d interfaces) to %s", host.hostname, len(host.interfaces), self.path)
