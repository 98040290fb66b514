# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/generator.py
"""
Build-time config generation.

Input: a directory of network-state documents, one per host (node1.yaml,
node2.example.com.yml, ...), or a single `_all.yaml` shared by every node.

Output:
  <output_dir>/<hostname>/*.nmconnection   profiles per host
  <output_dir>/host_config.yaml            hostname -> (logical name, MAC) mapping

The mapping is skipped in all-nodes mode: there is no host identity to record.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.exceptions import (
    EmptyConfigDirError,
    EngineError,
    InputError,
    MissingMacAddressError,
    NmConfiguratorError,
    NoEthernetInterfacesError,
    wrap_fatal,
)
from ..core.logger import Log
from .engine import NM_BACKEND_KEY, NmstateEngine, ProfileSet, TranslationEngine
from .mapping import HostMappingStore
from .model import ALL_NODES_DIR, ALL_NODES_FILE, YAML_EXTENSIONS, Host, Interface, NetworkState


@dataclass
class GenerateResult:
    hosts: List[Host] = field(default_factory=list)
    files_written: List[Path] = field(default_factory=list)
    all_nodes: bool = False


def extract_hostname(filename: str) -> str:
    """
    node1.example.com.yaml -> node1.example.com
    node1.example.com      -> node1.example.com
    """
    stem, dot, ext = filename.rpartition(".")
    if dot and stem and ext in YAML_EXTENSIONS:
        return stem
    return filename


def extract_interfaces(state: NetworkState) -> List[Interface]:
    """Every non-loopback interface of the document, in document order."""
    return [
        Interface(logical_name=i.name, mac_address=i.mac_address, interface_type=i.type)
        for i in state.interfaces
        if not i.is_loopback
    ]


def validate_interfaces(interfaces: List[Interface]) -> None:
    ethernet = [i for i in interfaces if i.is_ethernet]
    if not ethernet:
        raise NoEthernetInterfacesError()

    missing = [i.logical_name for i in ethernet if not i.mac_address]
    if missing:
        raise MissingMacAddressError(
            msg=f"Detected Ethernet interfaces without a MAC address: {', '.join(missing)}"
        )


class ConfigGenerator:
    """
    Usage:
      gen = ConfigGenerator(logger)
      result = gen.generate(Path("config"), Path("out"))
    """

    def __init__(self, logger: Optional[logging.Logger] = None, engine: Optional[TranslationEngine] = None):
        self.logger = logger or logging.getLogger("nmconfigurator.generator")
        self.engine: TranslationEngine = engine or NmstateEngine(self.logger)

    # ---------------------------
    # Pipeline
    # ---------------------------

    def generate(self, config_dir: Path, output_dir: Path) -> GenerateResult:
        config_dir = Path(config_dir)
        output_dir = Path(output_dir)

        if not config_dir.is_dir():
            raise InputError(msg=f"Config directory not found: {config_dir}", context={"path": str(config_dir)})

        entries = sorted(config_dir.iterdir(), key=lambda p: p.name)
        if not entries:
            raise EmptyConfigDirError(context={"path": str(config_dir)})

        if len(entries) == 1 and entries[0].name == ALL_NODES_FILE and entries[0].is_file():
            return self._generate_all_nodes(entries[0], output_dir)

        result = GenerateResult()
        store = HostMappingStore.in_dir(output_dir, self.logger)
        store.reset()

        for path in entries:
            if path.is_dir():
                Log.warn(self.logger, f"Ignoring unexpected dir: {path}")
                continue

            Log.step(self.logger, f"Generating config from {path}...")

            hostname = self._hostname_for(path)
            try:
                interfaces, profiles = self.generate_config(self._read(path))
            except NmConfiguratorError as e:
                raise e.with_context(file=str(path))

            result.files_written.extend(self._store_profiles(output_dir, hostname, profiles))

            host = Host(hostname=hostname, interfaces=interfaces)
            store.append(host)
            result.hosts.append(host)

        Log.ok(
            self.logger,
            f"Generated {len(result.files_written)} profile(s) for {len(result.hosts)} host(s)",
            output_dir=str(output_dir),
        )
        return result

    def _generate_all_nodes(self, path: Path, output_dir: Path) -> GenerateResult:
        Log.step(self.logger, f"Generating config from {path}...")
        _, profiles = self.generate_config(self._read(path))
        written = self._store_profiles(output_dir, ALL_NODES_DIR, profiles)
        Log.ok(self.logger, f"Generated {len(written)} profile(s) for all nodes", output_dir=str(output_dir))
        return GenerateResult(files_written=written, all_nodes=True)

    def generate_config(self, data: str) -> Tuple[List[Interface], ProfileSet]:
        """Parse, validate and translate one document."""
        state = self.engine.parse(data)

        interfaces = extract_interfaces(state)
        validate_interfaces(interfaces)

        config = self.engine.gen_conf(data)
        profiles = config.get(NM_BACKEND_KEY)
        if profiles is None:
            raise EngineError(msg="Invalid NM configuration")

        return interfaces, profiles

    # ---------------------------
    # Helpers
    # ---------------------------

    def _hostname_for(self, path: Path) -> str:
        name = path.name
        # Undecodable bytes survive os.listdir() as lone surrogates.
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InputError(msg=f"Invalid file name encoding: {os.fsencode(path)!r}", cause=e) from e

        hostname = extract_hostname(name)
        if not hostname:
            raise InputError(msg="Invalid file path", context={"path": str(path)})
        return hostname

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(msg=f"Reading network config {path} failed: {e}", cause=e) from e

    def _store_profiles(self, output_dir: Path, hostname: str, profiles: ProfileSet) -> List[Path]:
        host_dir = output_dir / hostname
        written: List[Path] = []
        try:
            host_dir.mkdir(parents=True, exist_ok=True)
            for filename, content in profiles:
                if not filename or Path(filename).name != filename:
                    raise EngineError(msg=f"Refusing generated file name {filename!r}", context={"host": hostname})
                target = host_dir / filename
                target.write_text(content, encoding="utf-8")
                self.logger.debug("Wrote %s", target)
                written.append(target)
        except OSError as e:
            raise wrap_fatal(f"Storing network config failed: {e}", e, host=hostname) from e
        return written
