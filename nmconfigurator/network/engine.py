# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/network/engine.py
"""
Network-state translation engine adapter.

nmstate owns the translation of a declarative network-state document into
NetworkManager keyfiles. We drive it through `nmstatectl gc`, which prints a
YAML mapping keyed by backend:

    NetworkManager:
    - - eth0.nmconnection
      - |
        [connection]
        id=eth0
        ...

Only the "NetworkManager" key is consumed by the generator. The interface
list (name, type, mac-address) is read straight from the document, since
that part of the schema is plain YAML.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

import yaml

from ..core.exceptions import EngineError, InvalidDocumentError
from ..core.utils import U
from .model import InterfaceType, NetworkState, StateInterface

NM_BACKEND_KEY = "NetworkManager"

# (filename, content) pairs as produced for one backend
ProfileSet = List[Tuple[str, str]]


class TranslationEngine(Protocol):
    def parse(self, text: str) -> NetworkState: ...

    def gen_conf(self, text: str) -> Dict[str, ProfileSet]: ...


def parse_network_state(text: str) -> NetworkState:
    try:
        data = U.yaml_load(text)
    except yaml.YAMLError as e:
        raise InvalidDocumentError(msg=f"Invalid YAML string: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise InvalidDocumentError(msg=f"Invalid YAML string: expected a mapping, got {type(data).__name__}")

    raw_ifaces = data.get("interfaces") or []
    if not isinstance(raw_ifaces, list):
        raise InvalidDocumentError(msg="Invalid network state: 'interfaces' must be a list")

    interfaces: List[StateInterface] = []
    for idx, raw in enumerate(raw_ifaces):
        if not isinstance(raw, dict) or not raw.get("name"):
            raise InvalidDocumentError(msg=f"Invalid network state: interface #{idx} has no name")
        mac = raw.get("mac-address")
        interfaces.append(
            StateInterface(
                name=str(raw["name"]),
                type=str(raw.get("type") or InterfaceType.UNKNOWN.value),
                mac_address=str(mac) if mac else None,
            )
        )

    return NetworkState(interfaces=interfaces, raw=data)


def parse_generated_config(text: str) -> Dict[str, ProfileSet]:
    """Parse the YAML printed by `nmstatectl gc` into {backend: [(filename, content), ...]}."""
    try:
        data = U.yaml_load(text)
    except yaml.YAMLError as e:
        raise EngineError(msg=f"Parsing generated configuration failed: {e}", cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise EngineError(msg="Generated configuration is not a mapping")

    out: Dict[str, ProfileSet] = {}
    for backend, entries in data.items():
        pairs: ProfileSet = []
        for entry in entries or []:
            if (
                not isinstance(entry, (list, tuple))
                or len(entry) != 2
                or not all(isinstance(x, str) for x in entry)
            ):
                raise EngineError(msg=f"invalid {backend} configuration")
            pairs.append((entry[0], entry[1]))
        out[str(backend)] = pairs
    return out


class NmstateEngine:
    """TranslationEngine backed by the nmstatectl binary."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        *,
        binary: str = "nmstatectl",
        timeout: int = 60,
    ):
        self.logger = logger or logging.getLogger("nmconfigurator.engine")
        self.binary = binary
        self.timeout = timeout

    def parse(self, text: str) -> NetworkState:
        return parse_network_state(text)

    def gen_conf(self, text: str) -> Dict[str, ProfileSet]:
        exe = U.which(self.binary)
        if exe is None:
            raise EngineError(msg=f"{self.binary} not found in PATH", context={"binary": self.binary})

        with tempfile.TemporaryDirectory(prefix="nmc-") as td:
            state_file = Path(td) / "state.yaml"
            state_file.write_text(text, encoding="utf-8")
            try:
                cp = U.run_cmd(self.logger, [exe, "gc", str(state_file)], capture=True, timeout=self.timeout)
            except subprocess.CalledProcessError as e:
                raise EngineError(
                    msg=f"{self.binary} gc failed: {U.to_text(e.stderr).strip() or e}",
                    cause=e,
                ) from e
            except (subprocess.TimeoutExpired, OSError) as e:
                raise EngineError(msg=f"{self.binary} gc failed: {e}", cause=e) from e

        return parse_generated_config(cp.stdout)
