# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/config/config_loader.py
"""
YAML/JSON config files as CLI defaults.

    # /etc/nm-configurator/apply.yaml
    source_dir: /config/network
    destination_dir: /etc/NetworkManager/system-connections
    verbose: 1

Files are merged in the order given (later wins, nested mappings merged key
by key) and then pushed into argparse as defaults, so flags on the command
line still override them.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Set

import yaml

from ..core.exceptions import Fatal

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _normalize_key(k: Any) -> str:
    # Accept both `source-dir` and `source_dir` spellings.
    return str(k).replace("-", "_")


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, cfgs: Sequence[str]) -> List[Path]:
        """
        Each entry may be a file, a directory (all *.yaml/*.yml/*.json inside,
        sorted) or a glob pattern.
        """
        out: List[Path] = []
        for raw in cfgs:
            p = Path(raw).expanduser()
            if p.is_dir():
                found = sorted(x for x in p.iterdir() if x.suffix in CONFIG_SUFFIXES and x.is_file())
                logger.debug("Config dir %s: %d file(s)", p, len(found))
                out.extend(found)
            elif any(ch in raw for ch in "*?["):
                found = sorted(Path(x) for x in glob.glob(str(p)))
                if not found:
                    raise Fatal(2, f"Config pattern matched nothing: {raw}")
                out.extend(found)
            elif p.is_file():
                out.append(p)
            else:
                raise Fatal(2, f"Config file not found: {p}")
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise Fatal(2, f"Cannot read config {path}: {e}") from e

        try:
            data = json.loads(text) if Path(path).suffix == ".json" else yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise Fatal(2, f"Invalid config {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise Fatal(2, f"Config {path} must be a mapping, got {type(data).__name__}")

        logger.debug("Loaded config %s (%d keys)", path, len(data))
        return {_normalize_key(k): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[Path]) -> Dict[str, Any]:
        conf: Dict[str, Any] = {}
        for p in paths:
            conf = _deep_merge(conf, Config.load_one(logger, p))
        return conf

    @staticmethod
    def _dests(parser: argparse.ArgumentParser) -> Set[str]:
        return {a.dest for a in parser._actions if a.dest and a.dest != argparse.SUPPRESS}

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """
        Push config values into the parser (and every subparser) as defaults.
        Only keys that match an argument dest are applied; the rest are
        logged at debug level and ignored.
        """
        used: Set[str] = set()

        def _apply(p: argparse.ArgumentParser) -> None:
            known = {k: v for k, v in conf.items() if k in Config._dests(p)}
            if known:
                p.set_defaults(**known)
                used.update(known)
            for action in p._actions:
                if isinstance(action, argparse._SubParsersAction):
                    for sub in action.choices.values():
                        _apply(sub)

        _apply(parser)

        for k in sorted(set(conf) - used):
            logger.debug("Ignoring unknown config key: %s", k)
