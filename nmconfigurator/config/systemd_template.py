# SPDX-License-Identifier: LGPL-3.0-or-later
# nmconfigurator/config/systemd_template.py
from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.file_ops import atomic_write
from ..core.utils import U
from ..modes.apply_mode import DEFAULT_DESTINATION_DIR, DEFAULT_SOURCE_DIR

# Kept in one place so both CLI help and generator use the same text.
# apply must finish before NetworkManager reads its keyfiles.
SYSTEMD_UNIT_TEMPLATE = """\
[Unit]
Description=Install machine-specific NetworkManager connection profiles
DefaultDependencies=no
Before=NetworkManager.service network-pre.target
Wants=network-pre.target
After=local-fs.target
ConditionPathExists={source_dir}

[Service]
Type=oneshot
RemainAfterExit=yes
ExecStart={exe} apply --source-dir={source_dir_q} --destination-dir={destination_dir_q} {extra_args}
StandardOutput=journal
StandardError=journal

[Install]
WantedBy=multi-user.target
"""


@dataclass(frozen=True)
class SystemdUnitParams:
    exe: str = "/usr/bin/nmc"
    source_dir: str = DEFAULT_SOURCE_DIR
    destination_dir: str = DEFAULT_DESTINATION_DIR
    extra_args: str = ""


def _normalize_extra_args(extra: Any) -> str:
    if extra is None:
        return ""
    if isinstance(extra, (list, tuple)):
        return " ".join(shlex.quote(str(x)) for x in extra)
    return " ".join(str(extra).split())


def params_from_args(args: Any) -> SystemdUnitParams:
    return SystemdUnitParams(
        exe=getattr(args, "exe", None) or SystemdUnitParams.exe,
        source_dir=getattr(args, "source_dir", None) or DEFAULT_SOURCE_DIR,
        destination_dir=getattr(args, "destination_dir", None) or DEFAULT_DESTINATION_DIR,
        extra_args=_normalize_extra_args(getattr(args, "extra_args", None)),
    )


def render_unit(p: SystemdUnitParams) -> str:
    if not p.exe or not p.source_dir or not p.destination_dir:
        raise ValueError("exe/source_dir/destination_dir cannot be empty")
    unit = SYSTEMD_UNIT_TEMPLATE.format_map(
        {
            "exe": shlex.quote(p.exe),
            "source_dir": p.source_dir,
            "source_dir_q": shlex.quote(p.source_dir),
            "destination_dir_q": shlex.quote(p.destination_dir),
            "extra_args": p.extra_args,
        }
    )
    # Drop the trailing space left behind when there are no extra args.
    return "\n".join(ln.rstrip() for ln in unit.splitlines()) + "\n"


def generate_systemd_unit(args: Any, logger=None) -> str:
    """
    Print or write the oneshot unit that runs `apply` at boot.
    Returns the rendered unit.
    """
    unit = render_unit(params_from_args(args))

    out = getattr(args, "output", None)
    if not out:
        print(unit, end="")
        return unit

    out_path = Path(str(out)).expanduser()
    U.ensure_dir(out_path.parent)
    with atomic_write(out_path) as tmp:
        tmp.write_text(unit, encoding="utf-8")

    if logger:
        unit_name = out_path.name if out_path.name.endswith(".service") else f"{out_path.name}.service"
        logger.info("Systemd unit written to %s", out_path)
        logger.info("Next steps:")
        logger.info("  sudo install -m 0644 %s /etc/systemd/system/%s", out_path, unit_name)
        logger.info("  sudo systemctl daemon-reload")
        logger.info("  sudo systemctl enable %s", unit_name)
    return unit
